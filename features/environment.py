"""
Behave environment configuration for dnsmesh acceptance tests.
"""

import logging
import shutil
import tempfile
from pathlib import Path

from dnsmesh.core.models import ProviderInfo, ProviderType

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def before_all(context):
    """Set up test environment before all tests."""
    context.base_dir = Path(__file__).parent.parent
    context.providers = [
        ProviderInfo(1, "Cloudflare", ProviderType.CLOUDFLARE),
        ProviderInfo(2, "TencentCloud", ProviderType.TENCENTCLOUD),
    ]
    logger.info("Test environment setup complete")


def before_scenario(context, scenario):
    """Set up each test scenario."""
    context.test_data_dir = Path(tempfile.mkdtemp(prefix="dnsmesh-"))
    context.synced_records = []
    context.managed_records = []
    context.suggestions = []
    context.grouped = None

    logger.info(f"Starting scenario: {scenario.name}")


def after_scenario(context, scenario):
    """Clean up after each test scenario."""
    if context.test_data_dir.exists():
        shutil.rmtree(context.test_data_dir)

    logger.info(f"Completed scenario: {scenario.name}")
