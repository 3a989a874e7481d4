"""
DNS Client - Unified access to every configured provider

This module builds the provider registry from configuration and keeps one
record source per provider.
"""

import logging
from typing import Dict, List

from .base_provider import RecordSource
from .bind_provider import AXFRRecordSource
from .csv_provider import CSVRecordSource
from .static_provider import StaticRecordSource
from ..core.models import ProviderInfo, SyncedRecord

logger = logging.getLogger(__name__)

SOURCE_KINDS = {
    "static": StaticRecordSource.from_config,
    "csv": CSVRecordSource.from_config,
    "axfr": AXFRRecordSource,
}


class DNSClient:
    """Unified DNS client that supports multiple providers."""

    def __init__(self, config: Dict):
        """Initialize DNS client with configuration."""
        self.config = config
        self.providers: List[ProviderInfo] = []
        self.sources: Dict[int, RecordSource] = {}

        for provider_config in config.get("providers", []) or []:
            self._register(provider_config)

    def _register(self, provider_config: Dict):
        """Register one provider and build its record source."""
        provider = ProviderInfo.from_dict(provider_config)
        if provider.id in self.sources:
            raise ValueError(f"Duplicate provider id {provider.id}")

        self.providers.append(provider)
        self.sources[provider.id] = self._get_source(provider_config.get("source", {}))
        logger.info(
            f"Registered provider {provider.id} ({provider.name}, {provider.provider_type.value})"
        )

    def _get_source(self, source_config: Dict) -> RecordSource:
        """Get a record source based on its configuration."""
        kind = source_config.get("kind", "static")
        factory = SOURCE_KINDS.get(kind)
        if factory is None:
            raise ValueError(
                f"Unknown source kind '{kind}', expected one of {', '.join(SOURCE_KINDS)}"
            )
        return factory(source_config)

    def get_provider(self, provider_id: int) -> ProviderInfo:
        for provider in self.providers:
            if provider.id == provider_id:
                return provider
        raise ValueError(f"Provider {provider_id} not found")

    def sync_records(self, provider_id: int) -> List[SyncedRecord]:
        """Fetch all records held by one provider."""
        if provider_id not in self.sources:
            raise ValueError(f"Provider {provider_id} not found")
        return self.sources[provider_id].sync_records()

    def test_connection(self, provider_id: int) -> bool:
        """Check that a provider's source is reachable."""
        if provider_id not in self.sources:
            raise ValueError(f"Provider {provider_id} not found")
        return self.sources[provider_id].test_connection()
