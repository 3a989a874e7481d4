"""
CSV record source.

This module reads a record export (for example a provider's dashboard export)
from a CSV file.
"""

import logging
from pathlib import Path
from typing import Dict, List

from .base_provider import RecordSource
from ..core.models import SyncedRecord
from ..parsers.csv import CSVParser

logger = logging.getLogger(__name__)


class CSVRecordSource(RecordSource):
    """Record source backed by a CSV export."""

    def __init__(self, csv_path: str):
        self.csv_path = csv_path

    @classmethod
    def from_config(cls, config: Dict) -> "CSVRecordSource":
        if not config.get("path"):
            raise ValueError("CSV source requires a 'path'")
        return cls(config["path"])

    def sync_records(self) -> List[SyncedRecord]:
        """Parse the export on every sync so edits are picked up."""
        records = CSVParser(self.csv_path).parse()
        logger.info(f"CSV: Retrieved {len(records)} records from {self.csv_path}")
        return records

    def test_connection(self) -> bool:
        return Path(self.csv_path).is_file()
