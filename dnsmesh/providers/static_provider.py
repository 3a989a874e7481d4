"""
Static record source.

This module provides a record source backed by records listed inline in the
configuration, for testing and demonstration purposes.
"""

import logging
from typing import Dict, List

from .base_provider import RecordSource
from ..core.models import SyncedRecord

logger = logging.getLogger(__name__)


class StaticRecordSource(RecordSource):
    """Record source that serves a fixed list of records."""

    def __init__(self, records: List = None):
        """Initialize from SyncedRecord objects or their dict form."""
        self.records = [
            r if isinstance(r, SyncedRecord) else SyncedRecord.from_dict(r)
            for r in records or []
        ]
        logger.info(f"Static source initialized with {len(self.records)} records")

    @classmethod
    def from_config(cls, config: Dict) -> "StaticRecordSource":
        return cls(config.get("records", []))

    def sync_records(self) -> List[SyncedRecord]:
        """Return a copy of the configured records."""
        logger.info(f"Static: Retrieved {len(self.records)} records")
        return list(self.records)

    def test_connection(self) -> bool:
        return True
