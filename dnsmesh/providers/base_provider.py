"""
Base record source interface.

This module defines the abstract base class that every record source must
implement. A record source returns the A and CNAME records held by one
provider.
"""

from abc import ABC, abstractmethod
from typing import List

from ..core.models import SyncedRecord


class RecordSource(ABC):
    """Abstract base class for record sources."""

    @abstractmethod
    def sync_records(self) -> List[SyncedRecord]:
        """Fetch all records from the provider."""
        pass

    @abstractmethod
    def test_connection(self) -> bool:
        """Check that the provider can be reached."""
        pass
