"""
Record sources.

This package contains the record sources that feed synced records into
dnsmesh: inline records, CSV exports and BIND zone transfers.
"""

from .base_provider import RecordSource
from .bind_provider import AXFRRecordSource
from .csv_provider import CSVRecordSource
from .dns_client import DNSClient
from .static_provider import StaticRecordSource

__all__ = [
    "RecordSource",
    "AXFRRecordSource",
    "CSVRecordSource",
    "DNSClient",
    "StaticRecordSource",
]
