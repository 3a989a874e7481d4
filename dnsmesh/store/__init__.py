"""
Persistence for managed records and the provider registry.
"""

from .record_store import InMemoryRecordStore, RecordStore, YAMLRecordStore

__all__ = ["RecordStore", "InMemoryRecordStore", "YAMLRecordStore"]
