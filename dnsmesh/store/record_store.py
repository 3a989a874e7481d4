"""
Record stores.

This module defines the persistence contract for managed records and the
provider registry, with an in-memory store and a YAML file store.
"""

import copy
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List

import yaml

from ..core.models import ManagedRecord, ProviderInfo

logger = logging.getLogger(__name__)


class RecordStore(ABC):
    """Abstract base class for record stores."""

    @abstractmethod
    def load_records(self) -> List[ManagedRecord]:
        """Load every persisted record, managed or hidden."""
        pass

    @abstractmethod
    def save_records(self, records: List[ManagedRecord]) -> None:
        """Replace the persisted records."""
        pass

    @abstractmethod
    def load_providers(self) -> List[ProviderInfo]:
        """Load the provider registry."""
        pass

    @abstractmethod
    def save_providers(self, providers: List[ProviderInfo]) -> None:
        """Replace the provider registry."""
        pass


class InMemoryRecordStore(RecordStore):
    """Store that keeps copies of records in memory."""

    def __init__(self, records: List[ManagedRecord] = None, providers: List[ProviderInfo] = None):
        self.records = copy.deepcopy(records or [])
        self.providers = list(providers or [])

    def load_records(self) -> List[ManagedRecord]:
        return copy.deepcopy(self.records)

    def save_records(self, records: List[ManagedRecord]) -> None:
        self.records = copy.deepcopy(records)

    def load_providers(self) -> List[ProviderInfo]:
        return list(self.providers)

    def save_providers(self, providers: List[ProviderInfo]) -> None:
        self.providers = list(providers)


class YAMLRecordStore(RecordStore):
    """Store backed by a single YAML document."""

    def __init__(self, path: str):
        self.path = Path(path)

    def _read(self) -> dict:
        if not self.path.exists():
            logger.warning(f"Record store {self.path} not found, starting empty")
            return {}
        try:
            with open(self.path, "r") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Error parsing record store {self.path}: {e}")
        if not isinstance(data, dict):
            raise ValueError(f"Record store {self.path} must contain a mapping")
        return data

    def _write(self, key: str, items: List[dict]):
        data = self._read()
        data[key] = items
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w") as f:
            yaml.safe_dump(data, f, sort_keys=False, allow_unicode=True)
        logger.info(f"Saved {len(items)} {key} to {self.path}")

    def load_records(self) -> List[ManagedRecord]:
        return [ManagedRecord.from_dict(r) for r in self._read().get("records", []) or []]

    def save_records(self, records: List[ManagedRecord]) -> None:
        self._write("records", [r.to_dict() for r in records])

    def load_providers(self) -> List[ProviderInfo]:
        return [ProviderInfo.from_dict(p) for p in self._read().get("providers", []) or []]

    def save_providers(self, providers: List[ProviderInfo]) -> None:
        self._write("providers", [p.to_dict() for p in providers])
