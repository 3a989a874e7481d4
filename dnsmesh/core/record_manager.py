"""
Record Manager - Persisted record bookkeeping

This module merges freshly synced records into the managed record set,
applies accepted server suggestions, and handles hide and status changes.
Callers load and save the record list; the manager only edits it.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from .models import (
    ManagedRecord,
    ProviderInfo,
    RecordType,
    ServerSuggestion,
    SyncedRecord,
    _plain,
)
from .topology import get_provider_capabilities

logger = logging.getLogger(__name__)

MAX_SUMMARY_RECORDS = 100


class UnsupportedCapabilityError(RuntimeError):
    """Raised when a provider does not support the requested operation."""


@dataclass
class ProviderSyncSummary:
    """Per-provider outcome of a sync."""

    provider_id: int
    provider_name: str
    synced: int = 0
    created: int = 0
    updated: int = 0
    reimported: int = 0
    kept_hidden: int = 0
    records: List[Dict[str, str]] = field(default_factory=list)
    records_truncated: bool = False
    errors: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict:
        return {
            "provider_id": self.provider_id,
            "provider_name": self.provider_name,
            "synced": self.synced,
            "created": self.created,
            "updated": self.updated,
            "reimported": self.reimported,
            "kept_hidden": self.kept_hidden,
            "records": list(self.records),
            "records_truncated": self.records_truncated,
            "errors": list(self.errors),
        }


def _record_key(provider_id: int, record) -> Tuple:
    return (provider_id, record.zone_id, record.full_domain, record.record_type)


class RecordManager:
    """Manages the persisted record set."""

    def sync_records(
        self,
        records: List[ManagedRecord],
        provider: ProviderInfo,
        synced: Sequence[SyncedRecord],
    ) -> ProviderSyncSummary:
        """
        Upsert synced records from one provider into the managed set.

        Args:
            records: The managed record list; updated in place
            provider: Provider the synced records came from
            synced: Records returned by the provider's record source

        Returns:
            ProviderSyncSummary with created/updated/reimported/kept_hidden counts
        """
        summary = ProviderSyncSummary(provider_id=provider.id, provider_name=provider.name)
        existing = {_record_key(r.provider_id, r): r for r in records}
        next_id = max((r.id for r in records), default=0) + 1

        # Round-robin records share a key; the last value synced for a key wins
        latest: Dict[Tuple, SyncedRecord] = {}
        for item in synced:
            summary.synced += 1
            if len(summary.records) < MAX_SUMMARY_RECORDS:
                summary.records.append(
                    {
                        "zone": item.zone_name,
                        "domain": item.full_domain,
                        "type": _plain(item.record_type),
                        "target": item.target_value,
                    }
                )
            else:
                summary.records_truncated = True

            key = _record_key(provider.id, item)
            if key in latest:
                logger.debug(
                    f"Collapsing duplicate {_plain(item.record_type)} record {item.full_domain} "
                    f"({latest[key].target_value} -> {item.target_value})"
                )
            latest[key] = item

        for key, item in latest.items():
            record = existing.get(key)
            if record is None:
                record = ManagedRecord(
                    id=next_id,
                    provider_id=provider.id,
                    zone_id=item.zone_id,
                    zone_name=item.zone_name,
                    full_domain=item.full_domain,
                    record_type=item.record_type,
                    target_value=item.target_value,
                    ttl=item.ttl,
                    provider_record_id=item.provider_record_id,
                )
                next_id += 1
                records.append(record)
                existing[key] = record
                summary.created += 1
                logger.debug(f"Created record {item.full_domain} ({item.record_type})")
                continue

            was_hidden = not record.managed
            content_changed = (
                record.target_value != item.target_value
                or record.ttl != item.ttl
                or record.zone_name != item.zone_name
            )

            record.target_value = item.target_value
            record.ttl = item.ttl
            record.zone_name = item.zone_name
            record.provider_record_id = item.provider_record_id

            # Hidden records return only when their content changes upstream
            if was_hidden and not content_changed:
                summary.kept_hidden += 1
                logger.info(f"Keeping hidden record {item.full_domain} (no content change)")
                continue

            record.managed = True
            if content_changed:
                summary.updated += 1
            if was_hidden and content_changed:
                summary.reimported += 1
                logger.info(
                    f"Re-importing previously hidden record {item.full_domain} (content changed)"
                )

        logger.info(
            f"Sync of provider {provider.id} complete: {summary.created} created, "
            f"{summary.updated} updated, {summary.reimported} reimported, "
            f"{summary.kept_hidden} kept hidden"
        )
        return summary

    def apply_suggestions(
        self, records: List[ManagedRecord], suggestions: Sequence[ServerSuggestion]
    ) -> int:
        """
        Flag the records behind accepted suggestions as servers.

        Returns:
            Number of records updated
        """
        updated = 0
        for suggestion in suggestions:
            record = self._find_suggested_record(records, suggestion)
            if record is None:
                logger.warning(
                    f"Record not found for suggestion {suggestion.domain!r} (IP: {suggestion.ip})"
                )
                continue

            record.is_server = True
            record.server_name = suggestion.suggested_name
            record.server_region = suggestion.suggested_region
            updated += 1
            logger.info(
                f"Marked {record.full_domain} as server ({suggestion.confidence.value})"
            )

        return updated

    def _find_suggested_record(
        self, records: Sequence[ManagedRecord], suggestion: ServerSuggestion
    ) -> Optional[ManagedRecord]:
        """Find a suggestion's record by domain, falling back to its IP."""
        if suggestion.domain:
            by_domain = [r for r in records if r.full_domain == suggestion.domain]
            for record in by_domain:
                if record.record_type == RecordType.A:
                    return record
            if by_domain:
                return by_domain[0]

        if suggestion.ip:
            for record in records:
                if record.record_type == RecordType.A and record.target_value == suggestion.ip:
                    return record

        return None

    def find_record(self, records: Sequence[ManagedRecord], record_id: int) -> ManagedRecord:
        for record in records:
            if record.id == record_id:
                return record
        raise ValueError(f"Record {record_id} not found")

    def hide_record(self, records: Sequence[ManagedRecord], record_id: int) -> ManagedRecord:
        """Remove a record from management without touching the provider."""
        record = self.find_record(records, record_id)
        record.managed = False
        logger.info(f"Hid record {record.full_domain} from management")
        return record

    def set_record_status(
        self,
        records: Sequence[ManagedRecord],
        record_id: int,
        enabled: bool,
        providers: Sequence[ProviderInfo],
    ) -> ManagedRecord:
        """
        Enable or disable a record without deleting it.

        Raises:
            UnsupportedCapabilityError: If the record's provider cannot toggle status
            ValueError: If the record or its provider is unknown
        """
        record = self.find_record(records, record_id)
        provider = next((p for p in providers if p.id == record.provider_id), None)
        if provider is None:
            raise ValueError(f"Provider {record.provider_id} not found")

        capabilities = get_provider_capabilities(provider.provider_type)
        if not capabilities.supports_record_status_toggle:
            raise UnsupportedCapabilityError(
                f"Provider '{provider.name}' ({provider.provider_type.value}) "
                f"does not support enabling or disabling records"
            )

        record.active = enabled
        logger.info(
            f"{'Enabled' if enabled else 'Disabled'} record {record.full_domain}"
        )
        return record
