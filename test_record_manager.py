#!/usr/bin/env python3
"""
Tests for the record manager.
"""

import unittest

from dnsmesh.core.models import (
    Confidence,
    ManagedRecord,
    ProviderInfo,
    ProviderType,
    RecordType,
    ServerSuggestion,
    SyncedRecord,
)
from dnsmesh.core.record_manager import (
    MAX_SUMMARY_RECORDS,
    RecordManager,
    UnsupportedCapabilityError,
)

CLOUDFLARE = ProviderInfo(1, "Cloudflare", ProviderType.CLOUDFLARE)
TENCENT = ProviderInfo(2, "TencentCloud", ProviderType.TENCENTCLOUD)


def synced(domain, record_type="A", target="1.2.3.4", ttl=300, zone_name="example.com"):
    return SyncedRecord("z1", zone_name, domain, record_type, target, ttl, f"rid-{domain}")


def managed(record_id, domain, record_type="A", target="1.2.3.4", provider_id=1, **kwargs):
    return ManagedRecord(
        id=record_id,
        provider_id=provider_id,
        zone_id="z1",
        zone_name="example.com",
        full_domain=domain,
        record_type=record_type,
        target_value=target,
        ttl=300,
        **kwargs,
    )


class TestSyncRecords(unittest.TestCase):
    """Test upserting synced records."""

    def setUp(self):
        """Set up test fixtures."""
        self.record_manager = RecordManager()

    def test_sync_creates_new_records(self):
        """Test unseen records are created as managed non-servers."""
        records = []

        summary = self.record_manager.sync_records(
            records,
            CLOUDFLARE,
            [synced("hk1.example.com"), synced("api.example.com", "CNAME", "hk1.example.com.")],
        )

        self.assertEqual(summary.synced, 2)
        self.assertEqual(summary.created, 2)
        self.assertEqual(summary.updated, 0)
        self.assertEqual([r.id for r in records], [1, 2])
        self.assertTrue(all(r.managed and not r.is_server for r in records))
        self.assertEqual(records[1].target_value, "hk1.example.com.")
        self.assertEqual(records[0].provider_id, 1)

    def test_sync_continues_id_sequence(self):
        """Test new ids follow the highest existing id."""
        records = [managed(7, "old.example.com")]

        self.record_manager.sync_records(records, CLOUDFLARE, [synced("new.example.com")])

        self.assertEqual(records[-1].id, 8)

    def test_sync_updates_changed_content(self):
        """Test a changed target is refreshed and counted as updated."""
        records = [managed(1, "web.example.com", target="1.1.1.1", is_server=True)]

        summary = self.record_manager.sync_records(
            records, CLOUDFLARE, [synced("web.example.com", target="2.2.2.2")]
        )

        self.assertEqual(summary.updated, 1)
        self.assertEqual(summary.created, 0)
        self.assertEqual(records[0].target_value, "2.2.2.2")
        self.assertTrue(records[0].is_server)

    def test_sync_unchanged_record(self):
        """Test an identical record changes nothing."""
        records = [managed(1, "web.example.com")]

        summary = self.record_manager.sync_records(records, CLOUDFLARE, [synced("web.example.com")])

        self.assertEqual(summary.synced, 1)
        self.assertEqual(
            (summary.created, summary.updated, summary.reimported, summary.kept_hidden),
            (0, 0, 0, 0),
        )
        self.assertEqual(len(records), 1)

    def test_sync_keeps_hidden_record_hidden(self):
        """Test a hidden record stays hidden when its content is unchanged."""
        records = [managed(1, "web.example.com", managed=False)]

        summary = self.record_manager.sync_records(records, CLOUDFLARE, [synced("web.example.com")])

        self.assertEqual(summary.kept_hidden, 1)
        self.assertFalse(records[0].managed)

    def test_sync_reimports_changed_hidden_record(self):
        """Test a hidden record returns when its content changes upstream."""
        records = [managed(1, "web.example.com", managed=False)]

        summary = self.record_manager.sync_records(
            records, CLOUDFLARE, [synced("web.example.com", ttl=60)]
        )

        self.assertEqual(summary.reimported, 1)
        self.assertEqual(summary.updated, 1)
        self.assertEqual(summary.kept_hidden, 0)
        self.assertTrue(records[0].managed)
        self.assertEqual(records[0].ttl, 60)

    def test_sync_key_includes_provider(self):
        """Test the same domain at another provider is a separate record."""
        records = [managed(1, "web.example.com", provider_id=2)]

        summary = self.record_manager.sync_records(records, CLOUDFLARE, [synced("web.example.com")])

        self.assertEqual(summary.created, 1)
        self.assertEqual(len(records), 2)

    def test_sync_round_robin_records(self):
        """Test several targets under one key count as one stable record."""
        records = []
        batch = [
            synced("www.example.com", target="1.1.1.1"),
            synced("www.example.com", target="2.2.2.2"),
        ]

        summary = self.record_manager.sync_records(records, CLOUDFLARE, batch)

        self.assertEqual((summary.synced, summary.created, summary.updated), (2, 1, 0))
        self.assertEqual(len(records), 1)
        self.assertEqual(records[0].target_value, "2.2.2.2")

        summary = self.record_manager.sync_records(records, CLOUDFLARE, batch)

        self.assertEqual((summary.created, summary.updated, summary.reimported), (0, 0, 0))

    def test_sync_round_robin_record_stays_hidden(self):
        """Test an unchanged hidden round-robin record is not re-imported."""
        records = []
        batch = [
            synced("www.example.com", target="1.1.1.1"),
            synced("www.example.com", target="2.2.2.2"),
        ]
        self.record_manager.sync_records(records, CLOUDFLARE, batch)
        self.record_manager.hide_record(records, records[0].id)

        summary = self.record_manager.sync_records(records, CLOUDFLARE, batch)

        self.assertEqual(
            (summary.updated, summary.reimported, summary.kept_hidden), (0, 0, 1)
        )
        self.assertFalse(records[0].managed)

    def test_sync_summary_lists_plain_types(self):
        """Test the summary listing holds plain strings for enum record types."""
        item = SyncedRecord("z1", "example.com", "hk1.example.com", RecordType.A, "1.2.3.4")

        summary = self.record_manager.sync_records([], CLOUDFLARE, [item])

        self.assertIs(type(summary.records[0]["type"]), str)
        self.assertEqual(summary.records[0]["type"], "A")

    def test_sync_summary_truncates_record_list(self):
        """Test the per-provider record listing is capped."""
        batch = [synced(f"host{i}.example.com", target=f"10.0.{i // 256}.{i % 256}") for i in range(150)]

        summary = self.record_manager.sync_records([], CLOUDFLARE, batch)

        self.assertEqual(summary.synced, 150)
        self.assertEqual(len(summary.records), MAX_SUMMARY_RECORDS)
        self.assertTrue(summary.records_truncated)
        self.assertEqual(summary.to_dict()["provider_name"], "Cloudflare")


class TestApplySuggestions(unittest.TestCase):
    """Test flagging suggested servers."""

    def setUp(self):
        """Set up test fixtures."""
        self.record_manager = RecordManager()

    def test_apply_by_domain(self):
        """Test a suggestion with a domain updates that record."""
        records = [
            managed(1, "api.example.com", "CNAME", "hk1.example.com"),
            managed(2, "hk1.example.com"),
        ]
        suggestion = ServerSuggestion(
            domain="hk1.example.com",
            ip="1.2.3.4",
            match_reason="domain matches region-number pattern",
            confidence=Confidence.HIGH,
            suggested_name="hk-1",
            suggested_region="Hong Kong",
        )

        updated = self.record_manager.apply_suggestions(records, [suggestion])

        self.assertEqual(updated, 1)
        self.assertTrue(records[1].is_server)
        self.assertEqual(records[1].server_name, "hk-1")
        self.assertEqual(records[1].server_region, "Hong Kong")
        self.assertFalse(records[0].is_server)

    def test_apply_by_ip(self):
        """Test an IP-only suggestion flags the first A record on that IP."""
        records = [
            managed(1, "alpha.example.com", target="9.9.9.9"),
            managed(2, "bravo.example.com", target="9.9.9.9"),
        ]
        suggestion = ServerSuggestion(
            domain="",
            ip="9.9.9.9",
            match_reason="2 domains share the same IP",
            confidence=Confidence.LOW,
        )

        updated = self.record_manager.apply_suggestions(records, [suggestion])

        self.assertEqual(updated, 1)
        self.assertTrue(records[0].is_server)
        self.assertFalse(records[1].is_server)

    def test_apply_skips_unknown(self):
        """Test suggestions without a matching record are skipped."""
        suggestion = ServerSuggestion(
            domain="missing.example.com",
            ip="5.5.5.5",
            match_reason="",
            confidence=Confidence.MEDIUM,
        )

        updated = self.record_manager.apply_suggestions([managed(1, "web.example.com")], [suggestion])

        self.assertEqual(updated, 0)


class TestRecordActions(unittest.TestCase):
    """Test hide and status toggling."""

    def setUp(self):
        """Set up test fixtures."""
        self.record_manager = RecordManager()
        self.records = [
            managed(1, "web.example.com", provider_id=1),
            managed(2, "web.example.net", provider_id=2),
        ]

    def test_hide_record(self):
        """Test hiding clears the managed flag only."""
        record = self.record_manager.hide_record(self.records, 1)

        self.assertFalse(record.managed)
        self.assertEqual(record.target_value, "1.2.3.4")

    def test_unknown_record(self):
        """Test unknown ids are rejected."""
        with self.assertRaises(ValueError):
            self.record_manager.hide_record(self.records, 99)

    def test_status_toggle_supported(self):
        """Test a TencentCloud record can be disabled and enabled."""
        record = self.record_manager.set_record_status(
            self.records, 2, False, [CLOUDFLARE, TENCENT]
        )
        self.assertFalse(record.active)

        record = self.record_manager.set_record_status(
            self.records, 2, True, [CLOUDFLARE, TENCENT]
        )
        self.assertTrue(record.active)

    def test_status_toggle_rejected(self):
        """Test providers without the capability refuse status changes."""
        with self.assertRaises(UnsupportedCapabilityError):
            self.record_manager.set_record_status(self.records, 1, False, [CLOUDFLARE, TENCENT])
        self.assertTrue(self.records[0].active)

    def test_status_toggle_unknown_provider(self):
        """Test a record whose provider is not registered is rejected."""
        with self.assertRaises(ValueError):
            self.record_manager.set_record_status(self.records, 2, False, [CLOUDFLARE])


if __name__ == "__main__":
    unittest.main(verbosity=2)
