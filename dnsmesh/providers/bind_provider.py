"""
BIND record source implementation.

This module pulls records from a BIND (or any AXFR-capable) name server by
zone transfer, using the dnspython library.
"""

import logging
import re
from typing import Dict, List, Optional

import dns.query
import dns.rdatatype
import dns.tsigkeyring
import dns.zone

from .base_provider import RecordSource
from ..core.models import RecordType, SyncedRecord

logger = logging.getLogger(__name__)


class AXFRRecordSource(RecordSource):
    """Record source that reads zones by zone transfer."""

    def __init__(self, config: Dict):
        """Initialize the source from its configuration block."""
        self.config = config
        self.nameserver = config.get("nameserver", "127.0.0.1")
        self.port = config.get("port", 53)
        self.timeout = config.get("timeout", 30)
        self.zones = list(config.get("zones", []))
        self.key_file = config.get("key_file", "")
        self.key_name = config.get("key_name", "")

        self.keyring = None
        if self.key_file and self.key_name:
            try:
                with open(self.key_file, "r") as f:
                    key_content = f.read().strip()

                secret = self._parse_bind_key_file(key_content, self.key_name)

                if secret:
                    self.keyring = dns.tsigkeyring.from_text({self.key_name: secret})
                    logger.info(f"TSIG key loaded from {self.key_file}")
                else:
                    logger.warning(
                        f"Could not extract secret for key '{self.key_name}' from {self.key_file}"
                    )
            except OSError as e:
                logger.warning(f"Failed to load TSIG key: {e}")
                logger.debug("Zone transfers will not be signed")

        logger.info(
            f"AXFR source initialized for {self.nameserver}:{self.port} "
            f"({len(self.zones)} zones)"
        )

    def _parse_bind_key_file(self, key_content: str, key_name: str) -> Optional[str]:
        """Parse BIND key file format to extract the secret for a specific key."""
        key_pattern = rf'key\s+"{re.escape(key_name)}"\s*{{(.*?)}}'
        match = re.search(key_pattern, key_content, re.DOTALL)
        if match:
            secret_match = re.search(r'secret\s+"([^"]+)"', match.group(1))
            if secret_match:
                return secret_match.group(1)
        return None

    def sync_records(self) -> List[SyncedRecord]:
        """Transfer every configured zone and collect its A and CNAME records."""
        records = []
        for zone in self.zones:
            zone_obj = self._zone_transfer(zone)
            records.extend(self._zone_records(zone_obj))

        logger.info(f"Retrieved {len(records)} records by zone transfer")
        return records

    def test_connection(self) -> bool:
        """Try a transfer of the first zone."""
        if not self.zones:
            return False
        try:
            self._zone_transfer(self.zones[0])
            return True
        except Exception as e:
            logger.warning(f"Zone transfer from {self.nameserver} failed: {e}")
            return False

    def _zone_transfer(self, zone: str) -> dns.zone.Zone:
        """Transfer a zone; failures propagate to the caller."""
        return dns.zone.from_xfr(
            dns.query.xfr(
                self.nameserver,
                zone,
                port=self.port,
                keyring=self.keyring,
                timeout=self.timeout,
            )
        )

    def _zone_records(self, zone_obj: dns.zone.Zone) -> List[SyncedRecord]:
        """Convert a zone's A and CNAME rdatasets into synced records."""
        records = []
        origin = zone_obj.origin
        zone_name = origin.to_text(omit_final_dot=True)

        for name, node in zone_obj.nodes.items():
            fqdn = name.derelativize(origin).to_text(omit_final_dot=True).lower()
            for rdataset in node.rdatasets:
                if rdataset.rdtype == dns.rdatatype.A:
                    record_type = RecordType.A.value
                    targets = [rdata.address for rdata in rdataset]
                elif rdataset.rdtype == dns.rdatatype.CNAME:
                    record_type = RecordType.CNAME.value
                    targets = [
                        rdata.target.derelativize(origin).to_text().lower()
                        for rdata in rdataset
                    ]
                else:
                    continue

                for target in targets:
                    records.append(
                        SyncedRecord(
                            zone_id=zone_name,
                            zone_name=zone_name,
                            full_domain=fqdn,
                            record_type=record_type,
                            target_value=target,
                            ttl=rdataset.ttl,
                            provider_record_id=f"{fqdn}/{record_type}/{target}",
                        )
                    )
        return records
