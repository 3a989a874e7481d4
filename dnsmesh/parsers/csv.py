import csv
import logging
from typing import List

from ..core.models import SyncedRecord
from ..utils.validators import sanitize_fqdn, validate_record

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ("domain", "type", "target")
DEFAULT_TTL = 600
EXTRA_FIELDS = "_extra"


class CSVParser:
    """Parses a provider record export into synced records."""

    def __init__(self, csv_path: str):
        self.csv_path = csv_path

    def parse(self) -> List[SyncedRecord]:
        """Parse the CSV file and validate records."""
        records = []

        try:
            with open(self.csv_path, "r", newline="", encoding="utf-8-sig") as f:
                reader = csv.DictReader(f, restkey=EXTRA_FIELDS)

                fieldnames = [name.strip().lower() for name in reader.fieldnames or []]
                missing = [c for c in REQUIRED_COLUMNS if c not in fieldnames]
                if missing:
                    raise ValueError(
                        f"CSV must contain {', '.join(REQUIRED_COLUMNS)} columns "
                        f"(missing: {', '.join(missing)})"
                    )

                for row_num, row in enumerate(reader, start=2):
                    extra = [v for v in row.pop(EXTRA_FIELDS, []) if v.strip()]
                    if extra:
                        logger.warning(
                            f"Ignoring {len(extra)} extra fields at row {row_num}"
                        )
                    row = {
                        (key or "").strip().lower(): (value or "").strip()
                        for key, value in row.items()
                    }
                    record = self._parse_row(row, row_num)
                    if record is not None:
                        records.append(record)

            logger.info(f"Successfully parsed {len(records)} records from CSV")

        except FileNotFoundError:
            raise FileNotFoundError(f"CSV file not found: {self.csv_path}")
        except ValueError as e:
            raise ValueError(f"Error parsing CSV {self.csv_path}: {e}")

        return records

    def _parse_row(self, row, row_num: int):
        domain = sanitize_fqdn(row["domain"])
        record_type = row["type"].upper()
        target = row["target"]

        if not validate_record(record_type, domain, target):
            logger.warning(f"Invalid record '{domain}' at row {row_num}, skipping")
            return None

        if record_type == "CNAME":
            target = target.lower()

        ttl = row.get("ttl") or DEFAULT_TTL
        try:
            ttl = int(ttl)
        except ValueError:
            logger.warning(f"Invalid TTL '{ttl}' at row {row_num}, using {DEFAULT_TTL}")
            ttl = DEFAULT_TTL

        zone_name = row.get("zone_name") or _guess_zone(domain)
        return SyncedRecord(
            zone_id=row.get("zone_id") or zone_name,
            zone_name=zone_name,
            full_domain=domain,
            record_type=record_type,
            target_value=target,
            ttl=ttl,
            provider_record_id=row.get("record_id", ""),
        )


def _guess_zone(domain: str) -> str:
    """Use the last two labels as the zone when the export has none."""
    return ".".join(domain.split(".")[-2:])
