"""
Data models for dnsmesh.

This module defines the provider-agnostic record types consumed by the
classifier and topology builder, and the result types they produce.
"""

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Dict, List


class RecordType(str, Enum):
    """Record kinds handled by dnsmesh."""

    A = "A"
    CNAME = "CNAME"


class Confidence(str, Enum):
    """Confidence tier of a server suggestion."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class ProviderType(str, Enum):
    """Known provider types."""

    CLOUDFLARE = "cloudflare"
    TENCENTCLOUD = "tencentcloud"
    BIND = "bind"


def _plain(value):
    """Unwrap enum members so payloads hold only builtin types."""
    return value.value if isinstance(value, Enum) else value


def _from_mapping(cls, data: Dict):
    """Build a dataclass from a mapping, ignoring unknown keys."""
    known = {f.name for f in fields(cls)}
    return cls(**{key: value for key, value in data.items() if key in known})


@dataclass(frozen=True)
class SyncedRecord:
    """A DNS record as fetched from a provider."""

    zone_id: str
    zone_name: str
    full_domain: str
    record_type: str
    target_value: str
    ttl: int = 600
    provider_record_id: str = ""

    @classmethod
    def from_dict(cls, data: Dict) -> "SyncedRecord":
        return _from_mapping(cls, data)

    def to_dict(self) -> Dict:
        return {
            "zone_id": self.zone_id,
            "zone_name": self.zone_name,
            "full_domain": self.full_domain,
            "record_type": _plain(self.record_type),
            "target_value": self.target_value,
            "ttl": self.ttl,
            "provider_record_id": self.provider_record_id,
        }


@dataclass
class ManagedRecord:
    """A persisted DNS record under dnsmesh management."""

    id: int
    provider_id: int
    zone_id: str
    zone_name: str
    full_domain: str
    record_type: str
    target_value: str
    ttl: int = 600
    provider_record_id: str = ""
    is_server: bool = False
    server_name: str = ""
    server_region: str = ""
    notes: str = ""
    managed: bool = True
    active: bool = True

    @classmethod
    def from_dict(cls, data: Dict) -> "ManagedRecord":
        return _from_mapping(cls, data)

    def to_dict(self) -> Dict:
        return {f.name: _plain(getattr(self, f.name)) for f in fields(self)}


@dataclass(frozen=True)
class ProviderInfo:
    """A registered DNS provider."""

    id: int
    name: str
    provider_type: ProviderType

    @classmethod
    def from_dict(cls, data: Dict) -> "ProviderInfo":
        provider_type = data.get("provider_type", data.get("type"))
        return cls(
            id=int(data["id"]),
            name=str(data.get("name", "")),
            provider_type=ProviderType(provider_type),
        )

    def to_dict(self) -> Dict:
        return {
            "id": self.id,
            "name": self.name,
            "provider_type": self.provider_type.value,
        }


@dataclass
class ServerSuggestion:
    """A record inferred to be a server, with the evidence behind it."""

    domain: str
    ip: str
    match_reason: str
    confidence: Confidence
    referenced_by: List[str] = field(default_factory=list)
    same_ip_domains: List[str] = field(default_factory=list)
    suggested_name: str = ""
    suggested_region: str = ""

    def to_dict(self) -> Dict:
        return {
            "domain": self.domain,
            "ip": self.ip,
            "match_reason": self.match_reason,
            "confidence": self.confidence.value,
            "referenced_by": list(self.referenced_by),
            "same_ip_domains": list(self.same_ip_domains),
            "suggested_name": self.suggested_name,
            "suggested_region": self.suggested_region,
        }


@dataclass(frozen=True)
class ProviderCapabilities:
    """Feature flags that depend on the provider type."""

    supports_record_status_toggle: bool = False

    def to_dict(self) -> Dict:
        return {"supports_record_status_toggle": self.supports_record_status_toggle}


@dataclass
class ServerGroup:
    """A server record with every record that depends on it."""

    server: ManagedRecord
    related_records: List[ManagedRecord] = field(default_factory=list)

    def to_dict(self) -> Dict:
        return {
            "server": self.server.to_dict(),
            "related_records": [r.to_dict() for r in self.related_records],
        }


@dataclass
class UnassignedGroup:
    """Records of one provider that belong to no server."""

    provider_id: int
    provider_name: str
    records: List[ManagedRecord] = field(default_factory=list)

    def to_dict(self) -> Dict:
        return {
            "provider_id": self.provider_id,
            "provider_name": self.provider_name,
            "records": [r.to_dict() for r in self.records],
        }


@dataclass
class GroupedTopology:
    """Server-first view over all managed records."""

    servers: List[ServerGroup] = field(default_factory=list)
    unassigned_records: List[UnassignedGroup] = field(default_factory=list)
    provider_capabilities: Dict[int, ProviderCapabilities] = field(
        default_factory=dict
    )

    def to_dict(self) -> Dict:
        return {
            "servers": [g.to_dict() for g in self.servers],
            "unassigned_records": [g.to_dict() for g in self.unassigned_records],
            "provider_capabilities": {
                provider_id: caps.to_dict()
                for provider_id, caps in self.provider_capabilities.items()
            },
        }
