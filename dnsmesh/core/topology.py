"""
Topology Builder - Server-first grouping of managed DNS records

Server records are merged by IP under a single primary, every other record is
attached to the first server it points at, and whatever is left is bucketed
per provider. Grouping works across providers, so a CNAME hosted at one
provider can land under a server hosted at another.
"""

import logging
from typing import Dict, List, Sequence

from .models import (
    GroupedTopology,
    ManagedRecord,
    ProviderCapabilities,
    ProviderInfo,
    ProviderType,
    RecordType,
    ServerGroup,
    UnassignedGroup,
)
from .patterns import REGION_MAP, match_server_pattern, normalize_target

logger = logging.getLogger(__name__)

STATUS_TOGGLE_PROVIDERS = frozenset({ProviderType.TENCENTCLOUD})


def get_provider_capabilities(provider_type: ProviderType) -> ProviderCapabilities:
    """Return the capability flags for a provider type."""
    return ProviderCapabilities(
        supports_record_status_toggle=provider_type in STATUS_TOGGLE_PROVIDERS
    )


def score_server(record: ManagedRecord) -> int:
    """Score a server record as a primary candidate."""
    score = 0
    matched = match_server_pattern(record.full_domain)
    if matched and matched[0] in REGION_MAP:
        score += 10
    if record.server_name:
        score += 2
    if record.server_region:
        score += 1
    return score


def _select_primary(servers: List[ManagedRecord]) -> ServerGroup:
    primary = servers[0]
    best_score = score_server(primary)
    others = []
    for server in servers[1:]:
        score = score_server(server)
        # Equal scores keep the earlier record
        if score > best_score:
            others.append(primary)
            primary = server
            best_score = score
        else:
            others.append(server)
    return ServerGroup(server=primary, related_records=others)


def _is_related(record: ManagedRecord, group: ServerGroup, server_domains) -> bool:
    if record.record_type == RecordType.CNAME:
        return normalize_target(record.target_value) in server_domains
    if record.record_type == RecordType.A:
        return record.target_value == group.server.target_value
    return False


def _record_sort_key(record: ManagedRecord):
    return (record.full_domain, record.record_type, record.target_value, record.id)


def build_topology(
    records: Sequence[ManagedRecord], providers: Sequence[ProviderInfo]
) -> GroupedTopology:
    """
    Group managed records by server, then by provider.

    Args:
        records: Persisted records; records with managed=False are skipped
        providers: The provider registry

    Returns:
        GroupedTopology with deterministic ordering at every level
    """
    provider_names = {p.id: p.name for p in providers}
    capabilities = {p.id: get_provider_capabilities(p.provider_type) for p in providers}

    servers = []
    others = []
    for record in records:
        if not record.managed:
            continue
        if record.is_server:
            servers.append(record)
        else:
            others.append(record)

    servers_by_ip: Dict[str, List[ManagedRecord]] = {}
    for server in servers:
        servers_by_ip.setdefault(server.target_value, []).append(server)

    groups = [_select_primary(same_ip) for same_ip in servers_by_ip.values()]

    consumed = [False] * len(others)
    for group in groups:
        server_domains = {group.server.full_domain}
        server_domains.update(r.full_domain for r in group.related_records)
        for i, record in enumerate(others):
            if consumed[i]:
                continue
            if _is_related(record, group, server_domains):
                group.related_records.append(record)
                consumed[i] = True

    unassigned: Dict[int, UnassignedGroup] = {}
    for i, record in enumerate(others):
        if consumed[i]:
            continue
        if record.provider_id not in unassigned:
            unassigned[record.provider_id] = UnassignedGroup(
                provider_id=record.provider_id,
                provider_name=provider_names.get(record.provider_id, ""),
            )
        unassigned[record.provider_id].records.append(record)

    groups.sort(key=lambda g: (g.server.full_domain, g.server.target_value))
    for group in groups:
        group.related_records.sort(key=_record_sort_key)

    unassigned_groups = sorted(
        unassigned.values(), key=lambda g: (g.provider_name, g.provider_id)
    )
    for group in unassigned_groups:
        group.records.sort(key=_record_sort_key)

    logger.info(
        f"Built topology: {len(groups)} servers, "
        f"{sum(len(g.records) for g in unassigned_groups)} unassigned records "
        f"across {len(unassigned_groups)} providers"
    )

    return GroupedTopology(
        servers=groups,
        unassigned_records=unassigned_groups,
        provider_capabilities=capabilities,
    )
