"""
Classifier - Server inference over synced DNS records

This module infers which records represent servers. Three rules run in fixed
priority order; each rule skips domains already claimed by an earlier one, so
every domain is the subject of at most one suggestion. IP fan-in suggestions
are keyed by IP and claim no domains.
"""

import logging
from typing import Callable, Dict, List, Sequence, Set

from .models import Confidence, RecordType, ServerSuggestion, SyncedRecord
from .patterns import (
    match_server_pattern,
    normalize_target,
    region_label,
    strip_wildcard,
    suggested_server_name,
)

logger = logging.getLogger(__name__)

MIN_CNAME_REFERENCES = 2
MIN_SHARED_IP_DOMAINS = 3


class RecordIndex:
    """Back-reference lookups derived from one batch of records."""

    def __init__(self, records: Sequence[SyncedRecord]):
        self.cname_targets: Dict[str, List[str]] = {}
        self.ip_domains: Dict[str, List[str]] = {}

        for record in records:
            if record.record_type == RecordType.CNAME:
                target = normalize_target(record.target_value)
                self.cname_targets.setdefault(target, []).append(record.full_domain)
            elif record.record_type == RecordType.A:
                domains = self.ip_domains.setdefault(record.target_value, [])
                if record.full_domain not in domains:
                    domains.append(record.full_domain)

    def referenced_by(self, domain: str) -> List[str]:
        return list(self.cname_targets.get(domain, []))

    def same_ip_domains(self, ip: str, exclude: str = "") -> List[str]:
        return [d for d in self.ip_domains.get(ip, []) if d != exclude]


Rule = Callable[[Sequence[SyncedRecord], RecordIndex, Set[str]], List[ServerSuggestion]]


def _a_records(records: Sequence[SyncedRecord]):
    return (r for r in records if r.record_type == RecordType.A)


def match_naming_pattern(
    records: Sequence[SyncedRecord], index: RecordIndex, suggested: Set[str]
) -> List[ServerSuggestion]:
    """High confidence: the first label looks like ``hk``, ``hk1`` or ``hk-01``."""
    suggestions = []
    for record in _a_records(records):
        if record.full_domain in suggested:
            continue

        domain, is_wildcard = strip_wildcard(record.full_domain)
        matched = match_server_pattern(domain)
        # Wildcards belong under the server they reference
        if matched is None or is_wildcard:
            continue

        region_code, number = matched
        referenced_by = index.referenced_by(record.full_domain)
        reason = "domain matches region-number pattern"
        if referenced_by:
            reason += f" + {len(referenced_by)} CNAME references"

        suggestions.append(
            ServerSuggestion(
                domain=record.full_domain,
                ip=record.target_value,
                match_reason=reason,
                confidence=Confidence.HIGH,
                referenced_by=referenced_by,
                same_ip_domains=index.same_ip_domains(
                    record.target_value, exclude=record.full_domain
                ),
                suggested_name=suggested_server_name(region_code, number),
                suggested_region=region_label(region_code),
            )
        )
        suggested.add(record.full_domain)
    return suggestions


def match_cname_fan_in(
    records: Sequence[SyncedRecord], index: RecordIndex, suggested: Set[str]
) -> List[ServerSuggestion]:
    """Medium confidence: several domains CNAME to this A record."""
    suggestions = []
    for record in _a_records(records):
        if record.full_domain in suggested:
            continue

        referenced_by = index.referenced_by(record.full_domain)
        if len(referenced_by) < MIN_CNAME_REFERENCES:
            continue

        suggestions.append(
            ServerSuggestion(
                domain=record.full_domain,
                ip=record.target_value,
                match_reason=f"referenced by {len(referenced_by)} CNAME records",
                confidence=Confidence.MEDIUM,
                referenced_by=referenced_by,
                same_ip_domains=index.same_ip_domains(
                    record.target_value, exclude=record.full_domain
                ),
            )
        )
        suggested.add(record.full_domain)
    return suggestions


def match_ip_fan_in(
    records: Sequence[SyncedRecord], index: RecordIndex, suggested: Set[str]
) -> List[ServerSuggestion]:
    """Low confidence: many domains resolve to one IP, keyed by the IP alone."""
    suggestions = []
    for ip, domains in index.ip_domains.items():
        if len(domains) < MIN_SHARED_IP_DOMAINS:
            continue
        if any(domain in suggested for domain in domains):
            continue

        suggestions.append(
            ServerSuggestion(
                domain="",
                ip=ip,
                match_reason=f"{len(domains)} domains share the same IP",
                confidence=Confidence.LOW,
                same_ip_domains=list(domains),
            )
        )
    return suggestions


DEFAULT_RULES: List[Rule] = [
    match_naming_pattern,
    match_cname_fan_in,
    match_ip_fan_in,
]


class Classifier:
    """Applies an ordered list of rules that share one exclusion set."""

    def __init__(self, rules: Sequence[Rule] = None):
        self.rules = list(rules) if rules is not None else list(DEFAULT_RULES)

    def classify(self, records: Sequence[SyncedRecord]) -> List[ServerSuggestion]:
        """
        Suggest server records.

        Args:
            records: Synced records from any number of providers

        Returns:
            Suggestions ordered by rule priority, then by input order
        """
        index = RecordIndex(records)
        suggested: Set[str] = set()
        suggestions: List[ServerSuggestion] = []

        for rule in self.rules:
            found = rule(records, index, suggested)
            logger.debug(f"Rule {rule.__name__} produced {len(found)} suggestions")
            suggestions.extend(found)

        logger.info(
            f"Classified {len(records)} records into {len(suggestions)} server suggestions"
        )
        return suggestions


def classify(records: Sequence[SyncedRecord]) -> List[ServerSuggestion]:
    """Classify records with the default rule set."""
    return Classifier().classify(records)
