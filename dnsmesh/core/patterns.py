"""
Static lookup tables shared by the classifier and the topology builder.

Both tables are built once at import time and never modified.
"""

import re
from types import MappingProxyType
from typing import Optional, Tuple

REGION_MAP = MappingProxyType(
    {
        # Countries and territories
        "hk": "Hong Kong",
        "us": "United States",
        "sg": "Singapore",
        "jp": "Japan",
        "kr": "South Korea",
        "de": "Germany",
        "uk": "United Kingdom",
        "cn": "China",
        "au": "Australia",
        "ca": "Canada",
        "fr": "France",
        "in": "India",
        "tw": "Taiwan",
        "th": "Thailand",
        "id": "Indonesia",
        # Chinese cities
        "bj": "Beijing",
        "sh": "Shanghai",
        "gz": "Guangzhou",
        "sz": "Shenzhen",
        "cd": "Chengdu",
        "cq": "Chongqing",
        "wh": "Wuhan",
        "xa": "Xi'an",
        "hz": "Hangzhou",
        "nj": "Nanjing",
        "tj": "Tianjin",
        "qd": "Qingdao",
        "dl": "Dalian",
        "sy": "Shenyang",
        "cs": "Changsha",
        "zz": "Zhengzhou",
    }
)

# Region-prefixed first label with an optional number: hk., hk1., hk-01.
SERVER_PATTERN = re.compile(r"^([a-z]{2,3})(?:-?(\d+))?\.")

WILDCARD_PREFIX = "*."


def strip_wildcard(domain: str) -> Tuple[str, bool]:
    """Remove a leading ``*.`` label, reporting whether one was present."""
    if domain.startswith(WILDCARD_PREFIX) and len(domain) > len(WILDCARD_PREFIX):
        return domain[len(WILDCARD_PREFIX):], True
    return domain, False


def normalize_target(value: str) -> str:
    """Strip exactly one trailing dot from an absolute domain name."""
    if value and value.endswith("."):
        return value[:-1]
    return value


def match_server_pattern(domain: str) -> Optional[Tuple[str, str]]:
    """
    Match a domain against the region-number naming pattern.

    Returns:
        ``(region_code, number)`` where number may be empty, or None
    """
    match = SERVER_PATTERN.match(domain)
    if not match:
        return None
    return match.group(1), match.group(2) or ""


def suggested_server_name(region_code: str, number: str) -> str:
    if number:
        return f"{region_code}-{number}"
    return region_code


def region_label(region_code: str) -> str:
    """Look up a region code; unknown codes map to an empty label."""
    return REGION_MAP.get(region_code, "")
