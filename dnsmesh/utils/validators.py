"""
Validators - Input validation for synced DNS records

Record sources use these checks before handing records to the classifier,
which itself accepts whatever values it is given.
"""

import ipaddress
import logging
import re

logger = logging.getLogger(__name__)

SUPPORTED_RECORD_TYPES = ("A", "CNAME")


def validate_fqdn(fqdn: str, allow_wildcard: bool = True) -> bool:
    """
    Validate a fully qualified domain name.

    Args:
        fqdn: The FQDN to validate; a single trailing dot is accepted
        allow_wildcard: Accept a leading ``*`` label

    Returns:
        True if valid, False otherwise
    """
    if not fqdn or not isinstance(fqdn, str):
        return False

    if fqdn.endswith("."):
        fqdn = fqdn[:-1]

    if len(fqdn) > 253:
        logger.warning(f"FQDN too long: {fqdn}")
        return False

    labels = fqdn.split(".")

    if len(labels) < 2:
        logger.warning(f"FQDN must have at least 2 labels: {fqdn}")
        return False

    if any(label == "" for label in labels):
        logger.warning(f"FQDN contains empty labels: {fqdn}")
        return False

    if labels[0] == "*":
        if not allow_wildcard:
            logger.warning(f"Wildcard not allowed in FQDN: {fqdn}")
            return False
        labels = labels[1:]
        if len(labels) < 2:
            logger.warning(f"Wildcard FQDN needs a parent domain: {fqdn}")
            return False

    for label in labels:
        if not _validate_label(label):
            logger.warning(f"Invalid label '{label}' in FQDN: {fqdn}")
            return False

    return True


def _validate_label(label: str) -> bool:
    """Validate a single domain label."""
    if len(label) == 0 or len(label) > 63:
        return False

    # Letters, digits, hyphens and underscores, no hyphen at either end
    return bool(re.match(r"^[a-zA-Z0-9_]([a-zA-Z0-9_-]*[a-zA-Z0-9_])?$", label))


def validate_ip(value: str) -> bool:
    """
    Validate an IPv4 or IPv6 address literal.

    Args:
        value: The address to validate

    Returns:
        True if valid, False otherwise
    """
    if not value or not isinstance(value, str):
        return False

    try:
        ipaddress.ip_address(value.strip())
        return True
    except ValueError:
        logger.warning(f"Invalid IP address: {value}")
        return False


def validate_record(record_type: str, domain: str, target: str) -> bool:
    """Validate a record's domain and its target for the given type."""
    if record_type not in SUPPORTED_RECORD_TYPES:
        logger.warning(f"Unsupported record type '{record_type}' for {domain}")
        return False

    if not validate_fqdn(domain):
        return False

    if record_type == "A":
        return validate_ip(target)
    return validate_fqdn(target, allow_wildcard=False)


def sanitize_fqdn(fqdn: str) -> str:
    """
    Normalize an FQDN for storage.

    Args:
        fqdn: The FQDN to sanitize

    Returns:
        Lower-cased FQDN without surrounding whitespace or trailing dot
    """
    if not fqdn:
        return fqdn

    fqdn = fqdn.strip().lower()

    # Keep wildcard and underscore labels
    fqdn = re.sub(r"[^a-z0-9.*_-]", "", fqdn)

    fqdn = re.sub(r"\.+", ".", fqdn)

    return fqdn.strip(".")
