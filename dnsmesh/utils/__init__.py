"""
Utility functions and helpers.

This package contains validation helpers used by the record sources.
"""

from .validators import sanitize_fqdn, validate_fqdn, validate_ip, validate_record

__all__ = ["sanitize_fqdn", "validate_fqdn", "validate_ip", "validate_record"]
