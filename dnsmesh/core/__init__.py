"""
Core dnsmesh functionality.

This package contains the classifier, the topology builder, and the
record bookkeeping built around them.
"""

from .classifier import Classifier, classify
from .dns_manager import DNSManager
from .record_manager import RecordManager, UnsupportedCapabilityError
from .topology import build_topology, get_provider_capabilities

__all__ = [
    "Classifier",
    "classify",
    "DNSManager",
    "RecordManager",
    "UnsupportedCapabilityError",
    "build_topology",
    "get_provider_capabilities",
]
