"""
dnsmesh - Server inference and topology for multi-provider DNS

Classifies synced DNS records into likely servers and groups managed records
into a server-first hierarchy across providers.
"""

__version__ = "1.0.0"
__author__ = "dnsmesh Team"
__description__ = "Server inference and topology grouping for multi-provider DNS records"

from .core.classifier import Classifier, classify
from .core.dns_manager import DNSManager
from .core.record_manager import RecordManager
from .core.topology import build_topology
from .providers.dns_client import DNSClient

__all__ = [
    "Classifier",
    "classify",
    "build_topology",
    "DNSManager",
    "RecordManager",
    "DNSClient",
]
