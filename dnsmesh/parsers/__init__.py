"""
Parsers for record exports.
"""

from .csv import CSVParser

__all__ = ["CSVParser"]
