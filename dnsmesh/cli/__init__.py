"""
Command-line interface components.

This package contains the CLI entry point for dnsmesh.
"""

from .main import main

__all__ = ["main"]
