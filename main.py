#!/usr/bin/env python3
"""
dnsmesh - Main Entry Point

This is the main entry point for dnsmesh.
It can be run directly or imported as a module.
"""

from dnsmesh.cli.main import main

if __name__ == "__main__":
    main()
