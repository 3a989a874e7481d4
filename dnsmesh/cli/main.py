#!/usr/bin/env python3
"""
dnsmesh - Command Line Interface

Main entry point for the dnsmesh CLI.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Dict

import yaml

from ..core.dns_manager import DNSManager

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "configs/config.yaml"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="dnsmesh - Server inference and topology for multi-provider DNS"
    )

    parser.add_argument(
        "--config",
        "-c",
        default=DEFAULT_CONFIG_PATH,
        help=f"Configuration file path (default: {DEFAULT_CONFIG_PATH})",
    )

    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable verbose logging"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    analyze = subparsers.add_parser(
        "analyze", help="Sync providers and print server suggestions"
    )
    analyze.add_argument(
        "--provider",
        "-p",
        type=int,
        action="append",
        dest="provider_ids",
        help="Provider id to sync (repeatable, default: all)",
    )
    analyze.add_argument(
        "--output-file", "-o", help="File to save the analysis (.json or .yaml)"
    )

    reanalyze = subparsers.add_parser(
        "reanalyze", help="Sync all providers into the store and flag servers"
    )
    reanalyze.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would be changed without saving the store",
    )

    topology = subparsers.add_parser(
        "topology", help="Print stored records grouped by server"
    )
    topology.add_argument(
        "--output-file", "-o", help="File to save the topology (.json or .yaml)"
    )

    hide = subparsers.add_parser("hide", help="Stop managing a record")
    hide.add_argument("record_id", type=int)

    enable = subparsers.add_parser("enable", help="Enable a record at its provider")
    enable.add_argument("record_id", type=int)

    disable = subparsers.add_parser("disable", help="Disable a record at its provider")
    disable.add_argument("record_id", type=int)

    return parser


def main(argv=None):
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)

    config = load_config(args.config)
    config_logger(config, verbose=args.verbose)

    try:
        dns_manager = DNSManager(config)

        if args.command == "analyze":
            dns_manager.analyze(args.provider_ids, output_file=args.output_file)
        elif args.command == "reanalyze":
            dns_manager.reanalyze(dry_run=args.dry_run)
        elif args.command == "topology":
            dns_manager.topology(output_file=args.output_file)
        elif args.command == "hide":
            dns_manager.hide(args.record_id)
        elif args.command in ("enable", "disable"):
            dns_manager.set_status(args.record_id, args.command == "enable")

    except Exception as e:
        print(f"Error: {e}")
        if args.verbose:
            import traceback

            traceback.print_exc()
        sys.exit(1)

    sys.exit(0)


def load_config(config_path: str) -> Dict:
    """Load configuration from YAML file."""
    if not Path(config_path).exists():
        logger.warning(f"Config file {config_path} not found, using defaults")
        return get_default_config()

    try:
        with open(config_path, "r") as f:
            config = yaml.safe_load(f) or {}
        logger.info(f"Configuration loaded from {config_path}")
        return config
    except yaml.YAMLError as e:
        print(f"Error parsing config file: {e}")
        sys.exit(1)


def get_default_config() -> Dict:
    """Return default configuration."""
    return {
        "providers": [],
        "store": {"path": "dnsmesh-records.yaml"},
        "logging": {"level": "INFO", "file": "dnsmesh.log"},
    }


def config_logger(config: Dict, verbose: bool = False):
    """Configure logging."""
    logging_config = config.get("logging", None)
    log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    if logging_config:
        log_level = "DEBUG" if verbose else logging_config.get("level", "INFO")
        handlers = [logging.StreamHandler(sys.stdout)]
        log_file = logging_config.get("file")
        if log_file:
            handlers.insert(0, logging.FileHandler(log_file))

        logging.basicConfig(level=log_level, format=log_format, handlers=handlers)
        return

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format=log_format,
        handlers=[logging.StreamHandler(sys.stdout)],
    )


if __name__ == "__main__":
    main()
