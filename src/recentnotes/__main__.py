"""CLI entry point for the recent notes box.

Runs a single aggregation against the configured relays and prints the
selected notes, oldest first.

Examples:
    ```bash
    python -m recentnotes
    python -m recentnotes --relay wss://relay.trustroots.org --count 3
    python -m recentnotes --config config/recentnotes.yaml --json
    ```
"""

import argparse
import asyncio
import json
import logging
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import Any

import yaml

from recentnotes.core.exceptions import ConfigurationError
from recentnotes.core.logger import Logger, StructuredFormatter
from recentnotes.core.yaml import load_yaml
from recentnotes.services.aggregator import AggregationResult, Aggregator
from recentnotes.utils.display import render_notes


DEFAULT_CONFIG = Path("config") / "recentnotes.yaml"
FAILURE_MESSAGE = "Could not load notes. Try again later."

logger = Logger("cli")


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="recentnotes",
        description="Show the most recent notes from a set of Nostr relays",
    )

    parser.add_argument(
        "--config",
        type=Path,
        default=DEFAULT_CONFIG,
        help=f"Config path (default: {DEFAULT_CONFIG})",
    )

    parser.add_argument(
        "--relay",
        action="append",
        dest="relays",
        metavar="URL",
        help="Relay to query; repeat to query several (replaces configured relays)",
    )

    parser.add_argument("--count", type=int, help="Number of notes to show")

    parser.add_argument("--timeout", type=float, help="Per-relay timeout in seconds")

    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the result as JSON instead of text",
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="WARNING",
        help="Log level (default: WARNING)",
    )

    return parser.parse_args(argv)


def setup_logging(level: str) -> None:
    """Configure the root logger with structured formatting on stderr.

    Installs a ``StructuredFormatter`` on the root handler so that output
    from ``Logger`` and from plain ``logging.getLogger()`` calls in the
    relay client share the ``level name message key=value ...`` format.
    """
    handler = logging.StreamHandler()
    handler.setFormatter(StructuredFormatter())
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level))


def _load_yaml_dict(path: Path) -> dict[str, Any]:
    """Load a YAML file as a dict, returning ``{}`` if the file does not exist."""
    if not path.exists():
        logger.debug("config_not_found", path=str(path))
        return {}
    return load_yaml(path)


def _apply_overrides(config_dict: dict[str, Any], args: argparse.Namespace) -> None:
    """Merge command-line overrides into the loaded configuration."""
    if args.relays:
        config_dict["relays"] = list(args.relays)
    if args.count is not None:
        config_dict["show_count"] = args.count
    if args.timeout is not None:
        config_dict["timeout"] = args.timeout


def format_result(result: AggregationResult, aggregator: Aggregator, *, as_json: bool) -> str:
    """Render *result* as display text or as a JSON document."""
    if as_json:
        return json.dumps(result.to_dict(), ensure_ascii=False, indent=2)
    return render_notes(
        result.notes,
        result.identities,
        location_namespace=aggregator.config.labels.location_namespace,
    )


async def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point: parse args, load config, aggregate, and print."""
    args = parse_args(argv)
    setup_logging(args.log_level)

    try:
        config_dict = _load_yaml_dict(args.config)
        _apply_overrides(config_dict, args)
        aggregator = Aggregator.from_dict(config_dict)
    except (ConfigurationError, OSError, TypeError, ValueError, yaml.YAMLError) as e:
        logger.error("config_invalid", path=str(args.config), error=str(e))
        print(FAILURE_MESSAGE, file=sys.stderr)
        return 1

    try:
        result = await aggregator.run()
    except Exception as e:  # Intentionally broad: CLI error boundary
        logger.exception("aggregation_failed", error=str(e))
        print(FAILURE_MESSAGE, file=sys.stderr)
        return 1

    print(format_result(result, aggregator, as_json=args.json))
    return 0


def cli() -> None:
    """Synchronous entry point for console_scripts."""
    try:
        sys.exit(asyncio.run(main()))
    except KeyboardInterrupt:
        sys.exit(130)


if __name__ == "__main__":
    cli()
