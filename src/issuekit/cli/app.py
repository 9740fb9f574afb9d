"""CLI app entrypoint and error mapping."""

from __future__ import annotations

import asyncio
import logging
import sys

from issuekit.cli.commands.admin import run_reset, run_seed
from issuekit.cli.commands.query import run_query, run_stats
from issuekit.cli.parser import build_parser
from issuekit.core.contracts.exceptions import ConfigError, StorageError

_COMMANDS = {
    "seed": run_seed,
    "reset": run_reset,
    "query": run_query,
    "stats": run_stats,
}


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s %(message)s", stream=sys.stderr)

    try:
        asyncio.run(_COMMANDS[args.command](args))
        return 0
    except ConfigError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 3
    except StorageError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 4
    except Exception as exc:  # pragma: no cover - defensive fallback
        print(f"error: {exc}", file=sys.stderr)
        return 1


__all__ = ["main"]
