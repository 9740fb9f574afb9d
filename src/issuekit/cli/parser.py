"""CLI parser construction."""

from __future__ import annotations

import argparse
from importlib.metadata import PackageNotFoundError, version


def _package_version() -> str:
    try:
        return version("issuekit")
    except PackageNotFoundError:
        return "0.0.0"


def _add_common(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--config", default="./issuekit.json", help="Path to issuekit.json")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="issuekit")
    parser.add_argument("--version", action="version", version=f"%(prog)s {_package_version()}")

    subparsers = parser.add_subparsers(dest="command", required=True)

    seed_parser = subparsers.add_parser("seed", help="Replace all data with the demo fixture set")
    _add_common(seed_parser)

    reset_parser = subparsers.add_parser("reset", help="Wipe all tables and session settings")
    _add_common(reset_parser)

    query_parser = subparsers.add_parser("query", help="List issues matching a JQL-lite expression")
    query_parser.add_argument("jql", help='Expression such as "status = Done AND priority = High"')
    query_parser.add_argument("--project", default=None, help="Restrict to the project with this key")
    _add_common(query_parser)

    stats_parser = subparsers.add_parser("stats", help="Show workload and epic progress for a project")
    stats_parser.add_argument("project_key", help="Project key, e.g. DEMO")
    _add_common(stats_parser)

    return parser


__all__ = ["build_parser"]
