"""Command-line interface for issuekit."""

from __future__ import annotations

from issuekit.cli.app import main as main
from issuekit.cli.parser import build_parser as build_parser

__all__ = ["build_parser", "main"]
