"""Seed and reset command handlers."""

from __future__ import annotations

import argparse

from rich.console import Console

from issuekit.core.config import load_config
from issuekit.storage import create_storage


async def run_seed(args: argparse.Namespace) -> None:
    config = load_config(args.config)
    async with create_storage(config) as storage:
        await storage.seed_demo()
        projects = await storage.projects.list()
        issues = await storage.issues.list_all()
        users = await storage.users.list()

    console = Console()
    console.print(f"[green]✓[/green] seeded {config.backend} storage")
    console.print(f"  Users:    {len(users)}")
    console.print(f"  Projects: {len(projects)}")
    console.print(f"  Issues:   {len(issues)}")


async def run_reset(args: argparse.Namespace) -> bool:
    config = load_config(args.config)
    async with create_storage(config) as storage:
        complete = await storage.reset()

    console = Console()
    if complete:
        console.print(f"[green]✓[/green] reset {config.backend} storage")
    else:
        console.print(f"[yellow]![/yellow] reset {config.backend} storage partially; see log for details")
    return complete


__all__ = ["run_reset", "run_seed"]
