"""Query and stats command handlers."""

from __future__ import annotations

import argparse

from rich.console import Console
from rich.table import Table

from issuekit.core.config import load_config
from issuekit.core.constants.labels import CATEGORY_LABELS, PRIORITY_LABELS, STATUS_LABELS, TYPE_LABELS
from issuekit.core.contracts.exceptions import NotFoundError
from issuekit.core.contracts.issue import Issue
from issuekit.core.contracts.stats import ProjectStats
from issuekit.core.contracts.user import User
from issuekit.storage import create_storage


def build_issue_table(issues: list[Issue], users: list[User]) -> Table:
    names = {user.id: user.name for user in users}
    table = Table(title=f"{len(issues)} issue{'s' if len(issues) != 1 else ''}")
    table.add_column("Key", style="cyan", no_wrap=True)
    table.add_column("Type")
    table.add_column("Status")
    table.add_column("Priority")
    table.add_column("Assignee")
    table.add_column("Title")
    for issue in issues:
        table.add_row(
            issue.key,
            TYPE_LABELS.get(issue.type, issue.type),
            STATUS_LABELS.get(issue.status, issue.status),
            PRIORITY_LABELS.get(issue.priority, issue.priority),
            names.get(issue.assignee_id or "", issue.assignee_id or "-"),
            issue.title,
        )
    return table


def build_stats_tables(stats: ProjectStats) -> list[Table]:
    workload = Table(title="Workload")
    workload.add_column("User")
    workload.add_column("Assigned", justify="right")
    for entry in stats.workload:
        workload.add_row(entry.user_name, str(entry.count))

    epics = Table(title="Epic progress")
    epics.add_column("Epic")
    epics.add_column("Done", justify="right")
    for epic in stats.epic_progress:
        epics.add_row(epic.title, f"{epic.percent}%")
    return [workload, epics]


async def run_query(args: argparse.Namespace) -> list[Issue]:
    config = load_config(args.config)
    async with create_storage(config) as storage:
        project_id = None
        if args.project:
            project = await storage.projects.get_by_key(args.project)
            if project is None:
                raise NotFoundError("Project", args.project)
            project_id = project.id
        issues = await storage.issues.search(args.jql, project_id=project_id)
        users = await storage.users.list()

    Console().print(build_issue_table(issues, users))
    return issues


async def run_stats(args: argparse.Namespace) -> ProjectStats:
    config = load_config(args.config)
    async with create_storage(config) as storage:
        project = await storage.projects.get_by_key(args.project_key)
        if project is None:
            raise NotFoundError("Project", args.project_key)
        stats = await storage.project_stats(project.id)

    console = Console()
    category = CATEGORY_LABELS.get(project.category, project.category)
    console.print(f"[bold]{project.name}[/bold] ({project.key}, {category})")
    for table in build_stats_tables(stats):
        console.print(table)
    return stats


__all__ = ["build_issue_table", "build_stats_tables", "run_query", "run_stats"]
