from __future__ import annotations

import json
from pathlib import Path

import pytest

from issuekit.cli import build_parser, main
from issuekit.cli.commands.query import build_issue_table, build_stats_tables
from issuekit.core.contracts.stats import EpicProgress, ProjectStats, WorkloadEntry
from issuekit.core.contracts.user import User
from tests.factories import make_issue


def _write_config(tmp_path: Path, **overrides: object) -> Path:
    payload: dict[str, object] = {"backend": "web", "path": "data/db.json", "settings_path": "data/settings.json"}
    payload.update(overrides)
    path = tmp_path / "issuekit.json"
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def test_parser_subcommands() -> None:
    parser = build_parser()

    args = parser.parse_args(["query", "status = Done", "--project", "DEMO", "-v"])

    assert args.command == "query"
    assert args.jql == "status = Done"
    assert args.project == "DEMO"
    assert args.verbose is True
    assert args.config == "./issuekit.json"


def test_parser_requires_a_command() -> None:
    with pytest.raises(SystemExit):
        build_parser().parse_args([])


def test_version_flag(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as exc_info:
        build_parser().parse_args(["--version"])

    assert exc_info.value.code == 0
    assert capsys.readouterr().out.startswith("issuekit ")


@pytest.mark.parametrize("backend", ["web", "mobile"])
def test_seed_then_query(tmp_path: Path, capsys: pytest.CaptureFixture[str], backend: str) -> None:
    config = _write_config(
        tmp_path,
        backend=backend,
        path="data/app.db" if backend == "mobile" else "data/db.json",
        settings_path="data/settings.db" if backend == "mobile" else "data/settings.json",
    )

    assert main(["seed", "--config", str(config)]) == 0
    assert "seeded" in capsys.readouterr().out

    assert main(["query", "status = Done", "--project", "DEMO", "--config", str(config)]) == 0
    output = capsys.readouterr().out
    assert "DEMO-1" in output
    assert "DEMO-2" not in output


def test_stats_command(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    config = _write_config(tmp_path)
    assert main(["seed", "--config", str(config)]) == 0
    capsys.readouterr()

    assert main(["stats", "DEMO", "--config", str(config)]) == 0

    output = capsys.readouterr().out
    assert "Workload" in output
    assert "Alice Engineer" in output


def test_reset_command(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    config = _write_config(tmp_path)
    assert main(["seed", "--config", str(config)]) == 0

    assert main(["reset", "--config", str(config)]) == 0
    assert "reset web storage" in capsys.readouterr().out

    assert main(["query", "", "--config", str(config)]) == 0
    assert "0 issues" in capsys.readouterr().out


def test_missing_config_exits_3(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["seed", "--config", str(tmp_path / "missing.json")]) == 3
    assert "failed reading config file" in capsys.readouterr().err


def test_unknown_project_exits_4(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    config = _write_config(tmp_path)

    assert main(["stats", "NOPE", "--config", str(config)]) == 4
    assert "Project not found: NOPE" in capsys.readouterr().err


def test_build_issue_table_resolves_assignee_names() -> None:
    issues = [make_issue(assignee_id="u1"), make_issue(id="i-2", key="DEV-2")]

    table = build_issue_table(issues, [User(id="u1", name="Alice")])

    assert table.title == "2 issues"
    assert table.row_count == 2
    assert list(table.columns[4].cells) == ["Alice", "-"]


def test_build_stats_tables() -> None:
    stats = ProjectStats(
        workload=[WorkloadEntry(user_id="u1", user_name="Alice", count=2)],
        epic_progress=[EpicProgress(id="e-1", title="Platform", percent=50)],
    )

    workload, epics = build_stats_tables(stats)

    assert list(workload.columns[1].cells) == ["2"]
    assert list(epics.columns[1].cells) == ["50%"]
