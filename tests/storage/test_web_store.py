"""Web adapter: local multi-table database and push live queries."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

from issuekit.core.contracts.config import StorageConfig
from issuekit.core.contracts.exceptions import StorageError
from issuekit.core.contracts.issue import Issue, IssueCreate, IssuePatch
from issuekit.core.contracts.project import ProjectCreate
from issuekit.storage import WebStorageAdapter
from issuekit.storage.schema import SCHEMA_VERSION
from issuekit.storage.web.adapter import DATABASE_NAME, store_declarations
from issuekit.storage.web.db import ConstraintError, LocalDatabase, TableSpec


def _database(path: Path | None = None) -> LocalDatabase:
    return LocalDatabase("test", 1, {"users": "id, &email", "views": "id, userId, [userId+issueId]"}, path=path)


def test_table_spec_parses_unique_and_compound_indexes() -> None:
    spec = TableSpec.parse("viewHistory", "id, &email, userId, [userId+issueId]")

    assert spec.indexes == (("email",), ("userId",), ("userId", "issueId"))
    assert spec.unique == frozenset({("email",)})


def test_table_spec_requires_id_first() -> None:
    with pytest.raises(ValueError):
        TableSpec.parse("users", "email, id")


def test_store_declarations_cover_every_table() -> None:
    declarations = store_declarations()

    assert declarations["users"] == "id, &email"
    assert declarations["viewHistory"] == "id, userId, viewedAt, [userId+issueId]"
    assert "projectVersions" in declarations
    assert declarations["issues"].startswith("id, key, projectId")


@pytest.mark.asyncio
async def test_where_uses_compound_index() -> None:
    db = _database()
    await db.open()
    await db.bulk_put(
        "views",
        [
            {"id": "a", "userId": "u1", "issueId": "i-1"},
            {"id": "b", "userId": "u1", "issueId": "i-2"},
            {"id": "c", "userId": "u2", "issueId": "i-1"},
        ],
    )

    assert [row["id"] for row in db.where("views", userId="u1", issueId="i-1")] == ["a"]
    assert [row["id"] for row in db.where("views", userId="u1")] == ["a", "b"]
    assert db.count("views") == 3


@pytest.mark.asyncio
async def test_reads_return_copies() -> None:
    db = _database()
    await db.open()
    await db.put("users", {"id": "u1", "email": "a@example.com", "tags": ["x"]})

    row = db.get("users", "u1")
    assert row is not None
    row["tags"].append("y")

    assert db.get("users", "u1") == {"id": "u1", "email": "a@example.com", "tags": ["x"]}


@pytest.mark.asyncio
async def test_unique_index_violation_rolls_back() -> None:
    db = _database()
    await db.open()
    await db.put("users", {"id": "u1", "email": "a@example.com"})

    with pytest.raises(ConstraintError):
        await db.bulk_put(
            "users",
            [{"id": "u2", "email": "b@example.com"}, {"id": "u3", "email": "a@example.com"}],
        )

    assert [row["id"] for row in db.to_array("users")] == ["u1"]


@pytest.mark.asyncio
async def test_transaction_rolls_back_on_error() -> None:
    db = _database()
    await db.open()
    await db.put("users", {"id": "u1", "email": "a@example.com"})

    with pytest.raises(RuntimeError):
        async with db.transaction():
            await db.clear("users")
            await db.put("users", {"id": "u9", "email": "z@example.com"})
            raise RuntimeError("abort")

    assert [row["id"] for row in db.to_array("users")] == ["u1"]
    assert db.where("users", email="z@example.com") == []


def test_closed_database_rejects_access() -> None:
    db = _database()

    with pytest.raises(StorageError):
        db.get("users", "u1")


@pytest.mark.asyncio
async def test_live_query_fires_once_per_commit() -> None:
    db = _database()
    await db.open()
    seen: list[int] = []

    async def fetch() -> int:
        return db.count("users")

    unsubscribe = await db.live_query(["users"], fetch, seen.append)
    async with db.transaction():
        await db.put("users", {"id": "u1", "email": "a@example.com"})
        await db.put("users", {"id": "u2", "email": "b@example.com"})
    await db.put("views", {"id": "v", "userId": "u1", "issueId": "i-1"})
    unsubscribe()
    await db.put("users", {"id": "u3", "email": "c@example.com"})

    assert seen == [0, 2]


@pytest.mark.asyncio
async def test_failing_listener_is_logged(caplog: pytest.LogCaptureFixture) -> None:
    db = _database()
    await db.open()

    async def fetch() -> int:
        return db.count("users")

    def listener(value: int) -> None:
        raise ValueError("listener broke")

    await db.live_query(["users"], fetch, listener)
    await db.put("users", {"id": "u1", "email": "a@example.com"})

    assert db.count("users") == 1
    assert "live query listener" in caplog.text


@pytest.mark.asyncio
async def test_database_file_round_trip(tmp_path: Path) -> None:
    path = tmp_path / "db.json"
    db = _database(path)
    await db.open()
    await db.put("users", {"id": "u1", "email": "a@example.com"})
    db.close()

    payload = json.loads(path.read_text(encoding="utf-8"))
    assert payload["version"] == 1
    assert payload["tables"]["users"] == [{"id": "u1", "email": "a@example.com"}]

    reopened = _database(path)
    await reopened.open()
    assert reopened.where("users", email="a@example.com")[0]["id"] == "u1"


@pytest.mark.asyncio
async def test_newer_database_file_is_rejected(tmp_path: Path) -> None:
    path = tmp_path / "db.json"
    path.write_text(json.dumps({"version": 99, "tables": {}}), encoding="utf-8")

    with pytest.raises(StorageError, match="newer"):
        await _database(path).open()


@pytest.mark.asyncio
async def test_corrupt_database_file_is_rejected(tmp_path: Path) -> None:
    path = tmp_path / "db.json"
    path.write_text("[", encoding="utf-8")

    with pytest.raises(StorageError, match="corrupt"):
        await _database(path).open()


@pytest.mark.asyncio
async def test_delete_removes_file(tmp_path: Path) -> None:
    path = tmp_path / "db.json"
    db = _database(path)
    await db.open()
    await db.put("users", {"id": "u1", "email": "a@example.com"})

    await db.delete()

    assert not path.exists()
    assert not db.is_open()


@pytest.mark.asyncio
async def test_adapter_watch_all_pushes_after_writes() -> None:
    async with WebStorageAdapter() as storage:
        await storage.seed_demo()
        snapshots: list[list[Issue]] = []

        unsubscribe = await storage.issues.watch_all(snapshots.append)
        await storage.issues.create(IssueCreate(project_id="p-demo", title="Pushed"))
        unsubscribe()
        await storage.issues.create(IssueCreate(project_id="p-demo", title="Not seen"))

    assert storage.issues.supports_push
    assert [len(snapshot) for snapshot in snapshots] == [5, 6]


@pytest.mark.asyncio
async def test_adapter_watch_by_id_pushes_updates() -> None:
    async with WebStorageAdapter() as storage:
        await storage.seed_demo()
        titles: list[str | None] = []

        await storage.issues.watch_by_id("i-1", lambda issue: titles.append(issue.title if issue else None))
        await storage.issues.update("i-1", IssuePatch(title="Renamed"))
        await storage.issues.remove("i-1")

    assert titles[0] != "Renamed"
    assert titles[-2:] == ["Renamed", None]


@pytest.mark.asyncio
async def test_adapter_persists_to_files(tmp_path: Path) -> None:
    config = StorageConfig(path=tmp_path / "db.json", settings_path=tmp_path / "settings.json")

    async with WebStorageAdapter(config) as storage:
        await storage.seed_demo()
        await storage.set_current_user("u3")

    async with WebStorageAdapter(config) as reopened:
        assert len(await reopened.issues.list_all()) == 5
        assert reopened.current_user_id == "u3"

    assert json.loads((tmp_path / "db.json").read_text(encoding="utf-8"))["version"] == SCHEMA_VERSION
    assert storage.db.name == DATABASE_NAME


@pytest.mark.asyncio
async def test_live_queries_survive_reset() -> None:
    async with WebStorageAdapter() as storage:
        await storage.seed_demo()
        counts: list[int] = []

        await storage.projects.watch_all(lambda projects: counts.append(len(projects)))
        assert await storage.reset() is True
        await storage.projects.create(ProjectCreate(name="After reset", key="NEW"))

    assert counts == [1, 0, 1]


@pytest.mark.asyncio
async def test_requery_emits_every_live_query() -> None:
    db = _database()
    await db.open()
    seen: list[str] = []

    async def fetch_users() -> str:
        return "users"

    async def fetch_views() -> str:
        return "views"

    await db.live_query(["users"], fetch_users, seen.append)
    await db.live_query(["views"], fetch_views, seen.append)
    await db.requery()

    assert seen == ["users", "views", "users", "views"]


@pytest.mark.asyncio
async def test_reset_reopens_database_when_file_removal_fails(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
) -> None:
    path = tmp_path / "db.json"

    def failing_unlink(self: Path, missing_ok: bool = False) -> None:
        raise OSError("file is busy")

    async with WebStorageAdapter(StorageConfig(path=path)) as storage:
        await storage.seed_demo()
        monkeypatch.setattr(Path, "unlink", failing_unlink)

        with caplog.at_level(logging.WARNING, logger="issuekit.storage.base"):
            assert await storage.reset() is False

        assert storage.db.is_open()
        assert await storage.projects.list() == []
        await storage.projects.create(ProjectCreate(name="After reset", key="NEW"))

    monkeypatch.undo()
    saved = json.loads(path.read_text(encoding="utf-8"))
    assert [project["key"] for project in saved["tables"]["projects"]] == ["NEW"]
    assert saved["tables"]["issues"] == []
    assert "clearing tables one by one" in caplog.text
