"""Seeding, clearing and resetting the store."""

from __future__ import annotations

import logging

import pytest

from issuekit.core.constants.settings import SettingsKey, dashboard_gadgets_key
from issuekit.core.contracts.exceptions import StorageError
from issuekit.storage import StorageAdapter, Table
from issuekit.storage.schema import ALL_TABLES


async def _counts(storage: StorageAdapter) -> dict[Table, int]:
    return {table: len(await storage.rows.all(table)) for table in ALL_TABLES}


@pytest.mark.asyncio
async def test_seed_demo_is_idempotent(storage: StorageAdapter) -> None:
    assert not await storage.is_seeded()

    await storage.seed_demo()
    first = await _counts(storage)
    await storage.seed_demo()
    second = await _counts(storage)

    assert first == second
    assert first[Table.USERS] == 3
    assert first[Table.PROJECTS] == 1
    assert first[Table.SPRINTS] == 2
    assert first[Table.ISSUES] == 5
    assert first[Table.NOTIFICATIONS] == 1
    assert await storage.is_seeded()


@pytest.mark.asyncio
async def test_seed_replaces_existing_data(seeded: StorageAdapter) -> None:
    await seeded.users.register("extra@example.com", "Extra")

    await seeded.seed_demo()

    assert len(await seeded.users.list()) == 3


@pytest.mark.asyncio
async def test_seeded_notification_targets_default_user(seeded: StorageAdapter) -> None:
    [notification] = await seeded.notifications.list()

    assert notification.recipient_id == "u1"


@pytest.mark.asyncio
async def test_failed_seed_rolls_back(
    seeded: StorageAdapter, monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
) -> None:
    rows = seeded.rows
    original = rows.put_many

    async def failing_put_many(table: Table, items: object) -> None:
        if table == Table.ISSUES:
            raise StorageError("disk full")
        await original(table, items)  # type: ignore[arg-type]

    monkeypatch.setattr(rows, "put_many", failing_put_many)

    with caplog.at_level(logging.ERROR, logger="issuekit.storage.base"), pytest.raises(StorageError):
        await seeded.seed_demo()

    monkeypatch.undo()
    assert len(await seeded.issues.list_all()) == 5
    assert "seeding" in caplog.text


@pytest.mark.asyncio
async def test_clear_database(seeded: StorageAdapter) -> None:
    await seeded.clear_database()

    assert set((await _counts(seeded)).values()) == {0}
    assert not await seeded.is_seeded()


@pytest.mark.asyncio
async def test_reset_wipes_tables_and_settings(seeded: StorageAdapter) -> None:
    await seeded.set_current_user("u2")
    await seeded.settings.set(SettingsKey.HAS_SETUP, "true")
    await seeded.settings.set(dashboard_gadgets_key("u2"), "[]")
    await seeded.settings.set("theme", "dark")

    assert await seeded.reset() is True

    assert set((await _counts(seeded)).values()) == {0}
    assert await seeded.settings.get(SettingsKey.CURRENT_USER_ID) is None
    assert await seeded.settings.get(SettingsKey.IS_LOGGED_IN) is None
    assert await seeded.settings.get(SettingsKey.HAS_SETUP) is None
    assert await seeded.settings.get(dashboard_gadgets_key("u2")) is None
    assert await seeded.settings.get("theme") == "dark"
    assert seeded.current_user_id == "u1"

    await seeded.seed_demo()
    assert await seeded.is_seeded()


@pytest.mark.asyncio
async def test_reset_falls_back_when_drop_fails(
    seeded: StorageAdapter, monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
) -> None:
    await seeded.settings.set(SettingsKey.HAS_SETUP, "true")
    await seeded.settings.set(dashboard_gadgets_key("u1"), "[]")
    await seeded.settings.set("theme", "dark")

    async def failing_drop() -> None:
        raise StorageError("locked")

    monkeypatch.setattr(seeded.rows, "drop", failing_drop)

    with caplog.at_level(logging.WARNING, logger="issuekit.storage.base"):
        assert await seeded.reset() is False

    assert set((await _counts(seeded)).values()) == {0}
    assert await seeded.settings.get(SettingsKey.CURRENT_USER_ID) is None
    assert await seeded.settings.get(SettingsKey.HAS_SETUP) is None
    assert await seeded.settings.keys() == ["theme"]
    assert "clearing tables one by one" in caplog.text


@pytest.mark.asyncio
async def test_reset_fallback_keeps_session_cleanup_when_settings_fail(
    seeded: StorageAdapter, monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
) -> None:
    await seeded.set_current_user("u2")
    await seeded.settings.set(SettingsKey.HAS_SETUP, "true")

    async def failing_keys(prefix: str = "") -> list[str]:
        raise StorageError("settings unavailable")

    monkeypatch.setattr(seeded.settings, "keys", failing_keys)

    with caplog.at_level(logging.ERROR, logger="issuekit.storage.base"):
        assert await seeded.reset() is False

    monkeypatch.undo()
    assert set((await _counts(seeded)).values()) == {0}
    assert await seeded.settings.get(SettingsKey.CURRENT_USER_ID) is None
    assert await seeded.settings.get(SettingsKey.IS_LOGGED_IN) is None
    assert await seeded.settings.get(SettingsKey.HAS_SETUP) == "true"
    assert seeded.current_user_id == "u1"
    assert "removing session keys only" in caplog.text
