"""Settings store backed by a JSON object on disk (or memory only)."""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path

from issuekit.core.contracts.exceptions import StorageError
from issuekit.core.contracts.storage import SettingsStore

logger = logging.getLogger(__name__)


class JsonSettingsStore(SettingsStore):
    """String key-value settings, rewritten to *path* after every change."""

    def __init__(self, path: Path | None = None) -> None:
        self._path = path
        self._values: dict[str, str] = {}

    async def open(self) -> None:
        if self._path is None or not self._path.exists():
            return
        try:
            text = await asyncio.to_thread(self._path.read_text, encoding="utf-8")
            payload = json.loads(text)
        except OSError as exc:
            raise StorageError(f"failed reading settings file: {self._path}") from exc
        except json.JSONDecodeError as exc:
            raise StorageError(f"corrupt settings file: {self._path}") from exc
        if not isinstance(payload, dict):
            raise StorageError(f"corrupt settings file: {self._path}")
        self._values = {str(key): str(value) for key, value in payload.items()}

    async def get(self, key: str) -> str | None:
        return self._values.get(key)

    async def set(self, key: str, value: str) -> None:
        self._values[key] = value
        await self._flush()

    async def remove(self, key: str) -> None:
        if self._values.pop(key, None) is not None:
            await self._flush()

    async def keys(self, prefix: str | None = None) -> list[str]:
        if not prefix:
            return list(self._values)
        return [key for key in self._values if key.startswith(prefix)]

    async def multi_remove(self, keys: list[str]) -> None:
        removed = [key for key in keys if self._values.pop(key, None) is not None]
        if removed:
            await self._flush()

    async def _flush(self) -> None:
        if self._path is None:
            return
        text = json.dumps(self._values, ensure_ascii=False, indent=2, sort_keys=True)
        try:
            await asyncio.to_thread(self._write, self._path, text)
        except OSError as exc:
            raise StorageError(f"failed writing settings file: {self._path}") from exc
        logger.debug("saved %d setting(s) to %s", len(self._values), self._path)

    @staticmethod
    def _write(path: Path, text: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text + "\n", encoding="utf-8")
