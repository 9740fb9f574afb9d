"""Storage configuration loading."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from issuekit.core.contracts.config import StorageConfig
from issuekit.core.contracts.exceptions import ConfigError


def _resolve_path(value: Path | None, *, base_dir: Path) -> Path | None:
    if value is None:
        return None
    if value.is_absolute():
        return value
    return (base_dir / value).resolve()


def load_config(path: str | Path) -> StorageConfig:
    """Load and validate config from JSON, resolving relative paths against config directory."""
    config_path = Path(path).expanduser().resolve()
    config_dir = config_path.parent

    try:
        raw_payload: Any = json.loads(config_path.read_text(encoding="utf-8"))
        parsed = StorageConfig.model_validate(raw_payload)
    except OSError as exc:
        raise ConfigError(f"failed reading config file: {config_path}") from exc
    except json.JSONDecodeError as exc:
        raise ConfigError(f"invalid JSON in config file: {config_path}") from exc
    except ValidationError as exc:
        raise ConfigError(f"invalid config: {exc}") from exc

    return parsed.model_copy(
        update={
            "path": _resolve_path(parsed.path, base_dir=config_dir),
            "settings_path": _resolve_path(parsed.settings_path, base_dir=config_dir),
        }
    )
