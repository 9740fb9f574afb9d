from __future__ import annotations

import json
from pathlib import Path

import pytest

from issuekit.core.config import load_config
from issuekit.core.contracts.exceptions import ConfigError


def _write(tmp_path: Path, payload: object) -> Path:
    path = tmp_path / "issuekit.json"
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def test_load_config_resolves_paths_relative_to_config_dir(tmp_path: Path) -> None:
    path = _write(tmp_path, {"backend": "mobile", "path": "data/app.db", "settings_path": "data/settings.db"})

    config = load_config(path)

    assert config.backend == "mobile"
    assert config.path == (tmp_path / "data" / "app.db").resolve()
    assert config.settings_path == (tmp_path / "data" / "settings.db").resolve()


def test_load_config_defaults(tmp_path: Path) -> None:
    config = load_config(_write(tmp_path, {}))

    assert config.backend == "web"
    assert config.path is None
    assert config.issue_key_offset == 101
    assert config.recent_issue_limit == 10
    assert config.default_user_id == "u1"


def test_load_config_keeps_absolute_paths(tmp_path: Path) -> None:
    absolute = tmp_path / "elsewhere" / "db.json"

    config = load_config(_write(tmp_path, {"path": str(absolute)}))

    assert config.path == absolute


def test_load_config_missing_file(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="failed reading config file"):
        load_config(tmp_path / "nope.json")


def test_load_config_invalid_json(tmp_path: Path) -> None:
    path = tmp_path / "issuekit.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(ConfigError, match="invalid JSON"):
        load_config(path)


@pytest.mark.parametrize(
    "payload",
    [
        {"backend": "cloud"},
        {"issue_key_offset": -1},
        {"recent_issue_limit": 0},
        {"unknown": True},
    ],
)
def test_load_config_rejects_invalid_values(tmp_path: Path, payload: dict[str, object]) -> None:
    with pytest.raises(ConfigError, match="invalid config"):
        load_config(_write(tmp_path, payload))
