from __future__ import annotations

import pytest
from pydantic import ValidationError

from core.config import AppSettings, _parse_env_lines, get_user_data_dir, write_user_env_vars


def test_defaults(monkeypatch, tmp_path):
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "xdg"))
    settings = AppSettings(_env_file=None)

    assert settings.storage_backend == "sqlite"
    assert settings.tick_interval_ms == 50
    assert settings.resolved_data_dir() == get_user_data_dir()
    assert settings.database_path().name == "rurl.db"


def test_environment_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("RURL_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("RURL_STORAGE_BACKEND", "json")
    monkeypatch.setenv("RURL_TICK_INTERVAL_MS", "200")

    settings = AppSettings(_env_file=None)

    assert settings.storage_backend == "json"
    assert settings.tick_interval_ms == 200
    assert settings.database_path() == tmp_path / "rurl.db"
    assert settings.log_path() == tmp_path / "rurl.log"


def test_project_env_file_is_read(tmp_path):
    (tmp_path / ".env").write_text("RURL_STORAGE_BACKEND=json\n", encoding="utf-8")

    assert AppSettings().storage_backend == "json"


@pytest.mark.parametrize("value", ["5", "5000"])
def test_tick_interval_is_bounded(monkeypatch, value):
    monkeypatch.setenv("RURL_TICK_INTERVAL_MS", value)

    with pytest.raises(ValidationError):
        AppSettings(_env_file=None)


def test_unknown_backend_is_rejected(monkeypatch):
    monkeypatch.setenv("RURL_STORAGE_BACKEND", "redis")

    with pytest.raises(ValidationError):
        AppSettings(_env_file=None)


def test_write_user_env_vars_merges(tmp_path):
    env_path = tmp_path / "conf" / ".env"

    write_user_env_vars({"RURL_STORAGE_BACKEND": "json"}, env_path=env_path)
    write_user_env_vars({"RURL_DATA_DIR": "/srv/rurl"}, env_path=env_path)

    data = _parse_env_lines(env_path.read_text(encoding="utf-8"))
    assert data == {"RURL_DATA_DIR": "/srv/rurl", "RURL_STORAGE_BACKEND": "json"}
