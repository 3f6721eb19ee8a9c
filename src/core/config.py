"""Core configuration.

Why here:
- Centralizes environment variables (pydantic-settings) without polluting the CLI.
- Storage adapters and the terminal adapter read the same typed settings.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

APP_NAME = "rurl"


def get_user_config_dir() -> Path:
    """Per-user configuration directory (cross-platform, no extra dependencies)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / APP_NAME
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / APP_NAME

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / APP_NAME
    return Path.home() / ".config" / APP_NAME


def get_user_data_dir() -> Path:
    """Per-user data directory: where the database and per-project files live."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("LOCALAPPDATA", os.environ.get("APPDATA", str(Path.home()))))
        return base / APP_NAME
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / APP_NAME

    xdg = os.environ.get("XDG_DATA_HOME")
    if xdg:
        return Path(xdg) / APP_NAME
    return Path.home() / ".local" / "share" / APP_NAME


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def _parse_env_lines(text: str) -> dict[str, str]:
    data: dict[str, str] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if key:
            data[key] = value
    return data


def write_user_env_vars(values: dict[str, str], env_path: Path | None = None) -> Path:
    """Write/update variables in the user's global .env."""

    env_path = env_path or get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)

    existing: dict[str, str] = {}
    if env_path.exists():
        existing = _parse_env_lines(env_path.read_text(encoding="utf-8"))

    existing.update({k: v for k, v in values.items() if v is not None})

    lines = ["# rurl user config (.env)"]
    for key in sorted(existing.keys()):
        lines.append(f"{key}={existing[key]}")
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return env_path


class AppSettings(BaseSettings):
    """Central application settings.

    Why pydantic-settings:
    - Typing + validation at the edge (env vars) without dragging logic into the Core.
    - One configuration contract for the CLI, the TUI and the storage adapters.
    """

    model_config = SettingsConfigDict(
        env_prefix="RURL_",
        extra="ignore",
        case_sensitive=False,
        # Order: project first (dev), then the user's global config.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    data_dir: Path | None = Field(
        default=None,
        description="Where projects are stored. Defaults to the per-user data dir.",
    )
    storage_backend: Literal["sqlite", "json"] = Field(
        default="sqlite",
        description="sqlite: one relational database. json: one document per project.",
    )
    database_filename: str = Field(
        default="rurl.db",
        min_length=1,
        description="SQLite file name inside `data_dir`.",
    )
    tick_interval_ms: int = Field(
        default=50,
        ge=10,
        le=1000,
        description="Bounded wait for the next terminal event before an idle tick.",
    )
    log_level: str = Field(
        default="INFO",
        description="Standard logging level name.",
    )
    log_filename: str = Field(
        default="rurl.log",
        min_length=1,
        description="Log file inside `data_dir` (the terminal belongs to the UI).",
    )

    def resolved_data_dir(self) -> Path:
        return self.data_dir or get_user_data_dir()

    def database_path(self) -> Path:
        return self.resolved_data_dir() / self.database_filename

    def log_path(self) -> Path:
        return self.resolved_data_dir() / self.log_filename
