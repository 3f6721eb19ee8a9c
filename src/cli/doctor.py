"""Doctor command for environment diagnostics."""

from __future__ import annotations

import tempfile

import typer
from rich.console import Console
from rich.table import Table

from adapters.storage import build_store, ensure_data_dir
from core.config import AppSettings, get_user_env_file, write_user_env_vars
from core.domain.errors import StorageError

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


def _check_writable(settings: AppSettings) -> tuple[bool, str]:
    """Create and remove a scratch file in the data directory."""

    try:
        ensure_data_dir(settings)
        with tempfile.TemporaryFile(dir=settings.resolved_data_dir()):
            pass
        return True, str(settings.resolved_data_dir())
    except (StorageError, OSError) as exc:
        return False, str(exc)


def _check_store(settings: AppSettings) -> tuple[bool, str]:
    try:
        store = build_store(settings)
    except StorageError as exc:
        return False, str(exc)
    try:
        count = len(store.list())
    except StorageError as exc:
        return False, str(exc)
    finally:
        # SQLite engine only; the JSON store holds nothing open.
        close = getattr(store, "close", None)
        if close is not None:
            close()
    return True, f"{count} project(s)"


@app.command()
def run() -> None:
    """Run baseline diagnostics and show recommended fixes."""

    settings = AppSettings()

    table = Table(title="rurl Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    # Config
    table.add_row("Storage backend", "OK", settings.storage_backend)
    if settings.storage_backend == "sqlite":
        table.add_row("Database", "OK", str(settings.database_path()))
    table.add_row("Tick interval", "OK", f"{settings.tick_interval_ms} ms")
    table.add_row("Log file", "OK", f"{settings.log_path()} ({settings.log_level.upper()})")
    user_env = get_user_env_file()
    table.add_row("User config", "OK" if user_env.exists() else "OPTIONAL", str(user_env))

    # Storage
    ok_dir, detail_dir = _check_writable(settings)
    table.add_row("Data dir writable", "OK" if ok_dir else "FAIL", detail_dir)

    ok_store, detail_store = _check_store(settings)
    table.add_row("Project store", "OK" if ok_store else "FAIL", detail_store)

    _console.print(table)

    if not (ok_dir and ok_store):
        _console.print(
            "\n[yellow]Note:[/yellow] Set RURL_DATA_DIR to a writable directory, "
            "or switch backends with RURL_STORAGE_BACKEND=json."
        )
        raise typer.Exit(code=1)


@app.command(name="init-config")
def init_config(
    backend: str = typer.Option("sqlite", "--backend", help="Storage backend: sqlite or json."),
    data_dir: str = typer.Option("", "--data-dir", help="Where projects are stored (empty: per-user default)."),
) -> None:
    """Write defaults to the user config .env (no manual editing)."""

    backend = backend.strip().lower()
    if backend not in {"sqlite", "json"}:
        raise typer.BadParameter("backend must be 'sqlite' or 'json'")

    values = {"RURL_STORAGE_BACKEND": backend}
    if data_dir.strip():
        values["RURL_DATA_DIR"] = data_dir.strip()

    env_path = write_user_env_vars(values)
    _console.print(f"[green]Saved config to:[/green] {env_path}")
