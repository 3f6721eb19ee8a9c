"""CLI entrypoint (Typer).

Why Typer:
- `rurl` with no arguments opens the terminal UI; diagnostics live under
  `rurl doctor` without a hand-written argument parser.
- Startup failures (data dir, database) are reported on a normal terminal
  before the TUI takes the screen over.
"""

from __future__ import annotations

import logging

import typer
from rich.console import Console

from adapters.storage import build_store, ensure_data_dir
from cli import doctor
from core.config import AppSettings
from core.domain.errors import StorageError

app = typer.Typer(
    invoke_without_command=True,
    add_completion=False,
    help="rurl: a keyboard-driven terminal HTTP request manager.",
)
app.add_typer(doctor.app, name="doctor")

_console = Console(stderr=True)

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(settings: AppSettings) -> None:
    """Log to a file in the data dir; the terminal belongs to the UI."""

    logging.basicConfig(
        filename=str(settings.log_path()),
        level=settings.log_level.upper(),
        format=LOG_FORMAT,
        encoding="utf-8",
    )


@app.callback()
def main(ctx: typer.Context) -> None:
    """Open the terminal UI (default) or run a subcommand."""

    if ctx.invoked_subcommand is not None:
        return

    settings = AppSettings()
    try:
        ensure_data_dir(settings)
        configure_logging(settings)
        store = build_store(settings)
    except StorageError as exc:
        _console.print(f"[bold red]Startup failed:[/bold red] {exc}")
        raise typer.Exit(code=1) from exc

    # Imported late: Textual is only needed once the UI actually starts.
    from cli.tui import RurlApp  # noqa: PLC0415
    from core.services.router import Router  # noqa: PLC0415

    logger.info("starting rurl (backend=%s, data_dir=%s)", settings.storage_backend, settings.resolved_data_dir())
    router = Router(store)
    RurlApp(router, tick_interval_ms=settings.tick_interval_ms).run()
    logger.info("rurl exited")


def run() -> None:
    app()
