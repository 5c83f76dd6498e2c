"""Shared Typer app object, shared option types, and store utility."""

from pathlib import Path
from typing import Annotated, Optional

import typer

from ..io.history_store import HistoryStore, get_default_data_dir

DEFAULT_USER_ID = "local"

# Shared options used across all commands
DataDirOption = Annotated[
    Optional[Path],
    typer.Option("--data-dir", "-p", help="Data directory (default: ~/.split-scheduler)"),
]
UserOption = Annotated[
    str,
    typer.Option("--user", "-u", help="User id the data belongs to"),
]
JsonOption = Annotated[
    bool,
    typer.Option("--json", "-j", help="Output as JSON for machine processing"),
]

app = typer.Typer(
    name="split-scheduler",
    help="Weekly workout schedule generator and training analytics.",
    no_args_is_help=True,
)


def get_store(data_dir: Path | None) -> HistoryStore:
    """Get store from directory or default location."""
    if data_dir is None:
        data_dir = get_default_data_dir()
    return HistoryStore(data_dir)
