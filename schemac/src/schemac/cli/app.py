"""Typer CLI application."""

from enum import Enum
from pathlib import Path
from typing import Optional

import typer

from schemac.config.settings import get_settings
from schemac.config.logging import setup_logging
from schemac.pipeline import CompileReport, Target, compile_directory
from schemac.store import SchemaStore


class LogLevel(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


app = typer.Typer(help="schemac: compile JSON schema documents to SQL DDL and Lua descriptors")

IN_OPTION = typer.Option(None, "--in", help="Directory holding <name>.json schema documents")
OUT_OPTION = typer.Option(None, "--out", help="Directory receiving the compiled files")
LOG_OPTION = typer.Option(None, "--log-level", case_sensitive=False, help="Logging level")


def _run(target: Target, in_dir: Optional[Path], out_dir: Optional[Path], log_level: Optional[LogLevel]) -> None:
    setup_logging(level=log_level.value if log_level else None)
    settings = get_settings()
    in_dir = Path(in_dir or settings.input_dir)
    out_dir = Path(out_dir or settings.output_dir)

    if not in_dir.is_dir():
        typer.echo(f"Error: input directory not found: {in_dir}", err=True)
        raise typer.Exit(2)

    typer.echo(f"Compiling schemas from {in_dir} to {target} in {out_dir}")
    report: CompileReport = compile_directory(in_dir, out_dir, target)

    for name, paths in report.written.items():
        for path in paths:
            typer.echo(f"✓ {name}: {path}")
    for name, reason in report.failed.items():
        typer.echo(f"✗ {name}: {reason}", err=True)

    if not report.ok:
        raise typer.Exit(1)


@app.command("sql")
def sql_command(
    in_dir: Optional[Path] = IN_OPTION,
    out_dir: Optional[Path] = OUT_OPTION,
    log_level: Optional[LogLevel] = LOG_OPTION,
):
    """
    Compile schema documents to SQL DDL scripts.
    """
    _run("sql", in_dir, out_dir, log_level)


@app.command("lua")
def lua_command(
    in_dir: Optional[Path] = IN_OPTION,
    out_dir: Optional[Path] = OUT_OPTION,
    log_level: Optional[LogLevel] = LOG_OPTION,
):
    """
    Compile schema documents to frozen Lua descriptor modules.
    """
    _run("lua", in_dir, out_dir, log_level)


@app.command("list")
def list_command(in_dir: Optional[Path] = IN_OPTION):
    """
    List the schema names found in the input directory.
    """
    store = SchemaStore(Path(in_dir or get_settings().input_dir))
    for name in store.list_names():
        typer.echo(name)


def main():
    """Entry point for CLI."""
    app()


if __name__ == "__main__":
    main()
