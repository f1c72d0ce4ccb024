"""
Typer CLI for ParquetGen.

Commands:
- ``generate OUT_DIR``: write the bundled university tables into ``OUT_DIR``
- ``inspect FILE``: summarize a Parquet file as JSON
- ``config show``: print the effective settings (CLI > ENV > defaults)

Per-table write failures are reported on their status line and never change
the exit code; only usage errors (such as a missing output directory) do.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated, Optional

import pyarrow as pa
import typer
from pydantic import ValidationError

from .batch import run_batch
from .fixtures import university_tables
from .logging import configure_logging
from .settings import Compression, LogFormat, LogLevel, Settings, load_settings
from .storage.readers import describe

# ============================================================================
# CLI Application Setup
# ============================================================================

app = typer.Typer(
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
    help="[bold]ParquetGen[/bold] — Write schema-validated Parquet fixture tables.",
)

config_app = typer.Typer(no_args_is_help=True, rich_markup_mode="rich")
app.add_typer(config_app, name="config", help="Introspect configuration")


def _build_settings(
    *,
    log_level: Optional[LogLevel] = None,
    log_format: Optional[LogFormat] = None,
    compression: Optional[Compression] = None,
    row_group_size: Optional[int] = None,
    atomic: bool = False,
) -> Settings:
    """Layer CLI overrides over ENV/defaults, exiting with code 2 on invalid values."""

    try:
        return load_settings(
            app_overrides={"log_level": log_level, "log_format": log_format},
            writer_overrides={
                "compression": compression,
                "row_group_size": row_group_size,
                "atomic_writes": True if atomic else None,
            },
        )
    except ValidationError as exc:
        typer.echo(f"Invalid configuration: {exc}", err=True)
        raise typer.Exit(code=2) from exc


# ============================================================================
# Commands
# ============================================================================


@app.command()
def generate(
    out_dir: Annotated[
        Path, typer.Argument(help="Existing directory that receives the .parquet files")
    ],
    row_group_size: Annotated[
        Optional[int],
        typer.Option("--row-group-size", min=1, help="Maximum rows per row group"),
    ] = None,
    compression: Annotated[
        Optional[Compression],
        typer.Option("--compression", case_sensitive=False, help="Column compression codec"),
    ] = None,
    atomic: Annotated[
        bool, typer.Option("--atomic", help="Write via temporary file and rename")
    ] = False,
    log_level: Annotated[
        Optional[LogLevel],
        typer.Option("--log-level", case_sensitive=False, help="Logging level"),
    ] = None,
    log_format: Annotated[
        Optional[LogFormat],
        typer.Option("--log-format", case_sensitive=False, help="Logging format (console|json)"),
    ] = None,
) -> None:
    """Write the bundled university sample tables into OUT_DIR."""

    if not out_dir.is_dir():
        typer.echo(f"Invalid output directory: {out_dir}")
        raise typer.Exit(code=1)

    settings = _build_settings(
        log_level=log_level,
        log_format=log_format,
        compression=compression,
        row_group_size=row_group_size,
        atomic=atomic,
    )
    logger = configure_logging(settings.app.log_level.value, settings.app.log_format)
    run_batch(
        university_tables(out_dir),
        config=settings.writer,
        logger=logger.child(stage="batch", out_dir=str(out_dir)),
    )


@app.command()
def inspect(
    path: Annotated[Path, typer.Argument(help="Parquet file to summarize")],
) -> None:
    """Print row count, row groups, columns, and footer metadata as JSON."""

    try:
        summary = describe(path)
    except (OSError, pa.ArrowException) as exc:
        typer.echo(f"Cannot read {path}: {exc}", err=True)
        raise typer.Exit(code=1) from exc
    typer.echo(json.dumps(summary, indent=2, ensure_ascii=False))


@config_app.command("show")
def config_show() -> None:
    """Print effective settings as JSON."""

    settings = _build_settings()
    typer.echo(json.dumps(settings.model_dump(mode="json"), indent=2))


def main() -> None:
    app()


if __name__ == "__main__":  # pragma: no cover
    main()
