"""Run the table writer over a batch of tables and report each outcome.

Every table is compiled and written independently. A failure in one table is
reported on that table's status line and logged, after which the batch moves
on; there is no fail-fast path and no aggregate failure count that callers are
expected to act on. The collected :class:`TableReport` list is returned for
callers (and tests) that want to inspect outcomes programmatically.

Status line format, one per table::

    professoren.parquet..... OK
    pruefen.parquet......... ERR
    Schema contains more columns than provided. (expected 2, schema declares 3)
"""

from __future__ import annotations

import sys
from dataclasses import dataclass
from pathlib import Path
from typing import IO, Iterable, List, Optional, Sequence

from .columns import Column
from .errors import ParquetGenError, format_error
from .logging import StructuredLogger, log_event, module_logger
from .schema import compile_schema
from .settings import WriterCfg
from .storage.writer import TableWriter, WriteResult

__all__ = [
    "LABEL_WIDTH",
    "TableSpec",
    "TableReport",
    "format_label",
    "run_batch",
]

LABEL_WIDTH = 24


@dataclass(frozen=True)
class TableSpec:
    """One table to write: destination, schema text, and data columns."""

    path: Path
    schema_text: str
    columns: Sequence[Column]


@dataclass(frozen=True)
class TableReport:
    """Outcome of writing one table."""

    path: Path
    result: Optional[WriteResult] = None
    error: Optional[ParquetGenError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def message(self) -> str:
        return "OK" if self.error is None else format_error(self.error)


def format_label(path: Path) -> str:
    """Left-justify the file name, padding with dots to the label width."""
    name = Path(path).name or "?"
    return f"{name:.<{LABEL_WIDTH}} "


def run_batch(
    tables: Iterable[TableSpec],
    *,
    config: Optional[WriterCfg] = None,
    stream: Optional[IO[str]] = None,
    logger: Optional[StructuredLogger] = None,
) -> List[TableReport]:
    """
    Compile and write each table, printing one status line per table.

    Args:
        tables: Tables to write, in order.
        config: Writer configuration shared by every table.
        stream: Destination for status lines (default ``sys.stdout``).
        logger: Structured logger for per-table events.

    Returns:
        One report per table, in input order.
    """
    out = stream if stream is not None else sys.stdout
    log = logger or module_logger(__name__, stage="batch")
    writer = TableWriter(config=config, logger=log.child(stage="write"))
    reports: List[TableReport] = []

    for spec in tables:
        path = Path(spec.path)
        out.write(format_label(path))
        out.flush()
        try:
            schema = compile_schema(spec.schema_text)
            result = writer.write(path, schema, spec.columns)
        except ParquetGenError as exc:
            report = TableReport(path=path, error=exc)
            out.write(f"ERR\n{report.message}\n")
            log_event(
                log,
                "error",
                "Table write failed",
                table=path.name,
                error_code=exc.error_code,
                error=report.message,
            )
        else:
            report = TableReport(path=path, result=result)
            out.write("OK\n")
        out.flush()
        reports.append(report)

    failed = sum(1 for report in reports if not report.ok)
    log_event(log, "info", "Batch finished", tables=len(reports), failed=failed)
    return reports
