# === NAVMAP v1 ===
# {
#   "module": "ParquetGen.storage.writer",
#   "purpose": "Positional schema/column validation and row-group Parquet writes.",
#   "sections": [
#     {
#       "id": "writeresult",
#       "name": "WriteResult",
#       "anchor": "class-writeresult",
#       "kind": "class"
#     },
#     {
#       "id": "columnencoder",
#       "name": "ColumnEncoder",
#       "anchor": "class-columnencoder",
#       "kind": "class"
#     },
#     {
#       "id": "rowgroupwriter",
#       "name": "RowGroupWriter",
#       "anchor": "class-rowgroupwriter",
#       "kind": "class"
#     },
#     {
#       "id": "tablewriter",
#       "name": "TableWriter",
#       "anchor": "class-tablewriter",
#       "kind": "class"
#     },
#     {
#       "id": "write-table",
#       "name": "write_table",
#       "anchor": "function-write-table",
#       "kind": "function"
#     }
#   ]
# }
# === /NAVMAP ===

"""
Parquet Table Writer

Turns a compiled :class:`~ParquetGen.schema.Schema` plus an ordered sequence of
:class:`~ParquetGen.columns.Column` values into one Parquet file:

- Delete any previous file at the destination, then create it afresh
- Walk the schema positionally, handing out one column encoder per position
- Reject missing columns, variant/type disagreements, and unequal row counts
- Encode each column as a single Arrow batch and close it into the row group
- Finalize the row group and the file footer through ``pyarrow.parquet``

The pyarrow writer is only opened after every column has been encoded, so a
failed write never leaves a complete, readable Parquet file behind. With
``WriterCfg.atomic_writes`` the bytes go to a temporary sibling (temp → fsync →
rename) and the destination only ever holds a finished file.

Key Classes:
- `ColumnEncoder`: per-position encoder yielded by `RowGroupWriter.next_column`.
- `RowGroupWriter`: accumulates encoded columns in schema order.
- `TableWriter`: drives delete → open → encode → finalize for one table.
"""

from __future__ import annotations

import os
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import pyarrow as pa
import pyarrow.parquet as pq

from ..columns import Column
from ..errors import (
    ColumnEncodingError,
    RowCountMismatch,
    SchemaColumnCountMismatch,
    TypeMismatch,
    WriteError,
    WriteIOError,
)
from ..logging import StructuredLogger, log_event, module_logger
from ..schema import ColumnDef, LogicalType, Schema, compile_schema
from ..settings import WriterCfg

__all__ = [
    "FOOTER_PREFIX",
    "SCHEMA_VERSION",
    "WriteResult",
    "ColumnEncoder",
    "RowGroupWriter",
    "TableWriter",
    "write_table",
]

SCHEMA_VERSION = "parquetgen/table/1.0.0"
FOOTER_PREFIX = "parquetgen."

# ============================================================
# Types
# ============================================================


@dataclass(frozen=True)
class WriteResult:
    """Summary of a successful table write."""

    path: Path
    rows_written: int
    columns_written: int
    row_group_count: int
    file_size_bytes: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "path": str(self.path),
            "rows_written": self.rows_written,
            "columns_written": self.columns_written,
            "row_group_count": self.row_group_count,
            "file_size_bytes": self.file_size_bytes,
        }


# ============================================================
# Row-group protocol
# ============================================================


class ColumnEncoder:
    """Encoder for the column at one schema position."""

    def __init__(self, index: int, column_def: ColumnDef) -> None:
        self.index = index
        self.column_def = column_def
        self.array: Optional[pa.Array] = None

    @property
    def logical_type(self) -> LogicalType:
        return self.column_def.logical_type

    def write_batch(self, column: Column) -> int:
        """
        Encode every value of ``column`` as one batch.

        Returns:
            Number of rows encoded.

        Raises:
            ColumnEncodingError: If a value does not fit the declared type.
        """
        try:
            self.array = column.encode(self.column_def)
        except (TypeError, ValueError, OverflowError, pa.ArrowException) as exc:
            raise ColumnEncodingError(str(exc), column_index=self.index) from exc
        return len(self.array)


class RowGroupWriter:
    """Collects encoded columns for one table in schema order."""

    def __init__(self, schema: Schema) -> None:
        self.schema = schema
        self._arrays: List[pa.Array] = []

    @property
    def columns_closed(self) -> int:
        return len(self._arrays)

    def next_column(self) -> Optional[ColumnEncoder]:
        """Return the encoder for the next schema position, or ``None`` when exhausted."""
        position = len(self._arrays)
        if position >= len(self.schema):
            return None
        return ColumnEncoder(position, self.schema[position])

    def close_column(self, encoder: ColumnEncoder) -> None:
        if encoder.index != len(self._arrays):
            raise WriteError(
                f"Column {encoder.index} closed out of order "
                f"(expected column {len(self._arrays)})"
            )
        if encoder.array is None:
            raise WriteError(f"Column {encoder.index} closed before a batch was written")
        self._arrays.append(encoder.array)

    def to_table(self, footer_metadata: Optional[Dict[str, str]] = None) -> pa.Table:
        """Assemble the closed columns into an Arrow table carrying the footer metadata."""
        if len(self._arrays) != len(self.schema):
            raise WriteError(
                f"Row group closed after {len(self._arrays)} of {len(self.schema)} columns"
            )
        return pa.Table.from_arrays(self._arrays, schema=self.schema.to_arrow(footer_metadata))


# ============================================================
# Main Writer
# ============================================================


class TableWriter:
    """
    Writes one table per call: delete, open, encode column by column, finalize.

    Instances hold only configuration; every :meth:`write` owns its file handle
    and releases it on all exit paths.
    """

    def __init__(
        self,
        config: Optional[WriterCfg] = None,
        logger: Optional[StructuredLogger] = None,
    ) -> None:
        """
        Initialize a table writer.

        Args:
            config: Encoding options. Defaults to ``WriterCfg()`` (ENV-aware).
            logger: Structured logger; defaults to this module's logger.
        """
        self.config = config or WriterCfg()
        self.logger = logger or module_logger(__name__, stage="write")

    def write(
        self,
        path: str | Path,
        schema: Schema | str,
        columns: Sequence[Column],
    ) -> WriteResult:
        """
        Write ``columns`` to ``path`` according to ``schema``.

        Args:
            path: Destination file. Any existing file is removed first.
            schema: Compiled schema (message-type text is compiled on the fly).
            columns: Data columns matched to schema positions by index.

        Returns:
            WriteResult describing the persisted file.

        Raises:
            SchemaError: If ``schema`` is text that fails to compile.
            WriteIOError: If the file system rejects delete/open/write.
            SchemaColumnCountMismatch: If the schema declares more columns than supplied.
            TypeMismatch: If a column's variant disagrees with its schema position.
            RowCountMismatch: If a column's length differs from the first column's.
            ColumnEncodingError: If values cannot be encoded into the declared type.
        """
        path = Path(path)
        if isinstance(schema, str):
            schema = compile_schema(schema)
        columns = list(columns)

        _remove_existing(path)
        target = path
        if self.config.atomic_writes:
            target = path.with_name(f"{path.name}.tmp.{uuid.uuid4().hex}")

        try:
            sink = _open_for_write(target)
            with sink:
                row_group = RowGroupWriter(schema)
                rows = self._fill_row_group(row_group, columns)
                table = row_group.to_table(self._footer_metadata(schema))
                self._finalize(sink, table, target)
                if target != path:
                    _fsync_handle(sink, target)
            if target != path:
                try:
                    target.replace(path)
                except OSError as exc:
                    raise WriteIOError(
                        f"Cannot move {target.name} into place: {_describe_os_error(exc)}",
                        path=path,
                    ) from exc
        except Exception:
            if target != path:
                target.unlink(missing_ok=True)
            raise

        if len(columns) > len(schema):
            log_event(
                self.logger,
                "debug",
                "Ignored trailing data columns beyond schema",
                table=path.name,
                ignored_columns=len(columns) - len(schema),
            )

        result = WriteResult(
            path=path,
            rows_written=rows,
            columns_written=len(schema),
            row_group_count=pq.ParquetFile(str(path)).metadata.num_row_groups,
            file_size_bytes=path.stat().st_size,
        )
        log_event(self.logger, "info", "Table written", table=path.name, **result.to_dict())
        return result

    def _fill_row_group(self, row_group: RowGroupWriter, columns: List[Column]) -> int:
        """Encode and close each schema position; return the table's row count."""

        expected_rows: Optional[int] = None
        while True:
            encoder = row_group.next_column()
            if encoder is None:
                break
            index = encoder.index
            if index >= len(columns):
                raise SchemaColumnCountMismatch(
                    expected_from_data=len(columns),
                    schema_columns=len(row_group.schema),
                )
            column = columns[index]
            if not isinstance(column, Column) or column.logical_type is not encoder.logical_type:
                raise TypeMismatch(
                    column_index=index,
                    expected=encoder.logical_type.value,
                    actual=_describe_column(column),
                )
            if expected_rows is None:
                expected_rows = len(column)
            elif len(column) != expected_rows:
                raise RowCountMismatch(
                    column_index=index,
                    expected=expected_rows,
                    actual=len(column),
                )
            encoder.write_batch(column)
            row_group.close_column(encoder)
        return expected_rows or 0

    def _footer_metadata(self, schema: Schema) -> Dict[str, str]:
        return {
            f"{FOOTER_PREFIX}schema_version": SCHEMA_VERSION,
            f"{FOOTER_PREFIX}message": schema.name,
            f"{FOOTER_PREFIX}created_by": self.config.created_by,
        }

    def _row_group_rows(self, table: pa.Table) -> int:
        """Rows per row group: the configured threshold, else the whole table."""

        if self.config.row_group_size is not None:
            return self.config.row_group_size
        return max(1, table.num_rows)

    def _finalize(self, sink: Any, table: pa.Table, target: Path) -> None:
        """Write the row group(s) and the file footer into ``sink``."""

        try:
            with pq.ParquetWriter(sink, table.schema, **self.config.parquet_kwargs()) as writer:
                writer.write_table(table, row_group_size=self._row_group_rows(table))
        except OSError as exc:
            raise WriteIOError(
                f"Cannot write {target.name}: {_describe_os_error(exc)}", path=target
            ) from exc
        except pa.ArrowException as exc:
            raise WriteError(f"Parquet encoding failed for {target.name}: {exc}") from exc


# ============================================================
# Helpers
# ============================================================


def _describe_os_error(exc: OSError) -> str:
    return exc.strerror or str(exc)


def _describe_column(column: Any) -> str:
    if isinstance(column, Column):
        return f"{column.variant} ({column.logical_type.value})"
    return type(column).__name__


def _remove_existing(path: Path) -> None:
    """Delete ``path`` if present; a missing file is not an error."""

    try:
        path.unlink()
    except FileNotFoundError:
        return
    except OSError as exc:
        raise WriteIOError(
            f"Cannot remove existing {path.name}: {_describe_os_error(exc)}", path=path
        ) from exc


def _open_for_write(path: Path):
    try:
        return open(path, "wb")
    except OSError as exc:
        raise WriteIOError(
            f"Cannot open {path.name} for writing: {_describe_os_error(exc)}", path=path
        ) from exc


def _fsync_handle(handle: Any, path: Path) -> None:
    """Flush and fsync the still-open ``handle`` before the atomic rename."""

    try:
        handle.flush()
        os.fsync(handle.fileno())
    except OSError as exc:
        raise WriteIOError(
            f"Cannot sync {path.name} to disk: {_describe_os_error(exc)}", path=path
        ) from exc


# ============================================================
# Factory / Convenience Helpers
# ============================================================


def write_table(
    path: str | Path,
    schema: Schema | str,
    columns: Sequence[Column],
    *,
    config: Optional[WriterCfg] = None,
    logger: Optional[StructuredLogger] = None,
) -> WriteResult:
    """Convenience wrapper around :meth:`TableWriter.write`."""
    return TableWriter(config=config, logger=logger).write(path, schema, columns)
