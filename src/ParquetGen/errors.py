"""Exception hierarchy shared by the schema compiler, table writer, and batch runner.

Writing a table can fail in two broad places: while compiling the schema text
and while aligning/encoding the supplied columns against that schema. Both
families derive from :class:`ParquetGenError` so the batch runner can report
any of them on a per-table status line without catching unrelated programming
errors. Every exception carries a human-readable message plus the structured
attributes callers need to react programmatically (column index, expected
counts, source position).
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

__all__ = [
    "ParquetGenError",
    "SchemaError",
    "WriteError",
    "WriteIOError",
    "SchemaColumnCountMismatch",
    "TypeMismatch",
    "RowCountMismatch",
    "ColumnEncodingError",
    "format_error",
]


class ParquetGenError(Exception):
    """Base exception for schema compilation and table write failures."""

    error_code = "PARQUETGEN_ERROR"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class SchemaError(ParquetGenError, ValueError):
    """Raised when message-type text is malformed or names an unsupported type."""

    error_code = "SCHEMA_ERROR"

    def __init__(
        self,
        message: str,
        *,
        line: Optional[int] = None,
        column: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.line = line
        self.column = column

    def __str__(self) -> str:
        if self.line is None:
            return self.message
        return f"{self.message} (line {self.line}, column {self.column})"


class WriteError(ParquetGenError):
    """Raised when a compiled schema and its columns cannot be persisted."""

    error_code = "WRITE_ERROR"


class WriteIOError(WriteError):
    """Raised when the file system rejects a delete, open, write, or rename."""

    error_code = "WRITE_IO"

    def __init__(self, message: str, *, path: Optional[Path] = None) -> None:
        super().__init__(message)
        self.path = Path(path) if path is not None else None


class SchemaColumnCountMismatch(WriteError):
    """Raised when the schema declares more columns than were supplied."""

    error_code = "SCHEMA_COLUMN_COUNT_MISMATCH"

    def __init__(self, *, expected_from_data: int, schema_columns: int) -> None:
        super().__init__(
            "Schema contains more columns than provided. "
            f"(expected {expected_from_data}, schema declares {schema_columns})"
        )
        self.expected_from_data = expected_from_data
        self.schema_columns = schema_columns


class TypeMismatch(WriteError):
    """Raised when a supplied column's variant disagrees with its schema position."""

    error_code = "TYPE_MISMATCH"

    def __init__(self, *, column_index: int, expected: str, actual: str) -> None:
        super().__init__(
            f"Type mismatch for column {column_index}: schema declares {expected}, "
            f"data provides {actual}"
        )
        self.column_index = column_index
        self.expected = expected
        self.actual = actual


class RowCountMismatch(WriteError):
    """Raised when a column's row count differs from the first column's."""

    error_code = "ROW_COUNT_MISMATCH"

    def __init__(self, *, column_index: int, expected: int, actual: int) -> None:
        super().__init__(
            f"Row count mismatch for column {column_index}: expected {expected} rows, "
            f"got {actual}"
        )
        self.column_index = column_index
        self.expected = expected
        self.actual = actual


class ColumnEncodingError(WriteError):
    """Raised when a column's values cannot be encoded into its declared type."""

    error_code = "COLUMN_ENCODING"

    def __init__(self, message: str, *, column_index: int) -> None:
        super().__init__(f"Cannot encode column {column_index}: {message}")
        self.column_index = column_index


def format_error(error: BaseException) -> str:
    """Return the single-message rendering used on batch status lines."""

    text = str(error).strip()
    if isinstance(error, ParquetGenError):
        return text
    return f"{type(error).__name__}: {text}" if text else type(error).__name__
