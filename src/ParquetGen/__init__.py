"""
ParquetGen

Compile Parquet message-type schemas, validate typed in-memory columns against
them positionally, and write each table as a single Parquet file.

Usage:
    from ParquetGen import Integer, Varchar, compile_schema, write_table

    schema = compile_schema("message schema { required int32 A; required int32 B; }")
    write_table("ab.parquet", schema, [Integer([1, 2, 3]), Integer([4, 5, 6])])
"""

from __future__ import annotations

from .batch import TableReport, TableSpec, run_batch
from .columns import Column, Integer, Varchar
from .errors import (
    ColumnEncodingError,
    ParquetGenError,
    RowCountMismatch,
    SchemaColumnCountMismatch,
    SchemaError,
    TypeMismatch,
    WriteError,
    WriteIOError,
)
from .schema import ColumnDef, LogicalType, Schema, compile_schema
from .storage.writer import TableWriter, WriteResult, write_table

__version__ = "0.1.0"

__all__ = [
    "Column",
    "ColumnDef",
    "ColumnEncodingError",
    "Integer",
    "LogicalType",
    "ParquetGenError",
    "RowCountMismatch",
    "Schema",
    "SchemaColumnCountMismatch",
    "SchemaError",
    "TableReport",
    "TableSpec",
    "TableWriter",
    "TypeMismatch",
    "Varchar",
    "WriteError",
    "WriteIOError",
    "WriteResult",
    "compile_schema",
    "run_batch",
    "write_table",
]
