"""
Readers for ParquetGen tables.

Decodes a written file back into column definitions, values, and footer
metadata. Used by the ``inspect`` command and to verify round-trips.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import pyarrow as pa
import pyarrow.parquet as pq

from ..columns import Column, column_for
from ..schema import ColumnDef, LogicalType, Schema

logger = logging.getLogger(__name__)

__all__ = [
    "read_table",
    "read_columns",
    "load_columns",
    "read_footer",
    "read_schema",
    "describe",
]


def _decode_file_metadata(md: Optional[Mapping[bytes, bytes]]) -> Dict[str, str]:
    if not md:
        return {}
    return {k.decode("utf-8", "replace"): v.decode("utf-8", "replace") for k, v in md.items()}


def read_table(path: str | Path) -> pa.Table:
    """Read the whole file into an Arrow table."""
    logger.debug("Reading Parquet table from %s", path)
    return pq.read_table(str(path))


def read_columns(path: str | Path) -> Dict[str, List[Any]]:
    """Return decoded values per column, in schema order."""
    table = read_table(path)
    return {name: table.column(name).to_pylist() for name in table.column_names}


def read_footer(path: str | Path) -> Dict[str, str]:
    """Read a Parquet file's key_value_metadata as str->str."""
    pf = pq.ParquetFile(str(path))
    return _decode_file_metadata(pf.metadata.metadata)


def _logical_type_for(arrow_type: pa.DataType) -> LogicalType:
    if pa.types.is_int32(arrow_type):
        return LogicalType.INT32
    if pa.types.is_string(arrow_type) or pa.types.is_large_string(arrow_type):
        return LogicalType.UTF8
    raise ValueError(f"Unsupported Arrow type {arrow_type}")


def read_schema(path: str | Path) -> Schema:
    """Reconstruct the compiled schema of a file written by ParquetGen."""
    pf = pq.ParquetFile(str(path))
    arrow_schema = pf.schema_arrow
    footer = _decode_file_metadata(pf.metadata.metadata)
    columns = []
    for field in arrow_schema:
        field_id = None
        if field.metadata and b"PARQUET:field_id" in field.metadata:
            field_id = int(field.metadata[b"PARQUET:field_id"])
        columns.append(
            ColumnDef(
                name=field.name,
                logical_type=_logical_type_for(field.type),
                required=not field.nullable,
                field_id=field_id,
            )
        )
    return Schema(name=footer.get("parquetgen.message", "schema"), columns=tuple(columns))


def load_columns(path: str | Path) -> List[Column]:
    """Decode each column back into its typed variant."""
    table = read_table(path)
    return [
        column_for(_logical_type_for(field.type), table.column(field.name).to_pylist())
        for field in table.schema
    ]


def describe(path: str | Path) -> Dict[str, Any]:
    """Summarize rows, row groups, columns, and footer of a Parquet file."""
    pf = pq.ParquetFile(str(path))
    metadata = pf.metadata
    return {
        "path": str(path),
        "num_rows": metadata.num_rows,
        "num_row_groups": metadata.num_row_groups,
        "created_by": metadata.created_by,
        "columns": [
            {"name": field.name, "type": str(field.type), "nullable": field.nullable}
            for field in pf.schema_arrow
        ],
        # ARROW:schema is a base64 IPC blob; not useful in a summary
        "footer": {
            k: v
            for k, v in _decode_file_metadata(metadata.metadata).items()
            if not k.startswith("ARROW:")
        },
    }
