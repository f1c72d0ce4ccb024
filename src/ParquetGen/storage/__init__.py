"""
ParquetGen Storage Layer

Writers and readers for single-file Parquet tables.

Key modules:
- `writer.py`: positional validation and row-group writes (`TableWriter`, `write_table`)
- `readers.py`: decode written files (values, schema, footer)

Usage:
    from ParquetGen.storage import writer

    result = writer.write_table(path, schema, [Integer([1, 2]), Varchar(["a", "b"])])
"""

from __future__ import annotations

__all__ = [
    "writer",
    "readers",
]
