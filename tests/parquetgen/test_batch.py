"""Tests for the per-table batch runner and its status lines."""

from __future__ import annotations

import io

import pyarrow.parquet as pq

from ParquetGen.batch import LABEL_WIDTH, TableReport, TableSpec, format_label, run_batch
from ParquetGen.columns import Integer, Varchar
from ParquetGen.errors import SchemaColumnCountMismatch, SchemaError, TypeMismatch
from ParquetGen.settings import WriterCfg

AB_SCHEMA = "message schema { required int32 A; required int32 B; }"
ABC_SCHEMA = "message schema { required int32 A; required int32 B; required int32 C; }"


def test_format_label_pads_with_dots():
    """Labels are left-justified, dot-padded to the label width, then a space."""
    label = format_label("out/hoeren.parquet")
    assert label == "hoeren.parquet.......... "
    assert len(label) == LABEL_WIDTH + 1


def test_format_label_long_name_is_not_truncated():
    """Names longer than the width are printed in full."""
    name = "a_very_long_table_name_indeed.parquet"
    assert format_label(name) == f"{name} "


def test_batch_isolation(tmp_path):
    """A malformed middle table fails alone; the first and third still succeed."""
    tables = [
        TableSpec(tmp_path / "first.parquet", AB_SCHEMA, [Integer([1, 2]), Integer([3, 4])]),
        TableSpec(tmp_path / "second.parquet", ABC_SCHEMA, [Integer([1]), Integer([2])]),
        TableSpec(tmp_path / "third.parquet", AB_SCHEMA, [Integer([5]), Integer([6])]),
    ]
    stream = io.StringIO()

    reports = run_batch(tables, stream=stream)

    assert [r.ok for r in reports] == [True, False, True]
    assert isinstance(reports[1].error, SchemaColumnCountMismatch)
    assert pq.read_table(str(tmp_path / "first.parquet")).column("A").to_pylist() == [1, 2]
    assert pq.read_table(str(tmp_path / "third.parquet")).column("B").to_pylist() == [6]

    lines = stream.getvalue().splitlines()
    assert lines[0] == "first.parquet........... OK"
    assert lines[1] == "second.parquet.......... ERR"
    assert lines[2].startswith("Schema contains more columns than provided. (expected 2")
    assert lines[3] == "third.parquet........... OK"


def test_schema_error_reported_as_err_line(tmp_path):
    """Compile failures use the same ERR status line as write failures."""
    tables = [
        TableSpec(tmp_path / "bad.parquet", "message m { required int64 a; }", [Integer([1])]),
        TableSpec(tmp_path / "good.parquet", AB_SCHEMA, [Integer([1]), Integer([2])]),
    ]
    stream = io.StringIO()

    reports = run_batch(tables, stream=stream)

    assert isinstance(reports[0].error, SchemaError)
    assert reports[1].ok
    output = stream.getvalue()
    assert output.startswith("bad.parquet............. ERR\n")
    assert "unsupported primitive type 'int64'" in output
    assert not (tmp_path / "bad.parquet").exists()


def test_reports_carry_results_and_messages(tmp_path):
    """Successful reports hold the WriteResult; failed ones a readable message."""
    tables = [
        TableSpec(tmp_path / "ok.parquet", AB_SCHEMA, [Integer([1]), Integer([2])]),
        TableSpec(tmp_path / "typed.parquet", AB_SCHEMA, [Integer([1]), Varchar(["x"])]),
    ]

    reports = run_batch(tables, stream=io.StringIO())

    ok, failed = reports
    assert isinstance(ok, TableReport)
    assert ok.message == "OK"
    assert ok.result.rows_written == 1
    assert isinstance(failed.error, TypeMismatch)
    assert failed.result is None
    assert failed.message.startswith("Type mismatch for column 1")


def test_batch_uses_writer_config(tmp_path):
    """The shared writer configuration applies to every table."""
    tables = [
        TableSpec(tmp_path / "rg.parquet", AB_SCHEMA, [Integer([1, 2, 3]), Integer([4, 5, 6])]),
    ]

    reports = run_batch(tables, config=WriterCfg(row_group_size=1), stream=io.StringIO())

    assert reports[0].result.row_group_count == 3


def test_empty_batch(tmp_path):
    """No tables means no output and no reports."""
    stream = io.StringIO()
    assert run_batch([], stream=stream) == []
    assert stream.getvalue() == ""
