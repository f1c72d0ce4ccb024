"""Tests for the message-type schema compiler."""

from __future__ import annotations

import pyarrow as pa
import pytest

from ParquetGen.errors import SchemaError
from ParquetGen.schema import ColumnDef, LogicalType, Schema, compile_schema

UNIVERSITY_STUDENTS = """
    message schema {
        required int32 MatrNr;
        required byte_array Name (utf8);
        required int32 Semester;
    }
"""


class TestCompileSchema:
    """Valid message-type text."""

    def test_compiles_columns_in_declaration_order(self):
        """Columns keep their declared order, names, and types."""
        schema = compile_schema(UNIVERSITY_STUDENTS)

        assert schema.name == "schema"
        assert schema.names == ["MatrNr", "Name", "Semester"]
        assert [c.logical_type for c in schema] == [
            LogicalType.INT32,
            LogicalType.UTF8,
            LogicalType.INT32,
        ]
        assert all(c.required for c in schema)
        assert len(schema) == 3

    def test_largest_field_id(self):
        """The int32 maximum is still a valid field id."""
        schema = compile_schema("message m { required int32 a = 2147483647; }")
        assert schema[0].field_id == 2**31 - 1

    def test_optional_and_field_id(self):
        """Optional repetition and '= id' suffix are captured."""
        schema = compile_schema("message m { optional int32 a = 7; required binary b (STRING); }")

        assert schema[0] == ColumnDef("a", LogicalType.INT32, required=False, field_id=7)
        assert schema[1] == ColumnDef("b", LogicalType.UTF8, required=True)

    @pytest.mark.parametrize("annotation", ["", "(INT_32)", "(INTEGER(32,true))"])
    def test_int32_annotations(self, annotation):
        """Signed 32-bit annotations all map to INT32."""
        schema = compile_schema(f"message m {{ required int32 a {annotation}; }}")
        assert schema[0].logical_type is LogicalType.INT32

    def test_keywords_are_case_insensitive(self):
        """Repetition, type, and annotation tokens ignore case."""
        schema = compile_schema("MESSAGE m { REQUIRED BYTE_ARRAY Title (Utf8); }")
        assert schema[0].logical_type is LogicalType.UTF8

    def test_to_arrow(self):
        """Arrow schema mirrors nullability and field ids."""
        schema = compile_schema("message m { required int32 a = 1; optional byte_array b (UTF8); }")
        arrow = schema.to_arrow({"k": "v"})

        assert arrow.field("a").type == pa.int32()
        assert arrow.field("a").nullable is False
        assert arrow.field("a").metadata == {b"PARQUET:field_id": b"1"}
        assert arrow.field("b").type == pa.string()
        assert arrow.field("b").nullable is True
        assert arrow.metadata == {b"k": b"v"}

    def test_to_text_compiles_back(self):
        """Canonical text rendering compiles to an equal schema."""
        schema = compile_schema(UNIVERSITY_STUDENTS)
        assert compile_schema(schema.to_text()) == schema

    def test_schema_is_immutable(self):
        """Compiled schemas cannot be mutated."""
        schema = compile_schema(UNIVERSITY_STUDENTS)
        assert isinstance(schema, Schema)
        with pytest.raises(AttributeError):
            schema.name = "other"  # type: ignore[misc]


class TestCompileSchemaErrors:
    """Malformed or unsupported message-type text."""

    @pytest.mark.parametrize(
        "text, match",
        [
            ("", "Expected 'message'"),
            ("table t { required int32 a; }", "Expected 'message'"),
            ("message m { required int32 a; ", "Expected field declaration"),
            ("message m { required int32 a }", "Expected ';'"),
            ("message m { }", "declares no columns"),
            ("message m { required int64 a; }", "unsupported primitive type 'int64'"),
            ("message m { required byte_array a; }", "Unsupported type 'byte_array'"),
            ("message m { required byte_array a (JSON); }", "Unsupported type"),
            ("message m { required int32 a (UTF8); }", "Unsupported type"),
            ("message m { required int32 a (INTEGER(32,false)); }", "Unsupported type"),
            ("message m { repeated int32 a; }", "Repeated fields are not supported"),
            ("message m { required group g { required int32 a; } }", "Nested group"),
            ("message m { maybe int32 a; }", "Expected repetition"),
            ("message m { required int32 a = x; }", "field id"),
            ("message m { required int32 a = 2147483648; }", "exceeds the int32 maximum"),
            ("message m { required int32 a; } extra", "Unexpected text after message"),
            ("message m { required int32 a@; }", "Unexpected character '@'"),
        ],
    )
    def test_rejects(self, text, match):
        """Every malformed input raises SchemaError, never another exception."""
        with pytest.raises(SchemaError, match=match):
            compile_schema(text)

    def test_duplicate_column_name(self):
        """Declaring the same column twice is rejected at the second declaration."""
        text = "message schema {\n  required int32 PersNr;\n  required byte_array PersNr (utf8);\n}"
        with pytest.raises(SchemaError, match="Duplicate column name 'PersNr'") as excinfo:
            compile_schema(text)

        assert excinfo.value.line == 3
        assert excinfo.value.column == 23

    def test_error_reports_position(self):
        """Errors carry 1-based line and column of the offending token."""
        with pytest.raises(SchemaError) as excinfo:
            compile_schema("message m {\n  required float x;\n}")

        err = excinfo.value
        assert (err.line, err.column) == (2, 12)
        assert "line 2, column 12" in str(err)

    def test_schema_error_is_value_error(self):
        """SchemaError stays catchable as ValueError."""
        with pytest.raises(ValueError):
            compile_schema("message")

    def test_non_string_input(self):
        """Non-text input is a SchemaError, not a TypeError."""
        with pytest.raises(SchemaError, match="must be str"):
            compile_schema(None)  # type: ignore[arg-type]
