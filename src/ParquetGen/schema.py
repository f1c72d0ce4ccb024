# === NAVMAP v1 ===
# {
#   "module": "ParquetGen.schema",
#   "purpose": "Compile Parquet message-type text into ordered column definitions.",
#   "sections": [
#     {
#       "id": "logicaltype",
#       "name": "LogicalType",
#       "anchor": "class-logicaltype",
#       "kind": "class"
#     },
#     {
#       "id": "columndef",
#       "name": "ColumnDef",
#       "anchor": "class-columndef",
#       "kind": "class"
#     },
#     {
#       "id": "schema",
#       "name": "Schema",
#       "anchor": "class-schema",
#       "kind": "class"
#     },
#     {
#       "id": "compile-schema",
#       "name": "compile_schema",
#       "anchor": "function-compile-schema",
#       "kind": "function"
#     }
#   ]
# }
# === /NAVMAP ===

"""
Schema compiler for Parquet message-type text.

Accepts the flat subset of the Parquet message-type grammar used to declare
fixture tables::

    message schema {
        required int32 MatrNr;
        required byte_array Name (UTF8);
        optional int32 Semester = 3;
    }

Each field clause names a repetition (``required`` or ``optional``), a physical
type, the column name, an optional logical annotation in parentheses, and an
optional ``= <field id>`` suffix. Compilation is pure: it never touches the
file system or environment, and any malformed input raises
:class:`~ParquetGen.errors.SchemaError` carrying the offending position.

Key pieces:
- `LogicalType`: closed set of supported column types with their Arrow mapping.
- `ColumnDef`: immutable per-column definition.
- `Schema`: ordered, immutable collection of column definitions.
- `compile_schema`: text → `Schema`.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterator, List, NamedTuple, Optional, Tuple

import pyarrow as pa

from .errors import SchemaError

__all__ = [
    "LogicalType",
    "ColumnDef",
    "Schema",
    "compile_schema",
]

# ============================================================
# Types
# ============================================================


class LogicalType(str, Enum):
    """Supported column logical types."""

    INT32 = "int32"
    UTF8 = "utf8"

    @property
    def arrow_type(self) -> pa.DataType:
        """Arrow type used to encode values of this logical type."""
        if self is LogicalType.INT32:
            return pa.int32()
        return pa.string()

    @property
    def physical_type(self) -> str:
        """Parquet physical type token as written in message-type text."""
        if self is LogicalType.INT32:
            return "int32"
        return "byte_array"

    @property
    def annotation(self) -> Optional[str]:
        """Canonical logical annotation, if the physical type needs one."""
        if self is LogicalType.UTF8:
            return "UTF8"
        return None


@dataclass(frozen=True)
class ColumnDef:
    """A single compiled column: name, logical type, and nullability."""

    name: str
    logical_type: LogicalType
    required: bool = True
    field_id: Optional[int] = None

    def to_arrow_field(self) -> pa.Field:
        metadata = None
        if self.field_id is not None:
            metadata = {b"PARQUET:field_id": str(self.field_id).encode("utf-8")}
        return pa.field(
            self.name,
            self.logical_type.arrow_type,
            nullable=not self.required,
            metadata=metadata,
        )

    def to_text(self) -> str:
        repetition = "required" if self.required else "optional"
        clause = f"{repetition} {self.logical_type.physical_type} {self.name}"
        if self.logical_type.annotation:
            clause += f" ({self.logical_type.annotation})"
        if self.field_id is not None:
            clause += f" = {self.field_id}"
        return clause + ";"


@dataclass(frozen=True)
class Schema:
    """
    Ordered column definitions compiled from one ``message`` block.

    Order is significant: position ``i`` corresponds to the ``i``-th supplied
    data column when a table is written.
    """

    name: str
    columns: Tuple[ColumnDef, ...]

    def __len__(self) -> int:
        return len(self.columns)

    def __iter__(self) -> Iterator[ColumnDef]:
        return iter(self.columns)

    def __getitem__(self, index: int) -> ColumnDef:
        return self.columns[index]

    @property
    def names(self) -> List[str]:
        return [column.name for column in self.columns]

    def to_arrow(self, metadata: Optional[Dict[str, str]] = None) -> pa.Schema:
        """Return the equivalent pyarrow schema, optionally with footer metadata."""
        return pa.schema([column.to_arrow_field() for column in self.columns], metadata=metadata)

    def to_text(self) -> str:
        """Render canonical message-type text that compiles back to this schema."""
        body = "\n".join(f"  {column.to_text()}" for column in self.columns)
        return f"message {self.name} {{\n{body}\n}}"


# ============================================================
# Tokenizer
# ============================================================


class _Token(NamedTuple):
    kind: str  # "ident", "int", "punct", "eof"
    text: str
    line: int
    column: int


_TOKEN_RE = re.compile(
    r"""
    (?P<newline>\n)
    |(?P<space>[ \t\r\f\v]+)
    |(?P<ident>[A-Za-z_][A-Za-z0-9_]*)
    |(?P<int>-?[0-9]+)
    |(?P<punct>[{}();=,])
    """,
    re.VERBOSE,
)


def _tokenize(text: str) -> List[_Token]:
    tokens: List[_Token] = []
    line = 1
    line_start = 0
    pos = 0
    while pos < len(text):
        match = _TOKEN_RE.match(text, pos)
        if match is None:
            raise SchemaError(
                f"Unexpected character {text[pos]!r}",
                line=line,
                column=pos - line_start + 1,
            )
        kind = match.lastgroup
        if kind == "newline":
            line += 1
            line_start = match.end()
        elif kind != "space":
            tokens.append(_Token(kind, match.group(), line, match.start() - line_start + 1))
        pos = match.end()
    tokens.append(_Token("eof", "", line, pos - line_start + 1))
    return tokens


# ============================================================
# Parser
# ============================================================

# Parquet stores field ids as int32
FIELD_ID_MAX = 2**31 - 1

_REPETITIONS = {"required", "optional"}
_BYTE_ARRAY_TYPES = {"byte_array", "binary"}
_TEXT_ANNOTATIONS = {"UTF8", "STRING"}


class _Parser:
    """Recursive-descent parser over the token stream of one message."""

    def __init__(self, text: str) -> None:
        self.tokens = _tokenize(text)
        self.pos = 0

    def _peek(self) -> _Token:
        return self.tokens[self.pos]

    def _next(self) -> _Token:
        token = self.tokens[self.pos]
        if token.kind != "eof":
            self.pos += 1
        return token

    def _fail(self, message: str, token: _Token) -> SchemaError:
        if token.kind == "eof":
            message = f"{message}, found end of input"
        else:
            message = f"{message}, found {token.text!r}"
        return SchemaError(message, line=token.line, column=token.column)

    def _expect_punct(self, symbol: str) -> _Token:
        token = self._next()
        if token.kind != "punct" or token.text != symbol:
            raise self._fail(f"Expected {symbol!r}", token)
        return token

    def _expect_ident(self, what: str) -> _Token:
        token = self._next()
        if token.kind != "ident":
            raise self._fail(f"Expected {what}", token)
        return token

    def parse(self) -> Schema:
        keyword = self._expect_ident("'message'")
        if keyword.text.lower() != "message":
            raise self._fail("Expected 'message'", keyword)
        name = self._expect_ident("message name").text
        self._expect_punct("{")

        columns: List[ColumnDef] = []
        seen: Dict[str, _Token] = {}
        while True:
            token = self._peek()
            if token.kind == "punct" and token.text == "}":
                self._next()
                break
            if token.kind == "eof":
                raise self._fail("Expected field declaration or '}'", token)
            column, name_token = self._parse_field()
            if column.name in seen:
                first = seen[column.name]
                raise SchemaError(
                    f"Duplicate column name {column.name!r} "
                    f"(first declared at line {first.line}, column {first.column})",
                    line=name_token.line,
                    column=name_token.column,
                )
            seen[column.name] = name_token
            columns.append(column)

        trailing = self._peek()
        if trailing.kind != "eof":
            raise self._fail("Unexpected text after message block", trailing)
        if not columns:
            raise SchemaError(f"Message {name!r} declares no columns")
        return Schema(name=name, columns=tuple(columns))

    def _parse_field(self) -> Tuple[ColumnDef, _Token]:
        repetition = self._expect_ident("repetition ('required' or 'optional')")
        rep = repetition.text.lower()
        if rep == "repeated":
            raise SchemaError(
                "Repeated fields are not supported",
                line=repetition.line,
                column=repetition.column,
            )
        if rep not in _REPETITIONS:
            raise self._fail("Expected repetition ('required' or 'optional')", repetition)

        physical = self._expect_ident("primitive type")
        if physical.text.lower() == "group":
            raise SchemaError(
                "Nested group fields are not supported",
                line=physical.line,
                column=physical.column,
            )
        name_token = self._expect_ident("column name")

        annotation: Optional[Tuple[str, Tuple[str, ...]]] = None
        token = self._peek()
        if token.kind == "punct" and token.text == "(":
            annotation = self._parse_annotation()

        field_id: Optional[int] = None
        token = self._peek()
        if token.kind == "punct" and token.text == "=":
            self._next()
            id_token = self._next()
            if id_token.kind != "int" or int(id_token.text) < 0:
                raise self._fail("Expected non-negative field id", id_token)
            if int(id_token.text) > FIELD_ID_MAX:
                raise self._fail(f"Field id exceeds the int32 maximum {FIELD_ID_MAX}", id_token)
            field_id = int(id_token.text)

        self._expect_punct(";")
        logical_type = _resolve_type(physical, annotation)
        column = ColumnDef(
            name=name_token.text,
            logical_type=logical_type,
            required=(rep == "required"),
            field_id=field_id,
        )
        return column, name_token

    def _parse_annotation(self) -> Tuple[str, Tuple[str, ...]]:
        self._expect_punct("(")
        name = self._expect_ident("logical annotation").text.upper()
        args: List[str] = []
        token = self._peek()
        if token.kind == "punct" and token.text == "(":
            self._next()
            while True:
                arg = self._next()
                if arg.kind not in ("ident", "int"):
                    raise self._fail("Expected annotation argument", arg)
                args.append(arg.text.lower())
                sep = self._next()
                if sep.kind == "punct" and sep.text == ")":
                    break
                if not (sep.kind == "punct" and sep.text == ","):
                    raise self._fail("Expected ',' or ')'", sep)
        self._expect_punct(")")
        return name, tuple(args)


def _resolve_type(
    physical: _Token, annotation: Optional[Tuple[str, Tuple[str, ...]]]
) -> LogicalType:
    """Map a physical type token plus annotation to a supported logical type."""

    kind = physical.text.lower()
    label = physical.text if annotation is None else f"{physical.text} ({annotation[0]})"

    if kind == "int32":
        if annotation is None or annotation == ("INT_32", ()):
            return LogicalType.INT32
        if annotation == ("INTEGER", ("32", "true")):
            return LogicalType.INT32
    elif kind in _BYTE_ARRAY_TYPES:
        if annotation is not None and annotation[0] in _TEXT_ANNOTATIONS and not annotation[1]:
            return LogicalType.UTF8
    else:
        raise SchemaError(
            f"Unknown or unsupported primitive type {physical.text!r}",
            line=physical.line,
            column=physical.column,
        )
    raise SchemaError(
        f"Unsupported type {label!r}; expected int32 or byte_array (UTF8)",
        line=physical.line,
        column=physical.column,
    )


def compile_schema(text: str) -> Schema:
    """
    Compile Parquet message-type text into a :class:`Schema`.

    Args:
        text: Message-type declaration (``message <name> { ... }``).

    Returns:
        The compiled schema, columns in declaration order.

    Raises:
        SchemaError: If the text is malformed, declares no or duplicate
            columns, or uses an unsupported type, repetition, or nesting.
    """
    if not isinstance(text, str):
        raise SchemaError(f"Schema text must be str, got {type(text).__name__}")
    return _Parser(text).parse()
