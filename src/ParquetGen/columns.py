"""
Typed in-memory column values.

A column is one homogeneous, ordered sequence of primitive values tagged with
its logical type. The set of variants is closed per release (``Integer`` and
``Varchar``) but open to extension: a new variant subclasses :class:`Column`,
declares its ``logical_type``, and implements ``_check_value``. The table
writer only compares logical types and calls :meth:`Column.encode`, so it never
needs to know which concrete variant it is handling.
"""

from __future__ import annotations

import numbers
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, ClassVar, Dict, Iterable, Sequence, Tuple, Type

import pyarrow as pa

from .schema import ColumnDef, LogicalType

__all__ = [
    "Column",
    "Integer",
    "Varchar",
    "column_for",
    "registered_variants",
]

INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1

_VARIANTS: Dict[LogicalType, Type["Column"]] = {}


@dataclass(frozen=True)
class Column(ABC):
    """Base class for typed column variants; only subclasses are instantiable."""

    values: Sequence[Any]

    logical_type: ClassVar[LogicalType]

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        logical_type = cls.__dict__.get("logical_type")
        if isinstance(logical_type, LogicalType):
            _VARIANTS[logical_type] = cls

    def __post_init__(self) -> None:
        if isinstance(self.values, (str, bytes)):
            raise TypeError(
                f"{type(self).__name__} values must be a sequence, "
                f"not {type(self.values).__name__}"
            )
        object.__setattr__(self, "values", tuple(self.values))

    def __len__(self) -> int:
        return len(self.values)

    @property
    def variant(self) -> str:
        return type(self).__name__

    @abstractmethod
    def _check_value(self, index: int, value: Any) -> None:
        """Raise ``TypeError`` or ``ValueError`` if ``value`` does not fit the variant."""

    def validate(self, column_def: ColumnDef) -> None:
        """
        Check every value against the variant and the column's nullability.

        Raises:
            ValueError: If a value is out of range or a required column holds ``None``.
            TypeError: If a value has the wrong Python type.
        """
        for index, value in enumerate(self.values):
            if value is None:
                if column_def.required:
                    raise ValueError(
                        f"row {index} is null but column {column_def.name!r} is required"
                    )
                continue
            self._check_value(index, value)

    def encode(self, column_def: ColumnDef) -> pa.Array:
        """Validate and encode all values as one Arrow batch for ``column_def``."""
        self.validate(column_def)
        return pa.array(self.values, type=self.logical_type.arrow_type)


@dataclass(frozen=True)
class Integer(Column):
    """Column of 32-bit signed integers."""

    values: Sequence[int]

    logical_type: ClassVar[LogicalType] = LogicalType.INT32

    def _check_value(self, index: int, value: Any) -> None:
        if isinstance(value, bool) or not isinstance(value, numbers.Integral):
            raise TypeError(f"row {index} holds {type(value).__name__}, expected int")
        if not INT32_MIN <= int(value) <= INT32_MAX:
            raise ValueError(f"row {index} value {value} is outside the int32 range")


@dataclass(frozen=True)
class Varchar(Column):
    """Column of UTF-8 text values."""

    values: Sequence[str]

    logical_type: ClassVar[LogicalType] = LogicalType.UTF8

    def _check_value(self, index: int, value: Any) -> None:
        if not isinstance(value, str):
            raise TypeError(f"row {index} holds {type(value).__name__}, expected str")


def column_for(logical_type: LogicalType, values: Iterable[Any]) -> Column:
    """Build the column variant registered for ``logical_type``."""

    try:
        variant = _VARIANTS[LogicalType(logical_type)]
    except KeyError:
        raise ValueError(f"No column variant registered for {logical_type!r}") from None
    return variant(tuple(values))


def registered_variants() -> Tuple[Type[Column], ...]:
    return tuple(_VARIANTS.values())
