"""
Runtime value stubs for the Monkey language.

A downstream evaluator represents every value as a tagged object. Only the
tags and their textual inspection are defined here; there is no evaluation.

Classes:
    ObjectType: The closed set of value tags.
    Object: Protocol shared by all values (`type()` and `inspect()`).
    Integer, Boolean, Null: Concrete values.

`NULL`, `TRUE` and `FALSE` are shared singletons; use `native_bool_to_object`
rather than constructing new booleans.
"""

from enum import Enum
from typing import Any, Protocol


class ObjectType(str, Enum):
    INTEGER = "INTEGER"
    BOOLEAN = "BOOLEAN"
    NULL = "NULL"


class Object(Protocol):  # pragma: no cover
    """Protocol for all Monkey runtime values."""

    def type(self) -> ObjectType: ...

    def inspect(self) -> str: ...


class Integer:
    """A signed 64-bit integer value."""

    def __init__(self, value: int) -> None:
        self.value = value

    def type(self) -> ObjectType:
        return ObjectType.INTEGER

    def inspect(self) -> str:
        return str(self.value)

    def __repr__(self) -> str:
        return f"Integer({self.value})"

    def __eq__(self, other: Any) -> bool:
        return isinstance(other, Integer) and self.value == other.value

    def __hash__(self) -> int:
        return hash((ObjectType.INTEGER, self.value))


class Boolean:
    def __init__(self, value: bool) -> None:
        self.value = value

    def type(self) -> ObjectType:
        return ObjectType.BOOLEAN

    def inspect(self) -> str:
        return "true" if self.value else "false"

    def __repr__(self) -> str:
        return f"Boolean({self.value})"


class Null:
    def type(self) -> ObjectType:
        return ObjectType.NULL

    def inspect(self) -> str:
        return "null"

    def __repr__(self) -> str:
        return "Null()"


NULL = Null()
TRUE = Boolean(True)
FALSE = Boolean(False)


def native_bool_to_object(value: bool) -> Boolean:
    """Maps a Python bool onto the shared `TRUE` / `FALSE` singletons."""
    return TRUE if value else FALSE


__all__ = [
    "FALSE",
    "NULL",
    "TRUE",
    "Boolean",
    "Integer",
    "Null",
    "Object",
    "ObjectType",
    "native_bool_to_object",
]
