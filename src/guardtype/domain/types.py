"""Inner-type families, primitive widths, and visibility.

The inner type is a closed set of three variants. Numeric variants carry a
width that determines the range (integers) or precision (floats) that
literals and runtime values are interpreted at.
"""

from __future__ import annotations

import math
import struct
from dataclasses import dataclass
from enum import StrEnum


class Family(StrEnum):
    """Primitive families with their own parsing and trait policy."""

    STRING = "string"
    INTEGER = "integer"
    FLOAT = "float"


class Visibility(StrEnum):
    """Whether a generated type is exported from its module."""

    PUBLIC = "public"
    PRIVATE = "private"


class IntegerWidth(StrEnum):
    """Fixed-width integer primitives.

    Pointer-sized widths are fixed at 64 bits so that generated code does
    not depend on the host that ran the generator.
    """

    U8 = "u8"
    U16 = "u16"
    U32 = "u32"
    U64 = "u64"
    U128 = "u128"
    USIZE = "usize"
    I8 = "i8"
    I16 = "i16"
    I32 = "i32"
    I64 = "i64"
    I128 = "i128"
    ISIZE = "isize"

    @property
    def signed(self) -> bool:
        return self.value.startswith("i")

    @property
    def bits(self) -> int:
        digits = self.value[1:]
        return 64 if digits == "size" else int(digits)

    @property
    def min_value(self) -> int:
        return -(2 ** (self.bits - 1)) if self.signed else 0

    @property
    def max_value(self) -> int:
        return 2 ** (self.bits - 1) - 1 if self.signed else 2**self.bits - 1

    def contains(self, value: int) -> bool:
        return self.min_value <= value <= self.max_value


class FloatWidth(StrEnum):
    """IEEE 754 binary floating-point primitives."""

    F32 = "f32"
    F64 = "f64"

    def round(self, value: float) -> float:
        """Round *value* to this precision.

        Raises:
            OverflowError: if a finite *value* does not fit in single precision.
        """
        if self is FloatWidth.F64:
            return float(value)
        return struct.unpack("<f", struct.pack("<f", value))[0]

    def is_representable(self, value: float) -> bool:
        if not math.isfinite(value):
            return True
        try:
            self.round(value)
        except OverflowError:
            return False
        return True


@dataclass(frozen=True)
class StringInner:
    """``str`` inner type."""

    @property
    def family(self) -> Family:
        return Family.STRING

    @property
    def python_type(self) -> str:
        return "str"

    @property
    def label(self) -> str:
        return "str"


@dataclass(frozen=True)
class IntegerInner:
    """``int`` inner type constrained to a fixed width."""

    width: IntegerWidth

    @property
    def family(self) -> Family:
        return Family.INTEGER

    @property
    def python_type(self) -> str:
        return "int"

    @property
    def label(self) -> str:
        return self.width.value


@dataclass(frozen=True)
class FloatInner:
    """``float`` inner type at a given precision."""

    width: FloatWidth

    @property
    def family(self) -> Family:
        return Family.FLOAT

    @property
    def python_type(self) -> str:
        return "float"

    @property
    def label(self) -> str:
        return self.width.value


InnerType = StringInner | IntegerInner | FloatInner

INNER_TYPE_ALIASES: dict[str, str] = {
    "string": "str",
    "int": "i64",
    "float": "f64",
}


def parse_inner_type(name: str) -> InnerType | None:
    """Resolve a primitive name (``str``, ``u8``, ``f32``, ...) to an inner type.

    Returns None when *name* is not a known primitive.
    """
    key = name.strip().lower()
    key = INNER_TYPE_ALIASES.get(key, key)
    if key == "str":
        return StringInner()
    if key in IntegerWidth._value2member_map_:
        return IntegerInner(IntegerWidth(key))
    if key in FloatWidth._value2member_map_:
        return FloatInner(FloatWidth(key))
    return None


def known_inner_types() -> list[str]:
    """All primitive names accepted by :func:`parse_inner_type`."""
    names = ["str", *(w.value for w in IntegerWidth), *(w.value for w in FloatWidth)]
    return names + sorted(INNER_TYPE_ALIASES)
