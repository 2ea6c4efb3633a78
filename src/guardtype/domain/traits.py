"""The closed set of derivable traits.

Each trait maps to a fixed group of generated methods; see the trait
blocks in ``templates/codegen/newtype.py.j2``.
"""

from __future__ import annotations

from enum import StrEnum


class DeriveTrait(StrEnum):
    """Behaviours that may be requested for a generated wrapper type."""

    REPR = "repr"
    STR = "str"
    EQ = "eq"
    ORD = "ord"
    HASH = "hash"
    DEFAULT = "default"
    PARSE = "parse"
    FROM_INNER = "from_inner"
    DEREF = "deref"
    COPY = "copy"
    BOOL = "bool"
    LEN = "len"
    INT = "int"
    FLOAT = "float"
    INDEX = "index"
    ARITHMETIC = "arithmetic"
    SERIALIZE = "serialize"
    DESERIALIZE = "deserialize"
    PYDANTIC = "pydantic"


def lookup_trait(name: str) -> DeriveTrait | None:
    """Return the trait called *name*, or None if it is not recognized."""
    try:
        return DeriveTrait(name)
    except ValueError:
        return None
