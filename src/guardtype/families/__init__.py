"""Family registry.

One :class:`NewtypeFamily` per primitive family, looked up by the
dispatcher from the request's inner type.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from guardtype.domain.types import Family
from guardtype.families.base import NewtypeFamily
from guardtype.families.float import FloatFamily
from guardtype.families.integer import IntegerFamily
from guardtype.families.string import StringFamily

if TYPE_CHECKING:
    from guardtype.domain.types import InnerType

FAMILY_REGISTRY: dict[Family, NewtypeFamily] = {}


def _register_families() -> None:
    """Populate :data:`FAMILY_REGISTRY` with the built-in families."""
    FAMILY_REGISTRY[Family.STRING] = StringFamily()
    FAMILY_REGISTRY[Family.INTEGER] = IntegerFamily()
    FAMILY_REGISTRY[Family.FLOAT] = FloatFamily()


def family_for(inner: InnerType) -> NewtypeFamily:
    """Return the family object handling *inner*."""
    return FAMILY_REGISTRY[inner.family]


_register_families()

__all__ = ["FAMILY_REGISTRY", "NewtypeFamily", "family_for"]
