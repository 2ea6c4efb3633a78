"""Trait compatibility — which derived traits a guarded type may carry.

A trait that is sound on the raw primitive is not automatically sound on the
guarded wrapper. The policy is a declarative table per family, evaluated by
one function:

- traits that build a value from nothing (``default``) need a default value;
- traits that compose or convert values without a checked path
  (``arithmetic``, ``from_inner``) are incompatible with validation;
- float ``ord`` and ``hash`` need the ``finite`` validator, since NaN breaks
  total ordering and hash/equality consistency;
- everything else delegates to the primitive and is always legal.

INVARIANT: The policy fails closed. Unknown names and traits missing from a
family's table are rejected, never silently dropped.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import NoReturn

from guardtype.domain.errors import IncompatibilityReason, TraitCompatibilityError
from guardtype.domain.guard import Guard, ValidatorKind
from guardtype.domain.spans import Span, Spanned
from guardtype.domain.traits import DeriveTrait, lookup_trait
from guardtype.domain.types import Family

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TraitRule:
    """Preconditions for deriving one trait."""

    requires_default: bool = False
    forbids_validation: bool = False
    requires_finite: bool = False
    requires: frozenset[DeriveTrait] = field(default_factory=frozenset)

    def describe(self) -> str:
        parts: list[str] = []
        if self.requires_default:
            parts.append("needs `default = ...`")
        if self.forbids_validation:
            parts.append("no validators")
        if self.requires_finite:
            parts.append("needs `finite`")
        if self.requires:
            parts.append("needs " + ", ".join(f"`{t}`" for t in sorted(self.requires)))
        return "; ".join(parts) or "always"


ALWAYS = TraitRule()
_NEEDS_EQ = TraitRule(requires=frozenset({DeriveTrait.EQ}))

_COMMON: dict[DeriveTrait, TraitRule] = {
    DeriveTrait.REPR: ALWAYS,
    DeriveTrait.STR: ALWAYS,
    DeriveTrait.EQ: ALWAYS,
    DeriveTrait.ORD: _NEEDS_EQ,
    DeriveTrait.HASH: _NEEDS_EQ,
    DeriveTrait.DEFAULT: TraitRule(requires_default=True),
    DeriveTrait.PARSE: ALWAYS,
    DeriveTrait.FROM_INNER: TraitRule(forbids_validation=True),
    DeriveTrait.DEREF: ALWAYS,
    DeriveTrait.COPY: ALWAYS,
    DeriveTrait.BOOL: ALWAYS,
    DeriveTrait.ARITHMETIC: TraitRule(forbids_validation=True),
    DeriveTrait.SERIALIZE: ALWAYS,
    DeriveTrait.DESERIALIZE: ALWAYS,
    DeriveTrait.PYDANTIC: ALWAYS,
}

_NUMERIC: dict[DeriveTrait, TraitRule] = {
    **_COMMON,
    DeriveTrait.INT: ALWAYS,
    DeriveTrait.FLOAT: ALWAYS,
}

STRING_POLICY: Mapping[DeriveTrait, TraitRule] = {
    **_COMMON,
    DeriveTrait.LEN: ALWAYS,
}

INTEGER_POLICY: Mapping[DeriveTrait, TraitRule] = {
    **_NUMERIC,
    DeriveTrait.INDEX: ALWAYS,
}

FLOAT_POLICY: Mapping[DeriveTrait, TraitRule] = {
    **_NUMERIC,
    DeriveTrait.ORD: TraitRule(requires_finite=True, requires=frozenset({DeriveTrait.EQ})),
    DeriveTrait.HASH: TraitRule(requires_finite=True, requires=frozenset({DeriveTrait.EQ})),
}

POLICIES: Mapping[Family, Mapping[DeriveTrait, TraitRule]] = {
    Family.STRING: STRING_POLICY,
    Family.INTEGER: INTEGER_POLICY,
    Family.FLOAT: FLOAT_POLICY,
}


def resolve_traits(derive_traits: Iterable[Spanned[str]]) -> dict[DeriveTrait, Span]:
    """Map requested names to traits, keeping the first position of duplicates.

    Raises:
        TraitCompatibilityError: for the first name outside the closed trait set.
    """
    resolved: dict[DeriveTrait, Span] = {}
    for spanned in derive_traits:
        trait = lookup_trait(spanned.item)
        if trait is None:
            supported = ", ".join(t.value for t in DeriveTrait)
            raise TraitCompatibilityError(
                f"Unknown derive trait `{spanned.item}`. Supported traits: {supported}",
                spanned.span,
                IncompatibilityReason.UNKNOWN_TRAIT,
            )
        resolved.setdefault(trait, spanned.span)
    return resolved


def validate_derive_traits(
    family: Family,
    derive_traits: Iterable[Spanned[str]],
    guard: Guard,
    *,
    has_default: bool,
) -> frozenset[DeriveTrait]:
    """Return the traits to generate, or raise on the first incompatible request.

    Traits are checked in request order.
    """
    requested = resolve_traits(derive_traits)
    table = POLICIES[family]
    has_validation = guard.has_validation()
    has_finite = guard.has_validator(ValidatorKind.FINITE)

    for trait, span in requested.items():
        rule = table.get(trait)
        if rule is None:
            _fail(
                f"Trait `{trait}` cannot be derived for {family} types",
                span,
                IncompatibilityReason.FAMILY_INCOMPATIBLE,
            )
        if rule.requires_default and not has_default:
            _fail(
                f"Trait `{trait}` is requested, but `default = ...` is missing",
                span,
                IncompatibilityReason.MISSING_DEFAULT,
            )
        if rule.forbids_validation and has_validation:
            _fail(
                f"Trait `{trait}` cannot be derived because validation is defined: "
                "its results are not guaranteed to satisfy the validators",
                span,
                IncompatibilityReason.VALIDATION_PRESENT,
            )
        if rule.requires_finite and not has_finite:
            _fail(
                f"Trait `{trait}` can be derived for {family} types only together "
                "with the `finite` validator",
                span,
                IncompatibilityReason.MISSING_FINITE,
            )
        missing = sorted(rule.requires.difference(requested))
        if missing:
            needed = ", ".join(f"`{t}`" for t in missing)
            _fail(
                f"Trait `{trait}` requires {needed} to be derived as well",
                span,
                IncompatibilityReason.MISSING_TRAIT,
            )

    logger.debug("Approved traits for %s: %s", family, sorted(requested))
    return frozenset(requested)


def _fail(message: str, span: Span, reason: IncompatibilityReason) -> NoReturn:
    raise TraitCompatibilityError(message, span, reason)
