"""Guard model — sanitizers, validators, and parsed attributes.

INVARIANT: A value built through the checked constructor has passed every
sanitizer (in declaration order) and satisfied every validator. Only the
opt-in unchecked constructor can bypass the guard.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from guardtype.domain.spans import Span, Spanned


class SanitizerKind(StrEnum):
    TRIM = "trim"
    LOWERCASE = "lowercase"
    UPPERCASE = "uppercase"
    WITH = "with"


class ValidatorKind(StrEnum):
    NOT_EMPTY = "not_empty"
    MIN_LEN = "min_len"
    MAX_LEN = "max_len"
    REGEX = "regex"
    MIN = "min"
    MAX = "max"
    FINITE = "finite"
    WITH = "with"


# One error variant per validator kind.
ERROR_VARIANTS: dict[ValidatorKind, str] = {
    ValidatorKind.NOT_EMPTY: "EMPTY",
    ValidatorKind.MIN_LEN: "TOO_SHORT",
    ValidatorKind.MAX_LEN: "TOO_LONG",
    ValidatorKind.REGEX: "REGEX_MISMATCH",
    ValidatorKind.MIN: "TOO_SMALL",
    ValidatorKind.MAX: "TOO_BIG",
    ValidatorKind.FINITE: "NOT_FINITE",
    ValidatorKind.WITH: "INVALID",
}


@dataclass(frozen=True)
class Sanitizer:
    """An always-succeeding transformation applied before validation.

    ``expression`` holds the user-supplied callable for ``with`` sanitizers.
    """

    kind: SanitizerKind
    span: Span
    expression: str | None = None


@dataclass(frozen=True)
class Validator:
    """A possibly-rejecting check applied after all sanitizers.

    ``argument`` holds the bound (``min``/``max``/``min_len``/``max_len``),
    the pattern (``regex``), or the callable source (``with``).
    """

    kind: ValidatorKind
    span: Span
    argument: int | float | str | None = None

    @property
    def variant(self) -> str:
        return ERROR_VARIANTS[self.kind]


@dataclass(frozen=True)
class Guard:
    """Ordered sanitizers and validators attached to a wrapper type."""

    sanitizers: tuple[Sanitizer, ...] = ()
    validators: tuple[Validator, ...] = ()

    def has_validation(self) -> bool:
        return len(self.validators) > 0

    def has_validator(self, kind: ValidatorKind) -> bool:
        return any(v.kind is kind for v in self.validators)

    def find_validator(self, kind: ValidatorKind) -> Validator | None:
        for validator in self.validators:
            if validator.kind is kind:
                return validator
        return None


@dataclass(frozen=True)
class NewUnchecked:
    """Records whether (and where) ``new_unchecked`` was requested."""

    span: Span | None = None

    def __bool__(self) -> bool:
        return self.span is not None


@dataclass(frozen=True)
class Attributes:
    """Result of parsing a configuration string."""

    guard: Guard
    new_unchecked: NewUnchecked = NewUnchecked()
    maybe_default_value: Spanned[str] | None = None

    @property
    def has_default(self) -> bool:
        return self.maybe_default_value is not None
