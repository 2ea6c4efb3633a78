"""Family ABC — how one primitive family reads its guard options.

Each family declares which sanitizers and validators it accepts and how
literal arguments are interpreted for a concrete inner type (the width of
an integer, the precision of a float). The option grammar itself lives in
:mod:`guardtype.parsing.attributes` and is shared.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

from guardtype.domain.errors import AttributeSyntaxError
from guardtype.domain.guard import (
    Guard,
    Sanitizer,
    SanitizerKind,
    Validator,
    ValidatorKind,
)
from guardtype.domain.spans import Span, Spanned

if TYPE_CHECKING:
    from guardtype.domain.types import Family, InnerType
    from guardtype.parsing.attributes import OptionItem
    from guardtype.parsing.tokens import Value

FLAG_SANITIZERS = frozenset({SanitizerKind.TRIM, SanitizerKind.LOWERCASE, SanitizerKind.UPPERCASE})
FLAG_VALIDATORS = frozenset({ValidatorKind.NOT_EMPTY, ValidatorKind.FINITE})

# (lower, upper) validator pairs that must be ordered.
BOUND_PAIRS = (
    (ValidatorKind.MIN_LEN, ValidatorKind.MAX_LEN),
    (ValidatorKind.MIN, ValidatorKind.MAX),
)


class NewtypeFamily(ABC):
    """Parsing rules for one primitive family."""

    @property
    @abstractmethod
    def kind(self) -> Family:
        """The family this object handles."""
        ...

    @property
    @abstractmethod
    def sanitizers(self) -> tuple[SanitizerKind, ...]:
        """Sanitizer names accepted in ``sanitize(...)``."""
        ...

    @property
    @abstractmethod
    def validators(self) -> tuple[ValidatorKind, ...]:
        """Validator names accepted in ``validate(...)``."""
        ...

    @abstractmethod
    def validator_argument(self, kind: ValidatorKind, value: Value, inner: InnerType) -> Any:
        """Interpret the ``= <value>`` of a non-``with`` validator."""
        ...

    @abstractmethod
    def coerce_literal(self, raw: Any, inner: InnerType, span: Span, *, what: str) -> Any:
        """Check a literal against the primitive and return its normalized form."""
        ...

    # -- shared behaviour -------------------------------------------------

    def parse_sanitizer(self, item: OptionItem, inner: InnerType) -> Sanitizer:
        kind = SanitizerKind(self._lookup(item, self.sanitizers, "sanitizer"))
        if kind in FLAG_SANITIZERS:
            self._reject_value(item)
            return Sanitizer(kind, item.span)
        value = self._require_value(item)
        return Sanitizer(kind, item.span, expression=value.expression())

    def parse_validator(self, item: OptionItem, inner: InnerType) -> Validator:
        kind = ValidatorKind(self._lookup(item, self.validators, "validator"))
        if kind in FLAG_VALIDATORS:
            self._reject_value(item)
            return Validator(kind, item.span)
        value = self._require_value(item)
        if kind is ValidatorKind.WITH:
            return Validator(kind, item.span, argument=value.expression())
        return Validator(kind, item.span, argument=self.validator_argument(kind, value, inner))

    def parse_default(self, value: Value, inner: InnerType) -> Spanned[str]:
        """Return the default as Python source, normalizing literal defaults."""
        is_literal, raw = value.try_literal()
        if not is_literal:
            return Spanned(value.expression(), value.span)
        coerced = self.coerce_literal(raw, inner, value.span, what="default value")
        return Spanned(repr(coerced), value.span)

    def check_guard(self, guard: Guard) -> None:
        """Reject contradictory bounds such as ``min_len`` above ``max_len``."""
        for lower_kind, upper_kind in BOUND_PAIRS:
            lower = guard.find_validator(lower_kind)
            upper = guard.find_validator(upper_kind)
            if lower is None or upper is None:
                continue
            if lower.argument > upper.argument:  # type: ignore[operator]
                msg = (
                    f"`{lower_kind}` ({lower.argument!r}) cannot be greater than "
                    f"`{upper_kind}` ({upper.argument!r})"
                )
                raise AttributeSyntaxError(msg, upper.span)

    # -- helpers ----------------------------------------------------------

    def _lookup(self, item: OptionItem, allowed: tuple[str, ...], what: str) -> str:
        name = item.name.text
        if name not in allowed:
            names = ", ".join(allowed)
            msg = f"Unknown {what} `{name}` for {self.kind} types. Expected one of: {names}"
            raise AttributeSyntaxError(msg, item.span)
        return name

    @staticmethod
    def _reject_value(item: OptionItem) -> None:
        if item.value is not None:
            msg = f"`{item.name.text}` does not take a value"
            raise AttributeSyntaxError(msg, item.value.span)

    @staticmethod
    def _require_value(item: OptionItem) -> Value:
        if item.value is None:
            msg = f"`{item.name.text}` requires a value: `{item.name.text} = ...`"
            raise AttributeSyntaxError(msg, item.span)
        return item.value


def expect_int(raw: Any, span: Span, *, what: str) -> int:
    if isinstance(raw, bool) or not isinstance(raw, int):
        raise AttributeSyntaxError(f"{what} must be an integer, got {raw!r}", span)
    return raw


def expect_number(raw: Any, span: Span, *, what: str) -> int | float:
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        raise AttributeSyntaxError(f"{what} must be a number, got {raw!r}", span)
    return raw
