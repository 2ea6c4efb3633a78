"""Integer family — bounds are interpreted at the declared width."""

from __future__ import annotations

from typing import Any

from guardtype.domain.errors import AttributeSyntaxError
from guardtype.domain.guard import SanitizerKind, ValidatorKind
from guardtype.domain.spans import Span
from guardtype.domain.types import Family, InnerType, IntegerInner
from guardtype.families.base import NewtypeFamily, expect_int
from guardtype.parsing.tokens import Value


class IntegerFamily(NewtypeFamily):
    """Rules for fixed-width ``int``-backed types."""

    @property
    def kind(self) -> Family:
        return Family.INTEGER

    @property
    def sanitizers(self) -> tuple[SanitizerKind, ...]:
        return (SanitizerKind.WITH,)

    @property
    def validators(self) -> tuple[ValidatorKind, ...]:
        return (ValidatorKind.MIN, ValidatorKind.MAX, ValidatorKind.WITH)

    def validator_argument(self, kind: ValidatorKind, value: Value, inner: InnerType) -> Any:
        return self.coerce_literal(value.literal(), inner, value.span, what=f"`{kind}`")

    def coerce_literal(self, raw: Any, inner: InnerType, span: Span, *, what: str) -> Any:
        assert isinstance(inner, IntegerInner)
        number = expect_int(raw, span, what=what)
        width = inner.width
        if not width.contains(number):
            msg = (
                f"{what} {number} is out of range for {width} "
                f"({width.min_value}..={width.max_value})"
            )
            raise AttributeSyntaxError(msg, span)
        return number
