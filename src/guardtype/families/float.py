"""Float family — bounds are rounded to the declared precision."""

from __future__ import annotations

import math
from typing import Any

from guardtype.domain.errors import AttributeSyntaxError
from guardtype.domain.guard import SanitizerKind, ValidatorKind
from guardtype.domain.spans import Span
from guardtype.domain.types import Family, FloatInner, InnerType
from guardtype.families.base import NewtypeFamily, expect_number
from guardtype.parsing.tokens import Value


class FloatFamily(NewtypeFamily):
    """Rules for ``float``-backed types (``f32`` / ``f64``)."""

    @property
    def kind(self) -> Family:
        return Family.FLOAT

    @property
    def sanitizers(self) -> tuple[SanitizerKind, ...]:
        return (SanitizerKind.WITH,)

    @property
    def validators(self) -> tuple[ValidatorKind, ...]:
        return (ValidatorKind.MIN, ValidatorKind.MAX, ValidatorKind.FINITE, ValidatorKind.WITH)

    def validator_argument(self, kind: ValidatorKind, value: Value, inner: InnerType) -> Any:
        return self.coerce_literal(value.literal(), inner, value.span, what=f"`{kind}`")

    def coerce_literal(self, raw: Any, inner: InnerType, span: Span, *, what: str) -> Any:
        assert isinstance(inner, FloatInner)
        try:
            number = float(expect_number(raw, span, what=what))
        except OverflowError as exc:
            raise AttributeSyntaxError(f"{what} {raw} does not fit in a float", span) from exc
        if not math.isfinite(number):
            raise AttributeSyntaxError(f"{what} must be finite, got {number!r}", span)
        if not inner.width.is_representable(number):
            raise AttributeSyntaxError(
                f"{what} {number!r} is out of range for {inner.width}", span
            )
        return inner.width.round(number)
