"""String family — text sanitizers and length/pattern validators."""

from __future__ import annotations

import re
from typing import Any

from guardtype.domain.errors import AttributeSyntaxError
from guardtype.domain.guard import SanitizerKind, ValidatorKind
from guardtype.domain.spans import Span
from guardtype.domain.types import Family, InnerType
from guardtype.families.base import NewtypeFamily, expect_int
from guardtype.parsing.tokens import Value


class StringFamily(NewtypeFamily):
    """Rules for ``str``-backed types."""

    @property
    def kind(self) -> Family:
        return Family.STRING

    @property
    def sanitizers(self) -> tuple[SanitizerKind, ...]:
        return (
            SanitizerKind.TRIM,
            SanitizerKind.LOWERCASE,
            SanitizerKind.UPPERCASE,
            SanitizerKind.WITH,
        )

    @property
    def validators(self) -> tuple[ValidatorKind, ...]:
        return (
            ValidatorKind.NOT_EMPTY,
            ValidatorKind.MIN_LEN,
            ValidatorKind.MAX_LEN,
            ValidatorKind.REGEX,
            ValidatorKind.WITH,
        )

    def validator_argument(self, kind: ValidatorKind, value: Value, inner: InnerType) -> Any:
        raw = value.literal()
        if kind is ValidatorKind.REGEX:
            if not isinstance(raw, str):
                raise AttributeSyntaxError(f"`regex` must be a string, got {raw!r}", value.span)
            try:
                re.compile(raw)
            except re.error as exc:
                raise AttributeSyntaxError(f"Invalid regex {raw!r}: {exc}", value.span) from exc
            return raw
        length = expect_int(raw, value.span, what=f"`{kind}`")
        if length < 0:
            raise AttributeSyntaxError(f"`{kind}` must not be negative, got {length}", value.span)
        return length

    def coerce_literal(self, raw: Any, inner: InnerType, span: Span, *, what: str) -> Any:
        if not isinstance(raw, str):
            raise AttributeSyntaxError(f"{what} must be a string, got {raw!r}", span)
        return raw
