"""Attribute parser — configuration string to :class:`Attributes`.

Grammar::

    attributes := [option ("," option)* [","]]
    option     := "sanitize" "(" items ")" | "validate" "(" items ")"
                | "default" "=" value | "new_unchecked"
    items      := [item ("," item)* [","]]
    item       := NAME ["=" value]

The option structure is shared by every family; what a given sanitizer,
validator or literal means is decided by the family object.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from guardtype.domain.errors import AttributeSyntaxError
from guardtype.domain.guard import Attributes, Guard, NewUnchecked, Sanitizer, Validator
from guardtype.domain.spans import DEFAULT_SOURCE, Span, Spanned
from guardtype.parsing.tokens import Token, TokenStream, Value

if TYPE_CHECKING:
    from guardtype.domain.types import InnerType
    from guardtype.families.base import NewtypeFamily

logger = logging.getLogger(__name__)

OPTIONS = ("sanitize", "validate", "default", "new_unchecked")


@dataclass(frozen=True)
class OptionItem:
    """One entry of a ``sanitize(...)`` or ``validate(...)`` list."""

    name: Token
    value: Value | None = None

    @property
    def span(self) -> Span:
        return self.name.span


def _parse_items(stream: TokenStream) -> list[OptionItem]:
    stream.expect_op("(")
    items: list[OptionItem] = []
    while not stream.is_op(")"):
        name = stream.expect_name("a sanitizer or validator name")
        value = None
        if stream.is_op("="):
            stream.next()
            value = stream.take_value()
        items.append(OptionItem(name, value))
        if stream.is_op(","):
            stream.next()
        elif not stream.is_op(")"):
            token = stream.peek()
            raise AttributeSyntaxError(f"Expected `,` or `)`, found {token.describe()}", token.span)
    stream.expect_op(")")
    return items


def parse_attributes(
    text: str,
    family: NewtypeFamily,
    inner: InnerType,
    *,
    source: str = DEFAULT_SOURCE,
) -> Attributes:
    """Parse a configuration string for a type of the given family.

    Raises:
        AttributeSyntaxError: positioned at the first offending token.
    """
    stream = TokenStream(text, source=source)
    seen: dict[str, Span] = {}
    sanitizers: list[Sanitizer] = []
    validators: list[Validator] = []
    new_unchecked = NewUnchecked()
    default: Spanned[str] | None = None

    while not stream.at_end():
        option = stream.expect_name("an option name")
        if option.text not in OPTIONS:
            allowed = ", ".join(OPTIONS)
            msg = f"Unknown option `{option.text}`. Expected one of: {allowed}"
            raise AttributeSyntaxError(msg, option.span)
        if option.text in seen:
            first = seen[option.text]
            msg = f"Option `{option.text}` is specified more than once (first at {first})"
            raise AttributeSyntaxError(msg, option.span)
        seen[option.text] = option.span

        if option.text == "sanitize":
            for item in _parse_items(stream):
                sanitizers.append(family.parse_sanitizer(item, inner))
        elif option.text == "validate":
            for item in _parse_items(stream):
                validators.append(_check_unique(family.parse_validator(item, inner), validators))
        elif option.text == "default":
            stream.expect_op("=")
            default = family.parse_default(stream.take_value(), inner)
        else:
            new_unchecked = NewUnchecked(option.span)

        if not stream.at_end():
            token = stream.peek()
            if not token.is_op(","):
                msg = f"Expected `,` between options, found {token.describe()}"
                raise AttributeSyntaxError(msg, token.span)
            stream.next()

    guard = Guard(sanitizers=tuple(sanitizers), validators=tuple(validators))
    family.check_guard(guard)
    logger.debug(
        "Parsed attributes for %s: %d sanitizers, %d validators",
        source,
        len(guard.sanitizers),
        len(guard.validators),
    )
    return Attributes(guard=guard, new_unchecked=new_unchecked, maybe_default_value=default)


def _check_unique(validator: Validator, existing: list[Validator]) -> Validator:
    """Each validator kind may appear once: error variants are 1:1 with validators."""
    for other in existing:
        if other.kind is validator.kind:
            msg = f"Validator `{validator.kind}` is specified more than once (first at {other.span})"
            raise AttributeSyntaxError(msg, validator.span)
    return validator
