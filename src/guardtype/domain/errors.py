"""Positioned error hierarchy for the generation pipeline.

Every stage raises a subclass of :class:`GuardTypeError`. The first error
aborts the expansion; there is no partial output.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from guardtype.domain.spans import Span


class GuardTypeError(Exception):
    """Base class for all pipeline errors."""

    code = "GUARDTYPE_ERROR"

    def __init__(self, message: str, span: Span | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.span = span

    def __str__(self) -> str:
        if self.span is None:
            return self.message
        return f"{self.span}: {self.message}"

    def detail(self) -> dict[str, Any]:
        """Structured position info for service-layer error payloads."""
        if self.span is None:
            return {}
        return {
            "source": self.span.source,
            "line": self.span.line,
            "column": self.span.column,
        }


class DeclarationError(GuardTypeError):
    """A declaration file or front-end request is malformed."""

    code = "DECLARATION_INVALID"


class AttributeSyntaxError(GuardTypeError):
    """A configuration string is malformed or contradictory."""

    code = "ATTRIBUTE_SYNTAX"


class IncompatibilityReason(StrEnum):
    UNKNOWN_TRAIT = "unknown_trait"
    FAMILY_INCOMPATIBLE = "family_incompatible"
    MISSING_DEFAULT = "missing_default"
    VALIDATION_PRESENT = "validation_present"
    MISSING_FINITE = "missing_finite"
    MISSING_TRAIT = "missing_trait"


class TraitCompatibilityError(GuardTypeError):
    """A requested trait cannot be derived for this guard and family."""

    code = "TRAIT_INCOMPATIBLE"

    def __init__(self, message: str, span: Span | None, reason: IncompatibilityReason) -> None:
        super().__init__(message, span)
        self.reason = reason

    def detail(self) -> dict[str, Any]:
        return {**super().detail(), "reason": self.reason.value}


class GenerationError(GuardTypeError):
    """Generated source failed its compile check."""

    code = "GENERATION_FAILED"
