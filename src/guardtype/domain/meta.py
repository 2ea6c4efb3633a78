"""Front-end request and generator input bundles."""

from __future__ import annotations

import keyword
from dataclasses import dataclass
from enum import StrEnum

from guardtype.domain.guard import Guard, NewUnchecked
from guardtype.domain.spans import Spanned
from guardtype.domain.traits import DeriveTrait
from guardtype.domain.types import InnerType, Visibility


def _is_name(text: str) -> bool:
    return text.isidentifier() and not keyword.iskeyword(text)


class DefaultPolicy(StrEnum):
    """How a ``default = ...`` value written by the type author is treated.

    ``trust`` stores it as written; ``check`` routes it through the checked
    constructor so it is sanitized and validated on every call.
    """

    TRUST = "trust"
    CHECK = "check"


@dataclass(frozen=True)
class ModuleImport:
    """A module made visible to ``with`` sanitizers and validators.

    ``module`` alone renders ``import module``; with ``name`` it renders
    ``from module import name``.
    """

    module: str
    name: str | None = None

    @classmethod
    def parse(cls, spec: str) -> ModuleImport | None:
        """Read ``"pkg.module"`` or ``"pkg.module:name"``; None when malformed."""
        module, sep, name = spec.strip().partition(":")
        if module == "__future__" or not all(_is_name(part) for part in module.split(".")):
            return None
        if sep and not _is_name(name):
            return None
        return cls(module, name or None)

    @property
    def statement(self) -> str:
        if self.name is None:
            return f"import {self.module}"
        return f"from {self.module} import {self.name}"


@dataclass(frozen=True)
class NewtypeMeta:
    """Structured request produced by a front end. Never mutated.

    ``derive_traits`` carries raw trait names so that unrecognized requests
    reach the compatibility check and are rejected with their position.
    """

    type_name: Spanned[str]
    inner_type: InnerType
    doc_attrs: tuple[str, ...] = ()
    vis: Visibility = Visibility.PUBLIC
    derive_traits: tuple[Spanned[str], ...] = ()
    imports: tuple[ModuleImport, ...] = ()


@dataclass(frozen=True)
class GenerateParams:
    """Fully validated inputs for the code generator."""

    doc_attrs: tuple[str, ...]
    traits: frozenset[DeriveTrait]
    vis: Visibility
    type_name: Spanned[str]
    inner_type: InnerType
    guard: Guard
    new_unchecked: NewUnchecked
    maybe_default_value: Spanned[str] | None = None
    default_policy: DefaultPolicy = DefaultPolicy.TRUST
    imports: tuple[ModuleImport, ...] = ()
