"""Dispatcher — routes a request to its family pipeline.

Pipeline: parse attributes → validate derive traits → generate. Each stage
either returns the input of the next one or raises a positioned
:class:`~guardtype.domain.errors.GuardTypeError`; the first error aborts the
expansion and nothing is emitted.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

import structlog

from guardtype.codegen.generator import (
    FUTURE_IMPORT,
    GeneratedUnit,
    bound_name,
    generate,
    render_module,
)
from guardtype.compat import validate_derive_traits
from guardtype.domain.errors import DeclarationError
from guardtype.domain.meta import DefaultPolicy, GenerateParams, NewtypeMeta
from guardtype.families import family_for
from guardtype.parsing.attributes import parse_attributes

if TYPE_CHECKING:
    from jinja2 import Environment

    from guardtype.domain.types import InnerType
    from guardtype.families.base import NewtypeFamily

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Declaration:
    """A front-end request paired with its raw configuration string."""

    meta: NewtypeMeta
    attributes: str = ""

    @property
    def attributes_source(self) -> str:
        return f"{self.meta.type_name.item}.attributes"


def _run_pipeline(
    family: NewtypeFamily,
    inner: InnerType,
    meta: NewtypeMeta,
    attributes: str,
    *,
    source: str,
    default_policy: DefaultPolicy,
    env: Environment | None,
) -> GeneratedUnit:
    parsed = parse_attributes(attributes, family, inner, source=source)
    traits = validate_derive_traits(
        family.kind,
        meta.derive_traits,
        parsed.guard,
        has_default=parsed.has_default,
    )
    params = GenerateParams(
        doc_attrs=meta.doc_attrs,
        traits=traits,
        vis=meta.vis,
        type_name=meta.type_name,
        inner_type=inner,
        guard=parsed.guard,
        new_unchecked=parsed.new_unchecked,
        maybe_default_value=parsed.maybe_default_value,
        default_policy=default_policy,
        imports=meta.imports,
    )
    return generate(params, env=env)


def expand(
    meta: NewtypeMeta,
    attributes: str = "",
    *,
    source: str | None = None,
    default_policy: DefaultPolicy = DefaultPolicy.TRUST,
    env: Environment | None = None,
) -> GeneratedUnit:
    """Expand one request into a generated unit.

    The family is chosen from ``meta.inner_type``; the concrete inner type
    (and so the integer width or float precision) travels with it through
    every stage. Log records emitted while expanding carry ``newtype`` and
    ``source`` context keys.
    """
    inner = meta.inner_type
    family = family_for(inner)
    source = source or f"{meta.type_name.item}.attributes"
    with structlog.contextvars.bound_contextvars(newtype=meta.type_name.item, source=source):
        logger.debug("Expanding %s over %s", meta.type_name.item, inner.label)
        return _run_pipeline(
            family,
            inner,
            meta,
            attributes,
            source=source,
            default_policy=default_policy,
            env=env,
        )


def _check_names(declarations: Sequence[Declaration], units: Sequence[GeneratedUnit]) -> None:
    """Reject generated names that would overwrite one another in one module.

    Raises:
        DeclarationError: if a generated class name is bound twice, shadows an
            import of the module, or two imports bind the same name.
    """
    bindings: dict[str, str] = {"annotations": FUTURE_IMPORT}
    for declaration, unit in zip(declarations, units, strict=True):
        for statement in unit.imports:
            name = bound_name(statement)
            previous = bindings.setdefault(name, statement)
            if previous != statement:
                raise DeclarationError(
                    f"`{statement}` for `{unit.name}` rebinds `{name}`, already bound by `{previous}`",
                    declaration.meta.type_name.span,
                )

    owners: dict[str, str] = {}
    for declaration, unit in zip(declarations, units, strict=True):
        span = declaration.meta.type_name.span
        for name in unit.defines:
            if name in owners:
                raise DeclarationError(
                    f"`{name}` generated for `{unit.name}` is already generated for `{owners[name]}`",
                    span,
                )
            if name in bindings:
                raise DeclarationError(
                    f"`{name}` generated for `{unit.name}` shadows `{bindings[name]}`",
                    span,
                )
            owners[name] = unit.name


def expand_all(
    declarations: Iterable[Declaration],
    *,
    header: bool = True,
    default_policy: DefaultPolicy = DefaultPolicy.TRUST,
    env: Environment | None = None,
) -> tuple[str, list[GeneratedUnit]]:
    """Expand every declaration and render them as one module.

    Raises:
        DeclarationError: if two declarations share a type name, or their
            generated names collide with each other or with the imports.
        GuardTypeError: the first error raised by any declaration.
    """
    declarations = list(declarations)
    units: list[GeneratedUnit] = []
    seen: set[str] = set()
    for declaration in declarations:
        name = declaration.meta.type_name
        if name.item in seen:
            raise DeclarationError(f"Type `{name.item}` is declared more than once", name.span)
        seen.add(name.item)
        units.append(
            expand(
                declaration.meta,
                declaration.attributes,
                source=declaration.attributes_source,
                default_policy=default_policy,
                env=env,
            )
        )
    _check_names(declarations, units)
    return render_module(units, header=header, env=env), units
