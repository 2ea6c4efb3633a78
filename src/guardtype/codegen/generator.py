"""Code generator — turns :class:`GenerateParams` into Python source.

Generation is a pure function of its inputs: traits render in the fixed
order of the template, imports are sorted, and nothing time- or
host-dependent is emitted.
"""

from __future__ import annotations

import functools
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from guardtype import __version__
from guardtype.codegen.templates import build_template_environment
from guardtype.domain.guard import Guard, SanitizerKind, Validator, ValidatorKind
from guardtype.domain.meta import DefaultPolicy, GenerateParams
from guardtype.domain.traits import DeriveTrait
from guardtype.domain.types import FloatInner, FloatWidth, IntegerInner, Visibility

if TYPE_CHECKING:
    from jinja2 import Environment

logger = logging.getLogger(__name__)

FUTURE_IMPORT = "from __future__ import annotations"
COMPARISONS = (("__lt__", "<"), ("__le__", "<="), ("__gt__", ">"), ("__ge__", ">="))
STRING_OPERATORS = (("__add__", "+"),)
INTEGER_OPERATORS = (("__add__", "+"), ("__sub__", "-"), ("__mul__", "*"))
FLOAT_OPERATORS = (*INTEGER_OPERATORS, ("__truediv__", "/"))

_SANITIZER_STATEMENTS: dict[SanitizerKind, str] = {
    SanitizerKind.TRIM: "value = value.strip()",
    SanitizerKind.LOWERCASE: "value = value.lower()",
    SanitizerKind.UPPERCASE: "value = value.upper()",
}


@dataclass(frozen=True)
class GeneratedUnit:
    """Source for one wrapper type and its associated items.

    ``defines`` holds every top-level name the source binds; ``exports`` is
    the public subset listed in ``__all__``.
    """

    name: str
    source: str
    defines: tuple[str, ...]
    exports: tuple[str, ...]
    imports: tuple[str, ...]


@dataclass(frozen=True)
class ValidatorCheck:
    """One rendered ``if <condition>: raise ...`` line of ``validate``."""

    member: str
    condition: str
    message: str


@functools.cache
def _default_environment() -> Environment:
    return build_template_environment("codegen")


def _check_for(validator: Validator, name: str) -> ValidatorCheck:
    arg = validator.argument
    kind = validator.kind
    if kind is ValidatorKind.NOT_EMPTY:
        condition, message = "not value", f"{name} must not be empty"
    elif kind is ValidatorKind.MIN_LEN:
        condition = f"len(value) < {arg!r}"
        message = f"{name} is too short: expected at least {arg} characters"
    elif kind is ValidatorKind.MAX_LEN:
        condition = f"len(value) > {arg!r}"
        message = f"{name} is too long: expected at most {arg} characters"
    elif kind is ValidatorKind.REGEX:
        condition = "cls._PATTERN.search(value) is None"
        message = f"{name} does not match the pattern {arg!r}"
    elif kind is ValidatorKind.MIN:
        condition = f"value < {arg!r}"
        message = f"{name} is too small: expected at least {arg!r}"
    elif kind is ValidatorKind.MAX:
        condition = f"value > {arg!r}"
        message = f"{name} is too big: expected at most {arg!r}"
    elif kind is ValidatorKind.FINITE:
        condition, message = "not math.isfinite(value)", f"{name} must be a finite number"
    else:
        condition = f"not ({arg})(value)"
        message = f"{name} is rejected by its validation predicate"
    return ValidatorCheck(member=validator.variant, condition=condition, message=message)


def _sanitize_lines(guard: Guard) -> list[str]:
    lines: list[str] = []
    for sanitizer in guard.sanitizers:
        if sanitizer.kind is SanitizerKind.WITH:
            lines.append(f"value = ({sanitizer.expression})(value)")
        else:
            lines.append(_SANITIZER_STATEMENTS[sanitizer.kind])
    return lines


def _docstring(doc_attrs: Sequence[str], fallback: str) -> str:
    lines = [line.rstrip().replace("\\", "\\\\").replace('"', '\\"') for line in doc_attrs]
    while lines and not lines[-1]:
        lines.pop()
    if not lines:
        lines = [fallback]
    if len(lines) == 1:
        return f'    """{lines[0]}"""'
    body = "\n".join(f"    {line}" if line else "" for line in lines[1:])
    return f'    """{lines[0]}\n{body}\n    """'


def _imports(params: GenerateParams) -> tuple[str, ...]:
    guard, traits = params.guard, params.traits
    modules: set[str] = set()
    if guard.has_validation():
        modules.add("enum")
    if guard.has_validator(ValidatorKind.FINITE):
        modules.add("math")
    if guard.has_validator(ValidatorKind.REGEX):
        modules.add("re")
    if isinstance(params.inner_type, FloatInner) and params.inner_type.width is FloatWidth.F32:
        modules.add("struct")
    if traits & {DeriveTrait.SERIALIZE, DeriveTrait.DESERIALIZE}:
        modules.add("json")
    lines = [f"import {module}" for module in sorted(modules)]
    lines.append("from typing import Any")
    lines.extend(sorted({imp.statement for imp in params.imports}.difference(lines)))
    return tuple(lines)


def bound_name(statement: str) -> str:
    """Name an import statement binds: ``import a.b`` binds ``a``."""
    if statement.startswith("from "):
        return statement.rsplit(" ", 1)[-1]
    return statement.removeprefix("import ").split(".", 1)[0]


def build_context(params: GenerateParams) -> dict[str, Any]:
    """Assemble the template context for one wrapper type."""
    inner = params.inner_type
    name = params.type_name.item
    family = inner.family.value
    guard = params.guard
    has_parse_error = DeriveTrait.PARSE in params.traits and family != "string"
    regex = guard.find_validator(ValidatorKind.REGEX)

    if isinstance(inner, IntegerInner):
        operators = INTEGER_OPERATORS
        int_min, int_max = inner.width.min_value, inner.width.max_value
    else:
        operators = FLOAT_OPERATORS if isinstance(inner, FloatInner) else STRING_OPERATORS
        int_min = int_max = None

    return {
        "name": name,
        "family": family,
        "label": inner.label,
        "python_type": inner.python_type,
        "docstring": _docstring(params.doc_attrs, f"Guarded wrapper around ``{inner.label}``."),
        "error_kind": f"{name}ErrorKind",
        "error_name": f"{name}Error",
        "parse_error": f"{name}ParseError" if has_parse_error else None,
        "checks": [_check_for(v, name) for v in guard.validators],
        "sanitize_lines": _sanitize_lines(guard),
        "recoerce": any(s.kind is SanitizerKind.WITH for s in guard.sanitizers),
        "pattern": regex.argument if regex is not None else None,
        "int_min": int_min,
        "int_max": int_max,
        "new_unchecked": bool(params.new_unchecked),
        "default": params.maybe_default_value.item if params.maybe_default_value else None,
        "default_checked": params.default_policy is DefaultPolicy.CHECK,
        "traits": {t.value for t in params.traits},
        "ieee_eq": family == "float" and not guard.has_validator(ValidatorKind.FINITE),
        "comparisons": COMPARISONS,
        "operators": operators,
    }


def _defines(context: dict[str, Any]) -> tuple[str, ...]:
    names = [context["name"]]
    if context["checks"]:
        names.extend([context["error_kind"], context["error_name"]])
    if context["parse_error"]:
        names.append(context["parse_error"])
    return tuple(names)


def generate(params: GenerateParams, *, env: Environment | None = None) -> GeneratedUnit:
    """Render the wrapper type described by *params*."""
    env = env or _default_environment()
    context = build_context(params)
    source = env.get_template("newtype.py.j2").render(**context)
    defines = _defines(context)
    logger.debug("Generated %s (%d traits)", context["name"], len(params.traits))
    return GeneratedUnit(
        name=context["name"],
        source=source.rstrip() + "\n",
        defines=defines,
        exports=defines if params.vis is Visibility.PUBLIC else (),
        imports=_imports(params),
    )


def _ordered_imports(units: Sequence[GeneratedUnit]) -> list[str]:
    lines = {line for unit in units for line in unit.imports}
    plain = sorted(line for line in lines if line.startswith("import "))
    from_lines = sorted(line for line in lines if line.startswith("from "))
    return plain + from_lines


def render_module(
    units: Sequence[GeneratedUnit],
    *,
    header: bool = True,
    env: Environment | None = None,
) -> str:
    """Compose generated units into one importable module."""
    env = env or _default_environment()
    exports = [name for unit in units for name in unit.exports]
    source = env.get_template("module.py.j2").render(
        header=header,
        version=__version__,
        future_import=FUTURE_IMPORT,
        imports=_ordered_imports(units),
        exports=exports,
        units=units,
    )
    return source.rstrip() + "\n"
