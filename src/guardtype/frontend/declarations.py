"""TOML declaration files.

A declaration file holds one ``[[newtype]]`` table per wrapper type::

    [[newtype]]
    name = "Username"
    inner = "str"
    doc = "A login handle."
    derive = "repr, eq, hash"
    attributes = "sanitize(trim), validate(not_empty, max_len = 20)"

``derive`` is tokenized like ``attributes`` so that each requested trait
keeps a column for diagnostics.

``imports`` lists modules that ``with`` expressions refer to, either
``"textwrap"`` (``import textwrap``) or ``"myapp.checks:is_slug"``
(``from myapp.checks import is_slug``).
"""

from __future__ import annotations

import keyword
import tomllib
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError

from guardtype.domain.errors import DeclarationError
from guardtype.domain.meta import ModuleImport, NewtypeMeta
from guardtype.domain.spans import Span, Spanned
from guardtype.domain.types import Visibility, known_inner_types, parse_inner_type
from guardtype.dispatch import Declaration
from guardtype.parsing.tokens import TokenStream


class NewtypeModel(BaseModel):
    """One ``[[newtype]]`` table."""

    model_config = {"frozen": True, "extra": "forbid"}

    name: str
    inner: str
    doc: str | list[str] = Field(default_factory=list)
    visibility: Visibility = Visibility.PUBLIC
    derive: str = ""
    attributes: str = ""
    imports: list[str] = Field(default_factory=list)

    def doc_lines(self) -> tuple[str, ...]:
        if isinstance(self.doc, str):
            return tuple(self.doc.strip("\n").splitlines())
        return tuple(self.doc)


class DeclarationFile(BaseModel):
    """Top level of a declaration file."""

    model_config = {"frozen": True, "extra": "forbid"}

    newtype: list[NewtypeModel] = Field(default_factory=list)


def parse_derive_list(text: str, *, source: str) -> tuple[Spanned[str], ...]:
    """Split ``"repr, eq, hash"`` into located trait names.

    Names are not checked against the trait set here; unknown names are
    rejected later by the compatibility check.
    """
    stream = TokenStream(text, source=source)
    names: list[Spanned[str]] = []
    while not stream.at_end():
        token = stream.expect_name("a trait name")
        names.append(Spanned(token.text, token.span))
        if not stream.at_end():
            stream.expect_op(",")
    return tuple(names)


def to_declaration(model: NewtypeModel, *, label: str) -> Declaration:
    """Convert a validated table into a pipeline request."""
    name_span = Span(1, 1, f"{label}.name")
    if not model.name.isidentifier() or keyword.iskeyword(model.name):
        raise DeclarationError(f"`{model.name}` is not a valid Python identifier", name_span)

    inner = parse_inner_type(model.inner)
    if inner is None:
        allowed = ", ".join(known_inner_types())
        raise DeclarationError(
            f"Unknown inner type `{model.inner}`. Expected one of: {allowed}",
            Span(1, 1, f"{label}.inner"),
        )

    imports: list[ModuleImport] = []
    for spec in model.imports:
        module_import = ModuleImport.parse(spec)
        if module_import is None:
            raise DeclarationError(
                f"`{spec}` is not an importable name. Expected `module` or `module:name`",
                Span(1, 1, f"{label}.imports"),
            )
        imports.append(module_import)

    meta = NewtypeMeta(
        type_name=Spanned(model.name, name_span),
        inner_type=inner,
        doc_attrs=model.doc_lines(),
        vis=model.visibility,
        derive_traits=parse_derive_list(model.derive, source=f"{model.name}.derive"),
        imports=tuple(imports),
    )
    return Declaration(meta=meta, attributes=model.attributes)


def parse_declarations(data: dict[str, Any], *, label: str = "<declarations>") -> list[Declaration]:
    """Validate decoded TOML data and convert every table.

    Raises:
        DeclarationError: on schema errors or invalid names/types.
    """
    try:
        document = DeclarationFile.model_validate(data)
    except ValidationError as exc:
        first = exc.errors()[0]
        where = ".".join(str(part) for part in first["loc"])
        raise DeclarationError(f"{where}: {first['msg']}", Span(1, 1, label)) from exc
    return [
        to_declaration(model, label=f"{label}:newtype[{index}]")
        for index, model in enumerate(document.newtype)
    ]


def load_declarations(path: Path) -> list[Declaration]:
    """Read and parse a declaration file."""
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise DeclarationError(f"Cannot read {path}: {exc.strerror or exc}") from exc
    try:
        data = tomllib.loads(raw)
    except tomllib.TOMLDecodeError as exc:
        raise DeclarationError(f"Invalid TOML in {path}: {exc}", Span(1, 1, str(path))) from exc
    return parse_declarations(data, label=path.name)
