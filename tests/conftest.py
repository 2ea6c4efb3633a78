"""Shared pytest fixtures and test helpers for guardtype tests."""

from __future__ import annotations

import itertools
import logging
import types
from collections.abc import Generator, Iterator, Sequence
from pathlib import Path

import pytest
from click.testing import CliRunner

from guardtype.config.settings import GuardtypeSettings
from guardtype.dispatch import Declaration, expand_all
from guardtype.domain.meta import DefaultPolicy, ModuleImport, NewtypeMeta
from guardtype.domain.spans import Span, Spanned
from guardtype.domain.types import Visibility, parse_inner_type
from guardtype.loader import materialize

_module_ids = itertools.count()


def make_meta(
    name: str,
    inner: str,
    derive: Sequence[str] = (),
    *,
    doc: Sequence[str] = (),
    vis: Visibility = Visibility.PUBLIC,
    imports: Sequence[str] = (),
) -> NewtypeMeta:
    """Build a request the way a front end would, with one column per trait."""
    inner_type = parse_inner_type(inner)
    assert inner_type is not None, inner
    module_imports: list[ModuleImport] = []
    for spec in imports:
        parsed = ModuleImport.parse(spec)
        assert parsed is not None, spec
        module_imports.append(parsed)
    traits = tuple(
        Spanned(trait, Span(1, index * 10 + 1, f"{name}.derive"))
        for index, trait in enumerate(derive)
    )
    return NewtypeMeta(
        type_name=Spanned(name, Span(1, 1, f"{name}.name")),
        inner_type=inner_type,
        doc_attrs=tuple(doc),
        vis=vis,
        derive_traits=traits,
        imports=tuple(module_imports),
    )


def build_module(
    name: str,
    inner: str,
    attributes: str = "",
    derive: Sequence[str] = (),
    *,
    default_policy: DefaultPolicy = DefaultPolicy.TRUST,
    imports: Sequence[str] = (),
) -> types.ModuleType:
    """Generate a single wrapper type and execute it as a fresh module."""
    declaration = Declaration(make_meta(name, inner, derive, imports=imports), attributes)
    source, _units = expand_all([declaration], default_policy=default_policy)
    return materialize(source, module_name=f"guardtype_test_{next(_module_ids)}")


def write_declarations(path: Path, body: str) -> Path:
    path.write_text(body, encoding="utf-8")
    return path


USERNAME_TOML = '''\
[[newtype]]
name = "Username"
inner = "str"
doc = "A login handle."
derive = "repr, eq, hash, default"
attributes = "sanitize(trim, lowercase), validate(not_empty, max_len = 20), default = 'guest'"

[[newtype]]
name = "Port"
inner = "u16"
derive = "repr, eq, ord, int"
attributes = "validate(min = 1)"
'''


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None]:
    """CLI invocations reconfigure the guardtype logger; put it back afterwards."""
    gt = logging.getLogger("guardtype")
    handlers, level, propagate = gt.handlers[:], gt.level, gt.propagate
    yield
    gt.handlers = handlers
    gt.setLevel(level)
    gt.propagate = propagate


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def project(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[Path]:
    """Empty project directory set as CWD, isolated from any outer config."""
    monkeypatch.delenv("GUARDTYPE_CONFIG", raising=False)
    monkeypatch.chdir(tmp_path)
    yield tmp_path


@pytest.fixture
def decls(project: Path) -> Path:
    """A valid two-type declaration file inside :func:`project`."""
    return write_declarations(project / "types.toml", USERNAME_TOML)


@pytest.fixture
def settings(project: Path) -> GuardtypeSettings:
    return GuardtypeSettings.from_cli(project_root=project)
