"""Tests for the dispatcher: routing and first-error propagation."""

from __future__ import annotations

import pytest

from guardtype.dispatch import Declaration, expand, expand_all
from guardtype.domain.errors import (
    AttributeSyntaxError,
    DeclarationError,
    IncompatibilityReason,
    TraitCompatibilityError,
)
from tests.conftest import make_meta


class TestExpand:
    def test_routes_by_inner_type(self) -> None:
        assert "expects int" in expand(make_meta("A", "i16")).source
        assert "expects float" in expand(make_meta("B", "f32")).source
        assert "expects str" in expand(make_meta("C", "str")).source

    def test_width_reaches_the_parser(self) -> None:
        expand(make_meta("Wide", "u16"), "validate(max = 300)")
        with pytest.raises(AttributeSyntaxError, match="out of range for u8"):
            expand(make_meta("Narrow", "u8"), "validate(max = 300)")

    def test_source_label_in_errors(self) -> None:
        with pytest.raises(AttributeSyntaxError) as exc_info:
            expand(make_meta("Port", "u16"), "validate(mn = 1)")
        assert exc_info.value.span.source == "Port.attributes"

    def test_parse_errors_come_before_trait_errors(self) -> None:
        with pytest.raises(AttributeSyntaxError):
            expand(make_meta("T", "str", ["clone"]), "validate(bogus)")

    def test_float_arithmetic_approved_without_validators(self) -> None:
        unit = expand(make_meta("Meters", "f64", ["arithmetic"]))
        assert "def __add__" in unit.source
        assert "def __truediv__" in unit.source

    def test_float_arithmetic_rejected_with_finite(self) -> None:
        with pytest.raises(TraitCompatibilityError) as exc_info:
            expand(make_meta("Meters", "f64", ["arithmetic"]), "validate(finite)")
        assert exc_info.value.reason is IncompatibilityReason.VALIDATION_PRESENT

    def test_unchecked_constructor_only_when_requested(self) -> None:
        assert "def new_unchecked" in expand(make_meta("Id", "u64"), "new_unchecked").source
        assert "def new_unchecked" not in expand(make_meta("Id", "u64")).source


class TestExpandAll:
    def test_duplicate_type_name(self) -> None:
        declarations = [Declaration(make_meta("A", "str")), Declaration(make_meta("A", "u8"))]
        with pytest.raises(DeclarationError, match="declared more than once"):
            expand_all(declarations)

    def test_first_error_aborts(self) -> None:
        declarations = [
            Declaration(make_meta("A", "str", ["default"])),
            Declaration(make_meta("B", "u8"), "validate(max = 999)"),
        ]
        with pytest.raises(TraitCompatibilityError) as exc_info:
            expand_all(declarations)
        assert exc_info.value.reason is IncompatibilityReason.MISSING_DEFAULT

    def test_empty(self) -> None:
        source, units = expand_all([])
        assert units == []
        assert "from __future__ import annotations" in source


class TestGeneratedNames:
    def test_helper_name_clashes_with_declared_type(self) -> None:
        declarations = [
            Declaration(make_meta("Port", "u16"), "validate(min = 1)"),
            Declaration(make_meta("PortError", "str")),
        ]
        with pytest.raises(DeclarationError, match="`PortError` generated for `PortError`") as exc_info:
            expand_all(declarations)
        assert exc_info.value.span.source == "PortError.name"

    def test_helper_name_clash_is_order_independent(self) -> None:
        declarations = [
            Declaration(make_meta("PortError", "str")),
            Declaration(make_meta("Port", "u16"), "validate(min = 1)"),
        ]
        with pytest.raises(DeclarationError, match="already generated for `PortError`"):
            expand_all(declarations)

    def test_type_shadowing_a_module_import(self) -> None:
        declarations = [
            Declaration(make_meta("json", "str", ["serialize"])),
        ]
        with pytest.raises(DeclarationError, match="shadows `import json`"):
            expand_all(declarations)

    def test_type_shadowing_an_import_of_another_type(self) -> None:
        declarations = [
            Declaration(make_meta("math", "str")),
            Declaration(make_meta("Ratio", "f64"), "validate(finite)"),
        ]
        with pytest.raises(DeclarationError, match="`math` generated for `math` shadows"):
            expand_all(declarations)

    def test_type_named_any(self) -> None:
        with pytest.raises(DeclarationError, match="shadows `from typing import Any`"):
            expand_all([Declaration(make_meta("Any", "str"))])

    def test_unused_module_name_is_free(self) -> None:
        source, units = expand_all([Declaration(make_meta("json", "str"))])
        assert [u.name for u in units] == ["json"]
        assert "import json" not in source

    def test_conflicting_imports(self) -> None:
        declarations = [
            Declaration(
                make_meta("A", "str", imports=["os.path:join"]), "sanitize(with = join)"
            ),
            Declaration(
                make_meta("B", "str", imports=["posixpath:join"]), "sanitize(with = join)"
            ),
        ]
        with pytest.raises(DeclarationError, match="rebinds `join`"):
            expand_all(declarations)

    def test_shared_imports_are_merged(self) -> None:
        declarations = [
            Declaration(make_meta("A", "str", imports=["textwrap"]), "sanitize(with = textwrap.dedent)"),
            Declaration(make_meta("B", "str", imports=["textwrap"]), "sanitize(with = textwrap.dedent)"),
        ]
        source, _units = expand_all(declarations)
        assert source.count("import textwrap\n") == 1
