"""Behaviour of generated wrapper types once executed."""

from __future__ import annotations

import copy
import math
import operator
import struct

import pydantic
import pytest

from guardtype.domain.meta import DefaultPolicy
from tests.conftest import build_module


class TestCheckedConstructor:
    def test_positive_integer(self) -> None:
        mod = build_module("Positive", "i32", "validate(min = 1)", ["eq", "ord"])
        assert mod.Positive.new(5).into_inner() == 5
        with pytest.raises(mod.PositiveError) as exc_info:
            mod.Positive.new(-1)
        assert exc_info.value.kind is mod.PositiveErrorKind.TOO_SMALL
        assert not hasattr(mod.Positive, "new_unchecked")
        assert mod.Positive.new(2) < mod.Positive.new(5)

    def test_sanitize_then_validate(self) -> None:
        mod = build_module("Label", "str", "sanitize(trim), validate(not_empty)")
        with pytest.raises(mod.LabelError) as exc_info:
            mod.Label.new("   ")
        assert exc_info.value.kind is mod.LabelErrorKind.EMPTY
        assert mod.Label.new("  hi ").into_inner() == "hi"

    def test_sanitizers_run_in_order(self) -> None:
        mod = build_module(
            "Tag", "str", "sanitize(with = lambda s: s + ' X', lowercase, trim)"
        )
        assert mod.Tag.new(" A").into_inner() == "a x"
        assert mod.Tag.sanitize(" A") == "a x"

    def test_first_failing_validator_is_reported(self) -> None:
        mod = build_module("Code", "str", "validate(not_empty, min_len = 3, max_len = 5)")
        assert mod.Code.new("abcd").into_inner() == "abcd"
        with pytest.raises(mod.CodeError) as exc_info:
            mod.Code.new("")
        assert exc_info.value.kind is mod.CodeErrorKind.EMPTY
        with pytest.raises(mod.CodeError) as exc_info:
            mod.Code.new("ab")
        assert exc_info.value.kind is mod.CodeErrorKind.TOO_SHORT
        with pytest.raises(mod.CodeError) as exc_info:
            mod.Code.new("abcdef")
        assert exc_info.value.kind is mod.CodeErrorKind.TOO_LONG

    def test_error_is_value_error(self) -> None:
        mod = build_module("Code", "str", "validate(not_empty)")
        with pytest.raises(ValueError, match="Code must not be empty"):
            mod.Code.new("")

    def test_regex_uses_search(self) -> None:
        mod = build_module("Digits", "str", "validate(regex = '[0-9]')")
        assert mod.Digits.new("a1b").into_inner() == "a1b"
        with pytest.raises(mod.DigitsError) as exc_info:
            mod.Digits.new("abc")
        assert exc_info.value.kind is mod.DigitsErrorKind.REGEX_MISMATCH

    def test_custom_validator(self) -> None:
        mod = build_module("Word", "str", "validate(with = str.isalpha)")
        assert mod.Word.new("abc").into_inner() == "abc"
        with pytest.raises(mod.WordError) as exc_info:
            mod.Word.new("a b")
        assert exc_info.value.kind is mod.WordErrorKind.INVALID

    def test_sanitizer_from_imported_module(self) -> None:
        mod = build_module(
            "Block", "str", "sanitize(with = textwrap.dedent)", imports=["textwrap"]
        )
        assert mod.Block.new("  x\n  y").into_inner() == "x\ny"

    def test_validator_from_imported_name(self) -> None:
        mod = build_module(
            "Reserved", "str", "validate(with = iskeyword)", imports=["keyword:iskeyword"]
        )
        assert mod.Reserved.new("class").into_inner() == "class"
        with pytest.raises(mod.ReservedError) as exc_info:
            mod.Reserved.new("name")
        assert exc_info.value.kind is mod.ReservedErrorKind.INVALID

    def test_float_bounds_and_finite(self) -> None:
        mod = build_module("Unit", "f64", "validate(min = 0, max = 1, finite)")
        assert mod.Unit.new(1).into_inner() == 1.0
        with pytest.raises(mod.UnitError) as exc_info:
            mod.Unit.new(1.5)
        assert exc_info.value.kind is mod.UnitErrorKind.TOO_BIG
        with pytest.raises(mod.UnitError) as exc_info:
            mod.Unit.new(math.nan)
        assert exc_info.value.kind is mod.UnitErrorKind.NOT_FINITE

    def test_no_guard_never_fails(self) -> None:
        mod = build_module("Anything", "str")
        assert mod.Anything.new("").into_inner() == ""


class TestPrimitiveCoercion:
    def test_integer_width_overflow(self) -> None:
        mod = build_module("Byte", "u8")
        assert mod.Byte.new(255).into_inner() == 255
        with pytest.raises(OverflowError):
            mod.Byte.new(256)
        with pytest.raises(OverflowError):
            mod.Byte.new(-1)

    def test_integer_rejects_other_types(self) -> None:
        mod = build_module("Byte", "u8")
        with pytest.raises(TypeError, match="Byte expects int"):
            mod.Byte.new("1")
        with pytest.raises(TypeError):
            mod.Byte.new(True)

    def test_sanitizer_result_is_recoerced(self) -> None:
        mod = build_module("Byte", "u8", "sanitize(with = lambda v: v * 100)")
        assert mod.Byte.new(2).into_inner() == 200
        with pytest.raises(OverflowError):
            mod.Byte.new(3)

    def test_f32_rounding(self) -> None:
        mod = build_module("Ratio", "f32")
        expected = struct.unpack("<f", struct.pack("<f", 0.1))[0]
        assert mod.Ratio.new(0.1).into_inner() == expected

    def test_float_accepts_int(self) -> None:
        mod = build_module("Meters", "f64")
        value = mod.Meters.new(2).into_inner()
        assert value == 2.0
        assert isinstance(value, float)

    def test_string_rejects_bytes(self) -> None:
        mod = build_module("Name", "str")
        with pytest.raises(TypeError, match="Name expects str, got bytes"):
            mod.Name.new(b"x")


class TestUncheckedConstructor:
    def test_both_constructors_generated(self) -> None:
        mod = build_module("Id", "u64", "new_unchecked")
        assert mod.Id.new(7).into_inner() == 7
        assert mod.Id.new_unchecked(7).into_inner() == 7

    def test_unchecked_bypasses_guard(self) -> None:
        mod = build_module("Label", "str", "sanitize(trim), validate(not_empty), new_unchecked")
        assert mod.Label.new_unchecked("  ").into_inner() == "  "


class TestWrapperObject:
    def test_direct_construction_is_blocked(self) -> None:
        mod = build_module("Name", "str")
        with pytest.raises(TypeError, match="use Name.new"):
            mod.Name("x")

    def test_immutable(self) -> None:
        mod = build_module("Name", "str")
        name = mod.Name.new("x")
        with pytest.raises(AttributeError):
            name._value = "y"
        with pytest.raises(AttributeError):
            del name._value
        assert name.into_inner() == "x"

    def test_no_traits_means_identity_equality(self) -> None:
        mod = build_module("Name", "str")
        assert mod.Name.new("x") != mod.Name.new("x")


class TestDefault:
    def test_default_is_trusted(self) -> None:
        mod = build_module(
            "Label", "str", "sanitize(trim), validate(not_empty), default = '  '", ["default"]
        )
        assert mod.Label.default().into_inner() == "  "
        assert "stored as-is" in mod.Label.default.__doc__

    def test_default_checked_policy(self) -> None:
        mod = build_module(
            "Label",
            "str",
            "sanitize(trim), validate(not_empty), default = '  '",
            ["default"],
            default_policy=DefaultPolicy.CHECK,
        )
        with pytest.raises(mod.LabelError):
            mod.Label.default()

    def test_default_expression(self) -> None:
        mod = build_module("Count", "u8", "default = 2 + 3", ["default"])
        assert mod.Count.default().into_inner() == 5

    def test_default_without_trait_has_no_effect(self) -> None:
        mod = build_module("Label", "str", "default = 'x'")
        assert not hasattr(mod.Label, "default")


class TestTraits:
    def test_repr_and_str(self) -> None:
        mod = build_module("Name", "str", "", ["repr", "str"])
        name = mod.Name.new("bob")
        assert repr(name) == "Name('bob')"
        assert str(name) == "bob"
        assert f"{name:>5}" == "  bob"

    def test_eq_and_hash(self) -> None:
        mod = build_module("Name", "str", "sanitize(lowercase)", ["eq", "hash"])
        assert mod.Name.new("A") == mod.Name.new("a")
        assert mod.Name.new("A") != "a"
        assert len({mod.Name.new("A"), mod.Name.new("a")}) == 1

    def test_ord(self) -> None:
        mod = build_module("Rank", "u8", "", ["eq", "ord"])
        ranks = [mod.Rank.new(3), mod.Rank.new(1), mod.Rank.new(2)]
        assert [r.into_inner() for r in sorted(ranks)] == [1, 2, 3]
        assert mod.Rank.new(1) <= mod.Rank.new(1)
        with pytest.raises(TypeError):
            mod.Rank.new(1) < 2  # noqa: B015

    def test_float_eq_is_ieee(self) -> None:
        mod = build_module("Meters", "f64", "", ["eq"])
        assert mod.Meters.new(math.nan) != mod.Meters.new(math.nan)

    def test_float_ord_hash_with_finite(self) -> None:
        mod = build_module("Meters", "f64", "validate(finite)", ["eq", "ord", "hash"])
        assert mod.Meters.new(1.0) < mod.Meters.new(2.0)
        assert hash(mod.Meters.new(1.0)) == hash(mod.Meters.new(1))

    def test_parse_numeric(self) -> None:
        mod = build_module("Port", "u16", "validate(min = 1)", ["parse"])
        assert mod.Port.parse("8080").into_inner() == 8080
        with pytest.raises(mod.PortParseError):
            mod.Port.parse("http")
        with pytest.raises(mod.PortError):
            mod.Port.parse("0")

    @pytest.mark.parametrize("text", ["1_000", " 80", "80\n", ""])
    def test_parse_numeric_rejects_non_literals(self, text: str) -> None:
        mod = build_module("Count", "u32", "", ["parse"])
        with pytest.raises(mod.CountParseError):
            mod.Count.parse(text)

    def test_parse_float_literal(self) -> None:
        mod = build_module("Ratio", "f64", "", ["parse"])
        assert mod.Ratio.parse("2.5").into_inner() == 2.5
        with pytest.raises(mod.RatioParseError):
            mod.Ratio.parse("2_5.0")

    def test_parse_string_is_checked(self) -> None:
        mod = build_module("Name", "str", "sanitize(trim)", ["parse"])
        assert mod.Name.parse(" x ").into_inner() == "x"
        assert not hasattr(mod, "NameParseError")

    def test_from_inner(self) -> None:
        mod = build_module("Meters", "f64", "", ["from_inner"])
        assert mod.Meters.from_inner(1.5).into_inner() == 1.5

    def test_deref(self) -> None:
        mod = build_module("Name", "str", "", ["deref"])
        name = mod.Name.new("bob")
        assert name.upper() == "BOB"
        with pytest.raises(AttributeError):
            name._hidden  # noqa: B018

    def test_copy(self) -> None:
        mod = build_module("Name", "str", "", ["copy"])
        name = mod.Name.new("bob")
        assert copy.copy(name) is name
        assert copy.deepcopy(name) is name

    def test_bool_and_len(self) -> None:
        mod = build_module("Name", "str", "", ["bool", "len"])
        assert not mod.Name.new("")
        assert len(mod.Name.new("bob")) == 3

    def test_numeric_conversions(self) -> None:
        mod = build_module("Idx", "usize", "", ["int", "float", "index"])
        idx = mod.Idx.new(1)
        assert int(idx) == 1
        assert float(idx) == 1.0
        assert operator.index(idx) == 1
        assert ["a", "b", "c"][idx] == "b"

    def test_float_arithmetic_without_validation(self) -> None:
        mod = build_module("Meters", "f64", "", ["eq", "arithmetic"])
        total = mod.Meters.new(1.5) + mod.Meters.new(2.0)
        assert total == mod.Meters.new(3.5)
        assert (mod.Meters.new(3.0) / mod.Meters.new(2.0)).into_inner() == 1.5

    def test_arithmetic_results_are_sanitized(self) -> None:
        mod = build_module("Shout", "str", "sanitize(uppercase), new_unchecked", ["arithmetic"])
        joined = mod.Shout.new_unchecked("x") + mod.Shout.new("y")
        assert joined.into_inner() == "XY"

    def test_integer_arithmetic_respects_width(self) -> None:
        mod = build_module("Byte", "u8", "", ["arithmetic"])
        assert (mod.Byte.new(2) * mod.Byte.new(3)).into_inner() == 6
        with pytest.raises(OverflowError):
            mod.Byte.new(200) + mod.Byte.new(100)

    def test_json_round_trip_is_checked(self) -> None:
        mod = build_module(
            "Title", "str", "sanitize(trim), validate(not_empty)", ["serialize", "deserialize"]
        )
        assert mod.Title.new("bob").to_json() == '"bob"'
        assert mod.Title.from_json('" bob "').into_inner() == "bob"
        with pytest.raises(mod.TitleError):
            mod.Title.from_json('"  "')


class TestPydanticIntegration:
    def test_model_field(self) -> None:
        mod = build_module(
            "Username",
            "str",
            "sanitize(trim, lowercase), validate(not_empty)",
            ["eq", "pydantic"],
        )
        account_model = pydantic.create_model("Account", user=(mod.Username, ...))
        account = account_model(user="  Bob ")
        assert account.user == mod.Username.new("bob")
        assert account.model_dump() == {"user": "bob"}
        assert account_model(user=mod.Username.new("x")).user.into_inner() == "x"

    def test_validation_errors(self) -> None:
        mod = build_module("Byte", "u8", "validate(max = 9)", ["pydantic"])
        byte_model = pydantic.create_model("Holder", value=(mod.Byte, ...))
        with pytest.raises(pydantic.ValidationError):
            byte_model(value=10)
        with pytest.raises(pydantic.ValidationError):
            byte_model(value=300)
        with pytest.raises(pydantic.ValidationError):
            byte_model(value="1")
