"""Tests for structural ("alike") comparison."""

from dataclasses import dataclass

import pytest

from vetter.alike import AlikeDiff, compare, format_diff, target_text, type_name
from vetter.config import Settings
from vetter.errors import InternalError


@dataclass
class Point:
    x: int = 0
    y: int = 0


class TestScalars:
    @pytest.mark.parametrize(
        "template, current",
        [
            (0, 5),
            (0, 2.0),
            (0.0, 3),
            (0.0, 2.5),
            ("", "abc"),
            (True, False),
            (None, "anything"),
            (None, None),
        ],
    )
    def test_matches(self, template, current):
        assert compare(template, current) == (True, None)

    @pytest.mark.parametrize(
        "template, current, expected, actual",
        [
            (0, True, "int", "bool"),
            (0, 2.5, "int", "float"),
            (0, "1", "int", "str"),
            (0.0, True, "float", "bool"),
            ("", 1, "str", "int"),
            (True, 1, "bool", "int"),
            (0, None, "int", "None"),
        ],
    )
    def test_type_mismatch(self, template, current, expected, actual):
        ok, diff = compare(template, current)

        assert not ok
        assert diff == AlikeDiff((), "type", expected, actual)

    def test_fuzzy_int_can_be_disabled(self):
        ok, diff = compare(0, 2.0, Settings(fuzzy_int_max_len=0))

        assert not ok
        assert diff.actual == "float"


class TestSequences:
    def test_empty_template_matches_any_length(self):
        assert compare([], [1, "a", None])[0]

    def test_elementwise(self):
        assert compare([0, ""], [1, "a"])[0]

    def test_element_mismatch_path(self):
        _, diff = compare([0, ""], [1, 2])

        assert diff == AlikeDiff((1,), "type", "str", "int")

    def test_length(self):
        _, diff = compare([0], [1, 2])

        assert diff == AlikeDiff((), "length", "1", "2")

    def test_list_and_tuple_differ(self):
        _, diff = compare([0], (1,))

        assert diff.kind == "type"
        assert (diff.expected, diff.actual) == ("list", "tuple")

    def test_long_lists_are_not_fuzzy(self):
        settings = Settings(fuzzy_int_max_len=2)

        assert compare([0, 0], [1.0, 2.0], settings)[0]
        _, diff = compare([0, 0, 0], [1.0, 2.0, 3.0], settings)
        assert diff == AlikeDiff((0,), "type", "int", "float")


class TestMappings:
    def test_empty_template_matches_any_mapping(self):
        assert compare({}, {"a": 1})[0]

    def test_values(self):
        assert compare({"id": 0, "name": ""}, {"name": "x", "id": 3})[0]

    def test_value_mismatch_path(self):
        _, diff = compare({"a": {"b": 0}}, {"a": {"b": "x"}})

        assert diff == AlikeDiff(("a", "b"), "type", "int", "str")

    def test_missing_key(self):
        _, diff = compare({"a": 0}, {"b": 1})

        assert diff == AlikeDiff((), "key", "'a'", "missing")

    def test_length(self):
        _, diff = compare({"a": 0}, {"a": 1, "b": 2})

        assert diff.kind == "length"

    def test_mapping_against_list(self):
        _, diff = compare({"a": 0}, [0])

        assert diff == AlikeDiff((), "type", "dict", "list")


class TestObjects:
    def test_dataclass_fields(self):
        assert compare(Point(), Point(3, 4))[0]

    def test_dataclass_field_mismatch(self):
        _, diff = compare(Point(), Point(1, "a"))

        assert diff == AlikeDiff((("attr", "y"),), "type", "int", "str")

    def test_other_objects_by_isinstance(self):
        class Base:
            pass

        class Child(Base):
            pass

        assert compare(Base(), Child())[0]
        assert not compare(Child(), Base())[0]


class TestFormatting:
    def test_type_name(self):
        assert type_name(None) == "None"
        assert type_name(1.0) == "float"

    def test_target_text(self):
        assert target_text("x", ()) == "x"
        assert target_text("x", ("a", 0, ("attr", "b"))) == 'x["a"][0].b'

    def test_format_type(self):
        diff = AlikeDiff((0,), "type", "int", "str")

        assert format_diff(diff, "x") == ["`x[0]`", 'should be type "int"', '(is "str")']

    def test_format_length(self):
        diff = AlikeDiff((), "length", "1", "2")

        assert format_diff(diff, "x") == ["`x`", "should be length 1", "(is 2)"]

    def test_format_key(self):
        diff = AlikeDiff((), "key", "'id'", "missing")

        assert format_diff(diff, "x") == ["`x`", "should have key 'id'", "(is missing)"]

    def test_format_unknown_kind(self):
        with pytest.raises(InternalError, match="unknown diff kind .shape."):
            format_diff(AlikeDiff((), "shape", "", ""), "x")
