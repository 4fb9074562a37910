"""Tests for diagnostic rendering."""

import pytest

from vetter.alike import AlikeDiff
from vetter.errors import InternalError
from vetter.expressions import Identifier, parse
from vetter.render import DiagnosticRenderer, collapse_adjacent, render
from vetter.results import ResultList
from vetter.types import (
    Leaf,
    Mode,
    Outcome,
    Result,
    StandardPayload,
    StructuralPayload,
)
from vetter.vet import evaluate


def failed(source, value, outcome, message=None):
    leaf = Leaf(Mode.PREDICATE, parse(source), message)
    return Result(False, StandardPayload(leaf, value, outcome))


def results_of(*items):
    results = ResultList()
    for item in items:
        results.append(item)
    return results


class TestPredicateMessages:
    @pytest.mark.parametrize(
        "current, expected",
        [
            (-1, "`x > 0` is not TRUE (FALSE)"),
            (None, "`x > 0` is not TRUE (NA)"),
            ([], "`x > 0` is not TRUE (zero length)"),
            ([1, None], "`x > 0` is not TRUE (contains NAs)"),
            ([1, -1], "`x > 0` is not all TRUE (contains non-TRUE values)"),
            ([-1], "`x > 0` is not TRUE (FALSE)"),
        ],
    )
    def test_reasons(self, current, expected):
        assert evaluate(". > 0", current, "x") == [expected]

    def test_wrong_type(self):
        assert evaluate("len(.)", "abc", "x") == [
            '`len(x)` is not TRUE (is "int" instead of a "logical")'
        ]

    def test_wrong_type_mixed_list(self):
        assert evaluate("[., 1]", True, "x") == [
            '`[x, 1]` is not TRUE (is "list" instead of a "logical")'
        ]

    def test_none_against_template(self):
        assert evaluate("tags", None, "x", {"tags": "a"}) == [
            '`x` should be type "str" (is "None")'
        ]

    def test_placeholder_replaced_by_current_expression(self):
        assert evaluate(". * 2 > 0", -1, "a + b") == [
            "`(a + b) * 2 > 0` is not TRUE (FALSE)"
        ]

    def test_current_expression_as_ast(self):
        assert evaluate(". > 0", -1, Identifier("n")) == ["`n > 0` is not TRUE (FALSE)"]


class TestMessageTemplates:
    def test_name_and_expr(self):
        results = results_of(
            failed(". > 0", False, Outcome.FALSE, "{name} must be positive ({expr})")
        )

        assert render(results, parse("x")) == ["`x` must be positive (`x > 0`)"]

    def test_other_braces_are_left_alone(self):
        results = results_of(failed(". > 0", False, Outcome.FALSE, "{name} in {units}"))

        assert render(results, parse("x")) == ["`x` in {units}"]

    def test_token_message(self):
        assert evaluate("INT_1_POS", -2, "n") == ["`n` should be a positive integer"]


class TestStructuralMessages:
    def test_type_mismatch(self):
        assert evaluate("0", "a", "x") == ['`x` should be type "int" (is "str")']

    def test_nested_path(self):
        messages = evaluate(
            "shape", {"id": 0, "tags": ["a", 1]}, "rec", {"shape": {"id": 0, "tags": [""]}}
        )

        assert messages == ['`rec["tags"]` should be length 1 (is 2)']

    def test_missing_key(self):
        messages = evaluate('{"id": 0}', {"name": 1}, "rec")

        assert messages == ["`rec` should have key 'id' (is missing)"]

    def test_structural_result_without_diff(self):
        leaf = Leaf(Mode.TEMPLATE, parse("0"))
        results = results_of(Result(False, StructuralPayload(leaf, 0, None)))

        with pytest.raises(InternalError, match="no diff"):
            render(results, parse("x"))

    def test_structural_result_with_diff(self):
        leaf = Leaf(Mode.TEMPLATE, parse("0"))
        diff = AlikeDiff((0,), "type", "int", "str")
        results = results_of(Result(False, StructuralPayload(leaf, 0, diff)))

        assert render(results, parse("v")) == ['`v[0]` should be type "int" (is "str")']


class TestCombinedMessages:
    def test_passing_run_renders_nothing(self):
        assert evaluate(". > 0", 1, "x") == []

    def test_and_reports_first_failure_only(self):
        assert evaluate(". > 0 && is_str(.)", -1, "x") == ["`x > 0` is not TRUE (FALSE)"]

    def test_or_reports_every_failure_in_order(self):
        assert evaluate(". > 0 || is_str(.)", -1, "x") == [
            "`x > 0` is not TRUE (FALSE)",
            "`is_str(x)` is not TRUE (FALSE)",
        ]

    def test_or_success_passes(self):
        assert evaluate(". < 0 || . > 0", 1, "x") == []
        assert evaluate("is_str(.) || . > 0", 1, "x") == []

    def test_template_or_predicate(self):
        assert evaluate("0 || is_str(.)", 1.5, "x") == [
            '`x` should be type "int" (is "float")',
            "`is_str(x)` is not TRUE (FALSE)",
        ]

    def test_recovered_or_failures_are_dropped(self):
        assert evaluate("(. > 0 || . < 0) && . > 100", -5, "x") == [
            "`x > 100` is not TRUE (FALSE)"
        ]

    def test_adjacent_duplicates_collapse(self):
        assert evaluate(". > 0 || . > 0", -1, "x") == ["`x > 0` is not TRUE (FALSE)"]

    def test_unknown_payload(self):
        results = results_of(Result(False, object()))

        with pytest.raises(InternalError, match="unexpected payload type"):
            DiagnosticRenderer(parse("x")).render(results)

    def test_unexpected_outcome(self):
        results = results_of(failed(". > 0", True, Outcome.ALL_TRUE))

        with pytest.raises(InternalError, match="unexpected predicate outcome"):
            render(results, parse("x"))


class TestCollapseAdjacent:
    def test_adjacent_only(self):
        assert collapse_adjacent(["a", "a", "b", "a"]) == ["a", "b", "a"]

    def test_empty(self):
        assert collapse_adjacent([]) == []

    def test_generator_input(self):
        assert collapse_adjacent(m for m in ["x", "x", "x"]) == ["x"]
