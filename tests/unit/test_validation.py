"""Tests for output contracts."""

import pytest

from docforge.core.exceptions import OutputShapeError
from docforge.schemas.artifacts import ConsistencyReport, EstimateDraft
from docforge.services.validation import (
    CodeContract,
    JsonContract,
    LinesContract,
    OutputContract,
    TextContract,
    strip_list_marker,
)


def test_base_contract_cannot_be_instantiated():
    with pytest.raises(TypeError):
        OutputContract()


class TestTextAndCode:

    def test_text_is_stripped(self):
        assert TextContract().parse("  # Requirements\n\nbody \n") == "# Requirements\n\nbody"

    def test_blank_text_is_rejected(self):
        with pytest.raises(OutputShapeError):
            TextContract().parse(" \n\t")

    def test_code_fence_is_removed(self):
        raw = "Here you go:\n```python\nprint('hi')\n```\nEnjoy."

        assert CodeContract().parse(raw) == "print('hi')"

    def test_unfenced_code_is_kept(self):
        assert CodeContract().parse("SELECT 1;\n") == "SELECT 1;"

    def test_empty_fence_is_rejected(self):
        with pytest.raises(OutputShapeError):
            CodeContract().parse("```python\n```")


class TestJsonContract:

    def test_fenced_json_validates(self):
        raw = '```json\n{"score": 82, "issues": [], "suggestions": ["Align terms"]}\n```'

        report = JsonContract(ConsistencyReport).parse(raw)

        assert report.score == 82
        assert report.suggestions == ["Align terms"]

    def test_json_embedded_in_prose(self):
        raw = 'Result: {"breakdown": [{"phase": "design", "hours": 10}]} thanks'

        draft = JsonContract(EstimateDraft).parse(raw)

        assert draft.breakdown[0].hours == 10

    def test_fractional_score_rounds_half_up(self):
        report = JsonContract(ConsistencyReport).parse('{"score": 72.5}')

        assert report.score == 73

    @pytest.mark.parametrize(
        "raw",
        [
            "not json at all",
            '{"score": 140}',
            '{"issues": []}',
            '{"score": 50, "issues": [{"type": "terms"}]}',
        ],
    )
    def test_invalid_output_raises_shape_error(self, raw):
        with pytest.raises(OutputShapeError):
            JsonContract(ConsistencyReport).parse(raw)


class TestLinesContract:

    def test_markers_are_stripped_and_lines_capped(self):
        raw = "1. Design is late\n\n- Tests not started\n* Scope creep\n(4) Staffing"

        assert LinesContract(max_lines=3).parse(raw) == [
            "Design is late",
            "Tests not started",
            "Scope creep",
        ]

    def test_no_lines_is_rejected(self):
        with pytest.raises(OutputShapeError):
            LinesContract().parse("\n - \n")

    @pytest.mark.parametrize(
        "line, expected",
        [("2) Budget", "Budget"), ("• Risk", "Risk"), ("Plain", "Plain"), ("3.5 hours left", "3.5 hours left")],
    )
    def test_strip_list_marker(self, line, expected):
        assert strip_list_marker(line) == expected
