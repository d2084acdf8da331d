"""Tests for epicalc.schema: table types, enums and input validation."""
import pytest
from pydantic import ValidationError

from epicalc.schema.base import ContingencyTable, CorrectedTable, StudyDesign, StudyGoal
from epicalc.schema.validator import (
    InvalidCellCountError,
    coerce_design,
    coerce_goal,
    parse_table,
)


class TestContingencyTable:
    def test_totals(self):
        t = ContingencyTable(a=20, b=80, c=5, d=95)
        assert t.exposed_total == 100
        assert t.control_total == 100
        assert t.total == 200

    def test_negative_rejected(self):
        with pytest.raises(ValidationError):
            ContingencyTable(a=-1, b=1, c=1, d=1)

    def test_non_integer_rejected(self):
        with pytest.raises(ValidationError):
            ContingencyTable(a=1.5, b=1, c=1, d=1)

    def test_bool_rejected(self):
        with pytest.raises(ValidationError):
            ContingencyTable(a=True, b=1, c=1, d=1)

    def test_frozen(self):
        t = ContingencyTable(a=1, b=2, c=3, d=4)
        with pytest.raises(ValidationError):
            t.a = 10


class TestCorrectedTable:
    def test_zero_cells_replaced(self):
        corrected = ContingencyTable(a=0, b=100, c=10, d=0).corrected()
        assert isinstance(corrected, CorrectedTable)
        assert corrected.a == 0.5
        assert corrected.b == 100
        assert corrected.c == 10
        assert corrected.d == 0.5

    def test_positive_cells_unchanged(self):
        corrected = ContingencyTable(a=1, b=2, c=3, d=4).corrected()
        assert (corrected.a, corrected.b, corrected.c, corrected.d) == (1, 2, 3, 4)

    def test_corrected_totals(self):
        corrected = ContingencyTable(a=0, b=0, c=3, d=4).corrected()
        assert corrected.exposed_total == 1.0
        assert corrected.control_total == 7


class TestStudyDesign:
    def test_values(self):
        assert {d.value for d in StudyDesign} == {
            "rct", "non-rct", "cohort-prospective", "cohort-retrospective", "case-control",
        }

    def test_only_case_control_blocks_incidence(self):
        blocked = [d for d in StudyDesign if not d.allows_incidence]
        assert blocked == [StudyDesign.CASE_CONTROL]

    def test_goal_values(self):
        assert StudyGoal("desirable") is StudyGoal.DESIRABLE
        assert StudyGoal("undesirable") is StudyGoal.UNDESIRABLE


class TestParseTable:
    def test_numeric_strings(self):
        t = parse_table({"a": "20", "b": "80", "c": " 5 ", "d": "95"})
        assert t == ContingencyTable(a=20, b=80, c=5, d=95)

    def test_ints_and_whole_floats(self):
        t = parse_table({"a": 1, "b": 2.0, "c": 3, "d": 4})
        assert t.b == 2

    def test_reports_first_bad_cell(self):
        with pytest.raises(InvalidCellCountError) as exc:
            parse_table({"a": "1", "b": "x", "c": "-3", "d": "4"})
        assert exc.value.cell == "b"

    def test_negative(self):
        with pytest.raises(InvalidCellCountError) as exc:
            parse_table({"a": 1, "b": 2, "c": -3, "d": 4})
        assert exc.value.cell == "c"

    def test_missing(self):
        with pytest.raises(InvalidCellCountError) as exc:
            parse_table({"a": 1, "b": 2, "c": 3})
        assert exc.value.cell == "d"

    def test_fractional(self):
        with pytest.raises(InvalidCellCountError):
            parse_table({"a": "2.5", "b": 2, "c": 3, "d": 4})
        with pytest.raises(InvalidCellCountError):
            parse_table({"a": 2.5, "b": 2, "c": 3, "d": 4})

    def test_beyond_float_range(self):
        with pytest.raises(InvalidCellCountError) as exc:
            parse_table({"a": 1, "b": str(10**400), "c": 3, "d": 4})
        assert exc.value.cell == "b"
        assert parse_table({"a": 10**300, "b": 1, "c": 1, "d": 1}).a == 10**300

    def test_is_value_error(self):
        with pytest.raises(ValueError):
            parse_table({"a": "", "b": 2, "c": 3, "d": 4})


class TestCoercion:
    def test_design_from_string(self):
        assert coerce_design("case-control") is StudyDesign.CASE_CONTROL

    def test_design_passthrough(self):
        assert coerce_design(StudyDesign.RCT) is StudyDesign.RCT

    def test_unknown_design(self):
        with pytest.raises(ValueError, match="cohort-prospective"):
            coerce_design("cross-sectional")

    def test_unknown_goal(self):
        with pytest.raises(ValueError, match="desirable"):
            coerce_goal("neutral")
