"""Tests for epicalc.server.tools: the calculator tool layer."""
import json
import math

import pytest

from epicalc.server.tools import CalculatorTools, json_safe


@pytest.fixture
def tools():
    return CalculatorTools()


class TestJsonSafe:
    def test_infinities(self):
        assert json_safe(math.inf) == "Infinity"
        assert json_safe(-math.inf) == "-Infinity"
        assert json_safe(math.nan) == "NaN"

    def test_nested(self):
        payload = json_safe({"nnt": {"lower": 3.0, "upper": math.inf}, "bounds": (1.0, -math.inf)})
        assert payload == {"nnt": {"lower": 3.0, "upper": "Infinity"}, "bounds": [1.0, "-Infinity"]}
        json.dumps(payload, allow_nan=False)


class TestComputeMetricsTool:
    def test_success(self, tools):
        out = tools.compute_metrics(20, 80, 5, 95, "cohort-prospective", "undesirable")
        assert out["table"] == {"a": 20, "b": 80, "c": 5, "d": 95}
        assert out["design"] == "cohort-prospective"
        assert out["results"]["relativeRisk"]["value"] == pytest.approx(4.0)
        assert out["results"]["nnt"]["type"] == "Harm"

    def test_string_counts(self, tools):
        out = tools.compute_metrics("10", "20", "10", "20", "case-control", "desirable")
        assert out["results"]["oddsRatio"]["value"] == pytest.approx(1.0)
        assert out["results"]["relativeRisk"] is None

    def test_infinite_z_serialisable(self, tools):
        out = tools.compute_metrics(0, 100, 10, 90, "rct", "undesirable")
        assert out["results"]["relativeRisk"]["zStat"] == "-Infinity"
        json.dumps(out, allow_nan=False)

    def test_invalid_cell(self, tools):
        out = tools.compute_metrics(1, -2, 3, 4, "rct", "undesirable")
        assert "error" in out
        assert "'b'" in out["error"]

    def test_invalid_design(self, tools):
        out = tools.compute_metrics(1, 2, 3, 4, "cross-sectional", "undesirable")
        assert "error" in out

    def test_count_beyond_float_range(self, tools):
        out = tools.compute_metrics(10**400, 1, 1, 1, "rct", "undesirable")
        assert "'a'" in out["error"]

    def test_count_near_float_max(self, tools):
        out = tools.compute_metrics(10**308, 1, 1, 1, "rct", "undesirable")
        assert out["results"]["oddsRatio"]["upper"] == "Infinity"
        json.dumps(out, allow_nan=False)


class TestSampleSizeTool:
    def test_success(self, tools):
        assert tools.required_sample_size(0.2, 0.05)["per_group"] == 76

    def test_equal(self, tools):
        assert tools.required_sample_size(0.1, 0.1)["per_group"] is None

    def test_out_of_range(self, tools):
        assert "error" in tools.required_sample_size(1.5, 0.1)

    def test_not_a_number(self, tools):
        assert "error" in tools.required_sample_size("abc", 0.1)

    def test_booleans_rejected(self, tools):
        assert "error" in tools.required_sample_size(True, 0.1)
        assert "error" in tools.required_sample_size(0.2, False)

    def test_nan_serialisable(self, tools):
        out = tools.required_sample_size("nan", 0.1)
        assert out == {"p1": "NaN", "p2": 0.1, "per_group": None}
        json.dumps(out, allow_nan=False)

    def test_oversized_integer(self, tools):
        assert "error" in tools.required_sample_size(10**400, 0.1)


class TestInterpretationReportTool:
    def test_report(self, tools):
        out = tools.interpretation_report(3, 97, 5, 95, "rct", "undesirable")
        assert "### Metrics" in out["report"]
        assert "NNT benefit" in out["report"]

    def test_invalid(self, tools):
        assert "error" in tools.interpretation_report("x", 1, 1, 1, "rct", "desirable")
