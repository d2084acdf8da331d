"""epicalc calculator tools.

Each tool validates its raw arguments, runs the engine and returns a
JSON-ready dict. Invalid input comes back as ``{"error": ...}`` instead of
raising, so the MCP layer can forward it verbatim.
"""

from __future__ import annotations

import logging
import math
from typing import Any

from epicalc.analysis.metrics import compute_metrics
from epicalc.reporting.interpretation import InterpretationReport
from epicalc.schema.validator import coerce_design, coerce_goal, parse_table
from epicalc.stats.sample_size import required_sample_size

logger = logging.getLogger(__name__)


def json_safe(value: Any) -> Any:
    """Replace non-finite floats with strings so the payload is valid JSON."""
    if isinstance(value, float) and not math.isfinite(value):
        if math.isnan(value):
            return "NaN"
        return "Infinity" if value > 0 else "-Infinity"
    if isinstance(value, dict):
        return {k: json_safe(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [json_safe(v) for v in value]
    return value


class CalculatorTools:
    """The three calculator tools exposed over MCP."""

    def compute_metrics(self, a: Any, b: Any, c: Any, d: Any, design: str, goal: str) -> dict:
        """Tool 1: every metric for one 2x2 table."""
        try:
            table = parse_table({"a": a, "b": b, "c": c, "d": d})
            study_design = coerce_design(design)
            study_goal = coerce_goal(goal)
        except ValueError as e:
            logger.info("compute_metrics rejected input: %s", e)
            return {"error": str(e)}

        result = compute_metrics(table, study_design, study_goal)
        return json_safe({
            "table": table.model_dump(),
            "design": study_design.value,
            "goal": study_goal.value,
            "results": result.to_dict(),
        })

    def required_sample_size(self, p1: float, p2: float) -> dict:
        """Tool 2: per-group sample size for 80% power at 5% alpha."""
        if isinstance(p1, bool) or isinstance(p2, bool):
            return {"error": "Proportions must be numbers, not booleans."}
        try:
            p1, p2 = float(p1), float(p2)
        except (TypeError, ValueError, OverflowError) as e:
            return {"error": f"Proportions must be numbers: {e}"}
        for name, p in (("p1", p1), ("p2", p2)):
            if not math.isnan(p) and not 0 <= p <= 1:
                return {"error": f"{name} must lie between 0 and 1 (got {p})."}
        return json_safe({"p1": p1, "p2": p2, "per_group": required_sample_size(p1, p2)})

    def interpretation_report(self, a: Any, b: Any, c: Any, d: Any, design: str, goal: str) -> dict:
        """Tool 3: markdown metric summary plus sample size advice."""
        try:
            table = parse_table({"a": a, "b": b, "c": c, "d": d})
            study_design = coerce_design(design)
            study_goal = coerce_goal(goal)
        except ValueError as e:
            logger.info("interpretation_report rejected input: %s", e)
            return {"error": str(e)}

        result = compute_metrics(table, study_design, study_goal)
        report = InterpretationReport(table, study_design, study_goal, result)
        return {"report": report.to_markdown()}
