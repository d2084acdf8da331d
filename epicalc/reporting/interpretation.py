"""Structured metric summary handed to report writers.

Formats a MetricsResult the way a reader of a 2x2 analysis expects to see
it: fixed precision, "N/A" for missing values, a readable NNT/NNH interval
and a sample size recommendation when the study looks underpowered.
"""
from __future__ import annotations

import math
from dataclasses import dataclass

from epicalc.analysis.base import MetricsResult, NNTType
from epicalc.config import DEFAULT_POLICY, StatisticalPolicy
from epicalc.schema.base import ContingencyTable, StudyDesign, StudyGoal
from epicalc.stats.sample_size import required_sample_size

NOT_AVAILABLE = "N/A"
NOT_APPLICABLE = "Not applicable"
CI_INCLUDES_INFINITY = "CI includes infinity"

NNT_CI_LABELS = {"benefit": "NNT benefit", "harm": "NNH harm"}

DESIGN_LABELS = {
    StudyDesign.RCT: "Randomized Controlled Trial",
    StudyDesign.NON_RCT: "Non-Randomized Controlled Trial",
    StudyDesign.COHORT_PROSPECTIVE: "Prospective Cohort Study",
    StudyDesign.COHORT_RETROSPECTIVE: "Retrospective Cohort Study",
    StudyDesign.CASE_CONTROL: "Case-Control Study",
}


def format_value(value: float | str | None, precision: int = 2) -> str:
    if isinstance(value, str):
        return value or NOT_AVAILABLE
    if value is None or not math.isfinite(value):
        return NOT_AVAILABLE
    return f"{value:.{precision}f}"


def normalize_nnt_interval(result: MetricsResult,
                           labels: dict[str, str] = NNT_CI_LABELS) -> str:
    """Render the NNT/NNH confidence interval for display.

    When the risk-difference CI spans zero the interval runs from an NNT
    (benefit) through infinity to an NNH (harm), so both ends are named.
    Otherwise the magnitudes of the reciprocal bounds are put in ascending
    order.
    """
    nnt, rd = result.nnt, result.risk_difference
    if nnt is None or rd is None:
        return NOT_APPLICABLE

    if rd.lower < 0 < rd.upper:
        benefit_end = abs(1 / rd.lower)
        harm_end = 1 / rd.upper
        return (
            f"{benefit_end:.3f} ({labels['benefit']}) to "
            f"{harm_end:.3f} ({labels['harm']})"
        )

    if not (math.isfinite(nnt.lower) and math.isfinite(nnt.upper)):
        return CI_INCLUDES_INFINITY
    lower, upper = sorted((abs(nnt.lower), abs(nnt.upper)))
    return f"{lower:.3f} to {upper:.3f}"


def sample_size_recommendation(result: MetricsResult,
                               policy: StatisticalPolicy = DEFAULT_POLICY) -> str:
    """Advice on sample size derived from the post-hoc power."""
    if result.power is None:
        return ""
    power_pct = result.power.value * 100
    if result.power.value < policy.adequate_power:
        p1 = result.absolute_risk_exposed.value if result.absolute_risk_exposed else None
        p2 = result.absolute_risk_control.value if result.absolute_risk_control else None
        required_n = required_sample_size(p1, p2, policy)
        if required_n:
            return (
                f"The calculated statistical power is low ({power_pct:.1f}%). "
                f"To achieve {policy.target_power:.0%} power, a future study would "
                f"require approximately **{required_n}** participants in each group."
            )
        return (
            "The calculated statistical power is low, but a sample size "
            "recommendation could not be determined from the provided data."
        )
    return (
        f"The study was adequately powered at **{power_pct:.1f}%**. The current "
        "sample size was sufficient to detect an effect of the observed magnitude."
    )


def _display_p_value(result: MetricsResult) -> str:
    raw = None
    if result.odds_ratio is not None:
        raw = result.odds_ratio.p_value
    elif result.relative_risk is not None:
        raw = result.relative_risk.p_value
    if not raw:
        return NOT_AVAILABLE
    return raw.lstrip("<")


def _ci(lower: float, upper: float, precision: int = 2) -> str:
    return f"{format_value(lower, precision)} to {format_value(upper, precision)}"


@dataclass(frozen=True)
class InterpretationReport:
    """Metric summary for one calculation, ready to embed in a written report."""

    table: ContingencyTable
    design: StudyDesign
    goal: StudyGoal
    result: MetricsResult

    def metrics_lines(self) -> list[str]:
        r = self.result
        or_line = (
            f"- Odds Ratio (OR): {format_value(r.odds_ratio.value if r.odds_ratio else None)} "
            f"(95% CI: {_ci(r.odds_ratio.lower, r.odds_ratio.upper) if r.odds_ratio else NOT_AVAILABLE})"
        )
        p_line = f"- P-value: {_display_p_value(r)}"

        if not StudyDesign(self.design).allows_incidence:
            return [or_line, p_line]

        rd = r.risk_difference
        rr = r.relative_risk
        impact = r.impact_measures
        if impact is not None:
            abs_label, abs_value = impact.absolute.label, format_value(impact.absolute.value, 4)
            rel_label, rel_value = impact.relative.label, f"{format_value(impact.relative.value * 100)}%"
        else:
            abs_label, abs_value = "Absolute Impact", NOT_AVAILABLE
            rel_label, rel_value = "Relative Impact", NOT_AVAILABLE

        if r.nnt is None:
            nnt_line = f"- {NOT_APPLICABLE}"
        elif r.nnt.type is NNTType.BENEFIT:
            nnt_line = f"- Number Needed to Treat (NNT): {format_value(r.nnt.value)}"
        else:
            nnt_line = f"- Number Needed to Harm (NNH): {format_value(r.nnt.value)}"
        nnt_line += f" (95% CI: {normalize_nnt_interval(r)})"

        power = f"{r.power.value * 100:.1f}%" if r.power else NOT_AVAILABLE
        beta = f"{r.type2_error.value * 100:.1f}%" if r.type2_error else NOT_AVAILABLE

        return [
            f"- Absolute Risk (Exposed): {format_value(r.absolute_risk_exposed.value if r.absolute_risk_exposed else None, 4)}",
            f"- Absolute Risk (Control): {format_value(r.absolute_risk_control.value if r.absolute_risk_control else None, 4)}",
            f"- Risk Difference (RD): {format_value(rd.value if rd else None, 4)} "
            f"(95% CI: {_ci(rd.lower, rd.upper, 4) if rd else NOT_AVAILABLE})",
            f"- {abs_label}: {abs_value}",
            f"- {rel_label}: {rel_value}",
            f"- Relative Risk (RR): {format_value(rr.value if rr else None)} "
            f"(95% CI: {_ci(rr.lower, rr.upper) if rr else NOT_AVAILABLE})",
            or_line,
            p_line,
            nnt_line,
            f"- Statistical Power: {power}",
            f"- Type II Error (β): {beta}",
        ]

    def to_markdown(self) -> str:
        design = StudyDesign(self.design)
        goal = StudyGoal(self.goal)
        t = self.table
        lines = [
            "## 2x2 Table Analysis",
            "",
            f"**Design:** {DESIGN_LABELS[design]}  ",
            f"**Outcome:** {goal.value}",
            "",
            "### Study Data",
            f"- Exposed Group, With Outcome (a): {t.a}",
            f"- Exposed Group, Without Outcome (b): {t.b}",
            f"- Control Group, With Outcome (c): {t.c}",
            f"- Control Group, Without Outcome (d): {t.d}",
            "",
            "### Metrics",
            *self.metrics_lines(),
        ]
        advice = sample_size_recommendation(self.result)
        if advice:
            lines += ["", "### Sample Size Analysis", advice]
        return "\n".join(lines)
