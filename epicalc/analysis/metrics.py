"""Association, impact and power metrics for a 2x2 table.

Each metric group is a small function of the raw table, the corrected table
and the group risks. :func:`compute_metrics` runs the groups that the study
design allows and hands their results to :class:`MetricsBuilder`, which
assembles the frozen :class:`MetricsResult`.

Nothing here raises for a valid input triple. A metric that cannot be
computed (empty group, zero variance, zero control risk, ...) stays ``None``.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field

from epicalc.analysis.base import (
    ImpactMeasure,
    ImpactMeasures,
    IntervalEstimate,
    MetricsResult,
    NNTEstimate,
    PointEstimate,
    RatioEstimate,
)
from epicalc.analysis.policy import classify_nnt, impact_labels
from epicalc.config import DEFAULT_POLICY, StatisticalPolicy
from epicalc.schema.base import ContingencyTable, CorrectedTable, StudyDesign, StudyGoal
from epicalc.stats.normal import normal_cdf
from epicalc.stats.significance import two_tailed_p_value

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GroupRisks:
    """Raw risks for point estimates, corrected risks and totals for variances."""

    exposed: float
    control: float
    exposed_total: int
    control_total: int
    exposed_corrected: float
    control_corrected: float
    exposed_total_corrected: float
    control_total_corrected: float

    @property
    def difference(self) -> float:
        return self.exposed - self.control


@dataclass(frozen=True)
class PowerEstimate:
    power: float | None
    type1_error: float | None
    type2_error: float | None


def _reciprocal(x: float) -> float:
    # 1/0 follows IEEE semantics: a signed infinity rather than an error.
    if x == 0:
        return math.copysign(math.inf, x)
    return 1.0 / x


def _safe_log(x: float) -> float:
    return math.log(x) if x > 0 else -math.inf


def _safe_exp(x: float) -> float:
    try:
        return math.exp(x)
    except OverflowError:
        return math.inf


def _ratio_estimate(log_value: float, se_log: float, value: float,
                    policy: StatisticalPolicy) -> RatioEstimate:
    z_stat = log_value / se_log
    return RatioEstimate(
        value=value,
        lower=_safe_exp(log_value - policy.z_critical * se_log),
        upper=_safe_exp(log_value + policy.z_critical * se_log),
        p_value=two_tailed_p_value(z_stat, policy),
        z_stat=z_stat,
    )


# ----------------------------------------------------------------------
# Metric groups
# ----------------------------------------------------------------------


def group_risks(table: ContingencyTable, corrected: CorrectedTable) -> GroupRisks | None:
    """Risks in each arm, or None when either arm is empty."""
    if table.exposed_total == 0 or table.control_total == 0:
        return None
    return GroupRisks(
        exposed=table.a / table.exposed_total,
        control=table.c / table.control_total,
        exposed_total=table.exposed_total,
        control_total=table.control_total,
        exposed_corrected=corrected.a / corrected.exposed_total,
        control_corrected=corrected.c / corrected.control_total,
        exposed_total_corrected=corrected.exposed_total,
        control_total_corrected=corrected.control_total,
    )


def risk_difference(risks: GroupRisks,
                    policy: StatisticalPolicy = DEFAULT_POLICY) -> IntervalEstimate:
    """Raw risk difference with a Wald CI on the corrected risks."""
    rd = risks.difference
    re_c, rc_c = risks.exposed_corrected, risks.control_corrected
    se_rd = math.sqrt(
        re_c * (1 - re_c) / risks.exposed_total_corrected
        + rc_c * (1 - rc_c) / risks.control_total_corrected
    )
    return IntervalEstimate(
        value=rd,
        lower=rd - policy.z_critical * se_rd,
        upper=rd + policy.z_critical * se_rd,
    )


def impact_measures(risks: GroupRisks, goal: StudyGoal) -> ImpactMeasures | None:
    """Absolute and relative impact, labelled by goal and direction of effect."""
    rd = risks.difference
    if risks.control <= 0 or rd == 0:
        return None
    absolute_value = abs(rd)
    absolute_label, relative_label = impact_labels(goal, rd)
    return ImpactMeasures(
        absolute=ImpactMeasure(label=absolute_label, value=absolute_value),
        relative=ImpactMeasure(label=relative_label, value=absolute_value / risks.control),
    )


def relative_risk(risks: GroupRisks, corrected: CorrectedTable,
                  policy: StatisticalPolicy = DEFAULT_POLICY) -> RatioEstimate | None:
    """Risk ratio with a log-scale CI.

    A zero exposed risk gives RR = 0, an infinite negative z and a (0, 0)
    interval rather than None.
    """
    if risks.control <= 0 or risks.exposed < 0:
        return None
    rr = 0.0 if risks.exposed == 0 else risks.exposed / risks.control
    se_ln_rr = math.sqrt(
        (1 - risks.exposed_corrected) / corrected.a
        + (1 - risks.control_corrected) / corrected.c
    )
    return _ratio_estimate(_safe_log(rr), se_ln_rr, rr, policy)


def number_needed_to_treat(rd: IntervalEstimate, goal: StudyGoal) -> NNTEstimate | None:
    """NNT/NNH from the risk difference.

    The bounds are the reciprocals of the RD bounds in the same order, so
    they come out inverted or infinite when the RD interval spans zero.
    """
    if rd.value == 0:
        return None
    return NNTEstimate(
        value=1.0 / abs(rd.value),
        type=classify_nnt(goal, rd.value),
        lower=_reciprocal(rd.upper),
        upper=_reciprocal(rd.lower),
    )


def post_hoc_power(table: ContingencyTable, risks: GroupRisks,
                   policy: StatisticalPolicy = DEFAULT_POLICY) -> PowerEstimate:
    """Power of the two-tailed two-proportion z-test at the observed effect.

    When both risks are equal the null hypothesis holds exactly and power is
    taken to be alpha (type II error 1 - alpha).
    """
    alpha = policy.alpha
    if risks.exposed == risks.control:
        return PowerEstimate(power=alpha, type1_error=alpha, type2_error=1 - alpha)

    n1, n0 = risks.exposed_total, risks.control_total
    p_pooled = (table.a + table.c) / (n1 + n0)
    if not 0 < p_pooled < 1:
        logger.debug("Power not computable: pooled proportion is %s", p_pooled)
        return PowerEstimate(power=None, type1_error=alpha, type2_error=None)

    se_null = math.sqrt(p_pooled * (1 - p_pooled) * (1 / n1 + 1 / n0))
    critical_diff = policy.z_critical * se_null
    variance_alt = (
        risks.exposed * (1 - risks.exposed) / n1
        + risks.control * (1 - risks.control) / n0
    )
    if variance_alt <= 0:
        logger.debug("Power not computable: zero variance under the alternative")
        return PowerEstimate(power=None, type1_error=alpha, type2_error=None)

    se_alt = math.sqrt(variance_alt)
    observed_diff = risks.difference
    z_upper = (critical_diff - observed_diff) / se_alt
    z_lower = (-critical_diff - observed_diff) / se_alt
    power = (1 - normal_cdf(z_upper)) + normal_cdf(z_lower)
    return PowerEstimate(power=power, type1_error=alpha, type2_error=1 - power)


def odds_ratio(table: ContingencyTable, corrected: CorrectedTable,
               policy: StatisticalPolicy = DEFAULT_POLICY) -> RatioEstimate | None:
    """Odds ratio with Woolf's log-scale CI; valid for every study design."""
    if table.b <= 0 or table.c <= 0:
        return None
    ca, cb, cc, cd = corrected.a, corrected.b, corrected.c, corrected.d
    or_value = (ca * cd) / (cb * cc)
    se_ln_or = math.sqrt(1 / ca + 1 / cb + 1 / cc + 1 / cd)
    return _ratio_estimate(math.log(or_value), se_ln_or, or_value, policy)


# ----------------------------------------------------------------------
# Assembly
# ----------------------------------------------------------------------


@dataclass
class MetricsBuilder:
    """Collects independently computed metric groups into one MetricsResult."""

    _parts: dict = field(default_factory=dict)

    def with_risks(self, risks: GroupRisks) -> MetricsBuilder:
        self._parts["absolute_risk_exposed"] = PointEstimate(risks.exposed)
        self._parts["absolute_risk_control"] = PointEstimate(risks.control)
        return self

    def with_risk_difference(self, rd: IntervalEstimate) -> MetricsBuilder:
        self._parts["risk_difference"] = rd
        return self

    def with_impact(self, impact: ImpactMeasures | None) -> MetricsBuilder:
        self._parts["impact_measures"] = impact
        return self

    def with_relative_risk(self, rr: RatioEstimate | None) -> MetricsBuilder:
        self._parts["relative_risk"] = rr
        return self

    def with_nnt(self, nnt: NNTEstimate | None) -> MetricsBuilder:
        self._parts["nnt"] = nnt
        return self

    def with_power(self, estimate: PowerEstimate) -> MetricsBuilder:
        for name in ("power", "type1_error", "type2_error"):
            value = getattr(estimate, name)
            self._parts[name] = PointEstimate(value) if value is not None else None
        return self

    def with_odds_ratio(self, or_estimate: RatioEstimate | None) -> MetricsBuilder:
        self._parts["odds_ratio"] = or_estimate
        return self

    def build(self) -> MetricsResult:
        return MetricsResult(**self._parts)


def compute_metrics(
    table: ContingencyTable,
    design: StudyDesign | str,
    goal: StudyGoal | str,
    policy: StatisticalPolicy = DEFAULT_POLICY,
) -> MetricsResult:
    """Compute every metric the design allows for *table*.

    Parameters
    ----------
    table:
        Raw, already validated cell counts.
    design:
        Study design. Case-control disables every incidence-based metric;
        only the odds ratio is reported.
    goal:
        Whether the outcome is desirable. Affects labels and the NNT/NNH
        classification only.

    Returns
    -------
    MetricsResult
        A new frozen result; fields that cannot be computed are None.
    """
    design = StudyDesign(design)
    goal = StudyGoal(goal)
    corrected = table.corrected(policy.continuity_correction)
    builder = MetricsBuilder()

    if not design.allows_incidence:
        logger.debug("Skipping incidence-based metrics for %s design", design.value)
    else:
        risks = group_risks(table, corrected)
        if risks is None:
            logger.debug(
                "Skipping incidence-based metrics: empty group (exposed=%d, control=%d)",
                table.exposed_total, table.control_total,
            )
        else:
            rd = risk_difference(risks, policy)
            (
                builder.with_risks(risks)
                .with_risk_difference(rd)
                .with_impact(impact_measures(risks, goal))
                .with_relative_risk(relative_risk(risks, corrected, policy))
                .with_nnt(number_needed_to_treat(rd, goal))
                .with_power(post_hoc_power(table, risks, policy))
            )

    builder.with_odds_ratio(odds_ratio(table, corrected, policy))
    return builder.build()
