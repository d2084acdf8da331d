"""Per-group sample size for comparing two proportions."""
from __future__ import annotations

import math

from epicalc.config import DEFAULT_POLICY, StatisticalPolicy


def required_sample_size(
    p1: float | None,
    p2: float | None,
    policy: StatisticalPolicy = DEFAULT_POLICY,
) -> int | None:
    """Estimate the participants needed in each group to detect p1 vs p2.

    Two-tailed test at ``policy.alpha`` with ``policy.target_power`` (80%
    by default):

        n = ceil((z_a/2 * sqrt(2 p (1 - p)) + z_b * sqrt(p1 q1 + p2 q2))^2 / (p1 - p2)^2)

    where p is the mean of p1 and p2.

    Returns None when either proportion is missing or NaN, or when they are
    equal (no finite sample separates identical proportions).
    """
    if p1 is None or p2 is None:
        return None
    if math.isnan(p1) or math.isnan(p2) or p1 == p2:
        return None

    p_pooled = (p1 + p2) / 2
    term_alpha = policy.z_critical * math.sqrt(2 * p_pooled * (1 - p_pooled))
    term_beta = policy.z_beta * math.sqrt(p1 * (1 - p1) + p2 * (1 - p2))
    denominator = (p1 - p2) ** 2
    if denominator == 0:
        return None
    return math.ceil((term_alpha + term_beta) ** 2 / denominator)
