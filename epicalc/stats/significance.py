"""Two-tailed significance from a Z statistic."""
from __future__ import annotations

from epicalc.config import DEFAULT_POLICY, StatisticalPolicy
from epicalc.stats.normal import normal_cdf


def two_tailed_p_value(z: float, policy: StatisticalPolicy = DEFAULT_POLICY) -> str:
    """Return the two-tailed p-value for *z* as a display string.

    Values below the policy floor are reported as ``"<0.0001"`` rather than
    a rounded zero; everything else is fixed to four decimals.
    """
    p = 2.0 * (1.0 - normal_cdf(abs(z)))
    if p < policy.p_value_floor:
        return f"<{policy.p_value_floor:.{policy.p_value_decimals}f}"
    return f"{p:.{policy.p_value_decimals}f}"
