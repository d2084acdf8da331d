"""Standard normal CDF via the Abramowitz and Stegun erf approximation."""
from __future__ import annotations

import math

# Abramowitz and Stegun 7.1.26, maximum absolute error about 1.5e-7.
_P = 0.3275911
_A1 = 0.254829592
_A2 = -0.284496736
_A3 = 1.421413741
_A4 = -1.453152027
_A5 = 1.061405429


def _erf_abs(z: float) -> float:
    """Approximate erf(|z|)."""
    z = abs(z)
    t = 1.0 / (1.0 + _P * z)
    poly = ((((_A5 * t + _A4) * t + _A3) * t + _A2) * t + _A1) * t
    return 1.0 - poly * math.exp(-z * z)


def normal_cdf(x: float) -> float:
    """Return P(Z <= x) for a standard normal Z.

    Uses CDF(x) = 0.5 * (1 + erf(x / sqrt(2))). Accepts +/-inf; NaN is not
    a valid input.
    """
    z = x / math.sqrt(2.0)
    sign = 1.0 if z >= 0 else -1.0
    return 0.5 * (1.0 + sign * _erf_abs(z))
