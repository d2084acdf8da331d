from dataclasses import dataclass


@dataclass(frozen=True)
class StatisticalPolicy:
    """Fixed constants used by the metric engine and the reporting layer."""
    alpha: float = 0.05              # Two-tailed significance level
    z_critical: float = 1.96         # Critical z for alpha / 2
    continuity_correction: float = 0.5  # Substituted for zero cells
    p_value_floor: float = 0.0001    # Below this, p-values are reported as "<floor"
    p_value_decimals: int = 4
    target_power: float = 0.80       # Power targeted by sample size advice
    z_beta: float = 0.8416           # z for 1 - target_power
    adequate_power: float = 0.80     # Below this a study is called underpowered


DEFAULT_POLICY = StatisticalPolicy()
