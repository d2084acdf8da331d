"""
epicalc

Association, impact and power statistics for a 2x2 exposure/outcome table.

The engine takes four cell counts plus a study design and a study goal and
returns an immutable MetricsResult: absolute risks, risk difference, relative
risk, odds ratio, impact measures, NNT/NNH and post-hoc power. Metrics that
cannot be computed for the given inputs are reported as None.
"""

__version__ = "1.0.0"

from .analysis.base import MetricsResult
from .analysis.metrics import compute_metrics
from .schema.base import ContingencyTable, StudyDesign, StudyGoal
from .stats.normal import normal_cdf
from .stats.sample_size import required_sample_size
from .stats.significance import two_tailed_p_value

__all__ = [
    "ContingencyTable",
    "MetricsResult",
    "StudyDesign",
    "StudyGoal",
    "compute_metrics",
    "normal_cdf",
    "required_sample_size",
    "two_tailed_p_value",
]
