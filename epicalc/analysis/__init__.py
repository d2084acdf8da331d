from epicalc.analysis.base import (
    ImpactMeasure,
    ImpactMeasures,
    IntervalEstimate,
    MetricsResult,
    NNTEstimate,
    NNTType,
    PointEstimate,
    RatioEstimate,
)
from epicalc.analysis.metrics import MetricsBuilder, compute_metrics
