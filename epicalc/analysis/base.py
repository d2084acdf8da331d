"""Immutable result containers produced by the metric engine."""
from __future__ import annotations

import math
from dataclasses import dataclass, fields
from enum import Enum
from typing import Any

import pandas as pd


class NNTType(str, Enum):
    """Whether the reciprocal risk difference is a number needed to treat or to harm."""

    BENEFIT = "Benefit"
    HARM = "Harm"


@dataclass(frozen=True)
class PointEstimate:
    value: float

    def to_dict(self) -> dict:
        return {"value": self.value}


@dataclass(frozen=True)
class IntervalEstimate:
    """Point estimate with a 95% confidence interval."""

    value: float
    lower: float
    upper: float

    def to_dict(self) -> dict:
        return {"value": self.value, "lower": self.lower, "upper": self.upper}


@dataclass(frozen=True)
class RatioEstimate:
    """Ratio measure (RR or OR) with log-scale CI and Wald test."""

    value: float
    lower: float
    upper: float
    p_value: str
    z_stat: float

    def to_dict(self) -> dict:
        return {
            "value": self.value,
            "lower": self.lower,
            "upper": self.upper,
            "pValue": self.p_value,
            "zStat": self.z_stat,
        }


@dataclass(frozen=True)
class ImpactMeasure:
    label: str
    value: float

    def to_dict(self) -> dict:
        return {"label": self.label, "value": self.value}


@dataclass(frozen=True)
class ImpactMeasures:
    absolute: ImpactMeasure
    relative: ImpactMeasure

    def to_dict(self) -> dict:
        return {"absolute": self.absolute.to_dict(), "relative": self.relative.to_dict()}


@dataclass(frozen=True)
class NNTEstimate:
    """NNT/NNH with bounds taken as reciprocals of the risk-difference CI.

    ``lower`` may exceed ``upper`` and either may be infinite when the
    risk-difference interval crosses zero.
    """

    value: float
    type: NNTType
    lower: float
    upper: float

    def to_dict(self) -> dict:
        return {
            "value": self.value,
            "type": self.type.value,
            "lower": self.lower,
            "upper": self.upper,
        }


# Field name -> key used by to_dict(), in display order.
_RESULT_KEYS: dict[str, str] = {
    "absolute_risk_exposed": "absoluteRiskExposed",
    "absolute_risk_control": "absoluteRiskControl",
    "risk_difference": "riskDifference",
    "relative_risk": "relativeRisk",
    "odds_ratio": "oddsRatio",
    "impact_measures": "impactMeasures",
    "nnt": "nnt",
    "power": "power",
    "type1_error": "type1Error",
    "type2_error": "type2Error",
}


@dataclass(frozen=True)
class MetricsResult:
    """Every metric for one table/design/goal triple. ``None`` means not computable."""

    absolute_risk_exposed: PointEstimate | None = None
    absolute_risk_control: PointEstimate | None = None
    risk_difference: IntervalEstimate | None = None
    relative_risk: RatioEstimate | None = None
    odds_ratio: RatioEstimate | None = None
    impact_measures: ImpactMeasures | None = None
    nnt: NNTEstimate | None = None
    power: PointEstimate | None = None
    type1_error: PointEstimate | None = None
    type2_error: PointEstimate | None = None

    def is_empty(self) -> bool:
        return all(getattr(self, f.name) is None for f in fields(self))

    def to_dict(self) -> dict[str, Any]:
        """Nested plain-dict form keyed the way external consumers expect."""
        out: dict[str, Any] = {}
        for name, key in _RESULT_KEYS.items():
            metric = getattr(self, name)
            out[key] = metric.to_dict() if metric is not None else None
        return out

    def to_frame(self) -> pd.DataFrame:
        """One row per computed metric, suitable for tabular display."""
        rows: list[dict[str, Any]] = []

        def _row(metric: str, value: float, **extra: Any) -> None:
            row = {
                "metric": metric,
                "value": value,
                "lower": math.nan,
                "upper": math.nan,
                "p_value": None,
                "z_stat": math.nan,
                "label": None,
            }
            row.update(extra)
            rows.append(row)

        for name in ("absolute_risk_exposed", "absolute_risk_control"):
            metric = getattr(self, name)
            if metric is not None:
                _row(name, metric.value)
        if self.risk_difference is not None:
            rd = self.risk_difference
            _row("risk_difference", rd.value, lower=rd.lower, upper=rd.upper)
        for name in ("relative_risk", "odds_ratio"):
            ratio = getattr(self, name)
            if ratio is not None:
                _row(name, ratio.value, lower=ratio.lower, upper=ratio.upper,
                     p_value=ratio.p_value, z_stat=ratio.z_stat)
        if self.impact_measures is not None:
            _row("impact_absolute", self.impact_measures.absolute.value,
                 label=self.impact_measures.absolute.label)
            _row("impact_relative", self.impact_measures.relative.value,
                 label=self.impact_measures.relative.label)
        if self.nnt is not None:
            _row("nnt", self.nnt.value, lower=self.nnt.lower, upper=self.nnt.upper,
                 label=self.nnt.type.value)
        for name in ("power", "type1_error", "type2_error"):
            metric = getattr(self, name)
            if metric is not None:
                _row(name, metric.value)

        return pd.DataFrame(
            rows,
            columns=["metric", "value", "lower", "upper", "p_value", "z_stat", "label"],
        )
