"""Goal-dependent labelling of impact measures and NNT/NNH."""
from __future__ import annotations

from epicalc.analysis.base import NNTType
from epicalc.schema.base import StudyGoal

# (goal, risk difference > 0) -> (absolute label, relative label)
IMPACT_LABELS: dict[tuple[StudyGoal, bool], tuple[str, str]] = {
    (StudyGoal.UNDESIRABLE, True): (
        "Absolute Risk Increase (ARI)",
        "Relative Risk Increase (RRI)",
    ),
    (StudyGoal.UNDESIRABLE, False): (
        "Absolute Risk Reduction (ARR)",
        "Relative Risk Reduction (RRR)",
    ),
    (StudyGoal.DESIRABLE, True): (
        "Absolute Benefit Increase (ABI)",
        "Relative Benefit Increase (RBI)",
    ),
    (StudyGoal.DESIRABLE, False): (
        "Absolute Benefit Reduction (ABR)",
        "Relative Benefit Reduction (RBR)",
    ),
}


def impact_labels(goal: StudyGoal, rd: float) -> tuple[str, str]:
    """Return (absolute, relative) labels for a non-zero risk difference."""
    return IMPACT_LABELS[(StudyGoal(goal), rd > 0)]


def classify_nnt(goal: StudyGoal, rd: float) -> NNTType:
    """Benefit when the exposure lowers an undesirable outcome or raises a desirable one."""
    goal = StudyGoal(goal)
    if (goal is StudyGoal.UNDESIRABLE and rd < 0) or (goal is StudyGoal.DESIRABLE and rd > 0):
        return NNTType.BENEFIT
    return NNTType.HARM
