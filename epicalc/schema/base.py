"""Core input types for a 2x2 exposure/outcome analysis."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from epicalc.config import DEFAULT_POLICY


class StudyDesign(str, Enum):
    """Design of the study the table was collected from."""

    RCT = "rct"
    NON_RCT = "non-rct"
    COHORT_PROSPECTIVE = "cohort-prospective"
    COHORT_RETROSPECTIVE = "cohort-retrospective"
    CASE_CONTROL = "case-control"

    @property
    def allows_incidence(self) -> bool:
        """Whether risks (and everything derived from them) are estimable.

        Case-control studies sample on outcome status, so group incidence is
        meaningless for them.
        """
        return self is not StudyDesign.CASE_CONTROL


class StudyGoal(str, Enum):
    """Whether the counted outcome is something the exposure should raise or lower."""

    DESIRABLE = "desirable"
    UNDESIRABLE = "undesirable"


class ContingencyTable(BaseModel):
    """Raw 2x2 counts.

    ========  =========  ============
              outcome    no outcome
    ========  =========  ============
    exposed   ``a``      ``b``
    control   ``c``      ``d``
    ========  =========  ============
    """

    model_config = ConfigDict(frozen=True, strict=True)

    a: int = Field(ge=0, description="Exposed group, with outcome")
    b: int = Field(ge=0, description="Exposed group, without outcome")
    c: int = Field(ge=0, description="Control group, with outcome")
    d: int = Field(ge=0, description="Control group, without outcome")

    @property
    def exposed_total(self) -> int:
        return self.a + self.b

    @property
    def control_total(self) -> int:
        return self.c + self.d

    @property
    def total(self) -> int:
        return self.exposed_total + self.control_total

    def corrected(self, correction: float = DEFAULT_POLICY.continuity_correction) -> CorrectedTable:
        """Return the table with every zero cell replaced by *correction*."""
        return CorrectedTable(
            a=self.a or correction,
            b=self.b or correction,
            c=self.c or correction,
            d=self.d or correction,
        )


class CorrectedTable(BaseModel):
    """Continuity-corrected cells, used for standard errors and the odds ratio."""

    model_config = ConfigDict(frozen=True)

    a: float = Field(gt=0)
    b: float = Field(gt=0)
    c: float = Field(gt=0)
    d: float = Field(gt=0)

    @property
    def exposed_total(self) -> float:
        return self.a + self.b

    @property
    def control_total(self) -> float:
        return self.c + self.d
