"""
Result types produced by the scoring engine.
All models are frozen: a ScoreResult never changes after it is built.
"""

from enum import Enum
from typing import Dict, Tuple

from pydantic import BaseModel, ConfigDict, Field

SECTIONS = ("owner", "business", "strategic", "organizational", "transaction")

SECTION_TITLES = {
    "owner": "Owner Readiness",
    "business": "Business Performance",
    "strategic": "Strategic Position",
    "organizational": "Organizational Readiness",
    "transaction": "Transaction Readiness",
}


class ReadinessCategory(str, Enum):
    EXIT_READY = "EXIT READY"
    NEARLY_READY = "NEARLY READY"
    PREPARATION_NEEDED = "PREPARATION NEEDED"
    SIGNIFICANT_GAPS = "SIGNIFICANT GAPS"
    NOT_READY = "NOT READY"


class SectionScores(BaseModel):
    model_config = ConfigDict(frozen=True)

    owner: int = Field(ge=0, le=100)
    business: int = Field(ge=0, le=100)
    strategic: int = Field(ge=0, le=100)
    organizational: int = Field(ge=0, le=100)
    transaction: int = Field(ge=0, le=100)

    def as_dict(self) -> Dict[str, int]:
        return {section: getattr(self, section) for section in SECTIONS}


class WeightVector(BaseModel):
    """Section weights; resolve_weights guarantees they sum to 1.0"""

    model_config = ConfigDict(frozen=True)

    owner: float = Field(ge=0)
    business: float = Field(ge=0)
    strategic: float = Field(ge=0)
    organizational: float = Field(ge=0)
    transaction: float = Field(ge=0)

    def as_dict(self) -> Dict[str, float]:
        return {section: getattr(self, section) for section in SECTIONS}

    @property
    def total(self) -> float:
        return sum(self.as_dict().values())


class Adjustment(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    factor: float = Field(gt=0, le=2)


class AppliedAdjustments(BaseModel):
    model_config = ConfigDict(frozen=True)

    multipliers: Tuple[Adjustment, ...] = ()
    penalties: Tuple[Adjustment, ...] = ()
    weights: WeightVector


class ScoreResult(BaseModel):
    """Final output of one scoring run"""

    model_config = ConfigDict(frozen=True)

    overall: int = Field(ge=0, le=100)
    sections: SectionScores
    category: ReadinessCategory
    flags: Tuple[str, ...] = ()
    adjustments: AppliedAdjustments

    def to_dict(self) -> Dict:
        return self.model_dump(mode="json")
