"""
Module 01 - Schemas & Canonicalization
File: market.py

Purpose: Market question and resolution rubric.
A MarketQuestion is immutable after creation; the ledger only stores a
hash commitment to its rubric.
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class Side(str, Enum):
    """One side of a yes/no question."""

    YES = "YES"
    NO = "NO"

    @property
    def opposite(self) -> "Side":
        return Side.NO if self is Side.YES else Side.YES


class RubricCriterion(BaseModel):
    """A named, weighted criterion the adjudicator scores both sides against."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str = Field(..., description="Criterion name, referenced verbatim by arguments", min_length=1)
    description: str = Field(..., description="What the criterion measures")
    weight: int = Field(..., description="Relative weight (0-100)", ge=0, le=100)


class ResolutionRubric(BaseModel):
    """
    Weighted criteria plus the margin required to auto-resolve.

    Weights sum conceptually to 100; this is reported, not enforced.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    criteria: list[RubricCriterion] = Field(
        ...,
        description="Ordered list of criteria",
        min_length=1,
    )
    evidence_sources: list[str] = Field(
        default_factory=list,
        description="Names of the evidence sources this rubric expects",
    )
    confidence_threshold: int = Field(
        ...,
        description="Minimum |score_yes - score_no| needed to resolve without escalation",
        ge=0,
        le=100,
    )

    @field_validator("criteria")
    @classmethod
    def validate_unique_names(cls, v: list[RubricCriterion]) -> list[RubricCriterion]:
        names = [c.name for c in v]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            raise ValueError(f"Duplicate rubric criteria: {duplicates}")
        return v

    @property
    def criterion_names(self) -> list[str]:
        return [c.name for c in self.criteria]

    @property
    def total_weight(self) -> int:
        return sum(c.weight for c in self.criteria)


class MarketQuestion(BaseModel):
    """A subjective yes/no question put on trial."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    id: str = Field(..., description="Question identifier", min_length=1)
    question: str = Field(..., description="Natural-language question", min_length=1)
    rubric: ResolutionRubric = Field(..., description="Resolution rubric")
    settlement_deadline: datetime = Field(..., description="When the market may be settled (UTC)")
    metadata: dict[str, str] = Field(
        default_factory=dict,
        description="Free-form labels (e.g. ledger market id)",
    )

    @model_validator(mode="after")
    def validate_question_text(self) -> "MarketQuestion":
        if not self.question.strip():
            raise ValueError("question must not be blank")
        return self
