"""
Module 01 - Schemas & Canonicalization
File: ruling.py

Purpose: Adjudicator output schemas.
"""

from pydantic import BaseModel, ConfigDict, Field

from .arguments import Score
from .market import Side


class CriterionScore(BaseModel):
    """Both sides' scores on one rubric criterion."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    criterion: str = Field(..., description="Rubric criterion name", min_length=1)
    score_yes: Score = Field(..., description="YES score (0-100)")
    score_no: Score = Field(..., description="NO score (0-100)")
    reasoning: str = Field(..., description="Why these scores")


class JudgeRuling(BaseModel):
    """
    The adjudicator's ruling.

    final_verdict is taken as declared; it is not re-derived from the
    aggregate scores.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    final_verdict: Side = Field(..., description="Declared winner")
    score_yes: Score = Field(..., description="Weighted aggregate YES score (0-100)")
    score_no: Score = Field(..., description="Weighted aggregate NO score (0-100)")
    criterion_scores: list[CriterionScore] = Field(
        ...,
        description="One score per rubric criterion, in rubric order",
    )
    ruling_text: str = Field(..., description="Short natural-language ruling")
    hallucinations_detected: list[str] = Field(
        default_factory=list,
        description="Citations not present among the evidence titles",
    )
    model: str = Field(default="unknown", description="Provenance tag of the producing model")

    @property
    def margin(self) -> float:
        return abs(self.score_yes - self.score_no)

    @property
    def is_internally_consistent(self) -> bool:
        """False when the declared verdict has the strictly lower aggregate score."""
        if self.score_yes == self.score_no:
            return True
        leader = Side.YES if self.score_yes > self.score_no else Side.NO
        return leader is self.final_verdict
