"""
Module 01 - Schemas & Canonicalization
File: decision.py

Purpose: Settlement decision produced by the confidence evaluator.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .market import Side


class SettlementAction(str, Enum):
    RESOLVE = "RESOLVE"
    ESCALATE = "ESCALATE"


class SettlementDecision(BaseModel):
    """
    RESOLVE with a verdict, or ESCALATE without one.

    margin is |score_yes - score_no| and is always present.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    action: SettlementAction = Field(..., description="RESOLVE or ESCALATE")
    verdict: Side | None = Field(default=None, description="Verdict; None iff escalated")
    margin: float = Field(..., description="Absolute score difference", ge=0)
    reason: str = Field(..., description="Human-readable audit string")

    @model_validator(mode="after")
    def validate_verdict_matches_action(self) -> "SettlementDecision":
        if self.action == SettlementAction.RESOLVE and self.verdict is None:
            raise ValueError("RESOLVE decision requires a verdict")
        if self.action == SettlementAction.ESCALATE and self.verdict is not None:
            raise ValueError("ESCALATE decision must not carry a verdict")
        return self

    @property
    def is_resolved(self) -> bool:
        return self.action == SettlementAction.RESOLVE
