"""
Module 01 - Schemas & Canonicalization
File: arguments.py

Purpose: Advocate argument schemas. These are validated strictly against
model output: out-of-range numbers, unknown fields and malformed citation
lists are rejected rather than coerced.
"""

from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field

from .market import Side

# 0-100; strict so that bools and numeric strings are rejected
Score = Annotated[float, Field(ge=0, le=100, strict=True)]


class CriterionArgument(BaseModel):
    """An advocate's claim for one rubric criterion."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    criterion: str = Field(..., description="Rubric criterion name", min_length=1)
    claim: str = Field(..., description="Argument for this criterion")
    evidence_citations: list[str] = Field(
        ...,
        description="Exact titles of cited evidence items",
    )
    strength: Score = Field(..., description="Self-reported strength (0-100)")


class AdvocateArgument(BaseModel):
    """One side's complete case."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    side: Side = Field(..., description="Mandated side")
    confidence: Score = Field(..., description="Self-reported confidence (0-100)")
    arguments: list[CriterionArgument] = Field(
        ...,
        description="One argument per rubric criterion, in rubric order",
    )
    weaknesses_in_opposing_case: list[str] = Field(
        ...,
        description="Weak points in the opposing side's likely case",
    )
    model: str = Field(default="unknown", description="Provenance tag of the producing model")

    @property
    def citations(self) -> list[str]:
        """All citations across criteria, in order, duplicates kept."""
        return [c for arg in self.arguments for c in arg.evidence_citations]

    def argument_for(self, criterion: str) -> CriterionArgument | None:
        for arg in self.arguments:
            if arg.criterion == criterion:
                return arg
        return None
