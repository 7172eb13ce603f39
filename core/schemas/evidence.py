"""
Module 01 - Schemas & Canonicalization
File: evidence.py

Purpose: Evidence items and the bundle shared by advocates and the judge.
The bundle's ordered titles are the only citations the adjudicator accepts.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class EvidenceItem(BaseModel):
    """A single piece of evidence returned by a source."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    source: str = Field(..., description="Name of the producing source", min_length=1)
    title: str = Field(..., description="Title; the citation key", min_length=1)
    content: str = Field(..., description="Evidence text")
    url: str | None = Field(default=None, description="Where the evidence came from")
    retrieved_at: datetime = Field(..., description="When the item was fetched (UTC)")


class EvidenceBundle(BaseModel):
    """Ordered evidence items gathered for one question. May be empty."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    question_id: str = Field(..., description="Question the bundle was gathered for")
    items: list[EvidenceItem] = Field(default_factory=list, description="Ordered items")
    gathered_at: datetime = Field(..., description="When aggregation finished (UTC)")

    @property
    def titles(self) -> list[str]:
        return [item.title for item in self.items]

    @property
    def title_set(self) -> frozenset[str]:
        return frozenset(self.titles)

    @property
    def is_empty(self) -> bool:
        return not self.items

    def __len__(self) -> int:
        return len(self.items)
