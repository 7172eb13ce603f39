"""
Module 01 - Schemas & Canonicalization
File: transcript.py

Purpose: The trial transcript. This is the audit artifact whose canonical
hash is anchored on the ledger; it is never mutated after creation.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from .arguments import AdvocateArgument
from .decision import SettlementDecision
from .evidence import EvidenceBundle
from .market import MarketQuestion
from .ruling import JudgeRuling
from .versioning import SCHEMA_VERSION, SchemaVersion


class TrialTranscript(BaseModel):
    """Complete record of one trial's inputs and outputs."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    schema_version: SchemaVersion = Field(default=SCHEMA_VERSION)
    question: MarketQuestion
    evidence: EvidenceBundle
    advocate_yes: AdvocateArgument
    advocate_no: AdvocateArgument
    judge_ruling: JudgeRuling
    decision: SettlementDecision
    executed_at: datetime = Field(..., description="When the trial started (UTC)")
    duration_ms: int = Field(..., description="Wall-clock duration", ge=0)
