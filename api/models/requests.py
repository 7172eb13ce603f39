"""
API Request Models

Pydantic models for API request validation.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from core.schemas import ResolutionRubric, Side


class CreateMarketRequest(BaseModel):
    """Request body for POST /markets."""

    creator: str = Field(..., min_length=1, description="Creator principal")
    question: str = Field(..., min_length=1, max_length=2000, description="The yes/no question")
    rubric: ResolutionRubric = Field(..., description="Rubric the trial will be judged against")
    deadline: datetime = Field(..., description="Settlement deadline (UTC)")
    deposit: int = Field(default=0, ge=0, description="Creation deposit in base units")


class TakePositionRequest(BaseModel):
    """Request body for POST /markets/{id}/positions."""

    participant: str = Field(..., min_length=1)
    side: Side
    amount: int = Field(..., description="Stake in base units; must be positive")


class CallerRequest(BaseModel):
    """Body for operations that only need to know who is calling."""

    caller: str = Field(default="anyone", min_length=1)


class ParticipantRequest(BaseModel):
    """Request body for claim and refund."""

    participant: str = Field(..., min_length=1)


class TrialRequest(BaseModel):
    """Request body for POST /trial."""

    market_id: int = Field(..., ge=0)
    rubric: Optional[ResolutionRubric] = Field(
        default=None,
        description="Rubric to judge against; defaults to the one the market was created with",
    )


class SettleRequest(BaseModel):
    """Request body for POST /settle."""

    market_id: int = Field(..., ge=0)
