"""
API Response Models

Pydantic models for API response serialization.
"""

from typing import Any, Optional

from pydantic import BaseModel, Field

from core.schemas import SettlementDecision, TrialTranscript
from ledger import Market, Position
from orchestrator.settlement import SettlementReceipt


class HealthResponse(BaseModel):
    """Response for GET /health endpoint."""

    ok: bool = True
    service: str = "trialbyfire-api"
    version: str = "v1"
    mode: str = Field(default="live", description="mock or live reasoning")
    providers: list[str] = Field(default_factory=list, description="Providers with an API key in the environment")


class MarketResponse(BaseModel):
    ok: bool = True
    market: Market


class MarketListResponse(BaseModel):
    ok: bool = True
    markets: list[Market] = Field(default_factory=list)


class PositionResponse(BaseModel):
    ok: bool = True
    position: Position


class TrialResponse(BaseModel):
    """Response for POST /trial."""

    ok: bool = True
    market_id: int
    transcript_hash: str = Field(..., description="Hash the settlement will anchor")
    decision: SettlementDecision
    transcript: TrialTranscript


class SettleResponse(BaseModel):
    ok: bool = True
    receipt: SettlementReceipt
    market: Market


class AmountResponse(BaseModel):
    """Response for claims, refunds and deposit returns."""

    ok: bool = True
    market_id: int
    recipient: str
    amount: int


class TranscriptResponse(BaseModel):
    ok: bool = True
    transcript_hash: str
    transcript: TrialTranscript


class EventsResponse(BaseModel):
    ok: bool = True
    events: list[dict[str, Any]] = Field(default_factory=list)
    next_seq: int = Field(..., description="Pass as since= to fetch only newer events")


class ErrorDetail(BaseModel):
    """Error detail structure."""

    code: str = Field(..., description="Error code")
    message: str = Field(..., description="Human-readable error message")
    details: dict[str, Any] = Field(default_factory=dict)


class ErrorResponse(BaseModel):
    """Standard error response."""

    ok: bool = False
    error: ErrorDetail
    request_id: Optional[str] = None
