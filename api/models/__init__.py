"""API request and response models."""

from api.models.requests import (
    CallerRequest,
    CreateMarketRequest,
    ParticipantRequest,
    SettleRequest,
    TakePositionRequest,
    TrialRequest,
)
from api.models.responses import (
    AmountResponse,
    ErrorDetail,
    ErrorResponse,
    EventsResponse,
    HealthResponse,
    MarketListResponse,
    MarketResponse,
    PositionResponse,
    SettleResponse,
    TranscriptResponse,
    TrialResponse,
)

__all__ = [
    "CallerRequest",
    "CreateMarketRequest",
    "ParticipantRequest",
    "SettleRequest",
    "TakePositionRequest",
    "TrialRequest",
    "AmountResponse",
    "ErrorDetail",
    "ErrorResponse",
    "EventsResponse",
    "HealthResponse",
    "MarketListResponse",
    "MarketResponse",
    "PositionResponse",
    "SettleResponse",
    "TranscriptResponse",
    "TrialResponse",
]
