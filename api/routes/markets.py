"""
Market Routes

Thin HTTP wrappers over the SettlementLedger. Ledger rejections are
turned into error responses by the app's exception handlers.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends

from api.deps import AppState, get_state
from api.models.requests import (
    CallerRequest,
    CreateMarketRequest,
    ParticipantRequest,
    TakePositionRequest,
)
from api.models.responses import (
    AmountResponse,
    MarketListResponse,
    MarketResponse,
    PositionResponse,
)
from core.crypto import rubric_hash
from ledger import MarketStatus

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/markets", tags=["markets"])


@router.post("", response_model=MarketResponse)
async def create_market(
    request: CreateMarketRequest,
    state: AppState = Depends(get_state),
) -> MarketResponse:
    market_id = state.ledger.create_market(
        request.creator,
        request.question,
        rubric_hash(request.rubric),
        request.deadline,
        deposit=request.deposit,
    )
    state.rubrics[market_id] = request.rubric
    state.persist()
    return MarketResponse(market=state.ledger.get_market(market_id))


@router.get("", response_model=MarketListResponse)
async def list_markets(
    status: Optional[MarketStatus] = None,
    state: AppState = Depends(get_state),
) -> MarketListResponse:
    return MarketListResponse(markets=state.ledger.list_markets(status=status))


@router.get("/{market_id}", response_model=MarketResponse)
async def get_market(market_id: int, state: AppState = Depends(get_state)) -> MarketResponse:
    return MarketResponse(market=state.ledger.get_market(market_id))


@router.post("/{market_id}/positions", response_model=PositionResponse)
async def take_position(
    market_id: int,
    request: TakePositionRequest,
    state: AppState = Depends(get_state),
) -> PositionResponse:
    position = state.ledger.take_position(market_id, request.participant, request.side, request.amount)
    state.persist()
    return PositionResponse(position=position)


@router.get("/{market_id}/positions/{participant}", response_model=PositionResponse)
async def get_position(
    market_id: int,
    participant: str,
    state: AppState = Depends(get_state),
) -> PositionResponse:
    return PositionResponse(position=state.ledger.position_of(market_id, participant))


@router.post("/{market_id}/request-settlement", response_model=MarketResponse)
async def request_settlement(
    market_id: int,
    request: CallerRequest,
    state: AppState = Depends(get_state),
) -> MarketResponse:
    market = state.ledger.request_settlement(market_id, caller=request.caller)
    state.persist()
    return MarketResponse(market=market)


@router.post("/{market_id}/claim", response_model=AmountResponse)
async def claim_winnings(
    market_id: int,
    request: ParticipantRequest,
    state: AppState = Depends(get_state),
) -> AmountResponse:
    amount = state.ledger.claim_winnings(market_id, request.participant)
    state.persist()
    return AmountResponse(market_id=market_id, recipient=request.participant, amount=amount)


@router.post("/{market_id}/refund", response_model=AmountResponse)
async def claim_refund(
    market_id: int,
    request: ParticipantRequest,
    state: AppState = Depends(get_state),
) -> AmountResponse:
    amount = state.ledger.claim_refund(market_id, request.participant)
    state.persist()
    return AmountResponse(market_id=market_id, recipient=request.participant, amount=amount)


@router.post("/{market_id}/creation-deposit", response_model=AmountResponse)
async def claim_creation_deposit(
    market_id: int,
    request: CallerRequest,
    state: AppState = Depends(get_state),
) -> AmountResponse:
    amount = state.ledger.claim_creation_deposit(market_id, request.caller)
    state.persist()
    return AmountResponse(market_id=market_id, recipient=request.caller, amount=amount)
