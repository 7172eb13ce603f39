"""
Trial Routes

POST /trial runs the adversarial trial for a ledger market and archives
the transcript; POST /settle submits the archived result to the ledger
as the settlement authority.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from api.deps import AppState, get_state
from api.errors import InvalidRequestError
from api.models.requests import SettleRequest, TrialRequest
from api.models.responses import SettleResponse, TrialResponse
from core.crypto import rubric_hash
from core.schemas import MarketQuestion
from orchestrator import run_trial

logger = logging.getLogger(__name__)

router = APIRouter(tags=["trial"])


@router.post("/trial", response_model=TrialResponse)
async def start_trial(
    request: TrialRequest,
    state: AppState = Depends(get_state),
) -> TrialResponse:
    """
    Run a trial for a market.

    The rubric must hash to the market's committed rubric_hash.
    """
    market = state.ledger.get_market(request.market_id)
    rubric = request.rubric or state.rubrics.get(request.market_id)
    if rubric is None:
        raise InvalidRequestError(
            f"No rubric known for market {request.market_id}; include it in the request",
            details={"market_id": request.market_id},
        )
    if rubric_hash(rubric) != market.rubric_hash:
        raise InvalidRequestError(
            "Rubric does not match the market's committed rubric_hash",
            details={"market_id": request.market_id, "rubric_hash": market.rubric_hash},
        )

    question = MarketQuestion(
        id=str(market.id),
        question=market.question,
        rubric=rubric,
        settlement_deadline=market.deadline,
        metadata={"market_id": str(market.id)},
    )

    logger.info("Running trial for market #%d", market.id)
    transcript = await run_trial(
        question,
        state.config,
        context=state.agent_context(),
        sources=state.evidence_sources,
    )
    transcript_hash = state.store.put(transcript)
    state.pending.remember(market.id, transcript_hash)

    return TrialResponse(
        market_id=market.id,
        transcript_hash=transcript_hash,
        decision=transcript.decision,
        transcript=transcript,
    )


@router.post("/settle", response_model=SettleResponse)
async def settle(
    request: SettleRequest,
    state: AppState = Depends(get_state),
) -> SettleResponse:
    """Submit the pending trial result for a market to the ledger."""
    receipt = state.submitter.submit_pending(request.market_id, state.pending)
    state.persist()
    return SettleResponse(receipt=receipt, market=state.ledger.get_market(request.market_id))
