"""
Transcript and Event Routes

Read-only access to archived transcripts and the ledger event log.
"""

from fastapi import APIRouter, Depends, Query

from api.deps import AppState, get_state
from api.models.responses import EventsResponse, TranscriptResponse


router = APIRouter(tags=["audit"])


@router.get("/transcripts/{transcript_hash}", response_model=TranscriptResponse)
async def get_transcript(
    transcript_hash: str,
    state: AppState = Depends(get_state),
) -> TranscriptResponse:
    return TranscriptResponse(
        transcript_hash=transcript_hash,
        transcript=state.store.get(transcript_hash),
    )


@router.get("/events", response_model=EventsResponse)
async def list_events(
    since: int = Query(default=0, ge=0),
    market_id: int | None = Query(default=None, ge=0),
    state: AppState = Depends(get_state),
) -> EventsResponse:
    events = state.ledger.events(market_id=market_id, since=since)
    return EventsResponse(
        events=[event.model_dump(mode="json") for event in events],
        next_seq=len(state.ledger.event_log),
    )
