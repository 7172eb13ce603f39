"""
Health Check Route

Simple health check endpoint for liveness probes.
"""

from fastapi import APIRouter, Depends

from api.deps import AppState, get_state
from api.models.responses import HealthResponse
from core.llm import get_configured_providers


router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check(state: AppState = Depends(get_state)) -> HealthResponse:
    """Service status for liveness probes."""
    return HealthResponse(
        ok=True,
        mode="mock" if state.config.pipeline.use_mocks else "live",
        providers=[p["provider"] for p in get_configured_providers()],
    )
