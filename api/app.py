"""
FastAPI Application

Main application setup and configuration.

Usage:
    uvicorn api.app:app --reload

    # Or run directly
    python -m api.app
"""

from __future__ import annotations

import logging
import os
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.deps import AppState, load_runtime_config
from api.errors import APIError, api_error_handler, domain_error_handler, generic_error_handler
from api.routes import health, markets, transcripts, trial
from core.schemas import TrialByFireException


def configure_logging(level: Optional[str] = None) -> None:
    """Configure root logging; level from TRIAL_LOG_LEVEL, default INFO."""
    raw = level or os.getenv("TRIAL_LOG_LEVEL") or "INFO"
    logging.basicConfig(
        level=getattr(logging, raw.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def create_app(state: Optional[AppState] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        state: Shared state; built from the runtime config when omitted
    """
    if state is None:
        config = load_runtime_config()
        configure_logging(config.log_level)
        state = AppState.from_config(config)

    app = FastAPI(
        title="TrialByFire API",
        description="""
HTTP API for adversarial trial settlement of subjective prediction markets.

## Endpoints

- **POST /markets** - Create a market (rubric committed by hash)
- **POST /markets/{id}/positions** - Stake on YES or NO
- **POST /markets/{id}/request-settlement** - Permissionless, after the deadline
- **POST /trial** - Run the adversarial trial for a market
- **POST /settle** - Settle or escalate with the trial result
- **POST /markets/{id}/claim** / **refund** - Collect winnings or refunds
- **GET /transcripts/{hash}** - Retrieve an archived transcript
- **GET /events** - Ledger event log
        """,
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.trial = state

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(APIError, api_error_handler)
    app.add_exception_handler(TrialByFireException, domain_error_handler)
    app.add_exception_handler(Exception, generic_error_handler)

    app.include_router(health.router)
    app.include_router(markets.router)
    app.include_router(trial.router)
    app.include_router(transcripts.router)

    return app


# Create the application instance
app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=int(os.getenv("API_PORT", "8000")))
