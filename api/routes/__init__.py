"""API route handlers."""

from api.routes import health, markets, transcripts, trial

__all__ = ["health", "markets", "transcripts", "trial"]
