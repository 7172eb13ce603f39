"""
TrialByFire HTTP API (FastAPI)

- Market lifecycle on the settlement ledger
- POST /trial - Run the adversarial trial for a market
- POST /settle - Anchor the result on the ledger
- GET /transcripts/{hash}, GET /events - Audit trail

Usage:
    uvicorn api.app:app --reload
"""

__version__ = "0.1.0"
