"""
Settlement Submission

Turns a finished trial into a ledger transition. The transcript is
archived first, so the hash anchored on the ledger can always be resolved
back to the transcript.
"""

from __future__ import annotations

import logging
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from core.schemas import (
    ErrorCodes,
    SettlementAction,
    Side,
    TrialByFireException,
    TrialTranscript,
)
from core.storage import PendingTrials, TranscriptStore
from ledger import SettlementLedger

logger = logging.getLogger(__name__)


class SettlementReceipt(BaseModel):
    """What was submitted to the ledger for one market."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    market_id: int = Field(..., ge=0)
    action: SettlementAction
    verdict: Optional[Side] = None
    transcript_hash: str
    score_yes: float
    score_no: float


class SettlementSubmitter:
    """
    Acts as the settlement authority toward the ledger.

    Usage:
        submitter = SettlementSubmitter(ledger, store)
        receipt = submitter.submit(market_id, transcript)
    """

    def __init__(
        self,
        ledger: SettlementLedger,
        store: TranscriptStore,
        *,
        authority: Optional[str] = None,
    ) -> None:
        self.ledger = ledger
        self.store = store
        self.authority = authority or ledger.authority

    def submit(self, market_id: int, transcript: TrialTranscript) -> SettlementReceipt:
        """
        Archive the transcript and settle or escalate the market.

        The market must already be in SettlementRequested.

        Raises:
            LedgerException: If the ledger rejects the transition
        """
        transcript_hash = self.store.put(transcript)
        decision = transcript.decision
        ruling = transcript.judge_ruling

        if decision.is_resolved:
            self.ledger.settle(
                market_id,
                decision.verdict,
                ruling.score_yes,
                ruling.score_no,
                transcript_hash,
                caller=self.authority,
            )
        else:
            self.ledger.escalate(market_id, transcript_hash, caller=self.authority)

        logger.info(
            "Submitted %s for market %d (transcript %s)",
            decision.action.value, market_id, transcript_hash,
        )
        return SettlementReceipt(
            market_id=market_id,
            action=decision.action,
            verdict=decision.verdict,
            transcript_hash=transcript_hash,
            score_yes=ruling.score_yes,
            score_no=ruling.score_no,
        )

    def submit_pending(self, market_id: int, pending: PendingTrials) -> SettlementReceipt:
        """
        Submit the transcript previously remembered for market_id.

        The pending entry is only cleared once the ledger accepts it.

        Raises:
            TrialByFireException: TRANSCRIPT_NOT_FOUND if no trial is pending
            LedgerException: If the ledger rejects the transition
        """
        transcript_hash = pending.get(market_id)
        if transcript_hash is None:
            raise TrialByFireException(
                f"No pending trial for market {market_id}; run a trial first",
                code=ErrorCodes.TRANSCRIPT_NOT_FOUND,
                details={"market_id": market_id},
            )
        receipt = self.submit(market_id, self.store.get(transcript_hash))
        pending.pop(market_id)
        return receipt
