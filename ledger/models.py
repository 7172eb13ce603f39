"""
Ledger Models

Market and position records held by the SettlementLedger. Amounts are
integers in base units; the ledger never uses floats for money.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from core.schemas import Side


class MarketStatus(str, Enum):
    """
    Market lifecycle. Transitions only move forward:

        OPEN -> SETTLEMENT_REQUESTED -> RESOLVED | ESCALATED
    """
    OPEN = "Open"
    SETTLEMENT_REQUESTED = "SettlementRequested"
    RESOLVED = "Resolved"
    ESCALATED = "Escalated"

    @property
    def is_final(self) -> bool:
        return self in (MarketStatus.RESOLVED, MarketStatus.ESCALATED)


ALLOWED_TRANSITIONS: dict[MarketStatus, frozenset[MarketStatus]] = {
    MarketStatus.OPEN: frozenset({MarketStatus.SETTLEMENT_REQUESTED}),
    MarketStatus.SETTLEMENT_REQUESTED: frozenset({MarketStatus.RESOLVED, MarketStatus.ESCALATED}),
    MarketStatus.RESOLVED: frozenset(),
    MarketStatus.ESCALATED: frozenset(),
}


def can_transition(current: MarketStatus, target: MarketStatus) -> bool:
    return target in ALLOWED_TRANSITIONS[current]


class Outcome(str, Enum):
    NONE = "None"
    YES = "Yes"
    NO = "No"

    @classmethod
    def from_side(cls, side: Side) -> "Outcome":
        return cls.YES if side is Side.YES else cls.NO

    def to_side(self) -> Optional[Side]:
        if self is Outcome.NONE:
            return None
        return Side.YES if self is Outcome.YES else Side.NO


class Market(BaseModel):
    """
    One market on the ledger.

    Pools only grow while the market is open; claims zero positions but
    never shrink the pools, which stay as the historical totals.
    """

    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    id: int = Field(..., ge=0)
    question: str
    rubric_hash: str = Field(..., description="Commitment to the rubric")
    deadline: datetime
    creator: str
    creation_deposit: int = Field(default=0, ge=0)
    created_at: datetime

    status: MarketStatus = MarketStatus.OPEN
    outcome: Outcome = Outcome.NONE
    yes_pool: int = Field(default=0, ge=0)
    no_pool: int = Field(default=0, ge=0)
    transcript_hash: Optional[str] = None
    score_yes: Optional[float] = None
    score_no: Optional[float] = None

    # claim bookkeeping
    claimed_winning_stake: int = Field(default=0, ge=0)
    paid_out: int = Field(default=0, ge=0)
    refunded: int = Field(default=0, ge=0)
    deposit_returned: bool = False

    @property
    def total_pool(self) -> int:
        return self.yes_pool + self.no_pool

    def pool(self, side: Side) -> int:
        return self.yes_pool if side is Side.YES else self.no_pool

    @property
    def winning_side(self) -> Optional[Side]:
        return self.outcome.to_side()

    @property
    def winning_pool(self) -> int:
        side = self.winning_side
        return self.pool(side) if side is not None else 0

    @property
    def outstanding_winning_stake(self) -> int:
        return self.winning_pool - self.claimed_winning_stake


class Position(BaseModel):
    """A participant's accumulated stake on both sides of one market."""

    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    market_id: int
    participant: str
    yes: int = Field(default=0, ge=0)
    no: int = Field(default=0, ge=0)

    def amount(self, side: Side) -> int:
        return self.yes if side is Side.YES else self.no

    @property
    def total(self) -> int:
        return self.yes + self.no

    @property
    def is_empty(self) -> bool:
        return self.total == 0
