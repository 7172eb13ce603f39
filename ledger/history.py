"""
Ledger History

Rebuilds ledger state from the event log. The SettlementLedger applies
its own events through apply_event, so live state and replayed state are
produced by the same code.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from core.schemas import Side

from .events import (
    CreationDepositReturned,
    LedgerEvent,
    MarketCreated,
    MarketEscalated,
    MarketResolved,
    PositionTaken,
    RefundClaimed,
    SettlementRequested,
    WinningsClaimed,
)
from .models import Market, MarketStatus, Outcome, Position


class HistoryError(Exception):
    """Raised when an event cannot be applied to the state it follows."""


@dataclass
class LedgerState:
    markets: dict[int, Market] = field(default_factory=dict)
    positions: dict[tuple[int, str], Position] = field(default_factory=dict)

    def market(self, market_id: int) -> Market:
        try:
            return self.markets[market_id]
        except KeyError:
            raise HistoryError(f"Event references unknown market {market_id}") from None

    def position(self, market_id: int, participant: str) -> Position:
        key = (market_id, participant)
        if key not in self.positions:
            self.positions[key] = Position(market_id=market_id, participant=participant)
        return self.positions[key]


def apply_event(state: LedgerState, event: LedgerEvent) -> None:
    """
    Apply one event to state in place.

    Events are trusted to be valid transitions; the ledger checks
    preconditions before recording them.
    """
    if isinstance(event, MarketCreated):
        if event.market_id in state.markets:
            raise HistoryError(f"Market {event.market_id} created twice")
        state.markets[event.market_id] = Market(
            id=event.market_id,
            question=event.question,
            rubric_hash=event.rubric_hash,
            deadline=event.deadline,
            creator=event.creator,
            creation_deposit=event.creation_deposit,
            created_at=event.at,
        )
        return

    market = state.market(event.market_id)

    if isinstance(event, PositionTaken):
        position = state.position(event.market_id, event.participant)
        if event.side is Side.YES:
            position.yes += event.amount
            market.yes_pool += event.amount
        else:
            position.no += event.amount
            market.no_pool += event.amount

    elif isinstance(event, SettlementRequested):
        market.status = MarketStatus.SETTLEMENT_REQUESTED

    elif isinstance(event, MarketResolved):
        market.status = MarketStatus.RESOLVED
        market.outcome = Outcome.from_side(event.outcome)
        market.score_yes = event.score_yes
        market.score_no = event.score_no
        market.transcript_hash = event.transcript_hash

    elif isinstance(event, MarketEscalated):
        market.status = MarketStatus.ESCALATED
        market.transcript_hash = event.transcript_hash

    elif isinstance(event, WinningsClaimed):
        position = state.position(event.market_id, event.participant)
        side = market.winning_side
        if side is None:
            raise HistoryError(f"Winnings claimed on unresolved market {market.id}")
        if side is Side.YES:
            position.yes = 0
        else:
            position.no = 0
        market.claimed_winning_stake += event.stake
        market.paid_out += event.amount

    elif isinstance(event, RefundClaimed):
        position = state.position(event.market_id, event.participant)
        position.yes = 0
        position.no = 0
        market.refunded += event.amount

    elif isinstance(event, CreationDepositReturned):
        market.deposit_returned = True

    else:
        raise HistoryError(f"Unknown event type {type(event).__name__}")


def replay(events: Iterable[LedgerEvent]) -> LedgerState:
    state = LedgerState()
    for event in events:
        apply_event(state, event)
    return state


def reconstruct_markets(events: Iterable[LedgerEvent]) -> dict[int, Market]:
    """
    Rebuild every market's status, outcome, pools and transcript hash from
    the event log alone.
    """
    return replay(events).markets
