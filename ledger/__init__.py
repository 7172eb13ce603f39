"""
Settlement Ledger

Market lifecycle, stake accounting, payouts, refunds and the event log
that records every transition.
"""

from .events import (
    AnyLedgerEvent,
    CreationDepositReturned,
    EventLog,
    LedgerEvent,
    MarketCreated,
    MarketEscalated,
    MarketResolved,
    PositionTaken,
    RefundClaimed,
    SettlementRequested,
    WinningsClaimed,
    parse_events,
)
from .history import HistoryError, LedgerState, apply_event, reconstruct_markets, replay
from .ledger import SettlementLedger, compute_payout
from .models import (
    ALLOWED_TRANSITIONS,
    Market,
    MarketStatus,
    Outcome,
    Position,
    can_transition,
)
from .persistence import load_snapshot, save_snapshot
from .transfers import InMemoryBalances, TransferSink

__all__ = [
    "SettlementLedger",
    "compute_payout",
    "Market",
    "MarketStatus",
    "Outcome",
    "Position",
    "ALLOWED_TRANSITIONS",
    "can_transition",
    "EventLog",
    "LedgerEvent",
    "AnyLedgerEvent",
    "MarketCreated",
    "PositionTaken",
    "SettlementRequested",
    "MarketResolved",
    "MarketEscalated",
    "WinningsClaimed",
    "RefundClaimed",
    "CreationDepositReturned",
    "parse_events",
    "HistoryError",
    "LedgerState",
    "apply_event",
    "replay",
    "reconstruct_markets",
    "TransferSink",
    "InMemoryBalances",
    "save_snapshot",
    "load_snapshot",
]
