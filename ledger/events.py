"""
Ledger Events

Every successful transition appends exactly one event. The log alone is
enough to rebuild every market (see ledger.history).
"""

from __future__ import annotations

import threading
from datetime import datetime
from typing import Annotated, Any, Iterator, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from core.schemas import Side


class LedgerEvent(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    seq: int = Field(..., ge=0, description="Position in the log, from 0")
    market_id: int = Field(..., ge=0)
    at: datetime


class MarketCreated(LedgerEvent):
    type: Literal["MarketCreated"] = "MarketCreated"
    creator: str
    question: str
    rubric_hash: str
    deadline: datetime
    creation_deposit: int = 0


class PositionTaken(LedgerEvent):
    type: Literal["PositionTaken"] = "PositionTaken"
    participant: str
    side: Side
    amount: int


class SettlementRequested(LedgerEvent):
    type: Literal["SettlementRequested"] = "SettlementRequested"
    requested_by: str


class MarketResolved(LedgerEvent):
    type: Literal["MarketResolved"] = "MarketResolved"
    outcome: Side
    score_yes: float
    score_no: float
    transcript_hash: str


class MarketEscalated(LedgerEvent):
    type: Literal["MarketEscalated"] = "MarketEscalated"
    transcript_hash: str


class WinningsClaimed(LedgerEvent):
    type: Literal["WinningsClaimed"] = "WinningsClaimed"
    participant: str
    stake: int
    amount: int


class RefundClaimed(LedgerEvent):
    type: Literal["RefundClaimed"] = "RefundClaimed"
    participant: str
    amount: int


class CreationDepositReturned(LedgerEvent):
    type: Literal["CreationDepositReturned"] = "CreationDepositReturned"
    creator: str
    amount: int


AnyLedgerEvent = Annotated[
    Union[
        MarketCreated,
        PositionTaken,
        SettlementRequested,
        MarketResolved,
        MarketEscalated,
        WinningsClaimed,
        RefundClaimed,
        CreationDepositReturned,
    ],
    Field(discriminator="type"),
]

EVENT_LIST_ADAPTER = TypeAdapter(list[AnyLedgerEvent])


def parse_events(data: list[dict[str, Any]]) -> list[LedgerEvent]:
    """Validate a list of event dicts into typed events."""
    return EVENT_LIST_ADAPTER.validate_python(data)


class EventLog:
    """
    Append-only, sequence-numbered event log.

    Usage:
        log = EventLog()
        event = log.record(PositionTaken, market_id=0, at=now,
                           participant="alice", side=Side.YES, amount=10)
        assert event.seq == 0
    """

    def __init__(self, events: Optional[list[LedgerEvent]] = None) -> None:
        self._events: list[LedgerEvent] = []
        self._lock = threading.Lock()
        for event in events or []:
            self.append(event)

    def record(self, event_type: type[LedgerEvent], **fields: Any) -> LedgerEvent:
        """Build an event with the next sequence number and append it."""
        with self._lock:
            event = event_type(seq=len(self._events), **fields)
            self._events.append(event)
            return event

    def append(self, event: LedgerEvent) -> None:
        """
        Append an existing event.

        Raises:
            ValueError: If its sequence number is not the next one
        """
        with self._lock:
            if event.seq != len(self._events):
                raise ValueError(
                    f"Event seq {event.seq} out of order; expected {len(self._events)}"
                )
            self._events.append(event)

    def discard_last(self, event: LedgerEvent) -> None:
        """
        Remove event, which must be the most recent one.

        Raises:
            ValueError: If event is not the last event in the log
        """
        with self._lock:
            if not self._events or self._events[-1] is not event:
                raise ValueError(f"Event seq {event.seq} is not the last event")
            self._events.pop()

    def events(
        self,
        *,
        market_id: Optional[int] = None,
        since: int = 0,
    ) -> list[LedgerEvent]:
        """Events with seq >= since, optionally for one market."""
        with self._lock:
            selected = self._events[since:]
        if market_id is not None:
            selected = [e for e in selected if e.market_id == market_id]
        return selected

    def __len__(self) -> int:
        return len(self._events)

    def __iter__(self) -> Iterator[LedgerEvent]:
        return iter(self.events())
