"""
Value Transfers

The ledger moves value only through a TransferSink. Incoming value
(stakes, creation deposits) is received before the ledger credits it;
outgoing value (winnings, refunds, deposit returns) is paid after the
ledger state has been updated, and a failed payment undoes that update.
"""

from __future__ import annotations

import logging
import threading
from collections import defaultdict
from typing import Iterable, Protocol, runtime_checkable

from .events import (
    CreationDepositReturned,
    LedgerEvent,
    MarketCreated,
    PositionTaken,
    RefundClaimed,
    WinningsClaimed,
)

logger = logging.getLogger(__name__)


@runtime_checkable
class TransferSink(Protocol):
    """Where the ledger's value comes from and goes to."""

    def receive(self, sender: str, amount: int, *, memo: str) -> None:
        """Take custody of amount from sender."""
        ...

    def pay(self, recipient: str, amount: int, *, memo: str) -> None:
        """Release amount from custody to recipient."""
        ...


class InMemoryBalances:
    """
    Custody bookkeeping in memory.

    Tracks what each principal has paid in and been paid out, and the
    total currently held.
    """

    def __init__(self) -> None:
        self._paid_in: dict[str, int] = defaultdict(int)
        self._paid_out: dict[str, int] = defaultdict(int)
        self._lock = threading.Lock()

    @classmethod
    def from_events(cls, events: Iterable[LedgerEvent]) -> "InMemoryBalances":
        """
        Custody implied by a ledger event log.

        A ledger restored from its events holds exactly what those events
        received minus what they paid.
        """
        balances = cls()
        for event in events:
            if isinstance(event, MarketCreated):
                if event.creation_deposit:
                    balances._paid_in[event.creator] += event.creation_deposit
            elif isinstance(event, PositionTaken):
                balances._paid_in[event.participant] += event.amount
            elif isinstance(event, (WinningsClaimed, RefundClaimed)):
                balances._paid_out[event.participant] += event.amount
            elif isinstance(event, CreationDepositReturned):
                balances._paid_out[event.creator] += event.amount
        return balances

    def receive(self, sender: str, amount: int, *, memo: str) -> None:
        with self._lock:
            self._paid_in[sender] += amount
        logger.debug("Received %d from %s (%s)", amount, sender, memo)

    def pay(self, recipient: str, amount: int, *, memo: str) -> None:
        with self._lock:
            if amount > self.held:
                raise ValueError(f"Cannot pay {amount}; only {self.held} held")
            self._paid_out[recipient] += amount
        logger.debug("Paid %d to %s (%s)", amount, recipient, memo)

    @property
    def held(self) -> int:
        return sum(self._paid_in.values()) - sum(self._paid_out.values())

    def paid_in(self, principal: str) -> int:
        return self._paid_in.get(principal, 0)

    def paid_out(self, principal: str) -> int:
        return self._paid_out.get(principal, 0)

    def net(self, principal: str) -> int:
        """Paid out minus paid in; positive means the principal gained."""
        return self.paid_out(principal) - self.paid_in(principal)
