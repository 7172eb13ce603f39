"""
Settlement Ledger

The authoritative market state machine: lifecycle, stake bookkeeping,
payout and refund arithmetic, and claim idempotency.

Every operation runs under the ledger lock in one of two orders:

    incoming value:  validate -> receive -> record event (mutates state)
    outgoing value:  validate -> record event (mutates state) -> pay

A payment that fails removes its event again. A rejected operation
raises LedgerException with a named reason and leaves state untouched. Two callers racing on the same transition are
serialized by the lock; the second sees the updated status and is
rejected.
"""

from __future__ import annotations

import logging
import threading
from datetime import datetime
from typing import Any, Iterable, Optional

from core.clock import Clock, RealClock
from core.schemas import LedgerException, LedgerRejection, Side
from core.schemas.canonical import ensure_utc

from .events import (
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
)
from .history import LedgerState, apply_event, replay
from .models import Market, MarketStatus, Position
from .transfers import InMemoryBalances, TransferSink

logger = logging.getLogger(__name__)


def compute_payout(stake: int, total_pool: int, winning_pool: int) -> int:
    """
    floor(stake * total_pool / winning_pool), in integer arithmetic.

    Raises:
        ValueError: If winning_pool is not positive
    """
    if winning_pool <= 0:
        raise ValueError("winning_pool must be positive")
    return stake * total_pool // winning_pool


def _check_amount(amount: int) -> None:
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise TypeError(f"Amounts are integers in base units, got {type(amount).__name__}")


class SettlementLedger:
    """
    In-process settlement ledger.

    Usage:
        ledger = SettlementLedger(authority="oracle")
        market_id = ledger.create_market("carol", question, rubric_hash, deadline)
        ledger.take_position(market_id, "alice", Side.YES, 100)
        ...
        ledger.request_settlement(market_id, caller="anyone")
        ledger.settle(market_id, Side.YES, 78, 45, transcript_hash, caller="oracle")
        paid = ledger.claim_winnings(market_id, "alice")
    """

    def __init__(
        self,
        *,
        authority: str,
        clock: Optional[Clock] = None,
        transfers: Optional[TransferSink] = None,
        min_creation_deposit: int = 0,
        events: Optional[Iterable[LedgerEvent]] = None,
    ) -> None:
        """
        Args:
            authority: Principal allowed to settle and escalate
            clock: Time source for deadlines and event timestamps
            transfers: Custody of staked value; defaults to in-memory custody
                holding what the prior events imply
            min_creation_deposit: Minimum deposit to create a market
            events: Prior event log to restore state from
        """
        self.authority = authority
        self.clock = clock or RealClock()
        self.min_creation_deposit = min_creation_deposit
        self._lock = threading.RLock()

        prior = list(events or [])
        self.transfers = transfers if transfers is not None else InMemoryBalances.from_events(prior)
        self._log = EventLog(prior)
        self._state: LedgerState = replay(prior)

    @classmethod
    def from_events(cls, events: Iterable[LedgerEvent], **kwargs: Any) -> "SettlementLedger":
        """Rebuild a ledger from its event log."""
        return cls(events=events, **kwargs)

    # =========================================================================
    # Internals
    # =========================================================================

    def _now(self) -> datetime:
        return ensure_utc(self.clock.now())

    def _reject(
        self,
        reason: LedgerRejection,
        message: str,
        market_id: Optional[int] = None,
    ) -> LedgerException:
        logger.warning("Ledger rejected [%s] market=%s: %s", reason.value, market_id, message)
        return LedgerException(reason, message, market_id=market_id)

    def _market(self, market_id: int) -> Market:
        market = self._state.markets.get(market_id)
        if market is None:
            raise self._reject(
                LedgerRejection.MARKET_NOT_FOUND, f"Market {market_id} does not exist", market_id,
            )
        return market

    def _record(self, event_type: type[LedgerEvent], **fields: Any) -> LedgerEvent:
        event = self._log.record(event_type, at=self._now(), **fields)
        apply_event(self._state, event)
        return event

    def _receive(self, sender: str, amount: int, memo: str, market_id: Optional[int]) -> None:
        try:
            self.transfers.receive(sender, amount, memo=memo)
        except Exception as e:
            raise self._reject(
                LedgerRejection.TRANSFER_FAILED, f"Could not receive {amount} from {sender}: {e}", market_id,
            ) from e

    def _record_payout(
        self,
        event_type: type[LedgerEvent],
        recipient: str,
        amount: int,
        memo: str,
        **fields: Any,
    ) -> LedgerEvent:
        """Record an outgoing event, then pay; a failed payment removes the event."""
        event = self._record(event_type, amount=amount, **fields)
        try:
            self.transfers.pay(recipient, amount, memo=memo)
        except Exception as e:
            self._log.discard_last(event)
            self._state = replay(self._log.events())
            raise self._reject(
                LedgerRejection.TRANSFER_FAILED, f"Could not pay {amount} to {recipient}: {e}", event.market_id,
            ) from e
        return event

    def _require_authority(self, caller: str, action: str, market_id: int) -> None:
        if caller != self.authority:
            raise self._reject(
                LedgerRejection.UNAUTHORIZED,
                f"{caller} is not the settlement authority and cannot {action}",
                market_id,
            )

    # =========================================================================
    # Operations
    # =========================================================================

    def create_market(
        self,
        creator: str,
        question: str,
        rubric_hash: str,
        deadline: datetime,
        *,
        deposit: int = 0,
    ) -> int:
        """
        Create a market and return its id. Ids are sequential from 0.

        Raises:
            LedgerException: DEADLINE_IN_PAST, DEPOSIT_TOO_SMALL, TRANSFER_FAILED
        """
        _check_amount(deposit)
        with self._lock:
            deadline = ensure_utc(deadline)
            if deadline <= self._now():
                raise self._reject(LedgerRejection.DEADLINE_IN_PAST, "Deadline must be in the future")
            if deposit < self.min_creation_deposit:
                raise self._reject(
                    LedgerRejection.DEPOSIT_TOO_SMALL,
                    f"Creation deposit {deposit} is below the minimum {self.min_creation_deposit}",
                )

            market_id = self.next_market_id
            if deposit:
                self._receive(creator, deposit, f"creation deposit market {market_id}", market_id)
            self._record(
                MarketCreated,
                market_id=market_id,
                creator=creator,
                question=question,
                rubric_hash=rubric_hash,
                deadline=deadline,
                creation_deposit=deposit,
            )

        logger.info("Market %d created by %s (deadline %s)", market_id, creator, deadline.isoformat())
        return market_id

    def take_position(self, market_id: int, participant: str, side: Side, amount: int) -> Position:
        """
        Add amount to participant's stake on side.

        Raises:
            LedgerException: MARKET_NOT_FOUND, ZERO_AMOUNT, MARKET_NOT_OPEN, PAST_DEADLINE,
                TRANSFER_FAILED
        """
        _check_amount(amount)
        side = Side(side)
        with self._lock:
            market = self._market(market_id)
            if amount <= 0:
                raise self._reject(LedgerRejection.ZERO_AMOUNT, "Stake amount must be positive", market_id)
            if market.status is not MarketStatus.OPEN:
                raise self._reject(LedgerRejection.MARKET_NOT_OPEN, "Market not open", market_id)
            if self._now() >= market.deadline:
                raise self._reject(LedgerRejection.PAST_DEADLINE, "Past deadline", market_id)

            self._receive(participant, amount, f"{side.value} stake market {market_id}", market_id)
            self._record(
                PositionTaken,
                market_id=market_id,
                participant=participant,
                side=side,
                amount=amount,
            )
            position = self._state.position(market_id, participant).model_copy()

        logger.info("%s staked %d on %s in market %d", participant, amount, side.value, market_id)
        return position

    def request_settlement(self, market_id: int, *, caller: str = "anyone") -> Market:
        """
        Move an open market past its deadline to SettlementRequested.
        Permissionless.

        Raises:
            LedgerException: MARKET_NOT_FOUND, MARKET_NOT_OPEN, DEADLINE_NOT_REACHED
        """
        with self._lock:
            market = self._market(market_id)
            if market.status is not MarketStatus.OPEN:
                raise self._reject(LedgerRejection.MARKET_NOT_OPEN, "Market not open", market_id)
            if self._now() < market.deadline:
                raise self._reject(LedgerRejection.DEADLINE_NOT_REACHED, "Deadline not reached", market_id)

            self._record(SettlementRequested, market_id=market_id, requested_by=caller)
            snapshot = market.model_copy(deep=True)

        logger.info("Settlement requested for market %d by %s", market_id, caller)
        return snapshot

    def settle(
        self,
        market_id: int,
        verdict: Side,
        score_yes: float,
        score_no: float,
        transcript_hash: str,
        *,
        caller: str,
    ) -> Market:
        """
        Resolve a market with the trial's verdict. Authority only.

        Raises:
            LedgerException: MARKET_NOT_FOUND, UNAUTHORIZED,
                SETTLEMENT_NOT_REQUESTED, INVALID_VERDICT
        """
        with self._lock:
            market = self._market(market_id)
            self._require_authority(caller, "settle", market_id)
            if market.status is not MarketStatus.SETTLEMENT_REQUESTED:
                raise self._reject(
                    LedgerRejection.SETTLEMENT_NOT_REQUESTED, "Settlement not requested", market_id,
                )
            try:
                side = Side(verdict)
            except ValueError:
                raise self._reject(
                    LedgerRejection.INVALID_VERDICT, f"Verdict must be YES or NO, got {verdict!r}", market_id,
                ) from None

            self._record(
                MarketResolved,
                market_id=market_id,
                outcome=side,
                score_yes=float(score_yes),
                score_no=float(score_no),
                transcript_hash=transcript_hash,
            )
            snapshot = market.model_copy(deep=True)

        logger.info(
            "Market %d resolved %s (YES %s, NO %s) transcript %s",
            market_id, side.value, score_yes, score_no, transcript_hash,
        )
        return snapshot

    def escalate(self, market_id: int, transcript_hash: str, *, caller: str) -> Market:
        """
        Escalate a market for human review. Authority only.

        Raises:
            LedgerException: MARKET_NOT_FOUND, UNAUTHORIZED, SETTLEMENT_NOT_REQUESTED
        """
        with self._lock:
            market = self._market(market_id)
            self._require_authority(caller, "escalate", market_id)
            if market.status is not MarketStatus.SETTLEMENT_REQUESTED:
                raise self._reject(
                    LedgerRejection.SETTLEMENT_NOT_REQUESTED, "Settlement not requested", market_id,
                )

            self._record(MarketEscalated, market_id=market_id, transcript_hash=transcript_hash)
            snapshot = market.model_copy(deep=True)

        logger.info("Market %d escalated, transcript %s", market_id, transcript_hash)
        return snapshot

    def claim_winnings(self, market_id: int, participant: str) -> int:
        """
        Pay a winner their proportional share and zero their winning stake.

        Each winner gets floor(stake * total_pool / winning_pool), except
        the claim that clears the last outstanding winning stake, which
        gets whatever of the total pool has not been paid yet. The whole
        pool is distributed once every winner has claimed.

        Raises:
            LedgerException: MARKET_NOT_FOUND, MARKET_NOT_RESOLVED, NO_WINNING_POSITION,
                TRANSFER_FAILED
        """
        with self._lock:
            market = self._market(market_id)
            if market.status is not MarketStatus.RESOLVED:
                raise self._reject(LedgerRejection.MARKET_NOT_RESOLVED, "Market not resolved", market_id)

            side = market.winning_side
            position = self._state.positions.get((market_id, participant))
            stake = position.amount(side) if position is not None else 0
            if stake <= 0:
                raise self._reject(LedgerRejection.NO_WINNING_POSITION, "No winning position", market_id)

            if stake == market.outstanding_winning_stake:
                payout = market.total_pool - market.paid_out
            else:
                payout = compute_payout(stake, market.total_pool, market.winning_pool)

            self._record_payout(
                WinningsClaimed,
                participant,
                payout,
                f"winnings market {market_id}",
                market_id=market_id,
                participant=participant,
                stake=stake,
            )

        logger.info("%s claimed %d winnings from market %d", participant, payout, market_id)
        return payout

    def claim_refund(self, market_id: int, participant: str) -> int:
        """
        Return exactly the participant's stake on an escalated market.

        Raises:
            LedgerException: MARKET_NOT_FOUND, MARKET_NOT_ESCALATED, NOTHING_TO_REFUND,
                TRANSFER_FAILED
        """
        with self._lock:
            market = self._market(market_id)
            if market.status is not MarketStatus.ESCALATED:
                raise self._reject(LedgerRejection.MARKET_NOT_ESCALATED, "Market not escalated", market_id)

            position = self._state.positions.get((market_id, participant))
            amount = position.total if position is not None else 0
            if amount <= 0:
                raise self._reject(LedgerRejection.NOTHING_TO_REFUND, "Nothing to refund", market_id)

            self._record_payout(
                RefundClaimed,
                participant,
                amount,
                f"refund market {market_id}",
                market_id=market_id,
                participant=participant,
            )

        logger.info("%s refunded %d from market %d", participant, amount, market_id)
        return amount

    def claim_creation_deposit(self, market_id: int, caller: str) -> int:
        """
        Return the creation deposit to the creator once the market is final.

        Raises:
            LedgerException: MARKET_NOT_FOUND, UNAUTHORIZED, MARKET_NOT_FINAL,
                DEPOSIT_ALREADY_RETURNED, NOTHING_TO_REFUND, TRANSFER_FAILED
        """
        with self._lock:
            market = self._market(market_id)
            if caller != market.creator:
                raise self._reject(
                    LedgerRejection.UNAUTHORIZED,
                    f"Only the creator can reclaim the deposit of market {market_id}",
                    market_id,
                )
            if not market.status.is_final:
                raise self._reject(
                    LedgerRejection.MARKET_NOT_FINAL, "Market not resolved or escalated", market_id,
                )
            if market.deposit_returned:
                raise self._reject(
                    LedgerRejection.DEPOSIT_ALREADY_RETURNED, "Creation deposit already returned", market_id,
                )
            amount = market.creation_deposit
            if amount <= 0:
                raise self._reject(LedgerRejection.NOTHING_TO_REFUND, "No creation deposit", market_id)

            self._record_payout(
                CreationDepositReturned,
                caller,
                amount,
                f"creation deposit market {market_id}",
                market_id=market_id,
                creator=caller,
            )

        logger.info("Creation deposit %d returned to %s for market %d", amount, caller, market_id)
        return amount

    # =========================================================================
    # Reads
    # =========================================================================

    @property
    def next_market_id(self) -> int:
        return len(self._state.markets)

    @property
    def event_log(self) -> EventLog:
        return self._log

    def get_market(self, market_id: int) -> Market:
        """
        Raises:
            LedgerException: MARKET_NOT_FOUND
        """
        with self._lock:
            return self._market(market_id).model_copy(deep=True)

    def list_markets(self, *, status: Optional[MarketStatus] = None) -> list[Market]:
        with self._lock:
            markets = [m.model_copy(deep=True) for _, m in sorted(self._state.markets.items())]
        if status is not None:
            markets = [m for m in markets if m.status is status]
        return markets

    def position_of(self, market_id: int, participant: str) -> Position:
        """A copy of the participant's position; all zeros if none."""
        with self._lock:
            self._market(market_id)
            position = self._state.positions.get((market_id, participant))
            if position is None:
                return Position(market_id=market_id, participant=participant)
            return position.model_copy()

    def positions(self, market_id: int) -> list[Position]:
        with self._lock:
            self._market(market_id)
            return [
                p.model_copy()
                for (mid, _), p in sorted(self._state.positions.items())
                if mid == market_id
            ]

    def events(self, *, market_id: Optional[int] = None, since: int = 0) -> list[LedgerEvent]:
        return self._log.events(market_id=market_id, since=since)
