"""
Settlement Ledger Tests

Lifecycle transitions, every rejection reason, pro-rata payout and the
rounding remainder, refunds, creation deposits and claim idempotency.
"""

import threading
from concurrent.futures import ThreadPoolExecutor
from datetime import timedelta

import pytest

from core.schemas import ErrorCodes, LedgerException, LedgerRejection, Side
from ledger import (
    ALLOWED_TRANSITIONS,
    InMemoryBalances,
    MarketStatus,
    Outcome,
    SettlementLedger,
    can_transition,
    compute_payout,
)

ORACLE = "oracle"
TRANSCRIPT = "0x" + "cd" * 32
ETH = 10**18


def rejection(exc_info) -> LedgerRejection:
    return exc_info.value.reason


def settle_yes(ledger, market_id, clock):
    clock.advance(days=31)
    ledger.request_settlement(market_id)
    ledger.settle(market_id, Side.YES, 78, 45, TRANSCRIPT, caller=ORACLE)


class RefusingSink(InMemoryBalances):
    """Custody that rejects incoming transfers while refusing is set."""

    refusing = False

    def receive(self, sender, amount, *, memo):
        if self.refusing:
            raise ValueError("insufficient funds")
        super().receive(sender, amount, memo=memo)


def race(calls, fn, *args):
    """Run fn(*args) from `calls` threads released together; collect results and rejections."""
    barrier = threading.Barrier(calls)

    def attempt():
        barrier.wait()
        try:
            return fn(*args)
        except LedgerException as e:
            return e

    with ThreadPoolExecutor(max_workers=calls) as pool:
        return [f.result() for f in [pool.submit(attempt) for _ in range(calls)]]


# =============================================================================
# State Machine
# =============================================================================

class TestTransitions:

    def test_only_forward_transitions(self):
        assert can_transition(MarketStatus.OPEN, MarketStatus.SETTLEMENT_REQUESTED)
        assert can_transition(MarketStatus.SETTLEMENT_REQUESTED, MarketStatus.RESOLVED)
        assert can_transition(MarketStatus.SETTLEMENT_REQUESTED, MarketStatus.ESCALATED)
        assert not can_transition(MarketStatus.OPEN, MarketStatus.RESOLVED)
        assert not can_transition(MarketStatus.RESOLVED, MarketStatus.ESCALATED)

    def test_final_states_are_terminal(self):
        assert ALLOWED_TRANSITIONS[MarketStatus.RESOLVED] == frozenset()
        assert ALLOWED_TRANSITIONS[MarketStatus.ESCALATED] == frozenset()
        assert MarketStatus.RESOLVED.is_final and MarketStatus.ESCALATED.is_final
        assert not MarketStatus.OPEN.is_final


# =============================================================================
# Create Market
# =============================================================================

class TestCreateMarket:

    def test_sequential_ids(self, ledger):
        deadline = ledger.clock.now() + timedelta(days=1)
        ids = [ledger.create_market("carol", f"Q{i}", TRANSCRIPT, deadline) for i in range(3)]

        assert ids == [0, 1, 2]
        assert ledger.next_market_id == 3

    def test_new_market_state(self, ledger, open_market):
        market = ledger.get_market(open_market)

        assert market.status is MarketStatus.OPEN
        assert market.outcome is Outcome.NONE
        assert market.yes_pool == market.no_pool == 0
        assert market.creator == "carol"
        assert market.transcript_hash is None

    def test_deadline_in_past(self, ledger):
        with pytest.raises(LedgerException) as exc_info:
            ledger.create_market("carol", "Q", TRANSCRIPT, ledger.clock.now())

        assert rejection(exc_info) is LedgerRejection.DEADLINE_IN_PAST
        assert ledger.next_market_id == 0
        assert len(ledger.event_log) == 0

    def test_deposit_too_small(self, clock):
        ledger = SettlementLedger(authority=ORACLE, clock=clock, min_creation_deposit=10)

        with pytest.raises(LedgerException) as exc_info:
            ledger.create_market("carol", "Q", TRANSCRIPT, clock.now() + timedelta(days=1), deposit=5)

        assert rejection(exc_info) is LedgerRejection.DEPOSIT_TOO_SMALL

    def test_deposit_is_received(self, ledger, balances):
        ledger.create_market("carol", "Q", TRANSCRIPT, ledger.clock.now() + timedelta(days=1), deposit=7)

        assert balances.paid_in("carol") == 7


# =============================================================================
# Positions
# =============================================================================

class TestTakePosition:

    def test_pools_accumulate(self, ledger, balances, open_market):
        ledger.take_position(open_market, "alice", Side.YES, 100)
        ledger.take_position(open_market, "alice", Side.YES, 50)
        ledger.take_position(open_market, "alice", Side.NO, 20)
        ledger.take_position(open_market, "bob", Side.NO, 30)

        market = ledger.get_market(open_market)
        assert market.yes_pool == 150
        assert market.no_pool == 50
        assert market.total_pool == 200

        position = ledger.position_of(open_market, "alice")
        assert (position.yes, position.no) == (150, 20)
        assert balances.held == 200

    def test_returns_updated_position(self, ledger, open_market):
        position = ledger.take_position(open_market, "alice", "NO", 5)

        assert position.no == 5
        assert position.participant == "alice"

    def test_unknown_market(self, ledger):
        with pytest.raises(LedgerException) as exc_info:
            ledger.take_position(99, "alice", Side.YES, 1)

        assert rejection(exc_info) is LedgerRejection.MARKET_NOT_FOUND
        assert exc_info.value.code == ErrorCodes.LEDGER_REJECTED
        assert exc_info.value.details["market_id"] == 99

    def test_zero_amount(self, ledger, open_market):
        with pytest.raises(LedgerException) as exc_info:
            ledger.take_position(open_market, "alice", Side.YES, 0)

        assert rejection(exc_info) is LedgerRejection.ZERO_AMOUNT

    def test_past_deadline(self, ledger, clock, open_market):
        clock.advance(days=31)

        with pytest.raises(LedgerException) as exc_info:
            ledger.take_position(open_market, "alice", Side.YES, 1)

        assert rejection(exc_info) is LedgerRejection.PAST_DEADLINE

    def test_market_not_open(self, ledger, clock, open_market):
        clock.advance(days=31)
        ledger.request_settlement(open_market)

        with pytest.raises(LedgerException) as exc_info:
            ledger.take_position(open_market, "alice", Side.YES, 1)

        assert rejection(exc_info) is LedgerRejection.MARKET_NOT_OPEN

    @pytest.mark.parametrize("amount", [1.5, True, "10"])
    def test_non_integer_amount(self, ledger, open_market, amount):
        with pytest.raises(TypeError):
            ledger.take_position(open_market, "alice", Side.YES, amount)

    def test_rejection_leaves_state_untouched(self, ledger, balances, open_market):
        ledger.take_position(open_market, "alice", Side.YES, 10)
        events_before = len(ledger.event_log)

        with pytest.raises(LedgerException):
            ledger.take_position(open_market, "alice", Side.YES, 0)

        assert len(ledger.event_log) == events_before
        assert ledger.get_market(open_market).yes_pool == 10
        assert balances.held == 10


# =============================================================================
# Settlement Lifecycle
# =============================================================================

class TestRequestSettlement:

    def test_before_deadline(self, ledger, open_market):
        with pytest.raises(LedgerException) as exc_info:
            ledger.request_settlement(open_market)

        assert rejection(exc_info) is LedgerRejection.DEADLINE_NOT_REACHED

    def test_at_deadline(self, ledger, clock, open_market):
        clock.advance(days=31)
        market = ledger.request_settlement(open_market, caller="dave")

        assert market.status is MarketStatus.SETTLEMENT_REQUESTED

    def test_twice(self, ledger, clock, open_market):
        clock.advance(days=31)
        ledger.request_settlement(open_market)

        with pytest.raises(LedgerException) as exc_info:
            ledger.request_settlement(open_market)

        assert rejection(exc_info) is LedgerRejection.MARKET_NOT_OPEN


class TestSettleAndEscalate:

    @pytest.fixture
    def requested(self, ledger, clock, open_market):
        clock.advance(days=31)
        ledger.request_settlement(open_market)
        return open_market

    def test_settle(self, ledger, requested):
        market = ledger.settle(requested, Side.NO, 40, 70, TRANSCRIPT, caller=ORACLE)

        assert market.status is MarketStatus.RESOLVED
        assert market.outcome is Outcome.NO
        assert (market.score_yes, market.score_no) == (40.0, 70.0)
        assert market.transcript_hash == TRANSCRIPT

    def test_settle_unauthorized(self, ledger, requested):
        with pytest.raises(LedgerException) as exc_info:
            ledger.settle(requested, Side.YES, 78, 45, TRANSCRIPT, caller="mallory")

        assert rejection(exc_info) is LedgerRejection.UNAUTHORIZED

    def test_settle_open_market(self, ledger, open_market):
        with pytest.raises(LedgerException) as exc_info:
            ledger.settle(open_market, Side.YES, 78, 45, TRANSCRIPT, caller=ORACLE)

        assert rejection(exc_info) is LedgerRejection.SETTLEMENT_NOT_REQUESTED

    def test_invalid_verdict(self, ledger, requested):
        with pytest.raises(LedgerException) as exc_info:
            ledger.settle(requested, "MAYBE", 78, 45, TRANSCRIPT, caller=ORACLE)

        assert rejection(exc_info) is LedgerRejection.INVALID_VERDICT
        assert ledger.get_market(requested).status is MarketStatus.SETTLEMENT_REQUESTED

    def test_escalate(self, ledger, requested):
        market = ledger.escalate(requested, TRANSCRIPT, caller=ORACLE)

        assert market.status is MarketStatus.ESCALATED
        assert market.outcome is Outcome.NONE
        assert market.transcript_hash == TRANSCRIPT

    def test_escalate_unauthorized(self, ledger, requested):
        with pytest.raises(LedgerException) as exc_info:
            ledger.escalate(requested, TRANSCRIPT, caller="mallory")

        assert rejection(exc_info) is LedgerRejection.UNAUTHORIZED

    def test_no_regression_after_resolve(self, ledger, requested):
        ledger.settle(requested, Side.YES, 78, 45, TRANSCRIPT, caller=ORACLE)

        with pytest.raises(LedgerException):
            ledger.escalate(requested, TRANSCRIPT, caller=ORACLE)
        with pytest.raises(LedgerException):
            ledger.settle(requested, Side.NO, 1, 2, TRANSCRIPT, caller=ORACLE)
        with pytest.raises(LedgerException):
            ledger.request_settlement(requested)

        assert ledger.get_market(requested).outcome is Outcome.YES


# =============================================================================
# Payouts
# =============================================================================

class TestComputePayout:

    def test_floor_division(self):
        assert compute_payout(1, 10, 3) == 3

    def test_empty_winning_pool(self):
        with pytest.raises(ValueError):
            compute_payout(1, 10, 0)


class TestClaimWinnings:

    def test_pro_rata_in_base_units(self, ledger, clock, balances, open_market):
        ledger.take_position(open_market, "alice", Side.YES, 1 * ETH)
        ledger.take_position(open_market, "bob", Side.YES, 2 * ETH)
        ledger.take_position(open_market, "dave", Side.NO, 3 * ETH // 2)
        settle_yes(ledger, open_market, clock)

        assert ledger.claim_winnings(open_market, "alice") == 3 * ETH // 2
        assert ledger.claim_winnings(open_market, "bob") == 3 * ETH
        assert balances.net("alice") == ETH // 2
        assert balances.net("dave") == -(3 * ETH // 2)
        assert balances.held == 0

    def test_last_claimant_receives_remainder(self, ledger, clock, balances, open_market):
        for name in ("a", "b", "c"):
            ledger.take_position(open_market, name, Side.YES, 1)
        ledger.take_position(open_market, "d", Side.NO, 1)
        settle_yes(ledger, open_market, clock)

        # floor(1 * 4 / 3) = 1 for the first two, the last gets 4 - 2
        paid = [ledger.claim_winnings(open_market, name) for name in ("a", "b", "c")]

        assert paid == [1, 1, 2]
        assert sum(paid) == 4
        assert ledger.get_market(open_market).paid_out == 4
        assert balances.held == 0

    def test_single_winner_takes_pool(self, ledger, clock, open_market):
        ledger.take_position(open_market, "alice", Side.YES, 10)
        ledger.take_position(open_market, "bob", Side.NO, 7)
        settle_yes(ledger, open_market, clock)

        assert ledger.claim_winnings(open_market, "alice") == 17

    def test_double_claim(self, ledger, clock, open_market):
        ledger.take_position(open_market, "alice", Side.YES, 10)
        settle_yes(ledger, open_market, clock)
        ledger.claim_winnings(open_market, "alice")

        with pytest.raises(LedgerException) as exc_info:
            ledger.claim_winnings(open_market, "alice")

        assert rejection(exc_info) is LedgerRejection.NO_WINNING_POSITION
        assert ledger.position_of(open_market, "alice").yes == 0

    def test_loser_cannot_claim(self, ledger, clock, open_market):
        ledger.take_position(open_market, "alice", Side.YES, 10)
        ledger.take_position(open_market, "bob", Side.NO, 10)
        settle_yes(ledger, open_market, clock)

        with pytest.raises(LedgerException) as exc_info:
            ledger.claim_winnings(open_market, "bob")

        assert rejection(exc_info) is LedgerRejection.NO_WINNING_POSITION

    def test_losing_stake_kept_on_both_sided_position(self, ledger, clock, open_market):
        ledger.take_position(open_market, "alice", Side.YES, 10)
        ledger.take_position(open_market, "alice", Side.NO, 10)
        settle_yes(ledger, open_market, clock)

        assert ledger.claim_winnings(open_market, "alice") == 20
        assert ledger.position_of(open_market, "alice").no == 10

    def test_not_resolved(self, ledger, open_market):
        ledger.take_position(open_market, "alice", Side.YES, 10)

        with pytest.raises(LedgerException) as exc_info:
            ledger.claim_winnings(open_market, "alice")

        assert rejection(exc_info) is LedgerRejection.MARKET_NOT_RESOLVED

    def test_pools_unchanged_by_claims(self, ledger, clock, open_market):
        ledger.take_position(open_market, "alice", Side.YES, 10)
        ledger.take_position(open_market, "bob", Side.NO, 5)
        settle_yes(ledger, open_market, clock)
        ledger.claim_winnings(open_market, "alice")

        market = ledger.get_market(open_market)
        assert (market.yes_pool, market.no_pool) == (10, 5)

    def test_empty_winning_pool_leaves_funds(self, ledger, clock, balances, open_market):
        ledger.take_position(open_market, "bob", Side.NO, 5)
        settle_yes(ledger, open_market, clock)

        with pytest.raises(LedgerException):
            ledger.claim_winnings(open_market, "bob")
        assert balances.held == 5


# =============================================================================
# Refunds and Deposits
# =============================================================================

class TestClaimRefund:

    @pytest.fixture
    def escalated(self, ledger, clock, open_market):
        ledger.take_position(open_market, "alice", Side.YES, 10)
        ledger.take_position(open_market, "alice", Side.NO, 3)
        ledger.take_position(open_market, "bob", Side.NO, 5)
        clock.advance(days=31)
        ledger.request_settlement(open_market)
        ledger.escalate(open_market, TRANSCRIPT, caller=ORACLE)
        return open_market

    def test_refund_exact_stake(self, ledger, balances, escalated):
        assert ledger.claim_refund(escalated, "alice") == 13
        assert ledger.claim_refund(escalated, "bob") == 5
        assert balances.net("alice") == 0
        assert balances.held == 0

    def test_refund_twice(self, ledger, escalated):
        ledger.claim_refund(escalated, "alice")

        with pytest.raises(LedgerException) as exc_info:
            ledger.claim_refund(escalated, "alice")

        assert rejection(exc_info) is LedgerRejection.NOTHING_TO_REFUND

    def test_non_participant(self, ledger, escalated):
        with pytest.raises(LedgerException) as exc_info:
            ledger.claim_refund(escalated, "eve")

        assert rejection(exc_info) is LedgerRejection.NOTHING_TO_REFUND

    def test_resolved_market_has_no_refunds(self, ledger, clock, open_market):
        ledger.take_position(open_market, "alice", Side.YES, 10)
        settle_yes(ledger, open_market, clock)

        with pytest.raises(LedgerException) as exc_info:
            ledger.claim_refund(open_market, "alice")

        assert rejection(exc_info) is LedgerRejection.MARKET_NOT_ESCALATED


class TestCreationDeposit:

    @pytest.fixture
    def funded_market(self, ledger):
        return ledger.create_market(
            "carol", "Q", TRANSCRIPT, ledger.clock.now() + timedelta(days=1), deposit=25,
        )

    def test_returned_once_final(self, ledger, clock, balances, funded_market):
        clock.advance(days=2)
        ledger.request_settlement(funded_market)
        ledger.escalate(funded_market, TRANSCRIPT, caller=ORACLE)

        assert ledger.claim_creation_deposit(funded_market, "carol") == 25
        assert balances.net("carol") == 0

        with pytest.raises(LedgerException) as exc_info:
            ledger.claim_creation_deposit(funded_market, "carol")
        assert rejection(exc_info) is LedgerRejection.DEPOSIT_ALREADY_RETURNED

    def test_not_final(self, ledger, funded_market):
        with pytest.raises(LedgerException) as exc_info:
            ledger.claim_creation_deposit(funded_market, "carol")

        assert rejection(exc_info) is LedgerRejection.MARKET_NOT_FINAL

    def test_only_creator(self, ledger, funded_market):
        with pytest.raises(LedgerException) as exc_info:
            ledger.claim_creation_deposit(funded_market, "mallory")

        assert rejection(exc_info) is LedgerRejection.UNAUTHORIZED

    def test_no_deposit(self, ledger, clock, open_market):
        clock.advance(days=31)
        ledger.request_settlement(open_market)
        ledger.escalate(open_market, TRANSCRIPT, caller=ORACLE)

        with pytest.raises(LedgerException) as exc_info:
            ledger.claim_creation_deposit(open_market, "carol")

        assert rejection(exc_info) is LedgerRejection.NOTHING_TO_REFUND


# =============================================================================
# Reads
# =============================================================================

class TestReads:

    def test_list_markets_by_status(self, ledger, clock):
        deadline = clock.now() + timedelta(days=1)
        first = ledger.create_market("carol", "Q1", TRANSCRIPT, deadline)
        ledger.create_market("carol", "Q2", TRANSCRIPT, deadline + timedelta(days=30))
        clock.advance(days=2)
        ledger.request_settlement(first)

        requested = ledger.list_markets(status=MarketStatus.SETTLEMENT_REQUESTED)
        assert [m.id for m in requested] == [first]
        assert len(ledger.list_markets()) == 2

    def test_returned_market_is_a_copy(self, ledger, open_market):
        market = ledger.get_market(open_market)
        market.yes_pool = 999

        assert ledger.get_market(open_market).yes_pool == 0

    def test_position_of_stranger(self, ledger, open_market):
        position = ledger.position_of(open_market, "nobody")

        assert position.is_empty

    def test_positions_listing(self, ledger, open_market):
        ledger.take_position(open_market, "bob", Side.NO, 1)
        ledger.take_position(open_market, "alice", Side.YES, 1)

        assert [p.participant for p in ledger.positions(open_market)] == ["alice", "bob"]

    def test_custom_transfer_sink(self, clock):
        sink = InMemoryBalances()
        ledger = SettlementLedger(authority=ORACLE, clock=clock, transfers=sink)
        market_id = ledger.create_market("carol", "Q", TRANSCRIPT, clock.now() + timedelta(days=1))
        ledger.take_position(market_id, "alice", Side.YES, 4)

        assert sink.paid_in("alice") == 4


# =============================================================================
# Transfer Failures
# =============================================================================

class TestTransferFailures:

    @pytest.fixture
    def sink(self):
        return RefusingSink()

    @pytest.fixture
    def guarded(self, clock, sink):
        return SettlementLedger(authority=ORACLE, clock=clock, transfers=sink)

    def test_refused_stake_not_credited(self, guarded, sink, clock):
        market_id = guarded.create_market("carol", "Q", TRANSCRIPT, clock.now() + timedelta(days=1))
        guarded.take_position(market_id, "alice", Side.YES, 10)
        events_before = len(guarded.event_log)
        sink.refusing = True

        with pytest.raises(LedgerException) as exc_info:
            guarded.take_position(market_id, "alice", Side.YES, 5)

        assert rejection(exc_info) is LedgerRejection.TRANSFER_FAILED
        assert "insufficient funds" in exc_info.value.message
        market = guarded.get_market(market_id)
        assert (market.yes_pool, market.no_pool) == (10, 0)
        assert guarded.position_of(market_id, "alice").yes == 10
        assert len(guarded.event_log) == events_before
        assert sink.held == 10

    def test_refused_deposit_creates_nothing(self, guarded, sink, clock):
        sink.refusing = True

        with pytest.raises(LedgerException) as exc_info:
            guarded.create_market("carol", "Q", TRANSCRIPT, clock.now() + timedelta(days=1), deposit=25)

        assert rejection(exc_info) is LedgerRejection.TRANSFER_FAILED
        assert guarded.next_market_id == 0
        assert len(guarded.event_log) == 0
        assert guarded.list_markets() == []

    def test_failed_payout_keeps_claim(self, ledger, clock, balances, open_market):
        ledger.take_position(open_market, "alice", Side.YES, 10)
        ledger.take_position(open_market, "bob", Side.NO, 5)
        settle_yes(ledger, open_market, clock)
        # custody drained outside the ledger
        balances.pay("treasury", 15, memo="sweep")
        events_before = len(ledger.event_log)

        with pytest.raises(LedgerException) as exc_info:
            ledger.claim_winnings(open_market, "alice")

        assert rejection(exc_info) is LedgerRejection.TRANSFER_FAILED
        assert len(ledger.event_log) == events_before
        assert ledger.position_of(open_market, "alice").yes == 10
        assert ledger.get_market(open_market).paid_out == 0


# =============================================================================
# Concurrency
# =============================================================================

class TestConcurrentCalls:

    def test_one_claim_wins(self, ledger, clock, balances, open_market):
        ledger.take_position(open_market, "alice", Side.YES, 10)
        ledger.take_position(open_market, "bob", Side.NO, 5)
        settle_yes(ledger, open_market, clock)

        results = race(8, ledger.claim_winnings, open_market, "alice")

        payouts = [r for r in results if not isinstance(r, LedgerException)]
        rejected = [r for r in results if isinstance(r, LedgerException)]
        assert payouts == [15]
        assert len(rejected) == 7
        assert all(e.reason is LedgerRejection.NO_WINNING_POSITION for e in rejected)
        assert balances.held == 0
        assert balances.paid_out("alice") == 15
        assert ledger.get_market(open_market).paid_out == 15

    def test_one_refund_wins(self, ledger, clock, balances, open_market):
        ledger.take_position(open_market, "alice", Side.NO, 7)
        clock.advance(days=31)
        ledger.request_settlement(open_market)
        ledger.escalate(open_market, TRANSCRIPT, caller=ORACLE)

        results = race(8, ledger.claim_refund, open_market, "alice")

        assert [r for r in results if not isinstance(r, LedgerException)] == [7]
        assert balances.held == 0

    def test_one_settlement_request_wins(self, ledger, clock, open_market):
        clock.advance(days=31)

        results = race(8, ledger.request_settlement, open_market)

        accepted = [r for r in results if not isinstance(r, LedgerException)]
        rejected = [r for r in results if isinstance(r, LedgerException)]
        assert len(accepted) == 1
        assert accepted[0].status is MarketStatus.SETTLEMENT_REQUESTED
        assert all(e.reason is LedgerRejection.MARKET_NOT_OPEN for e in rejected)
        requests = [e for e in ledger.events() if e.type == "SettlementRequested"]
        assert len(requests) == 1

    def test_parallel_stakes_all_counted(self, ledger, balances, open_market):
        def stake(i):
            ledger.take_position(open_market, f"p{i}", Side.YES if i % 2 else Side.NO, i + 1)

        with ThreadPoolExecutor(max_workers=8) as pool:
            list(pool.map(stake, range(32)))

        market = ledger.get_market(open_market)
        assert market.total_pool == sum(range(1, 33))
        assert balances.held == market.total_pool
        assert len(ledger.positions(open_market)) == 32
