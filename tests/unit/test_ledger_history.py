"""
Ledger History Tests

Every transition emits one event; replaying the log rebuilds the same
markets; snapshots round-trip through disk.
"""

import json
from datetime import timedelta

import pytest

from core.clock import FrozenClock
from core.schemas import LedgerException, LedgerRejection, Side, UnsupportedSchemaVersionError
from ledger import (
    EventLog,
    HistoryError,
    InMemoryBalances,
    MarketCreated,
    MarketResolved,
    PositionTaken,
    SettlementLedger,
    WinningsClaimed,
    load_snapshot,
    parse_events,
    reconstruct_markets,
    replay,
    save_snapshot,
)

ORACLE = "oracle"
TRANSCRIPT = "0x" + "ef" * 32


@pytest.fixture
def busy_ledger(ledger, clock):
    """Two markets: one resolved with a claim, one escalated."""
    deadline = clock.now() + timedelta(days=1)
    a = ledger.create_market("carol", "Q-A", TRANSCRIPT, deadline, deposit=3)
    b = ledger.create_market("carol", "Q-B", TRANSCRIPT, deadline)
    ledger.take_position(a, "alice", Side.YES, 10)
    ledger.take_position(a, "bob", Side.NO, 5)
    ledger.take_position(b, "alice", Side.NO, 7)
    clock.advance(days=2)
    ledger.request_settlement(a)
    ledger.request_settlement(b)
    ledger.settle(a, Side.YES, 78, 45, TRANSCRIPT, caller=ORACLE)
    ledger.escalate(b, TRANSCRIPT, caller=ORACLE)
    ledger.claim_winnings(a, "alice")
    return ledger


class TestEvents:

    def test_one_event_per_transition(self, busy_ledger):
        types = [e.type for e in busy_ledger.events()]

        assert types == [
            "MarketCreated",
            "MarketCreated",
            "PositionTaken",
            "PositionTaken",
            "PositionTaken",
            "SettlementRequested",
            "SettlementRequested",
            "MarketResolved",
            "MarketEscalated",
            "WinningsClaimed",
        ]
        assert [e.seq for e in busy_ledger.events()] == list(range(10))

    def test_filter_by_market_and_seq(self, busy_ledger):
        assert all(e.market_id == 1 for e in busy_ledger.events(market_id=1))
        assert [e.seq for e in busy_ledger.events(since=8)] == [8, 9]

    def test_event_fields(self, busy_ledger):
        resolved = [e for e in busy_ledger.events() if isinstance(e, MarketResolved)][0]
        claimed = [e for e in busy_ledger.events() if isinstance(e, WinningsClaimed)][0]

        assert resolved.outcome is Side.YES
        assert resolved.transcript_hash == TRANSCRIPT
        assert (claimed.participant, claimed.stake, claimed.amount) == ("alice", 10, 15)

    def test_rejection_emits_nothing(self, ledger, open_market):
        before = len(ledger.event_log)
        with pytest.raises(Exception):
            ledger.request_settlement(open_market)

        assert len(ledger.event_log) == before

    def test_events_are_frozen(self, busy_ledger):
        event = busy_ledger.events()[0]
        with pytest.raises(Exception):
            event.market_id = 5


class TestEventLog:

    def test_record_assigns_seq(self, clock):
        log = EventLog()
        first = log.record(
            PositionTaken, market_id=0, at=clock.now(), participant="a", side=Side.YES, amount=1,
        )
        second = log.record(
            PositionTaken, market_id=0, at=clock.now(), participant="b", side=Side.NO, amount=2,
        )

        assert (first.seq, second.seq) == (0, 1)
        assert len(log) == 2
        assert list(log) == [first, second]

    def test_append_out_of_order(self, clock):
        log = EventLog()
        event = PositionTaken(seq=3, market_id=0, at=clock.now(), participant="a", side=Side.YES, amount=1)

        with pytest.raises(ValueError, match="out of order"):
            log.append(event)

    def test_discard_last(self, clock):
        log = EventLog()
        first = log.record(
            PositionTaken, market_id=0, at=clock.now(), participant="a", side=Side.YES, amount=1,
        )
        second = log.record(
            PositionTaken, market_id=0, at=clock.now(), participant="b", side=Side.NO, amount=2,
        )

        with pytest.raises(ValueError, match="not the last"):
            log.discard_last(first)
        log.discard_last(second)

        assert list(log) == [first]
        assert log.record(
            PositionTaken, market_id=0, at=clock.now(), participant="c", side=Side.YES, amount=3,
        ).seq == 1


class TestReplay:

    def test_reconstruct_matches_live_state(self, busy_ledger):
        rebuilt = reconstruct_markets(busy_ledger.events())

        assert rebuilt == {m.id: m for m in busy_ledger.list_markets()}

    def test_reconstructed_fields(self, busy_ledger):
        markets = reconstruct_markets(busy_ledger.events())

        assert markets[0].winning_side is Side.YES
        assert (markets[0].yes_pool, markets[0].no_pool) == (10, 5)
        assert markets[0].paid_out == 15
        assert markets[1].status.value == "Escalated"
        assert markets[1].transcript_hash == TRANSCRIPT

    def test_replay_positions(self, busy_ledger):
        state = replay(busy_ledger.events())

        assert state.positions[(0, "alice")].yes == 0
        assert state.positions[(0, "bob")].no == 5
        assert state.positions[(1, "alice")].no == 7

    def test_event_for_unknown_market(self, clock):
        event = PositionTaken(seq=0, market_id=4, at=clock.now(), participant="a", side=Side.YES, amount=1)

        with pytest.raises(HistoryError):
            replay([event])

    def test_duplicate_creation(self, clock):
        created = MarketCreated(
            seq=0, market_id=0, at=clock.now(), creator="c", question="Q",
            rubric_hash=TRANSCRIPT, deadline=clock.now() + timedelta(days=1),
        )

        with pytest.raises(HistoryError):
            replay([created, created.model_copy(update={"seq": 1})])

    def test_from_events_continues(self, busy_ledger, clock):
        restored = SettlementLedger.from_events(busy_ledger.events(), authority=ORACLE, clock=clock)

        assert restored.next_market_id == 2
        # bob lost; alice already claimed
        with pytest.raises(Exception):
            restored.claim_winnings(0, "alice")
        market_id = restored.create_market("carol", "Q-C", TRANSCRIPT, clock.now() + timedelta(days=1))
        assert market_id == 2
        assert restored.events()[-1].seq == 10


class TestSnapshots:

    def test_round_trip(self, busy_ledger, tmp_path):
        path = save_snapshot(busy_ledger, tmp_path / "ledger.json")
        restored = load_snapshot(path, clock=FrozenClock(busy_ledger.clock.now()))

        assert restored.authority == ORACLE
        assert restored.events() == busy_ledger.events()
        assert restored.list_markets() == busy_ledger.list_markets()

    def test_snapshot_is_canonical_json(self, busy_ledger, tmp_path):
        path = save_snapshot(busy_ledger, tmp_path / "nested" / "ledger.json")
        data = json.loads(path.read_text(encoding="utf-8"))

        assert data["schema_version"] == "v1"
        assert len(data["events"]) == 10
        assert data["events"][0]["at"].endswith("Z")
        assert parse_events(data["events"]) == busy_ledger.events()

    def test_authority_override(self, busy_ledger, tmp_path):
        path = save_snapshot(busy_ledger, tmp_path / "ledger.json")

        assert load_snapshot(path, authority="new-oracle").authority == "new-oracle"

    def test_unsupported_version(self, busy_ledger, tmp_path):
        path = save_snapshot(busy_ledger, tmp_path / "ledger.json")
        data = json.loads(path.read_text(encoding="utf-8"))
        data["schema_version"] = "v99"
        path.write_text(json.dumps(data), encoding="utf-8")

        with pytest.raises(UnsupportedSchemaVersionError):
            load_snapshot(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_snapshot(tmp_path / "absent.json")


class TestRestoredCustody:

    def test_custody_rebuilt_from_events(self, busy_ledger):
        rebuilt = InMemoryBalances.from_events(busy_ledger.events())

        assert rebuilt.held == busy_ledger.transfers.held == 10
        assert rebuilt.paid_in("alice") == 17
        assert rebuilt.paid_out("alice") == 15
        assert rebuilt.paid_in("carol") == 3

    def test_snapshot_reload_then_claim(self, ledger, clock, tmp_path):
        market_id = ledger.create_market("carol", "Q", TRANSCRIPT, clock.now() + timedelta(days=1))
        ledger.take_position(market_id, "alice", Side.YES, 10)
        ledger.take_position(market_id, "bob", Side.NO, 5)
        clock.advance(days=2)
        ledger.request_settlement(market_id)
        ledger.settle(market_id, Side.YES, 78, 45, TRANSCRIPT, caller=ORACLE)
        path = save_snapshot(ledger, tmp_path / "ledger.json")

        restored = load_snapshot(path, clock=FrozenClock(clock.now()))

        assert restored.transfers.held == 15
        assert restored.claim_winnings(market_id, "alice") == 15
        assert restored.transfers.held == 0
        assert restored.transfers.paid_out("alice") == 15

    def test_snapshot_reload_then_refund_and_deposit(self, busy_ledger, tmp_path):
        path = save_snapshot(busy_ledger, tmp_path / "ledger.json")
        restored = load_snapshot(path, clock=FrozenClock(busy_ledger.clock.now()))

        assert restored.claim_refund(1, "alice") == 7
        assert restored.claim_creation_deposit(0, "carol") == 3
        assert restored.transfers.held == 0

    def test_unfunded_sink_leaves_claim_open(self, busy_ledger, tmp_path):
        path = save_snapshot(busy_ledger, tmp_path / "ledger.json")
        restored = load_snapshot(
            path, clock=FrozenClock(busy_ledger.clock.now()), transfers=InMemoryBalances(),
        )
        events_before = len(restored.events())

        with pytest.raises(LedgerException) as exc_info:
            restored.claim_refund(1, "alice")

        assert exc_info.value.reason is LedgerRejection.TRANSFER_FAILED
        assert len(restored.events()) == events_before
        assert restored.position_of(1, "alice").no == 7
        assert restored.get_market(1).refunded == 0

        restored.transfers.receive("treasury", 7, memo="top up")
        assert restored.claim_refund(1, "alice") == 7
        assert restored.position_of(1, "alice").no == 0
        assert len(restored.events()) == events_before + 1
