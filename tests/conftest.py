"""
Pytest configuration and shared fixtures for TrialByFire tests.

This conftest.py:
1. Adds project root to sys.path for imports
2. Provides commonly-used fixtures via pytest's autodiscovery
3. Configures pytest markers and settings
"""

import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest

# =============================================================================
# Path Setup - Must happen before any local imports
# =============================================================================

# Get the project root (parent of tests/)
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_TESTS_ROOT = Path(__file__).resolve().parent

# Add both project root and tests root to sys.path
for _path in [str(_PROJECT_ROOT), str(_TESTS_ROOT)]:
    if _path not in sys.path:
        sys.path.insert(0, _path)

# =============================================================================
# Import fixtures using importlib (more robust for pytest loading)
# =============================================================================

import importlib

_common = importlib.import_module("fixtures.common")

make_question = _common.make_question
make_rubric = _common.make_rubric
make_evidence_bundle = _common.make_evidence_bundle
make_ruling = _common.make_ruling
make_scenario_transcript = _common.make_scenario_transcript

from core.clock import FrozenClock  # noqa: E402
from ledger import InMemoryBalances, SettlementLedger  # noqa: E402

AUTHORITY = "oracle"
LEDGER_START = datetime(2026, 1, 1, tzinfo=timezone.utc)
LEDGER_DEADLINE = datetime(2026, 2, 1, tzinfo=timezone.utc)


# =============================================================================
# Pytest Fixtures (autodiscovered by pytest)
# =============================================================================

@pytest.fixture
def rubric():
    """Provide the demo-shaped rubric with threshold 20."""
    return make_rubric()


@pytest.fixture
def question():
    """Provide a default MarketQuestion for tests."""
    return make_question()


@pytest.fixture
def evidence_bundle():
    """Provide a default EvidenceBundle for tests."""
    return make_evidence_bundle()


@pytest.fixture
def clock():
    """A frozen clock at 2026-01-01 UTC."""
    return FrozenClock(LEDGER_START)


@pytest.fixture
def balances():
    return InMemoryBalances()


@pytest.fixture
def ledger(clock, balances):
    """An empty ledger whose authority is 'oracle'."""
    return SettlementLedger(authority=AUTHORITY, clock=clock, transfers=balances)


@pytest.fixture
def open_market(ledger):
    """Id of an open market with a 2026-02-01 deadline."""
    return ledger.create_market("carol", "Is it subjective?", "0x" + "ab" * 32, LEDGER_DEADLINE)


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
