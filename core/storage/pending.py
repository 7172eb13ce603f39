"""
Pending Trials

Maps a ledger market id to the hash of the transcript produced for it,
between running the trial and submitting the settlement. Instances are
passed to whoever needs them; there is no module-level registry.
"""

from __future__ import annotations

import threading
from typing import Optional


class PendingTrials:
    """Thread-safe market id -> transcript hash map."""

    def __init__(self) -> None:
        self._by_market: dict[int, str] = {}
        self._lock = threading.Lock()

    def remember(self, market_id: int, transcript_hash: str) -> None:
        """Record the latest transcript for a market, replacing any earlier one."""
        with self._lock:
            self._by_market[market_id] = transcript_hash

    def get(self, market_id: int) -> Optional[str]:
        with self._lock:
            return self._by_market.get(market_id)

    def pop(self, market_id: int) -> Optional[str]:
        with self._lock:
            return self._by_market.pop(market_id, None)

    def items(self) -> list[tuple[int, str]]:
        with self._lock:
            return sorted(self._by_market.items())

    def __contains__(self, market_id: object) -> bool:
        with self._lock:
            return market_id in self._by_market

    def __len__(self) -> int:
        with self._lock:
            return len(self._by_market)
