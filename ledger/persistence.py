"""
Ledger Snapshots

A snapshot is the ledger's event log written as canonical JSON. Loading
replays the log, so a reloaded ledger is exactly the ledger that wrote it.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Optional

from core.clock import Clock
from core.schemas import dumps_canonical
from core.schemas.versioning import SCHEMA_VERSION, assert_supported_schema_version

from .events import parse_events
from .ledger import SettlementLedger
from .transfers import TransferSink

logger = logging.getLogger(__name__)


def snapshot_dict(ledger: SettlementLedger) -> dict[str, Any]:
    return {
        "schema_version": SCHEMA_VERSION,
        "authority": ledger.authority,
        "min_creation_deposit": ledger.min_creation_deposit,
        "events": ledger.events(),
    }


def save_snapshot(ledger: SettlementLedger, path: str | Path) -> Path:
    """Atomically write the ledger snapshot to path."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    payload = dumps_canonical(snapshot_dict(ledger))

    fd, tmp_name = tempfile.mkstemp(dir=path.parent, suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(payload)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
    logger.info("Saved ledger snapshot (%d events) to %s", len(ledger.event_log), path)
    return path


def load_snapshot(
    path: str | Path,
    *,
    clock: Optional[Clock] = None,
    transfers: Optional[TransferSink] = None,
    authority: Optional[str] = None,
) -> SettlementLedger:
    """
    Rebuild a ledger from a snapshot file.

    Args:
        path: Snapshot written by save_snapshot
        clock: Time source for the restored ledger
        transfers: Custody for the restored ledger; by default an in-memory
            custody holding what the snapshot events received and did not pay
        authority: Override the stored settlement authority

    Raises:
        FileNotFoundError: If path does not exist
        UnsupportedSchemaVersionError: If the snapshot version is unknown
    """
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    assert_supported_schema_version(data.get("schema_version", SCHEMA_VERSION))

    events = parse_events(data.get("events", []))
    ledger = SettlementLedger.from_events(
        events,
        authority=authority or data["authority"],
        min_creation_deposit=data.get("min_creation_deposit", 0),
        clock=clock,
        transfers=transfers,
    )
    logger.info("Loaded ledger snapshot (%d events, %d markets) from %s",
                len(events), ledger.next_market_id, path)
    return ledger
