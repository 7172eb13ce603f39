"""
API Dependencies

Application state shared by the routes: configuration, the ledger, the
transcript archive and the pending-trial map. One AppState is attached
to each app instance; nothing lives at module level.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from fastapi import Request

from agents import AgentContext, EvidenceSource
from core.config import RuntimeConfig
from core.schemas import ResolutionRubric
from core.storage import (
    DirectoryTranscriptStore,
    InMemoryTranscriptStore,
    PendingTrials,
    TranscriptStore,
)
from ledger import SettlementLedger, load_snapshot, save_snapshot
from orchestrator import SettlementSubmitter

logger = logging.getLogger(__name__)


def load_runtime_config() -> RuntimeConfig:
    """Load RuntimeConfig from a config file, then overlay environment variables.

    Search order for config file:
      1. ./trialbyfire.yaml
      2. ./.trialbyfire.yaml
      3. ~/.config/trialbyfire/config.yaml

    Environment variables ALWAYS override config file values.
    """
    search_paths = [
        Path.cwd() / "trialbyfire.yaml",
        Path.cwd() / ".trialbyfire.yaml",
        Path.home() / ".config" / "trialbyfire" / "config.yaml",
    ]

    for path in search_paths:
        if path.exists():
            logger.info("Loaded config from %s", path)
            return RuntimeConfig.from_yaml(path).with_env_overrides()

    return RuntimeConfig().with_env_overrides()


@dataclass
class AppState:
    """Everything the routes share."""

    config: RuntimeConfig
    ledger: SettlementLedger
    store: TranscriptStore
    pending: PendingTrials = field(default_factory=PendingTrials)
    # rubrics are committed on the ledger by hash only; the full text lives here
    rubrics: dict[int, ResolutionRubric] = field(default_factory=dict)
    context: Optional[AgentContext] = None
    # None means build from config for every trial
    evidence_sources: Optional[list[EvidenceSource]] = None

    @classmethod
    def from_config(cls, config: RuntimeConfig) -> "AppState":
        ledger_config = config.ledger
        snapshot = ledger_config.snapshot_path
        if snapshot and Path(snapshot).exists():
            ledger = load_snapshot(snapshot, authority=ledger_config.authority)
        else:
            ledger = SettlementLedger(
                authority=ledger_config.authority,
                min_creation_deposit=ledger_config.min_creation_deposit,
            )

        if config.transcripts_dir:
            store: TranscriptStore = DirectoryTranscriptStore(config.transcripts_dir)
        else:
            store = InMemoryTranscriptStore()

        return cls(config=config, ledger=ledger, store=store)

    @property
    def submitter(self) -> SettlementSubmitter:
        return SettlementSubmitter(self.ledger, self.store, authority=self.config.ledger.authority)

    def agent_context(self) -> AgentContext:
        """Context used to run trials; built once per app."""
        if self.context is None:
            self.context = AgentContext.create(self.config)
        return self.context

    def persist(self) -> None:
        """Write a ledger snapshot if a snapshot path is configured."""
        if self.config.ledger.snapshot_path:
            save_snapshot(self.ledger, self.config.ledger.snapshot_path)


def get_state(request: Request) -> AppState:
    return request.app.state.trial
