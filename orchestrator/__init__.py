"""
Orchestrator

Composes the trial stages into a pipeline and submits the outcome to
the settlement ledger.
"""

from .confidence import evaluate_confidence
from .demo import (
    DEMO_QUESTION_ID,
    DEMO_QUESTION_TEXT,
    DEMO_THRESHOLD,
    demo_question,
    demo_rubric,
)
from .pipeline import (
    ProgressCallback,
    TrialPipeline,
    TrialStage,
    check_provider_diversity,
    run_trial,
)
from .settlement import SettlementReceipt, SettlementSubmitter

__all__ = [
    "evaluate_confidence",
    "DEMO_QUESTION_ID",
    "DEMO_QUESTION_TEXT",
    "DEMO_THRESHOLD",
    "demo_question",
    "demo_rubric",
    "TrialPipeline",
    "TrialStage",
    "ProgressCallback",
    "check_provider_diversity",
    "run_trial",
    "SettlementSubmitter",
    "SettlementReceipt",
]
