"""
Demo Market

The ETH-staking-versus-Treasury question and its four-criterion rubric.
The mock evidence and mock reasoning scenarios are written against this
rubric, so mock trials should use it.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from core.schemas import MarketQuestion, ResolutionRubric, RubricCriterion

DEMO_QUESTION_ID = "demo-001"
DEMO_QUESTION_TEXT = (
    "Did ETH staking yields consistently outperform US Treasury rates in January 2026?"
)
DEMO_THRESHOLD = 20

DEMO_CRITERIA: tuple[tuple[str, str, int], ...] = (
    ("Data accuracy", "Are the cited yield and rate numbers verifiable?", 30),
    ("Time period coverage", "Does the evidence cover the full period?", 25),
    ("Source diversity", "Are multiple independent sources used?", 20),
    ("Logical coherence", "Is the argument internally consistent?", 25),
)


def demo_rubric(
    threshold: int = DEMO_THRESHOLD,
    evidence_sources: Optional[list[str]] = None,
) -> ResolutionRubric:
    return ResolutionRubric(
        criteria=[
            RubricCriterion(name=name, description=description, weight=weight)
            for name, description, weight in DEMO_CRITERIA
        ],
        evidence_sources=evidence_sources or ["defillama", "treasury", "newsapi"],
        confidence_threshold=threshold,
    )


def demo_question(
    question: str = DEMO_QUESTION_TEXT,
    *,
    question_id: str = DEMO_QUESTION_ID,
    threshold: int = DEMO_THRESHOLD,
    settlement_deadline: Optional[datetime] = None,
) -> MarketQuestion:
    """The demo question (or another text) under the demo rubric."""
    return MarketQuestion(
        id=question_id,
        question=question,
        rubric=demo_rubric(threshold),
        settlement_deadline=settlement_deadline or datetime(2026, 2, 1, tzinfo=timezone.utc),
    )
