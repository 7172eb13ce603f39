"""
Common test fixtures shared by all modules.

Provides factory functions for the core TrialByFire data structures:
- ResolutionRubric / MarketQuestion
- EvidenceBundle / EvidenceItem
- AdvocateArgument
- JudgeRuling
- TrialTranscript

Arguments and rulings are built over the demo rubric and the mock
evidence titles unless told otherwise.
"""

import json
from datetime import datetime, timezone
from typing import Any, Optional

from core.llm.fixtures import (
    COINDESK,
    STAKING_APR,
    TREASURY_AVG,
    TREASURY_CURVE,
    scenario_response,
)
from core.schemas import (
    AdvocateArgument,
    EvidenceBundle,
    EvidenceItem,
    JudgeRuling,
    MarketQuestion,
    ResolutionRubric,
    RubricCriterion,
    SettlementAction,
    SettlementDecision,
    Side,
    TrialTranscript,
)
from orchestrator.demo import DEMO_CRITERIA

FIXED_TIME = datetime(2026, 1, 15, 12, 0, 0, tzinfo=timezone.utc)


# =============================================================================
# Rubric / Question Factories
# =============================================================================

def make_rubric(threshold: int = 20, criteria: Optional[list[tuple[str, int]]] = None) -> ResolutionRubric:
    """Create a rubric; defaults to the four demo criteria."""
    pairs = criteria or [(name, weight) for name, _, weight in DEMO_CRITERIA]
    return ResolutionRubric(
        criteria=[
            RubricCriterion(name=name, description=f"How well the case handles {name.lower()}", weight=weight)
            for name, weight in pairs
        ],
        evidence_sources=["mock"],
        confidence_threshold=threshold,
    )


def make_question(
    question_id: str = "q_test_001",
    question: str = "Did ETH staking yields consistently outperform US Treasury rates in January 2026?",
    threshold: int = 20,
    rubric: Optional[ResolutionRubric] = None,
) -> MarketQuestion:
    """Create a MarketQuestion for tests."""
    return MarketQuestion(
        id=question_id,
        question=question,
        rubric=rubric or make_rubric(threshold),
        settlement_deadline=datetime(2026, 2, 1, tzinfo=timezone.utc),
    )


# =============================================================================
# Evidence Factories
# =============================================================================

def make_evidence_item(
    title: str = STAKING_APR,
    source: str = "defillama",
    content: str = "ETH staking yields averaged 4.2% APR in January 2026.",
    url: Optional[str] = "https://example.com/evidence",
) -> EvidenceItem:
    """Create an EvidenceItem for tests."""
    return EvidenceItem(
        source=source,
        title=title,
        content=content,
        url=url,
        retrieved_at=FIXED_TIME,
    )


def make_evidence_bundle(
    titles: Optional[list[str]] = None,
    question_id: str = "q_test_001",
) -> EvidenceBundle:
    """Create an EvidenceBundle; defaults to four of the mock titles."""
    titles = titles if titles is not None else [STAKING_APR, TREASURY_AVG, TREASURY_CURVE, COINDESK]
    return EvidenceBundle(
        question_id=question_id,
        items=[make_evidence_item(title=title) for title in titles],
        gathered_at=FIXED_TIME,
    )


# =============================================================================
# Argument / Ruling Factories
# =============================================================================

def make_advocate_dict(
    side: str = "YES",
    criteria: Optional[list[str]] = None,
    citations: Optional[list[str]] = None,
    confidence: float = 70,
) -> dict[str, Any]:
    """Raw advocate output as a dict, ready for json.dumps."""
    criteria = criteria if criteria is not None else [name for name, _, _ in DEMO_CRITERIA]
    citations = citations if citations is not None else [STAKING_APR]
    return {
        "side": side,
        "confidence": confidence,
        "arguments": [
            {
                "criterion": name,
                "claim": f"{side} case on {name.lower()}",
                "evidence_citations": list(citations),
                "strength": 60,
            }
            for name in criteria
        ],
        "weaknesses_in_opposing_case": ["The other side ignores the monthly average."],
    }


def make_advocate_argument(side: Side = Side.YES, **kwargs: Any) -> AdvocateArgument:
    data = make_advocate_dict(side=side.value, **kwargs)
    data["model"] = f"test-advocate-{side.value.lower()}"
    return AdvocateArgument.model_validate(data)


def make_judge_dict(
    score_yes: float = 78,
    score_no: float = 45,
    final_verdict: str = "YES",
    hallucinations: Optional[list[str]] = None,
    criteria: Optional[list[str]] = None,
) -> dict[str, Any]:
    """Raw judge output as a dict, ready for json.dumps."""
    criteria = criteria if criteria is not None else [name for name, _, _ in DEMO_CRITERIA]
    return {
        "final_verdict": final_verdict,
        "score_yes": score_yes,
        "score_no": score_no,
        "criterion_scores": [
            {"criterion": name, "score_yes": score_yes, "score_no": score_no, "reasoning": "Scored."}
            for name in criteria
        ],
        "ruling_text": f"{final_verdict} presents the stronger case.",
        "hallucinations_detected": list(hallucinations or []),
    }


def make_ruling(**kwargs: Any) -> JudgeRuling:
    data = make_judge_dict(**kwargs)
    data["model"] = "test-judge"
    return JudgeRuling.model_validate(data)


def make_scenario_transcript(scenario: str = "decisive", question: Optional[MarketQuestion] = None) -> TrialTranscript:
    """
    A transcript assembled directly from the mock scenario fixtures,
    without running the pipeline.
    """
    from orchestrator.confidence import evaluate_confidence

    question = question or make_question()
    yes = AdvocateArgument.model_validate(
        {**json.loads(scenario_response(scenario, "advocate_yes")), "model": "mock-advocate-yes"}
    )
    no = AdvocateArgument.model_validate(
        {**json.loads(scenario_response(scenario, "advocate_no")), "model": "mock-advocate-no"}
    )
    ruling = JudgeRuling.model_validate(
        {**json.loads(scenario_response(scenario, "judge")), "model": "mock-judge"}
    )
    return TrialTranscript(
        question=question,
        evidence=make_evidence_bundle(question_id=question.id),
        advocate_yes=yes,
        advocate_no=no,
        judge_ruling=ruling,
        decision=evaluate_confidence(ruling, question.rubric),
        executed_at=FIXED_TIME,
        duration_ms=1234,
    )


def make_decision(action: SettlementAction = SettlementAction.RESOLVE) -> SettlementDecision:
    if action is SettlementAction.RESOLVE:
        return SettlementDecision(action=action, verdict=Side.YES, margin=33, reason="Margin 33 meets threshold 20.")
    return SettlementDecision(action=action, verdict=None, margin=4, reason="Margin 4 is below threshold 20.")
