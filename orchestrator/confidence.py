"""
Confidence Evaluator

Pure function from (ruling, rubric) to a SettlementDecision. No I/O.

Decision priority, first match wins:
1. Any hallucinated citation -> ESCALATE, whatever the margin
2. margin < confidence_threshold -> ESCALATE
3. Otherwise -> RESOLVE with the ruling's declared final_verdict

margin is |score_yes - score_no|. The declared verdict is trusted as-is;
it is not re-derived from the scores.
"""

from core.schemas import (
    JudgeRuling,
    ResolutionRubric,
    SettlementAction,
    SettlementDecision,
)


def _fmt(value: float) -> str:
    return f"{value:g}"


def evaluate_confidence(ruling: JudgeRuling, rubric: ResolutionRubric) -> SettlementDecision:
    """
    Decide whether a ruling is safe to settle automatically.

    Example:
        >>> decision = evaluate_confidence(ruling, rubric)  # YES 78, NO 45, threshold 20
        >>> decision.action, decision.verdict, decision.margin
        (SettlementAction.RESOLVE, Side.YES, 33.0)
    """
    margin = abs(ruling.score_yes - ruling.score_no)
    threshold = rubric.confidence_threshold

    if ruling.hallucinations_detected:
        return SettlementDecision(
            action=SettlementAction.ESCALATE,
            verdict=None,
            margin=margin,
            reason=(
                f"Hallucinations detected: {'; '.join(ruling.hallucinations_detected)}. "
                "Escalating for human review."
            ),
        )

    if margin < threshold:
        return SettlementDecision(
            action=SettlementAction.ESCALATE,
            verdict=None,
            margin=margin,
            reason=f"Margin {_fmt(margin)} is below threshold {threshold}. Too close to auto-resolve.",
        )

    return SettlementDecision(
        action=SettlementAction.RESOLVE,
        verdict=ruling.final_verdict,
        margin=margin,
        reason=(
            f"Margin {_fmt(margin)} meets threshold {threshold}. "
            f"Resolving as {ruling.final_verdict.value}."
        ),
    )
