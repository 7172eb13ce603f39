"""
Canned trial outputs for MockProvider.

All three scenarios argue the ETH-staking-vs-Treasury demo question over
the demo rubric and cite titles from MockEvidenceSource:

    clear    - YES 78 vs NO 45; the NO advocate cites a title that is not
               in the bundle, so the trial escalates despite the margin
    close    - YES 52 vs NO 48; escalates on margin
    decisive - YES 78 vs NO 45 with clean citations; resolves YES
"""

from __future__ import annotations

import json
from typing import Any

STAKING_APR = "DeFiLlama: ETH Staking APR January 2026"
TREASURY_AVG = "US Treasury: Average Interest Rates January 2026"
TREASURY_CURVE = "US Treasury: Daily Yield Curve Rates"
COINDESK = "CoinDesk: ETH Staking vs Treasury Yields Analysis"
THE_BLOCK = "The Block: Institutional Demand for ETH Staking Grows"
PENALTY_DATA = "DeFiLlama: Validator Penalty Data January 2026"
FED_HOLDS = "Reuters: Federal Reserve Holds Rates Steady"

FABRICATED_CITATION = "Beacon Chain: Validator Penalty Statistics"

SCENARIOS = ("clear", "close", "decisive")


# =============================================================================
# Clear-win scenario
# =============================================================================

_ADVOCATE_YES_CLEAR: dict[str, Any] = {
    "side": "YES",
    "confidence": 78,
    "arguments": [
        {
            "criterion": "Data accuracy",
            "claim": (
                "ETH staking yields averaged 4.2% APR in January 2026 according to DeFiLlama data, "
                "while 10-year US Treasury rates held at 3.9% for the same period."
            ),
            "evidence_citations": [STAKING_APR, TREASURY_AVG],
            "strength": 85,
        },
        {
            "criterion": "Time period coverage",
            "claim": (
                "Data spans the full month of January 2026 with daily granularity from both "
                "DeFiLlama and Treasury.gov, covering all 31 days without gaps."
            ),
            "evidence_citations": [STAKING_APR, TREASURY_CURVE],
            "strength": 90,
        },
        {
            "criterion": "Source diversity",
            "claim": (
                "Multiple independent sources confirm the yield differential: DeFiLlama aggregates "
                "validator data from Lido, Rocket Pool, and Coinbase; Treasury.gov provides official "
                "government rates; CoinDesk and The Block report the spread."
            ),
            "evidence_citations": [STAKING_APR, COINDESK, TREASURY_AVG],
            "strength": 82,
        },
        {
            "criterion": "Logical coherence",
            "claim": (
                "The 0.3% yield advantage for ETH staking is consistent across all sources and time "
                "periods examined. The advantage held for 26 of 31 days, qualifying as 'consistently "
                "outperforming' under any reasonable interpretation."
            ),
            "evidence_citations": [STAKING_APR, TREASURY_CURVE],
            "strength": 75,
        },
    ],
    "weaknesses_in_opposing_case": [
        "The NO side may argue that a 0.3% spread is within noise, but the consistency across "
        "26/31 days makes this a sustained pattern, not noise.",
        "Risk-adjusted comparisons are irrelevant to the question as stated; the question asks "
        "about raw yield, not risk-adjusted returns.",
        "Any argument about specific validator downtime affecting averages is countered by the use "
        "of aggregate staking data across all major providers.",
    ],
}

_ADVOCATE_NO_CLEAR: dict[str, Any] = {
    "side": "NO",
    "confidence": 45,
    "arguments": [
        {
            "criterion": "Data accuracy",
            "claim": (
                "When accounting for validator penalties and MEV variability, the effective ETH "
                "staking yield drops to approximately 3.8%, which is below the Treasury rate of 3.9%."
            ),
            "evidence_citations": [STAKING_APR, FABRICATED_CITATION],
            "strength": 55,
        },
        {
            "criterion": "Time period coverage",
            "claim": (
                "ETH staking yields dipped below Treasury rates during the first week of January "
                "(Jan 1-7) due to low network activity during the holiday period, meaning yields did "
                "not 'consistently' outperform."
            ),
            "evidence_citations": [STAKING_APR, TREASURY_CURVE],
            "strength": 50,
        },
        {
            "criterion": "Source diversity",
            "claim": (
                "The YES case over-relies on DeFiLlama which aggregates self-reported validator "
                "data. Independent audited sources for staking yields are limited."
            ),
            "evidence_citations": [COINDESK],
            "strength": 40,
        },
        {
            "criterion": "Logical coherence",
            "claim": (
                "The word 'consistently' implies sustained outperformance without significant "
                "exceptions. Five days of underperformance out of 31 (16%) represents meaningful "
                "inconsistency."
            ),
            "evidence_citations": [STAKING_APR, TREASURY_CURVE],
            "strength": 60,
        },
    ],
    "weaknesses_in_opposing_case": [
        "The YES side uses gross staking yields without deducting validator operating costs and penalties.",
        "Aggregate data masks significant variance between individual staking providers.",
        "The definition of 'consistently' is subjective and the YES side assumes a lenient interpretation.",
    ],
}

_JUDGE_CLEAR: dict[str, Any] = {
    "final_verdict": "YES",
    "score_yes": 78,
    "score_no": 45,
    "criterion_scores": [
        {
            "criterion": "Data accuracy",
            "score_yes": 82,
            "score_no": 50,
            "reasoning": (
                "The YES advocate provides verifiable aggregate APR data from DeFiLlama (4.2%) and "
                "official Treasury rates (3.9%). The NO advocate's claim about effective yields "
                "dropping to 3.8% after penalties lacks specific citation for the penalty "
                "adjustment methodology."
            ),
        },
        {
            "criterion": "Time period coverage",
            "score_yes": 85,
            "score_no": 55,
            "reasoning": (
                "Both sides reference full-month data. The YES advocate demonstrates 26/31 days of "
                "outperformance. The NO advocate correctly identifies the early-January dip but "
                "this supports the YES case's transparency about the data."
            ),
        },
        {
            "criterion": "Source diversity",
            "score_yes": 75,
            "score_no": 35,
            "reasoning": (
                "The YES advocate cites four independent sources. The NO advocate cites "
                f"'{FABRICATED_CITATION}' which is not present in the evidence bundle."
            ),
        },
        {
            "criterion": "Logical coherence",
            "score_yes": 70,
            "score_no": 55,
            "reasoning": (
                "The YES advocate builds a consistent argument: 26/31 days qualifies as consistent "
                "outperformance. The NO advocate raises a valid semantic point about 'consistently' "
                "but argues from a minority of days (5/31)."
            ),
        },
    ],
    "ruling_text": (
        "The YES advocate presents a stronger case supported by diverse, verifiable evidence "
        "sources. ETH staking yields averaged 4.2% versus Treasury rates of 3.9% in January 2026. "
        "The NO advocate's penalty adjustment lacks cited methodology and the semantic argument "
        "about 5/31 days is less persuasive. YES prevails on all four criteria."
    ),
    "hallucinations_detected": [
        f"NO advocate cited '{FABRICATED_CITATION}' which is not present in the evidence bundle.",
    ],
}


# =============================================================================
# Close-call scenario
# =============================================================================

_ADVOCATE_YES_CLOSE: dict[str, Any] = {
    "side": "YES",
    "confidence": 52,
    "arguments": [
        {
            "criterion": "Data accuracy",
            "claim": "Average staking APR of 4.2% edges out the 3.9% Treasury average for January.",
            "evidence_citations": [STAKING_APR, TREASURY_AVG],
            "strength": 55,
        },
        {
            "criterion": "Time period coverage",
            "claim": "Both series cover the whole month, though the spread narrowed late in January.",
            "evidence_citations": [TREASURY_CURVE],
            "strength": 50,
        },
        {
            "criterion": "Source diversity",
            "claim": "Institutional inflows reported by The Block corroborate the yield advantage.",
            "evidence_citations": [THE_BLOCK, COINDESK],
            "strength": 52,
        },
        {
            "criterion": "Logical coherence",
            "claim": "A positive average spread over the month supports outperformance.",
            "evidence_citations": [COINDESK],
            "strength": 48,
        },
    ],
    "weaknesses_in_opposing_case": [
        "Penalty data shows only a marginal drag on yields.",
    ],
}

_ADVOCATE_NO_CLOSE: dict[str, Any] = {
    "side": "NO",
    "confidence": 48,
    "arguments": [
        {
            "criterion": "Data accuracy",
            "claim": "After a 0.08% penalty drag the net spread over Treasuries is within noise.",
            "evidence_citations": [PENALTY_DATA, TREASURY_AVG],
            "strength": 52,
        },
        {
            "criterion": "Time period coverage",
            "claim": "Five days of underperformance break any claim of consistency.",
            "evidence_citations": [STAKING_APR, TREASURY_CURVE],
            "strength": 55,
        },
        {
            "criterion": "Source diversity",
            "claim": "With the Fed holding rates, Treasury yields may firm and erase the spread.",
            "evidence_citations": [FED_HOLDS],
            "strength": 45,
        },
        {
            "criterion": "Logical coherence",
            "claim": "'Consistently' requires more than a positive monthly average.",
            "evidence_citations": [COINDESK],
            "strength": 50,
        },
    ],
    "weaknesses_in_opposing_case": [
        "Monthly averages hide day-level reversals.",
    ],
}

_JUDGE_CLOSE: dict[str, Any] = {
    "final_verdict": "YES",
    "score_yes": 52,
    "score_no": 48,
    "criterion_scores": [
        {
            "criterion": "Data accuracy",
            "score_yes": 54,
            "score_no": 50,
            "reasoning": "Both sides cite the same core figures with different adjustments.",
        },
        {
            "criterion": "Time period coverage",
            "score_yes": 48,
            "score_no": 52,
            "reasoning": "The early-January dip is documented and cuts against consistency.",
        },
        {
            "criterion": "Source diversity",
            "score_yes": 55,
            "score_no": 44,
            "reasoning": "YES draws on more independent sources.",
        },
        {
            "criterion": "Logical coherence",
            "score_yes": 51,
            "score_no": 49,
            "reasoning": "Neither side settles what 'consistently' should mean.",
        },
    ],
    "ruling_text": (
        "This is an exceptionally close case. Both advocates present valid evidence that partially "
        "supports their position. The margin is too narrow for confident automated resolution."
    ),
    "hallucinations_detected": [],
}


# =============================================================================
# Decisive scenario (clean clear-win)
# =============================================================================

def _without_fabrication(argument: dict[str, Any]) -> dict[str, Any]:
    cleaned = json.loads(json.dumps(argument))
    for arg in cleaned["arguments"]:
        arg["evidence_citations"] = [
            PENALTY_DATA if c == FABRICATED_CITATION else c for c in arg["evidence_citations"]
        ]
    return cleaned


_JUDGE_DECISIVE: dict[str, Any] = {
    **_JUDGE_CLEAR,
    "criterion_scores": [
        {**score, "reasoning": "The YES advocate cites four independent sources; NO relies on one."}
        if score["criterion"] == "Source diversity" else score
        for score in _JUDGE_CLEAR["criterion_scores"]
    ],
    "hallucinations_detected": [],
}


_FIXTURES: dict[str, dict[str, dict[str, Any]]] = {
    "clear": {
        "advocate_yes": _ADVOCATE_YES_CLEAR,
        "advocate_no": _ADVOCATE_NO_CLEAR,
        "judge": _JUDGE_CLEAR,
    },
    "close": {
        "advocate_yes": _ADVOCATE_YES_CLOSE,
        "advocate_no": _ADVOCATE_NO_CLOSE,
        "judge": _JUDGE_CLOSE,
    },
    "decisive": {
        "advocate_yes": _ADVOCATE_YES_CLEAR,
        "advocate_no": _without_fabrication(_ADVOCATE_NO_CLEAR),
        "judge": _JUDGE_DECISIVE,
    },
}


def scenario_response(scenario: str, role: str) -> str:
    """JSON text the mock returns for a role in a scenario."""
    if scenario not in _FIXTURES:
        raise ValueError(f"Unknown mock scenario: {scenario!r} (expected one of {SCENARIOS})")
    return json.dumps(_FIXTURES[scenario][role])
