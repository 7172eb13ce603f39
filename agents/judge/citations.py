"""
Citation Cross-Check

Deterministic counterpart to the judge's own hallucination check. A
citation is verifiable only if it equals the title of an item in the
evidence bundle.
"""

from __future__ import annotations

from core.schemas import AdvocateArgument, EvidenceBundle, JudgeRuling


def unmatched_citations(evidence: EvidenceBundle, *arguments: AdvocateArgument) -> list[str]:
    """
    Citations across all arguments that match no evidence title.

    Exact string comparison; order of first appearance, no duplicates.
    """
    titles = evidence.title_set
    seen: set[str] = set()
    unmatched: list[str] = []
    for argument in arguments:
        for citation in argument.citations:
            if citation not in titles and citation not in seen:
                seen.add(citation)
                unmatched.append(citation)
    return unmatched


def merge_hallucinations(reported: list[str], detected: list[str]) -> list[str]:
    """
    Union of the judge's report and the deterministic findings.

    A detected citation already mentioned inside a reported entry is not
    added again; judges often wrap the title in a sentence.
    """
    merged = list(reported)
    for citation in detected:
        if not any(citation in entry for entry in reported):
            merged.append(citation)
    return merged


def cross_check_ruling(
    ruling: JudgeRuling,
    evidence: EvidenceBundle,
    argument_yes: AdvocateArgument,
    argument_no: AdvocateArgument,
) -> JudgeRuling:
    """Return the ruling with hallucinations_detected extended to the union."""
    detected = unmatched_citations(evidence, argument_yes, argument_no)
    merged = merge_hallucinations(ruling.hallucinations_detected, detected)
    if merged == ruling.hallucinations_detected:
        return ruling
    return ruling.model_copy(update={"hallucinations_detected": merged})
