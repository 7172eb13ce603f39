"""
Prompts for the Judge

The judge sees the question, the rubric, the full evidence bundle and
both arguments, and returns per-criterion and aggregate scores plus a
list of citations it could not find among the evidence titles.
"""

from agents.advocate.prompts import format_evidence, format_rubric
from core.schemas import AdvocateArgument, EvidenceBundle, MarketQuestion

SYSTEM_PROMPT = """You are a neutral adjudicator in an adversarial trial that settles a prediction market. Two advocates have argued opposite sides of a question, citing a shared evidence bundle.

You MUST output valid JSON matching the exact schema specified. No explanations, no markdown, just JSON.

## Core Responsibilities

1. **Score**: Score both advocates on every rubric criterion, 0-100 per side per criterion
2. **Aggregate**: Weight each criterion score by its rubric weight, sum, and divide by the total weight
3. **Check Citations**: Verify that every citation made by either advocate is the exact title of an item in the evidence bundle. List every citation that is not
4. **Rule**: Declare the side with the stronger overall case and explain why in 2-4 sentences

## Scoring Guidelines

- Score only evidence quality and rubric alignment, never your own beliefs about the question
- A higher score means the argument is better supported by evidence in the bundle
- Fabricated citations are listed, and the valid remainder of the argument is still scored

## Output Schema

```json
{
  "final_verdict": "YES|NO",
  "score_yes": 0-100,
  "score_no": 0-100,
  "criterion_scores": [
    {
      "criterion": "<rubric criterion name>",
      "score_yes": 0-100,
      "score_no": 0-100,
      "reasoning": "<why these scores>"
    }
  ],
  "ruling_text": "<2-4 sentence ruling>",
  "hallucinations_detected": ["<citation not found among evidence titles>"]
}
```

Return ONLY valid JSON.
"""

USER_PROMPT_TEMPLATE = """## Market Question
{question}

## Resolution Rubric
{rubric}

## Evidence Titles (for citation checking)
{titles}

## Evidence Content
{evidence}

========================================
## Advocate YES
{argument_yes}

========================================
## Advocate NO
{argument_no}

========================================
Score both arguments against every rubric criterion, list any citation that is not one of the evidence titles above, and return your ruling as JSON.
"""


def format_titles(evidence: EvidenceBundle) -> str:
    if evidence.is_empty:
        return "(none)"
    return "\n".join(
        f"  {i}. [{item.source}] {item.title}" for i, item in enumerate(evidence.items, start=1)
    )


def format_argument(argument: AdvocateArgument) -> str:
    parts = [
        f"Side: {argument.side.value}",
        f"Confidence: {argument.confidence}/100",
        "Arguments:",
    ]
    for arg in argument.arguments:
        parts.append(
            f"  Criterion: {arg.criterion}\n"
            f"  Claim: {arg.claim}\n"
            f"  Citations: {', '.join(arg.evidence_citations) or '(none)'}\n"
            f"  Self-assessed strength: {arg.strength}/100\n"
        )
    parts.append("Weaknesses in opposing case:")
    parts.extend(f"  - {w}" for w in argument.weaknesses_in_opposing_case)
    return "\n".join(parts)


def build_user_prompt(
    question: MarketQuestion,
    evidence: EvidenceBundle,
    argument_yes: AdvocateArgument,
    argument_no: AdvocateArgument,
) -> str:
    return USER_PROMPT_TEMPLATE.format(
        question=question.question,
        rubric=format_rubric(question.rubric),
        titles=format_titles(evidence),
        evidence=format_evidence(evidence, include_urls=False),
        argument_yes=format_argument(argument_yes),
        argument_no=format_argument(argument_no),
    )
