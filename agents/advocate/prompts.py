"""
Prompts for the Advocate Pair

Both advocates receive the same user prompt. The system prompts differ
only in the side each advocate is mandated to argue.
"""

from core.schemas import EvidenceBundle, MarketQuestion, ResolutionRubric, Side

SYSTEM_PROMPT_TEMPLATE = """You are an expert advocate in an adversarial trial that settles a prediction market. Your assigned position is: {side}.

You MUST argue that the answer to the market question is {side}. Build the strongest case the evidence allows, whatever your own view of the question.

You MUST output valid JSON matching the exact schema specified. No explanations, no markdown, just JSON.

## Rules

1. Cite ONLY evidence items from the evidence bundle in the user message, by their exact title. Prior knowledge and outside sources are not admissible.
2. Back every claim with at least one citation.
3. Address EVERY criterion in the resolution rubric, once each, using the criterion name exactly as given.
4. Rate the strength of each argument honestly from 0 to 100. Overstated strength costs credibility with the judge.
5. List the weaknesses you expect in the opposing case.

## Output Schema

```json
{{
  "side": "{side}",
  "confidence": 0-100,
  "arguments": [
    {{
      "criterion": "<rubric criterion name>",
      "claim": "<your argument for this criterion>",
      "evidence_citations": ["<exact evidence title>"],
      "strength": 0-100
    }}
  ],
  "weaknesses_in_opposing_case": ["<weakness>"]
}}
```

Return ONLY valid JSON.
"""

USER_PROMPT_TEMPLATE = """## Market Question
{question}

## Resolution Rubric
{rubric}

## Evidence Bundle ({count} items)
{evidence}

Build your case now. Address every rubric criterion and cite evidence by exact title.
"""


def format_rubric(rubric: ResolutionRubric) -> str:
    """One "- name (weight: w/100): description" line per criterion."""
    return "\n".join(
        f"- {c.name} (weight: {c.weight}/100): {c.description}" for c in rubric.criteria
    )


def format_evidence(evidence: EvidenceBundle, *, include_urls: bool = True) -> str:
    if evidence.is_empty:
        return "(no evidence was gathered)"
    blocks = []
    for i, item in enumerate(evidence.items, start=1):
        lines = [
            f"--- Evidence Item {i} ---",
            f"Title: {item.title}",
            f"Source: {item.source}",
            f"Content: {item.content}",
        ]
        if include_urls and item.url:
            lines.append(f"URL: {item.url}")
        blocks.append("\n".join(lines))
    return "\n\n".join(blocks)


def build_system_prompt(side: Side) -> str:
    return SYSTEM_PROMPT_TEMPLATE.format(side=side.value)


def build_user_prompt(question: MarketQuestion, evidence: EvidenceBundle) -> str:
    return USER_PROMPT_TEMPLATE.format(
        question=question.question,
        rubric=format_rubric(question.rubric),
        count=len(evidence),
        evidence=format_evidence(evidence),
    )
