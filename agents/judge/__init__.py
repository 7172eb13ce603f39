"""
Judge

Adjudicates the advocate pair against the rubric.
"""

from .agent import JudgeAgent, run_judge
from .citations import cross_check_ruling, merge_hallucinations, unmatched_citations
from .prompts import SYSTEM_PROMPT, build_user_prompt

__all__ = [
    "JudgeAgent",
    "run_judge",
    "cross_check_ruling",
    "merge_hallucinations",
    "unmatched_citations",
    "SYSTEM_PROMPT",
    "build_user_prompt",
]
