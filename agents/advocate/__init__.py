"""
Advocate Pair

Two independently mandated arguers, run concurrently over one bundle.
"""

from .agent import AdvocateAgent, AdvocatePair, run_advocate, run_advocate_pair
from .prompts import build_system_prompt, build_user_prompt, format_evidence, format_rubric

__all__ = [
    "AdvocateAgent",
    "AdvocatePair",
    "run_advocate",
    "run_advocate_pair",
    "build_system_prompt",
    "build_user_prompt",
    "format_evidence",
    "format_rubric",
]
