"""
Trial Agents

The three stages that call out of process:
- Evidence sources and the concurrent aggregator
- The advocate pair
- The judge

Plus the shared agent base, context and output validation.
"""

from .base import AgentCapability, BaseAgent
from .context import AgentContext
from .validation import (
    check_rubric_coverage,
    extract_json,
    parse_json_object,
    validate_advocate_output,
    validate_judge_output,
)
from .evidence import (
    EvidenceSource,
    MockEvidenceSource,
    build_sources,
    gather_evidence,
)
from .advocate import AdvocateAgent, AdvocatePair, run_advocate, run_advocate_pair
from .judge import JudgeAgent, run_judge

__all__ = [
    "AgentCapability",
    "BaseAgent",
    "AgentContext",
    "check_rubric_coverage",
    "extract_json",
    "parse_json_object",
    "validate_advocate_output",
    "validate_judge_output",
    "EvidenceSource",
    "MockEvidenceSource",
    "build_sources",
    "gather_evidence",
    "AdvocateAgent",
    "AdvocatePair",
    "run_advocate",
    "run_advocate_pair",
    "JudgeAgent",
    "run_judge",
]
