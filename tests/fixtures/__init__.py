"""
Test fixtures package for TrialByFire tests.

This package provides factory functions for creating test objects.

Usage:
    from fixtures import make_question, make_ruling

    def test_something():
        ruling = make_ruling(score_yes=60, score_no=55)
"""

from .common import (
    FIXED_TIME,
    make_advocate_argument,
    make_advocate_dict,
    make_decision,
    make_evidence_bundle,
    make_evidence_item,
    make_judge_dict,
    make_question,
    make_rubric,
    make_ruling,
    make_scenario_transcript,
)

__all__ = [
    "FIXED_TIME",
    "make_advocate_argument",
    "make_advocate_dict",
    "make_decision",
    "make_evidence_bundle",
    "make_evidence_item",
    "make_judge_dict",
    "make_question",
    "make_rubric",
    "make_ruling",
    "make_scenario_transcript",
]
