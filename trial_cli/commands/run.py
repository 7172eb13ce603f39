"""
CLI Run Command

Run one adversarial trial for a question under the demo rubric and print
the transcript.

Usage:
    trialbyfire run "<question>" --mock --scenario close
    trialbyfire run "<question>" --threshold 25 --out ./transcripts --json
"""

from __future__ import annotations

import asyncio
import copy
import json
import sys
from argparse import Namespace
from typing import Any

from core.config import RuntimeConfig
from core.crypto import transcript_hash
from core.schemas import SettlementAction, TrialByFireException, TrialTranscript
from core.storage import DirectoryTranscriptStore
from orchestrator import demo_question, run_trial

# Exit codes
EXIT_RESOLVED = 0
EXIT_RUNTIME_ERROR = 1
EXIT_ESCALATED = 3


def build_runtime_config(args: Namespace) -> RuntimeConfig:
    """Apply --mock / --scenario to the loaded configuration."""
    config: RuntimeConfig = copy.deepcopy(args.runtime_config)
    if args.mock:
        config.pipeline.use_mocks = True
    if args.scenario:
        config.pipeline.use_mocks = True
        config.pipeline.mock_scenario = args.scenario
    return config


def _progress_printer(quiet: bool):
    def on_progress(stage: str, detail: str) -> None:
        if not quiet:
            print(f"[{stage}] {detail}", file=sys.stderr)
    return on_progress


def transcript_summary(transcript: TrialTranscript, digest: str) -> dict[str, Any]:
    decision = transcript.decision
    ruling = transcript.judge_ruling
    return {
        "question_id": transcript.question.id,
        "transcript_hash": digest,
        "action": decision.action.value,
        "verdict": decision.verdict.value if decision.verdict else None,
        "margin": decision.margin,
        "reason": decision.reason,
        "score_yes": ruling.score_yes,
        "score_no": ruling.score_no,
        "hallucinations_detected": list(ruling.hallucinations_detected),
        "duration_ms": transcript.duration_ms,
    }


def print_transcript_human(transcript: TrialTranscript, digest: str) -> None:
    """Print a transcript in readable sections."""
    print(f"Question: {transcript.question.question}")
    print(f"Question ID: {transcript.question.id}")
    print()

    print(f"Evidence ({len(transcript.evidence)} items):")
    for item in transcript.evidence.items:
        print(f"  - [{item.source}] {item.title}")
    print()

    for argument in (transcript.advocate_yes, transcript.advocate_no):
        print(f"Advocate {argument.side.value} ({argument.model}), confidence {argument.confidence:g}:")
        for arg in argument.arguments:
            print(f"  * {arg.criterion} (strength {arg.strength:g}): {arg.claim}")
            for citation in arg.evidence_citations:
                print(f"      cites: {citation}")
        for weakness in argument.weaknesses_in_opposing_case:
            print(f"  ! {weakness}")
        print()

    ruling = transcript.judge_ruling
    print(f"Judge ({ruling.model}):")
    for score in ruling.criterion_scores:
        print(f"  {score.criterion}: YES {score.score_yes:g} / NO {score.score_no:g}")
        print(f"    {score.reasoning}")
    print(f"  Weighted: YES {ruling.score_yes:g} / NO {ruling.score_no:g}")
    print(f"  Ruling: {ruling.ruling_text}")
    if ruling.hallucinations_detected:
        print("  Hallucinations detected:")
        for entry in ruling.hallucinations_detected:
            print(f"    - {entry}")
    print()

    decision = transcript.decision
    verdict = decision.verdict.value if decision.verdict else "none"
    print(f"Decision: {decision.action.value} ({verdict})")
    print(f"Reason: {decision.reason}")
    print(f"Transcript hash: {digest}")


def run_cmd(args: Namespace) -> int:
    """Handle the run command."""
    config = build_runtime_config(args)
    question = demo_question(args.question, question_id=args.id, threshold=args.threshold)

    try:
        transcript = asyncio.run(
            run_trial(question, config, on_progress=_progress_printer(args.json or args.quiet))
        )
    except TrialByFireException as e:
        if args.json:
            print(json.dumps({"ok": False, "error": e.to_error_model().model_dump(mode="json")}, indent=2, default=str))
        else:
            print(f"Trial failed: [{e.code}] {e.message}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    digest = transcript_hash(transcript)
    saved_to = None
    if args.out:
        store = DirectoryTranscriptStore(args.out)
        store.put(transcript)
        saved_to = str(store.root / f"{digest}.json")

    if args.json:
        output: dict[str, Any] = {"ok": True, "summary": transcript_summary(transcript, digest)}
        if saved_to:
            output["saved_to"] = saved_to
        if args.full:
            output["transcript"] = transcript.model_dump(mode="json")
        print(json.dumps(output, indent=2))
    else:
        print_transcript_human(transcript, digest)
        if saved_to:
            print(f"Saved to: {saved_to}")

    if transcript.decision.action is SettlementAction.RESOLVE:
        return EXIT_RESOLVED
    return EXIT_ESCALATED
