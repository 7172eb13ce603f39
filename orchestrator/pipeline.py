"""
Trial Pipeline

Runs one adversarial trial end to end:

    evidence -> advocate pair -> judge -> confidence decision -> transcript

Evidence fan-out and the advocate pair are concurrent; the judge is the
join point. The pipeline keeps no state between runs. A failed or timed
out advocate or judge call fails the whole trial; there is no default
verdict to fall back on.
"""

from __future__ import annotations

import logging
import time
import uuid
from enum import Enum
from typing import Callable, Optional, Sequence

from agents.advocate import run_advocate_pair
from agents.context import AgentContext
from agents.evidence import EvidenceSource, build_sources, gather_evidence
from agents.judge import run_judge
from core.config import RuntimeConfig, get_default_config
from core.llm import LLMClient, LLMRole
from core.schemas import (
    MarketQuestion,
    TrialByFireException,
    TrialExecutionException,
    TrialTranscript,
)

from orchestrator.confidence import evaluate_confidence

logger = logging.getLogger(__name__)


class TrialStage(str, Enum):
    """Progress stages reported to on_progress."""
    EVIDENCE = "evidence"
    ADVOCATES = "advocates"
    JUDGE = "judge"
    DECISION = "decision"
    COMPLETE = "complete"


# on_progress(stage, detail)
ProgressCallback = Callable[[str, str], None]


# =============================================================================
# Provider Diversity
# =============================================================================

def check_provider_diversity(
    yes: LLMClient,
    no: LLMClient,
    judge: LLMClient,
) -> list[str]:
    """
    Describe every pair of trial roles backed by the same provider and model.

    Returns an empty list when all three roles are independent.
    """
    problems = []
    if yes.identity == no.identity:
        problems.append(
            "Both advocates use {}/{}; the debate is not adversarially independent".format(*yes.identity)
        )
    for side, advocate in (("YES", yes), ("NO", no)):
        if judge.identity == advocate.identity:
            problems.append(
                "Judge shares {}/{} with advocate {}".format(*judge.identity, side)
            )
    return problems


# =============================================================================
# Pipeline
# =============================================================================

class TrialPipeline:
    """
    Main trial runner.

    Usage:
        pipeline = TrialPipeline(config=RuntimeConfig.from_env())
        transcript = await pipeline.run(question)
    """

    def __init__(
        self,
        *,
        config: Optional[RuntimeConfig] = None,
        context: Optional[AgentContext] = None,
        sources: Optional[Sequence[EvidenceSource]] = None,
        on_progress: Optional[ProgressCallback] = None,
    ) -> None:
        """
        Args:
            config: Runtime configuration (defaults to the process default)
            context: Agent context; built from config when omitted
            sources: Evidence sources; built from config when omitted
            on_progress: Called with (stage, detail) as the trial advances
        """
        self.config = config or (context.config if context and context.config else get_default_config())
        self._context = context
        self._sources = list(sources) if sources is not None else None
        self.on_progress = on_progress

    def _get_context(self) -> AgentContext:
        if self._context is not None:
            return self._context
        return AgentContext.create(self.config, run_id=f"trial_{uuid.uuid4().hex[:12]}")

    def _get_sources(self, ctx: AgentContext) -> list[EvidenceSource]:
        if self._sources is not None:
            return self._sources
        return build_sources(self.config, ctx.http, clock=ctx.clock)

    def _progress(self, stage: TrialStage, detail: str) -> None:
        logger.info("[%s] %s", stage.value, detail)
        if self.on_progress is None:
            return
        try:
            self.on_progress(stage.value, detail)
        except Exception:
            logger.exception("on_progress callback failed at stage %s", stage.value)

    async def run(self, question: MarketQuestion) -> TrialTranscript:
        """
        Execute a full trial for one market question.

        Raises:
            TrialExecutionException: If an advocate or judge call fails, times
                out, or returns invalid output. The original error is chained
                as __cause__ and its code is in details["cause_code"].
        """
        ctx = self._get_context()
        pipeline_config = self.config.pipeline
        started = time.monotonic()
        executed_at = ctx.now()

        client_yes = ctx.client_for(LLMRole.ADVOCATE_YES)
        client_no = ctx.client_for(LLMRole.ADVOCATE_NO)
        client_judge = ctx.client_for(LLMRole.JUDGE)
        if pipeline_config.enforce_provider_diversity:
            for problem in check_provider_diversity(client_yes, client_no, client_judge):
                logger.warning(problem)

        # Stage 1: evidence
        sources = self._get_sources(ctx)
        self._progress(TrialStage.EVIDENCE, f"Gathering evidence from {len(sources)} source(s)...")
        evidence = await gather_evidence(
            question,
            sources,
            timeout_s=pipeline_config.evidence_timeout_s,
            clock=ctx.clock,
        )
        self._progress(TrialStage.EVIDENCE, f"Gathered {len(evidence)} evidence items.")
        if evidence.is_empty:
            logger.warning("Evidence bundle for %s is empty; advocates will argue without evidence", question.id)

        # Stage 2: advocate pair
        self._progress(TrialStage.ADVOCATES, "Running adversarial debate: YES vs NO in parallel...")
        try:
            pair = await run_advocate_pair(
                question,
                evidence,
                client_yes,
                client_no,
                max_tokens=pipeline_config.advocate_max_tokens,
                temperature=pipeline_config.advocate_temperature,
            )
        except TrialByFireException as e:
            raise self._stage_failure(TrialStage.ADVOCATES, e) from e
        self._progress(
            TrialStage.ADVOCATES,
            f"Advocates done. YES confidence: {pair.yes.confidence:g}, NO confidence: {pair.no.confidence:g}",
        )

        # Stage 3: judge (join point)
        self._progress(TrialStage.JUDGE, "Judge is scoring...")
        try:
            ruling = await run_judge(
                question,
                evidence,
                pair.yes,
                pair.no,
                client_judge,
                max_tokens=pipeline_config.judge_max_tokens,
                temperature=pipeline_config.judge_temperature,
            )
        except TrialByFireException as e:
            raise self._stage_failure(TrialStage.JUDGE, e) from e
        self._progress(
            TrialStage.JUDGE,
            f"Judge verdict: {ruling.final_verdict.value} "
            f"(YES: {ruling.score_yes:g}, NO: {ruling.score_no:g})",
        )

        # Stage 4: decision
        self._progress(TrialStage.DECISION, "Evaluating confidence threshold...")
        decision = evaluate_confidence(ruling, question.rubric)
        verdict_text = decision.verdict.value if decision.verdict else "none"
        self._progress(
            TrialStage.DECISION,
            f"Decision: {decision.action.value} - {verdict_text} | {decision.reason}",
        )

        duration_ms = int((time.monotonic() - started) * 1000)
        transcript = TrialTranscript(
            question=question,
            evidence=evidence,
            advocate_yes=pair.yes,
            advocate_no=pair.no,
            judge_ruling=ruling,
            decision=decision,
            executed_at=executed_at,
            duration_ms=duration_ms,
        )
        self._progress(
            TrialStage.COMPLETE,
            f"Trial complete in {duration_ms}ms: {decision.action.value}",
        )
        return transcript

    @staticmethod
    def _stage_failure(stage: TrialStage, error: TrialByFireException) -> TrialExecutionException:
        logger.error("Trial failed at %s: [%s] %s", stage.value, error.code, error.message)
        return TrialExecutionException(
            f"Trial failed at {stage.value}: {error.message}",
            stage=stage.value,
            details={"cause_code": error.code, **error.details},
        )


async def run_trial(
    question: MarketQuestion,
    config: Optional[RuntimeConfig] = None,
    *,
    context: Optional[AgentContext] = None,
    sources: Optional[Sequence[EvidenceSource]] = None,
    on_progress: Optional[ProgressCallback] = None,
) -> TrialTranscript:
    """
    Run one trial and return its transcript.

    A context built here owns its HTTP client and closes it afterwards.

    Raises:
        TrialExecutionException: On any fatal stage failure
    """
    owns_context = context is None
    config = config or (context.config if context and context.config else get_default_config())
    if context is None:
        context = AgentContext.create(config, run_id=f"trial_{uuid.uuid4().hex[:12]}")

    pipeline = TrialPipeline(config=config, context=context, sources=sources, on_progress=on_progress)
    try:
        return await pipeline.run(question)
    finally:
        if owns_context and context.http is not None:
            await context.http.aclose()
