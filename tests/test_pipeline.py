"""
Tests for the Trial Pipeline

End-to-end trials over the mock scenarios, stage failure handling,
provider diversity warnings and progress reporting.
"""

import pytest

from agents import AgentContext, MockEvidenceSource
from core.config import RuntimeConfig
from core.crypto import is_hash_hex, transcript_hash
from core.llm import LLMClient, LLMRole, MockProvider
from core.schemas import ErrorCodes, SettlementAction, Side, TrialExecutionException
from orchestrator import TrialPipeline, TrialStage, check_provider_diversity, run_trial

from fixtures import FIXED_TIME


def mock_config(scenario: str = "clear") -> RuntimeConfig:
    return RuntimeConfig.from_dict({"pipeline": {"use_mocks": True, "mock_scenario": scenario}})


def make_pipeline(scenario: str = "clear", **kwargs) -> TrialPipeline:
    from core.clock import FrozenClock

    return TrialPipeline(
        config=mock_config(scenario),
        context=AgentContext.create_mock(scenario=scenario, clock=FrozenClock(FIXED_TIME)),
        sources=[MockEvidenceSource(clock=FrozenClock(FIXED_TIME))],
        **kwargs,
    )


def trio(yes: MockProvider, no: MockProvider, judge: MockProvider, timeout_s=5.0) -> AgentContext:
    return AgentContext(clients={
        LLMRole.ADVOCATE_YES: LLMClient(yes, timeout_s=timeout_s),
        LLMRole.ADVOCATE_NO: LLMClient(no, timeout_s=timeout_s),
        LLMRole.JUDGE: LLMClient(judge, timeout_s=timeout_s),
    })


# =============================================================================
# Scenarios
# =============================================================================

class TestMockScenarios:

    @pytest.mark.asyncio
    async def test_clear_escalates_on_hallucination(self, question):
        transcript = await make_pipeline("clear").run(question)

        decision = transcript.decision
        assert decision.action is SettlementAction.ESCALATE
        assert decision.verdict is None
        assert decision.margin == 33
        assert decision.reason.startswith("Hallucinations detected:")
        assert len(transcript.judge_ruling.hallucinations_detected) == 1

    @pytest.mark.asyncio
    async def test_close_escalates_on_margin(self, question):
        transcript = await make_pipeline("close").run(question)

        decision = transcript.decision
        assert decision.action is SettlementAction.ESCALATE
        assert decision.margin == 4
        assert decision.reason == "Margin 4 is below threshold 20. Too close to auto-resolve."

    @pytest.mark.asyncio
    async def test_decisive_resolves_yes(self, question):
        transcript = await make_pipeline("decisive").run(question)

        decision = transcript.decision
        assert decision.action is SettlementAction.RESOLVE
        assert decision.verdict is Side.YES
        assert decision.margin == 33
        assert transcript.judge_ruling.hallucinations_detected == []

    @pytest.mark.asyncio
    async def test_transcript_is_complete(self, question):
        transcript = await make_pipeline("decisive").run(question)

        assert transcript.question == question
        assert transcript.advocate_yes.side is Side.YES
        assert transcript.advocate_no.side is Side.NO
        assert transcript.advocate_yes.model == "mock-advocate-yes"
        assert transcript.judge_ruling.model == "mock-judge"
        assert len(transcript.evidence) == 7
        assert transcript.executed_at == FIXED_TIME
        assert transcript.duration_ms >= 0
        assert is_hash_hex(transcript_hash(transcript))

    @pytest.mark.asyncio
    async def test_higher_threshold_escalates_decisive(self):
        from fixtures import make_question

        transcript = await make_pipeline("decisive").run(make_question(threshold=40))

        assert transcript.decision.action is SettlementAction.ESCALATE
        assert "below threshold 40" in transcript.decision.reason

    @pytest.mark.asyncio
    async def test_run_trial_builds_its_own_context(self, question):
        transcript = await run_trial(question, mock_config("decisive"))

        assert transcript.decision.action is SettlementAction.RESOLVE
        assert len(transcript.evidence) == 7

    @pytest.mark.asyncio
    async def test_pipeline_is_stateless(self, question):
        pipeline = make_pipeline("decisive")
        first = await pipeline.run(question)
        second = await pipeline.run(question)

        assert first.decision == second.decision
        assert first.judge_ruling == second.judge_ruling


# =============================================================================
# Failures
# =============================================================================

class TestStageFailures:

    @pytest.mark.asyncio
    async def test_judge_timeout_fails_trial(self, question):
        ctx = trio(
            MockProvider(model="a", scenario="decisive"),
            MockProvider(model="b", scenario="decisive"),
            MockProvider(model="c", scenario="decisive", latency_s=1.0),
            timeout_s=0.05,
        )
        pipeline = TrialPipeline(config=mock_config(), context=ctx, sources=[MockEvidenceSource()])

        with pytest.raises(TrialExecutionException) as exc_info:
            await pipeline.run(question)

        error = exc_info.value
        assert error.stage == "judge"
        assert error.details["stage"] == "judge"
        assert error.details["cause_code"] == ErrorCodes.STAGE_TIMEOUT
        assert error.__cause__ is not None

    @pytest.mark.asyncio
    async def test_invalid_advocate_output_fails_trial(self, question):
        ctx = trio(
            MockProvider(model="a", responses={LLMRole.ADVOCATE_YES: "no json"}),
            MockProvider(model="b", scenario="decisive"),
            MockProvider(model="c", scenario="decisive"),
        )
        pipeline = TrialPipeline(config=mock_config(), context=ctx, sources=[MockEvidenceSource()])

        with pytest.raises(TrialExecutionException) as exc_info:
            await pipeline.run(question)

        assert exc_info.value.stage == "advocates"
        assert exc_info.value.details["cause_code"] == ErrorCodes.SCHEMA_VALIDATION_ERROR

    @pytest.mark.asyncio
    async def test_judge_not_called_after_advocate_failure(self, question):
        judge = MockProvider(model="c", scenario="decisive")
        ctx = trio(
            MockProvider(model="a", responses={LLMRole.ADVOCATE_YES: "no json"}),
            MockProvider(model="b", scenario="decisive"),
            judge,
        )
        pipeline = TrialPipeline(config=mock_config(), context=ctx, sources=[MockEvidenceSource()])

        with pytest.raises(TrialExecutionException):
            await pipeline.run(question)

        assert judge.calls == []

    @pytest.mark.asyncio
    async def test_empty_evidence_still_runs(self, question, caplog):
        # with no bundle every citation is unverifiable
        pipeline = TrialPipeline(
            config=mock_config("decisive"),
            context=AgentContext.create_mock(scenario="decisive"),
            sources=[],
        )
        with caplog.at_level("WARNING"):
            transcript = await pipeline.run(question)

        assert transcript.evidence.is_empty
        assert transcript.decision.action is SettlementAction.ESCALATE
        assert any("is empty" in r.getMessage() for r in caplog.records)


# =============================================================================
# Provider Diversity
# =============================================================================

class TestProviderDiversity:

    def test_independent_trio(self):
        clients = [LLMClient(MockProvider(model=m)) for m in ("a", "b", "c")]
        assert check_provider_diversity(*clients) == []

    def test_shared_identity_reported(self):
        shared = LLMClient(MockProvider(model="same"))
        problems = check_provider_diversity(shared, shared, shared)

        assert len(problems) == 3
        assert "Both advocates use mock/same" in problems[0]

    @pytest.mark.asyncio
    async def test_shared_identity_warns_but_runs(self, question, caplog):
        ctx = trio(*(MockProvider(model="same", scenario="decisive") for _ in range(3)))
        pipeline = TrialPipeline(config=mock_config(), context=ctx, sources=[MockEvidenceSource()])

        with caplog.at_level("WARNING"):
            transcript = await pipeline.run(question)

        assert transcript.decision.action is SettlementAction.RESOLVE
        assert any("not adversarially independent" in r.getMessage() for r in caplog.records)

    @pytest.mark.asyncio
    async def test_check_can_be_disabled(self, question, caplog):
        config = RuntimeConfig.from_dict({"pipeline": {"enforce_provider_diversity": False}})
        ctx = trio(*(MockProvider(model="same", scenario="decisive") for _ in range(3)))
        pipeline = TrialPipeline(config=config, context=ctx, sources=[MockEvidenceSource()])

        with caplog.at_level("WARNING"):
            await pipeline.run(question)

        assert not any("independent" in r.getMessage() for r in caplog.records)


# =============================================================================
# Progress
# =============================================================================

class TestProgress:

    @pytest.mark.asyncio
    async def test_stages_reported_in_order(self, question):
        seen = []
        await make_pipeline("decisive", on_progress=lambda stage, detail: seen.append(stage)).run(question)

        ordered = list(dict.fromkeys(seen))
        assert ordered == [s.value for s in TrialStage]

    @pytest.mark.asyncio
    async def test_failing_callback_does_not_fail_trial(self, question):
        def explode(stage, detail):
            raise RuntimeError("display broke")

        transcript = await make_pipeline("decisive", on_progress=explode).run(question)

        assert transcript.decision.action is SettlementAction.RESOLVE

    @pytest.mark.asyncio
    async def test_decision_detail(self, question):
        details = []
        await make_pipeline(
            "close", on_progress=lambda stage, detail: details.append((stage, detail)),
        ).run(question)

        decision_lines = [d for s, d in details if s == "decision" and d.startswith("Decision:")]
        assert decision_lines == [
            "Decision: ESCALATE - none | Margin 4 is below threshold 20. Too close to auto-resolve."
        ]
