"""
Judge Agent

Adjudicates the debate once both arguments exist. The ruling is
schema-validated like the advocates' output, then its hallucination list
is extended by a deterministic citation cross-check against the bundle.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from agents.base import AgentCapability, BaseAgent
from agents.validation import validate_judge_output
from core.llm import JUDGE_POLICY, LLMClient, LLMRole
from core.schemas import AdvocateArgument, EvidenceBundle, JudgeRuling, MarketQuestion

from .citations import cross_check_ruling
from .prompts import SYSTEM_PROMPT, build_user_prompt

if TYPE_CHECKING:
    from agents.context import AgentContext

logger = logging.getLogger(__name__)


class JudgeAgent(BaseAgent):
    """
    Neutral adjudicator.

    Features:
    - Per-criterion and weighted aggregate scores for both sides
    - Model-reported and deterministic fabrication checks
    - Short natural-language ruling
    """

    _name = "Judge"
    _version = "v1"
    _capabilities = {AgentCapability.LLM}

    def __init__(
        self,
        *,
        max_tokens: int = JUDGE_POLICY.max_tokens,
        temperature: float = JUDGE_POLICY.temperature,
        cross_check_citations: bool = True,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self.max_tokens = max_tokens
        self.temperature = temperature
        self.cross_check_citations = cross_check_citations

    async def adjudicate(
        self,
        client: LLMClient,
        question: MarketQuestion,
        evidence: EvidenceBundle,
        argument_yes: AdvocateArgument,
        argument_no: AdvocateArgument,
    ) -> JudgeRuling:
        """
        Raises:
            LLMCallException: If the call fails or times out
            SchemaValidationException: If the ruling is malformed or does
                not score every rubric criterion
        """
        logger.info("Judge scoring with %s/%s", *client.identity)
        response = await client.call(
            SYSTEM_PROMPT,
            build_user_prompt(question, evidence, argument_yes, argument_no),
            role=LLMRole.JUDGE,
            max_tokens=self.max_tokens,
            temperature=self.temperature,
        )
        ruling = validate_judge_output(
            response.content,
            rubric=question.rubric,
            model=response.model,
        )

        if self.cross_check_citations:
            checked = cross_check_ruling(ruling, evidence, argument_yes, argument_no)
            if checked is not ruling:
                added = checked.hallucinations_detected[len(ruling.hallucinations_detected):]
                logger.warning("Citation cross-check found unreported fabrications: %s", added)
            ruling = checked

        if not ruling.is_internally_consistent:
            logger.warning(
                "Judge declared %s but scored YES %s vs NO %s",
                ruling.final_verdict.value, ruling.score_yes, ruling.score_no,
            )

        logger.info(
            "Judge verdict %s (YES %s, NO %s, %d hallucination(s))",
            ruling.final_verdict.value, ruling.score_yes, ruling.score_no,
            len(ruling.hallucinations_detected),
        )
        return ruling

    async def run(
        self,
        ctx: "AgentContext",
        question: MarketQuestion,
        evidence: EvidenceBundle,
        argument_yes: AdvocateArgument,
        argument_no: AdvocateArgument,
    ) -> JudgeRuling:
        ctx.info("[%s] %s adjudicating %s", ctx.run_id, self.name, question.id)
        return await self.adjudicate(
            ctx.client_for(LLMRole.JUDGE), question, evidence, argument_yes, argument_no,
        )


async def run_judge(
    question: MarketQuestion,
    evidence: EvidenceBundle,
    argument_yes: AdvocateArgument,
    argument_no: AdvocateArgument,
    client: LLMClient,
    *,
    max_tokens: int = JUDGE_POLICY.max_tokens,
    temperature: float = JUDGE_POLICY.temperature,
) -> JudgeRuling:
    agent = JudgeAgent(max_tokens=max_tokens, temperature=temperature)
    return await agent.adjudicate(client, question, evidence, argument_yes, argument_no)
