"""
Advocate Agent

Argues one mandated side of the market question from the evidence bundle.
Two advocates run concurrently over the same bundle; neither sees the
other's output. Output is validated strictly and any failure fails the
trial; there is no partial-credit advocate.
"""

from __future__ import annotations

import asyncio
import logging
from typing import NamedTuple, TYPE_CHECKING

from agents.base import AgentCapability, BaseAgent
from agents.validation import validate_advocate_output
from core.llm import ADVOCATE_POLICY, LLMClient, LLMRole
from core.schemas import AdvocateArgument, EvidenceBundle, MarketQuestion, Side

from .prompts import build_system_prompt, build_user_prompt

if TYPE_CHECKING:
    from agents.context import AgentContext

logger = logging.getLogger(__name__)


class AdvocatePair(NamedTuple):
    yes: AdvocateArgument
    no: AdvocateArgument


class AdvocateAgent(BaseAgent):
    """
    One side of the adversarial debate.

    Usage:
        agent = AdvocateAgent(Side.YES)
        argument = await agent.run(ctx, question, evidence)
    """

    _name = "Advocate"
    _version = "v1"
    _capabilities = {AgentCapability.LLM}

    def __init__(
        self,
        side: Side,
        *,
        max_tokens: int = ADVOCATE_POLICY.max_tokens,
        temperature: float = ADVOCATE_POLICY.temperature,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self.side = side
        self.role = LLMRole.for_side(side)
        self.max_tokens = max_tokens
        self.temperature = temperature

    @property
    def name(self) -> str:
        return self._name_override or f"Advocate{self.side.value}"

    async def argue(
        self,
        client: LLMClient,
        question: MarketQuestion,
        evidence: EvidenceBundle,
    ) -> AdvocateArgument:
        """
        Produce this side's argument with the given client.

        Raises:
            LLMCallException: If the call fails or times out
            SchemaValidationException: If the output is malformed or
                does not cover the rubric
        """
        logger.info("%s arguing with %s/%s", self.name, *client.identity)
        response = await client.call(
            build_system_prompt(self.side),
            build_user_prompt(question, evidence),
            role=self.role,
            max_tokens=self.max_tokens,
            temperature=self.temperature,
        )
        argument = validate_advocate_output(
            response.content,
            side=self.side,
            rubric=question.rubric,
            model=response.model,
        )
        logger.info(
            "%s argued with confidence %s citing %d item(s) (model=%s)",
            self.name, argument.confidence, len(argument.citations), argument.model,
        )
        return argument

    async def run(
        self,
        ctx: "AgentContext",
        question: MarketQuestion,
        evidence: EvidenceBundle,
    ) -> AdvocateArgument:
        ctx.info("[%s] %s arguing %s", ctx.run_id, self.name, question.id)
        return await self.argue(ctx.client_for(self.role), question, evidence)


async def run_advocate(
    question: MarketQuestion,
    evidence: EvidenceBundle,
    client: LLMClient,
    side: Side,
    *,
    max_tokens: int = ADVOCATE_POLICY.max_tokens,
    temperature: float = ADVOCATE_POLICY.temperature,
) -> AdvocateArgument:
    agent = AdvocateAgent(side, max_tokens=max_tokens, temperature=temperature)
    return await agent.argue(client, question, evidence)


async def run_advocate_pair(
    question: MarketQuestion,
    evidence: EvidenceBundle,
    client_yes: LLMClient,
    client_no: LLMClient,
    *,
    max_tokens: int = ADVOCATE_POLICY.max_tokens,
    temperature: float = ADVOCATE_POLICY.temperature,
) -> AdvocatePair:
    """
    Run both advocates concurrently and join their arguments.

    If either advocate fails, the other is cancelled and the failure
    propagates unchanged.

    Raises:
        LLMCallException: If either call fails or times out
        SchemaValidationException: If either output is invalid
    """
    tasks = [
        asyncio.ensure_future(run_advocate(
            question, evidence, client, side,
            max_tokens=max_tokens, temperature=temperature,
        ))
        for client, side in ((client_yes, Side.YES), (client_no, Side.NO))
    ]
    try:
        yes, no = await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks:
            task.cancel()
        # let cancelled siblings settle before re-raising
        await asyncio.gather(*tasks, return_exceptions=True)
        raise
    return AdvocatePair(yes=yes, no=no)
