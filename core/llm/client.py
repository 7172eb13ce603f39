"""
LLM Client

Provider-agnostic async client for the reasoning-service boundary.
Every call carries an explicit role and an explicit timeout.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Optional, TYPE_CHECKING

from core.schemas.errors import LLMCallException
from core.schemas.market import Side

from .determinism import DecodingPolicy

if TYPE_CHECKING:
    from .providers import LLMProvider

logger = logging.getLogger(__name__)


class LLMRole(str, Enum):
    """Which trial participant a call is made for."""

    ADVOCATE_YES = "advocate_yes"
    ADVOCATE_NO = "advocate_no"
    JUDGE = "judge"

    @classmethod
    def for_side(cls, side: Side) -> "LLMRole":
        return cls.ADVOCATE_YES if side is Side.YES else cls.ADVOCATE_NO


@dataclass
class LLMResponse:
    """
    Response from an LLM call.
    """
    content: str
    model: str
    provider: str
    input_tokens: int = 0
    output_tokens: int = 0
    finish_reason: str = "stop"
    raw_response: Optional[dict[str, Any]] = None

    @property
    def total_tokens(self) -> int:
        return self.input_tokens + self.output_tokens


class LLMClient:
    """
    Provider-agnostic async LLM client.

    Usage:
        from core.llm import LLMClient, LLMRole, create_provider

        client = LLMClient(create_provider("anthropic"), timeout_s=60)
        response = await client.call(
            system_prompt, user_prompt,
            role=LLMRole.JUDGE, max_tokens=4096, temperature=0.2,
        )
        print(response.content)
    """

    def __init__(
        self,
        provider: "LLMProvider",
        *,
        default_policy: Optional[DecodingPolicy] = None,
        timeout_s: Optional[float] = 120.0,
    ) -> None:
        """
        Args:
            provider: The LLM provider to use
            default_policy: Default decoding policy for calls
            timeout_s: Per-call timeout; None disables it
        """
        self.provider = provider
        self.default_policy = default_policy or DecodingPolicy()
        self.timeout_s = timeout_s

    @property
    def provider_name(self) -> str:
        return self.provider.name

    @property
    def model(self) -> str:
        return self.provider.model

    @property
    def identity(self) -> tuple[str, str]:
        """(provider, model) pair used for independence checks."""
        return (self.provider.name, self.provider.model)

    async def call(
        self,
        system_prompt: str,
        user_prompt: str,
        *,
        role: LLMRole,
        max_tokens: Optional[int] = None,
        temperature: Optional[float] = None,
        policy: Optional[DecodingPolicy] = None,
    ) -> LLMResponse:
        """
        Send one system+user exchange to the provider.

        Raises:
            LLMCallException: On provider error, or with timed_out=True
                when the call exceeds timeout_s.
        """
        effective_policy = policy or self.default_policy
        if max_tokens is not None:
            effective_policy = replace(effective_policy, max_tokens=max_tokens)
        if temperature is not None:
            effective_policy = replace(effective_policy, temperature=temperature)

        messages = [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_prompt},
        ]

        logger.debug(
            "LLM call | role=%s provider=%s model=%s",
            role.value, self.provider.name, self.provider.model,
        )
        try:
            pending = self.provider.chat(messages, policy=effective_policy, role=role)
            if self.timeout_s is not None:
                response = await asyncio.wait_for(pending, timeout=self.timeout_s)
            else:
                response = await pending
        except asyncio.TimeoutError as e:
            raise LLMCallException(
                f"{role.value} call to {self.provider.name} timed out after {self.timeout_s}s",
                role=role.value,
                timed_out=True,
            ) from e
        except LLMCallException:
            raise
        except Exception as e:
            raise LLMCallException(
                f"{role.value} call to {self.provider.name} failed: {e}",
                role=role.value,
                details={"provider": self.provider.name, "model": self.provider.model},
            ) from e

        logger.debug("LLM call done | role=%s tokens=%d", role.value, response.total_tokens)
        return response
