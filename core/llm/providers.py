"""
LLM Provider Implementations

Async provider-specific adapters for:
- OpenAI (GPT-4o, etc.)
- Anthropic (Claude)
- Google (Gemini)
- Grok (xAI, OpenAI-compatible)
- Mock (scenario fixtures for demos and tests)
"""

from __future__ import annotations

import asyncio
import os
from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, Optional, Union

from .client import LLMResponse, LLMRole
from .determinism import DecodingPolicy, policy_to_provider_args
from .fixtures import scenario_response


# Canonical mapping from provider name to environment variable for API key.
PROVIDER_ENV_KEYS: dict[str, str] = {
    "openai": "OPENAI_API_KEY",
    "anthropic": "ANTHROPIC_API_KEY",
    "google": "GOOGLE_API_KEY",
    "grok": "XAI_API_KEY",
}

# Default models per provider (mirrors factory defaults in create_provider).
PROVIDER_DEFAULT_MODELS: dict[str, str] = {
    "openai": "gpt-4o",
    "anthropic": "claude-sonnet-4-20250514",
    "google": "gemini-2.5-flash",
    "grok": "grok-4-latest",
    "mock": "mock-model",
}


def get_configured_providers() -> list[dict[str, str]]:
    """Return providers that have API keys set in the environment."""
    return [
        {"provider": name, "default_model": PROVIDER_DEFAULT_MODELS.get(name, "")}
        for name, env_var in PROVIDER_ENV_KEYS.items()
        if os.getenv(env_var)
    ]


def _split_system(messages: list[dict[str, Any]]) -> tuple[str, list[dict[str, Any]]]:
    system_parts = [m["content"] for m in messages if m["role"] == "system"]
    chat_messages = [m for m in messages if m["role"] != "system"]
    return "\n".join(system_parts), chat_messages


class LLMProvider(ABC):
    """
    Abstract base class for LLM providers.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider name (openai, anthropic, google, etc.)."""
        ...

    @property
    @abstractmethod
    def model(self) -> str:
        """Model identifier."""
        ...

    @abstractmethod
    async def chat(
        self,
        messages: list[dict[str, Any]],
        *,
        policy: DecodingPolicy,
        role: LLMRole,
    ) -> LLMResponse:
        """
        Send a chat completion request.

        Args:
            messages: List of message dicts
            policy: Decoding policy
            role: Trial role the call is made for

        Returns:
            LLMResponse with content and metadata
        """
        ...


class OpenAIProvider(LLMProvider):
    """
    OpenAI API provider.

    Requires: openai package
    """

    def __init__(
        self,
        model: str = "gpt-4o",
        *,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
    ) -> None:
        self._model = model
        self._api_key = api_key or os.getenv("OPENAI_API_KEY")
        self._base_url = base_url
        self._client = None

    @property
    def name(self) -> str:
        return "openai"

    @property
    def model(self) -> str:
        return self._model

    def _get_client(self):
        """Lazy-load the async OpenAI client."""
        if self._client is None:
            from openai import AsyncOpenAI

            kwargs: dict[str, Any] = {"api_key": self._api_key}
            if self._base_url:
                kwargs["base_url"] = self._base_url
            self._client = AsyncOpenAI(**kwargs)
        return self._client

    async def chat(
        self,
        messages: list[dict[str, Any]],
        *,
        policy: DecodingPolicy,
        role: LLMRole,
    ) -> LLMResponse:
        client = self._get_client()

        kwargs = policy_to_provider_args(policy, "openai")
        kwargs["model"] = self._model
        kwargs["messages"] = messages

        response = await client.chat.completions.create(**kwargs)

        choice = response.choices[0]
        return LLMResponse(
            content=choice.message.content or "",
            model=response.model,
            provider=self.name,
            input_tokens=response.usage.prompt_tokens if response.usage else 0,
            output_tokens=response.usage.completion_tokens if response.usage else 0,
            finish_reason=choice.finish_reason or "stop",
        )


class AnthropicProvider(LLMProvider):
    """
    Anthropic API provider.

    Requires: anthropic package
    """

    def __init__(
        self,
        model: str = "claude-sonnet-4-20250514",
        *,
        api_key: Optional[str] = None,
    ) -> None:
        self._model = model
        self._api_key = api_key or os.getenv("ANTHROPIC_API_KEY")
        self._client = None

    @property
    def name(self) -> str:
        return "anthropic"

    @property
    def model(self) -> str:
        return self._model

    def _get_client(self):
        """Lazy-load the async Anthropic client."""
        if self._client is None:
            from anthropic import AsyncAnthropic

            self._client = AsyncAnthropic(api_key=self._api_key)
        return self._client

    async def chat(
        self,
        messages: list[dict[str, Any]],
        *,
        policy: DecodingPolicy,
        role: LLMRole,
    ) -> LLMResponse:
        client = self._get_client()
        system_prompt, chat_messages = _split_system(messages)

        kwargs = policy_to_provider_args(policy, "anthropic")
        kwargs["model"] = self._model
        kwargs["messages"] = chat_messages
        if system_prompt:
            kwargs["system"] = system_prompt

        response = await client.messages.create(**kwargs)

        content = ""
        for block in response.content:
            if block.type == "text":
                content += block.text

        return LLMResponse(
            content=content,
            model=response.model,
            provider=self.name,
            input_tokens=response.usage.input_tokens if response.usage else 0,
            output_tokens=response.usage.output_tokens if response.usage else 0,
            finish_reason=response.stop_reason or "stop",
        )


class GoogleProvider(LLMProvider):
    """
    Google Gemini API provider.

    Requires: google-genai package (pip install google-genai)
    """

    def __init__(
        self,
        model: str = "gemini-2.5-flash",
        *,
        api_key: Optional[str] = None,
    ) -> None:
        self._model = model
        self._api_key = api_key or os.getenv("GOOGLE_API_KEY")
        self._client = None

    @property
    def name(self) -> str:
        return "google"

    @property
    def model(self) -> str:
        return self._model

    def _get_client(self):
        """Lazy-load Google genai client."""
        if self._client is None:
            from google import genai

            self._client = genai.Client(api_key=self._api_key)
        return self._client

    async def chat(
        self,
        messages: list[dict[str, Any]],
        *,
        policy: DecodingPolicy,
        role: LLMRole,
    ) -> LLMResponse:
        from google.genai import types

        client = self._get_client()
        system_prompt, chat_messages = _split_system(messages)

        contents = [
            types.Content(
                role="user" if m["role"] == "user" else "model",
                parts=[types.Part(text=m["content"])],
            )
            for m in chat_messages
        ]
        config_kwargs = policy_to_provider_args(policy, "google")
        if system_prompt:
            config_kwargs["system_instruction"] = system_prompt

        response = await client.aio.models.generate_content(
            model=self._model,
            contents=contents,
            config=types.GenerateContentConfig(**config_kwargs),
        )

        usage = getattr(response, "usage_metadata", None)
        return LLMResponse(
            content=response.text or "",
            model=self._model,
            provider=self.name,
            input_tokens=getattr(usage, "prompt_token_count", 0) or 0,
            output_tokens=getattr(usage, "candidates_token_count", 0) or 0,
            finish_reason="stop",
        )


class GrokProvider(OpenAIProvider):
    """
    Grok (xAI) API provider.

    Uses the OpenAI-compatible endpoint at https://api.x.ai/v1.
    Requires: openai package
    """

    def __init__(
        self,
        model: str = "grok-4-latest",
        *,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
    ) -> None:
        super().__init__(
            model=model,
            api_key=api_key or os.getenv("XAI_API_KEY"),
            base_url=base_url or "https://api.x.ai/v1",
        )

    @property
    def name(self) -> str:
        return "grok"


ResponseFn = Callable[[LLMRole, list[dict[str, Any]], DecodingPolicy], Union[str, Awaitable[str]]]


class MockProvider(LLMProvider):
    """
    Mock provider for demos and tests.

    Answers by role, in order of precedence: response_fn, then an explicit
    {role: content} map, then the fixtures of the named scenario.
    """

    def __init__(
        self,
        model: str = "mock-model",
        *,
        scenario: str = "clear",
        responses: Optional[dict[LLMRole, str]] = None,
        response_fn: Optional[ResponseFn] = None,
        latency_s: float = 0.0,
    ) -> None:
        if responses is None and response_fn is None:
            # fail fast on a bad scenario name
            scenario_response(scenario, LLMRole.JUDGE.value)
        self._model = model
        self.scenario = scenario
        self._responses = dict(responses or {})
        self._response_fn = response_fn
        self._latency_s = latency_s
        self._calls: list[dict[str, Any]] = []

    @property
    def name(self) -> str:
        return "mock"

    @property
    def model(self) -> str:
        return self._model

    @property
    def calls(self) -> list[dict[str, Any]]:
        """Get all recorded calls."""
        return self._calls

    def set_response(self, role: LLMRole, content: str) -> None:
        """Override the content returned for one role."""
        self._responses[role] = content

    async def chat(
        self,
        messages: list[dict[str, Any]],
        *,
        policy: DecodingPolicy,
        role: LLMRole,
    ) -> LLMResponse:
        self._calls.append({"role": role, "messages": messages, "policy": policy})

        if self._latency_s:
            await asyncio.sleep(self._latency_s)

        if self._response_fn is not None:
            content = self._response_fn(role, messages, policy)
            if not isinstance(content, str):
                content = await content
        elif role in self._responses:
            content = self._responses[role]
        else:
            content = scenario_response(self.scenario, role.value)

        return LLMResponse(
            content=content,
            model=self._model,
            provider=self.name,
            finish_reason="stop",
        )


def create_provider(
    provider_name: str,
    model: Optional[str] = None,
    **kwargs: Any,
) -> LLMProvider:
    """
    Factory function to create an LLM provider.

    Args:
        provider_name: Provider name (openai, anthropic, google, grok, mock)
        model: Model identifier (optional, uses provider default)
        **kwargs: Provider-specific arguments (api_key, base_url, scenario, ...)

    Returns:
        LLMProvider instance
    """
    provider_name = provider_name.lower()
    model = model or PROVIDER_DEFAULT_MODELS.get(provider_name)

    if provider_name == "openai":
        return OpenAIProvider(model=model, **kwargs)
    elif provider_name == "anthropic":
        kwargs.pop("base_url", None)
        return AnthropicProvider(model=model, **kwargs)
    elif provider_name == "google":
        kwargs.pop("base_url", None)
        return GoogleProvider(model=model, **kwargs)
    elif provider_name == "grok":
        return GrokProvider(model=model, **kwargs)
    elif provider_name == "mock":
        kwargs.pop("api_key", None)
        kwargs.pop("base_url", None)
        return MockProvider(model=model, **kwargs)
    else:
        raise ValueError(f"Unknown provider: {provider_name}")
