"""
LLM Client Module

Async, provider-agnostic reasoning-service client with support for:
- OpenAI (GPT-4o, etc.)
- Anthropic (Claude)
- Google (Gemini)
- Grok (xAI)
- Mock scenarios for demos and tests

Every call names the trial role it is made for and is bounded by a timeout.
"""

from typing import Any, Optional

from .client import LLMClient, LLMResponse, LLMRole
from .determinism import ADVOCATE_POLICY, JUDGE_POLICY, DecodingPolicy, policy_to_provider_args
from .fixtures import SCENARIOS, scenario_response
from .providers import (
    LLMProvider,
    OpenAIProvider,
    AnthropicProvider,
    GoogleProvider,
    GrokProvider,
    MockProvider,
    create_provider,
    PROVIDER_ENV_KEYS,
    PROVIDER_DEFAULT_MODELS,
    get_configured_providers,
)


def create_llm_client(
    provider: str,
    *,
    api_key: Optional[str] = None,
    model: Optional[str] = None,
    endpoint: Optional[str] = None,
    timeout_s: Optional[float] = 120.0,
    default_policy: Optional[DecodingPolicy] = None,
    **kwargs: Any,
) -> LLMClient:
    """
    Convenience function to create an LLMClient.

    Args:
        provider: Provider name (openai, anthropic, google, grok, mock)
        api_key: API key for the provider
        model: Model identifier (optional, uses provider default)
        endpoint: Custom API endpoint (for OpenAI-compatible APIs)
        timeout_s: Per-call timeout in seconds
        default_policy: Default decoding policy
        **kwargs: Additional provider-specific arguments (e.g. scenario for mock)

    Example:
        client = create_llm_client("anthropic", api_key="sk-...")
        response = await client.call(system, user, role=LLMRole.JUDGE)
    """
    provider_kwargs: dict[str, Any] = {}
    if api_key:
        provider_kwargs["api_key"] = api_key
    if endpoint:
        provider_kwargs["base_url"] = endpoint
    provider_kwargs.update(kwargs)

    return LLMClient(
        provider=create_provider(provider, model=model, **provider_kwargs),
        default_policy=default_policy,
        timeout_s=timeout_s,
    )


__all__ = [
    "LLMClient",
    "LLMResponse",
    "LLMRole",
    "DecodingPolicy",
    "ADVOCATE_POLICY",
    "JUDGE_POLICY",
    "policy_to_provider_args",
    "SCENARIOS",
    "scenario_response",
    "LLMProvider",
    "OpenAIProvider",
    "AnthropicProvider",
    "GoogleProvider",
    "GrokProvider",
    "MockProvider",
    "create_provider",
    "create_llm_client",
    "PROVIDER_ENV_KEYS",
    "PROVIDER_DEFAULT_MODELS",
    "get_configured_providers",
]
