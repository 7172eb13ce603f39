"""
LLM Decoding Controls

Per-role decoding settings. Advocates get a little latitude; the judge
runs cooler for more repeatable scoring.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class DecodingPolicy:
    """
    Decoding settings for one reasoning-service call.

    json_mode=True asks the provider for a JSON object when it supports it.
    """
    temperature: float = 0.0
    top_p: float = 1.0
    seed: Optional[int] = None
    max_tokens: int = 4096
    json_mode: bool = True
    stop_sequences: tuple[str, ...] = field(default_factory=tuple)

    def with_temperature(self, temp: float) -> "DecodingPolicy":
        """Return a new policy with modified temperature."""
        return replace(self, temperature=temp)

    def with_max_tokens(self, tokens: int) -> "DecodingPolicy":
        """Return a new policy with modified max_tokens."""
        return replace(self, max_tokens=tokens)


def policy_to_provider_args(policy: DecodingPolicy, provider: str = "openai") -> Dict[str, Any]:
    """
    Convert DecodingPolicy to provider-specific API arguments.

    Args:
        policy: The decoding policy
        provider: Provider name (openai, grok, anthropic, google)

    Returns:
        Dict of API arguments
    """
    if provider == "anthropic":
        args: Dict[str, Any] = {
            "temperature": policy.temperature,
            "max_tokens": policy.max_tokens,
        }
        if policy.stop_sequences:
            args["stop_sequences"] = list(policy.stop_sequences)
        return args

    if provider == "google":
        args = {
            "temperature": policy.temperature,
            "max_output_tokens": policy.max_tokens,
            "top_p": policy.top_p,
        }
        if policy.json_mode:
            args["response_mime_type"] = "application/json"
        return args

    # OpenAI-style args (openai, grok, compatible endpoints)
    args = {
        "temperature": policy.temperature,
        "max_tokens": policy.max_tokens,
        "top_p": policy.top_p,
    }
    if policy.seed is not None:
        args["seed"] = policy.seed
    if policy.stop_sequences:
        args["stop"] = list(policy.stop_sequences)
    if policy.json_mode:
        args["response_format"] = {"type": "json_object"}
    return args


# Preset policies for the two call kinds in a trial
ADVOCATE_POLICY = DecodingPolicy(temperature=0.3, max_tokens=4096)

JUDGE_POLICY = DecodingPolicy(temperature=0.2, max_tokens=4096)
