"""
Agent Context

Provides dependency injection for agents, containing:
- One LLM client per trial role
- HTTP client
- Configuration
- Clock (can be frozen for determinism)
- Logger

Agents receive context rather than creating their own clients,
enabling testability and a single place to choose providers per role.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional, TYPE_CHECKING

from core.clock import Clock, FrozenClock, RealClock
from core.llm import LLMClient, LLMRole

if TYPE_CHECKING:
    from core.config import RuntimeConfig
    from core.config.runtime import LLMConfig
    from core.http import HttpClient


def _client_from_config(llm_config: "LLMConfig", *, timeout_s: float) -> LLMClient:
    from core.llm import create_provider

    provider = create_provider(
        llm_config.provider,
        model=llm_config.model,
        api_key=llm_config.api_key,
        base_url=llm_config.base_url,
    )
    return LLMClient(provider, timeout_s=timeout_s)


@dataclass
class AgentContext:
    """
    Context object passed to agents during a trial.
    """

    # Reasoning-service client per role
    clients: dict[LLMRole, LLMClient] = field(default_factory=dict)

    # Network client for evidence sources
    http: Optional["HttpClient"] = None

    # Configuration
    config: Optional["RuntimeConfig"] = None

    # Time source
    clock: Clock = field(default_factory=RealClock)

    # Logging
    logger: logging.Logger = field(
        default_factory=lambda: logging.getLogger("trialbyfire.agents")
    )

    # Execution context
    run_id: Optional[str] = None
    market_id: Optional[int] = None

    # Extra data for agent-specific needs
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def create(
        cls,
        config: "RuntimeConfig",
        *,
        run_id: Optional[str] = None,
        market_id: Optional[int] = None,
    ) -> "AgentContext":
        """
        Create a fully configured context.

        With pipeline.use_mocks every role gets a MockProvider playing the
        configured scenario; otherwise each role gets the provider named in
        config.roles.
        """
        from core.http import HttpClient

        timeout_s = config.pipeline.llm_timeout_s
        if config.pipeline.use_mocks:
            clients = _mock_clients(config.pipeline.mock_scenario, timeout_s=timeout_s)
        else:
            clients = {
                LLMRole.ADVOCATE_YES: _client_from_config(config.roles.advocate_yes, timeout_s=timeout_s),
                LLMRole.ADVOCATE_NO: _client_from_config(config.roles.advocate_no, timeout_s=timeout_s),
                LLMRole.JUDGE: _client_from_config(config.roles.judge, timeout_s=timeout_s),
            }

        http = HttpClient(
            timeout=config.pipeline.evidence_timeout_s,
            default_headers={"Accept": "application/json", "User-Agent": "trialbyfire/0.1"},
        )

        return cls(
            clients=clients,
            http=http,
            config=config,
            clock=RealClock(),
            run_id=run_id,
            market_id=market_id,
        )

    @classmethod
    def create_mock(
        cls,
        *,
        scenario: str = "clear",
        responses: Optional[dict[LLMRole, str]] = None,
        clock: Optional[Clock] = None,
        timeout_s: Optional[float] = 5.0,
    ) -> "AgentContext":
        """
        Create a mock context for testing.

        Args:
            scenario: Fixture scenario for roles not in responses
            responses: Explicit content per role
        """
        return cls(
            clients=_mock_clients(scenario, responses=responses, timeout_s=timeout_s),
            clock=clock or FrozenClock(),
        )

    def client_for(self, role: LLMRole) -> LLMClient:
        """
        Raises:
            KeyError: If no client is configured for the role
        """
        try:
            return self.clients[role]
        except KeyError:
            raise KeyError(f"No LLM client configured for role {role.value}") from None

    def now(self) -> datetime:
        """Get current time from clock."""
        return self.clock.now()

    def log(self, level: int, msg: str, *args: Any, **kwargs: Any) -> None:
        """Log a message."""
        self.logger.log(level, msg, *args, **kwargs)

    def debug(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self.logger.debug(msg, *args, **kwargs)

    def info(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self.logger.info(msg, *args, **kwargs)

    def warning(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self.logger.warning(msg, *args, **kwargs)

    def error(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self.logger.error(msg, *args, **kwargs)


def _mock_clients(
    scenario: str,
    *,
    responses: Optional[dict[LLMRole, str]] = None,
    timeout_s: Optional[float] = None,
) -> dict[LLMRole, LLMClient]:
    from core.llm import MockProvider

    # distinct model tags so the mock trio passes the independence check
    models = {
        LLMRole.ADVOCATE_YES: "mock-advocate-yes",
        LLMRole.ADVOCATE_NO: "mock-advocate-no",
        LLMRole.JUDGE: "mock-judge",
    }
    return {
        role: LLMClient(
            MockProvider(model=model, scenario=scenario, responses=responses),
            timeout_s=timeout_s,
        )
        for role, model in models.items()
    }
