"""
Runtime Configuration

Central configuration for trial execution, role-to-provider selection,
evidence sources, and the settlement ledger.
"""

from __future__ import annotations

import copy
import os
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv

from core.llm.providers import PROVIDER_DEFAULT_MODELS, PROVIDER_ENV_KEYS

load_dotenv()


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class LLMConfig:
    """Configuration for LLM provider."""
    provider: str = "anthropic"
    model: str = ""
    api_key: Optional[str] = None
    base_url: Optional[str] = None

    def __post_init__(self):
        if not self.model:
            self.model = PROVIDER_DEFAULT_MODELS.get(self.provider, "")
        # Load API key from environment if not provided
        if self.api_key is None:
            env_var = PROVIDER_ENV_KEYS.get(self.provider, f"{self.provider.upper()}_API_KEY")
            self.api_key = os.getenv(env_var)

    @property
    def identity(self) -> tuple[str, str]:
        return (self.provider, self.model)


@dataclass
class RolesConfig:
    """
    Provider per trial role.

    The two advocates default to different providers; the judge defaults to
    a different model from the YES advocate's provider.
    """
    advocate_yes: LLMConfig = field(
        default_factory=lambda: LLMConfig(provider="anthropic", model="claude-sonnet-4-20250514")
    )
    advocate_no: LLMConfig = field(
        default_factory=lambda: LLMConfig(provider="openai", model="gpt-4o")
    )
    judge: LLMConfig = field(
        default_factory=lambda: LLMConfig(provider="anthropic", model="claude-opus-4-20250514")
    )


@dataclass
class PipelineConfig:
    """Configuration for trial execution."""
    llm_timeout_s: float = 120.0
    evidence_timeout_s: float = 30.0
    advocate_max_tokens: int = 4096
    advocate_temperature: float = 0.3
    judge_max_tokens: int = 4096
    judge_temperature: float = 0.2
    use_mocks: bool = False
    mock_scenario: str = "clear"
    enforce_provider_diversity: bool = True


@dataclass
class EvidenceConfig:
    """Which evidence sources a live trial fans out to."""
    sources: list[str] = field(default_factory=lambda: ["defillama", "treasury", "newsapi"])
    news_api_key: Optional[str] = None

    def __post_init__(self):
        if self.news_api_key is None:
            self.news_api_key = os.getenv("NEWS_API_KEY")


@dataclass
class LedgerConfig:
    """Settlement ledger settings."""
    authority: str = "settlement-authority"
    min_creation_deposit: int = 0
    snapshot_path: Optional[str] = None


@dataclass
class RuntimeConfig:
    """
    Complete runtime configuration for trials and settlement.

    Can be loaded from:
    - Environment variables
    - YAML file
    - Programmatic construction
    """
    llm: LLMConfig = field(default_factory=LLMConfig)
    roles: RolesConfig = field(default_factory=RolesConfig)
    pipeline: PipelineConfig = field(default_factory=PipelineConfig)
    evidence: EvidenceConfig = field(default_factory=EvidenceConfig)
    ledger: LedgerConfig = field(default_factory=LedgerConfig)
    transcripts_dir: Optional[str] = None
    log_level: str = "INFO"
    extra: dict[str, Any] = field(default_factory=dict)

    @staticmethod
    def _get_env_overrides() -> dict[str, Any]:
        """
        Get configuration overrides from environment variables.

        This is the SINGLE source of truth for all env var reading.

        Supported variables:
        - TRIAL_LLM_PROVIDER / TRIAL_LLM_MODEL / TRIAL_LLM_API_KEY: default LLM
        - TRIAL_USE_MOCKS: run with mock evidence and mock providers (true/false)
        - TRIAL_MOCK_SCENARIO: clear | close | decisive
        - TRIAL_LLM_TIMEOUT: per-call timeout in seconds
        - TRIAL_AUTHORITY: settlement authority principal
        - TRIAL_TRANSCRIPTS_DIR: directory for archived transcripts
        - TRIAL_LOG_LEVEL: logging level
        - NEWS_API_KEY: NewsAPI key
        """
        overrides: dict[str, Any] = {}

        # LLM settings
        if os.getenv("TRIAL_LLM_PROVIDER"):
            overrides.setdefault("llm", {})["provider"] = os.getenv("TRIAL_LLM_PROVIDER")
        if os.getenv("TRIAL_LLM_MODEL"):
            overrides.setdefault("llm", {})["model"] = os.getenv("TRIAL_LLM_MODEL")
        if os.getenv("TRIAL_LLM_API_KEY"):
            overrides.setdefault("llm", {})["api_key"] = os.getenv("TRIAL_LLM_API_KEY")

        # Pipeline settings
        if os.getenv("TRIAL_USE_MOCKS"):
            overrides.setdefault("pipeline", {})["use_mocks"] = _env_bool("TRIAL_USE_MOCKS")
        if os.getenv("TRIAL_MOCK_SCENARIO"):
            overrides.setdefault("pipeline", {})["mock_scenario"] = os.getenv("TRIAL_MOCK_SCENARIO")
        if os.getenv("TRIAL_LLM_TIMEOUT"):
            overrides.setdefault("pipeline", {})["llm_timeout_s"] = float(os.environ["TRIAL_LLM_TIMEOUT"])

        # Evidence
        if os.getenv("NEWS_API_KEY"):
            overrides.setdefault("evidence", {})["news_api_key"] = os.getenv("NEWS_API_KEY")

        # Ledger
        if os.getenv("TRIAL_AUTHORITY"):
            overrides.setdefault("ledger", {})["authority"] = os.getenv("TRIAL_AUTHORITY")

        if os.getenv("TRIAL_TRANSCRIPTS_DIR"):
            overrides["transcripts_dir"] = os.getenv("TRIAL_TRANSCRIPTS_DIR")
        if os.getenv("TRIAL_LOG_LEVEL"):
            overrides["log_level"] = os.getenv("TRIAL_LOG_LEVEL", "INFO").upper()

        return overrides

    @classmethod
    def from_env(cls) -> "RuntimeConfig":
        """
        Load configuration purely from environment variables.

        Uses defaults for any values not specified in env vars.
        """
        return cls.from_dict(cls._get_env_overrides())

    @classmethod
    def from_yaml(cls, path: str | Path) -> "RuntimeConfig":
        """Load configuration from a YAML file."""
        import yaml
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            data = yaml.safe_load(f) or {}

        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RuntimeConfig":
        """Load configuration from a dictionary (supports partial data)."""
        llm_data = data.get("llm") or {}
        roles_data = data.get("roles") or {}
        pipeline_data = data.get("pipeline") or {}
        evidence_data = data.get("evidence") or {}
        ledger_data = data.get("ledger") or {}

        roles = RolesConfig()
        if llm_data and not roles_data:
            # a bare llm section puts every role on that provider
            roles = RolesConfig(
                advocate_yes=LLMConfig(**llm_data),
                advocate_no=LLMConfig(**llm_data),
                judge=LLMConfig(**llm_data),
            )
        for role_key, role_conf in roles_data.items():
            if hasattr(roles, role_key) and isinstance(role_conf, dict):
                setattr(roles, role_key, LLMConfig(**role_conf))

        return cls(
            llm=LLMConfig(**llm_data),
            roles=roles,
            pipeline=PipelineConfig(**pipeline_data),
            evidence=EvidenceConfig(**evidence_data),
            ledger=LedgerConfig(**ledger_data),
            transcripts_dir=data.get("transcripts_dir"),
            log_level=str(data.get("log_level", "INFO")).upper(),
            extra=data.get("extra", {}),
        )

    def with_env_overrides(self) -> "RuntimeConfig":
        """
        Return a new config with environment variable overrides applied.

        This allows loading from a config file first, then overlaying env vars.
        """
        overrides = self._get_env_overrides()
        if not overrides:
            return self

        new_config = copy.deepcopy(self)
        for section in ("llm", "pipeline", "evidence", "ledger"):
            for key, value in overrides.get(section, {}).items():
                setattr(getattr(new_config, section), key, value)
        llm_overrides = overrides.get("llm", {})
        if llm_overrides:
            if "provider" in llm_overrides and "model" not in llm_overrides:
                new_config.llm.model = PROVIDER_DEFAULT_MODELS.get(new_config.llm.provider, "")
            for attr in ("advocate_yes", "advocate_no", "judge"):
                setattr(new_config.roles, attr, copy.deepcopy(new_config.llm))

        if "transcripts_dir" in overrides:
            new_config.transcripts_dir = overrides["transcripts_dir"]
        if "log_level" in overrides:
            new_config.log_level = overrides["log_level"]

        return new_config

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to a dictionary. API keys are left out."""

        def _llm(conf: LLMConfig) -> dict[str, Any]:
            return {"provider": conf.provider, "model": conf.model, "base_url": conf.base_url}

        return {
            "llm": _llm(self.llm),
            "roles": {
                "advocate_yes": _llm(self.roles.advocate_yes),
                "advocate_no": _llm(self.roles.advocate_no),
                "judge": _llm(self.roles.judge),
            },
            "pipeline": asdict(self.pipeline),
            "evidence": {"sources": list(self.evidence.sources)},
            "ledger": asdict(self.ledger),
            "transcripts_dir": self.transcripts_dir,
            "log_level": self.log_level,
            "extra": self.extra,
        }


# Global default configuration
_default_config: Optional[RuntimeConfig] = None


def get_default_config() -> RuntimeConfig:
    """Get the default runtime configuration."""
    global _default_config
    if _default_config is None:
        _default_config = RuntimeConfig.from_env()
    return _default_config


def set_default_config(config: RuntimeConfig) -> None:
    """Set the default runtime configuration."""
    global _default_config
    _default_config = config
