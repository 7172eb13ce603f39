"""
Runtime Configuration Module

Provides configuration loading and management for trials and settlement.
"""

from .runtime import (
    EvidenceConfig,
    LedgerConfig,
    LLMConfig,
    PipelineConfig,
    RolesConfig,
    RuntimeConfig,
    get_default_config,
    set_default_config,
)

__all__ = [
    "EvidenceConfig",
    "LedgerConfig",
    "LLMConfig",
    "PipelineConfig",
    "RolesConfig",
    "RuntimeConfig",
    "get_default_config",
    "set_default_config",
]
