"""
Agent Base Classes

Every stage that leaves the process (evidence sources, advocates, the
judge) is an agent. An agent has a name that prefixes its log lines, a
prompt or adapter version, and a set of capabilities the pipeline can
inspect.
"""

from __future__ import annotations

from abc import ABC
from enum import Enum
from typing import Optional


class AgentCapability(str, Enum):
    """What an agent touches when it runs."""
    LLM = "llm"                      # Calls a reasoning service
    NETWORK = "network"              # Calls an HTTP API
    DETERMINISTIC = "deterministic"  # Output depends only on input


class BaseAgent(ABC):
    """
    Common identity for trial agents.

    Subclasses set _name, _version and _capabilities as class attributes
    and may override the name property to include per-instance detail.
    """

    _name: str = ""
    _version: str = "v1"
    _capabilities: frozenset[AgentCapability] | set[AgentCapability] = frozenset()

    def __init__(self, *, name: Optional[str] = None) -> None:
        self._name_override = name

    @property
    def name(self) -> str:
        return self._name_override or self._name or type(self).__name__

    @property
    def version(self) -> str:
        return self._version

    @property
    def capabilities(self) -> frozenset[AgentCapability]:
        return frozenset(self._capabilities)

    @property
    def uses_network(self) -> bool:
        return AgentCapability.NETWORK in self._capabilities

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, version={self.version})"
