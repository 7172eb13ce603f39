"""
Evidence Source Interface

Every evidence source turns a MarketQuestion into zero or more
EvidenceItems. Sources are free to use any transport internally.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Optional, TYPE_CHECKING

from agents.base import AgentCapability, BaseAgent
from core.clock import Clock, RealClock
from core.schemas import EvidenceItem, MarketQuestion

if TYPE_CHECKING:
    from core.http import HttpClient


class EvidenceSource(BaseAgent, ABC):
    """
    Base class for evidence sources.

    Subclasses set source_id and implement fetch(). A source raises on
    transport failure; only the aggregator turns that into an omission.
    """

    source_id: str = "base"
    _capabilities = {AgentCapability.NETWORK}

    def __init__(
        self,
        *,
        http: Optional["HttpClient"] = None,
        clock: Optional[Clock] = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self.http = http
        self.clock = clock or RealClock()

    @property
    def name(self) -> str:
        return self._name_override or self.source_id

    @abstractmethod
    async def fetch(self, question: MarketQuestion) -> list[EvidenceItem]:
        """
        Fetch evidence relevant to the question.

        Raises:
            Exception: Any transport or decoding failure
        """
        ...

    def _require_http(self) -> "HttpClient":
        if self.http is None:
            raise RuntimeError(f"Evidence source {self.source_id} requires an HTTP client")
        return self.http

    def _item(self, title: str, content: str, url: Optional[str] = None) -> EvidenceItem:
        return EvidenceItem(
            source=self.source_id,
            title=title,
            content=content,
            url=url,
            retrieved_at=self.clock.now(),
        )
