"""
Evidence Sources

Registry of the concrete sources and a factory that builds the set named
in configuration.
"""

from __future__ import annotations

from typing import Optional, TYPE_CHECKING

from core.clock import Clock

from ..base import EvidenceSource
from .defillama import DefiLlamaSource
from .mock import MOCK_EVIDENCE, MockEvidenceSource
from .newsapi import NewsApiSource, extract_keywords
from .treasury import TreasurySource

if TYPE_CHECKING:
    from core.config import RuntimeConfig
    from core.http import HttpClient

SOURCE_TYPES: dict[str, type[EvidenceSource]] = {
    "mock": MockEvidenceSource,
    "defillama": DefiLlamaSource,
    "treasury": TreasurySource,
    "newsapi": NewsApiSource,
}


def build_sources(
    config: "RuntimeConfig",
    http: Optional["HttpClient"] = None,
    *,
    clock: Optional[Clock] = None,
) -> list[EvidenceSource]:
    """
    Instantiate the sources a trial should query.

    With pipeline.use_mocks the only source is MockEvidenceSource.

    Raises:
        ValueError: If a configured source name is unknown
    """
    if config.pipeline.use_mocks:
        return [MockEvidenceSource(clock=clock)]

    sources: list[EvidenceSource] = []
    for name in config.evidence.sources:
        source_type = SOURCE_TYPES.get(name)
        if source_type is None:
            raise ValueError(
                f"Unknown evidence source: {name}. Available: {sorted(SOURCE_TYPES)}"
            )
        if source_type is NewsApiSource:
            sources.append(NewsApiSource(api_key=config.evidence.news_api_key, http=http, clock=clock))
        else:
            sources.append(source_type(http=http, clock=clock))
    return sources


__all__ = [
    "SOURCE_TYPES",
    "build_sources",
    "MockEvidenceSource",
    "MOCK_EVIDENCE",
    "DefiLlamaSource",
    "TreasurySource",
    "NewsApiSource",
    "extract_keywords",
]
