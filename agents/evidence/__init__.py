"""
Evidence Aggregation

Concurrent, failure-tolerant evidence gathering over pluggable sources.
"""

from .aggregator import gather_evidence
from .base import EvidenceSource
from .sources import (
    SOURCE_TYPES,
    DefiLlamaSource,
    MockEvidenceSource,
    NewsApiSource,
    TreasurySource,
    build_sources,
)

__all__ = [
    "EvidenceSource",
    "gather_evidence",
    "build_sources",
    "SOURCE_TYPES",
    "MockEvidenceSource",
    "DefiLlamaSource",
    "TreasurySource",
    "NewsApiSource",
]
