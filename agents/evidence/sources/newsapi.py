"""
NewsAPI Evidence Source

Searches newsapi.org with keywords taken from the question. Requires an
API key; without one the source contributes nothing.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Optional

from core.schemas import EvidenceItem, MarketQuestion

from ..base import EvidenceSource

logger = logging.getLogger(__name__)

SEARCH_URL = "https://newsapi.org/v2/everything"
PAGE_SIZE = 5
MAX_KEYWORDS = 8

STOP_WORDS = frozenset({
    "did", "does", "do", "the", "a", "an", "in", "of", "by", "was", "is",
    "are", "were", "been", "be", "to", "for", "and", "or", "its", "it",
    "has", "have", "had", "that", "this", "with",
})


def extract_keywords(question: str, limit: int = MAX_KEYWORDS) -> str:
    """
    Reduce a question to a short search query.

    Example:
        >>> extract_keywords("Did ETH staking yields outperform US Treasury rates in January 2026?")
        'ETH staking yields outperform US Treasury rates January'
    """
    words = re.sub(r"[?.,!]", "", question).split()
    kept = [w for w in words if w.lower() not in STOP_WORDS]
    return " ".join(kept[:limit])


class NewsApiSource(EvidenceSource):
    source_id = "newsapi"
    _name = "NewsApiSource"

    def __init__(self, *, api_key: Optional[str] = None, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.api_key = api_key or ""

    async def fetch(self, question: MarketQuestion) -> list[EvidenceItem]:
        if not self.api_key:
            logger.warning("[newsapi] NEWS_API_KEY not set, skipping news evidence")
            return []

        params = {
            "q": extract_keywords(question.question),
            "sortBy": "relevancy",
            "pageSize": str(PAGE_SIZE),
            "language": "en",
            "apiKey": self.api_key,
        }
        payload = await self._require_http().get_json(SEARCH_URL, params=params)

        items = []
        for article in payload.get("articles") or []:
            title = article.get("title")
            if not title:
                continue
            outlet = (article.get("source") or {}).get("name") or "News"
            content = (
                article.get("description")
                or (article.get("content") or "")[:500]
                or "No content available"
            )
            items.append(self._item(f"{outlet}: {title}", content, article.get("url")))
        return items
