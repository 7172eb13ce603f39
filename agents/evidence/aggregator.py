"""
Evidence Aggregator

Fans out to every configured source concurrently and merges what comes
back into one EvidenceBundle. A failing or slow source is logged and its
items are left out; the stage itself never fails because of a source.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional, Sequence

from core.clock import Clock, RealClock
from core.schemas import EvidenceBundle, EvidenceItem, MarketQuestion

from .base import EvidenceSource

logger = logging.getLogger(__name__)


async def _fetch_one(
    source: EvidenceSource,
    question: MarketQuestion,
    timeout_s: Optional[float],
) -> list[EvidenceItem]:
    pending = source.fetch(question)
    if timeout_s is None:
        return await pending
    return await asyncio.wait_for(pending, timeout=timeout_s)


async def gather_evidence(
    question: MarketQuestion,
    sources: Sequence[EvidenceSource],
    *,
    timeout_s: Optional[float] = 30.0,
    clock: Optional[Clock] = None,
) -> EvidenceBundle:
    """
    Collect evidence from all sources concurrently.

    Items keep source order, then each source's own order. No retries.

    Args:
        question: The market question
        sources: Sources to query; may be empty
        timeout_s: Per-source timeout; None disables it
        clock: Time source for gathered_at

    Returns:
        EvidenceBundle, possibly empty
    """
    clock = clock or RealClock()
    results = await asyncio.gather(
        *(_fetch_one(source, question, timeout_s) for source in sources),
        return_exceptions=True,
    )

    items: list[EvidenceItem] = []
    for source, result in zip(sources, results):
        if isinstance(result, asyncio.TimeoutError):
            logger.warning("[%s] Evidence source timed out after %ss", source.name, timeout_s)
        elif isinstance(result, asyncio.CancelledError):
            raise result
        elif isinstance(result, BaseException):
            logger.warning("[%s] Evidence source failed: %s", source.name, result)
        else:
            logger.debug("[%s] Returned %d item(s)", source.name, len(result))
            items.extend(result)

    bundle = EvidenceBundle(
        question_id=question.id,
        items=items,
        gathered_at=clock.now(),
    )
    logger.info(
        "Gathered %d evidence item(s) from %d source(s) for %s",
        len(bundle), len(sources), question.id,
    )
    return bundle
