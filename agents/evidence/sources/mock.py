"""
Mock Evidence Source

Fixture evidence for the demo question "Did ETH staking yields outperform
US Treasury rates in January 2026?". The items are deliberately balanced
so both advocates have material to argue from.
"""

from __future__ import annotations

from agents.base import AgentCapability
from core.llm.fixtures import (
    COINDESK,
    FED_HOLDS,
    PENALTY_DATA,
    STAKING_APR,
    THE_BLOCK,
    TREASURY_AVG,
    TREASURY_CURVE,
)
from core.schemas import EvidenceItem, MarketQuestion

from ..base import EvidenceSource


# (source, title, content, url)
MOCK_EVIDENCE: tuple[tuple[str, str, str, str], ...] = (
    (
        "defillama",
        STAKING_APR,
        "Ethereum staking yields averaged 4.2% APR across January 2026, aggregated "
        "from Lido (4.1%), Rocket Pool (4.3%), and Coinbase (4.2%). Daily range: "
        "3.7% - 4.6%. Yields dipped below 4.0% during Jan 1-7 due to reduced "
        "network activity.",
        "https://defillama.com/yields?project=ethereum-staking",
    ),
    (
        "treasury",
        TREASURY_AVG,
        "The 10-year Treasury note yield averaged 3.9% in January 2026, ranging "
        "from 3.85% to 3.95%. The 30-day T-Bill rate averaged 4.1%. Treasury "
        "yields remained stable throughout the month with minimal daily variance.",
        "https://api.fiscaldata.treasury.gov",
    ),
    (
        "treasury",
        TREASURY_CURVE,
        "Daily yield curve data shows 10-year rates at: Jan 1-7: 3.88%, Jan 8-14: "
        "3.91%, Jan 15-21: 3.90%, Jan 22-31: 3.92%. The curve remained flat with "
        "no significant inversions during the period.",
        "https://home.treasury.gov/resource-center/data-chart-center",
    ),
    (
        "newsapi",
        COINDESK,
        "Analysis by CoinDesk Research shows ETH staking yields outperformed "
        "10-year Treasuries for 26 of 31 days in January 2026, with an average "
        "spread of 0.3 percentage points. The five days of underperformance "
        "clustered in early January during the New Year holiday period when "
        "validator participation temporarily dropped.",
        "https://coindesk.com/research/eth-staking-yields-jan-2026",
    ),
    (
        "newsapi",
        THE_BLOCK,
        "Institutional staking deposits grew 18% in January 2026 according to The "
        "Block Research. Several major asset managers cited the yield premium over "
        "Treasuries as a key factor. However, analysts note that staking yields "
        "carry smart contract risk and are not directly comparable to risk-free "
        "Treasury rates.",
        "https://theblock.co/research/institutional-eth-staking",
    ),
    (
        "defillama",
        PENALTY_DATA,
        "Validator slashing and inactivity penalties totaled approximately 0.05% "
        "drag on aggregate staking returns in January 2026. This is within normal "
        "historical ranges. MEV rewards contributed an additional 0.15% to total "
        "staking returns above the base consensus yield.",
        "https://defillama.com/yields/ethereum-penalties",
    ),
    (
        "newsapi",
        FED_HOLDS,
        "The Federal Reserve maintained its benchmark interest rate at 4.25% at its "
        "January 2026 meeting, citing stable inflation expectations. Treasury "
        "yields showed minimal reaction, with the 10-year holding steady near 3.9%. "
        "Market expectations for rate cuts later in 2026 remain muted.",
        "https://reuters.com/business/fed-holds-rates-jan-2026",
    ),
)


class MockEvidenceSource(EvidenceSource):
    """Returns the fixture items regardless of the question."""

    source_id = "mock"
    _name = "MockEvidenceSource"
    _capabilities = {AgentCapability.DETERMINISTIC}

    async def fetch(self, question: MarketQuestion) -> list[EvidenceItem]:
        now = self.clock.now()
        return [
            EvidenceItem(source=source, title=title, content=content, url=url, retrieved_at=now)
            for source, title, content, url in MOCK_EVIDENCE
        ]
