"""
DeFiLlama Evidence Source

Public, keyless API. Two endpoints are consulted:
- /pools for current ETH staking yields
- /protocol/lido for Lido's Ethereum TVL
"""

from __future__ import annotations

import logging
from typing import Any

from core.schemas import EvidenceItem, MarketQuestion

from ..base import EvidenceSource

logger = logging.getLogger(__name__)

POOLS_URL = "https://yields.llama.fi/pools"
LIDO_URL = "https://api.llama.fi/protocol/lido"

STAKING_PROJECTS = frozenset({"lido", "rocket-pool", "coinbase-wrapped-staked-eth"})
MAX_POOLS = 5


def select_staking_pools(pools: list[dict[str, Any]], limit: int = MAX_POOLS) -> list[dict[str, Any]]:
    """ETH pools run by the major liquid-staking projects, in API order."""
    selected = [
        pool for pool in pools
        if "ETH" in str(pool.get("symbol") or "").upper()
        and pool.get("project") in STAKING_PROJECTS
    ]
    return selected[:limit]


class DefiLlamaSource(EvidenceSource):
    """Staking yields and Lido TVL from DeFiLlama."""

    source_id = "defillama"
    _name = "DefiLlamaSource"

    async def fetch(self, question: MarketQuestion) -> list[EvidenceItem]:
        http = self._require_http()
        items: list[EvidenceItem] = []

        pools_payload = await http.get_json(POOLS_URL)
        pools = select_staking_pools(pools_payload.get("data") or [])
        if pools:
            apys = [float(p.get("apy") or 0.0) for p in pools]
            avg_apy = sum(apys) / len(apys)
            breakdown = ", ".join(f"{p.get('project')}: {apy:.2f}%" for p, apy in zip(pools, apys))
            items.append(self._item(
                "DeFiLlama: ETH Staking Pool Yields (Current)",
                f"Current ETH staking yields from DeFiLlama: average APY across {len(pools)} "
                f"major pools is {avg_apy:.2f}%. Individual pools: {breakdown}.",
                "https://defillama.com/yields?project=lido",
            ))
        else:
            logger.debug("No ETH staking pools in DeFiLlama response")

        lido = await http.get_json(LIDO_URL)
        tvl = (lido.get("currentChainTvls") or {}).get("Ethereum")
        if tvl:
            items.append(self._item(
                "DeFiLlama: Lido Protocol TVL",
                f"Lido (largest ETH staking provider) currently has ${float(tvl) / 1e9:.2f}B "
                "TVL on Ethereum. This represents the largest share of staked ETH.",
                "https://defillama.com/protocol/lido",
            ))

        return items
