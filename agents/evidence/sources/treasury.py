"""
US Treasury Evidence Source

Average interest rates on Treasury securities from the Fiscal Data API
(public, keyless). Provides the risk-free baseline for yield questions.
"""

from __future__ import annotations

from typing import Any

from core.schemas import EvidenceItem, MarketQuestion

from ..base import EvidenceSource

RATES_URL = (
    "https://api.fiscaldata.treasury.gov/services/api/fiscal_service/"
    "v2/accounting/od/avg_interest_rates"
)
RATES_PARAMS = {
    "sort": "-record_date",
    "page[size]": "10",
    "fields": "record_date,security_desc,avg_interest_rate_amt",
}
SECURITY_KINDS = ("Treasury Note", "Treasury Bond", "Treasury Bill")


def summarize_rates(records: list[dict[str, Any]]) -> str:
    """One "desc: rate% (as of date)" clause per note/bond/bill record."""
    return "; ".join(
        f"{r['security_desc']}: {r.get('avg_interest_rate_amt')}% (as of {r.get('record_date')})"
        for r in records
        if any(kind in str(r.get("security_desc") or "") for kind in SECURITY_KINDS)
    )


class TreasurySource(EvidenceSource):
    source_id = "treasury"
    _name = "TreasurySource"

    async def fetch(self, question: MarketQuestion) -> list[EvidenceItem]:
        payload = await self._require_http().get_json(RATES_URL, params=RATES_PARAMS)
        summary = summarize_rates(payload.get("data") or [])
        if not summary:
            return []
        return [self._item(
            "US Treasury: Average Interest Rates (Recent)",
            f"Recent average interest rates on US Treasury securities: {summary}",
            "https://fiscaldata.treasury.gov/datasets/average-interest-rates-treasury-securities",
        )]
