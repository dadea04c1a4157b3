"""DexScreener pairs lookup. Reports name and symbol of the pair's base token; no decimals."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import httpx

from ..config import settings
from ..core.networks import NETWORKS, NetworkId
from .base import MetadataResolver, ResolvedToken


def _liquidity_usd(pair: Dict[str, Any]) -> float:
    try:
        return float((pair.get("liquidity") or {}).get("usd") or 0)
    except (TypeError, ValueError):
        return 0.0


class DexScreenerResolver(MetadataResolver):

    name = "dexscreener"

    def __init__(
        self,
        base_url: Optional[str] = None,
        *,
        timeout_s: Optional[float] = None,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.base_url = (base_url or settings.dexscreener_base_url).rstrip("/")
        self.timeout_s = timeout_s or settings.enrichment_timeout_seconds
        self._client = client

    def supports(self, network: NetworkId) -> bool:
        return NETWORKS[network].dexscreener_chain is not None

    async def _get_pairs(self, address: str) -> List[Dict[str, Any]]:
        url = f"{self.base_url}/latest/dex/tokens/{address}"
        if self._client is not None:
            resp = await self._client.get(url, timeout=self.timeout_s)
        else:
            async with httpx.AsyncClient(timeout=self.timeout_s) as client:
                resp = await client.get(url)
        resp.raise_for_status()
        data = resp.json()
        pairs = data.get("pairs") if isinstance(data, dict) else None
        if isinstance(pairs, dict):
            pairs = [pairs]
        return [p for p in (pairs or []) if isinstance(p, dict)]

    async def resolve(self, address: str, network: NetworkId) -> Optional[ResolvedToken]:
        spec = NETWORKS[network]
        is_evm = spec.is_evm
        wanted = address.lower() if is_evm else address

        matches = []
        for pair in await self._get_pairs(address):
            if pair.get("chainId") != spec.dexscreener_chain:
                continue
            base = pair.get("baseToken") or {}
            base_address = str(base.get("address") or "")
            if (base_address.lower() if is_evm else base_address) != wanted:
                continue
            if base.get("name") and base.get("symbol"):
                matches.append(pair)

        if not matches:
            return None

        # Most liquid pair wins
        best = max(matches, key=_liquidity_usd)
        base = best["baseToken"]
        info = best.get("info") or {}
        return ResolvedToken(
            name=base["name"],
            symbol=base["symbol"],
            logo_uri=info.get("imageUrl"),
            extra={"pair_address": best.get("pairAddress"), "dex_id": best.get("dexId")},
        )
