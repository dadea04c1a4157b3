from typing import Any, Dict, Optional

import httpx

from ..config import settings
from ..core.networks import NETWORKS, NetworkId
from .base import MetadataResolver, ResolvedToken


class CoinGeckoResolver(MetadataResolver):
    """Coingecko contract lookup for token metadata"""

    name = "coingecko"

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        *,
        timeout_s: Optional[float] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.api_key = api_key if api_key is not None else settings.coingecko_api_key
        self.base_url = (base_url or settings.coingecko_base_url).rstrip("/")
        self.timeout_s = timeout_s or settings.enrichment_timeout_seconds
        self._client = client

    def _build_headers(self) -> Dict[str, str]:
        headers: Dict[str, str] = {"accept": "application/json"}
        if self.api_key:
            headers["X-CG-Demo-API-Key"] = self.api_key
        return headers

    def supports(self, network: NetworkId) -> bool:
        return NETWORKS[network].coingecko_platform is not None

    async def _get(self, url: str) -> httpx.Response:
        if self._client is not None:
            return await self._client.get(url, headers=self._build_headers(), timeout=self.timeout_s)
        async with httpx.AsyncClient(timeout=self.timeout_s) as client:
            return await client.get(url, headers=self._build_headers())

    async def get_token_info(self, address: str, platform: str) -> Dict[str, Any]:
        """Get token metadata from Coingecko"""
        response = await self._get(f"{self.base_url}/coins/{platform}/contract/{address}")

        if response.status_code == 404:
            return {}  # Token not found

        response.raise_for_status()
        data = response.json()

        decimals = (data.get("detail_platforms") or {}).get(platform, {}).get("decimal_place")
        return {
            "id": data.get("id"),
            "symbol": (data.get("symbol") or "").upper(),
            "name": data.get("name") or "",
            "decimals": decimals,
            "image": (data.get("image") or {}).get("small"),
        }

    async def resolve(self, address: str, network: NetworkId) -> Optional[ResolvedToken]:
        platform = NETWORKS[network].coingecko_platform
        info = await self.get_token_info(address, platform)
        if not info.get("name") or not info.get("symbol"):
            return None
        return ResolvedToken(
            name=info["name"],
            symbol=info["symbol"],
            decimals=info["decimals"],
            logo_uri=info.get("image"),
            extra={"coingecko_id": info.get("id")},
        )
