"""
Jupiter token registry resolver for Solana.

The strict list (~1,500 curated tokens) is downloaded once and cached in
memory for fast mint lookups. No API key required.
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import httpx

from ..config import settings
from ..core.networks import NetworkId
from .base import MetadataResolver, ResolvedToken


@dataclass
class JupiterToken:
    """Parsed Jupiter token metadata."""

    address: str  # Mint address (Base58)
    symbol: str
    name: str
    decimals: int
    logo_uri: Optional[str] = None
    tags: List[str] = field(default_factory=list)
    coingecko_id: Optional[str] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "JupiterToken":
        """Parse a token from the registry document."""
        extensions = data.get("extensions") or {}
        return cls(
            address=data.get("address") or data.get("mint") or "",
            symbol=data.get("symbol", ""),
            name=data.get("name", ""),
            decimals=data.get("decimals", 9),
            logo_uri=data.get("logoURI"),
            tags=data.get("tags") or [],
            coingecko_id=extensions.get("coingeckoId"),
        )

    def to_resolved(self) -> ResolvedToken:
        return ResolvedToken(
            name=self.name,
            symbol=self.symbol,
            decimals=self.decimals,
            logo_uri=self.logo_uri,
            extra={"tags": self.tags, "coingecko_id": self.coingecko_id},
        )


class JupiterTokenListResolver(MetadataResolver):

    name = "jupiter"

    def __init__(
        self,
        list_url: Optional[str] = None,
        *,
        timeout_s: Optional[float] = None,
        cache_ttl_seconds: Optional[int] = None,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.list_url = list_url or settings.jupiter_token_list_url
        self.timeout_s = timeout_s or settings.enrichment_timeout_seconds
        self._cache_ttl_seconds = (
            cache_ttl_seconds if cache_ttl_seconds is not None else settings.token_list_cache_ttl_seconds
        )
        self._client = client

        self._tokens: Dict[str, JupiterToken] = {}
        self._cache_loaded: bool = False
        self._cache_lock = asyncio.Lock()
        self._last_refresh: float = 0

    def supports(self, network: NetworkId) -> bool:
        # The registry only covers mainnet mints
        return network is NetworkId.SOLANA

    async def _fetch(self) -> Any:
        if self._client is not None:
            resp = await self._client.get(self.list_url, timeout=self.timeout_s)
            resp.raise_for_status()
            return resp.json()
        async with httpx.AsyncClient(timeout=self.timeout_s) as client:
            resp = await client.get(self.list_url)
            resp.raise_for_status()
            return resp.json()

    async def _ensure_cache(self) -> None:
        """Load the token list into memory if not cached or expired."""
        async with self._cache_lock:
            now = time.time()
            if self._cache_loaded and (now - self._last_refresh) < self._cache_ttl_seconds:
                return

            try:
                payload = await self._fetch()
                items = payload.get("tokens", []) if isinstance(payload, dict) else payload

                tokens: Dict[str, JupiterToken] = {}
                for item in items or []:
                    if not isinstance(item, dict):
                        continue
                    token = JupiterToken.from_api(item)
                    if token.address:
                        tokens[token.address] = token

                self._tokens = tokens
                self._cache_loaded = True
                self._last_refresh = now
            except Exception:
                # If the refresh fails but we have stale data, keep using it
                if not self._cache_loaded:
                    raise

    async def get_token_by_mint(self, mint_address: str) -> Optional[JupiterToken]:
        await self._ensure_cache()
        return self._tokens.get(mint_address)

    async def resolve(self, address: str, network: NetworkId) -> Optional[ResolvedToken]:
        token = await self.get_token_by_mint(address)
        return token.to_resolved() if token else None
