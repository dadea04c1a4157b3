"""
Token List Cross-Referencing

Checks validated tokens against the published token lists for their
network (Base token list, CoinGecko's Uniswap list, Jupiter strict list).
A match marks the metadata as verified and attaches the list's record.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Dict, List, Optional, Tuple

import httpx

from ..config import Settings, settings as default_settings
from ..core.networks import NETWORKS, NetworkId, parse_network
from ..types.models import TokenListCheck, TokenListMatch, TokenMetadata

logger = logging.getLogger(__name__)


def _default_list_name(url: str) -> str:
    return url.rstrip("/").rsplit("/", 1)[-1] or url


def _token_address(token: Dict[str, Any]) -> str:
    return str(token.get("address") or token.get("mint") or "")


class TokenListCrossReferencer:

    def __init__(
        self,
        *,
        timeout_s: float = 5.0,
        cache_ttl_seconds: int = 3600,
        failure_backoff_seconds: float = 60.0,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.timeout_s = timeout_s
        self.cache_ttl_seconds = cache_ttl_seconds
        self.failure_backoff_seconds = failure_backoff_seconds
        self._client = client
        # url -> (fetched_at, list name, tokens)
        self._cache: Dict[str, Tuple[float, str, List[Dict[str, Any]]]] = {}
        # url -> (failed_at, error)
        self._failures: Dict[str, Tuple[float, Exception]] = {}
        self._locks: Dict[str, asyncio.Lock] = {}

    @classmethod
    def from_settings(
        cls,
        config: Optional[Settings] = None,
        client: Optional[httpx.AsyncClient] = None,
    ) -> "TokenListCrossReferencer":
        cfg = config or default_settings
        return cls(
            timeout_s=cfg.token_list_timeout_seconds,
            cache_ttl_seconds=cfg.token_list_cache_ttl_seconds,
            failure_backoff_seconds=cfg.token_list_failure_backoff_seconds,
            client=client,
        )

    async def _download(self, url: str) -> Any:
        if self._client is not None:
            resp = await self._client.get(url, timeout=self.timeout_s)
        else:
            async with httpx.AsyncClient(timeout=self.timeout_s, follow_redirects=True) as client:
                resp = await client.get(url)
        resp.raise_for_status()
        return resp.json()

    def _cached(self, url: str) -> Optional[Tuple[str, List[Dict[str, Any]]]]:
        cached = self._cache.get(url)
        if cached and (time.time() - cached[0]) < self.cache_ttl_seconds:
            return cached[1], cached[2]
        return None

    def _recent_failure(self, url: str) -> Optional[Exception]:
        failure = self._failures.get(url)
        if failure and (time.time() - failure[0]) < self.failure_backoff_seconds:
            return failure[1]
        return None

    async def fetch_list(self, url: str) -> Tuple[str, List[Dict[str, Any]]]:
        """Return ``(list name, tokens)`` for ``url``, cached for the TTL.

        Concurrent callers for the same URL share one download. A failed
        download is re-raised without a new request until the back-off
        expires.
        """
        cached = self._cached(url)
        if cached is not None:
            return cached

        lock = self._locks.setdefault(url, asyncio.Lock())
        async with lock:
            cached = self._cached(url)
            if cached is not None:
                return cached
            failure = self._recent_failure(url)
            if failure is not None:
                raise failure

            try:
                document = await self._download(url)
            except Exception as e:
                self._failures[url] = (time.time(), e)
                raise
            self._failures.pop(url, None)

            if isinstance(document, dict):
                name = str(document.get("name") or _default_list_name(url))
                tokens = document.get("tokens") or []
            else:
                name = _default_list_name(url)
                tokens = document or []
            tokens = [t for t in tokens if isinstance(t, dict)]

            self._cache[url] = (time.time(), name, tokens)
            logger.debug(f"Loaded token list {name} ({len(tokens)} tokens) from {url}")
            return name, tokens

    async def find(self, address: str, network: NetworkId) -> Optional[TokenListMatch]:
        spec = NETWORKS[network]
        wanted = address.lower() if spec.is_evm else address

        for url in spec.token_list_urls:
            try:
                name, tokens = await self.fetch_list(url)
            except Exception as e:
                logger.warning(f"Skipping token list {url}: {e}")
                continue

            for token in tokens:
                candidate = _token_address(token)
                if (candidate.lower() if spec.is_evm else candidate) == wanted:
                    return TokenListMatch(list_name=name, list_url=url, token_info=token)
        return None

    async def check(self, address: str, network: NetworkId | str) -> TokenListCheck:
        match = await self.find(address, parse_network(network))
        if match is None:
            return TokenListCheck(is_in_list=False)
        return TokenListCheck(is_in_list=True, list_name=match.list_name, token_info=match.token_info)

    async def apply(self, metadata: TokenMetadata) -> TokenMetadata:
        """Copy of ``metadata`` marked verified when a list contains the token."""
        match = await self.find(metadata.address, metadata.network)
        if match is None:
            return metadata
        return metadata.model_copy(update={"is_verified": True, "token_list": match})
