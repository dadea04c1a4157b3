"""
Ordered per-network RPC endpoint rosters and the health probe.

EVM networks use the single configured endpoint. Solana mainnet and devnet
put the configured primary first and then a fixed list of public fallbacks,
because public Solana nodes rate-limit aggressively.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, replace
from typing import Dict, List, Optional, Tuple

from ...config import Settings, settings as default_settings
from ...core.errors import RpcError
from ...core.networks import NETWORKS, NetworkId
from .transport import JsonRpcTransport

logger = logging.getLogger(__name__)

HEALTH_METHODS = {
    "evm": "eth_blockNumber",
    "solana": "getHealth",
}


@dataclass
class ProviderEndpoint:
    url: str
    network: NetworkId
    primary: bool = False
    last_known_healthy: Optional[bool] = None
    last_response_time_ms: Optional[int] = None


def _dedupe(urls: List[str]) -> List[str]:
    out: List[str] = []
    for url in urls:
        url = (url or "").strip()
        if url and url not in out:
            out.append(url)
    return out


class ProviderRoster:
    """Static endpoint lists keyed by network.

    Roster order never changes after construction. Health fields are
    advisory only: ``providers`` hands out copies, so concurrent callers
    iterate a stable snapshot while a probe updates the originals.
    """

    def __init__(
        self,
        endpoints: Dict[NetworkId, List[str]],
        transport: Optional[JsonRpcTransport] = None,
        probe_timeout: float = 5.0,
    ) -> None:
        self._endpoints: Dict[NetworkId, List[ProviderEndpoint]] = {}
        for network, urls in endpoints.items():
            self._endpoints[network] = [
                ProviderEndpoint(url=url, network=network, primary=index == 0)
                for index, url in enumerate(_dedupe(urls))
            ]
        self._transport = transport or JsonRpcTransport()
        self._probe_timeout = probe_timeout

    @classmethod
    def from_settings(
        cls,
        config: Optional[Settings] = None,
        transport: Optional[JsonRpcTransport] = None,
    ) -> "ProviderRoster":
        cfg = config or default_settings
        endpoints = {
            NetworkId.BASE: [cfg.base_rpc_url],
            NetworkId.ETHEREUM: [cfg.ethereum_rpc_url],
            NetworkId.BASE_TESTNET: [cfg.base_testnet_rpc_url],
            NetworkId.SOLANA: [cfg.solana_rpc_url, *cfg.solana_fallback_rpc_urls],
            NetworkId.SOLANA_DEVNET: [cfg.solana_devnet_rpc_url, *cfg.solana_devnet_fallback_rpc_urls],
        }
        return cls(endpoints, transport=transport, probe_timeout=min(cfg.rpc_timeout_seconds, 5.0))

    def providers(self, network: NetworkId) -> List[ProviderEndpoint]:
        """Snapshot copy of the ordered roster for ``network``."""
        return [replace(endpoint) for endpoint in self._endpoints.get(network, [])]

    def primary_url(self, network: NetworkId) -> Optional[str]:
        endpoints = self._endpoints.get(network) or []
        return endpoints[0].url if endpoints else None

    async def probe(self, endpoint: ProviderEndpoint) -> Tuple[bool, Optional[int], Optional[str]]:
        """Issue the family's cheapest RPC method and time it.

        Returns ``(healthy, response_time_ms, error)`` and records the outcome
        on the roster's own endpoint entry.
        """
        method = HEALTH_METHODS[NETWORKS[endpoint.network].family.value]
        started = time.perf_counter()
        healthy = False
        elapsed_ms: Optional[int] = None
        error: Optional[str] = None
        try:
            await self._transport.call(endpoint.url, method, [], self._probe_timeout)
            healthy = True
            elapsed_ms = int((time.perf_counter() - started) * 1000)
        except RpcError as exc:
            error = exc.message
            logger.info(f"Health probe failed for {endpoint.url}: {exc.message}")

        self._record(endpoint, healthy, elapsed_ms)
        return healthy, elapsed_ms, error

    def _record(self, endpoint: ProviderEndpoint, healthy: bool, elapsed_ms: Optional[int]) -> None:
        for current in self._endpoints.get(endpoint.network, []):
            if current.url == endpoint.url:
                current.last_known_healthy = healthy
                current.last_response_time_ms = elapsed_ms
                break
