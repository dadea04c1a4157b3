"""
Metadata Enrichment Chain

Off-chain fallback used when on-chain reads are impossible (every RPC
provider down) and to name SPL mints, which carry no name or symbol
on-chain. Resolvers are tried in order; the first usable answer wins.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

import httpx

from ..config import Settings, settings as default_settings
from ..core.networks import NETWORKS, NetworkId
from ..providers import (
    CoinGeckoResolver,
    DexScreenerResolver,
    JupiterTokenListResolver,
    MetadataResolver,
    ResolvedToken,
)
from ..types.models import TokenMetadata, TokenStandard, enrichment_source
from .abi import MAX_STRING_LENGTH

logger = logging.getLogger(__name__)

OFF_CHAIN_WARNING = "On-chain verification could not be completed; metadata is from {provider}"
NAMES_WARNING = "Name and symbol are from {provider}"


@dataclass
class EnrichmentReport:
    """Outcome of one pass over the chain."""

    token: Optional[ResolvedToken] = None
    resolver: Optional[str] = None
    attempted: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)

    @property
    def found(self) -> bool:
        return self.token is not None

    @property
    def all_answered(self) -> bool:
        """At least one resolver ran and none of them errored."""
        return bool(self.attempted) and not self.failed


def _usable(token: Optional[ResolvedToken], require_decimals: bool) -> bool:
    if token is None or not token.name or not token.symbol:
        return False
    if len(token.name) > MAX_STRING_LENGTH or len(token.symbol) > MAX_STRING_LENGTH:
        return False
    if not require_decimals:
        return True
    return token.decimals is not None and 0 <= token.decimals <= 18


class MetadataEnrichmentChain:

    def __init__(self, resolvers: Sequence[MetadataResolver]) -> None:
        self.resolvers: List[MetadataResolver] = list(resolvers)

    @classmethod
    def from_settings(
        cls,
        config: Optional[Settings] = None,
        client: Optional[httpx.AsyncClient] = None,
    ) -> "MetadataEnrichmentChain":
        cfg = config or default_settings
        timeout = cfg.enrichment_timeout_seconds
        resolvers: List[MetadataResolver] = []
        if cfg.enable_jupiter:
            resolvers.append(
                JupiterTokenListResolver(
                    cfg.jupiter_token_list_url,
                    timeout_s=timeout,
                    cache_ttl_seconds=cfg.token_list_cache_ttl_seconds,
                    client=client,
                )
            )
        if cfg.enable_dexscreener:
            resolvers.append(DexScreenerResolver(cfg.dexscreener_base_url, timeout_s=timeout, client=client))
        if cfg.enable_coingecko:
            resolvers.append(
                CoinGeckoResolver(cfg.coingecko_api_key, cfg.coingecko_base_url, timeout_s=timeout, client=client)
            )
        return cls(resolvers)

    def supported(self, network: NetworkId) -> List[MetadataResolver]:
        return [r for r in self.resolvers if r.supports(network)]

    async def resolve_with_report(
        self,
        address: str,
        network: NetworkId,
        *,
        require_decimals: bool = True,
    ) -> EnrichmentReport:
        report = EnrichmentReport()
        for resolver in self.supported(network):
            report.attempted.append(resolver.name)
            try:
                token = await asyncio.wait_for(resolver.resolve(address, network), timeout=resolver.timeout_s)
            except asyncio.TimeoutError:
                report.failed.append(resolver.name)
                logger.warning(f"Enrichment resolver {resolver.name} timed out after {resolver.timeout_s}s for {address}")
                continue
            except Exception as e:
                report.failed.append(resolver.name)
                logger.warning(f"Enrichment resolver {resolver.name} failed for {address}: {e}")
                continue

            if _usable(token, require_decimals):
                report.token = token
                report.resolver = resolver.name
                logger.info(f"Resolved {address} on {network.value} via {resolver.name}")
                break
        return report

    async def resolve(self, address: str, network: NetworkId) -> Optional[TokenMetadata]:
        """Full metadata from the first resolver that knows name, symbol and decimals."""
        report = await self.resolve_with_report(address, network)
        return self.to_metadata(report, address, network)

    def to_metadata(self, report: EnrichmentReport, address: str, network: NetworkId) -> Optional[TokenMetadata]:
        token = report.token
        if token is None or token.decimals is None:
            return None
        standard = TokenStandard.ERC20 if NETWORKS[network].is_evm else TokenStandard.SPL
        return TokenMetadata(
            address=address,
            network=network,
            name=token.name,
            symbol=token.symbol,
            decimals=token.decimals,
            total_supply=None,
            standard=standard,
            source=enrichment_source(report.resolver),
            logo_uri=token.logo_uri,
            warnings=[OFF_CHAIN_WARNING.format(provider=report.resolver)],
        )

    async def fill_names(self, metadata: TokenMetadata) -> TokenMetadata:
        """Replace placeholder name and symbol on verified on-chain metadata.

        Decimals and supply stay as read on-chain; only name, symbol and
        logo are taken from the resolver.
        """
        report = await self.resolve_with_report(metadata.address, metadata.network, require_decimals=False)
        token = report.token
        if token is None:
            return metadata
        return metadata.model_copy(
            update={
                "name": token.name,
                "symbol": token.symbol,
                "logo_uri": metadata.logo_uri or token.logo_uri,
                "warnings": [*metadata.warnings, NAMES_WARNING.format(provider=report.resolver)],
            }
        )
