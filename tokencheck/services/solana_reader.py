"""
Solana Mint Reader

Fetches a mint account with ``getAccountInfo`` (``jsonParsed``) and checks
that it is owned by the SPL Token program. SPL mints carry no name or
symbol on-chain; those come from the known-token cache, or placeholders
that the service later fills through enrichment.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from ..core.errors import InvalidMetadataError, NotSplMintError
from ..core.networks import NetworkId
from ..providers.rpc import ProviderRoster, RpcResilienceLayer
from ..types.models import SOURCE_ON_CHAIN, TokenMetadata, TokenStandard
from .known_tokens import WRAPPED_SOL_MINT, KnownTokenCache

logger = logging.getLogger(__name__)

SPL_TOKEN_PROGRAM_ID = "TokenkegQfeZyiNwAJbNbGKPFXCWuBvf9Ss623VQ5DA"

PLACEHOLDER_NAME = "Unknown Token"
PLACEHOLDER_SYMBOL = "UNKNOWN"


def has_placeholder_names(metadata: TokenMetadata) -> bool:
    return metadata.name == PLACEHOLDER_NAME or metadata.symbol == PLACEHOLDER_SYMBOL


class SolanaMintReader:

    def __init__(
        self,
        roster: ProviderRoster,
        rpc: RpcResilienceLayer,
        known_tokens: Optional[KnownTokenCache] = None,
    ) -> None:
        self.roster = roster
        self.rpc = rpc
        self.known_tokens = known_tokens if known_tokens is not None else KnownTokenCache()

    async def get_account_info(self, address: str, network: NetworkId) -> Optional[Dict[str, Any]]:
        params = [address, {"encoding": "jsonParsed"}]
        result = await self.rpc.call(self.roster.providers(network), "getAccountInfo", params)
        if not isinstance(result, dict):
            return None
        return result.get("value")

    async def read(self, address: str, network: NetworkId) -> TokenMetadata:
        """Read and validate an SPL mint account.

        Raises:
            NotSplMintError: Missing account, wrong owner, or not a mint.
            InvalidMetadataError: Mint fields are missing or malformed.
            RpcUnavailableError: No provider answered.
        """
        account = await self.get_account_info(address, network)
        if not account:
            raise NotSplMintError(
                f"Account {address} does not exist on {network.value}",
                details={"address": address, "network": network.value},
            )

        owner = account.get("owner")
        if owner != SPL_TOKEN_PROGRAM_ID:
            raise NotSplMintError(
                "Not an SPL token mint (wrong program owner)",
                details={"address": address, "owner": owner},
            )

        data = account.get("data")
        parsed = data.get("parsed") if isinstance(data, dict) else None
        if not isinstance(parsed, dict) or parsed.get("type") != "mint":
            raise NotSplMintError(
                "Account is not an SPL token mint",
                details={"address": address, "type": (parsed or {}).get("type")},
            )

        info = parsed.get("info") or {}
        try:
            decimals = int(info["decimals"])
            supply = str(int(info.get("supply") or 0))
        except (KeyError, TypeError, ValueError) as exc:
            raise InvalidMetadataError(f"Malformed mint account data for {address}") from exc
        if decimals < 0 or decimals > 18:
            raise InvalidMetadataError(f"Invalid decimals value: {decimals}")

        known = self.known_tokens.lookup(address, network)
        name = known.name if known else PLACEHOLDER_NAME
        symbol = known.symbol if known else PLACEHOLDER_SYMBOL
        standard = TokenStandard.NATIVE if address == WRAPPED_SOL_MINT else TokenStandard.SPL

        logger.debug(f"Read SPL mint {address} on {network.value} ({decimals} decimals)")
        return TokenMetadata(
            address=address,
            network=network,
            name=name,
            symbol=symbol,
            decimals=decimals,
            total_supply=supply,
            standard=standard,
            source=SOURCE_ON_CHAIN,
            mint_authority=info.get("mintAuthority"),
            freeze_authority=info.get("freezeAuthority"),
            logo_uri=known.logo_uri if known else None,
        )
