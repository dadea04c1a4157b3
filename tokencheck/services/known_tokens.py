"""
Known Token Cache

Canonical metadata for widely used tokens, keyed by network and
normalised address. Serves the Solana fast path ahead of RPC and the
last-resort fallback when every provider is down.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Tuple

from ..core.networks import NetworkId
from ..types.models import SOURCE_KNOWN_CACHE, TokenMetadata, TokenStandard, utcnow
from .address import normalize_address

logger = logging.getLogger(__name__)

WRAPPED_SOL_MINT = "So11111111111111111111111111111111111111112"


@dataclass(frozen=True)
class KnownTokenEntry:
    network: NetworkId
    address: str
    name: str
    symbol: str
    decimals: int
    standard: TokenStandard
    logo_uri: Optional[str] = None
    verified: bool = True
    last_updated: datetime = field(default_factory=utcnow)

    @property
    def key(self) -> Tuple[NetworkId, str]:
        return self.network, normalize_address(self.address, self.network)


def _spl(address: str, name: str, symbol: str, decimals: int) -> KnownTokenEntry:
    standard = TokenStandard.NATIVE if address == WRAPPED_SOL_MINT else TokenStandard.SPL
    return KnownTokenEntry(NetworkId.SOLANA, address, name, symbol, decimals, standard)


def _erc20(network: NetworkId, address: str, name: str, symbol: str, decimals: int) -> KnownTokenEntry:
    return KnownTokenEntry(network, address, name, symbol, decimals, TokenStandard.ERC20)


DEFAULT_KNOWN_TOKENS: List[KnownTokenEntry] = [
    # Solana mainnet
    _spl(WRAPPED_SOL_MINT, "Wrapped SOL", "SOL", 9),
    _spl("EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v", "USD Coin", "USDC", 6),
    _spl("Es9vMFrzaCERmJfrF4H2FYD4KCoNkY11McCe8BenwNYB", "USDT", "USDT", 6),
    _spl("JUPyiwrYJFskUPiHa7hkeR8VUtAeFoSYbKedZNsDvCN", "Jupiter", "JUP", 6),
    _spl("4k3Dyjzvzp8eMZWUXbBCjEvwSkkk59S5iCNLY3QrkX6R", "Raydium", "RAY", 6),
    # Base mainnet
    _erc20(NetworkId.BASE, "0x4200000000000000000000000000000000000006", "Wrapped Ether", "WETH", 18),
    _erc20(NetworkId.BASE, "0x833589fCD6eDb6E08f4c7C32D4f71b54bdA02913", "USD Coin", "USDC", 6),
    _erc20(NetworkId.BASE, "0xfde4C96c8593536E31F229EA8f37b2ADa2699bb2", "Tether USD", "USDT", 6),
    _erc20(NetworkId.BASE, "0x50c5725949A6F0c72E6C4a641F24049A917DB0Cb", "Dai Stablecoin", "DAI", 18),
    # Ethereum mainnet
    _erc20(NetworkId.ETHEREUM, "0xC02aaA39b223FE8D0A0e5C4F27eAD9083C756Cc2", "Wrapped Ether", "WETH", 18),
    _erc20(NetworkId.ETHEREUM, "0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48", "USD Coin", "USDC", 6),
    _erc20(NetworkId.ETHEREUM, "0xdAC17F958D2ee523a2206206994597C13D831ec7", "Tether USD", "USDT", 6),
    _erc20(NetworkId.ETHEREUM, "0x6B175474E89094C44Da98b954EedeAC495271d0F", "Dai Stablecoin", "DAI", 18),
]


class KnownTokenCache:
    """Read-mostly token map.

    ``lookup`` reads whatever dict is current without locking. ``update``
    builds a new dict under a lock and swaps it in, so a reader never sees
    a half-applied write.
    """

    def __init__(self, entries: Optional[Iterable[KnownTokenEntry]] = None) -> None:
        seed = DEFAULT_KNOWN_TOKENS if entries is None else entries
        self._entries: Dict[Tuple[NetworkId, str], KnownTokenEntry] = {entry.key: entry for entry in seed}
        self._write_lock = threading.Lock()

    def lookup(self, address: str, network: NetworkId) -> Optional[KnownTokenEntry]:
        return self._entries.get((network, normalize_address(address, network)))

    def contains(self, address: str, network: NetworkId) -> bool:
        return self.lookup(address, network) is not None

    def update(self, entry: KnownTokenEntry) -> None:
        with self._write_lock:
            entries = dict(self._entries)
            entries[entry.key] = entry
            self._entries = entries
        logger.info(f"Known token cache updated: {entry.symbol} on {entry.network.value}")

    def entries(self, network: Optional[NetworkId] = None) -> List[KnownTokenEntry]:
        snapshot = self._entries
        return [e for e in snapshot.values() if network is None or e.network is network]

    def __len__(self) -> int:
        return len(self._entries)

    def to_metadata(
        self,
        entry: KnownTokenEntry,
        address: Optional[str] = None,
        warnings: Optional[List[str]] = None,
    ) -> TokenMetadata:
        """Metadata for ``entry``, echoing the caller's address spelling when given."""
        return TokenMetadata(
            address=address or entry.address,
            network=entry.network,
            name=entry.name,
            symbol=entry.symbol,
            decimals=entry.decimals,
            total_supply=None,
            standard=entry.standard,
            is_verified=entry.verified,
            source=SOURCE_KNOWN_CACHE,
            logo_uri=entry.logo_uri,
            warnings=list(warnings or []),
        )
