"""
Network identification types and the per-network lookup table.

Every supported network is a member of the closed ``NetworkId`` enum. The
``NETWORKS`` table maps each id to its family (which decides the RPC
dialect and the reader used), token standard, token-list documents and the
slugs third-party APIs use for it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional, Tuple

from .errors import UnsupportedNetworkError


class NetworkFamily(str, Enum):
    EVM = "evm"
    SOLANA = "solana"


class NetworkId(str, Enum):
    BASE = "base"
    ETHEREUM = "ethereum"
    BASE_TESTNET = "base-testnet"
    SOLANA = "solana"
    SOLANA_DEVNET = "solana-devnet"


@dataclass(frozen=True)
class NetworkSpec:
    network: NetworkId
    family: NetworkFamily
    display_name: str
    standard: str
    is_testnet: bool = False
    chain_id: Optional[int] = None
    token_list_urls: Tuple[str, ...] = field(default_factory=tuple)
    coingecko_platform: Optional[str] = None
    dexscreener_chain: Optional[str] = None

    @property
    def is_evm(self) -> bool:
        return self.family is NetworkFamily.EVM

    @property
    def is_solana(self) -> bool:
        return self.family is NetworkFamily.SOLANA


NETWORKS: Dict[NetworkId, NetworkSpec] = {
    NetworkId.BASE: NetworkSpec(
        network=NetworkId.BASE,
        family=NetworkFamily.EVM,
        display_name="Base",
        standard="ERC-20",
        chain_id=8453,
        token_list_urls=("https://raw.githubusercontent.com/base-org/token-list/main/base.tokenlist.json",),
        coingecko_platform="base",
        dexscreener_chain="base",
    ),
    NetworkId.ETHEREUM: NetworkSpec(
        network=NetworkId.ETHEREUM,
        family=NetworkFamily.EVM,
        display_name="Ethereum",
        standard="ERC-20",
        chain_id=1,
        token_list_urls=("https://tokens.coingecko.com/uniswap/all.json",),
        coingecko_platform="ethereum",
        dexscreener_chain="ethereum",
    ),
    NetworkId.BASE_TESTNET: NetworkSpec(
        network=NetworkId.BASE_TESTNET,
        family=NetworkFamily.EVM,
        display_name="Base Sepolia",
        standard="ERC-20",
        is_testnet=True,
        chain_id=84532,
    ),
    NetworkId.SOLANA: NetworkSpec(
        network=NetworkId.SOLANA,
        family=NetworkFamily.SOLANA,
        display_name="Solana",
        standard="SPL",
        token_list_urls=("https://token.jup.ag/strict",),
        coingecko_platform="solana",
        dexscreener_chain="solana",
    ),
    NetworkId.SOLANA_DEVNET: NetworkSpec(
        network=NetworkId.SOLANA_DEVNET,
        family=NetworkFamily.SOLANA,
        display_name="Solana Devnet",
        standard="SPL",
        is_testnet=True,
    ),
}

_NETWORK_ALIASES: Dict[str, NetworkId] = {
    "base": NetworkId.BASE,
    "base-mainnet": NetworkId.BASE,
    "ethereum": NetworkId.ETHEREUM,
    "eth": NetworkId.ETHEREUM,
    "mainnet": NetworkId.ETHEREUM,
    "base-testnet": NetworkId.BASE_TESTNET,
    "base-sepolia": NetworkId.BASE_TESTNET,
    "solana": NetworkId.SOLANA,
    "sol": NetworkId.SOLANA,
    "solana-mainnet": NetworkId.SOLANA,
    "solana-devnet": NetworkId.SOLANA_DEVNET,
    "sol-devnet": NetworkId.SOLANA_DEVNET,
}


def parse_network(value: str | NetworkId | None) -> NetworkId:
    """Resolve user input to a ``NetworkId``.

    Raises:
        UnsupportedNetworkError: If the value is empty or not a known network.
    """
    if isinstance(value, NetworkId):
        return value
    key = (value or "").strip().lower()
    network = _NETWORK_ALIASES.get(key)
    if network is None:
        supported = ", ".join(n.value for n in NetworkId)
        raise UnsupportedNetworkError(
            f"Unsupported network '{value}'. Supported networks: {supported}",
            details={"network": value, "supported": [n.value for n in NetworkId]},
        )
    return network


def get_network_spec(network: NetworkId | str) -> NetworkSpec:
    return NETWORKS[parse_network(network)]


def is_evm_network(network: NetworkId | str) -> bool:
    return get_network_spec(network).is_evm


def is_solana_network(network: NetworkId | str) -> bool:
    return get_network_spec(network).is_solana


__all__ = [
    "NetworkFamily",
    "NetworkId",
    "NetworkSpec",
    "NETWORKS",
    "parse_network",
    "get_network_spec",
    "is_evm_network",
    "is_solana_network",
]
