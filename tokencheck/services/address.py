"""Structural address checks per network family. Pure; performs no I/O."""

from __future__ import annotations

import re
from functools import lru_cache

from ..core.networks import NetworkFamily, NetworkId, get_network_spec, parse_network

_EVM_ADDRESS_RE = re.compile(r"^0x[0-9a-fA-F]{40}$")
_SOLANA_ADDRESS_RE = re.compile(r"^[1-9A-HJ-NP-Za-km-z]{32,44}$")


def is_valid_evm_address(address: str | None) -> bool:
    if not address or not isinstance(address, str):
        return False
    return bool(_EVM_ADDRESS_RE.fullmatch(address))


@lru_cache(maxsize=1024)
def is_valid_solana_address(address: str | None) -> bool:
    if not address or not isinstance(address, str):
        return False
    return bool(_SOLANA_ADDRESS_RE.fullmatch(address))


def is_valid_address_for_family(address: str | None, family: NetworkFamily) -> bool:
    if family is NetworkFamily.EVM:
        return is_valid_evm_address(address)
    return is_valid_solana_address(address)


def is_valid_address_for_network(address: str | None, network: NetworkId | str) -> bool:
    """Return True if ``address`` is well formed for the network's family.

    Raises:
        UnsupportedNetworkError: If ``network`` is not a supported network.
    """
    return is_valid_address_for_family(address, get_network_spec(network).family)


def normalize_network(network: str | NetworkId | None) -> NetworkId:
    """Alias-aware network lookup (``base-sepolia``, ``eth``, ``sol``, ...)."""
    return parse_network(network)


def normalize_address(address: str, network: NetworkId | str) -> str:
    """Canonical form used for cache and list keys.

    EVM addresses are case-insensitive (checksum casing is cosmetic); base58
    mints are case-sensitive and kept verbatim.
    """
    address = address.strip()
    if get_network_spec(network).is_evm:
        return address.lower()
    return address


__all__ = [
    "is_valid_evm_address",
    "is_valid_solana_address",
    "is_valid_address_for_family",
    "is_valid_address_for_network",
    "normalize_network",
    "normalize_address",
]
