"""
EVM Token Reader

Reads ERC-20 metadata straight from the contract: ``name``, ``symbol``,
``decimals`` and ``totalSupply`` are fetched concurrently with
``eth_call`` and decoded from their ABI return data.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Dict, List, Optional

from ..core.errors import AbiDecodingError, ContractRevertError, InvalidMetadataError, NotErc20Error
from ..core.networks import NetworkId
from ..providers.rpc import ProviderRoster, RpcResilienceLayer
from ..types.models import SOURCE_ON_CHAIN, TokenMetadata, TokenStandard
from .abi import ERC20_FIELDS, decode_string, decode_uint256, encode_call, hex_to_bytes

logger = logging.getLogger(__name__)

MAX_DECIMALS = 18


async def _cancel_pending(tasks: List["asyncio.Future[Optional[str]]"]) -> None:
    """Stop the getters still in flight once one of them has failed."""
    pending = [task for task in tasks if not task.done()]
    for task in pending:
        task.cancel()
    if pending:
        await asyncio.gather(*pending, return_exceptions=True)


class EvmTokenReader:

    def __init__(self, roster: ProviderRoster, rpc: RpcResilienceLayer) -> None:
        self.roster = roster
        self.rpc = rpc

    async def _eth_call(self, address: str, network: NetworkId, function: str) -> Optional[str]:
        params = [{"to": address, "data": encode_call(function)}, "latest"]
        return await self.rpc.call(self.roster.providers(network), "eth_call", params)

    async def read(self, address: str, network: NetworkId) -> TokenMetadata:
        """Fetch and validate the four ERC-20 metadata fields.

        Raises:
            NotErc20Error: A getter reverted or returned nothing.
            InvalidMetadataError: Return data is malformed or out of range.
            RpcUnavailableError: No provider answered.
        """
        tasks = [asyncio.ensure_future(self._eth_call(address, network, fn)) for fn in ERC20_FIELDS]
        try:
            raw_results = await asyncio.gather(*tasks)
        except ContractRevertError as exc:
            raise NotErc20Error(
                f"Contract at {address} reverted an ERC-20 getter: {exc.message}",
                details={"address": address, "network": network.value},
            ) from exc
        finally:
            await _cancel_pending(tasks)

        raw: Dict[str, bytes] = {}
        try:
            for fn, value in zip(ERC20_FIELDS, raw_results):
                raw[fn] = hex_to_bytes(value)
        except AbiDecodingError as exc:
            raise InvalidMetadataError(f"Undecodable eth_call result: {exc}") from exc

        empty = [fn for fn in ERC20_FIELDS if not raw[fn]]
        if empty:
            raise NotErc20Error(
                f"Address {address} is not an ERC-20 contract (no data for {', '.join(empty)})",
                details={"address": address, "network": network.value, "missing": empty},
            )

        try:
            name = decode_string(raw["name"])
            symbol = decode_string(raw["symbol"])
            decimals = decode_uint256(raw["decimals"])
            total_supply = decode_uint256(raw["totalSupply"])
        except AbiDecodingError as exc:
            raise InvalidMetadataError(f"Malformed ERC-20 metadata: {exc}") from exc

        if not name or not symbol:
            raise InvalidMetadataError("Token name or symbol is empty")
        if decimals > MAX_DECIMALS:
            raise InvalidMetadataError(f"Invalid decimals value: {decimals}")

        logger.debug(f"Read ERC-20 {symbol} ({decimals} decimals) at {address} on {network.value}")
        return TokenMetadata(
            address=address,
            network=network,
            name=name,
            symbol=symbol,
            decimals=decimals,
            total_supply=str(total_supply),
            standard=TokenStandard.ERC20,
            source=SOURCE_ON_CHAIN,
        )
