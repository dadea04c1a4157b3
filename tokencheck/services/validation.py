"""
Token Validation Service

Public entry point. Decides whether an address is a real fungible token
on the requested network and returns its canonical metadata.

Flow for a single request:

    network alias -> address format -> (Solana) known-token fast path
        -> exactly one reader (ERC-20 or SPL) over the RPC roster
        -> on RPC exhaustion: enrichment chain, then known-token cache
        -> optional token-list cross-reference

Typed errors raised along the way are turned into failed
``ValidationResult``s; nothing escapes ``validate``.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional, Sequence, Union

from pydantic import ValidationError
from structlog.contextvars import bound_contextvars

from ..config import Settings, settings as default_settings
from ..core.errors import (
    EnrichmentExhaustedError,
    ErrorKind,
    InvalidAddressFormatError,
    InvalidMetadataError,
    RpcUnavailableError,
    TokenValidationError,
)
from ..core.networks import NETWORKS, NetworkId, NetworkSpec, parse_network
from ..providers.rpc import ProviderRoster, RpcResilienceLayer
from ..types.models import (
    NetworkHealth,
    ProviderHealth,
    TokenListCheck,
    TokenMetadata,
    TokenStandard,
    ValidationRequest,
    ValidationResult,
)
from .address import is_valid_address_for_family
from .batch import BatchConfig, BatchCoordinator
from .enrichment import MetadataEnrichmentChain
from .evm_reader import EvmTokenReader
from .known_tokens import KnownTokenCache, KnownTokenEntry
from .solana_reader import SolanaMintReader, has_placeholder_names
from .token_lists import TokenListCrossReferencer

logger = logging.getLogger(__name__)

KNOWN_CACHE_WARNING = "All RPC providers unavailable; metadata is from the local known-token cache"

BatchItem = Union[ValidationRequest, Mapping[str, Any]]


def _raw_request(item: Any) -> ValidationRequest:
    """String-only echo of a batch item that failed to parse."""
    fields = item if isinstance(item, Mapping) else {}

    def text(value: Any) -> str:
        return "" if value is None else str(value)

    return ValidationRequest(address=text(fields.get("address")), network=text(fields.get("network")))


class TokenValidationService:

    def __init__(
        self,
        roster: Optional[ProviderRoster] = None,
        rpc: Optional[RpcResilienceLayer] = None,
        known_tokens: Optional[KnownTokenCache] = None,
        enrichment: Optional[MetadataEnrichmentChain] = None,
        token_lists: Optional[TokenListCrossReferencer] = None,
        batch_config: Optional[BatchConfig] = None,
        *,
        config: Optional[Settings] = None,
        cross_reference: Optional[bool] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        cfg = config or default_settings
        self.settings = cfg
        self.roster = roster if roster is not None else ProviderRoster.from_settings(cfg)
        self.rpc = rpc if rpc is not None else RpcResilienceLayer.from_settings(cfg)
        self.known_tokens = known_tokens if known_tokens is not None else KnownTokenCache()
        self.enrichment = enrichment if enrichment is not None else MetadataEnrichmentChain.from_settings(cfg)
        self.token_lists = token_lists if token_lists is not None else TokenListCrossReferencer.from_settings(cfg)
        self.cross_reference = cfg.enable_token_list_check if cross_reference is None else cross_reference

        self.evm_reader = EvmTokenReader(self.roster, self.rpc)
        self.solana_reader = SolanaMintReader(self.roster, self.rpc, self.known_tokens)
        self.batch = BatchCoordinator(
            self.validate_request,
            batch_config or BatchConfig.from_settings(cfg),
            sleep=sleep,
        )

    # ------------------------------------------------------------------
    # Single validation
    # ------------------------------------------------------------------

    async def validate(self, address: str, network: str) -> ValidationResult:
        """Validate one address on one network. Never raises."""
        request = ValidationRequest(address=address or "", network=network or "")
        return await self.validate_request(request)

    async def validate_request(self, request: ValidationRequest) -> ValidationResult:
        with bound_contextvars(address=request.address, network=request.network):
            try:
                metadata = await self._validate(request)
            except TokenValidationError as exc:
                logger.info(f"Validation failed ({exc.kind.value}): {exc.message}")
                return ValidationResult.failure(request, exc.kind, exc.message)
            except Exception as exc:
                logger.exception("Unexpected error during token validation")
                return ValidationResult.failure(request, ErrorKind.INTERNAL, f"Unexpected error: {exc}")

            logger.info(f"Validated {metadata.symbol} ({metadata.source})")
            return ValidationResult.success(request, metadata)

    async def _validate(self, request: ValidationRequest) -> TokenMetadata:
        network = parse_network(request.network)
        spec = NETWORKS[network]
        address = request.address.strip()
        self._check_format(address, spec)

        if spec.is_solana and self.settings.known_token_fast_path:
            entry = self.known_tokens.lookup(address, network)
            if entry is not None:
                logger.debug(f"Known mint {entry.symbol}; skipping RPC")
                return await self._cross_reference(self.known_tokens.to_metadata(entry, address))

        reader = self.evm_reader if spec.is_evm else self.solana_reader
        try:
            metadata = await reader.read(address, network)
        except RpcUnavailableError as exc:
            metadata = await self._fallback(address, network, exc)
        else:
            if spec.is_solana and has_placeholder_names(metadata):
                metadata = await self.enrichment.fill_names(metadata)

        return await self._cross_reference(metadata)

    def _check_format(self, address: str, spec: NetworkSpec) -> None:
        if not is_valid_address_for_family(address, spec.family):
            raise InvalidAddressFormatError(
                f"Invalid {spec.display_name} address format",
                details={"address": address, "network": spec.network.value},
            )

    async def _fallback(self, address: str, network: NetworkId, exc: RpcUnavailableError) -> TokenMetadata:
        logger.warning(f"On-chain read unavailable, trying off-chain sources: {exc.message}")

        report = await self.enrichment.resolve_with_report(address, network)
        metadata = self.enrichment.to_metadata(report, address, network)
        if metadata is not None:
            return metadata

        entry = self.known_tokens.lookup(address, network)
        if entry is not None:
            return self.known_tokens.to_metadata(entry, address, warnings=[KNOWN_CACHE_WARNING])

        if exc.all_timed_out:
            raise exc
        if report.all_answered:
            raise EnrichmentExhaustedError(
                f"RPC unavailable and no metadata source recognises {address}",
                details={"attempted": report.attempted, "rpc_error": exc.message},
            )
        raise exc

    async def _cross_reference(self, metadata: TokenMetadata) -> TokenMetadata:
        if not self.cross_reference:
            return metadata
        return await self.token_lists.apply(metadata)

    # ------------------------------------------------------------------
    # Batch validation
    # ------------------------------------------------------------------

    async def validate_batch(self, requests: Sequence[BatchItem]) -> List[ValidationResult]:
        """Validate many requests; result ``i`` answers request ``i``.

        Items that are not a well-formed ``{address, network}`` pair fail
        in their own slot with ``InvalidFormat``.
        """
        parsed: List[ValidationRequest] = []
        rejected: Dict[int, ValidationResult] = {}
        for index, item in enumerate(requests):
            if isinstance(item, ValidationRequest):
                parsed.append(item)
                continue
            try:
                parsed.append(ValidationRequest.model_validate(item))
            except ValidationError as exc:
                logger.info(f"Rejected malformed batch item {index}: {exc.error_count()} invalid field(s)")
                rejected[index] = ValidationResult.failure(
                    _raw_request(item),
                    ErrorKind.INVALID_FORMAT,
                    "Batch item needs a string address and network",
                )

        results = iter(await self.batch.run(parsed))
        return [rejected[index] if index in rejected else next(results) for index in range(len(requests))]

    async def validate_addresses(self, addresses: Sequence[str], network: str) -> List[ValidationResult]:
        return await self.validate_batch(
            [ValidationRequest(address=address, network=network) for address in addresses]
        )

    # ------------------------------------------------------------------
    # Token lists, health, known tokens
    # ------------------------------------------------------------------

    async def check_token_list(self, address: str, network: str) -> TokenListCheck:
        """Look the address up in the network's published token lists.

        Raises:
            UnsupportedNetworkError: Unknown network.
            InvalidAddressFormatError: Malformed address.
        """
        network_id = parse_network(network)
        address = (address or "").strip()
        self._check_format(address, NETWORKS[network_id])
        return await self.token_lists.check(address, network_id)

    async def network_health(self, network: str) -> NetworkHealth:
        """Probe every provider in the network's roster concurrently."""
        network_id = parse_network(network)
        endpoints = self.roster.providers(network_id)
        outcomes = await asyncio.gather(*(self.roster.probe(endpoint) for endpoint in endpoints))

        providers = [
            ProviderHealth(
                url=endpoint.url,
                primary=endpoint.primary,
                healthy=healthy,
                response_time_ms=elapsed_ms,
                error=error,
            )
            for endpoint, (healthy, elapsed_ms, error) in zip(endpoints, outcomes)
        ]
        first_healthy = next((p for p in providers if p.healthy), None)
        return NetworkHealth(
            network=network_id,
            healthy=first_healthy is not None,
            response_time_ms=first_healthy.response_time_ms if first_healthy else None,
            providers=providers,
        )

    def update_known_token(
        self,
        address: str,
        network: str,
        *,
        name: str,
        symbol: str,
        decimals: int,
        standard: Optional[TokenStandard] = None,
        logo_uri: Optional[str] = None,
        verified: bool = True,
    ) -> KnownTokenEntry:
        """Add or replace a known-token cache entry.

        Raises:
            UnsupportedNetworkError: Unknown network.
            InvalidAddressFormatError: Malformed address.
            InvalidMetadataError: Empty name/symbol or decimals outside [0, 18].
        """
        network_id = parse_network(network)
        spec = NETWORKS[network_id]
        address = (address or "").strip()
        self._check_format(address, spec)
        if not name or not symbol:
            raise InvalidMetadataError("Token name and symbol are required")
        if decimals < 0 or decimals > 18:
            raise InvalidMetadataError(f"Invalid decimals value: {decimals}")

        entry = KnownTokenEntry(
            network=network_id,
            address=address,
            name=name,
            symbol=symbol,
            decimals=decimals,
            standard=standard or (TokenStandard.ERC20 if spec.is_evm else TokenStandard.SPL),
            logo_uri=logo_uri,
            verified=verified,
        )
        self.known_tokens.update(entry)
        return entry

    def supported_networks(self) -> List[Dict[str, Any]]:
        """Capability table for every supported network."""
        networks = []
        for spec in NETWORKS.values():
            features = ["token_validation"]
            if not spec.is_testnet:
                features.append("metadata_fetching")
            if spec.token_list_urls:
                features.append("token_lists")
            networks.append(
                {
                    "network": spec.network.value,
                    "name": spec.display_name,
                    "family": spec.family.value,
                    "chainId": spec.chain_id,
                    "tokenStandard": spec.standard,
                    "isTestnet": spec.is_testnet,
                    "rpcEndpoint": self.roster.primary_url(spec.network),
                    "providerCount": len(self.roster.providers(spec.network)),
                    "features": features,
                }
            )
        return networks


_token_validation_service: Optional[TokenValidationService] = None


def get_token_validation_service() -> TokenValidationService:
    """Get the singleton TokenValidationService instance."""
    global _token_validation_service
    if _token_validation_service is None:
        _token_validation_service = TokenValidationService()
    return _token_validation_service
