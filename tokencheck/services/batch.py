"""
Batch Validation

Paces large batches so public RPC endpoints are not hammered. Requests
are grouped by network family and split into small chunks; items inside
a chunk run concurrently and the coordinator pauses between chunks.
Output order always matches input order.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Dict, List, Optional, Sequence, Tuple

from ..config import Settings, settings as default_settings
from ..core.errors import ErrorKind, UnsupportedNetworkError
from ..core.networks import NetworkFamily, get_network_spec
from ..types.models import ValidationRequest, ValidationResult

logger = logging.getLogger(__name__)

ValidateFn = Callable[[ValidationRequest], Awaitable[ValidationResult]]


@dataclass
class BatchConfig:
    """Chunk sizes and inter-chunk pauses per network family."""
    chunk_sizes: Dict[NetworkFamily, int] = field(
        default_factory=lambda: {NetworkFamily.EVM: 5, NetworkFamily.SOLANA: 3}
    )
    chunk_delays: Dict[NetworkFamily, float] = field(
        default_factory=lambda: {NetworkFamily.EVM: 0.5, NetworkFamily.SOLANA: 1.0}
    )

    @classmethod
    def from_settings(cls, config: Optional[Settings] = None) -> "BatchConfig":
        cfg = config or default_settings
        return cls(
            chunk_sizes={NetworkFamily.EVM: cfg.evm_batch_size, NetworkFamily.SOLANA: cfg.solana_batch_size},
            chunk_delays={
                NetworkFamily.EVM: cfg.evm_batch_delay_seconds,
                NetworkFamily.SOLANA: cfg.solana_batch_delay_seconds,
            },
        )


class BatchCoordinator:

    def __init__(
        self,
        validate: ValidateFn,
        config: Optional[BatchConfig] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._validate = validate
        self._config = config or BatchConfig()
        self._sleep = sleep

    async def _run_one(self, request: ValidationRequest) -> ValidationResult:
        try:
            return await self._validate(request)
        except Exception as e:
            logger.exception(f"Unexpected error validating {request.address} on {request.network}")
            return ValidationResult.failure(request, ErrorKind.INTERNAL, f"Unexpected error: {e}")

    def _group(self, requests: Sequence[ValidationRequest]) -> Tuple[Dict[NetworkFamily, List[int]], List[int]]:
        groups: Dict[NetworkFamily, List[int]] = {family: [] for family in NetworkFamily}
        unrouted: List[int] = []
        for index, request in enumerate(requests):
            try:
                family = get_network_spec(request.network).family
            except UnsupportedNetworkError:
                unrouted.append(index)
                continue
            groups[family].append(index)
        return groups, unrouted

    async def run(self, requests: Sequence[ValidationRequest]) -> List[ValidationResult]:
        results: List[Optional[ValidationResult]] = [None] * len(requests)
        if not requests:
            return []

        groups, unrouted = self._group(requests)

        # Unknown networks fail without network I/O, no pacing needed
        if unrouted:
            done = await asyncio.gather(*(self._run_one(requests[i]) for i in unrouted))
            for index, result in zip(unrouted, done):
                results[index] = result

        for family, indices in groups.items():
            if not indices:
                continue
            size = max(1, self._config.chunk_sizes.get(family, 1))
            delay = self._config.chunk_delays.get(family, 0.0)
            chunks = [indices[i:i + size] for i in range(0, len(indices), size)]
            logger.info(f"Validating {len(indices)} {family.value} tokens in {len(chunks)} chunks of up to {size}")

            for position, chunk in enumerate(chunks):
                done = await asyncio.gather(*(self._run_one(requests[i]) for i in chunk))
                for index, result in zip(chunk, done):
                    results[index] = result
                if position < len(chunks) - 1 and delay > 0:
                    await self._sleep(delay)

        return [r for r in results if r is not None]
