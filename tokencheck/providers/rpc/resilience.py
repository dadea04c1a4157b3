"""
RPC Resilience

Runs one JSON-RPC call against an ordered roster of redundant providers.

Each attempt sweeps the whole roster in order before any provider is tried
again, so a different node gets a chance before time is spent on a dead
one. Between sweeps the layer sleeps ``retry_delay * (attempt + 1)``.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, List, Optional, Sequence

from ...config import Settings, settings as default_settings
from ...core.errors import (
    ContractRevertError,
    ProviderFailure,
    RpcError,
    RpcTimeoutError,
    RpcUnavailableError,
)
from .roster import ProviderEndpoint
from .transport import JsonRpcTransport

logger = logging.getLogger(__name__)


class RpcResilienceLayer:

    def __init__(
        self,
        transport: Optional[JsonRpcTransport] = None,
        *,
        timeout: float = 10.0,
        max_retries: int = 3,
        retry_delay: float = 1.0,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        if max_retries < 1:
            raise ValueError("max_retries must be at least 1")
        self.transport = transport or JsonRpcTransport()
        self.timeout = timeout
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self._sleep = sleep

    @classmethod
    def from_settings(
        cls,
        config: Optional[Settings] = None,
        transport: Optional[JsonRpcTransport] = None,
    ) -> "RpcResilienceLayer":
        cfg = config or default_settings
        return cls(
            transport,
            timeout=cfg.rpc_timeout_seconds,
            max_retries=cfg.rpc_max_retries,
            retry_delay=cfg.rpc_retry_delay_seconds,
        )

    async def call(
        self,
        endpoints: Sequence[ProviderEndpoint],
        method: str,
        params: List[Any],
        *,
        timeout: Optional[float] = None,
        max_retries: Optional[int] = None,
    ) -> Any:
        """Return the first successful result from the roster.

        Raises:
            ContractRevertError: A node executed the call and the contract
                reverted. Not retried; every node would agree.
            RpcUnavailableError: Every provider failed on every attempt.
        """
        per_provider_timeout = timeout if timeout is not None else self.timeout
        attempts = max_retries if max_retries is not None else self.max_retries
        roster = list(endpoints)
        failures: List[ProviderFailure] = []

        for attempt in range(attempts):
            for endpoint in roster:
                try:
                    return await asyncio.wait_for(
                        self.transport.call(endpoint.url, method, params, per_provider_timeout),
                        timeout=per_provider_timeout,
                    )
                except asyncio.TimeoutError:
                    failures.append(
                        ProviderFailure(endpoint.url, attempt, f"timed out after {per_provider_timeout}s", timed_out=True)
                    )
                except RpcError as exc:
                    if exc.is_execution_reverted:
                        raise ContractRevertError(exc.message, url=endpoint.url, code=exc.code, data=exc.data) from exc
                    failures.append(
                        ProviderFailure(endpoint.url, attempt, exc.message, timed_out=isinstance(exc, RpcTimeoutError))
                    )
                logger.warning(
                    f"RPC {method} failed on {endpoint.url} "
                    f"(attempt {attempt + 1}/{attempts}): {failures[-1].error}"
                )

            if attempt < attempts - 1 and roster:
                delay = self.retry_delay * (attempt + 1)
                logger.info(f"All {len(roster)} providers failed for {method}; retrying in {delay:.1f}s")
                await self._sleep(delay)

        raise RpcUnavailableError(method, len(roster), attempts, failures)
