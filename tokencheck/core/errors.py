"""
Error Classification

Defines the error kinds surfaced on validation results and the exception
types raised inside the engine. Exceptions never cross the public
``validate`` boundary; they are converted into ``ValidationResult``
failures carrying their ``ErrorKind``.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional


class ErrorKind(str, Enum):
    """Error kinds reported on a failed ``ValidationResult``."""

    INVALID_FORMAT = "InvalidFormat"
    UNSUPPORTED_NETWORK = "UnsupportedNetwork"
    NOT_ERC20 = "NotErc20"
    NOT_SPL_MINT = "NotSplMint"
    INVALID_METADATA = "InvalidMetadata"
    RPC_UNAVAILABLE = "RpcUnavailable"
    ENRICHMENT_EXHAUSTED = "EnrichmentExhausted"
    TIMEOUT = "Timeout"
    INTERNAL = "InternalError"  # Unexpected exception caught at the boundary


class TokenValidationError(Exception):
    """Base class for validation failures that map onto an ``ErrorKind``."""

    kind: ErrorKind = ErrorKind.INTERNAL

    def __init__(
        self,
        message: str,
        kind: Optional[ErrorKind] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        if kind is not None:
            self.kind = kind
        self.details = details or {}


class UnsupportedNetworkError(TokenValidationError):
    kind = ErrorKind.UNSUPPORTED_NETWORK


class InvalidAddressFormatError(TokenValidationError):
    kind = ErrorKind.INVALID_FORMAT


class NotErc20Error(TokenValidationError):
    kind = ErrorKind.NOT_ERC20


class NotSplMintError(TokenValidationError):
    kind = ErrorKind.NOT_SPL_MINT


class InvalidMetadataError(TokenValidationError):
    kind = ErrorKind.INVALID_METADATA


class EnrichmentExhaustedError(TokenValidationError):
    kind = ErrorKind.ENRICHMENT_EXHAUSTED


# Single-provider failures. The resilience layer records these and moves on
# to the next endpoint; callers only see them inside RpcUnavailableError.
class RpcError(Exception):
    """A provider answered with a JSON-RPC error payload or a bad transport."""

    def __init__(
        self,
        message: str,
        *,
        url: Optional[str] = None,
        code: Optional[int] = None,
        data: Any = None,
    ):
        super().__init__(message)
        self.message = message
        self.url = url
        self.code = code
        self.data = data

    @property
    def is_execution_reverted(self) -> bool:
        text = (self.message or "").lower()
        return self.code == 3 or "revert" in text


class RpcTimeoutError(RpcError):
    """A provider did not answer within the per-provider timeout."""


class ContractRevertError(RpcError):
    """The node executed the call and the contract reverted.

    Every provider would give the same answer, so this is not retried.
    """


@dataclass(frozen=True)
class ProviderFailure:
    url: str
    attempt: int
    error: str
    timed_out: bool = False


class RpcUnavailableError(TokenValidationError):
    """Every provider in the roster failed on every attempt."""

    kind = ErrorKind.RPC_UNAVAILABLE

    def __init__(
        self,
        method: str,
        provider_count: int,
        attempts: int,
        failures: List[ProviderFailure],
    ):
        last = failures[-1].error if failures else "no providers configured"
        message = (
            f"RPC call {method} failed on all {provider_count} providers "
            f"after {attempts} attempts: {last}"
        )
        super().__init__(
            message,
            details={
                "method": method,
                "provider_count": provider_count,
                "attempts": attempts,
            },
        )
        self.method = method
        self.provider_count = provider_count
        self.attempts = attempts
        self.failures = failures
        if self.all_timed_out:
            self.kind = ErrorKind.TIMEOUT

    @property
    def all_timed_out(self) -> bool:
        return bool(self.failures) and all(f.timed_out for f in self.failures)


class AbiDecodingError(ValueError):
    """ABI return data is malformed (bad hex, short payload, bad length word)."""


__all__ = [
    "ErrorKind",
    "TokenValidationError",
    "UnsupportedNetworkError",
    "InvalidAddressFormatError",
    "NotErc20Error",
    "NotSplMintError",
    "InvalidMetadataError",
    "EnrichmentExhaustedError",
    "RpcError",
    "RpcTimeoutError",
    "ContractRevertError",
    "ProviderFailure",
    "RpcUnavailableError",
    "AbiDecodingError",
]
