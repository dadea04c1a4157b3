from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from ..core.errors import ErrorKind
from ..core.networks import NetworkId


SOURCE_ON_CHAIN = "on-chain"
SOURCE_KNOWN_CACHE = "known-cache"
ENRICHMENT_SOURCE_PREFIX = "enrichment:"


def enrichment_source(provider: str) -> str:
    return f"{ENRICHMENT_SOURCE_PREFIX}{provider}"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TokenStandard(str, Enum):
    ERC20 = "ERC-20"
    SPL = "SPL"
    NATIVE = "native"


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ValidationRequest(_CamelModel):
    model_config = ConfigDict(frozen=True)

    address: str = Field(description="Token contract or mint address")
    network: str = Field(description="Network identifier as supplied by the caller")


class TokenListMatch(_CamelModel):
    model_config = ConfigDict(frozen=True)

    list_name: str = Field(description="Name of the published token list")
    list_url: str = Field(description="Where the list was fetched from")
    token_info: Dict[str, Any] = Field(default_factory=dict, description="The list's own record for the token")


class TokenMetadata(_CamelModel):
    model_config = ConfigDict(frozen=True)

    address: str = Field(description="Token contract or mint address")
    network: NetworkId = Field(description="Network the token was validated on")
    name: str = Field(min_length=1, description="Full token name")
    symbol: str = Field(min_length=1, description="Token symbol (e.g. USDC)")
    decimals: int = Field(ge=0, le=18, description="Token decimal places")
    total_supply: Optional[str] = Field(
        default=None,
        description="Raw total supply as a decimal string (absent for off-chain sources without supply)",
    )
    standard: TokenStandard = Field(description="Token standard")
    is_verified: bool = Field(default=False, description="Whether the token appears in a trusted list")
    source: str = Field(description="on-chain, known-cache or enrichment:<provider>")
    observed_at: datetime = Field(default_factory=utcnow, description="When the metadata was produced")
    mint_authority: Optional[str] = Field(default=None, description="SPL mint authority")
    freeze_authority: Optional[str] = Field(default=None, description="SPL freeze authority")
    logo_uri: Optional[str] = Field(default=None, description="Token logo, when a source provides one")
    token_list: Optional[TokenListMatch] = Field(default=None, description="Matching token list record")
    warnings: List[str] = Field(default_factory=list, description="Caveats about how metadata was obtained")

    @property
    def is_on_chain(self) -> bool:
        return self.source == SOURCE_ON_CHAIN


class ValidationResult(_CamelModel):
    model_config = ConfigDict(frozen=True)

    request: ValidationRequest
    is_valid: bool = Field(description="Whether the address is a valid token")
    metadata: Optional[TokenMetadata] = Field(default=None, description="Token metadata when valid")
    error: Optional[ErrorKind] = Field(default=None, description="Error kind when invalid")
    message: Optional[str] = Field(default=None, description="Human readable error detail")

    @model_validator(mode="after")
    def _check_consistency(self) -> "ValidationResult":
        if self.is_valid and (self.metadata is None or self.error is not None):
            raise ValueError("a valid result needs metadata and no error")
        if not self.is_valid and (self.error is None or self.metadata is not None):
            raise ValueError("an invalid result needs an error and no metadata")
        return self

    @classmethod
    def success(cls, request: ValidationRequest, metadata: TokenMetadata) -> "ValidationResult":
        return cls(request=request, is_valid=True, metadata=metadata)

    @classmethod
    def failure(
        cls,
        request: ValidationRequest,
        error: ErrorKind,
        message: Optional[str] = None,
    ) -> "ValidationResult":
        return cls(request=request, is_valid=False, error=error, message=message)


class TokenListCheck(_CamelModel):
    is_in_list: bool = Field(description="Whether any list for the network contains the address")
    list_name: Optional[str] = Field(default=None, description="Name of the first matching list")
    token_info: Optional[Dict[str, Any]] = Field(default=None, description="The list's record for the token")


class ProviderHealth(_CamelModel):
    url: str
    primary: bool = False
    healthy: bool
    response_time_ms: Optional[int] = None
    error: Optional[str] = None


class NetworkHealth(_CamelModel):
    network: NetworkId
    healthy: bool = Field(description="True when at least one provider answered the health probe")
    response_time_ms: Optional[int] = Field(
        default=None,
        description="Latency of the first healthy provider in roster order",
    )
    providers: List[ProviderHealth] = Field(default_factory=list)
    checked_at: datetime = Field(default_factory=utcnow)
