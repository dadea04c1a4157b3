from .models import (
    ENRICHMENT_SOURCE_PREFIX,
    SOURCE_KNOWN_CACHE,
    SOURCE_ON_CHAIN,
    NetworkHealth,
    ProviderHealth,
    TokenListCheck,
    TokenListMatch,
    TokenMetadata,
    TokenStandard,
    ValidationRequest,
    ValidationResult,
    enrichment_source,
)

__all__ = [
    "ENRICHMENT_SOURCE_PREFIX",
    "SOURCE_KNOWN_CACHE",
    "SOURCE_ON_CHAIN",
    "NetworkHealth",
    "ProviderHealth",
    "TokenListCheck",
    "TokenListMatch",
    "TokenMetadata",
    "TokenStandard",
    "ValidationRequest",
    "ValidationResult",
    "enrichment_source",
]
