from .batch import BatchConfig, BatchCoordinator
from .enrichment import EnrichmentReport, MetadataEnrichmentChain
from .evm_reader import EvmTokenReader
from .known_tokens import KnownTokenCache, KnownTokenEntry
from .solana_reader import SolanaMintReader
from .token_lists import TokenListCrossReferencer
from .validation import TokenValidationService, get_token_validation_service

__all__ = [
    "BatchConfig",
    "BatchCoordinator",
    "EnrichmentReport",
    "MetadataEnrichmentChain",
    "EvmTokenReader",
    "KnownTokenCache",
    "KnownTokenEntry",
    "SolanaMintReader",
    "TokenListCrossReferencer",
    "TokenValidationService",
    "get_token_validation_service",
]
