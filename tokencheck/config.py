import os

from pathlib import Path
from typing import Any, List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


BASE_DIR = Path(__file__).resolve().parents[1]


DEFAULT_SOLANA_FALLBACK_RPC_URLS: List[str] = [
    "https://solana-api.projectserum.com",
    "https://rpc.ankr.com/solana",
    "https://solana-mainnet.g.alchemy.com/v2/demo",
    "https://mainnet.helius-rpc.com/?api-key=public",
    "https://solana.public-rpc.com",
]

DEFAULT_SOLANA_DEVNET_FALLBACK_RPC_URLS: List[str] = [
    "https://rpc.ankr.com/solana_devnet",
    "https://devnet.helius-rpc.com/?api-key=public",
    "https://solana-devnet.g.alchemy.com/v2/demo",
    "https://devnet.sonic.game",
]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=BASE_DIR / ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    def model_post_init(self, __context: Any) -> None:
        """Ensure we pick up legacy environment variable aliases."""

        super().model_post_init(__context)

        if "BASE_RPC_URL" not in os.environ:
            fallback = os.getenv("RPC_URL") or os.getenv("ETH_RPC_URL")
            if fallback:
                object.__setattr__(self, "base_rpc_url", fallback)

        if "SOLANA_DEVNET_RPC_URL" not in os.environ:
            fallback = os.getenv("SOLANA_DEVNET_RPC")
            if fallback:
                object.__setattr__(self, "solana_devnet_rpc_url", fallback)

    log_level: str = Field(default="INFO", description="Logging level")

    # Primary RPC endpoints
    base_rpc_url: str = Field(default="https://mainnet.base.org", description="Base mainnet JSON-RPC endpoint")
    ethereum_rpc_url: str = Field(default="https://eth.llamarpc.com", description="Ethereum mainnet JSON-RPC endpoint")
    base_testnet_rpc_url: str = Field(default="https://sepolia.base.org", description="Base Sepolia JSON-RPC endpoint")
    solana_rpc_url: str = Field(
        default="https://api.mainnet-beta.solana.com",
        description="Primary Solana mainnet JSON-RPC endpoint",
    )
    solana_devnet_rpc_url: str = Field(
        default="https://api.devnet.solana.com",
        description="Primary Solana devnet JSON-RPC endpoint",
    )

    # Public fallbacks tried after the primary (Solana only)
    solana_fallback_rpc_urls: List[str] = Field(
        default_factory=lambda: list(DEFAULT_SOLANA_FALLBACK_RPC_URLS),
        description="Public Solana mainnet endpoints tried in order after the primary",
    )
    solana_devnet_fallback_rpc_urls: List[str] = Field(
        default_factory=lambda: list(DEFAULT_SOLANA_DEVNET_FALLBACK_RPC_URLS),
        description="Public Solana devnet endpoints tried in order after the primary",
    )

    # RPC resilience
    rpc_timeout_seconds: float = Field(default=10.0, gt=0, description="Per-provider RPC timeout")
    rpc_max_retries: int = Field(default=3, ge=1, description="Full roster sweeps before giving up")
    rpc_retry_delay_seconds: float = Field(
        default=1.0,
        ge=0,
        description="Base delay between roster sweeps (multiplied by the attempt number)",
    )

    # Enrichment providers
    enable_jupiter: bool = Field(default=True, description="Enable the Jupiter token registry resolver")
    enable_dexscreener: bool = Field(default=True, description="Enable the DexScreener pairs resolver")
    enable_coingecko: bool = Field(default=True, description="Enable the CoinGecko contract resolver")
    coingecko_api_key: str = Field(default="", description="Coingecko API key")
    enrichment_timeout_seconds: float = Field(default=5.0, gt=0, description="Per-resolver timeout")
    jupiter_token_list_url: str = Field(
        default="https://token.jup.ag/strict",
        description="Jupiter strict token list document",
    )
    dexscreener_base_url: str = Field(
        default="https://api.dexscreener.com",
        description="DexScreener API base URL",
    )
    coingecko_base_url: str = Field(
        default="https://api.coingecko.com/api/v3",
        description="CoinGecko API base URL",
    )

    # Token list cross-referencing
    enable_token_list_check: bool = Field(
        default=True,
        description="Cross-reference validated tokens against published token lists",
    )
    token_list_timeout_seconds: float = Field(default=5.0, gt=0, description="Token list fetch timeout")
    token_list_cache_ttl_seconds: int = Field(
        default=3600,
        ge=0,
        description="TTL for downloaded token list documents (default: 1 hour)",
    )
    token_list_failure_backoff_seconds: float = Field(
        default=60.0,
        ge=0,
        description="How long a failed token list download is remembered before retrying",
    )

    # Batch pacing
    evm_batch_size: int = Field(default=5, ge=1, description="Concurrent validations per EVM chunk")
    solana_batch_size: int = Field(default=3, ge=1, description="Concurrent validations per Solana chunk")
    evm_batch_delay_seconds: float = Field(default=0.5, ge=0, description="Pause between EVM chunks")
    solana_batch_delay_seconds: float = Field(default=1.0, ge=0, description="Pause between Solana chunks")

    # Known tokens
    known_token_fast_path: bool = Field(
        default=True,
        description="Answer known Solana mints from the local cache before touching RPC",
    )

    @property
    def has_coingecko_key(self) -> bool:
        return bool(self.coingecko_api_key)


# Global settings instance
settings = Settings()
