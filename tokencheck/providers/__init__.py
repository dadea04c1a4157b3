from .base import MetadataResolver, ResolvedToken
from .coingecko import CoinGeckoResolver
from .dexscreener import DexScreenerResolver
from .jupiter import JupiterTokenListResolver

__all__ = [
    "MetadataResolver",
    "ResolvedToken",
    "CoinGeckoResolver",
    "DexScreenerResolver",
    "JupiterTokenListResolver",
]
