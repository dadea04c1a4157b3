"""
Tests for the off-chain metadata resolvers (Jupiter, DexScreener, CoinGecko).

HTTP is served by httpx.MockTransport; nothing touches the network.
"""

import httpx
import pytest

from tokencheck.core.networks import NetworkId
from tokencheck.providers import CoinGeckoResolver, DexScreenerResolver, JupiterTokenListResolver


BASE_USDC = "0x833589fCD6eDb6E08f4c7C32D4f71b54bdA02913"
BONK_MINT = "DezXAZ8z7PnrnRJjz3wXBoRgixCa6xjnB7YaB1pPB263"


def _client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


# =============================================================================
# Jupiter
# =============================================================================


@pytest.mark.asyncio
async def test_jupiter_resolves_from_cached_list():
    requests = []

    def handler(request):
        requests.append(str(request.url))
        return httpx.Response(
            200,
            json=[
                {
                    "address": BONK_MINT,
                    "name": "Bonk",
                    "symbol": "Bonk",
                    "decimals": 5,
                    "logoURI": "https://img.example/bonk.png",
                    "tags": ["community"],
                    "extensions": {"coingeckoId": "bonk"},
                }
            ],
        )

    resolver = JupiterTokenListResolver("https://tokens.example/strict", client=_client(handler))

    token = await resolver.resolve(BONK_MINT, NetworkId.SOLANA)
    assert token.name == "Bonk"
    assert token.decimals == 5
    assert token.logo_uri == "https://img.example/bonk.png"
    assert token.extra["coingecko_id"] == "bonk"

    assert await resolver.resolve("So11111111111111111111111111111111111111112", NetworkId.SOLANA) is None
    assert len(requests) == 1


@pytest.mark.asyncio
async def test_jupiter_keeps_stale_list_when_refresh_fails():
    calls = {"count": 0}

    def handler(request):
        calls["count"] += 1
        if calls["count"] == 1:
            return httpx.Response(200, json={"tokens": [{"address": BONK_MINT, "name": "Bonk", "symbol": "Bonk", "decimals": 5}]})
        return httpx.Response(500)

    resolver = JupiterTokenListResolver("https://tokens.example/strict", cache_ttl_seconds=0, client=_client(handler))

    assert (await resolver.resolve(BONK_MINT, NetworkId.SOLANA)).symbol == "Bonk"
    assert (await resolver.resolve(BONK_MINT, NetworkId.SOLANA)).symbol == "Bonk"
    assert calls["count"] == 2


@pytest.mark.asyncio
async def test_jupiter_first_load_failure_raises():
    resolver = JupiterTokenListResolver(
        "https://tokens.example/strict",
        client=_client(lambda request: httpx.Response(503)),
    )

    with pytest.raises(httpx.HTTPStatusError):
        await resolver.resolve(BONK_MINT, NetworkId.SOLANA)


def test_jupiter_supports_mainnet_only():
    resolver = JupiterTokenListResolver("https://tokens.example/strict")
    assert resolver.supports(NetworkId.SOLANA)
    assert not resolver.supports(NetworkId.SOLANA_DEVNET)
    assert not resolver.supports(NetworkId.BASE)


# =============================================================================
# DexScreener
# =============================================================================


@pytest.mark.asyncio
async def test_dexscreener_picks_most_liquid_matching_pair():
    seen = []

    def handler(request):
        seen.append(request.url.path)
        return httpx.Response(
            200,
            json={
                "pairs": [
                    {
                        "chainId": "ethereum",
                        "baseToken": {"address": BASE_USDC, "name": "Wrong Chain", "symbol": "WRONG"},
                        "liquidity": {"usd": 10_000_000},
                    },
                    {
                        "chainId": "base",
                        "baseToken": {"address": "0x4200000000000000000000000000000000000006", "name": "Wrapped Ether", "symbol": "WETH"},
                        "quoteToken": {"address": BASE_USDC, "name": "USD Coin", "symbol": "USDC"},
                        "liquidity": {"usd": 5_000_000},
                    },
                    {
                        "chainId": "base",
                        "pairAddress": "0xsmall",
                        "baseToken": {"address": BASE_USDC.lower(), "name": "USD Coin (small)", "symbol": "USDC"},
                        "liquidity": {"usd": 1_000},
                    },
                    {
                        "chainId": "base",
                        "pairAddress": "0xbig",
                        "baseToken": {"address": BASE_USDC.lower(), "name": "USD Coin", "symbol": "USDC"},
                        "liquidity": {"usd": 2_000_000},
                        "info": {"imageUrl": "https://img.example/usdc.png"},
                    },
                ]
            },
        )

    resolver = DexScreenerResolver("https://ds.example", client=_client(handler))
    token = await resolver.resolve(BASE_USDC, NetworkId.BASE)

    assert seen == [f"/latest/dex/tokens/{BASE_USDC}"]
    assert token.name == "USD Coin"
    assert token.symbol == "USDC"
    assert token.decimals is None
    assert token.is_complete is False
    assert token.extra["pair_address"] == "0xbig"
    assert token.logo_uri == "https://img.example/usdc.png"


@pytest.mark.asyncio
async def test_dexscreener_no_pairs():
    resolver = DexScreenerResolver("https://ds.example", client=_client(lambda r: httpx.Response(200, json={"pairs": None})))

    assert await resolver.resolve(BASE_USDC, NetworkId.BASE) is None


def test_dexscreener_skips_testnets():
    resolver = DexScreenerResolver("https://ds.example")
    assert resolver.supports(NetworkId.BASE)
    assert resolver.supports(NetworkId.SOLANA)
    assert not resolver.supports(NetworkId.BASE_TESTNET)


# =============================================================================
# CoinGecko
# =============================================================================


@pytest.mark.asyncio
async def test_coingecko_contract_lookup():
    seen = []

    def handler(request):
        seen.append((request.url.path, request.headers.get("X-CG-Demo-API-Key")))
        return httpx.Response(
            200,
            json={
                "id": "usd-coin",
                "symbol": "usdc",
                "name": "USDC",
                "detail_platforms": {"base": {"decimal_place": 6, "contract_address": BASE_USDC.lower()}},
                "image": {"small": "https://img.example/usdc-small.png"},
            },
        )

    resolver = CoinGeckoResolver("demo-key", "https://cg.example/api/v3", client=_client(handler))
    token = await resolver.resolve(BASE_USDC, NetworkId.BASE)

    assert seen == [(f"/api/v3/coins/base/contract/{BASE_USDC}", "demo-key")]
    assert token.symbol == "USDC"
    assert token.decimals == 6
    assert token.is_complete is True
    assert token.extra["coingecko_id"] == "usd-coin"


@pytest.mark.asyncio
async def test_coingecko_not_found_returns_none():
    resolver = CoinGeckoResolver("", "https://cg.example/api/v3", client=_client(lambda r: httpx.Response(404)))

    assert await resolver.resolve(BASE_USDC, NetworkId.BASE) is None


@pytest.mark.asyncio
async def test_coingecko_server_error_raises():
    resolver = CoinGeckoResolver("", "https://cg.example/api/v3", client=_client(lambda r: httpx.Response(500)))

    with pytest.raises(httpx.HTTPStatusError):
        await resolver.resolve(BASE_USDC, NetworkId.BASE)


def test_coingecko_without_key_sends_no_key_header():
    resolver = CoinGeckoResolver("", "https://cg.example/api/v3")
    assert "X-CG-Demo-API-Key" not in resolver._build_headers()
    assert not resolver.supports(NetworkId.SOLANA_DEVNET)
