import pytest

from tokencheck.core.errors import InvalidMetadataError, NotSplMintError
from tokencheck.core.networks import NetworkId
from tokencheck.providers.rpc import ProviderRoster, RpcResilienceLayer
from tokencheck.services.known_tokens import KnownTokenCache
from tokencheck.services.solana_reader import (
    PLACEHOLDER_NAME,
    PLACEHOLDER_SYMBOL,
    SPL_TOKEN_PROGRAM_ID,
    SolanaMintReader,
    has_placeholder_names,
)
from tokencheck.types import TokenStandard


USDC_MINT = "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v"
WSOL_MINT = "So11111111111111111111111111111111111111112"
UNKNOWN_MINT = "DezXAZ8z7PnrnRJjz3wXBoRgixCa6xjnB7YaB1pPB263"


def mint_account(decimals=6, supply="5000000", owner=SPL_TOKEN_PROGRAM_ID, account_type="mint"):
    return {
        "context": {"slot": 1},
        "value": {
            "owner": owner,
            "lamports": 1461600,
            "executable": False,
            "data": {
                "program": "spl-token",
                "parsed": {
                    "type": account_type,
                    "info": {
                        "decimals": decimals,
                        "supply": supply,
                        "isInitialized": True,
                        "mintAuthority": "BJE5MMbqXjVwjAF7oxwPYXnTXDyspzZyt4vwenNw5ruG",
                        "freezeAuthority": None,
                    },
                },
            },
        },
    }


class _SolanaNode:
    def __init__(self, result):
        self.result = result
        self.calls = []

    async def call(self, url, method, params, timeout):
        self.calls.append((method, params))
        return self.result


def _reader(node, known_tokens=None):
    roster = ProviderRoster({NetworkId.SOLANA: ["https://sol.example"], NetworkId.SOLANA_DEVNET: ["https://dev.example"]})
    rpc = RpcResilienceLayer(node, max_retries=1)
    return SolanaMintReader(roster, rpc, known_tokens or KnownTokenCache())


@pytest.mark.asyncio
async def test_known_mint_gets_cached_names():
    node = _SolanaNode(mint_account())

    metadata = await _reader(node).read(USDC_MINT, NetworkId.SOLANA)

    assert node.calls == [("getAccountInfo", [USDC_MINT, {"encoding": "jsonParsed"}])]
    assert metadata.symbol == "USDC"
    assert metadata.decimals == 6
    assert metadata.total_supply == "5000000"
    assert metadata.standard is TokenStandard.SPL
    assert metadata.source == "on-chain"
    assert metadata.mint_authority == "BJE5MMbqXjVwjAF7oxwPYXnTXDyspzZyt4vwenNw5ruG"
    assert metadata.freeze_authority is None


@pytest.mark.asyncio
async def test_unknown_mint_gets_placeholders():
    metadata = await _reader(_SolanaNode(mint_account(decimals=5))).read(UNKNOWN_MINT, NetworkId.SOLANA)

    assert metadata.name == PLACEHOLDER_NAME
    assert metadata.symbol == PLACEHOLDER_SYMBOL
    assert has_placeholder_names(metadata)


@pytest.mark.asyncio
async def test_wrapped_sol_is_native():
    metadata = await _reader(_SolanaNode(mint_account(decimals=9))).read(WSOL_MINT, NetworkId.SOLANA)

    assert metadata.standard is TokenStandard.NATIVE
    assert metadata.symbol == "SOL"


@pytest.mark.asyncio
async def test_missing_account_is_not_spl_mint():
    with pytest.raises(NotSplMintError):
        await _reader(_SolanaNode({"context": {"slot": 1}, "value": None})).read(UNKNOWN_MINT, NetworkId.SOLANA)


@pytest.mark.asyncio
async def test_wrong_owner_is_not_spl_mint():
    node = _SolanaNode(mint_account(owner="11111111111111111111111111111111"))

    with pytest.raises(NotSplMintError):
        await _reader(node).read(UNKNOWN_MINT, NetworkId.SOLANA)


@pytest.mark.asyncio
async def test_token_account_is_not_spl_mint():
    with pytest.raises(NotSplMintError):
        await _reader(_SolanaNode(mint_account(account_type="account"))).read(UNKNOWN_MINT, NetworkId.SOLANA)


@pytest.mark.asyncio
async def test_decimals_out_of_range_is_invalid_metadata():
    with pytest.raises(InvalidMetadataError):
        await _reader(_SolanaNode(mint_account(decimals=19))).read(UNKNOWN_MINT, NetworkId.SOLANA)


@pytest.mark.asyncio
async def test_devnet_does_not_use_mainnet_names():
    metadata = await _reader(_SolanaNode(mint_account())).read(USDC_MINT, NetworkId.SOLANA_DEVNET)

    assert metadata.network is NetworkId.SOLANA_DEVNET
    assert metadata.symbol == PLACEHOLDER_SYMBOL
