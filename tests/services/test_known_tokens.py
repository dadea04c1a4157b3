from tokencheck.core.networks import NetworkId
from tokencheck.services.known_tokens import KnownTokenCache, KnownTokenEntry
from tokencheck.types import TokenStandard


BASE_USDC = "0x833589fCD6eDb6E08f4c7C32D4f71b54bdA02913"
USDC_MINT = "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v"


class TestKnownTokenCache:
    """Seeded lookups and copy-on-write updates."""

    def test_seeded_with_canonical_tokens(self):
        cache = KnownTokenCache()

        assert cache.lookup(USDC_MINT, NetworkId.SOLANA).symbol == "USDC"
        assert cache.lookup(BASE_USDC, NetworkId.BASE).decimals == 6
        assert len(cache.entries(NetworkId.SOLANA)) == 5
        assert len(cache.entries(NetworkId.BASE)) == 4
        assert len(cache.entries(NetworkId.ETHEREUM)) == 4

    def test_evm_lookup_ignores_checksum_case(self):
        cache = KnownTokenCache()

        assert cache.lookup(BASE_USDC.lower(), NetworkId.BASE) is not None
        assert cache.lookup(BASE_USDC.upper().replace("0X", "0x"), NetworkId.BASE) is not None

    def test_solana_lookup_is_case_sensitive(self):
        cache = KnownTokenCache()

        assert cache.lookup(USDC_MINT.lower(), NetworkId.SOLANA) is None

    def test_lookup_is_network_scoped(self):
        cache = KnownTokenCache()

        assert cache.lookup(BASE_USDC, NetworkId.ETHEREUM) is None
        assert cache.lookup(USDC_MINT, NetworkId.SOLANA_DEVNET) is None

    def test_update_replaces_snapshot(self):
        cache = KnownTokenCache(entries=[])
        before = cache._entries
        entry = KnownTokenEntry(NetworkId.BASE, BASE_USDC, "USD Coin", "USDC", 6, TokenStandard.ERC20)

        cache.update(entry)

        assert cache.lookup(BASE_USDC, NetworkId.BASE) == entry
        assert cache._entries is not before
        assert before == {}
        assert len(cache) == 1

    def test_to_metadata_is_known_cache_sourced(self):
        cache = KnownTokenCache()
        entry = cache.lookup(USDC_MINT, NetworkId.SOLANA)

        metadata = cache.to_metadata(entry, USDC_MINT, warnings=["rpc down"])

        assert metadata.source == "known-cache"
        assert metadata.total_supply is None
        assert metadata.is_verified is True
        assert metadata.warnings == ["rpc down"]
        assert metadata.standard is TokenStandard.SPL
