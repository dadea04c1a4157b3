import pytest

from tokencheck.config import Settings
from tokencheck.core.errors import RpcError
from tokencheck.core.networks import NetworkId
from tokencheck.providers.rpc import ProviderRoster


class _ProbeTransport:
    def __init__(self, healthy_urls):
        self.healthy_urls = set(healthy_urls)
        self.calls = []

    async def call(self, url, method, params, timeout):
        self.calls.append((url, method))
        if url in self.healthy_urls:
            return "ok"
        raise RpcError("HTTP 503 from provider", url=url)


def test_from_settings_builds_solana_fallbacks():
    roster = ProviderRoster.from_settings(Settings(_env_file=None))

    solana = roster.providers(NetworkId.SOLANA)
    assert len(solana) >= 5
    assert solana[0].primary is True
    assert all(not endpoint.primary for endpoint in solana[1:])
    assert len(roster.providers(NetworkId.BASE)) == 1
    assert roster.primary_url(NetworkId.BASE) == Settings(_env_file=None).base_rpc_url


def test_duplicate_urls_are_dropped():
    roster = ProviderRoster({NetworkId.SOLANA: ["https://a", "https://b", "https://a", ""]})

    assert [e.url for e in roster.providers(NetworkId.SOLANA)] == ["https://a", "https://b"]


def test_providers_returns_copies():
    roster = ProviderRoster({NetworkId.BASE: ["https://a"]})

    snapshot = roster.providers(NetworkId.BASE)
    snapshot[0].last_known_healthy = False
    snapshot.append(snapshot[0])

    assert roster.providers(NetworkId.BASE)[0].last_known_healthy is None
    assert len(roster.providers(NetworkId.BASE)) == 1


@pytest.mark.asyncio
async def test_probe_uses_family_health_method_and_records_outcome():
    transport = _ProbeTransport(healthy_urls=["https://sol-a"])
    roster = ProviderRoster(
        {NetworkId.SOLANA: ["https://sol-a", "https://sol-b"], NetworkId.BASE: ["https://base"]},
        transport=transport,
    )

    healthy, elapsed_ms, error = await roster.probe(roster.providers(NetworkId.SOLANA)[0])
    assert healthy is True
    assert elapsed_ms is not None
    assert error is None

    healthy, elapsed_ms, error = await roster.probe(roster.providers(NetworkId.SOLANA)[1])
    assert healthy is False
    assert elapsed_ms is None
    assert "503" in error

    await roster.probe(roster.providers(NetworkId.BASE)[0])

    assert transport.calls == [
        ("https://sol-a", "getHealth"),
        ("https://sol-b", "getHealth"),
        ("https://base", "eth_blockNumber"),
    ]
    recorded = roster.providers(NetworkId.SOLANA)
    assert recorded[0].last_known_healthy is True
    assert recorded[1].last_known_healthy is False
