import json

import httpx
import pytest

from tokencheck.core.errors import RpcError, RpcTimeoutError
from tokencheck.providers.rpc import JsonRpcTransport


RPC_URL = "https://rpc.example"


def _transport(handler) -> JsonRpcTransport:
    return JsonRpcTransport(client=httpx.AsyncClient(transport=httpx.MockTransport(handler)))


@pytest.mark.asyncio
async def test_posts_json_rpc_envelope():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(json.loads(request.content))
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": 1, "result": "0x10"})

    transport = _transport(handler)
    params = [{"to": "0x833589fcd6edb6e08f4c7c32d4f71b54bda02913", "data": "0x313ce567"}, "latest"]

    assert await transport.call(RPC_URL, "eth_call", params, 5.0) == "0x10"
    assert await transport.call(RPC_URL, "eth_blockNumber", [], 5.0) == "0x10"

    assert seen[0]["jsonrpc"] == "2.0"
    assert seen[0]["method"] == "eth_call"
    assert seen[0]["params"] == params
    assert seen[1]["id"] > seen[0]["id"]
    await transport.aclose()


@pytest.mark.asyncio
async def test_error_payload_raises_with_code():
    def handler(request):
        return httpx.Response(
            200,
            json={"jsonrpc": "2.0", "id": 1, "error": {"code": 3, "message": "execution reverted", "data": "0x"}},
        )

    with pytest.raises(RpcError) as exc_info:
        await _transport(handler).call(RPC_URL, "eth_call", [], 5.0)

    assert exc_info.value.code == 3
    assert exc_info.value.is_execution_reverted
    assert exc_info.value.url == RPC_URL


@pytest.mark.asyncio
async def test_http_status_error():
    def handler(request):
        return httpx.Response(429, text="Too Many Requests")

    with pytest.raises(RpcError) as exc_info:
        await _transport(handler).call(RPC_URL, "getHealth", [], 5.0)

    assert "429" in exc_info.value.message
    assert not exc_info.value.is_execution_reverted


@pytest.mark.asyncio
async def test_timeout_maps_to_rpc_timeout():
    def handler(request):
        raise httpx.ReadTimeout("slow", request=request)

    with pytest.raises(RpcTimeoutError):
        await _transport(handler).call(RPC_URL, "getHealth", [], 0.1)


@pytest.mark.asyncio
async def test_non_json_body():
    def handler(request):
        return httpx.Response(200, text="<html>gateway</html>")

    with pytest.raises(RpcError):
        await _transport(handler).call(RPC_URL, "getHealth", [], 5.0)


@pytest.mark.asyncio
async def test_missing_result():
    def handler(request):
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": 1})

    with pytest.raises(RpcError):
        await _transport(handler).call(RPC_URL, "getHealth", [], 5.0)


@pytest.mark.asyncio
async def test_null_result_is_returned():
    def handler(request):
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": 1, "result": None})

    assert await _transport(handler).call(RPC_URL, "eth_call", [], 5.0) is None
