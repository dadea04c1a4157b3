"""JSON-RPC 2.0 over HTTP POST, shared by the EVM and Solana dialects."""

from __future__ import annotations

import itertools
from typing import Any, List, Optional

import httpx

from ...core.errors import RpcError, RpcTimeoutError


class JsonRpcTransport:
    """Issue a single JSON-RPC request against one endpoint.

    A shared ``httpx.AsyncClient`` may be injected (tests pass one built on
    ``httpx.MockTransport``); otherwise a short-lived client is opened per
    call.
    """

    def __init__(self, client: Optional[httpx.AsyncClient] = None) -> None:
        self._client = client
        self._ids = itertools.count(1)

    def build_payload(self, method: str, params: List[Any]) -> dict:
        return {"jsonrpc": "2.0", "id": next(self._ids), "method": method, "params": params}

    async def call(self, url: str, method: str, params: List[Any], timeout: float) -> Any:
        payload = self.build_payload(method, params)
        headers = {"Content-Type": "application/json", "accept": "application/json"}

        try:
            if self._client is not None:
                response = await self._client.post(url, json=payload, headers=headers, timeout=timeout)
            else:
                async with httpx.AsyncClient(timeout=timeout) as client:
                    response = await client.post(url, json=payload, headers=headers)
            response.raise_for_status()
            body = response.json()
        except httpx.TimeoutException as exc:
            raise RpcTimeoutError(f"{method} timed out after {timeout}s", url=url) from exc
        except httpx.HTTPStatusError as exc:
            raise RpcError(f"HTTP {exc.response.status_code} from provider", url=url) from exc
        except httpx.HTTPError as exc:
            raise RpcError(f"Transport error: {exc}", url=url) from exc
        except ValueError as exc:
            raise RpcError("Provider returned a non-JSON body", url=url) from exc

        if not isinstance(body, dict):
            raise RpcError("Unexpected JSON-RPC response shape", url=url)

        error = body.get("error")
        if error:
            if isinstance(error, dict):
                raise RpcError(
                    str(error.get("message") or "JSON-RPC error"),
                    url=url,
                    code=error.get("code"),
                    data=error.get("data"),
                )
            raise RpcError(str(error), url=url)

        if "result" not in body:
            raise RpcError("JSON-RPC response has neither result nor error", url=url)
        return body["result"]

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
