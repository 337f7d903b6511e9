"""HTTP backend: an aiohttp transport and the RemoteStore built on top of it.

Endpoints:
    GET    /category
    GET    /memo?category_id={id}
    GET    /memo/{id}
    POST   /memo
    PUT    /memo/{id}
    DELETE /memo/{id}
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any

import aiohttp

from memoapp.errors import FailureKind, Ok, RemoteFailure, Result
from memoapp.models import Category, Identifier, Memo, decode_list

logger = logging.getLogger(__name__)


class HttpTransport:
    """Thin JSON-over-HTTP client. Every call returns Ok(payload) or a failure.

    The aiohttp session is created lazily on first use so the transport can be
    built outside a running event loop.
    """

    def __init__(self, base_url: str, timeout: float = 30.0) -> None:
        self.base_url = base_url.strip().rstrip("/")
        self.timeout = timeout
        self._session: aiohttp.ClientSession | None = None

    def _url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.timeout),
                headers={"Accept": "application/json"},
            )
        return self._session

    async def request(
        self,
        method: str,
        path: str,
        *,
        body: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> Result[Any]:
        url = self._url(path)
        session = self._get_session()
        try:
            async with session.request(method, url, json=body, params=params) as resp:
                raw = await resp.read()
                if not 200 <= resp.status < 300:
                    return RemoteFailure(
                        FailureKind.STATUS,
                        f"{method} {path} returned {resp.status}",
                        status=resp.status,
                    )
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            return RemoteFailure(FailureKind.TRANSPORT, f"{method} {path}: {e!r}")

        if not raw.strip():
            return Ok(None)
        try:
            return Ok(json.loads(raw.decode("utf-8")))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            return RemoteFailure(
                FailureKind.DECODE, f"{method} {path}: non-JSON body ({e})", status=resp.status
            )

    async def get(self, path: str, params: dict[str, Any] | None = None) -> Result[Any]:
        return await self.request("GET", path, params=params)

    async def post(self, path: str, body: dict[str, Any] | None = None) -> Result[Any]:
        return await self.request("POST", path, body=body)

    async def put(self, path: str, body: dict[str, Any] | None = None) -> Result[Any]:
        return await self.request("PUT", path, body=body)

    async def delete(self, path: str) -> Result[Any]:
        return await self.request("DELETE", path)

    async def close(self) -> None:
        if self._session is not None and not self._session.closed:
            await self._session.close()
        self._session = None


class HttpRemoteStore:
    """RemoteStore over the memo REST API."""

    def __init__(self, transport: HttpTransport) -> None:
        self._transport = transport

    @classmethod
    def from_url(cls, base_url: str, timeout: float = 30.0) -> HttpRemoteStore:
        return cls(HttpTransport(base_url, timeout=timeout))

    async def list_categories(self) -> Result[list[Category]]:
        result = await self._transport.get("/category")
        if isinstance(result, RemoteFailure):
            return result
        return Ok(decode_list(result.value, Category.from_dict))

    async def list_memos(self, category_id: Identifier) -> Result[list[Memo]]:
        result = await self._transport.get("/memo", params={"category_id": str(category_id)})
        if isinstance(result, RemoteFailure):
            return result
        return Ok(decode_list(result.value, lambda raw: Memo.from_dict(raw, category_id)))

    async def get_memo(self, memo_id: Identifier) -> Result[Memo]:
        result = await self._transport.get(f"/memo/{memo_id}")
        if isinstance(result, RemoteFailure):
            return result
        if not isinstance(result.value, dict):
            return RemoteFailure(FailureKind.DECODE, f"memo {memo_id}: expected an object")
        data = dict(result.value)
        # The detail endpoint may omit the id; the request already names it.
        if data.get("id") is None:
            data["id"] = memo_id
        return Ok(Memo.from_dict(data))

    async def create_memo(self, payload: dict[str, Any]) -> Result[Memo]:
        result = await self._transport.post("/memo", payload)
        if isinstance(result, RemoteFailure):
            return result
        memo = Memo.from_dict(result.value, payload.get("category_id"))
        if memo is None:
            return RemoteFailure(FailureKind.DECODE, "created memo has no id")
        return Ok(memo)

    async def update_memo(self, memo_id: Identifier, payload: dict[str, Any]) -> Result[None]:
        result = await self._transport.put(f"/memo/{memo_id}", payload)
        if isinstance(result, RemoteFailure):
            return result
        return Ok(None)

    async def delete_memo(self, memo_id: Identifier) -> Result[None]:
        result = await self._transport.delete(f"/memo/{memo_id}")
        if isinstance(result, RemoteFailure):
            return result
        return Ok(None)

    async def close(self) -> None:
        await self._transport.close()
