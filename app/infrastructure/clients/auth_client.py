# app/infrastructure/clients/auth_client.py
from __future__ import annotations
import logging
import time
from typing import Any, Dict, Optional

import httpx

logger = logging.getLogger("auth")

ME_PATH = "/api/v1/users/current-user"


async def _log_request(request: httpx.Request) -> None:
    request.extensions["started_at"] = time.perf_counter()
    logger.debug("HTTPX request: %s %s", request.method, request.url)


async def _log_response(response: httpx.Response) -> None:
    request = response.request
    started = request.extensions.get("started_at")
    elapsed = f"{(time.perf_counter() - started) * 1000:.1f}ms" if started else "?"
    await response.aread()
    logger.debug(
        "HTTPX response: %s %s -> %s (%s) %s",
        request.method, request.url, response.status_code, elapsed, response.text[:200],
    )


class AuthClient:
    """Client fino para o serviço de identidade: resolve o usuário dono de um token."""
    def __init__(self, base_url: str, timeout_seconds: int = 5, cache_ttl: int = 30, me_path: str = ME_PATH):
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout_seconds
        self._cache_ttl = cache_ttl
        self._me_path = me_path
        self._client: Optional[httpx.AsyncClient] = None
        # cache em memória do /me (token -> exp, payload)
        self._cache: Dict[str, tuple[float, Dict[str, Any]]] = {}

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self._base_url,
                timeout=self._timeout,
                event_hooks={"request": [_log_request], "response": [_log_response]},
            )
        return self._client

    async def me(self, token: str) -> Dict[str, Any]:
        now = time.time()
        cached = self._cache.get(token)
        if cached and cached[0] > now:
            return cached[1]

        client = await self._get_client()
        resp = await client.get(self._me_path, headers={"Authorization": f"Bearer {token}"})
        resp.raise_for_status()
        data = resp.json()
        # alguns serviços embrulham o usuário em {"data": {...}}
        if isinstance(data, dict) and isinstance(data.get("data"), dict):
            data = data["data"]
        self._cache[token] = (now + self._cache_ttl, data)
        return data

    async def aclose(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None
        self._cache.clear()
