"""Async httpx wrapper that memoizes JSON GET responses."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from ttlstore.config import Settings
from ttlstore.services.scheduler import Scheduler
from ttlstore.services.store import TTLStore

log = logging.getLogger(__name__)


class CachedClient:
    """Async HTTP client whose GET results live in a TTLStore."""

    def __init__(
        self,
        base_url: str,
        store: TTLStore | None = None,
        ttl: int | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = 15.0,
    ) -> None:
        self.store = store if store is not None else TTLStore()
        self.ttl = ttl
        kwargs: dict[str, Any] = {"base_url": base_url, "timeout": timeout}
        if transport is not None:
            kwargs["transport"] = transport
        self._client = httpx.AsyncClient(**kwargs)

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        base_url: str,
        scheduler: Scheduler | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> CachedClient:
        """Build a client whose responses live for ``settings.http_cache_ttl`` ms."""
        store = TTLStore.from_settings(settings, scheduler=scheduler)
        return cls(base_url, store=store, ttl=settings.http_cache_ttl, transport=transport)

    async def close(self) -> None:
        await self._client.aclose()

    @staticmethod
    def _key(path: str, params: dict[str, Any] | None) -> dict[str, Any]:
        return {"path": path, "params": params or {}}

    async def get_json(self, path: str, params: dict[str, Any] | None = None) -> Any:
        """GET ``path`` and return decoded JSON, served from cache when fresh."""
        key = self._key(path, params)
        if key in self.store:
            return self.store.get(key)
        response = await self._client.get(path, params=params)
        response.raise_for_status()
        data = response.json()
        self.store.put(key, data, ttl=self.ttl)
        log.debug("cached GET %s", path)
        return data

    def invalidate(self, path: str, params: dict[str, Any] | None = None) -> None:
        self.store.remove(self._key(path, params))
