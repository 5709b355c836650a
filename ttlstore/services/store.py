"""In-memory key/value store with timer-driven expiration.

Every entry owns one pending timer. ``put`` is the only operation that
starts a timer; ``remove`` and the timer share one eviction routine, the only
one that runs the eviction callback, so each entry is reported once.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable

from ttlstore.services.keys import PREFIX, normalize
from ttlstore.services.scheduler import AsyncioScheduler, Scheduler, TimerHandle

if TYPE_CHECKING:
    from ttlstore.config import Settings

log = logging.getLogger(__name__)

DEFAULT_TTL = 60 * 1000  # milliseconds

EvictCallback = Callable[[Any, Any], None]


def _noop(key: Any, value: Any) -> None:
    pass


def _valid_ttl(ttl: Any) -> bool:
    if isinstance(ttl, bool) or not isinstance(ttl, (int, float)):
        return False
    return ttl > 0


@dataclass(slots=True)
class Entry:
    handle: TimerHandle
    value: Any
    callback: EvictCallback


class TTLStore:
    """Cache whose entries expire ``ttl`` milliseconds after their last put."""

    def __init__(
        self,
        default_ttl: int | None = None,
        *,
        scheduler: Scheduler | None = None,
        prefix: str = PREFIX,
    ) -> None:
        self.default_ttl = default_ttl if _valid_ttl(default_ttl) else DEFAULT_TTL
        self.prefix = prefix
        self._scheduler = scheduler or AsyncioScheduler()
        self._entries: dict[str, Entry] = {}

    @classmethod
    def from_settings(cls, settings: Settings, scheduler: Scheduler | None = None) -> TTLStore:
        return cls(settings.default_ttl, scheduler=scheduler, prefix=settings.key_prefix)

    def _resolve_ttl(self, ttl: Any) -> float:
        if _valid_ttl(ttl):
            return ttl
        if _valid_ttl(self.default_ttl):
            return self.default_ttl
        log.warning("Invalid default_ttl %r, using %d ms", self.default_ttl, DEFAULT_TTL)
        return DEFAULT_TTL

    def put(
        self,
        key: Any,
        value: Any,
        ttl: int | None = None,
        callback: EvictCallback | None = None,
    ) -> None:
        """Store ``value`` under ``key``, replacing any previous entry and its timer.

        The replaced entry's callback is dropped without being called.
        """
        ttl_ms = self._resolve_ttl(ttl)
        if not callable(callback):
            callback = _noop
        nkey = normalize(key, self.prefix)

        # Bind the normalized key now so mutating `key` later cannot orphan the entry.
        # Schedule first; a failed call leaves the old entry and its timer as they were.
        handle = self._scheduler.call_later(ttl_ms / 1000.0, lambda: self._evict(nkey, key))

        previous = self._entries.get(nkey)
        if previous is not None:
            previous.handle.cancel()
        self._entries[nkey] = Entry(handle=handle, value=value, callback=callback)
        log.debug("put %s ttl=%sms", nkey, ttl_ms)

    def get(self, key: Any, default: Any = None) -> Any:
        """Return the cached value, or ``default`` if absent. Does not extend the TTL."""
        entry = self._entries.get(normalize(key, self.prefix))
        if entry is None:
            return default
        return entry.value

    def contains(self, key: Any) -> bool:
        return normalize(key, self.prefix) in self._entries

    def __contains__(self, key: Any) -> bool:
        return self.contains(key)

    def remove(self, key: Any) -> None:
        """Drop the entry for ``key`` and notify its callback. No-op when absent."""
        self._evict(normalize(key, self.prefix), key)

    def _evict(self, nkey: str, key: Any) -> None:
        entry = self._entries.pop(nkey, None)
        if entry is None:
            return
        entry.handle.cancel()
        log.debug("evict %s", nkey)
        try:
            entry.callback(key, entry.value)
        except Exception:
            log.exception("Eviction callback failed for %s", nkey)

    def clear(self) -> None:
        """Cancel every timer and drop all entries without calling callbacks."""
        for entry in self._entries.values():
            entry.handle.cancel()
        count = len(self._entries)
        self._entries = {}
        log.debug("cleared %d entries", count)

    def size(self) -> int:
        return len(self._entries)

    def __len__(self) -> int:
        return len(self._entries)
