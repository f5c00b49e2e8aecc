"""
In-memory cache for text-generation responses.

One cache is created per run and handed to the client stack. Entries are never
persisted. Neither class guards its state with a lock: they assume the
single-threaded, sequential execution model of the driver and are not safe to
share between concurrent workers.
"""

import logging
from collections import OrderedDict
from typing import Any, Optional

from .models import LLMRequest

log = logging.getLogger(__name__)


class ResponseCache:
    """Keyed store of request -> decoded response, optionally bounded (LRU)."""

    def __init__(self, max_entries: Optional[int] = None):
        if max_entries is not None and max_entries < 1:
            raise ValueError("max_entries must be positive or None")
        self.max_entries = max_entries
        self._entries: "OrderedDict[str, Any]" = OrderedDict()

    @staticmethod
    def key_for(request: LLMRequest) -> str:
        return request.cache_key()

    def has(self, request: LLMRequest) -> bool:
        return self.key_for(request) in self._entries

    def get(self, request: LLMRequest) -> Any:
        key = self.key_for(request)
        value = self._entries[key]
        self._entries.move_to_end(key)
        return value

    def set(self, request: LLMRequest, value: Any) -> None:
        key = self.key_for(request)
        self._entries[key] = value
        self._entries.move_to_end(key)
        if self.max_entries is not None and len(self._entries) > self.max_entries:
            self._entries.popitem(last=False)
            log.debug(f"Cache full ({self.max_entries}), evicted oldest entry.")

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


class CachedTextClient:
    """Memoizes successful responses of the wrapped client. Failures are not stored."""

    def __init__(self, inner, cache: Optional[ResponseCache] = None):
        self.inner = inner
        self.cache = cache if cache is not None else ResponseCache()

    async def request(self, request: LLMRequest) -> Any:
        if self.cache.has(request):
            log.debug(f"Cache HIT for request: {request.user_input[:80]}")
            return self.cache.get(request)
        log.debug(f"Cache MISS for request: {request.user_input[:80]}")
        value = await self.inner.request(request)
        self.cache.set(request, value)
        return value
