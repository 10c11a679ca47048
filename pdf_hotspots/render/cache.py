"""Bounded, single-flight cache of rendered page images.

The cache runs on one asyncio event loop. The rasterizer call is the only
suspension point; every check-then-mutate step on cache state happens between
awaits and therefore cannot interleave with another request.
"""

from __future__ import annotations

import asyncio
import logging
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from ..exceptions import InvalidConfigError
from .rasterizers import Rasterizer

LOGGER = logging.getLogger(__name__)

CacheListener = Callable[["CacheEvent"], None]


@dataclass(frozen=True)
class PageRenderCacheConfig:
    """
    Render cache settings.

    Attributes:
        max_cached_pages: Number of page images kept in memory (>= 1)
        render_dpi: Rasterization resolution (> 0)
        pre_render_adjacent: Whether :meth:`PageRenderCache.pre_render_around` does anything
        pre_render_count: Pages to prefetch on each side of the current page (>= 0)
    """
    max_cached_pages: int = 5
    render_dpi: float = 150.0
    pre_render_adjacent: bool = True
    pre_render_count: int = 1

    def __post_init__(self) -> None:
        if self.max_cached_pages < 1:
            raise InvalidConfigError(f"max_cached_pages must be >= 1, got {self.max_cached_pages}")
        if self.render_dpi <= 0:
            raise InvalidConfigError(f"render_dpi must be > 0, got {self.render_dpi}")
        if self.pre_render_count < 0:
            raise InvalidConfigError(f"pre_render_count must be >= 0, got {self.pre_render_count}")


DEFAULT_CACHE_CONFIG = PageRenderCacheConfig()
LOW_MEMORY_CACHE_CONFIG = PageRenderCacheConfig(
    max_cached_pages=3,
    render_dpi=100.0,
    pre_render_adjacent=False,
    pre_render_count=0,
)
HIGH_QUALITY_CACHE_CONFIG = PageRenderCacheConfig(
    max_cached_pages=10,
    render_dpi=300.0,
    pre_render_adjacent=True,
    pre_render_count=2,
)


@dataclass(frozen=True)
class CacheEvent:
    """State change notification: ``cached``, ``evicted``, ``cleared`` or ``disposed``."""

    kind: str
    page_index: Optional[int] = None


class PageRenderCache:
    """
    LRU cache of rendered page images with request de-duplication.

    Images handed out remain owned by the cache: callers must not release
    them, and must not use them after they are evicted, cleared or disposed.
    """

    def __init__(
        self,
        pdf_bytes: bytes,
        page_count: int,
        rasterizer: Rasterizer,
        config: PageRenderCacheConfig = DEFAULT_CACHE_CONFIG,
    ) -> None:
        self.pdf_bytes = bytes(pdf_bytes)
        self.page_count = page_count
        self.rasterizer = rasterizer
        self.config = config

        self._cache: "OrderedDict[int, Any]" = OrderedDict()
        self._rendering: Dict[int, asyncio.Future] = {}
        self._listeners: List[CacheListener] = []
        self._disposed = False
        self._render_calls = 0
        self._render_failures = 0

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    @property
    def cached_count(self) -> int:
        return len(self._cache)

    @property
    def cached_pages(self) -> List[int]:
        """Cached page indices, least recently used first."""
        return list(self._cache)

    @property
    def disposed(self) -> bool:
        return self._disposed

    def get_page(self, page_index: int) -> Any:
        """Return the cached image and mark it most recently used, or ``None``."""
        image = self._cache.get(page_index)
        if image is None:
            return None
        self._cache.move_to_end(page_index)
        return image

    def has_page(self, page_index: int) -> bool:
        return page_index in self._cache

    def is_rendering(self, page_index: int) -> bool:
        return page_index in self._rendering

    def get_stats(self) -> Dict[str, Any]:
        return {
            "cachedPages": len(self._cache),
            "maxCachedPages": self.config.max_cached_pages,
            "renderingPages": len(self._rendering),
            "renderDpi": self.config.render_dpi,
            "preRenderEnabled": self.config.pre_render_adjacent,
            "renderCalls": self._render_calls,
            "renderFailures": self._render_failures,
        }

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------
    async def render_page(self, page_index: int) -> Any:
        """
        Return the image for ``page_index``, rendering it if needed.

        Concurrent calls for the same page share one rasterizer call and all
        receive its result. Failures yield ``None`` and are not retried.
        """
        if self._disposed:
            return None
        if page_index in self._cache:
            return self.get_page(page_index)

        pending = self._rendering.get(page_index)
        if pending is not None:
            # Shield so a cancelled waiter does not cancel the shared render.
            return await asyncio.shield(pending)

        future = asyncio.get_running_loop().create_future()
        self._rendering[page_index] = future
        try:
            image = await self._rasterize(page_index)
        except BaseException:
            self._finish(page_index, future, None)
            raise

        if self._disposed:
            # dispose() already resolved the waiters.
            if image is not None:
                self._release(image)
            return None

        if image is not None:
            self._add_to_cache(page_index, image)
        self._finish(page_index, future, image)
        return image

    async def ensure_page(self, page_index: int) -> Any:
        if page_index in self._cache:
            return self.get_page(page_index)
        return await self.render_page(page_index)

    async def pre_render_around(self, center_page: int) -> Dict[int, Any]:
        """
        Prefetch up to ``pre_render_count`` pages on each side of ``center_page``.

        Requests run concurrently and independently; the result maps each
        requested page to its image, or ``None`` if that page failed.
        """
        if not self.config.pre_render_adjacent or self._disposed:
            return {}

        pages: List[int] = []
        for offset in range(1, self.config.pre_render_count + 1):
            for candidate in (center_page - offset, center_page + offset):
                if 0 <= candidate < self.page_count:
                    pages.append(candidate)
        if not pages:
            return {}

        results = await asyncio.gather(*(self.render_page(page) for page in pages), return_exceptions=True)
        outcome: Dict[int, Any] = {}
        for page, result in zip(pages, results):
            if isinstance(result, BaseException):
                LOGGER.warning("Prefetch of page %d failed: %s", page, result)
                result = None
            outcome[page] = result
        return outcome

    async def _rasterize(self, page_index: int) -> Any:
        if not 0 <= page_index < self.page_count:
            LOGGER.warning("Page %d is outside 0..%d; not rendering", page_index, self.page_count - 1)
            return None
        self._render_calls += 1
        try:
            return await self.rasterizer.render(self.pdf_bytes, page_index, self.config.render_dpi)
        except Exception as exc:
            self._render_failures += 1
            LOGGER.warning("Error rendering page %d: %s", page_index, exc)
            return None

    def _finish(self, page_index: int, future: asyncio.Future, image: Any) -> None:
        if self._rendering.get(page_index) is future:
            del self._rendering[page_index]
        if not future.done():
            future.set_result(image)

    # ------------------------------------------------------------------
    # Eviction
    # ------------------------------------------------------------------
    def _add_to_cache(self, page_index: int, image: Any) -> None:
        previous = self._cache.pop(page_index, None)
        if previous is not None and previous is not image:
            self._release(previous)

        while len(self._cache) >= self.config.max_cached_pages:
            oldest = next(iter(self._cache))
            self._release(self._cache[oldest])
            del self._cache[oldest]
            LOGGER.debug("Evicted page %d", oldest)
            self._emit(CacheEvent("evicted", oldest))

        self._cache[page_index] = image
        self._emit(CacheEvent("cached", page_index))

    def _release(self, image: Any) -> None:
        try:
            self.rasterizer.release(image)
        except Exception as exc:  # pragma: no cover - defensive
            LOGGER.warning("Failed to release page image: %s", exc)

    def evict_page(self, page_index: int) -> bool:
        image = self._cache.pop(page_index, None)
        if image is None:
            return False
        self._release(image)
        self._emit(CacheEvent("evicted", page_index))
        return True

    def clear(self) -> None:
        for image in self._cache.values():
            self._release(image)
        self._cache.clear()
        self._emit(CacheEvent("cleared"))

    def dispose(self) -> None:
        """Release every image and resolve all pending renders with ``None``."""
        if self._disposed:
            return
        self._disposed = True
        self.clear()
        self._emit(CacheEvent("disposed"))
        self._listeners.clear()
        for future in self._rendering.values():
            if not future.done():
                future.set_result(None)
        self._rendering.clear()

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------
    def subscribe(self, listener: CacheListener) -> Callable[[], None]:
        """Register ``listener``; the returned callable unsubscribes it."""
        self._listeners.append(listener)
        return lambda: self.unsubscribe(listener)

    def unsubscribe(self, listener: CacheListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _emit(self, event: CacheEvent) -> None:
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                LOGGER.exception("Render cache listener failed on %s", event.kind)


__all__ = [
    "PageRenderCacheConfig",
    "DEFAULT_CACHE_CONFIG",
    "LOW_MEMORY_CACHE_CONFIG",
    "HIGH_QUALITY_CACHE_CONFIG",
    "CacheEvent",
    "PageRenderCache",
]
