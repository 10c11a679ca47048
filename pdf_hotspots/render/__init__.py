"""Page rendering: rasterizer delegates and the page render cache."""

from .cache import (
    DEFAULT_CACHE_CONFIG,
    HIGH_QUALITY_CACHE_CONFIG,
    LOW_MEMORY_CACHE_CONFIG,
    CacheEvent,
    PageRenderCache,
    PageRenderCacheConfig,
)
from .rasterizers import PyMuPDFRasterizer, Rasterizer

__all__ = [
    "DEFAULT_CACHE_CONFIG",
    "HIGH_QUALITY_CACHE_CONFIG",
    "LOW_MEMORY_CACHE_CONFIG",
    "CacheEvent",
    "PageRenderCache",
    "PageRenderCacheConfig",
    "PyMuPDFRasterizer",
    "Rasterizer",
]
