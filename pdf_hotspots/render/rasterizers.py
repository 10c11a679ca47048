"""Rasterization delegates for the page render cache."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Protocol

import fitz
from PIL import Image

LOGGER = logging.getLogger(__name__)

POINTS_PER_INCH = 72.0


class Rasterizer(Protocol):
    """Turns one PDF page into a bitmap.

    ``render`` may raise or return ``None`` to signal failure. ``release`` frees
    an image previously returned by ``render``; the cache is its only caller.
    """

    async def render(self, pdf_bytes: bytes, page_index: int, dpi: float) -> Any:
        """Rasterize ``page_index`` of ``pdf_bytes`` at ``dpi``."""

    def release(self, image: Any) -> None:
        """Free the resources held by ``image``."""


class PyMuPDFRasterizer(Rasterizer):
    """Render pages with PyMuPDF in a worker thread, returning Pillow images."""

    def __init__(self, *, mode: str = "RGB") -> None:
        if mode not in {"RGB", "RGBA"}:
            raise ValueError(f"Unsupported image mode: {mode}")
        self.mode = mode

    async def render(self, pdf_bytes: bytes, page_index: int, dpi: float) -> Image.Image:
        return await asyncio.to_thread(self._render_sync, pdf_bytes, page_index, dpi)

    def _render_sync(self, pdf_bytes: bytes, page_index: int, dpi: float) -> Image.Image:
        zoom = dpi / POINTS_PER_INCH
        with fitz.open(stream=pdf_bytes, filetype="pdf") as document:
            page = document.load_page(page_index)
            pixmap = page.get_pixmap(matrix=fitz.Matrix(zoom, zoom), alpha=self.mode == "RGBA")
            image = Image.frombytes(self.mode, (pixmap.width, pixmap.height), pixmap.samples)
        LOGGER.debug("Rasterized page %d at %.0f dpi (%dx%d)", page_index, dpi, image.width, image.height)
        return image

    def release(self, image: Image.Image) -> None:
        image.close()


__all__ = ["Rasterizer", "PyMuPDFRasterizer", "POINTS_PER_INCH"]
