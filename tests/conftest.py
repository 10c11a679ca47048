from __future__ import annotations

import asyncio
import io
from pathlib import Path
from typing import Callable, Iterable, List, Optional
import sys

import pytest
from pypdf import PdfWriter

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from pdf_hotspots import LETTER, HotspotDocument, HotspotRect  # noqa: E402


class FakeImage:
    def __init__(self, page_index: int) -> None:
        self.page_index = page_index
        self.released = False


class FakeRasterizer:
    """Records calls; optionally blocks on ``gate`` and fails for ``fail_pages``."""

    def __init__(self, fail_pages: Iterable[int] = (), gate: Optional[asyncio.Event] = None) -> None:
        self.calls: List[int] = []
        self.released: List[FakeImage] = []
        self.fail_pages = set(fail_pages)
        self.gate = gate

    async def render(self, pdf_bytes: bytes, page_index: int, dpi: float) -> FakeImage:
        self.calls.append(page_index)
        if self.gate is not None:
            await self.gate.wait()
        else:
            await asyncio.sleep(0)
        if page_index in self.fail_pages:
            raise RuntimeError(f"cannot render page {page_index}")
        return FakeImage(page_index)

    def release(self, image: FakeImage) -> None:
        image.released = True
        self.released.append(image)


@pytest.fixture()
def rasterizer_factory() -> Callable[..., FakeRasterizer]:
    return FakeRasterizer


@pytest.fixture()
def plain_pdf_bytes() -> bytes:
    writer = PdfWriter()
    for _ in range(3):
        writer.add_blank_page(width=612, height=792)
    writer.add_metadata({"/Producer": "pdf-hotspots-tests", "/Title": "Plain"})
    buffer = io.BytesIO()
    writer.write(buffer)
    return buffer.getvalue()


@pytest.fixture()
def hotspot_document() -> HotspotDocument:
    doc = HotspotDocument(title="Field Guide", author="Tests")
    for _ in range(3):
        doc.add_page(LETTER)
    doc.add_text_hotspot(0, HotspotRect(100, 600, 200, 100), "Heron", title="Bird")
    doc.add_hotspot(
        1,
        HotspotRect(50, 50, 100, 100),
        "custom",
        id="h-custom",
        label="internal",
    )
    return doc


@pytest.fixture()
def hotspot_pdf_bytes(hotspot_document: HotspotDocument) -> bytes:
    return hotspot_document.save()


@pytest.fixture()
def hotspot_pdf(tmp_path: Path, hotspot_pdf_bytes: bytes) -> Path:
    pdf_path = tmp_path / "guide.pdf"
    pdf_path.write_bytes(hotspot_pdf_bytes)
    return pdf_path
