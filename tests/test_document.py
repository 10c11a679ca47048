import io
import logging
from pathlib import Path

import pytest
from pypdf import PdfReader

from pdf_hotspots.constants import MANIFEST_START_MARKER
from pdf_hotspots.document import HotspotDocument
from pdf_hotspots.exceptions import DuplicateHotspotError, EmbeddingError
from pdf_hotspots.manifest import AnnotationContent, AnnotationType
from pdf_hotspots.parser import get_page_count, has_hotspots, parse_hotspots, parse_manifest
from pdf_hotspots.types import A4, LETTER, HotspotRect, PageSize


def test_saved_document_embeds_hotspots(hotspot_document: HotspotDocument) -> None:
    data = hotspot_document.save()

    hotspots = parse_hotspots(data)
    assert [h.id for h in hotspots] == [h.id for h in hotspot_document.hotspots]
    assert hotspots[0].content.text == "Heron"
    assert hotspots[0].rect == HotspotRect(100, 600, 200, 100)
    assert hotspots[1].type is AnnotationType.CUSTOM
    assert hotspots[1].label == "internal"


def test_carrier_page_is_appended_but_not_counted(hotspot_pdf_bytes: bytes) -> None:
    reader = PdfReader(io.BytesIO(hotspot_pdf_bytes))

    assert len(reader.pages) == 4
    assert float(reader.pages[-1].mediabox.width) == 1
    assert get_page_count(hotspot_pdf_bytes) == 3


def test_manifest_metadata(hotspot_pdf_bytes: bytes) -> None:
    manifest = parse_manifest(hotspot_pdf_bytes)

    assert manifest is not None
    assert manifest.id.startswith("apdf_manifest_")
    assert manifest.metadata["title"] == "Field Guide"
    assert manifest.metadata["author"] == "Tests"
    assert manifest.metadata["pageCount"] == 3
    assert "createdAt" in manifest.metadata


def test_document_info_is_written(hotspot_pdf_bytes: bytes) -> None:
    reader = PdfReader(io.BytesIO(hotspot_pdf_bytes))

    assert reader.metadata.title == "Field Guide"
    assert reader.metadata.author == "Tests"


def test_document_without_hotspots_has_no_manifest() -> None:
    doc = HotspotDocument()
    doc.add_page(A4)
    doc.add_page(A4, landscape=True)
    data = doc.save()

    assert not has_hotspots(data)
    assert MANIFEST_START_MARKER.encode() not in data
    assert len(PdfReader(io.BytesIO(data)).pages) == 2


def test_saving_twice_produces_one_manifest(hotspot_document: HotspotDocument) -> None:
    first = hotspot_document.save()
    second = hotspot_document.save()

    assert second.count(MANIFEST_START_MARKER.encode()) == 1
    assert [h.id for h in parse_hotspots(first)] == [h.id for h in parse_hotspots(second)]


def test_reopen_and_resave_is_stable(hotspot_pdf_bytes: bytes) -> None:
    reopened = HotspotDocument.from_bytes(hotspot_pdf_bytes)

    assert reopened.page_count == 3
    assert reopened.title == "Field Guide"

    resaved = reopened.save()
    original = parse_hotspots(hotspot_pdf_bytes)
    again = parse_hotspots(resaved)
    assert all(a.same_as(b) for a, b in zip(original, again))
    assert len(again) == len(original)
    assert len(PdfReader(io.BytesIO(resaved)).pages) == 4


def test_shared_assets_round_trip() -> None:
    doc = HotspotDocument()
    doc.add_page(LETTER)
    key = doc.add_shared_asset(b"PNGDATA", key="logo")
    doc.add_hotspot(0, HotspotRect(0, 0, 10, 10), AnnotationType.IMAGE, AnnotationContent.asset_ref(key))
    doc.add_hotspot(0, HotspotRect(20, 0, 10, 10), AnnotationType.IMAGE, AnnotationContent.asset_ref(key))

    manifest = parse_manifest(doc.save())

    assert manifest.shared_assets == {"logo": b"PNGDATA"}
    assert [manifest.resolve_image(a.content) for a in manifest.annotations] == [b"PNGDATA", b"PNGDATA"]


def test_inline_image_hotspot() -> None:
    doc = HotspotDocument()
    doc.add_page()
    doc.add_image_hotspot(0, HotspotRect(0, 0, 10, 10), b"\x89PNG\r\n", title="Pic")

    hotspot = parse_hotspots(doc.save())[0]
    assert hotspot.type is AnnotationType.IMAGE
    assert hotspot.content.image_bytes == b"\x89PNG\r\n"


def test_duplicate_id_is_rejected(hotspot_document: HotspotDocument) -> None:
    with pytest.raises(DuplicateHotspotError):
        hotspot_document.add_hotspot(0, HotspotRect(0, 0, 1, 1), id="h-custom")


def test_remove_update_and_clear(hotspot_document: HotspotDocument) -> None:
    original = hotspot_document.get_hotspot("h-custom")

    assert hotspot_document.update_hotspot(original.replace(label="changed"))
    assert hotspot_document.get_hotspot("h-custom").label == "changed"
    assert hotspot_document.remove_hotspot("h-custom")
    assert not hotspot_document.remove_hotspot("h-custom")
    assert not hotspot_document.update_hotspot(original)

    hotspot_document.clear_hotspots()
    assert not has_hotspots(hotspot_document.save())


def test_out_of_range_page_is_kept_but_warned(caplog: pytest.LogCaptureFixture) -> None:
    doc = HotspotDocument()
    doc.add_page()
    doc.add_hotspot(7, HotspotRect(0, 0, 5, 5), show_default_icon=True, id="stray")

    with caplog.at_level(logging.WARNING):
        data = doc.save()

    assert "stray" in caplog.text
    assert [h.id for h in parse_hotspots(data)] == ["stray"]


def test_default_icon_annotation_is_hidden_and_not_duplicated() -> None:
    doc = HotspotDocument()
    doc.add_page(LETTER)
    doc.add_text_hotspot(0, HotspotRect(10, 10, 20, 20), "note", show_default_icon=True)
    data = doc.save()

    annots = PdfReader(io.BytesIO(data)).pages[0]["/Annots"]
    assert len(annots) == 1
    annot = annots[0].get_object()
    assert annot["/Subtype"] == "/Text"
    assert annot["/F"] == 2

    resaved = HotspotDocument.from_bytes(data).save()
    assert len(PdfReader(io.BytesIO(resaved)).pages[0]["/Annots"]) == 1


def test_page_content_stream_is_kept() -> None:
    doc = HotspotDocument()
    doc.add_page(PageSize(300, 300), "BT /F1 12 Tf 20 20 Td (Hello hotspots) Tj ET")

    text = PdfReader(io.BytesIO(doc.save())).pages[0].extract_text()
    assert "Hello hotspots" in text


def test_from_bytes_rejects_garbage() -> None:
    with pytest.raises(EmbeddingError):
        HotspotDocument.from_bytes(b"this is not a pdf")


def test_save_to_file(tmp_path: Path, hotspot_document: HotspotDocument) -> None:
    destination = tmp_path / "nested" / "out.pdf"

    written = hotspot_document.save_to_file(destination)

    assert written == str(destination)
    assert has_hotspots(destination.read_bytes())
