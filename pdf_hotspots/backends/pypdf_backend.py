"""pypdf backend implementation for PDF Hotspots."""

from __future__ import annotations

import io
import logging
from typing import List, Mapping

from pypdf import PageObject, PdfReader, PdfWriter
from pypdf.errors import PdfReadError
from pypdf.generic import (
    ArrayObject,
    BooleanObject,
    DecodedStreamObject,
    DictionaryObject,
    FloatObject,
    NameObject,
    NumberObject,
    TextStringObject,
)

from ..constants import (
    ANNOTATION_NAME_PREFIX,
    CARRIER_FONT_SIZE,
    CARRIER_PAGE_EXTENT,
    DEFAULT_PRODUCER,
)
from ..exceptions import EmbeddingError
from ..manifest import HotspotAnnotation
from ..types import PageSize
from .base import AuthoringBackend

LOGGER = logging.getLogger(__name__)

# PDF annotation flag bits (ISO 32000-1, table 165).
FLAG_HIDDEN = 2
FLAG_PRINT = 4


def _escape_pdf_string(text: str) -> str:
    return text.replace("\\", "\\\\").replace("(", "\\(").replace(")", "\\)")


def _standard_resources() -> DictionaryObject:
    """Resources exposing Helvetica as ``/F1`` to page content streams."""
    font = DictionaryObject(
        {
            NameObject("/Type"): NameObject("/Font"),
            NameObject("/Subtype"): NameObject("/Type1"),
            NameObject("/BaseFont"): NameObject("/Helvetica"),
        }
    )
    return DictionaryObject(
        {NameObject("/Font"): DictionaryObject({NameObject("/F1"): font})}
    )


class PypdfAuthoringBackend(AuthoringBackend):
    """Backend implementation that uses `pypdf` under the hood.

    Content streams are stored without filters so the manifest block of the
    carrier page remains visible to a plain byte scan.
    """

    def new_writer(self, info: Mapping[str, str]) -> PdfWriter:
        writer = PdfWriter()
        metadata_dict = {f"/{key}": value for key, value in info.items() if value}
        metadata_dict.setdefault("/Producer", DEFAULT_PRODUCER)
        writer.add_metadata(metadata_dict)
        return writer

    def _set_content(self, writer: PdfWriter, page: PageObject, content: bytes) -> None:
        stream = DecodedStreamObject()
        stream.set_data(content)
        page[NameObject("/Contents")] = writer._add_object(stream)  # type: ignore[attr-defined]
        page[NameObject("/Resources")] = _standard_resources()

    def add_page(self, writer: PdfWriter, size: PageSize, content: bytes | None = None) -> None:
        page = writer.add_blank_page(width=size.width, height=size.height)
        if content:
            self._set_content(writer, page, content)

    def read_pages(self, pdf_bytes: bytes) -> List[PageObject]:
        try:
            reader = PdfReader(io.BytesIO(pdf_bytes))
        except PdfReadError as exc:
            raise EmbeddingError(f"Corrupted or invalid PDF: {exc}") from exc
        except Exception as exc:
            raise EmbeddingError(f"Unexpected error reading PDF: {exc}") from exc
        if reader.is_encrypted:
            raise EmbeddingError("Cannot import pages from an encrypted PDF.")
        return list(reader.pages)

    def page_size(self, page: PageObject) -> PageSize:
        box = page.mediabox
        return PageSize(float(box.width), float(box.height))

    def import_page(self, writer: PdfWriter, page: PageObject) -> None:
        added = writer.add_page(page)
        annots = added.get("/Annots")
        if annots is None:
            return

        # Drop viewer annotations written by a previous save; they are
        # regenerated from the hotspot list.
        kept = ArrayObject()
        for ref in annots.get_object():
            annot = ref.get_object()
            name = str(annot.get("/NM", ""))
            if not name.startswith(ANNOTATION_NAME_PREFIX):
                kept.append(ref)
        if kept:
            added[NameObject("/Annots")] = kept
        else:
            del added["/Annots"]

    def add_carrier_page(self, writer: PdfWriter, payload: str) -> None:
        page = writer.add_blank_page(width=CARRIER_PAGE_EXTENT, height=CARRIER_PAGE_EXTENT)
        # Render mode 3 draws nothing; the tiny font keeps the text box degenerate.
        content = f"BT /F1 {CARRIER_FONT_SIZE} Tf 3 Tr 0 0 Td ({_escape_pdf_string(payload)}) Tj ET"
        self._set_content(writer, page, content.encode("ascii"))

    def add_annotation(self, writer: PdfWriter, page_index: int, annotation: HotspotAnnotation) -> None:
        content = annotation.content
        text = content.text or content.title or annotation.label or ""
        flags = FLAG_PRINT if annotation.initially_visible else FLAG_HIDDEN
        annot = DictionaryObject(
            {
                NameObject("/Type"): NameObject("/Annot"),
                NameObject("/Subtype"): NameObject("/Text"),
                NameObject("/Rect"): ArrayObject(FloatObject(value) for value in annotation.rect.to_pdf_rect()),
                NameObject("/Contents"): TextStringObject(text),
                NameObject("/NM"): TextStringObject(f"{ANNOTATION_NAME_PREFIX}{annotation.id}"),
                NameObject("/Name"): NameObject("/Comment"),
                NameObject("/F"): NumberObject(flags),
                NameObject("/Open"): BooleanObject(False),
            }
        )
        if content.title:
            annot[NameObject("/T")] = TextStringObject(content.title)
        writer.add_annotation(page_number=page_index, annotation=annot)

    def to_bytes(self, writer: PdfWriter) -> bytes:
        buffer = io.BytesIO()
        try:
            writer.write(buffer)
        except Exception as exc:  # pragma: no cover - defensive
            raise EmbeddingError(f"Unexpected error writing PDF: {exc}") from exc
        return buffer.getvalue()


__all__ = ["PypdfAuthoringBackend"]
