"""Recover embedded hotspots and page geometry from raw PDF bytes.

The document is treated as a flat byte stream rather than parsed structurally:
only the manifest block and the ``/MediaBox`` declarations are looked for.
This keeps extraction working on documents that were edited or partially
damaged by other tools. Nothing in this module raises on bad input; corrupt
or foreign documents simply yield "no hotspots" and default geometry.
"""

from __future__ import annotations

import logging
import re
from typing import List, Optional, Union

from .constants import MANIFEST_END_MARKER, MANIFEST_START_MARKER, MIN_VISIBLE_PAGE_EXTENT
from .exceptions import ManifestDecodeError
from .manifest import AnnotationManifest, HotspotAnnotation, decode_manifest
from .types import DEFAULT_PAGE_SIZE, PageSize

LOGGER = logging.getLogger(__name__)

PdfBytes = Union[bytes, bytearray, memoryview]

_NUMBER = rb"(-?\d+(?:\.\d*)?|-?\.\d+)"
_MEDIA_BOX_RE = re.compile(
    rb"/MediaBox\s*\[\s*" + _NUMBER + rb"\s+" + _NUMBER + rb"\s+" + _NUMBER + rb"\s+" + _NUMBER + rb"\s*\]"
)

_START = MANIFEST_START_MARKER.encode("ascii")
_END = MANIFEST_END_MARKER.encode("ascii")


def _as_bytes(pdf_bytes: PdfBytes) -> bytes:
    return bytes(pdf_bytes)


def extract_manifest_block(pdf_bytes: PdfBytes) -> Optional[str]:
    """Return the text between the manifest markers, or ``None``."""

    data = _as_bytes(pdf_bytes)
    start = data.find(_START)
    if start == -1:
        return None
    block_start = start + len(_START)
    end = data.find(_END, block_start)
    if end == -1:
        LOGGER.warning("Manifest start marker found without end marker; ignoring block")
        return None
    # Latin-1 maps every byte to one character, so offsets are preserved.
    return data[block_start:end].decode("latin-1")


def parse_manifest(pdf_bytes: PdfBytes) -> Optional[AnnotationManifest]:
    """Decode the embedded :class:`AnnotationManifest`, or ``None`` if absent or corrupt."""

    block = extract_manifest_block(pdf_bytes)
    if block is None:
        return None
    try:
        manifest = decode_manifest(block)
    except ManifestDecodeError as exc:
        LOGGER.warning("Ignoring unreadable hotspot manifest: %s", exc)
        return None
    LOGGER.debug("Decoded %s", manifest)
    return manifest


def parse_hotspots(pdf_bytes: PdfBytes) -> List[HotspotAnnotation]:
    """Return all embedded hotspots in manifest order (empty when there are none)."""

    manifest = parse_manifest(pdf_bytes)
    if manifest is None:
        return []
    return list(manifest.annotations)


def has_hotspots(pdf_bytes: PdfBytes) -> bool:
    """Cheap check for the manifest start marker, without decoding."""

    return _START in _as_bytes(pdf_bytes)


def get_page_dimensions(pdf_bytes: PdfBytes) -> List[PageSize]:
    """
    Return the size of every page box declared in the document, in order.

    Boxes smaller than :data:`MIN_VISIBLE_PAGE_EXTENT` on either side are
    dropped so the manifest carrier page is never reported. When nothing usable
    is found, a single :data:`DEFAULT_PAGE_SIZE` entry is returned.
    """

    dimensions: List[PageSize] = []
    for match in _MEDIA_BOX_RE.finditer(_as_bytes(pdf_bytes)):
        x1, y1, x2, y2 = (float(group) for group in match.groups())
        width = x2 - x1
        height = y2 - y1
        if width < MIN_VISIBLE_PAGE_EXTENT or height < MIN_VISIBLE_PAGE_EXTENT:
            continue
        dimensions.append(PageSize(width, height))

    if not dimensions:
        LOGGER.debug("No usable /MediaBox declarations found; using default page size")
        dimensions.append(DEFAULT_PAGE_SIZE)
    return dimensions


def get_page_count(pdf_bytes: PdfBytes) -> int:
    return len(get_page_dimensions(pdf_bytes))


__all__ = [
    "extract_manifest_block",
    "parse_manifest",
    "parse_hotspots",
    "has_hotspots",
    "get_page_dimensions",
    "get_page_count",
]
