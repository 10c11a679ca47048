"""Authoring API: build a PDF whose pages carry embedded hotspots."""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from .backends import AuthoringBackend, PypdfAuthoringBackend
from .constants import MANIFEST_END_MARKER, MANIFEST_START_MARKER, MIN_VISIBLE_PAGE_EXTENT
from .exceptions import DuplicateHotspotError
from .manifest import (
    AnnotationContent,
    AnnotationManifest,
    AnnotationType,
    HotspotAnnotation,
    encode_manifest,
    new_annotation_id,
    new_manifest_id,
)
from .parser import parse_manifest
from .types import A4, HotspotRect, PageSize
from .utils import PathLike, save_bytes, time_block, utc_timestamp

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class _PageSpec:
    size: PageSize
    content: Optional[bytes] = None
    source: Any = None


class HotspotDocument:
    """
    PDF document with interactive hotspot support.

    Pages and hotspots are collected in memory. :meth:`save` lays the pages out
    through the authoring backend and, when at least one hotspot exists,
    appends an invisible 1 x 1 point page carrying the encoded manifest.

    Example:
        >>> doc = HotspotDocument(title="Guide")
        >>> page = doc.add_page()
        >>> hotspot = doc.add_text_hotspot(page, HotspotRect(100, 700, 200, 50), "Hidden text")
        >>> data = doc.save()
    """

    def __init__(
        self,
        *,
        title: Optional[str] = None,
        author: Optional[str] = None,
        subject: Optional[str] = None,
        keywords: Optional[Sequence[str]] = None,
        creator: Optional[str] = None,
        backend: Optional[AuthoringBackend] = None,
    ) -> None:
        self.title = title
        self.author = author
        self.subject = subject
        self.keywords = list(keywords) if keywords else None
        self.creator = creator
        self.backend: AuthoringBackend = backend or PypdfAuthoringBackend()

        self._pages: List[_PageSpec] = []
        self._hotspots: List[HotspotAnnotation] = []
        self._shared_assets: Dict[str, bytes] = {}

    @classmethod
    def from_bytes(cls, pdf_bytes: bytes, *, backend: Optional[AuthoringBackend] = None) -> "HotspotDocument":
        """Re-open a PDF: its pages, plus any hotspots and assets it already embeds."""

        manifest = parse_manifest(pdf_bytes)
        metadata = (manifest.metadata or {}) if manifest else {}
        document = cls(
            title=metadata.get("title"),
            author=metadata.get("author"),
            backend=backend,
        )
        document.import_pages(pdf_bytes)
        if manifest is not None:
            document._hotspots.extend(manifest.annotations)
            document._shared_assets.update(manifest.shared_assets)
        return document

    # ------------------------------------------------------------------
    # Pages
    # ------------------------------------------------------------------
    @property
    def page_count(self) -> int:
        return len(self._pages)

    def get_page_size(self, page_index: int) -> Optional[PageSize]:
        if page_index < 0 or page_index >= len(self._pages):
            return None
        return self._pages[page_index].size

    def add_page(
        self,
        page_size: PageSize = A4,
        content: Union[bytes, str, None] = None,
        *,
        landscape: bool = False,
    ) -> int:
        """
        Append a page and return its index.

        ``content`` is a raw PDF content stream; Helvetica is available to it
        as ``/F1``.
        """
        size = page_size.landscape if landscape else page_size
        if isinstance(content, str):
            content = content.encode("latin-1")
        self._pages.append(_PageSpec(size=size, content=content))
        return len(self._pages) - 1

    def import_pages(self, pdf_bytes: bytes) -> List[int]:
        """Append every page of an existing PDF, skipping a manifest carrier page."""

        indices: List[int] = []
        for page in self.backend.read_pages(bytes(pdf_bytes)):
            size = self.backend.page_size(page)
            if size.width < MIN_VISIBLE_PAGE_EXTENT or size.height < MIN_VISIBLE_PAGE_EXTENT:
                continue
            self._pages.append(_PageSpec(size=size, source=page))
            indices.append(len(self._pages) - 1)
        return indices

    # ------------------------------------------------------------------
    # Hotspots
    # ------------------------------------------------------------------
    @property
    def hotspots(self) -> Tuple[HotspotAnnotation, ...]:
        return tuple(self._hotspots)

    @property
    def shared_assets(self) -> Dict[str, bytes]:
        return dict(self._shared_assets)

    def hotspots_for_page(self, page_index: int) -> List[HotspotAnnotation]:
        return [hotspot for hotspot in self._hotspots if hotspot.page_index == page_index]

    def get_hotspot(self, hotspot_id: str) -> Optional[HotspotAnnotation]:
        for hotspot in self._hotspots:
            if hotspot.id == hotspot_id:
                return hotspot
        return None

    def add_hotspot(
        self,
        page_index: int,
        rect: HotspotRect,
        type: AnnotationType = AnnotationType.TEXT,
        content: Optional[AnnotationContent] = None,
        *,
        show_default_icon: bool = False,
        initially_visible: bool = False,
        label: Optional[str] = None,
        id: Optional[str] = None,
    ) -> HotspotAnnotation:
        """
        Add a hotspot and return it.

        ``page_index`` is not checked here; a hotspot on a page that does not
        exist is kept but never matches anything when the document is read.
        """
        hotspot_id = id or new_annotation_id()
        if self.get_hotspot(hotspot_id) is not None:
            raise DuplicateHotspotError(f"Hotspot id already exists: {hotspot_id}")

        annotation = HotspotAnnotation(
            id=hotspot_id,
            page_index=page_index,
            rect=rect,
            type=AnnotationType.from_identifier(type),
            content=content or AnnotationContent(),
            show_default_icon=show_default_icon,
            initially_visible=initially_visible,
            label=label,
        )
        self._hotspots.append(annotation)
        return annotation

    def add_text_hotspot(
        self,
        page_index: int,
        rect: HotspotRect,
        text: str,
        *,
        title: Optional[str] = None,
        show_default_icon: bool = False,
    ) -> HotspotAnnotation:
        return self.add_hotspot(
            page_index,
            rect,
            AnnotationType.TEXT,
            AnnotationContent.text_content(text, title=title),
            show_default_icon=show_default_icon,
        )

    def add_image_hotspot(
        self,
        page_index: int,
        rect: HotspotRect,
        image_bytes: bytes,
        *,
        title: Optional[str] = None,
        show_default_icon: bool = False,
    ) -> HotspotAnnotation:
        return self.add_hotspot(
            page_index,
            rect,
            AnnotationType.IMAGE,
            AnnotationContent.image_content(image_bytes, title=title),
            show_default_icon=show_default_icon,
        )

    def add_shared_asset(self, data: bytes, key: Optional[str] = None) -> str:
        """Store ``data`` once for reuse by many hotspots; returns its key."""

        asset_key = key or f"asset_{uuid.uuid4()}"
        self._shared_assets[asset_key] = bytes(data)
        return asset_key

    def remove_hotspot(self, hotspot_id: str) -> bool:
        for index, hotspot in enumerate(self._hotspots):
            if hotspot.id == hotspot_id:
                del self._hotspots[index]
                return True
        return False

    def update_hotspot(self, annotation: HotspotAnnotation) -> bool:
        """Replace the hotspot with the same id; ``False`` if there is none."""

        for index, hotspot in enumerate(self._hotspots):
            if hotspot.id == annotation.id:
                self._hotspots[index] = annotation
                return True
        return False

    def clear_hotspots(self) -> None:
        self._hotspots.clear()

    # ------------------------------------------------------------------
    # Saving
    # ------------------------------------------------------------------
    def build_manifest(self) -> AnnotationManifest:
        return AnnotationManifest(
            id=new_manifest_id(),
            annotations=tuple(self._hotspots),
            shared_assets=dict(self._shared_assets),
            metadata={
                "title": self.title,
                "author": self.author,
                "createdAt": utc_timestamp(),
                "pageCount": self.page_count,
            },
        )

    def _info(self) -> Dict[str, str]:
        info = {
            "Title": self.title,
            "Author": self.author,
            "Subject": self.subject,
            "Keywords": ", ".join(self.keywords) if self.keywords else None,
            "Creator": self.creator,
        }
        return {key: value for key, value in info.items() if value}

    def save(self) -> bytes:
        """
        Render the document to PDF bytes.

        Each call starts from a fresh writer, so saving twice never stacks
        manifest pages; the manifest reflects the hotspots at call time.
        """
        writer = self.backend.new_writer(self._info())
        with time_block(LOGGER, "hotspot document save"):
            for spec in self._pages:
                if spec.source is not None:
                    self.backend.import_page(writer, spec.source)
                else:
                    self.backend.add_page(writer, spec.size, spec.content)

            for hotspot in self._hotspots:
                if not 0 <= hotspot.page_index < self.page_count:
                    LOGGER.warning(
                        "Hotspot %s targets page %d but the document has %d pages",
                        hotspot.id,
                        hotspot.page_index,
                        self.page_count,
                    )
                    continue
                if hotspot.show_default_icon:
                    self.backend.add_annotation(writer, hotspot.page_index, hotspot)

            if self._hotspots:
                manifest = self.build_manifest()
                missing = manifest.missing_asset_keys()
                if missing:
                    LOGGER.warning("Hotspots reference unknown shared assets: %s", ", ".join(missing))
                payload = f"{MANIFEST_START_MARKER}{encode_manifest(manifest)}{MANIFEST_END_MARKER}"
                self.backend.add_carrier_page(writer, payload)
                LOGGER.info(
                    "Embedded manifest with %d hotspots and %d assets",
                    len(manifest.annotations),
                    len(manifest.shared_assets),
                )

            return self.backend.to_bytes(writer)

    def save_to_file(self, path: PathLike) -> Optional[str]:
        """Save to ``path``; returns the written location or ``None`` on failure."""

        return save_bytes(path, self.save())


__all__ = ["HotspotDocument"]
