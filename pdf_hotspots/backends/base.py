"""Authoring backend protocol for PDF Hotspots."""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Protocol

from ..manifest import HotspotAnnotation
from ..types import PageSize


class AuthoringBackend(Protocol):
    """Protocol defining the PDF writing operations the embedder relies on.

    A backend owns page content generation. The embedder only asks it to lay
    out pages, append an invisible carrier page, and serialize to bytes that
    start with the ``%PDF-`` signature.
    """

    def new_writer(self, info: Mapping[str, str]) -> Any:
        """Return a fresh writer carrying the document info dictionary."""

    def add_page(self, writer: Any, size: PageSize, content: bytes | None = None) -> None:
        """Append a page of ``size`` drawn with the raw content stream ``content``."""

    def read_pages(self, pdf_bytes: bytes) -> Iterable[Any]:
        """Yield backend page objects of an existing PDF."""

    def page_size(self, page: Any) -> PageSize:
        """Return the media box size of a backend page object."""

    def import_page(self, writer: Any, page: Any) -> None:
        """Append a page previously returned by :meth:`read_pages`."""

    def add_carrier_page(self, writer: Any, payload: str) -> None:
        """Append a degenerate page whose content carries ``payload`` invisibly."""

    def add_annotation(self, writer: Any, page_index: int, annotation: HotspotAnnotation) -> None:
        """Add a standard PDF annotation for generic viewers."""

    def to_bytes(self, writer: Any) -> bytes:
        """Serialize ``writer`` into PDF bytes."""
