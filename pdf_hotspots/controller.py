"""Viewer-side state: current page, active hotspot and zoom level."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional

from .exceptions import HotspotNotFoundError, InvalidConfigError
from .manifest import HotspotAnnotation
from .mapper import find_hotspots_at_point
from .parser import get_page_dimensions, parse_hotspots
from .types import PageSize, Point

LOGGER = logging.getLogger(__name__)

ControllerListener = Callable[["ControllerEvent"], None]


@dataclass(frozen=True)
class ControllerEvent:
    """
    Notification sent to controller listeners.

    Attributes:
        kind: One of ``initialized``, ``page_changed``, ``hotspot_changed``,
            ``scale_changed`` or ``hotspots_changed``
    """
    kind: str


class InteractiveController:
    """
    Drives an interactive viewer over a document with embedded hotspots.

    Presentation layers read the state (page, active hotspot, scale) and
    subscribe for changes; they never mutate it directly. Listeners are only
    notified when the state actually changes.
    """

    def __init__(self, min_scale: float = 1.0, max_scale: float = 4.0) -> None:
        if min_scale <= 0 or max_scale < min_scale:
            raise InvalidConfigError(f"Invalid scale range: {min_scale}..{max_scale}")
        self.min_scale = min_scale
        self.max_scale = max_scale

        self.pdf_bytes: Optional[bytes] = None
        self._hotspots: List[HotspotAnnotation] = []
        self._page_dimensions: List[PageSize] = []
        self._current_page = 0
        self._active_hotspot: Optional[HotspotAnnotation] = None
        self._scale = 1.0
        self._initialized = False
        self._listeners: List[ControllerListener] = []

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------
    @property
    def current_page(self) -> int:
        return self._current_page

    @property
    def page_count(self) -> int:
        return len(self._page_dimensions)

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    @property
    def active_hotspot(self) -> Optional[HotspotAnnotation]:
        return self._active_hotspot

    @property
    def scale(self) -> float:
        return self._scale

    @property
    def hotspots(self) -> List[HotspotAnnotation]:
        return list(self._hotspots)

    @property
    def page_dimensions(self) -> List[PageSize]:
        return list(self._page_dimensions)

    def get_page_dimensions(self, page_index: int) -> Optional[PageSize]:
        if page_index < 0 or page_index >= len(self._page_dimensions):
            return None
        return self._page_dimensions[page_index]

    def initialize(
        self,
        pdf_bytes: bytes,
        hotspots: Optional[Iterable[HotspotAnnotation]] = None,
        initial_page: int = 0,
    ) -> None:
        """
        Load a document.

        Hotspots are read from the embedded manifest unless given explicitly;
        a corrupt manifest simply yields none. ``initial_page`` is clamped to
        the document.
        """
        self.pdf_bytes = bytes(pdf_bytes)
        if hotspots is not None:
            self._hotspots = list(hotspots)
        else:
            self._hotspots = parse_hotspots(self.pdf_bytes)
        self._page_dimensions = get_page_dimensions(self.pdf_bytes)
        self._current_page = max(0, min(initial_page, self.page_count - 1))
        self._active_hotspot = None
        self._initialized = True
        LOGGER.debug("Controller loaded %d pages and %d hotspots", self.page_count, len(self._hotspots))
        self._notify("initialized")

    # ------------------------------------------------------------------
    # Hotspot collection
    # ------------------------------------------------------------------
    def hotspots_for_page(self, page_index: int) -> List[HotspotAnnotation]:
        return [hotspot for hotspot in self._hotspots if hotspot.page_index == page_index]

    @property
    def current_page_hotspots(self) -> List[HotspotAnnotation]:
        return self.hotspots_for_page(self._current_page)

    def hotspots_at(
        self,
        point: Point,
        rendered_size: PageSize,
        page_index: Optional[int] = None,
    ) -> List[HotspotAnnotation]:
        """Hotspots under a consumer-space ``point`` on a page drawn at ``rendered_size``."""
        page = self._current_page if page_index is None else page_index
        page_size = self.get_page_dimensions(page)
        if page_size is None:
            return []
        return find_hotspots_at_point(point, self._hotspots, page, page_size, rendered_size)

    def update_hotspots(self, hotspots: Iterable[HotspotAnnotation]) -> None:
        self._hotspots = list(hotspots)
        if self._active_hotspot is not None and self._active_hotspot not in self._hotspots:
            self._active_hotspot = None
        self._notify("hotspots_changed")

    def add_hotspot(self, hotspot: HotspotAnnotation) -> None:
        self._hotspots.append(hotspot)
        self._notify("hotspots_changed")

    def remove_hotspot(self, hotspot_id: str) -> bool:
        remaining = [hotspot for hotspot in self._hotspots if hotspot.id != hotspot_id]
        if len(remaining) == len(self._hotspots):
            return False
        self._hotspots = remaining
        if self._active_hotspot is not None and self._active_hotspot.id == hotspot_id:
            self._active_hotspot = None
        self._notify("hotspots_changed")
        return True

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------
    def jump_to_page(self, page_index: int) -> None:
        """Go to ``page_index``; out-of-range indices are ignored."""
        if page_index < 0 or page_index >= self.page_count:
            return
        if page_index == self._current_page:
            return
        self._current_page = page_index
        self._active_hotspot = None
        self._notify("page_changed")

    def next_page(self) -> None:
        if self._current_page < self.page_count - 1:
            self.jump_to_page(self._current_page + 1)

    def previous_page(self) -> None:
        if self._current_page > 0:
            self.jump_to_page(self._current_page - 1)

    def first_page(self) -> None:
        self.jump_to_page(0)

    def last_page(self) -> None:
        self.jump_to_page(self.page_count - 1)

    # ------------------------------------------------------------------
    # Active hotspot
    # ------------------------------------------------------------------
    def show_hotspot(self, hotspot_id: str) -> HotspotAnnotation:
        """
        Make a hotspot active, moving to its page when that page exists.

        Raises:
            HotspotNotFoundError: If no hotspot has ``hotspot_id``
        """
        for hotspot in self._hotspots:
            if hotspot.id == hotspot_id:
                break
        else:
            raise HotspotNotFoundError(f"Hotspot not found: {hotspot_id}")

        if 0 <= hotspot.page_index < self.page_count:
            self._current_page = hotspot.page_index
        else:
            LOGGER.warning("Hotspot %s points at missing page %d", hotspot.id, hotspot.page_index)
        self._active_hotspot = hotspot
        self._notify("hotspot_changed")
        return hotspot

    def hide_hotspot(self) -> None:
        if self._active_hotspot is not None:
            self._active_hotspot = None
            self._notify("hotspot_changed")

    def set_active_hotspot(self, hotspot: Optional[HotspotAnnotation]) -> None:
        if hotspot is None and self._active_hotspot is None:
            return
        if hotspot is not None and self._active_hotspot is not None and hotspot.same_as(self._active_hotspot):
            return
        self._active_hotspot = hotspot
        self._notify("hotspot_changed")

    # ------------------------------------------------------------------
    # Zoom
    # ------------------------------------------------------------------
    def set_scale(self, scale: float) -> None:
        clamped = max(self.min_scale, min(scale, self.max_scale))
        if clamped != self._scale:
            self._scale = clamped
            self._notify("scale_changed")

    def reset_zoom(self) -> None:
        self.set_scale(1.0)

    # ------------------------------------------------------------------
    # Listeners
    # ------------------------------------------------------------------
    def subscribe(self, listener: ControllerListener) -> Callable[[], None]:
        self._listeners.append(listener)
        return lambda: self.unsubscribe(listener)

    def unsubscribe(self, listener: ControllerListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _notify(self, kind: str) -> None:
        event = ControllerEvent(kind)
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                LOGGER.exception("Controller listener failed on %s", kind)


__all__ = ["ControllerEvent", "InteractiveController"]
