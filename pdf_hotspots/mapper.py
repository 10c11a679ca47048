"""Coordinate mapping between PDF point space and consumer pixel space.

PDF space has its origin at the bottom-left corner and measures in points.
Consumer space has its origin at the top-left corner and any scale; a page of
``page_size`` points is displayed at ``rendered_size``.
"""

from __future__ import annotations

from typing import Any, Iterable, List, Optional, Tuple

from .exceptions import InvalidGeometryError
from .manifest import HotspotAnnotation
from .types import FitPolicy, HotspotRect, PageSize, Point, Rect

# Slack in consumer units absorbing float rounding at the edges.
HIT_TOLERANCE = 1e-9


def _require_positive(name: str, size: PageSize) -> None:
    if not size.is_positive:
        raise InvalidGeometryError(f"{name} must have positive width and height, got {size}")


def _scale(page_size: PageSize, rendered_size: PageSize) -> Tuple[float, float]:
    _require_positive("page_size", page_size)
    _require_positive("rendered_size", rendered_size)
    return rendered_size.width / page_size.width, rendered_size.height / page_size.height


def to_consumer_rect(host_rect: HotspotRect, page_size: PageSize, rendered_size: PageSize) -> Rect:
    """Map a PDF-space rect onto the rendered page, flipping the Y axis."""

    sx, sy = _scale(page_size, rendered_size)
    return Rect(
        left=host_rect.left * sx,
        top=(page_size.height - host_rect.top) * sy,
        width=host_rect.width * sx,
        height=host_rect.height * sy,
    )


def to_host_rect(rect: Rect, page_size: PageSize, rendered_size: PageSize) -> HotspotRect:
    """Inverse of :func:`to_consumer_rect`."""

    sx, sy = _scale(page_size, rendered_size)
    width = rect.width / sx
    height = rect.height / sy
    return HotspotRect(
        left=rect.left / sx,
        bottom=page_size.height - rect.top / sy - height,
        width=width,
        height=height,
    )


def to_consumer_point(x: float, y: float, page_size: PageSize, rendered_size: PageSize) -> Point:
    """Map the PDF-space point ``(x, y)`` onto the rendered page."""

    sx, sy = _scale(page_size, rendered_size)
    return Point(x * sx, (page_size.height - y) * sy)


def to_host_point(point: Point, page_size: PageSize, rendered_size: PageSize) -> Tuple[float, float]:
    """Map a consumer point back to PDF space as an ``(x, y)`` tuple."""

    sx, sy = _scale(page_size, rendered_size)
    return point.x / sx, page_size.height - point.y / sy


def hit_test(point: Point, host_rect: HotspotRect, page_size: PageSize, rendered_size: PageSize) -> bool:
    """
    Whether ``point`` falls inside ``host_rect`` once mapped; edges count as inside.

    Each edge is mapped on its own, the same way :func:`to_consumer_point` maps
    a corner, so host-space corners land exactly on the bounds.
    """

    sx, sy = _scale(page_size, rendered_size)
    x0 = host_rect.left * sx - HIT_TOLERANCE
    x1 = host_rect.right * sx + HIT_TOLERANCE
    y0 = (page_size.height - host_rect.top) * sy - HIT_TOLERANCE
    y1 = (page_size.height - host_rect.bottom) * sy + HIT_TOLERANCE
    return x0 <= point.x <= x1 and y0 <= point.y <= y1


def find_hotspots_at_point(
    point: Point,
    hotspots: Iterable[HotspotAnnotation],
    page_index: int,
    page_size: PageSize,
    rendered_size: PageSize,
) -> List[HotspotAnnotation]:
    """
    Return every hotspot on ``page_index`` whose region contains ``point``.

    Order follows ``hotspots``; when a single hit is needed the first element
    wins. Hotspots that name another (or a nonexistent) page never match.
    """

    _scale(page_size, rendered_size)
    return [
        hotspot
        for hotspot in hotspots
        if hotspot.page_index == page_index and hit_test(point, hotspot.rect, page_size, rendered_size)
    ]


def first_hotspot_at_point(
    point: Point,
    hotspots: Iterable[HotspotAnnotation],
    page_index: int,
    page_size: PageSize,
    rendered_size: PageSize,
) -> Optional[HotspotAnnotation]:
    matches = find_hotspots_at_point(point, hotspots, page_index, page_size, rendered_size)
    return matches[0] if matches else None


def calculate_fit_size(page_size: PageSize, viewport: PageSize, fit: Any = FitPolicy.CONTAIN) -> PageSize:
    """
    Size a page into ``viewport`` preserving its aspect ratio.

    ``contain`` fits the whole page inside, ``cover`` fills the viewport and may
    overflow, ``fit_width``/``fit_height`` pin one side, ``fill`` stretches to
    the viewport. Unknown policies behave like ``contain``.
    """

    _require_positive("page_size", page_size)
    _require_positive("viewport", viewport)
    policy = FitPolicy.parse(fit)
    page_aspect = page_size.aspect_ratio
    viewport_aspect = viewport.aspect_ratio

    by_width = PageSize(viewport.width, viewport.width / page_aspect)
    by_height = PageSize(viewport.height * page_aspect, viewport.height)

    if policy is FitPolicy.COVER:
        return by_height if page_aspect > viewport_aspect else by_width
    if policy is FitPolicy.FIT_WIDTH:
        return by_width
    if policy is FitPolicy.FIT_HEIGHT:
        return by_height
    if policy is FitPolicy.FILL:
        return viewport
    # Wider pages are limited by the viewport width.
    return by_width if page_aspect > viewport_aspect else by_height


__all__ = [
    "to_consumer_rect",
    "to_host_rect",
    "to_consumer_point",
    "to_host_point",
    "hit_test",
    "find_hotspots_at_point",
    "first_hotspot_at_point",
    "calculate_fit_size",
]
