"""
Geometry value types for PDF Hotspots.

Two coordinate systems are modelled here:

- PDF point space: bottom-left origin, 1/72 inch units (:class:`HotspotRect`).
- Consumer space: top-left origin, arbitrary logical scale (:class:`Rect`,
  :class:`Point`).

All types are immutable and compare structurally.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Mapping, Sequence

from .exceptions import InvalidGeometryError


def _check_extent(name: str, value: float) -> float:
    value = float(value)
    if not math.isfinite(value) or value < 0:
        raise InvalidGeometryError(f"{name} must be a finite, non-negative number, got {value!r}")
    return value


@dataclass(frozen=True)
class Point:
    """A point in consumer space (top-left origin)."""

    x: float
    y: float


@dataclass(frozen=True)
class PageSize:
    """
    Width and height of a page or viewport.

    Attributes:
        width: Horizontal extent (points for PDF pages, pixels for viewports)
        height: Vertical extent
    """
    width: float
    height: float

    @property
    def aspect_ratio(self) -> float:
        return self.width / self.height

    @property
    def is_positive(self) -> bool:
        return self.width > 0 and self.height > 0

    @property
    def landscape(self) -> "PageSize":
        """Return this size with the longer side horizontal."""
        if self.width >= self.height:
            return self
        return PageSize(self.height, self.width)

    @property
    def portrait(self) -> "PageSize":
        """Return this size with the longer side vertical."""
        if self.height >= self.width:
            return self
        return PageSize(self.height, self.width)

    def to_dict(self) -> Dict[str, float]:
        return {"width": self.width, "height": self.height}


@dataclass(frozen=True)
class Rect:
    """
    Axis-aligned rectangle in consumer space (top-left origin).

    Attributes:
        left: Left edge
        top: Top edge (smaller values are higher on screen)
        width: Horizontal extent
        height: Vertical extent
    """
    left: float
    top: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.left + self.width

    @property
    def bottom(self) -> float:
        return self.top + self.height

    def contains(self, point: Point) -> bool:
        """Closed-bounds containment test."""
        return self.left <= point.x <= self.right and self.top <= point.y <= self.bottom


@dataclass(frozen=True)
class HotspotRect:
    """
    Rectangular hotspot region in PDF coordinates.

    Coordinates are PDF user space units (points, 1/72 inch) measured from the
    bottom-left corner of the page.

    Attributes:
        left: Left edge X coordinate
        bottom: Bottom edge Y coordinate
        width: Horizontal extent, never negative
        height: Vertical extent, never negative
    """
    left: float
    bottom: float
    width: float
    height: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "left", float(self.left))
        object.__setattr__(self, "bottom", float(self.bottom))
        object.__setattr__(self, "width", _check_extent("width", self.width))
        object.__setattr__(self, "height", _check_extent("height", self.height))

    @classmethod
    def from_ltrb(cls, left: float, bottom: float, right: float, top: float) -> "HotspotRect":
        """Create a rect from its edges; ``top`` is the higher Y value."""
        return cls(left=left, bottom=bottom, width=right - left, height=top - bottom)

    @classmethod
    def from_pdf_rect(cls, values: Sequence[float]) -> "HotspotRect":
        """Create a rect from a PDF ``[llx, lly, urx, ury]`` array."""
        if len(values) != 4:
            raise InvalidGeometryError(f"PDF rect needs 4 values, got {len(values)}")
        return cls.from_ltrb(*values)

    @classmethod
    def from_top_left(cls, rect: Rect, page_height: float) -> "HotspotRect":
        """Convert a top-left origin rect in page points to PDF space."""
        return cls(
            left=rect.left,
            bottom=page_height - rect.bottom,
            width=rect.width,
            height=rect.height,
        )

    @property
    def right(self) -> float:
        return self.left + self.width

    @property
    def top(self) -> float:
        return self.bottom + self.height

    @property
    def center_x(self) -> float:
        return self.left + self.width / 2

    @property
    def center_y(self) -> float:
        return self.bottom + self.height / 2

    def to_pdf_rect(self) -> List[float]:
        return [self.left, self.bottom, self.right, self.top]

    def to_top_left(self, page_height: float) -> Rect:
        """Express this rect with a top-left origin, still in page points."""
        return Rect(
            left=self.left,
            top=page_height - self.top,
            width=self.width,
            height=self.height,
        )

    def contains_point(self, x: float, y: float) -> bool:
        """Return whether the PDF-space point lies inside the closed rect."""
        return self.left <= x <= self.right and self.bottom <= y <= self.top

    def to_dict(self) -> Dict[str, float]:
        return {
            "left": self.left,
            "bottom": self.bottom,
            "width": self.width,
            "height": self.height,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "HotspotRect":
        values = {}
        for key in ("left", "bottom", "width", "height"):
            value = data[key]
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise TypeError(f"rect.{key} must be a number, got {type(value).__name__}")
            values[key] = value
        return cls(**values)


class FitPolicy(str, Enum):
    """How a page is sized into a viewport."""

    CONTAIN = "contain"
    COVER = "cover"
    FIT_WIDTH = "fit_width"
    FIT_HEIGHT = "fit_height"
    FILL = "fill"

    @classmethod
    def parse(cls, value: Any) -> "FitPolicy":
        """Coerce ``value`` to a policy; anything unrecognized means contain."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower().replace("-", "_"))
        except ValueError:
            return cls.CONTAIN


# Common page formats in points.
A4 = PageSize(595.28, 841.89)
A5 = PageSize(419.53, 595.28)
LETTER = PageSize(612.0, 792.0)
LEGAL = PageSize(612.0, 1008.0)

PAGE_FORMATS: Dict[str, PageSize] = {
    "a4": A4,
    "a5": A5,
    "letter": LETTER,
    "legal": LEGAL,
}

# Used when a document declares no usable page boxes.
DEFAULT_PAGE_SIZE = PageSize(595.0, 842.0)


__all__ = [
    "Point",
    "PageSize",
    "Rect",
    "HotspotRect",
    "FitPolicy",
    "A4",
    "A5",
    "LETTER",
    "LEGAL",
    "PAGE_FORMATS",
    "DEFAULT_PAGE_SIZE",
]
