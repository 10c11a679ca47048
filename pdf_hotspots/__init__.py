"""
PDF Hotspots - Interactive hotspot regions embedded inside ordinary PDF files.

This library lets authors attach invisible interactive regions ("hotspots")
to PDF pages. The hotspot data travels inside the PDF itself as a versioned,
base64-encoded manifest on a tiny hidden trailing page, so the file stays a
valid PDF for every viewer while a hotspot-aware viewer can recover the
regions, map them onto rendered pages and hit-test user input.

Quick Start:
    >>> from pdf_hotspots import HotspotDocument, HotspotRect, parse_hotspots
    >>> doc = HotspotDocument(title="Guide")
    >>> page = doc.add_page()
    >>> hotspot = doc.add_text_hotspot(page, HotspotRect(100, 700, 200, 50), "Hidden note")
    >>> data = doc.save()
    >>> [h.content.text for h in parse_hotspots(data)]
    ['Hidden note']

Main Classes:
    - HotspotDocument: Author a PDF and embed hotspots
    - InteractiveController: Viewer state (page, active hotspot, zoom)
    - PageRenderCache: Bounded, de-duplicating cache of rendered pages

Data Classes:
    - HotspotRect, PageSize, Point, Rect: Geometry in PDF and consumer space
    - HotspotAnnotation, AnnotationContent, AnnotationManifest: Wire model
    - PageRenderCacheConfig: Render cache settings and presets

Exceptions:
    - HotspotError: Base exception
    - InvalidGeometryError: Unusable rectangle or page size
    - InvalidConfigError: Render cache setting out of range
    - HotspotNotFoundError: Unknown hotspot id
    - DuplicateHotspotError: Hotspot id already in use
    - EmbeddingError: Authoring backend failure

For CLI usage, use the 'pdf-hotspots' command after installation.
"""

# Core classes
from pdf_hotspots.document import HotspotDocument
from pdf_hotspots.controller import ControllerEvent, InteractiveController
from pdf_hotspots.render import (
    DEFAULT_CACHE_CONFIG,
    HIGH_QUALITY_CACHE_CONFIG,
    LOW_MEMORY_CACHE_CONFIG,
    CacheEvent,
    PageRenderCache,
    PageRenderCacheConfig,
    PyMuPDFRasterizer,
    Rasterizer,
)

# Data types
from pdf_hotspots.types import (
    A4,
    A5,
    LEGAL,
    LETTER,
    DEFAULT_PAGE_SIZE,
    FitPolicy,
    HotspotRect,
    PageSize,
    Point,
    Rect,
)
from pdf_hotspots.manifest import (
    AnnotationContent,
    AnnotationManifest,
    AnnotationType,
    HotspotAnnotation,
)

# Reading embedded hotspots
from pdf_hotspots.parser import (
    extract_manifest_block,
    get_page_count,
    get_page_dimensions,
    has_hotspots,
    parse_hotspots,
    parse_manifest,
)

# Coordinate mapping
from pdf_hotspots.mapper import (
    calculate_fit_size,
    find_hotspots_at_point,
    first_hotspot_at_point,
    hit_test,
    to_consumer_point,
    to_consumer_rect,
    to_host_point,
    to_host_rect,
)

# Exceptions
from pdf_hotspots.exceptions import (
    HotspotError,
    InvalidGeometryError,
    InvalidConfigError,
    ManifestDecodeError,
    HotspotNotFoundError,
    DuplicateHotspotError,
    EmbeddingError,
)

# Utility functions
from pdf_hotspots.utils import configure_logging, format_file_size, save_bytes

__version__ = "1.0.0"
__author__ = "PDF Hotspots Contributors"
__license__ = "MIT"

__all__ = [
    # Main classes
    "HotspotDocument",
    "InteractiveController",
    "ControllerEvent",
    "PageRenderCache",
    "PageRenderCacheConfig",
    "CacheEvent",
    "Rasterizer",
    "PyMuPDFRasterizer",
    "DEFAULT_CACHE_CONFIG",
    "LOW_MEMORY_CACHE_CONFIG",
    "HIGH_QUALITY_CACHE_CONFIG",
    # Data types
    "HotspotRect",
    "PageSize",
    "Point",
    "Rect",
    "FitPolicy",
    "A4",
    "A5",
    "LETTER",
    "LEGAL",
    "DEFAULT_PAGE_SIZE",
    "AnnotationType",
    "AnnotationContent",
    "HotspotAnnotation",
    "AnnotationManifest",
    # Parsing
    "extract_manifest_block",
    "parse_manifest",
    "parse_hotspots",
    "has_hotspots",
    "get_page_dimensions",
    "get_page_count",
    # Mapping
    "to_consumer_rect",
    "to_host_rect",
    "to_consumer_point",
    "to_host_point",
    "hit_test",
    "find_hotspots_at_point",
    "first_hotspot_at_point",
    "calculate_fit_size",
    # Exceptions
    "HotspotError",
    "InvalidGeometryError",
    "InvalidConfigError",
    "ManifestDecodeError",
    "HotspotNotFoundError",
    "DuplicateHotspotError",
    "EmbeddingError",
    # Utility functions
    "configure_logging",
    "format_file_size",
    "save_bytes",
    # Version info
    "__version__",
]
