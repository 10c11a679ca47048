"""Annotation manifest: the versioned record embedded into a PDF.

The manifest travels as compact JSON, UTF-8 encoded and then base64 encoded so
that it is ASCII-safe inside a PDF content stream. Binary fields inside the JSON
(inline images and shared assets) use the same base64 transform.
"""

from __future__ import annotations

import base64
import json
import logging
import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .exceptions import ManifestDecodeError
from .types import HotspotRect

LOGGER = logging.getLogger(__name__)


def _b64encode(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def _b64decode(text: Any) -> bytes:
    if not isinstance(text, str):
        raise TypeError(f"expected base64 text, got {type(text).__name__}")
    return base64.b64decode(text.encode("ascii"), validate=True)


def _optional_str(data: Mapping[str, Any], key: str) -> Optional[str]:
    value = data.get(key)
    if value is not None and not isinstance(value, str):
        raise TypeError(f"'{key}' must be a string")
    return value


def _optional_mapping(data: Mapping[str, Any], key: str) -> Optional[Dict[str, Any]]:
    value = data.get(key)
    if value is not None and not isinstance(value, dict):
        raise TypeError(f"'{key}' must be an object")
    return value


class AnnotationType(str, Enum):
    """Advisory kind of a hotspot. Does not constrain its content."""

    TEXT = "text"
    IMAGE = "image"
    RICH_TEXT = "richText"
    CUSTOM = "custom"

    @property
    def identifier(self) -> str:
        return self.value

    @classmethod
    def from_identifier(cls, identifier: Any) -> "AnnotationType":
        """Unknown identifiers decode to :attr:`CUSTOM` for forward compatibility."""
        try:
            return cls(identifier)
        except ValueError:
            return cls.CUSTOM


@dataclass(frozen=True)
class AnnotationContent:
    """
    Payload revealed when a hotspot is activated.

    Attributes:
        text: Plain text to display
        image_bytes: Encoded image (PNG/JPEG) stored inline
        asset_key: Key into the manifest's shared assets, preferred for images
            reused by many hotspots
        custom_payload: Free-form JSON-serializable mapping
        title: Optional popup title
        description: Optional subtitle
    """
    text: Optional[str] = None
    image_bytes: Optional[bytes] = None
    asset_key: Optional[str] = None
    custom_payload: Optional[Dict[str, Any]] = None
    title: Optional[str] = None
    description: Optional[str] = None

    def __hash__(self) -> int:
        return hash((self.text, self.asset_key, self.title, self.description))

    @classmethod
    def text_content(cls, text: str, *, title: Optional[str] = None) -> "AnnotationContent":
        return cls(text=text, title=title)

    @classmethod
    def image_content(cls, image_bytes: bytes, *, title: Optional[str] = None) -> "AnnotationContent":
        return cls(image_bytes=bytes(image_bytes), title=title)

    @classmethod
    def asset_ref(cls, asset_key: str, *, title: Optional[str] = None) -> "AnnotationContent":
        return cls(asset_key=asset_key, title=title)

    @property
    def has_content(self) -> bool:
        return (
            self.text is not None
            or self.image_bytes is not None
            or self.asset_key is not None
            or self.custom_payload is not None
        )

    @property
    def has_image(self) -> bool:
        return self.image_bytes is not None or self.asset_key is not None

    @property
    def has_text(self) -> bool:
        return bool(self.text)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        if self.text is not None:
            data["text"] = self.text
        if self.image_bytes is not None:
            data["imageBytes"] = _b64encode(self.image_bytes)
        if self.asset_key is not None:
            data["assetKey"] = self.asset_key
        if self.custom_payload is not None:
            data["customPayload"] = self.custom_payload
        if self.title is not None:
            data["title"] = self.title
        if self.description is not None:
            data["description"] = self.description
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "AnnotationContent":
        image = data.get("imageBytes")
        return cls(
            text=_optional_str(data, "text"),
            image_bytes=_b64decode(image) if image is not None else None,
            asset_key=_optional_str(data, "assetKey"),
            custom_payload=_optional_mapping(data, "customPayload"),
            title=_optional_str(data, "title"),
            description=_optional_str(data, "description"),
        )


@dataclass(frozen=True, eq=False)
class HotspotAnnotation:
    """
    A hotspot region bound to a content payload.

    Identity is the ``id``: two annotations with the same id are equal, and
    updates are expressed by replacing the annotation with that id.

    Attributes:
        id: Globally unique identifier, stable across save and reload
        page_index: Zero-based page index
        rect: Region in PDF coordinates
        type: Advisory annotation kind
        content: Payload shown on activation
        show_default_icon: Whether generic PDF viewers should show an icon
        initially_visible: Whether that icon starts visible
        label: Author-only label, never shown to end users
    """
    id: str
    page_index: int
    rect: HotspotRect
    type: AnnotationType = AnnotationType.TEXT
    content: AnnotationContent = field(default_factory=AnnotationContent)
    show_default_icon: bool = False
    initially_visible: bool = False
    label: Optional[str] = None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, HotspotAnnotation):
            return NotImplemented
        return other.id == self.id

    def __hash__(self) -> int:
        return hash(self.id)

    def replace(self, **changes: Any) -> "HotspotAnnotation":
        return replace(self, **changes)

    def same_as(self, other: "HotspotAnnotation") -> bool:
        """Field-by-field comparison, unlike ``==`` which only looks at ids."""
        return (
            self.id == other.id
            and self.page_index == other.page_index
            and self.rect == other.rect
            and self.type is other.type
            and self.content == other.content
            and self.show_default_icon == other.show_default_icon
            and self.initially_visible == other.initially_visible
            and self.label == other.label
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "id": self.id,
            "pageIndex": self.page_index,
            "rect": self.rect.to_dict(),
            "type": self.type.identifier,
            "content": self.content.to_dict(),
            "showDefaultIcon": self.show_default_icon,
            "initiallyVisible": self.initially_visible,
        }
        if self.label is not None:
            data["label"] = self.label
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "HotspotAnnotation":
        annotation_id = data["id"]
        page_index = data["pageIndex"]
        if not isinstance(annotation_id, str):
            raise TypeError("'id' must be a string")
        if isinstance(page_index, bool) or not isinstance(page_index, int):
            raise TypeError("'pageIndex' must be an integer")
        return cls(
            id=annotation_id,
            page_index=page_index,
            rect=HotspotRect.from_dict(data["rect"]),
            type=AnnotationType.from_identifier(data.get("type")),
            content=AnnotationContent.from_dict(data.get("content") or {}),
            show_default_icon=bool(data.get("showDefaultIcon", False)),
            initially_visible=bool(data.get("initiallyVisible", False)),
            label=_optional_str(data, "label"),
        )


def new_annotation_id() -> str:
    return str(uuid.uuid4())


def new_manifest_id() -> str:
    millis = int(datetime.now(tz=timezone.utc).timestamp() * 1000)
    return f"apdf_manifest_{millis}"


@dataclass(frozen=True)
class AnnotationManifest:
    """
    Complete record of the hotspots, shared assets and metadata of a document.

    A manifest is immutable; authoring code mutates its own hotspot collection
    and builds a fresh manifest at save time.
    """

    VERSION = 1

    id: str
    annotations: Tuple[HotspotAnnotation, ...] = ()
    shared_assets: Dict[str, bytes] = field(default_factory=dict)
    metadata: Optional[Dict[str, Any]] = None
    version: int = VERSION

    def __post_init__(self) -> None:
        object.__setattr__(self, "annotations", tuple(self.annotations))
        object.__setattr__(self, "shared_assets", dict(self.shared_assets))

    @classmethod
    def empty(cls) -> "AnnotationManifest":
        return cls(id=new_manifest_id())

    def annotations_for_page(self, page_index: int) -> List[HotspotAnnotation]:
        return [annotation for annotation in self.annotations if annotation.page_index == page_index]

    def get_annotation(self, annotation_id: str) -> Optional[HotspotAnnotation]:
        for annotation in self.annotations:
            if annotation.id == annotation_id:
                return annotation
        return None

    def get_asset(self, key: str) -> Optional[bytes]:
        return self.shared_assets.get(key)

    def has_asset(self, key: str) -> bool:
        return key in self.shared_assets

    def resolve_image(self, content: AnnotationContent) -> Optional[bytes]:
        """Image bytes for ``content``; a dangling asset key yields ``None``."""
        if content.image_bytes is not None:
            return content.image_bytes
        if content.asset_key is not None:
            return self.shared_assets.get(content.asset_key)
        return None

    def missing_asset_keys(self) -> List[str]:
        missing: List[str] = []
        for annotation in self.annotations:
            key = annotation.content.asset_key
            if key is not None and key not in self.shared_assets and key not in missing:
                missing.append(key)
        return missing

    def with_annotation(self, annotation: HotspotAnnotation) -> "AnnotationManifest":
        return replace(self, annotations=self.annotations + (annotation,))

    def with_asset(self, key: str, data: bytes) -> "AnnotationManifest":
        assets = dict(self.shared_assets)
        assets[key] = bytes(data)
        return replace(self, shared_assets=assets)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "version": self.version,
            "id": self.id,
            "annotations": [annotation.to_dict() for annotation in self.annotations],
            "sharedAssets": {key: _b64encode(value) for key, value in self.shared_assets.items()},
        }
        if self.metadata is not None:
            data["metadata"] = self.metadata
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "AnnotationManifest":
        if not isinstance(data, dict):
            raise TypeError("manifest must be a JSON object")
        version = data.get("version", cls.VERSION)
        if isinstance(version, bool) or not isinstance(version, int):
            raise TypeError("'version' must be an integer")
        if version > cls.VERSION:
            LOGGER.warning(
                "Manifest version %s is newer than supported version %s; decoding known fields only",
                version,
                cls.VERSION,
            )
        manifest_id = data["id"]
        if not isinstance(manifest_id, str):
            raise TypeError("'id' must be a string")
        annotations = data["annotations"]
        if not isinstance(annotations, list):
            raise TypeError("'annotations' must be an array")
        assets = data.get("sharedAssets") or {}
        if not isinstance(assets, dict):
            raise TypeError("'sharedAssets' must be an object")
        return cls(
            id=manifest_id,
            annotations=tuple(HotspotAnnotation.from_dict(item) for item in annotations),
            shared_assets={str(key): _b64decode(value) for key, value in assets.items()},
            metadata=_optional_mapping(data, "metadata"),
            version=version,
        )

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), separators=(",", ":"), ensure_ascii=False)

    @classmethod
    def from_json(cls, text: str) -> "AnnotationManifest":
        return cls.from_dict(json.loads(text))

    def __str__(self) -> str:
        return (
            f"AnnotationManifest(id={self.id}, annotations={len(self.annotations)}, "
            f"assets={len(self.shared_assets)})"
        )


def encode_manifest(manifest: AnnotationManifest) -> str:
    """Encode ``manifest`` into the ASCII-safe block embedded in a PDF."""

    return _b64encode(manifest.to_json().encode("utf-8"))


def decode_manifest(block: str) -> AnnotationManifest:
    """Reverse :func:`encode_manifest`, raising :class:`ManifestDecodeError`."""

    try:
        text = _b64decode(block.strip()).decode("utf-8")
        return AnnotationManifest.from_json(text)
    except (ValueError, KeyError, TypeError, AttributeError, OverflowError, RecursionError) as exc:
        raise ManifestDecodeError(f"Invalid manifest block: {exc}") from exc


__all__ = [
    "AnnotationType",
    "AnnotationContent",
    "HotspotAnnotation",
    "AnnotationManifest",
    "encode_manifest",
    "decode_manifest",
    "new_annotation_id",
    "new_manifest_id",
]
