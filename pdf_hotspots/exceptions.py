"""
Custom exceptions for PDF Hotspots.

This module defines all custom exceptions used throughout the library.
Decode failures of an embedded manifest never leave the parser; only caller
contract violations surface to application code.
"""


class HotspotError(Exception):
    """Base exception for all PDF Hotspots errors."""

    def __init__(self, message: str = "") -> None:
        super().__init__(message or self.default_message)
        self.message = message or self.default_message

    @property
    def default_message(self) -> str:
        return "An unknown PDF hotspots error occurred."


class InvalidGeometryError(HotspotError, ValueError):
    """Raised when a rectangle or page size has unusable dimensions."""

    @property
    def default_message(self) -> str:
        return "Invalid geometry: dimensions must be finite and non-negative."


class InvalidConfigError(HotspotError, ValueError):
    """Raised when a render cache configuration value is out of range."""

    @property
    def default_message(self) -> str:
        return "Invalid render cache configuration."


class ManifestDecodeError(HotspotError, ValueError):
    """Raised when an embedded manifest block cannot be decoded."""

    @property
    def default_message(self) -> str:
        return "Embedded annotation manifest is corrupted or unreadable."


class HotspotNotFoundError(HotspotError, KeyError):
    """Raised when a hotspot id does not exist."""

    def __str__(self) -> str:
        return self.message

    @property
    def default_message(self) -> str:
        return "Hotspot not found."


class EmbeddingError(HotspotError):
    """Raised when the authoring backend fails to produce document bytes."""

    @property
    def default_message(self) -> str:
        return "Failed to write the PDF document."


class DuplicateHotspotError(HotspotError, ValueError):
    """Raised when adding a hotspot whose id is already in use."""

    @property
    def default_message(self) -> str:
        return "A hotspot with this id already exists."
