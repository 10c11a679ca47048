"""Authoring backends for PDF Hotspots."""

from .base import AuthoringBackend
from .pypdf_backend import PypdfAuthoringBackend

__all__ = [
    "AuthoringBackend",
    "PypdfAuthoringBackend",
]
