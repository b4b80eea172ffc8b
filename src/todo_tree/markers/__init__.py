"""Marker extraction and indexing package."""

from .extractor import MARKER_PATTERN, extract_markers, match_marker_line
from .index import ChangeListener, MarkerIndex, Subscription
from .models import ExtractedMarker, FileGroup, Marker, MarkerKey

__all__ = [
    "ChangeListener",
    "ExtractedMarker",
    "FileGroup",
    "MARKER_PATTERN",
    "Marker",
    "MarkerIndex",
    "MarkerKey",
    "Subscription",
    "extract_markers",
    "match_marker_line",
]
