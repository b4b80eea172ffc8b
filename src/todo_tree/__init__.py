"""Incremental TODO/FIXME marker index."""

from .markers import FileGroup, Marker, MarkerIndex, extract_markers

__all__ = ["FileGroup", "Marker", "MarkerIndex", "extract_markers"]
