"""Typed models for marker index state."""

from __future__ import annotations

from dataclasses import dataclass
from typing import NamedTuple


@dataclass(slots=True, frozen=True)
class ExtractedMarker:
    """Marker found in raw text before it is bound to a file."""

    line: int
    text: str


@dataclass(slots=True, frozen=True)
class Marker:
    """One indexed TODO/FIXME comment line."""

    path: str
    line: int
    text: str

    def __post_init__(self) -> None:
        if self.line < 1:
            raise ValueError(f"Marker line must be >= 1, got {self.line}.")


class MarkerKey(NamedTuple):
    """Structured composite key; paths are compared whole, never by prefix."""

    path: str
    line: int


@dataclass(slots=True, frozen=True)
class FileGroup:
    """Line-ordered markers of one file."""

    path: str
    markers: tuple[Marker, ...]

    @property
    def count(self) -> int:
        return len(self.markers)
