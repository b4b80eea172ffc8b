"""Line-based TODO/FIXME marker extraction."""

from __future__ import annotations

import re
from typing import Final

from todo_tree.markers.models import ExtractedMarker

# `//` or `#`, optional space, keyword, then a run of `:`, `-` or whitespace.
# The text stops at `\r` and the Unicode line separators.
MARKER_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"(?://|#)\s*(?:todos?|fixme)(?:[:\s-]+)([^\n\r\u2028\u2029]+)",
    re.IGNORECASE,
)


def match_marker_line(line: str) -> str | None:
    """Return the stripped marker text of a single line, if any."""
    match = MARKER_PATTERN.search(line)
    if match is None:
        return None
    return match.group(1).strip()


def extract_markers(content: str) -> list[ExtractedMarker]:
    """Scan content line by line and return markers in ascending line order."""
    if not content:
        return []

    markers: list[ExtractedMarker] = []
    for index, line in enumerate(content.split("\n")):
        text = match_marker_line(line)
        if text is None:
            continue
        markers.append(ExtractedMarker(line=index + 1, text=text))
    return markers
