"""Structured logging utilities."""

from .events import IndexEvent, IndexEventRecorder, JsonlEventLogger, utc_timestamp

__all__ = ["IndexEvent", "IndexEventRecorder", "JsonlEventLogger", "utc_timestamp"]
