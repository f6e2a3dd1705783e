"""Subtitle loading, cleanup, timing correction and output-path helpers."""

__version__ = "0.1.3"

__all__ = [
    "checksum",
    "paths",
    "postprocess",
    "preprocess",
    "segment",
    "subtitles",
    "version",
]