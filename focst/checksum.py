"""Stable checksums over segment lists."""

from __future__ import annotations

import hashlib
from collections.abc import Iterable

from focst.segment import Segment


def _field(value: str) -> bytes:
    data = value.encode("utf-8")
    return str(len(data)).encode("ascii") + b":" + data + b"\n"


def segments_checksum(segments: Iterable[Segment]) -> bytes:
    """Return a 32-byte SHA-256 digest of the segments' times and lines."""
    segments = list(segments)
    digest = hashlib.sha256()
    digest.update(b"segments_v1\n")
    digest.update(f"{len(segments)}\n".encode("ascii"))
    for seg in segments:
        digest.update(_field(seg.start_time))
        digest.update(_field(seg.end_time))
        digest.update(f"{len(seg.lines)}\n".encode("ascii"))
        for line in seg.lines:
            digest.update(_field(line))
    return digest.digest()


def segments_checksum_hex(segments: Iterable[Segment]) -> str:
    """Return the checksum as a 'sha256:'-prefixed hex string."""
    return "sha256:" + segments_checksum(segments).hex()