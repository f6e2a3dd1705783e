"""Subtitle segments and the timestamp format used inside the package."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import timedelta

_INTEGER = re.compile(r"[+-]?[0-9]+")
_MILLISECOND = timedelta(milliseconds=1)


class TimestampError(ValueError):
    """Raised when a timestamp is not of the form HH:MM:SS,mmm."""


class SegmentValidationError(ValueError):
    """Raised when a list of segments cannot be translated."""


@dataclass
class Segment:
    """A single subtitle entry with timestamps in HH:MM:SS,mmm form."""

    id: int = 0
    start_time: str = ""
    end_time: str = ""
    lines: list[str] = field(default_factory=list)


def _to_int(text: str) -> int | None:
    if _INTEGER.fullmatch(text) is None:
        return None
    return int(text)


def parse_timestamp(s: str) -> timedelta:
    """Parse an HH:MM:SS,mmm timestamp; hours may exceed 23."""
    parts = s.split(",")
    if len(parts) != 2:
        raise TimestampError(f"invalid timestamp format: {s}")

    ms_text = parts[1]
    if len(ms_text) != 3:
        raise TimestampError(f"invalid millisecond format: {s}")
    ms = _to_int(ms_text)
    if ms is None or not 0 <= ms <= 999:
        raise TimestampError(f"invalid milliseconds: {s}")

    hms = parts[0].split(":")
    if len(hms) != 3:
        raise TimestampError(f"invalid time format: {s}")

    hours = _to_int(hms[0])
    if hours is None or hours < 0:
        raise TimestampError(f"invalid hours: {s}")
    minutes = _to_int(hms[1])
    if minutes is None or not 0 <= minutes <= 59:
        raise TimestampError(f"invalid minutes: {s}")
    seconds = _to_int(hms[2])
    if seconds is None or not 0 <= seconds <= 59:
        raise TimestampError(f"invalid seconds: {s}")

    return timedelta(hours=hours, minutes=minutes, seconds=seconds, milliseconds=ms)


def format_timestamp(d: timedelta) -> str:
    """Format a duration as HH:MM:SS,mmm, clamping negatives to zero."""
    if d < timedelta(0):
        d = timedelta(0)
    total_ms = d // _MILLISECOND
    hours, rest = divmod(total_ms, 3_600_000)
    minutes, rest = divmod(rest, 60_000)
    seconds, ms = divmod(rest, 1000)
    return f"{hours:02d}:{minutes:02d}:{seconds:02d},{ms:03d}"


def validate(segments: list[Segment]) -> None:
    """Check that segments exist, carry text and have ordered, valid timestamps."""
    if not segments:
        raise SegmentValidationError("no subtitles found in file")

    has_text = False
    for position, seg in enumerate(segments, start=1):
        if any(line.strip() for line in seg.lines):
            has_text = True

        try:
            start = parse_timestamp(seg.start_time)
        except TimestampError as exc:
            raise SegmentValidationError(
                f"invalid StartTime at segment {position} (ID: {seg.id}): {exc}"
            ) from exc
        try:
            end = parse_timestamp(seg.end_time)
        except TimestampError as exc:
            raise SegmentValidationError(
                f"invalid EndTime at segment {position} (ID: {seg.id}): {exc}"
            ) from exc

        if end < start:
            raise SegmentValidationError(
                f"EndTime is before StartTime at segment {position} (ID: {seg.id})"
            )

    if not has_text:
        raise SegmentValidationError("file contains subtitles but no dialogue text")