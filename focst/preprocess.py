"""Cleaning and filtering of source segments before translation."""

from __future__ import annotations

import os
import re
import unicodedata
from dataclasses import dataclass, replace

from focst.segment import Segment

_BRACKETS = re.compile(r"\([^)]*\)|\[[^\]]*\]|（[^）]*）|［[^］]*］")


@dataclass(frozen=True)
class IDMap:
    """Links a re-numbered segment to its original ID."""

    internal_id: int
    original_id: int


def _extension(path: str) -> str:
    for index in range(len(path) - 1, -1, -1):
        char = path[index]
        if char in ("/", os.sep):
            break
        if char == ".":
            return path[index:]
    return ""


def _is_meaningless(lines: list[str]) -> bool:
    return not any(
        unicodedata.category(char)[0] in ("L", "N") for line in lines for char in line
    )


def _merge_same_timestamps(segments: list[Segment]) -> list[Segment]:
    merged: list[Segment] = []
    for seg in segments:
        previous = merged[-1] if merged else None
        if (
            previous is not None
            and previous.start_time == seg.start_time
            and previous.end_time == seg.end_time
        ):
            previous.lines.extend(seg.lines)
        else:
            merged.append(replace(seg, lines=list(seg.lines)))
    return merged


def preprocess_with_mapping(
    segments: list[Segment],
    source_lang_code: str,
    apply_lang_rules: bool = True,
    source_path: str | None = None,
) -> tuple[list[Segment], list[IDMap]]:
    """Clean segments, drop empty ones, re-number them and map new IDs to old.

    For WebVTT sources, consecutive segments with identical timestamps are
    merged first. Bracket removal and symbol-only filtering apply to Japanese.
    """
    if source_path is not None and _extension(source_path).lower() == ".vtt":
        segments = _merge_same_timestamps(segments)

    japanese_rules = apply_lang_rules and source_lang_code == "ja"
    cleaned: list[Segment] = []
    mapping: list[IDMap] = []

    for seg in segments:
        new_lines = []
        for line in seg.lines:
            if japanese_rules:
                line = _BRACKETS.sub("", line).replace("<", "").replace(">", "")
            line = line.strip()
            if line:
                new_lines.append(line)

        if not new_lines:
            continue
        if japanese_rules and _is_meaningless(new_lines):
            continue

        new_id = len(cleaned) + 1
        cleaned.append(replace(seg, id=new_id, lines=new_lines))
        mapping.append(IDMap(internal_id=new_id, original_id=seg.id))

    return cleaned, mapping


def preprocess(
    segments: list[Segment],
    source_lang_code: str,
    apply_lang_rules: bool = True,
) -> list[Segment]:
    """Clean and re-number segments, discarding the ID mapping."""
    cleaned, _ = preprocess_with_mapping(segments, source_lang_code, apply_lang_rules)
    return cleaned