"""Punctuation cleanup and timing correction for translated segments."""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from datetime import timedelta

import regex

from focst.segment import Segment, TimestampError, format_timestamp, parse_timestamp

logger = logging.getLogger(__name__)

_GRAPHEME = regex.compile(r"\X")
_ELLIPSIS = re.compile(r"\.{3}")
_ANGLE_BRACKETS = re.compile(r"[<>]")
_MULTI_SPACE = re.compile(r"[\t\n\f\r ]+")
_JA_COMMA = re.compile(r"、[ 　]*")
_JA_PERIOD = re.compile(r"。[ 　]*")
_TRAILING_IDEOGRAPHIC_COMMA = re.compile(r"、(?= *$)")

_NANOSECOND = timedelta(microseconds=1)
_NS_PER_SECOND = 1_000_000_000
_MIN_DURATION = 0.8
_OVERLAP_GAP_NS = 5_000_000
_DEFAULT_CPS = 12


def grapheme_count(text: str) -> int:
    """Return the number of user-perceived characters in text."""
    return len(_GRAPHEME.findall(text))


def _is_digit(char: str) -> bool:
    return "0" <= char <= "9"


def _is_alpha(char: str) -> bool:
    return "a" <= char <= "z" or "A" <= char <= "Z"


def _is_upper(char: str) -> bool:
    return "A" <= char <= "Z"


def _between(line: str, index: int, test: Callable[[str], bool]) -> bool:
    return 0 < index < len(line) - 1 and test(line[index - 1]) and test(line[index + 1])


def _is_period_exception(line: str, index: int) -> bool:
    """Periods in '..', numbers, dotted words and capital abbreviations stay."""
    if (index > 0 and line[index - 1] == ".") or (
        index < len(line) - 1 and line[index + 1] == "."
    ):
        return True
    if _between(line, index, _is_digit) or _between(line, index, _is_alpha):
        return True
    return index > 0 and _is_upper(line[index - 1])


def _only_after(line: str, index: int, allowed: str) -> bool:
    return not line[index + 1 :].strip(allowed)


def _replace_mark(pattern: re.Pattern[str], line: str, replacement: str) -> str:
    """Drop a mark at the end of the line, otherwise replace it and its spaces."""
    return pattern.sub(lambda m: "" if m.end() == len(line) else replacement, line)


def _keep_nonempty(lines: list[str], clean: Callable[[str], str]) -> list[str]:
    return [cleaned for cleaned in map(clean, lines) if cleaned]


def _korean_periods(line: str) -> str:
    parts = []
    for index, char in enumerate(line):
        if char != ".":
            parts.append(char)
        elif _is_period_exception(line, index):
            parts.append(".")
        elif not _only_after(line, index, " ,!?"):
            parts.append(",")
    return "".join(parts)


def _clean_korean_line(line: str) -> str:
    line = _ELLIPSIS.sub("…", line)
    line = _ANGLE_BRACKETS.sub("", line)
    line = _korean_periods(line)
    return line.rstrip(",").strip()


def clean_punctuation(lines: list[str]) -> list[str]:
    """Apply Korean subtitle punctuation rules and drop lines left empty."""
    return _keep_nonempty(lines, _clean_korean_line)


def _clean_japanese_line(line: str) -> str:
    line = _ELLIPSIS.sub("…", line)
    line = _replace_mark(_JA_COMMA, line, " ")
    line = _replace_mark(_JA_PERIOD, line, "　")
    return line.strip()


def clean_japanese_punctuation(lines: list[str]) -> list[str]:
    """Apply Japanese subtitle punctuation rules and drop lines left empty."""
    return _keep_nonempty(lines, _clean_japanese_line)


def _traditional_commas(line: str) -> str:
    parts = []
    for index, char in enumerate(line):
        if char not in ",，":
            parts.append(char)
        elif char == "," and _between(line, index, _is_digit):
            parts.append(",")
        elif not _only_after(line, index, " "):
            parts.append("，")
    return "".join(parts)


def _traditional_periods(line: str) -> str:
    parts = []
    for index, char in enumerate(line):
        if char not in ".。":
            parts.append(char)
        elif char == "." and _is_period_exception(line, index):
            parts.append(".")
        elif not _only_after(line, index, " "):
            parts.append("，")
    return "".join(parts)


def _clean_traditional_line(line: str) -> str:
    line = _ELLIPSIS.sub("…", line)
    line = _TRAILING_IDEOGRAPHIC_COMMA.sub("", line)
    line = _traditional_commas(line)
    line = _traditional_periods(line)
    line = _MULTI_SPACE.sub(" ", line)
    line = line.replace("， ", "，")
    return line.strip()


def clean_traditional_chinese_punctuation(lines: list[str]) -> list[str]:
    """Apply Traditional Chinese punctuation rules and drop lines left empty."""
    return _keep_nonempty(lines, _clean_traditional_line)


def _simplified_marks(line: str) -> str:
    parts = []
    for index, char in enumerate(line):
        if char not in ",，.。":
            parts.append(char)
        elif char in ",." and _between(line, index, _is_digit):
            parts.append(char)
        elif char == "." and _is_period_exception(line, index):
            parts.append(".")
        elif not _only_after(line, index, " "):
            parts.append(" ")
    return "".join(parts)


def _clean_simplified_line(line: str) -> str:
    line = _ELLIPSIS.sub("…", line)
    line = _TRAILING_IDEOGRAPHIC_COMMA.sub("", line)
    line = _simplified_marks(line)
    line = _MULTI_SPACE.sub(" ", line)
    return line.strip()


def clean_simplified_chinese_punctuation(lines: list[str]) -> list[str]:
    """Apply Simplified Chinese punctuation rules and drop lines left empty."""
    return _keep_nonempty(lines, _clean_simplified_line)


_CLEANERS: dict[str, Callable[[list[str]], list[str]]] = {
    "ko": clean_punctuation,
    "ja": clean_japanese_punctuation,
    "zh-Hant": clean_traditional_chinese_punctuation,
    "zh": clean_simplified_chinese_punctuation,
    "zh-Hans": clean_simplified_chinese_punctuation,
}


def _to_ns(d: timedelta) -> int:
    return (d // _NANOSECOND) * 1000


def _from_ns(ns: int) -> timedelta:
    return timedelta(microseconds=ns // 1000)


def _seconds(ns: int) -> float:
    whole, rest = divmod(ns, _NS_PER_SECOND)
    return float(whole) + rest / 1e9


def _parse_ns(timestamp: str) -> int | None:
    try:
        return _to_ns(parse_timestamp(timestamp))
    except TimestampError:
        return None


def correct_timing(segments: list[Segment], target_cps: int = _DEFAULT_CPS) -> list[Segment]:
    """Extend short or dense segments and keep a 5 ms gap before the next one.

    Segments are updated in place and the same list is returned. A target of
    zero or less falls back to 12 characters per second.
    """
    if not segments:
        return segments
    if target_cps <= 0:
        target_cps = _DEFAULT_CPS

    invalid_timing = 0
    for seg in segments:
        start = _parse_ns(seg.start_time)
        end = _parse_ns(seg.end_time)
        if start is None or end is None:
            invalid_timing += 1
            continue

        duration = _seconds(end) - _seconds(start)
        total_chars = sum(grapheme_count(line) for line in seg.lines)
        duration = max(duration, _MIN_DURATION, total_chars / target_cps)
        seg.end_time = format_timestamp(_from_ns(start + int(duration * 1e9)))

    invalid_overlap = 0
    for current, following in zip(segments, segments[1:]):
        current_end = _parse_ns(current.end_time)
        next_start = _parse_ns(following.start_time)
        if current_end is None or next_start is None:
            invalid_overlap += 1
            continue

        target_end = next_start - _OVERLAP_GAP_NS
        if current_end > target_end:
            current_start = _parse_ns(current.start_time)
            if current_start is not None and target_end >= current_start:
                current.end_time = format_timestamp(_from_ns(target_end))

    if invalid_timing:
        logger.warning(
            "Postprocess skipped segments with invalid timestamps (count=%d)",
            invalid_timing,
        )
    if invalid_overlap:
        logger.warning(
            "Postprocess skipped overlap checks due to invalid timestamps (count=%d)",
            invalid_overlap,
        )
    return segments


def postprocess(
    segments: list[Segment],
    target_lang_code: str,
    target_cps: int = _DEFAULT_CPS,
    apply_lang_rules: bool = True,
) -> list[Segment]:
    """Clean punctuation for the target language, then correct timing in place."""
    cleaner = _CLEANERS.get(target_lang_code) if apply_lang_rules else None
    if cleaner is not None:
        for seg in segments:
            seg.lines = cleaner(seg.lines)
    return correct_timing(segments, target_cps)