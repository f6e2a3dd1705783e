"""Reading and writing subtitle files in SRT, WebVTT, SSA/ASS and TTML form."""

from __future__ import annotations

import os
import re
import tempfile
from collections.abc import Callable, Iterable
from datetime import timedelta
from xml.sax.saxutils import escape

from focst.segment import Segment, format_timestamp, parse_timestamp

_CLOCK = re.compile(r"(?:(\d+):)?(\d{1,2}):(\d{1,2})(?:[.,](\d+))?")
_BLANK_LINES = re.compile(r"\n[ \t]*\n")
_ASS_OVERRIDE = re.compile(r"\{[^}]*\}")
_ASS_BREAK = re.compile(r"\\[Nn]")
_ASS_DEFAULT_FORMAT = [
    "Layer", "Start", "End", "Style", "Name",
    "MarginL", "MarginR", "MarginV", "Effect", "Text",
]
_ASS_STYLES = (
    "[V4+ Styles]\n"
    "Format: Name, Fontname, Fontsize, PrimaryColour, SecondaryColour, OutlineColour, "
    "BackColour, Bold, Italic, Underline, StrikeOut, ScaleX, ScaleY, Spacing, Angle, "
    "BorderStyle, Outline, Shadow, Alignment, MarginL, MarginR, MarginV, Encoding\n"
    "Style: Default,Sans,20,&H00FFFFFF,&H000000FF,&H00000000,&H00000000,"
    "0,0,0,0,100,100,0,0,1,2,1,2,10,10,10,1\n\n"
)
_MILLISECOND = timedelta(milliseconds=1)


class SubtitleFormatError(ValueError):
    """Raised when subtitle text cannot be read or written in a given format."""


def _extension(path: str) -> str:
    for index in range(len(path) - 1, -1, -1):
        char = path[index]
        if char in ("/", os.sep):
            break
        if char == ".":
            return path[index:]
    return ""


def _parse_clock(text: str) -> timedelta:
    match = _CLOCK.fullmatch(text.strip())
    if match is None:
        raise SubtitleFormatError(f"invalid timestamp: {text!r}")
    hours, minutes, seconds, fraction = match.groups()
    millis = int((fraction or "0").ljust(3, "0")[:3])
    return timedelta(
        hours=int(hours or 0),
        minutes=int(minutes),
        seconds=int(seconds),
        milliseconds=millis,
    )


def _split_timing(line: str) -> tuple[str, str]:
    left, _, right = line.partition("-->")
    fields = right.split()
    if not fields:
        raise SubtitleFormatError(f"invalid timing line: {line!r}")
    return (
        format_timestamp(_parse_clock(left)),
        format_timestamp(_parse_clock(fields[0])),
    )


def _normalize_newlines(text: str) -> str:
    return text.lstrip("\ufeff").replace("\r\n", "\n").replace("\r", "\n")


def _parse_cue_blocks(blocks: Iterable[str]) -> list[Segment]:
    segments: list[Segment] = []
    for block in blocks:
        lines = block.strip("\n").split("\n")
        timing = next((i for i, line in enumerate(lines) if "-->" in line), None)
        if timing is None:
            continue
        start, end = _split_timing(lines[timing])
        segments.append(
            Segment(
                id=len(segments) + 1,
                start_time=start,
                end_time=end,
                lines=lines[timing + 1 :],
            )
        )
    return segments


def parse_srt(text: str) -> list[Segment]:
    """Parse SRT text into segments numbered from 1."""
    body = _normalize_newlines(text).strip()
    if not body:
        return []
    return _parse_cue_blocks(_BLANK_LINES.split(body))


def parse_vtt(text: str) -> list[Segment]:
    """Parse WebVTT text into segments numbered from 1."""
    body = _normalize_newlines(text)
    if not body.startswith("WEBVTT"):
        raise SubtitleFormatError("missing WEBVTT header")
    blocks = _BLANK_LINES.split(body.strip())[1:]
    cues = [
        block
        for block in blocks
        if not (block.startswith(("NOTE", "STYLE", "REGION")) and "-->" not in block)
    ]
    return _parse_cue_blocks(cues)


def parse_ass(text: str) -> list[Segment]:
    """Parse the dialogue events of SSA/ASS text into segments numbered from 1."""
    section = ""
    fields = list(_ASS_DEFAULT_FORMAT)
    segments: list[Segment] = []
    for raw in _normalize_newlines(text).split("\n"):
        line = raw.strip()
        if line.startswith("[") and line.endswith("]"):
            section = line.lower()
            continue
        if section != "[events]":
            continue
        key, _, value = line.partition(":")
        key = key.strip().lower()
        if key == "format":
            fields = [name.strip() for name in value.split(",")]
        elif key == "dialogue":
            values = [part.strip() for part in value.split(",", len(fields) - 1)]
            if len(values) != len(fields):
                raise SubtitleFormatError(f"malformed dialogue line: {raw!r}")
            event = dict(zip(fields, values))
            try:
                start, end, body = event["Start"], event["End"], event["Text"]
            except KeyError as exc:
                raise SubtitleFormatError(f"dialogue lacks field {exc}") from exc
            body = _ASS_OVERRIDE.sub("", body)
            segments.append(
                Segment(
                    id=len(segments) + 1,
                    start_time=format_timestamp(_parse_clock(start)),
                    end_time=format_timestamp(_parse_clock(end)),
                    lines=_ASS_BREAK.split(body),
                )
            )
    return segments


def _timings(segments: Iterable[Segment]) -> list[tuple[timedelta, timedelta, Segment]]:
    return [
        (parse_timestamp(seg.start_time), parse_timestamp(seg.end_time), seg)
        for seg in segments
    ]


def _dotted(d: timedelta) -> str:
    return format_timestamp(d).replace(",", ".")


def _ass_time(d: timedelta) -> str:
    centis = (d // _MILLISECOND) // 10
    hours, rest = divmod(centis, 360_000)
    minutes, rest = divmod(rest, 6000)
    seconds, cs = divmod(rest, 100)
    return f"{hours}:{minutes:02d}:{seconds:02d}.{cs:02d}"


def render_srt(segments: Iterable[Segment]) -> str:
    """Render segments as SRT text, numbering cues from 1."""
    blocks = [
        f"{number}\n{format_timestamp(start)} --> {format_timestamp(end)}\n"
        + "".join(f"{line}\n" for line in seg.lines)
        for number, (start, end, seg) in enumerate(_timings(segments), start=1)
    ]
    return "\n".join(blocks)


def render_vtt(segments: Iterable[Segment]) -> str:
    """Render segments as WebVTT text."""
    blocks = [
        f"{number}\n{_dotted(start)} --> {_dotted(end)}\n"
        + "".join(f"{line}\n" for line in seg.lines)
        for number, (start, end, seg) in enumerate(_timings(segments), start=1)
    ]
    return "WEBVTT\n\n" + "\n".join(blocks)


def render_ass(segments: Iterable[Segment]) -> str:
    """Render segments as ASS text with a standard Default style."""
    events = []
    for start, end, seg in _timings(segments):
        body = "\\N".join(seg.lines).replace("\n", "\\N").replace("\\n", "\\N")
        events.append(
            f"Dialogue: 0,{_ass_time(start)},{_ass_time(end)},Default,,0,0,0,,{body}\n"
        )
    return (
        "[Script Info]\nScriptType: v4.00+\n\n"
        + _ASS_STYLES
        + "[Events]\nFormat: "
        + ", ".join(_ASS_DEFAULT_FORMAT)
        + "\n"
        + "".join(events)
    )


def _render_ttml(segments: Iterable[Segment]) -> str:
    paragraphs = []
    for start, end, seg in _timings(segments):
        body = "<br/>".join(escape(line) for line in seg.lines)
        paragraphs.append(
            f'      <p begin="{_dotted(start)}" end="{_dotted(end)}">{body}</p>\n'
        )
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        '<tt xmlns="http://www.w3.org/ns/ttml">\n'
        "  <body>\n    <div>\n"
        + "".join(paragraphs)
        + "    </div>\n  </body>\n</tt>\n"
    )


_RENDERERS: dict[str, Callable[[Iterable[Segment]], str]] = {
    ".srt": render_srt,
    ".vtt": render_vtt,
    ".ass": render_ass,
    ".ssa": render_ass,
    ".ttml": _render_ttml,
}

_PARSERS: dict[str, Callable[[str], list[Segment]]] = {
    ".srt": parse_srt,
    ".vtt": parse_vtt,
    ".ass": parse_ass,
    ".ssa": parse_ass,
}


def render(segments: Iterable[Segment], extension: str) -> str:
    """Render segments in the format named by a file extension; SRT by default."""
    ext = extension.lower()
    if not ext.startswith("."):
        ext = "." + ext
    if ext == ".stl":
        raise SubtitleFormatError("writing EBU STL subtitles is not supported")
    return _RENDERERS.get(ext, render_srt)(segments)


def load(path: str | os.PathLike[str]) -> list[Segment]:
    """Read a subtitle file, choosing the format by extension or content."""
    path = os.fspath(path)
    with open(path, "rb") as handle:
        text = handle.read().decode("utf-8-sig")
    parser = _PARSERS.get(_extension(path).lower())
    if parser is None:
        stripped = text.lstrip()
        if stripped.startswith("WEBVTT"):
            parser = parse_vtt
        elif "[Events]" in text or "[Script Info]" in text:
            parser = parse_ass
        else:
            parser = parse_srt
    return parser(text)


def _atomic_write(path: str, data: bytes) -> None:
    directory = os.path.dirname(os.path.abspath(path))
    fd, temp_path = tempfile.mkstemp(prefix="focst-", suffix=".tmp", dir=directory)
    try:
        with os.fdopen(fd, "wb") as handle:
            handle.write(data)
            handle.flush()
            os.fsync(handle.fileno())
        os.chmod(temp_path, 0o600)
        os.replace(temp_path, path)
    except BaseException:
        try:
            os.remove(temp_path)
        except FileNotFoundError:
            pass
        raise


def save(path: str | os.PathLike[str], segments: Iterable[Segment]) -> None:
    """Write segments atomically, choosing the format by file extension."""
    path = os.fspath(path)
    content = render(segments, _extension(path))
    _atomic_write(path, content.encode("utf-8"))