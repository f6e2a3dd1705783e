import os

import pytest

from focst.segment import Segment, TimestampError
from focst.subtitles import (
    SubtitleFormatError,
    load,
    parse_ass,
    parse_srt,
    parse_vtt,
    render,
    render_ass,
    render_srt,
    render_vtt,
    save,
)

SRT_TEXT = (
    "1\n00:00:01,000 --> 00:00:02,500\nHello\nWorld\n\n"
    "2\n00:00:03,000 --> 00:00:04,000\nBye\n"
)


def _segments():
    return [
        Segment(id=1, start_time="00:00:01,000", end_time="00:00:02,500", lines=["Hello", "World"]),
        Segment(id=2, start_time="00:00:03,000", end_time="00:00:04,000", lines=["Bye"]),
    ]


def test_save_atomic(tmp_path):
    path = tmp_path / "test.srt"
    save(path, [Segment(id=1, start_time="00:00:01,000", end_time="00:00:02,000", lines=["Hello"])])
    assert "Hello" in path.read_text(encoding="utf-8")

    save(path, [Segment(id=1, start_time="00:00:03,000", end_time="00:00:04,000", lines=["World"])])
    content = path.read_text(encoding="utf-8")
    assert "World" in content
    assert "Hello" not in content

    leaked = [n for n in os.listdir(tmp_path) if n.startswith("focst-") and n.endswith(".tmp")]
    assert leaked == []


def test_save_directory_error(tmp_path):
    invalid = tmp_path / "non" / "existent" / "test.srt"
    seg = Segment(id=1, start_time="00:00:01,000", end_time="00:00:02,000", lines=["Test"])
    with pytest.raises(OSError):
        save(invalid, [seg])


def test_save_rejects_missing_timestamps(tmp_path):
    with pytest.raises(TimestampError):
        save(tmp_path / "test.srt", [Segment(id=1, lines=["Test"])])


def test_parse_srt():
    assert parse_srt(SRT_TEXT) == _segments()


def test_parse_srt_crlf_and_dot_millis():
    text = "1\r\n00:00:01.250 --> 00:00:02.000\r\nHi\r\n"
    assert parse_srt(text) == [
        Segment(id=1, start_time="00:00:01,250", end_time="00:00:02,000", lines=["Hi"])
    ]


def test_parse_srt_empty():
    assert parse_srt("  \n") == []


def test_parse_srt_bad_timestamp():
    with pytest.raises(SubtitleFormatError):
        parse_srt("1\nxx --> 00:00:02,000\nHi\n")


def test_render_srt_pinned():
    assert render_srt(_segments()) == SRT_TEXT


def test_srt_round_trip():
    assert parse_srt(render_srt(_segments())) == _segments()


def test_parse_vtt():
    text = (
        "WEBVTT\n\nNOTE a comment\n\n"
        "cue-1\n00:01.000 --> 00:02.500 align:start\nHello\nWorld\n\n"
        "00:00:03.000 --> 00:00:04.000\nBye\n"
    )
    assert parse_vtt(text) == _segments()


def test_parse_vtt_requires_header():
    with pytest.raises(SubtitleFormatError):
        parse_vtt(SRT_TEXT)


def test_render_vtt_pinned_and_round_trip():
    out = render_vtt(_segments()[1:])
    assert out == "WEBVTT\n\n1\n00:00:03.000 --> 00:00:04.000\nBye\n"
    assert parse_vtt(render_vtt(_segments())) == _segments()


def test_parse_ass():
    text = (
        "[Script Info]\nScriptType: v4.00+\n\n[Events]\n"
        "Format: Layer, Start, End, Style, Name, MarginL, MarginR, MarginV, Effect, Text\n"
        "Dialogue: 0,0:00:01.00,0:00:02.50,Default,,0,0,0,,{\\i1}Hello\\NWorld, yes\n"
    )
    assert parse_ass(text) == [
        Segment(id=1, start_time="00:00:01,000", end_time="00:00:02,500", lines=["Hello", "World, yes"])
    ]


def test_render_ass_content_and_round_trip():
    out = render_ass(_segments())
    assert "Style: Default,Sans,20,&H00FFFFFF" in out
    assert "Dialogue: 0,0:00:01.00,0:00:02.50,Default,,0,0,0,,Hello\\NWorld\n" in out
    assert out.index("[V4+ Styles]") < out.index("[Events]")
    assert parse_ass(out) == _segments()


def test_render_by_extension():
    segs = _segments()
    assert render(segs, ".SRT") == render_srt(segs)
    assert render(segs, ".vtt") == render_vtt(segs)
    assert render(segs, ".ssa") == render_ass(segs)
    assert render(segs, ".unknown") == render_srt(segs)
    assert "<p begin=\"00:00:03.000\" end=\"00:00:04.000\">Bye</p>" in render(segs, ".ttml")


def test_render_stl_unsupported():
    with pytest.raises(SubtitleFormatError):
        render(_segments(), ".stl")


@pytest.mark.parametrize("name", ["out.srt", "out.vtt", "out.ass"])
def test_save_load_round_trip(tmp_path, name):
    path = tmp_path / name
    save(path, _segments())
    assert load(path) == _segments()


def test_load_sniffs_unknown_extension(tmp_path):
    path = tmp_path / "subs.txt"
    path.write_text("WEBVTT\n\n00:00:03.000 --> 00:00:04.000\nBye\n", encoding="utf-8")
    assert load(path) == [
        Segment(id=1, start_time="00:00:03,000", end_time="00:00:04,000", lines=["Bye"])
    ]