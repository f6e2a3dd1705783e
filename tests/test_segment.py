from datetime import timedelta

import pytest

from focst.segment import (
    Segment,
    SegmentValidationError,
    TimestampError,
    format_timestamp,
    parse_timestamp,
    validate,
)


def test_validate_accepts_valid_segments():
    segments = [Segment(1, "00:00:01,000", "00:00:02,000", ["Hello"])]
    assert validate(segments) is None


@pytest.mark.parametrize(
    "segments, message",
    [
        ([], "no subtitles"),
        ([Segment(1, "00:00:01,000", "00:00:02,000", ["", "  "])], "no dialogue text"),
        ([Segment(1, "00:00:01.000", "00:00:02,000", ["Hello"])], "invalid StartTime"),
        ([Segment(1, "00:00:01,000", "00:00:02.000", ["Hello"])], "invalid EndTime"),
        ([Segment(1, "00:00:02,000", "00:00:01,000", ["Hello"])], "EndTime is before StartTime"),
    ],
)
def test_validate_rejects(segments, message):
    with pytest.raises(SegmentValidationError, match=message):
        validate(segments)


@pytest.mark.parametrize("text", ["00:00:20,000", "23:59:59,999", "25:00:00,000"])
def test_parse_timestamp_valid(text):
    assert format_timestamp(parse_timestamp(text)) == text


def test_parse_timestamp_value():
    assert parse_timestamp("25:00:00,000") == timedelta(hours=25)
    assert parse_timestamp("00:00:20,000") == timedelta(seconds=20)


@pytest.mark.parametrize(
    "text",
    [
        "",
        "00:00:20.000",
        "00:00:20",
        "ab:cd:ef,ghi",
        "00:60:00,000",
        "00:00:60,000",
        "00:00:00,1000",
    ],
)
def test_parse_timestamp_invalid(text):
    with pytest.raises(TimestampError):
        parse_timestamp(text)


def test_format_timestamp_clamps_negative():
    assert format_timestamp(timedelta(seconds=-5)) == "00:00:00,000"


def test_format_timestamp_truncates_sub_millisecond():
    assert format_timestamp(timedelta(seconds=1, microseconds=999)) == "00:00:01,000"


def test_segment_defaults_are_independent():
    first = Segment(1)
    second = Segment(2)
    first.lines.append("x")
    assert second.lines == []