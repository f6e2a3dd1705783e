# focst

Tools for preparing subtitles for machine translation and for cleaning up the
translated result: reading and writing subtitle files, cleaning source text,
fixing punctuation and timing in the output, and choosing output file names.

## Installation

```
pip install .
```

## What it does

- **Reading and writing subtitles** (`focst.subtitles`): `load` reads SRT,
  WebVTT and SSA/ASS files, choosing the format by extension or, failing
  that, by content. `parse_srt`, `parse_vtt` and `parse_ass` turn text into a
  list of `Segment` objects numbered from 1. `render_srt`, `render_vtt`,
  `render_ass` and `render` turn segments back into text; `render` also
  writes TTML for `.ttml`, falls back to SRT for unknown extensions, and
  raises `SubtitleFormatError` for `.stl`. `save` picks the format from the
  file extension and replaces the target file in one atomic step, with mode
  `0600`.
- **Segments and timestamps** (`focst.segment`): `Segment` holds an `id`,
  `start_time` and `end_time` in `HH:MM:SS,mmm` form, and the text `lines`.
  `parse_timestamp` and `format_timestamp` convert between those strings and
  `timedelta` values (hours may exceed 23; `TimestampError` on bad input).
  `validate` raises `SegmentValidationError` when a list is empty, has no
  dialogue text, or has invalid or reversed timestamps.
- **Preprocessing** (`focst.preprocess`): `preprocess` and
  `preprocess_with_mapping` strip whitespace and drop empty lines and
  segments. For Japanese sources (`"ja"`, with language rules on) they also
  remove text in `()`, `[]`, `（）`, `［］` and the characters `<` `>`, and drop
  segments holding only symbols. When `source_path` ends in `.vtt`,
  consecutive cues with identical timestamps are merged first. Remaining
  segments are renumbered from 1, and `preprocess_with_mapping` returns an
  `IDMap` list linking new ids to the original ones.
- **Postprocessing** (`focst.postprocess`): `postprocess` applies the
  punctuation conventions for Korean (`ko`), Japanese (`ja`), Traditional
  Chinese (`zh-Hant`) and Simplified Chinese (`zh`, `zh-Hans`) — available
  separately as `clean_punctuation`, `clean_japanese_punctuation`,
  `clean_traditional_chinese_punctuation` and
  `clean_simplified_chinese_punctuation` — then calls `correct_timing`, which
  makes each cue last at least 0.8 s and long enough for the given
  characters per second (counted with `grapheme_count`, default 12), and
  keeps a 5 ms gap before the next cue. Segments are changed in place.
- **Output paths** (`focst.paths`): `generate_output_path` returns a file
  name with a language suffix, such as `movie_ko.srt`; if it exists it tries
  `movie_ko_0.srt` to `movie_ko_9.srt`, then a UUID suffix.
- **Checksums** (`focst.checksum`): `segments_checksum` and
  `segments_checksum_hex` give a stable SHA-256 digest of the timestamps and
  lines of a segment list (`sha256:`-prefixed for the hex form).
- **Version** (`focst.version`): `info()` returns the version text.

## Example

```python
from focst.subtitles import load, save
from focst.preprocess import preprocess
from focst.postprocess import postprocess
from focst.paths import generate_output_path

segments = preprocess(load("movie.srt"), "ja", True)
# ... translate the lines of each segment ...
segments = postprocess(segments, "ko", 12, True)
save(generate_output_path("movie.srt", "ko"), segments)
```

## What it does not do

The package does not translate anything itself: it has no client for a
translation model and no scheduling of translation requests. It also has no
command-line program; it is used as a library. Reading EBU STL or TTML files
is not supported, and writing EBU STL raises an error.

## Running the tests

```
pip install .[test]
pytest
```