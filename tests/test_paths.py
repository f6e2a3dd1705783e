import os
import uuid

from focst.paths import generate_output_path


def test_primary_path(tmp_path):
    source = os.path.join(tmp_path, "movie.srt")
    assert generate_output_path(source, "ko") == os.path.join(tmp_path, "movie_ko.srt")


def test_path_without_extension(tmp_path):
    source = os.path.join(tmp_path, "movie")
    assert generate_output_path(source, "ja") == os.path.join(tmp_path, "movie_ja")


def test_sequential_fallback(tmp_path):
    source = os.path.join(tmp_path, "movie.srt")
    (tmp_path / "movie_ko.srt").write_text("x")
    (tmp_path / "movie_ko_0.srt").write_text("x")
    result = generate_output_path(source, "ko")
    assert result == os.path.join(tmp_path, "movie_ko_1.srt")
    assert not os.path.exists(result)


def test_uuid_fallback(tmp_path):
    source = os.path.join(tmp_path, "movie.vtt")
    (tmp_path / "movie_ko.vtt").write_text("x")
    for number in range(10):
        (tmp_path / f"movie_ko_{number}.vtt").write_text("x")
    result = generate_output_path(source, "ko")
    prefix = os.path.join(tmp_path, "movie_ko_")
    assert result.startswith(prefix)
    assert result.endswith(".vtt")
    suffix = result[len(prefix): -len(".vtt")]
    assert uuid.UUID(suffix).version == 7
    assert not os.path.exists(result)


def test_uuid_fallback_is_unique(tmp_path):
    source = os.path.join(tmp_path, "a.srt")
    (tmp_path / "a_en.srt").write_text("x")
    for number in range(10):
        (tmp_path / f"a_en_{number}.srt").write_text("x")
    results = [generate_output_path(source, "en") for _ in range(2)]
    prefix = os.path.join(tmp_path, "a_en_")
    suffixes = [r[len(prefix): -len(".srt")] for r in results]
    assert [uuid.UUID(s).version for s in suffixes] == [7, 7]
    assert len(set(results)) == 2


def test_dot_in_directory_is_not_extension(tmp_path):
    folder = tmp_path / "v1.0"
    folder.mkdir()
    source = os.path.join(folder, "clip")
    assert generate_output_path(source, "ko") == os.path.join(folder, "clip_ko")