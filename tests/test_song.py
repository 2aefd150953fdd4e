"""Tests for the song model and query values."""

from __future__ import annotations

import hashlib
from pathlib import Path

import pytest

from rumu.query import SongField, SongQuery
from rumu.song import Song, song_hash, song_label


def test_song_defaults() -> None:
    song = Song(title="T", album="A")
    assert song.artist == "unknown artist"
    assert song.genre == "unknown genre"
    assert song.year == -1
    assert song.track_number == -1
    assert song.duration_seconds == -1.0


def test_song_is_frozen() -> None:
    song = Song(title="T", album="A")
    with pytest.raises(AttributeError):
        song.title = "other"  # type: ignore[misc]


def test_song_label() -> None:
    song = Song(
        title="Heroes", album="Heroes", year=1977, track_number=3, duration_seconds=371
    )
    assert song_label(song) == "3 - Heroes Heroes, 1977; 371s"


def test_song_hash_covers_content_and_path(tmp_path: Path) -> None:
    path = tmp_path / "a.mp3"
    path.write_bytes(b"abc")
    expected = hashlib.sha1(b"abc" + str(path).encode("utf-8")).hexdigest()
    assert song_hash(path) == expected
    other = tmp_path / "b.mp3"
    other.write_bytes(b"abc")
    assert song_hash(other) != song_hash(path)


def test_song_hash_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(OSError):
        song_hash(tmp_path / "missing.mp3")


def test_query_equality_and_merge() -> None:
    query = SongQuery.match(SongField.ALBUM, "Kind")
    assert query == SongQuery({SongField.ALBUM: "Kind"})
    assert hash(query) == hash(SongQuery({SongField.ALBUM: "Kind"}))
    merged = query.with_value(SongField.YEAR, 1959)
    assert dict(merged.predicates) == {SongField.ALBUM: "Kind", SongField.YEAR: 1959}
    assert dict(query.predicates) == {SongField.ALBUM: "Kind"}


def test_query_empty_and_read_only() -> None:
    assert SongQuery().is_empty()
    query = SongQuery.match(SongField.GENRE, "rock")
    assert not query.is_empty()
    with pytest.raises(TypeError):
        query.predicates[SongField.GENRE] = "jazz"  # type: ignore[index]


def test_song_field_values_are_column_names() -> None:
    assert SongField.DURATION.value == "duration_seconds"
    assert SongField("track_number") is SongField.TRACK_NUMBER
