"""Tests for the SQLite song library."""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path

from rumu.query import SongField, SongQuery
from rumu.song import Song, song_hash
from rumu.songdb import SongDB


def _song(tmp_path: Path, title: str, album: str, **kwargs) -> Song:
    path = tmp_path / f"{title}.mp3"
    path.write_bytes(title.encode("utf-8"))
    return Song(
        title=title,
        album=album,
        path=str(path),
        size_bytes=path.stat().st_size,
        **kwargs,
    )


def _seed(tmp_path: Path) -> SongDB:
    db = SongDB(tmp_path / "library.db")
    db.add(
        _song(
            tmp_path,
            "Blue",
            "Kind",
            artist="Miles",
            genre="jazz",
            track_number=2,
            year=1959,
        )
    )
    db.add(
        _song(
            tmp_path,
            "So What",
            "Kind",
            artist="Miles",
            genre="jazz",
            track_number=1,
            year=1959,
        )
    )
    db.add(
        _song(
            tmp_path,
            "Heroes",
            "Heroes",
            artist="Bowie",
            genre="rock",
            track_number=3,
            year=1977,
        )
    )
    return db


def test_search_all_orders_by_album_and_track(tmp_path: Path) -> None:
    db = _seed(tmp_path)
    assert [song.title for song in db.search_all()] == ["Heroes", "So What", "Blue"]
    db.close()


def test_search_by_text_matches_title_album_artist(tmp_path: Path) -> None:
    db = _seed(tmp_path)
    assert [song.title for song in db.search_by_text("WHAT")] == ["So What"]
    assert [song.title for song in db.search_by_text("bow")] == ["Heroes"]
    assert len(db.search_by_text("kind")) == 2
    assert len(db.search_by_text("")) == 3
    db.close()


def test_search_by_text_treats_wildcards_literally(tmp_path: Path) -> None:
    db = SongDB(tmp_path / "library.db")
    db.add(_song(tmp_path, "100% Pure", "Live"))
    db.add(_song(tmp_path, "1000 Miles", "Live"))
    db.add(_song(tmp_path, "a_b", "Mix"))
    db.add(_song(tmp_path, "axb", "Mix"))
    assert [song.title for song in db.search_by_text("100%")] == ["100% Pure"]
    assert [song.title for song in db.search_by_text("a_b")] == ["a_b"]
    assert db.search_by_text("\\") == []
    db.close()


def test_search_by_fields_ands_predicates(tmp_path: Path) -> None:
    db = _seed(tmp_path)
    query = SongQuery.match(SongField.ARTIST, "Miles")
    assert len(db.search_by_fields(query)) == 2
    query = query.with_value(SongField.TRACK_NUMBER, 2)
    assert [song.title for song in db.search_by_fields(query)] == ["Blue"]
    assert len(db.search_by_fields(SongQuery())) == 3
    db.close()


def test_distinct_values_sorted_case_insensitive(tmp_path: Path) -> None:
    db = _seed(tmp_path)
    db.add(_song(tmp_path, "Low", "low", artist="Bowie", genre="rock"))
    assert db.distinct_values(SongField.ALBUM) == ["Heroes", "Kind", "low"]
    assert db.distinct_values(SongField.GENRE) == ["jazz", "rock"]
    assert db.distinct_values(SongField.YEAR) == ["-1", "1959", "1977"]
    db.close()


def test_add_upserts_on_title_and_album(tmp_path: Path) -> None:
    db = _seed(tmp_path)
    db.add(_song(tmp_path, "Blue", "Kind", artist="Miles Davis", lyrics="none"))
    song = db.get_song("Blue", "Kind")
    assert song is not None
    assert song.artist == "Miles Davis"
    assert song.lyrics == "none"
    assert len(db.search_all()) == 3
    db.close()


def test_remove_and_update(tmp_path: Path) -> None:
    db = _seed(tmp_path)
    assert db.remove("Blue", "Kind") is True
    assert db.remove("Blue", "Kind") is False
    replacement = _song(tmp_path, "Heroes (Remaster)", "Heroes")
    db.update("Heroes", "Heroes", replacement)
    assert db.get_song("Heroes", "Heroes") is None
    assert db.get_song("Heroes (Remaster)", "Heroes") is not None
    db.close()


def test_prune_drops_missing_files(tmp_path: Path) -> None:
    db = _seed(tmp_path)
    (tmp_path / "Blue.mp3").unlink()
    assert db.prune() == 1
    assert [song.title for song in db.search_all()] == ["Heroes", "So What"]
    db.close()


def test_check_change_detects_size_and_hash(tmp_path: Path) -> None:
    db = SongDB(tmp_path / "library.db")
    song = _song(tmp_path, "Track", "Album")
    db.add(replace(song, content_hash=song_hash(song.path)))
    assert db.check_change("Track", "Album", check_hash=True) is True
    Path(song.path).write_bytes(b"TRACK")
    assert db.check_change("Track", "Album") is True
    assert db.check_change("Track", "Album", check_hash=True) is False
    Path(song.path).write_bytes(b"longer contents")
    assert db.check_change("Track", "Album") is False
    Path(song.path).unlink()
    assert db.check_change("Track", "Album") is None
    assert db.check_change("Missing", "Album") is None
    db.close()


def test_find_by_path(tmp_path: Path) -> None:
    db = _seed(tmp_path)
    found = db.find_by_path(str(tmp_path / "Heroes.mp3"))
    assert found is not None
    assert found.title == "Heroes"
    assert db.find_by_path("/nowhere.mp3") is None
    db.close()


def test_data_persists_across_reopen(tmp_path: Path) -> None:
    db = _seed(tmp_path)
    db.close()
    reopened = SongDB(tmp_path / "library.db")
    assert reopened.path == tmp_path / "library.db"
    assert len(reopened.search_all()) == 3
    reopened.close()
