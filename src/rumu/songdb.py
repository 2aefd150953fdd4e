"""SQLite-backed song library."""

from __future__ import annotations

from dataclasses import replace
import logging
from pathlib import Path
import sqlite3
import threading
from typing import Optional

from rumu.config import get_config_dir
from rumu.query import SongField, SongQuery
from rumu.song import Song, song_hash

logger = logging.getLogger(__name__)

_SONG_COLUMNS = (
    "songs.title, songs.album, songs.track_number, songs.artist, songs.genre, "
    "songs.duration_seconds, songs.year, songs.path, songs.content_hash, "
    "songs.size_bytes"
)


def default_db_path(app_name: str = "rumu") -> Path:
    try:
        base = get_config_dir(app_name)
    except OSError:
        base = Path.cwd() / ".rumu"
        base.mkdir(parents=True, exist_ok=True)
    return base / "library.db"


class SongDB:
    """Song and lyrics tables keyed by ``(title, album)``."""

    def __init__(self, db_path: Path | None = None) -> None:
        self._path = db_path or default_db_path()
        self._lock = threading.Lock()
        self._conn = sqlite3.connect(self._path, check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        self._apply_pragmas()
        self._ensure_schema()

    @property
    def path(self) -> Path:
        return Path(self._path)

    def close(self) -> None:
        with self._lock:
            self._conn.close()

    def add(self, song: Song) -> None:
        with self._lock:
            self._upsert_locked(song)
            self._conn.commit()

    def remove(self, title: str, album: str) -> bool:
        with self._lock:
            cursor = self._conn.execute(
                "DELETE FROM songs WHERE title = ? AND album = ?",
                (title, album),
            )
            self._conn.execute(
                "DELETE FROM lyrics WHERE title = ? AND album = ?",
                (title, album),
            )
            self._conn.commit()
        return cursor.rowcount > 0

    def update(self, title: str, album: str, song: Song) -> None:
        """Replace the row stored under ``(title, album)`` with ``song``."""
        with self._lock:
            self._conn.execute(
                "DELETE FROM songs WHERE title = ? AND album = ?",
                (title, album),
            )
            self._conn.execute(
                "DELETE FROM lyrics WHERE title = ? AND album = ?",
                (title, album),
            )
            self._upsert_locked(song)
            self._conn.commit()

    def get_song(self, title: str, album: str) -> Optional[Song]:
        with self._lock:
            row = self._conn.execute(
                f"""
                SELECT {_SONG_COLUMNS}, lyrics.lyrics AS lyrics
                FROM songs
                LEFT JOIN lyrics
                    ON lyrics.title = songs.title AND lyrics.album = songs.album
                WHERE songs.title = ? AND songs.album = ?
                """,
                (title, album),
            ).fetchone()
        return _song_from_row(row) if row else None

    def search_all(self) -> list[Song]:
        return self._select("", ())

    def search_by_text(self, text: str) -> list[Song]:
        needle = f"%{_escape_like(text.strip().lower())}%"
        return self._select(
            "WHERE LOWER(songs.title) LIKE ? ESCAPE '\\' "
            "OR LOWER(songs.album) LIKE ? ESCAPE '\\' "
            "OR LOWER(songs.artist) LIKE ? ESCAPE '\\'",
            (needle, needle, needle),
        )

    def search_by_fields(self, query: SongQuery) -> list[Song]:
        if query.is_empty():
            return self.search_all()
        clauses: list[str] = []
        params: list[object] = []
        for song_field, value in query.predicates.items():
            clauses.append(f"songs.{SongField(song_field).value} = ?")
            params.append(value)
        return self._select("WHERE " + " AND ".join(clauses), tuple(params))

    def distinct_values(self, song_field: SongField) -> list[str]:
        column = SongField(song_field).value
        with self._lock:
            rows = self._conn.execute(
                f"""
                SELECT DISTINCT {column} AS value FROM songs
                WHERE {column} IS NOT NULL AND {column} != ''
                ORDER BY LOWER({column})
                """
            ).fetchall()
        return [str(row["value"]) for row in rows]

    def prune(self) -> int:
        """Drop songs whose file no longer exists. Returns the count removed."""
        with self._lock:
            rows = self._conn.execute(
                "SELECT title, album, path FROM songs"
            ).fetchall()
        missing = [
            (row["title"], row["album"]) for row in rows if not Path(row["path"]).exists()
        ]
        for title, album in missing:
            logger.info("Pruning missing song %s / %s", title, album)
            self.remove(title, album)
        return len(missing)

    def check_change(
        self,
        title: str,
        album: str,
        *,
        check_size: bool = True,
        check_hash: bool = False,
    ) -> Optional[bool]:
        """Return True when the file still matches its row.

        Size is checked before the hash. ``None`` means the song or its file
        could not be read.
        """
        with self._lock:
            row = self._conn.execute(
                "SELECT path, size_bytes, content_hash FROM songs "
                "WHERE title = ? AND album = ?",
                (title, album),
            ).fetchone()
        if row is None:
            return None
        path = Path(row["path"])
        try:
            if check_size and path.stat().st_size != int(row["size_bytes"]):
                return False
            if check_hash and song_hash(path) != row["content_hash"]:
                return False
        except OSError:
            return None
        return True

    def find_by_path(self, path: str) -> Optional[Song]:
        songs = self._select("WHERE songs.path = ?", (path,))
        return songs[0] if songs else None

    def _select(self, where: str, params: tuple[object, ...]) -> list[Song]:
        query = (
            f"SELECT {_SONG_COLUMNS} FROM songs {where} "
            "ORDER BY LOWER(songs.album), songs.track_number, LOWER(songs.title)"
        )
        with self._lock:
            rows = self._conn.execute(query, params).fetchall()
        return [_song_from_row(row) for row in rows]

    def _upsert_locked(self, song: Song) -> None:
        self._conn.execute(
            """
            INSERT INTO songs (
                title, album, track_number, artist, genre,
                duration_seconds, year, path, content_hash, size_bytes
            )
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            ON CONFLICT(title, album) DO UPDATE SET
                track_number = excluded.track_number,
                artist = excluded.artist,
                genre = excluded.genre,
                duration_seconds = excluded.duration_seconds,
                year = excluded.year,
                path = excluded.path,
                content_hash = excluded.content_hash,
                size_bytes = excluded.size_bytes
            """,
            (
                song.title,
                song.album,
                song.track_number,
                song.artist,
                song.genre,
                song.duration_seconds,
                song.year,
                song.path,
                song.content_hash,
                song.size_bytes,
            ),
        )
        self._conn.execute(
            """
            INSERT INTO lyrics (title, album, lyrics) VALUES (?, ?, ?)
            ON CONFLICT(title, album) DO UPDATE SET lyrics = excluded.lyrics
            """,
            (song.title, song.album, song.lyrics),
        )

    def _apply_pragmas(self) -> None:
        with self._lock:
            self._conn.execute("PRAGMA journal_mode = WAL")
            self._conn.execute("PRAGMA synchronous = NORMAL")
            self._conn.execute("PRAGMA busy_timeout = 3000")

    def _ensure_schema(self) -> None:
        with self._lock:
            self._conn.executescript(
                """
                CREATE TABLE IF NOT EXISTS songs (
                    title TEXT NOT NULL,
                    album TEXT NOT NULL,
                    track_number INTEGER NOT NULL DEFAULT -1,
                    artist TEXT NOT NULL DEFAULT '',
                    genre TEXT NOT NULL DEFAULT '',
                    duration_seconds REAL NOT NULL DEFAULT -1,
                    year INTEGER NOT NULL DEFAULT -1,
                    path TEXT NOT NULL,
                    content_hash TEXT NOT NULL DEFAULT '',
                    size_bytes INTEGER NOT NULL DEFAULT 0,
                    PRIMARY KEY (title, album)
                );
                CREATE TABLE IF NOT EXISTS lyrics (
                    title TEXT NOT NULL,
                    album TEXT NOT NULL,
                    lyrics TEXT,
                    PRIMARY KEY (title, album)
                );
                CREATE INDEX IF NOT EXISTS idx_songs_path ON songs(path);
                CREATE INDEX IF NOT EXISTS idx_songs_artist ON songs(artist);
                CREATE INDEX IF NOT EXISTS idx_songs_genre ON songs(genre);
                """
            )
            self._conn.commit()


def _escape_like(text: str) -> str:
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _song_from_row(row: sqlite3.Row) -> Song:
    song = Song(
        title=row["title"],
        album=row["album"],
        artist=row["artist"],
        genre=row["genre"],
        year=int(row["year"]),
        track_number=int(row["track_number"]),
        duration_seconds=float(row["duration_seconds"]),
        path=row["path"],
        content_hash=row["content_hash"],
        size_bytes=int(row["size_bytes"]),
    )
    if "lyrics" in row.keys() and row["lyrics"] is not None:
        song = replace(song, lyrics=row["lyrics"])
    return song
