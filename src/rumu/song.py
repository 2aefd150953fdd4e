"""Song model shared by the panels and the library."""

from __future__ import annotations

from dataclasses import dataclass
import hashlib
from pathlib import Path

HASH_CHUNK_SIZE = 8192


@dataclass(frozen=True)
class Song:
    """A single library entry. Panels hold copies, never shared instances."""

    title: str
    album: str
    artist: str = "unknown artist"
    genre: str = "unknown genre"
    year: int = -1
    track_number: int = -1
    duration_seconds: float = -1.0
    path: str = ""
    lyrics: str = ""
    content_hash: str = ""
    size_bytes: int = 0


def song_label(song: Song) -> str:
    return (
        f"{song.track_number} - {song.title} {song.album}, "
        f"{song.year}; {song.duration_seconds:g}s"
    )


def song_hash(path: str | Path) -> str:
    """Hash the file contents followed by its path.

    Reads the whole file, so callers should only do this when a size check
    is not enough.
    """
    digest = hashlib.sha1()
    with open(path, "rb") as handle:
        for chunk in iter(lambda: handle.read(HASH_CHUNK_SIZE), b""):
            digest.update(chunk)
    digest.update(str(path).encode("utf-8"))
    return digest.hexdigest()
