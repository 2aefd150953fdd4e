"""Tag extraction and directory scanning for the song library."""

from __future__ import annotations

from dataclasses import dataclass
import logging
import os
from pathlib import Path
import re
from typing import TYPE_CHECKING, Optional

from rumu.song import Song, song_hash

if TYPE_CHECKING:
    from rumu.songdb import SongDB

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = {".mp3", ".flac", ".wav", ".ogg", ".opus", ".m4a", ".aac"}

_LEADING_INT = re.compile(r"\s*(-?\d+)")


@dataclass(frozen=True)
class SyncReport:
    added: int = 0
    updated: int = 0
    unchanged: int = 0
    pruned: int = 0


def is_supported(path: Path) -> bool:
    return path.suffix.lower() in SUPPORTED_EXTENSIONS


def _extract_text(value: object | None) -> str | None:
    if value is None:
        return None
    if hasattr(value, "text"):
        value = getattr(value, "text")
    if isinstance(value, (list, tuple)):
        value = value[0] if value else None
    if value is None:
        return None
    if isinstance(value, bytes):
        text = value.decode("utf-8", errors="replace")
    else:
        text = str(value)
    text = text.strip()
    return text or None


def _read_tag(tags: object | None, keys: tuple[str, ...]) -> str | None:
    getter = getattr(tags, "get", None) if tags is not None else None
    if getter is None:
        return None
    for key in keys:
        try:
            value = getter(key)
        except (KeyError, ValueError):
            continue
        text = _extract_text(value)
        if text:
            return text
    return None


def _parse_int(text: str | None, default: int = -1) -> int:
    if not text:
        return default
    match = _LEADING_INT.match(text)
    return int(match.group(1)) if match else default


def read_song(path: Path, *, with_hash: bool = False) -> Optional[Song]:
    """Read one audio file into a Song, or None if it is not usable."""
    if not is_supported(path):
        return None
    try:
        from mutagen import File as MutagenFile
        from mutagen import MutagenError
    except ImportError:
        logger.warning("mutagen is not installed; cannot read %s", path)
        return None
    try:
        audio = MutagenFile(path, easy=True)
        size = path.stat().st_size
    except (MutagenError, OSError):
        logger.debug("Unreadable audio file %s", path, exc_info=True)
        return None
    if audio is None:
        return None
    tags = getattr(audio, "tags", None)
    info = getattr(audio, "info", None)
    length = getattr(info, "length", None)
    content_hash = ""
    if with_hash:
        try:
            content_hash = song_hash(path)
        except OSError:
            logger.warning("Could not hash %s", path)
    return Song(
        title=_read_tag(tags, ("title", "TITLE")) or "unknown title",
        album=_read_tag(tags, ("album", "ALBUM")) or "unknown album",
        artist=_read_tag(tags, ("artist", "ARTIST", "performer", "albumartist"))
        or "unknown artist",
        genre=_read_tag(tags, ("genre", "GENRE")) or "unknown genre",
        year=_parse_int(_read_tag(tags, ("date", "DATE", "year"))),
        track_number=_parse_int(_read_tag(tags, ("tracknumber", "TRACKNUMBER"))),
        duration_seconds=float(length) if length is not None else -1.0,
        path=str(path),
        lyrics=_read_tag(tags, ("lyrics", "LYRICS", "unsyncedlyrics")) or "no lyrics",
        content_hash=content_hash,
        size_bytes=size,
    )


def iter_audio_files(directory: Path) -> list[Path]:
    found: list[Path] = []
    for root, _dirs, files in os.walk(directory):
        for name in files:
            path = Path(root) / name
            if is_supported(path):
                found.append(path)
    return sorted(found)


def scan_directory(directory: Path, *, with_hash: bool = False) -> list[Song]:
    songs: list[Song] = []
    for path in iter_audio_files(directory):
        song = read_song(path, with_hash=with_hash)
        if song is not None:
            songs.append(song)
    logger.info("Scanned %s: %s songs", directory, len(songs))
    return songs


def sync_library(db: SongDB, directory: Path) -> SyncReport:
    """Bring the library in line with the files under ``directory``."""
    added = updated = unchanged = 0
    for path in iter_audio_files(directory):
        known = db.find_by_path(str(path))
        if known is not None and db.check_change(known.title, known.album):
            unchanged += 1
            continue
        song = read_song(path)
        if song is None:
            continue
        if known is None:
            db.add(song)
            added += 1
        else:
            db.update(known.title, known.album, song)
            updated += 1
    pruned = db.prune()
    report = SyncReport(added=added, updated=updated, unchanged=unchanged, pruned=pruned)
    logger.info("Library sync %s", report)
    return report
