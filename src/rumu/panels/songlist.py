"""Browsable list of query results."""

from __future__ import annotations

from enum import Enum
from typing import Callable, Iterable, Optional

from rumu.panels.events import Down, Event, Left, Response, Right, Up
from rumu.song import Song

PAGE_JUMP = 10


class SongOrder(str, Enum):
    ALBUM = "album"
    TRACK_NUMBER = "track_number"
    ARTIST = "artist"
    TITLE = "title"


_SORT_KEYS: dict[SongOrder, Callable[[Song], tuple]] = {
    SongOrder.ALBUM: lambda song: (song.album, song.track_number),
    SongOrder.TRACK_NUMBER: lambda song: (song.track_number,),
    SongOrder.ARTIST: lambda song: (song.artist, song.album, song.track_number),
    SongOrder.TITLE: lambda song: (song.title,),
}


class SongList:
    """Query results with a wrapping cursor.

    The cursor is only meaningful while the list is non-empty.
    """

    def __init__(self, songs: Iterable[Song] = ()) -> None:
        self._songs: list[Song] = list(songs)
        self._cursor = 0

    @property
    def songs(self) -> tuple[Song, ...]:
        return tuple(self._songs)

    @property
    def cursor(self) -> int:
        return self._cursor

    def __len__(self) -> int:
        return len(self._songs)

    def is_empty(self) -> bool:
        return not self._songs

    def replace(self, songs: Iterable[Song]) -> None:
        self._songs = list(songs)
        self._cursor = 0

    def selected_song(self) -> Optional[Song]:
        if self.is_empty():
            return None
        return self._songs[self._cursor]

    def order_by(self, order: SongOrder) -> None:
        """Stable sort; the cursor stays on the same row index."""
        self._songs.sort(key=_SORT_KEYS[SongOrder(order)])

    def handle(self, event: Event) -> Optional[Response]:
        if self.is_empty():
            return None
        count = len(self._songs)
        if isinstance(event, Up):
            self._cursor = (self._cursor - 1) % count
        elif isinstance(event, Down):
            self._cursor = (self._cursor + 1) % count
        elif isinstance(event, Left):
            self._cursor = max(0, self._cursor - PAGE_JUMP)
        elif isinstance(event, Right):
            self._cursor = min(count - 1, self._cursor + PAGE_JUMP)
        return None
