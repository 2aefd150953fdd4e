"""Playback queue with a selection cursor and a now-playing marker."""

from __future__ import annotations

from collections import deque
from typing import Iterable, Optional

from rumu.panels.events import (
    Accept,
    Back,
    Down,
    Event,
    Left,
    PlaySong,
    Response,
    Right,
    Up,
)
from rumu.song import Song


class SongQueue:
    """Ordered play queue.

    ``selection`` is the highlighted row. ``currently_playing`` follows the
    song being played through every swap and removal; it is cleared when that
    song leaves the queue.
    """

    def __init__(self, songs: Iterable[Song] = ()) -> None:
        self._queue: deque[Song] = deque(songs)
        self._selection: Optional[int] = None
        self._currently_playing: Optional[int] = None

    @property
    def songs(self) -> tuple[Song, ...]:
        return tuple(self._queue)

    @property
    def selection(self) -> Optional[int]:
        return self._selection

    @property
    def currently_playing(self) -> Optional[int]:
        return self._currently_playing

    def __len__(self) -> int:
        return len(self._queue)

    def is_empty(self) -> bool:
        return not self._queue

    def selected_song(self) -> Optional[Song]:
        if self._selection is None:
            return None
        return self._queue[self._selection]

    def playing_song(self) -> Optional[Song]:
        if self._currently_playing is None:
            return None
        return self._queue[self._currently_playing]

    def set_currently_playing(self, index: Optional[int]) -> None:
        if index is not None and not 0 <= index < len(self._queue):
            index = None
        self._currently_playing = index

    def enqueue(self, song: Song) -> None:
        self._queue.append(song)

    def select_up(self) -> None:
        if self.is_empty():
            return
        if self._selection is None:
            self._selection = 0
            return
        self._selection = (self._selection - 1) % len(self._queue)

    def select_down(self) -> None:
        if self.is_empty():
            return
        if self._selection is None:
            self._selection = 0
            return
        self._selection = (self._selection + 1) % len(self._queue)

    def swap_with_previous(self) -> None:
        if self._selection is None:
            return
        self._swap(self._selection, max(0, self._selection - 1))

    def swap_with_next(self) -> None:
        if self._selection is None:
            return
        self._swap(self._selection, min(len(self._queue) - 1, self._selection + 1))

    def remove(self, index: int) -> Optional[Song]:
        if not 0 <= index < len(self._queue):
            return None
        removed = self._queue[index]
        del self._queue[index]
        playing = self._currently_playing
        if playing is not None:
            if playing == index:
                self._currently_playing = None
            elif playing > index:
                self._currently_playing = playing - 1
        if self._selection is not None:
            if self.is_empty():
                self._selection = None
            else:
                self._selection = min(self._selection, len(self._queue) - 1)
        return removed

    def remove_selected(self) -> Optional[Song]:
        if self._selection is None:
            return None
        return self.remove(self._selection)

    def pop_front_if_finished(self, finished: bool) -> Optional[Song]:
        if not finished:
            return None
        return self.remove(0)

    def accept(self) -> Optional[Response]:
        if self._selection is None:
            return None
        self._currently_playing = self._selection
        return PlaySong(self._queue[self._selection])

    def handle(self, event: Event) -> Optional[Response]:
        if isinstance(event, Up):
            self.select_up()
        elif isinstance(event, Down):
            self.select_down()
        elif isinstance(event, Left):
            self.swap_with_previous()
        elif isinstance(event, Right):
            self.swap_with_next()
        elif isinstance(event, Back):
            self.remove_selected()
        elif isinstance(event, Accept):
            return self.accept()
        return None

    def _swap(self, first: int, second: int) -> None:
        if first == second:
            return
        queue = self._queue
        queue[first], queue[second] = queue[second], queue[first]
        if self._currently_playing == first:
            self._currently_playing = second
        elif self._currently_playing == second:
            self._currently_playing = first
        self._selection = second
