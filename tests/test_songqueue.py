"""Tests for the play queue panel."""

from __future__ import annotations

import random

from rumu.panels.events import ACCEPT, BACK, DOWN, LEFT, RIGHT, UP, PlaySong
from rumu.panels.songqueue import SongQueue
from rumu.song import Song

S1 = Song(title="S1", album="A", path="/music/s1.mp3")
S2 = Song(title="S2", album="A", path="/music/s2.mp3")
S3 = Song(title="S3", album="A", path="/music/s3.mp3")


def _select(queue: SongQueue, index: int) -> None:
    queue.select_down()
    for _ in range(index):
        queue.select_down()


def test_swap_with_next_follows_playing_song() -> None:
    queue = SongQueue([S1, S2, S3])
    queue.set_currently_playing(1)
    _select(queue, 1)
    queue.swap_with_next()
    assert queue.songs == (S1, S3, S2)
    assert queue.currently_playing == 2
    assert queue.selection == 2


def test_pop_front_clears_playing_and_keeps_selection_valid() -> None:
    queue = SongQueue([S1, S2])
    queue.set_currently_playing(0)
    _select(queue, 1)
    removed = queue.pop_front_if_finished(True)
    assert removed == S1
    assert queue.songs == (S2,)
    assert queue.currently_playing is None
    assert queue.selection == 0


def test_pop_front_on_last_song_clears_selection() -> None:
    queue = SongQueue([S1])
    _select(queue, 0)
    queue.pop_front_if_finished(True)
    assert queue.is_empty()
    assert queue.selection is None


def test_pop_front_not_finished_is_noop() -> None:
    queue = SongQueue([S1, S2])
    assert queue.pop_front_if_finished(False) is None
    assert queue.songs == (S1, S2)


def test_selection_starts_absent_and_wraps() -> None:
    queue = SongQueue([S1, S2, S3])
    assert queue.selection is None
    queue.handle(UP)
    assert queue.selection == 0
    queue.handle(UP)
    assert queue.selection == 2
    queue.handle(DOWN)
    assert queue.selection == 0


def test_empty_queue_ignores_everything() -> None:
    queue = SongQueue()
    for event in (UP, DOWN, LEFT, RIGHT, BACK, ACCEPT):
        assert queue.handle(event) is None
    assert queue.selection is None
    assert queue.currently_playing is None
    assert queue.remove(0) is None
    assert queue.pop_front_if_finished(True) is None


def test_swap_at_edges_is_noop() -> None:
    queue = SongQueue([S1, S2])
    queue.set_currently_playing(0)
    _select(queue, 0)
    queue.handle(LEFT)
    assert queue.songs == (S1, S2)
    assert queue.selection == 0
    queue.handle(DOWN)
    queue.handle(RIGHT)
    assert queue.songs == (S1, S2)
    assert queue.currently_playing == 0


def test_swap_moves_other_song_around_playing() -> None:
    queue = SongQueue([S1, S2, S3])
    queue.set_currently_playing(0)
    queue.handle(DOWN)
    queue.handle(DOWN)
    queue.handle(LEFT)
    assert queue.songs == (S2, S1, S3)
    assert queue.currently_playing == 1
    assert queue.playing_song() == S1


def test_remove_before_playing_shifts_index() -> None:
    queue = SongQueue([S1, S2, S3])
    queue.set_currently_playing(2)
    assert queue.remove(0) == S1
    assert queue.currently_playing == 1
    assert queue.playing_song() == S3


def test_back_removes_selected_song() -> None:
    queue = SongQueue([S1, S2, S3])
    _select(queue, 2)
    queue.handle(BACK)
    assert queue.songs == (S1, S2)
    assert queue.selection == 1


def test_accept_plays_selected_song() -> None:
    queue = SongQueue([S1, S2])
    _select(queue, 1)
    response = queue.handle(ACCEPT)
    assert response == PlaySong(S2)
    assert queue.currently_playing == 1


def test_accept_without_selection_does_nothing() -> None:
    queue = SongQueue([S1])
    assert queue.handle(ACCEPT) is None
    assert queue.currently_playing is None


def test_set_currently_playing_out_of_range_clears() -> None:
    queue = SongQueue([S1])
    queue.set_currently_playing(3)
    assert queue.currently_playing is None


def test_playing_song_identity_survives_random_mutations() -> None:
    rng = random.Random(5)
    songs = [Song(title=f"T{idx}", album="X") for idx in range(8)]
    queue = SongQueue(songs)
    queue.set_currently_playing(3)
    queue.select_down()
    expected = songs[3]
    events = [UP, DOWN, LEFT, RIGHT, BACK]
    for _ in range(200):
        if queue.is_empty():
            break
        event = rng.choice(events)
        if event is BACK and queue.selected_song() == expected:
            expected = None
        queue.handle(event)
        assert queue.playing_song() == expected
        if queue.selection is not None:
            assert 0 <= queue.selection < len(queue)
