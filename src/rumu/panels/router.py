"""Focus tracking, event dispatch and cross-panel effects.

One ``AppState`` holds everything the loop touches. Each iteration calls
``step`` with at most one event and ``poll_player`` once; both are plain
functions over the state so they can be driven without a terminal.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
import logging
from typing import Optional, Protocol, Sequence, Union

from rumu.panels.events import (
    Accept,
    Event,
    PlaySong,
    QueryByFields,
    QueryByText,
    QueueSong,
    Response,
    StopSong,
)
from rumu.panels.navigator import Navigator
from rumu.panels.search import Search
from rumu.panels.songlist import SongList, SongOrder
from rumu.panels.songqueue import SongQueue
from rumu.query import SongField, SongQuery
from rumu.song import Song

logger = logging.getLogger(__name__)


class Player(Protocol):
    def play(self, path: str) -> bool: ...

    def stop(self) -> bool: ...

    def is_song_finished(self) -> bool: ...

    def time_remaining(self) -> float: ...

    def song_duration(self) -> float: ...


class Library(Protocol):
    def search_all(self) -> list[Song]: ...

    def search_by_text(self, text: str) -> list[Song]: ...

    def search_by_fields(self, query: SongQuery) -> list[Song]: ...

    def distinct_values(self, song_field: SongField) -> list[str]: ...


class PanelId(str, Enum):
    NAVIGATOR = "navigator"
    SONG_LIST = "song_list"
    QUEUE = "queue"
    SEARCH = "search"


FOCUS_ORDER: tuple[PanelId, ...] = (
    PanelId.NAVIGATOR,
    PanelId.SONG_LIST,
    PanelId.QUEUE,
    PanelId.SEARCH,
)

AnyPanel = Union[Navigator, SongList, SongQueue, Search]


@dataclass
class AppState:
    player: Player
    library: Library
    navigator: Navigator = field(default_factory=Navigator)
    song_list: SongList = field(default_factory=SongList)
    queue: SongQueue = field(default_factory=SongQueue)
    search: Search = field(default_factory=Search)
    focus: PanelId = PanelId.SONG_LIST
    song_order: SongOrder = SongOrder.ALBUM
    auto_advance: bool = True
    play_failed: bool = False


def create_state(
    player: Player,
    library: Library,
    *,
    song_order: SongOrder = SongOrder.ALBUM,
    search_text: str = "",
    auto_advance: bool = True,
) -> AppState:
    """Build the initial state: whole library listed, navigator filled."""
    state = AppState(
        player=player,
        library=library,
        search=Search(search_text),
        song_order=song_order,
        auto_advance=auto_advance,
    )
    load_categories(state)
    _replace_songs(state, _library_call(state, "search_all"))
    return state


def load_categories(state: AppState) -> None:
    navigator = state.navigator
    for index, category in enumerate(navigator.categories):
        labels = _library_call(state, "distinct_values", category.source)
        if labels:
            navigator.fill_category(index, labels)


def focused_panel(state: AppState) -> AnyPanel:
    panels: dict[PanelId, AnyPanel] = {
        PanelId.NAVIGATOR: state.navigator,
        PanelId.SONG_LIST: state.song_list,
        PanelId.QUEUE: state.queue,
        PanelId.SEARCH: state.search,
    }
    return panels[state.focus]


def focus(state: AppState, panel_id: PanelId) -> None:
    if state.focus != panel_id:
        logger.debug("Focus %s -> %s", state.focus.value, panel_id.value)
    state.focus = panel_id


def focus_next(state: AppState) -> PanelId:
    position = FOCUS_ORDER.index(state.focus)
    focus(state, FOCUS_ORDER[(position + 1) % len(FOCUS_ORDER)])
    return state.focus


def focus_previous(state: AppState) -> PanelId:
    position = FOCUS_ORDER.index(state.focus)
    focus(state, FOCUS_ORDER[(position - 1) % len(FOCUS_ORDER)])
    return state.focus


def dispatch(state: AppState, event: Event) -> Optional[Response]:
    """Deliver one event to the focused panel and return its response."""
    if state.focus == PanelId.SONG_LIST and isinstance(event, Accept):
        song = state.song_list.selected_song()
        return QueueSong(song) if song is not None else None
    return focused_panel(state).handle(event)


def apply_response(state: AppState, response: Optional[Response]) -> bool:
    """Carry out a panel response. Returns False when a play request failed."""
    if response is None:
        return True
    if isinstance(response, QueueSong):
        state.queue.enqueue(response.song)
        logger.info("Queued %s", response.song.path)
    elif isinstance(response, PlaySong):
        return _play(state, response.song)
    elif isinstance(response, StopSong):
        _player_call(state, "stop")
    elif isinstance(response, QueryByFields):
        if response.query.is_empty():
            songs = _library_call(state, "search_all")
        else:
            songs = _library_call(state, "search_by_fields", response.query)
        _replace_songs(state, songs)
    elif isinstance(response, QueryByText):
        _replace_songs(state, _library_call(state, "search_by_text", response.text))
    return True


def step(state: AppState, event: Event) -> Optional[Response]:
    """Dispatch one event and apply its response.

    A play that the player rejects leaves the queue's playing row as it was;
    ``state.play_failed`` reports it.
    """
    playing = state.queue.currently_playing
    response = dispatch(state, event)
    state.play_failed = not apply_response(state, response)
    if state.play_failed:
        state.queue.set_currently_playing(playing)
    return response


def set_song_order(state: AppState, order: SongOrder) -> None:
    state.song_order = order
    state.song_list.order_by(order)


def play_queue_front(state: AppState) -> bool:
    """Restart playback from the head of the queue."""
    if state.queue.is_empty():
        return False
    if not _play(state, state.queue.songs[0]):
        return False
    state.queue.set_currently_playing(0)
    return True


def stop_playback(state: AppState) -> None:
    apply_response(state, StopSong())


def poll_player(state: AppState) -> bool:
    """Retire the finished song, if any, and optionally play the next one.

    Returns True when the player reported the end of a song.
    """
    finished = _player_call(state, "is_song_finished")
    if not finished:
        return False
    queue = state.queue
    playing = queue.currently_playing
    if playing is None:
        next_index = 0
    elif playing == 0:
        queue.pop_front_if_finished(True)
        next_index = 0
    else:
        queue.remove(playing)
        next_index = playing
    logger.info("Song finished; queue length=%s", len(queue))
    if state.auto_advance and next_index < len(queue):
        if _play(state, queue.songs[next_index]):
            queue.set_currently_playing(next_index)
    return True


def _play(state: AppState, song: Song) -> bool:
    # Loading new media replaces whatever is playing.
    if not _player_call(state, "play", song.path):
        logger.warning("Playback failed for %s", song.path)
        return False
    logger.info("Playing %s", song.path)
    return True


def _replace_songs(state: AppState, songs: Optional[Sequence[Song]]) -> None:
    if songs is None:
        return
    state.song_list.replace(songs)
    state.song_list.order_by(state.song_order)


def _player_call(state: AppState, name: str, *args: object) -> bool:
    try:
        return bool(getattr(state.player, name)(*args))
    except Exception:
        logger.exception("Player call %s failed", name)
        return False


def _library_call(state: AppState, name: str, *args: object) -> Optional[list]:
    try:
        return list(getattr(state.library, name)(*args))
    except Exception:
        logger.exception("Library call %s failed", name)
        return None
