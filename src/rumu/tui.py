"""Textual-based TUI for rumu."""

from __future__ import annotations

from dataclasses import replace
import logging
import time
from typing import Any, Callable, Optional

try:
    from textual.app import App, ComposeResult
    from textual.binding import Binding
    from textual.containers import Horizontal, Vertical
    from textual import events
    from textual.widgets import Header, Static
except Exception as exc:  # pragma: no cover - depends on environment
    raise RuntimeError(
        "Textual is required for the TUI. Install the 'textual' dependency."
    ) from exc

from rumu.config import AppConfig, load_config, save_config
from rumu.logging_setup import set_console_level
from rumu.panels import router
from rumu.panels.events import Event, PlaySong, QueryByFields, QueryByText, QueueSong
from rumu.panels.router import AppState, Library, PanelId, Player
from rumu.panels.songlist import SongOrder
from rumu.ui.help_modal import HelpModal
from rumu.ui.keymap import FOCUS_KEYS, translate_key
from rumu.ui.status_controller import StatusController
from rumu.ui.tui_formatters import format_progress, render_status_bar
from rumu.ui.views import (
    render_navigator,
    render_queue,
    render_search,
    render_song_list,
)

logger = logging.getLogger(__name__)

_PANEL_WIDGET_IDS: dict[PanelId, str] = {
    PanelId.NAVIGATOR: "navigator",
    PanelId.SONG_LIST: "song_list",
    PanelId.QUEUE: "queue",
    PanelId.SEARCH: "search",
}

_ORDER_CYCLE = list(SongOrder)


def _content_size(widget: Any) -> tuple[int, int]:
    size = getattr(widget, "content_size", None) or widget.size
    return max(1, getattr(size, "width", 1)), max(1, getattr(size, "height", 1))


class RumuApp(App):
    """Four panels driven by one router state."""

    CSS_PATH = "app.tcss"
    TITLE = "rumu"
    ENABLE_COMMAND_PALETTE = False
    TICK_SECONDS = 0.1

    BINDINGS = [
        Binding("ctrl+n", "focus_navigator", "Browse", priority=True),
        Binding("ctrl+l", "focus_song_list", "Songs", priority=True),
        Binding("ctrl+u", "focus_queue", "Queue", priority=True),
        Binding("ctrl+f", "focus_search", "Search", priority=True),
        Binding("tab", "focus_next", "Next panel", priority=True),
        Binding("shift+tab", "focus_previous", "Previous panel", priority=True),
        Binding("ctrl+p", "play_queue", "Play queue", priority=True),
        Binding("ctrl+s", "stop", "Stop", priority=True),
        Binding("ctrl+o", "cycle_order", "Sort order", priority=True),
        Binding("f1", "show_help", "Help", priority=True),
        Binding("ctrl+q", "quit_app", "Quit", priority=True),
    ]

    def __init__(
        self,
        *,
        player: Player,
        library: Library,
        config: Optional[AppConfig] = None,
        now: Callable[[], float] = time.monotonic,
    ) -> None:
        super().__init__()
        self.player = player
        self.library = library
        self._config = config or load_config()
        self._now = now
        self._status_controller = StatusController(self._now)
        self.state: AppState = router.create_state(
            player,
            library,
            song_order=SongOrder(self._config.song_order),
            search_text=self._config.search_placeholder,
            auto_advance=self._config.auto_advance,
        )
        self._widgets: dict[PanelId, Static] = {}
        self._progress: Optional[Static] = None
        self._status: Optional[Static] = None

    # --- Widget composition ---
    def compose(self) -> ComposeResult:
        yield Header(show_clock=False)
        with Horizontal(id="body"):
            yield Static(id="navigator", classes="panel")
            with Vertical(id="center"):
                yield Static(id="search", classes="panel")
                yield Static(id="song_list", classes="panel")
            yield Static(id="queue", classes="panel")
        yield Static(id="progress")
        yield Static(id="status")

    async def on_mount(self) -> None:
        titles = {
            PanelId.NAVIGATOR: "Browse",
            PanelId.SONG_LIST: "Songs",
            PanelId.QUEUE: "Queue",
            PanelId.SEARCH: "Search",
        }
        for panel_id, widget_id in _PANEL_WIDGET_IDS.items():
            widget = self.query_one(f"#{widget_id}", Static)
            widget.border_title = titles[panel_id]
            self._widgets[panel_id] = widget
        self._progress = self.query_one("#progress", Static)
        self._status = self.query_one("#status", Static)
        setter = getattr(self.player, "set_volume", None)
        if callable(setter):
            setter(self._config.volume)
        self.set_interval(self.TICK_SECONDS, self._on_tick)
        self.refresh_views()
        logger.info("TUI mounted songs=%s", len(self.state.song_list))

    # --- Loop ---
    def _on_tick(self) -> None:
        if router.poll_player(self.state):
            playing = self.state.queue.playing_song()
            if playing is not None:
                self._set_message(f"Playing: {playing.title}")
        self.refresh_views()

    def handle_event(self, event: Event) -> None:
        response = router.step(self.state, event)
        if isinstance(response, QueueSong):
            self._set_message(f"Queued: {response.song.title}")
        elif isinstance(response, PlaySong) and self.state.play_failed:
            self._set_message(
                f"Playback failed: {response.song.title}", level="error"
            )
        elif isinstance(response, PlaySong):
            self._set_message(f"Playing: {response.song.title}")
        elif isinstance(response, (QueryByFields, QueryByText)):
            self._set_message(f"{len(self.state.song_list)} songs")
        self.refresh_views()

    def on_key(self, event: events.Key) -> None:
        if len(self.screen_stack) > 1:
            return
        if event.key == "escape":
            event.stop()
            self.action_quit_app()
            return
        if event.key in FOCUS_KEYS:
            event.stop()
            self._focus(FOCUS_KEYS[event.key])
            return
        translated = translate_key(event.key, event.character)
        if translated is None:
            return
        event.stop()
        self.handle_event(translated)

    # --- Rendering ---
    def refresh_views(self) -> None:
        if not self._widgets:
            return
        state = self.state
        for panel_id, widget in self._widgets.items():
            widget.set_class(panel_id == state.focus, "focused")
        width, height = _content_size(self._widgets[PanelId.NAVIGATOR])
        self._widgets[PanelId.NAVIGATOR].update(
            render_navigator(state.navigator, width)
        )
        width, height = _content_size(self._widgets[PanelId.SONG_LIST])
        self._widgets[PanelId.SONG_LIST].update(
            render_song_list(state.song_list, width, height)
        )
        width, height = _content_size(self._widgets[PanelId.QUEUE])
        self._widgets[PanelId.QUEUE].update(render_queue(state.queue, width, height))
        self._widgets[PanelId.SEARCH].update(
            render_search(state.search, focused=state.focus == PanelId.SEARCH)
        )
        self._update_progress()
        if self._status is not None:
            width, _height = _content_size(self._status)
            self._status.update(self._status_controller.render_line(width, state.focus))

    def _update_progress(self) -> None:
        if self._progress is None:
            return
        duration = self._player_seconds("song_duration")
        remaining = self._player_seconds("time_remaining")
        text, ratio = format_progress(remaining, duration)
        playing = self.state.queue.playing_song()
        title = playing.title if playing else "Nothing playing"
        width, _height = _content_size(self._progress)
        bar_width = max(0, width - len(text) - len(title) - 4)
        self._progress.update(
            f"{title}  {render_status_bar(bar_width, ratio)}  {text}"
        )

    def _player_seconds(self, name: str) -> float:
        getter = getattr(self.player, name, None)
        if not callable(getter):
            return 0.0
        try:
            return float(getter())
        except Exception:
            return 0.0

    def _set_message(
        self, text: str, *, level: str = "info", timeout: Optional[float] = None
    ) -> None:
        self._status_controller.show_message(text, level=level, timeout=timeout)

    def _focus(self, panel_id: PanelId) -> None:
        router.focus(self.state, panel_id)
        self.refresh_views()

    def _save_config(self) -> None:
        self._config = replace(self._config, song_order=self.state.song_order.value)
        try:
            save_config(self._config)
        except OSError:
            logger.exception("Failed to save config")

    # --- Actions ---
    def action_focus_navigator(self) -> None:
        self._focus(PanelId.NAVIGATOR)

    def action_focus_song_list(self) -> None:
        self._focus(PanelId.SONG_LIST)

    def action_focus_queue(self) -> None:
        self._focus(PanelId.QUEUE)

    def action_focus_search(self) -> None:
        self._focus(PanelId.SEARCH)

    def action_focus_next(self) -> None:
        router.focus_next(self.state)
        self.refresh_views()

    def action_focus_previous(self) -> None:
        router.focus_previous(self.state)
        self.refresh_views()

    def action_play_queue(self) -> None:
        if self.state.queue.is_empty():
            self._set_message("Queue empty", level="warn")
        elif router.play_queue_front(self.state):
            self._set_message(f"Playing: {self.state.queue.songs[0].title}")
        else:
            self._set_message("Playback failed", level="error")
        self.refresh_views()

    def action_stop(self) -> None:
        router.stop_playback(self.state)
        self._set_message("Stopped")
        self.refresh_views()

    def action_cycle_order(self) -> None:
        current = _ORDER_CYCLE.index(self.state.song_order)
        order = _ORDER_CYCLE[(current + 1) % len(_ORDER_CYCLE)]
        router.set_song_order(self.state, order)
        self._set_message(f"Sort: {order.value}")
        self._save_config()
        self.refresh_views()

    def action_show_help(self) -> None:
        self.push_screen(HelpModal(self._help_bindings()))

    def action_quit_app(self) -> None:
        logger.info("TUI exit requested")
        router.stop_playback(self.state)
        self._save_config()
        self.exit()

    def _help_bindings(self) -> list[Binding]:
        return [*self.BINDINGS, Binding("escape", "quit_app", "Quit")]


def run_tui(
    player: Player, library: Library, *, config: Optional[AppConfig] = None
) -> int:
    """Run the TUI and return an exit code."""
    logger.info("TUI start")
    set_console_level(logging.WARNING)
    app = RumuApp(player=player, library=library, config=config)
    app.run()
    logger.info("TUI exit")
    return 0
