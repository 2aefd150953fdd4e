"""Status line controller for the TUI."""

from __future__ import annotations

from typing import Callable, Optional

from rich.text import Text

from rumu.panels.router import PanelId
from rumu.ui.tui_formatters import ellipsize
from rumu.ui.tui_types import StatusMessage

_PANEL_HINTS: dict[PanelId, str] = {
    PanelId.NAVIGATOR: "↑↓: browse  ←→: category  Enter: filter  Bksp: collapse",
    PanelId.SONG_LIST: "↑↓: move  ←→: page  Enter: queue  Ctrl+O: sort",
    PanelId.QUEUE: "↑↓: select  ←→: reorder  Enter: play  Bksp: remove",
    PanelId.SEARCH: "Type to search  Enter: run  Bksp: delete",
}

_LEVEL_STYLES = {"warn": "#ffcc66", "error": "#ff5f52"}


class StatusController:
    """Transient messages with a per-panel key hint underneath."""

    def __init__(self, now: Callable[[], float]) -> None:
        self._now = now
        self._message: Optional[StatusMessage] = None

    def show_message(
        self,
        text: str,
        *,
        level: str = "info",
        timeout: Optional[float] = None,
    ) -> None:
        if timeout is None:
            timeout = 6.0 if level in _LEVEL_STYLES else 3.0
        until = None if timeout == 0 else self._now() + max(0.0, timeout)
        self._message = StatusMessage(text=text, level=level, until=until)

    def clear_message(self) -> None:
        self._message = None

    def render_line(self, width: int, focus: PanelId) -> Text:
        message = self._current_message()
        if message:
            line = ellipsize(message.text, width)
            style = _LEVEL_STYLES.get(message.level)
            return Text(line, style=style) if style else Text(line)
        hint = f"[{focus.value}] {_PANEL_HINTS[focus]}  F1: help"
        return Text(ellipsize(hint, width), style="dim")

    def _current_message(self) -> Optional[StatusMessage]:
        if not self._message:
            return None
        if self._message.until is None or self._message.until > self._now():
            return self._message
        self._message = None
        return None
