"""Help screen listing app bindings and per-panel keys."""

from __future__ import annotations

from typing import Iterable

from rich.text import Text
from textual import events
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.screen import ModalScreen
from textual.widgets import Button, Static

HEADING_STYLE = "bold #5fc9d6"

_SECTIONS: tuple[tuple[str, tuple[str, ...]], ...] = (
    (
        "Focus",
        (
            "focus_navigator",
            "focus_song_list",
            "focus_queue",
            "focus_search",
            "focus_next",
            "focus_previous",
        ),
    ),
    ("Playback", ("play_queue", "stop")),
    ("General", ("cycle_order", "show_help", "quit_app")),
)

_PANEL_HELP: tuple[tuple[str, str], ...] = (
    ("Navigator", "Up/Down Browse | Left/Right Category | Enter Filter | Bksp Collapse"),
    ("Songs", "Up/Down Move | Left/Right Page 10 | Enter Add to queue"),
    ("Queue", "Up/Down Select | Left/Right Move song | Enter Play | Bksp Remove"),
    ("Search", "Type text | Bksp Delete | Enter Search"),
)

_KEY_NAMES = {
    "up": "↑",
    "down": "↓",
    "left": "←",
    "right": "→",
    "enter": "Enter",
    "escape": "Esc",
}

LOG_HINT = "Logs: %LOCALAPPDATA%/Rumu/logs or ~/.rumu/logs"


def _format_key(key: str) -> str:
    if key in _KEY_NAMES:
        return _KEY_NAMES[key]
    return "+".join(
        part.upper() if len(part) == 1 else part.capitalize() for part in key.split("+")
    )


def _binding_lines(bindings: Iterable[Binding]) -> dict[str, str]:
    """Map action name to ``"<keys>: <description>"``."""
    keys: dict[str, list[str]] = {}
    labels: dict[str, str] = {}
    for binding in bindings:
        keys.setdefault(binding.action, []).append(_format_key(binding.key))
        if binding.description and binding.action not in labels:
            labels[binding.action] = binding.description
    return {
        action: f"{', '.join(names)}: {labels.get(action, action)}"
        for action, names in keys.items()
    }


def build_help_text(bindings: Iterable[Binding]) -> Text:
    lines = _binding_lines(bindings)
    content = Text()
    for heading, actions in _SECTIONS:
        present = [lines[action] for action in actions if action in lines]
        if not present:
            continue
        content.append(f"{heading}\n", style=HEADING_STYLE)
        for line in present:
            content.append(f"  {line}\n")
        content.append("\n")
    content.append("Panels\n", style=HEADING_STYLE)
    for panel, keys in _PANEL_HELP:
        content.append(f"  {panel}: {keys}\n")
    content.append(f"\n{LOG_HINT}\n", style="dim")
    return content


class HelpModal(ModalScreen[None]):
    """Modal help; Esc, q or the Close button dismiss it."""

    def __init__(self, bindings: Iterable[Binding]) -> None:
        super().__init__()
        self._text = build_help_text(bindings)

    def compose(self) -> ComposeResult:
        with Vertical(id="help_modal"):
            yield Static("rumu help", id="help_title")
            with VerticalScroll(id="help_scroll"):
                yield Static(self._text, id="help_content")
            with Horizontal(id="help_footer"):
                yield Static("Esc/q: close", id="help_hint")
                yield Button("Close", id="help_close")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "help_close":
            self.dismiss(None)

    def on_key(self, event: events.Key) -> None:
        if event.key not in ("escape", "q"):
            return
        event.stop()
        self.dismiss(None)
