"""Keystroke to panel event translation."""

from __future__ import annotations

from typing import Optional

from rumu.panels.events import (
    ACCEPT,
    BACK,
    DOWN,
    LEFT,
    RIGHT,
    UP,
    Character,
    Event,
)
from rumu.panels.router import PanelId

_KEY_EVENTS: dict[str, Event] = {
    "up": UP,
    "down": DOWN,
    "left": LEFT,
    "right": RIGHT,
    "enter": ACCEPT,
    "backspace": BACK,
}

# Handled by the app before translation; never reach a panel.
FOCUS_KEYS: dict[str, PanelId] = {
    "ctrl+n": PanelId.NAVIGATOR,
    "ctrl+l": PanelId.SONG_LIST,
    "ctrl+u": PanelId.QUEUE,
    "ctrl+f": PanelId.SEARCH,
}


def translate_key(key: str, character: Optional[str] = None) -> Optional[Event]:
    """Map a Textual key name (and its printable character) to an Event."""
    event = _KEY_EVENTS.get(key)
    if event is not None:
        return event
    if key == "space":
        return Character(" ")
    if character is not None and len(character) == 1 and character.isprintable():
        return Character(character)
    return None
