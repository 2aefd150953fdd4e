"""Free-text search box."""

from __future__ import annotations

from typing import Optional

from rumu.panels.events import Accept, Back, Character, Event, QueryByText, Response


class Search:
    def __init__(self, text: str = "") -> None:
        self._text = text

    @property
    def text(self) -> str:
        return self._text

    def handle(self, event: Event) -> Optional[Response]:
        if isinstance(event, Character):
            self._text += event.char
        elif isinstance(event, Back):
            self._text = self._text[:-1]
        elif isinstance(event, Accept):
            return QueryByText(self._text)
        return None
