"""Events delivered to panels and the responses they hand back.

Panels never talk to each other. A keystroke becomes one ``Event``; the
focused panel consumes it and may return one ``Response``, which the router
interprets in the same loop iteration.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol, Union

from rumu.query import SongQuery
from rumu.song import Song


@dataclass(frozen=True)
class Character:
    char: str


@dataclass(frozen=True)
class Up:
    pass


@dataclass(frozen=True)
class Down:
    pass


@dataclass(frozen=True)
class Left:
    pass


@dataclass(frozen=True)
class Right:
    pass


@dataclass(frozen=True)
class Accept:
    pass


@dataclass(frozen=True)
class Back:
    pass


@dataclass(frozen=True)
class NoEvent:
    """A keystroke with no panel meaning."""


Event = Union[Character, Up, Down, Left, Right, Accept, Back, NoEvent]

UP = Up()
DOWN = Down()
LEFT = Left()
RIGHT = Right()
ACCEPT = Accept()
BACK = Back()
NO_EVENT = NoEvent()


@dataclass(frozen=True)
class QueueSong:
    song: Song


@dataclass(frozen=True)
class PlaySong:
    song: Song


@dataclass(frozen=True)
class StopSong:
    pass


@dataclass(frozen=True)
class QueryByFields:
    query: SongQuery


@dataclass(frozen=True)
class QueryByText:
    text: str


Response = Union[QueueSong, PlaySong, StopSong, QueryByFields, QueryByText]


class Panel(Protocol):
    """Consume one event, update own state, maybe answer with a response."""

    def handle(self, event: Event) -> Optional[Response]: ...
