"""Field predicates understood by the song library."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Union

FieldValue = Union[str, int, float]


class SongField(str, Enum):
    """Queryable song columns. The value is the column name in the store."""

    TITLE = "title"
    ALBUM = "album"
    TRACK_NUMBER = "track_number"
    ARTIST = "artist"
    GENRE = "genre"
    DURATION = "duration_seconds"
    YEAR = "year"
    CONTENT_HASH = "content_hash"
    PATH = "path"
    SIZE = "size_bytes"


@dataclass(frozen=True)
class SongQuery:
    """A set of ``field == value`` predicates, all of which must hold.

    An empty query is unconstrained and matches every song.
    """

    predicates: Mapping[SongField, FieldValue] = field(
        default_factory=lambda: MappingProxyType({})
    )

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "predicates", MappingProxyType(dict(self.predicates))
        )

    @classmethod
    def match(cls, song_field: SongField, value: FieldValue) -> SongQuery:
        return cls({song_field: value})

    def with_value(self, song_field: SongField, value: FieldValue) -> SongQuery:
        merged = dict(self.predicates)
        merged[song_field] = value
        return SongQuery(merged)

    def is_empty(self) -> bool:
        return not self.predicates

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SongQuery):
            return NotImplemented
        return dict(self.predicates) == dict(other.predicates)

    def __hash__(self) -> int:
        return hash(frozenset(self.predicates.items()))
