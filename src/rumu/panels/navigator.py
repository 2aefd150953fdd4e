"""Category tree (Album/Artist/Genre) with a two-level cursor."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Sequence, Union

from rumu.panels.events import (
    Accept,
    Back,
    Down,
    Event,
    Left,
    QueryByFields,
    Response,
    Right,
    Up,
)
from rumu.query import SongField, SongQuery


@dataclass(frozen=True)
class Category:
    name: str
    source: SongField


@dataclass(frozen=True)
class OnCategory:
    index: int


@dataclass(frozen=True)
class OnSubcategory:
    index: int
    sub_index: int


Selection = Union[OnCategory, OnSubcategory]

DEFAULT_CATEGORIES: tuple[Category, ...] = (
    Category("Album", SongField.ALBUM),
    Category("Artist", SongField.ARTIST),
    Category("Genre", SongField.GENRE),
)


class Navigator:
    """Hierarchical browser over a fixed set of categories.

    ``Up``/``Down`` move inside the focused category's labels and clamp at
    both ends. ``Left``/``Right`` switch category (wrapping) and land on the
    first label when there is one. ``Back`` returns to the category row.
    """

    def __init__(self, categories: Optional[Sequence[Category]] = None) -> None:
        self._categories: tuple[Category, ...] = tuple(
            DEFAULT_CATEGORIES if categories is None else categories
        )
        if not self._categories:
            raise ValueError("Navigator needs at least one category")
        self._labels: list[list[str]] = [[] for _ in self._categories]
        self._selection: Selection = OnCategory(0)

    @property
    def categories(self) -> tuple[Category, ...]:
        return self._categories

    @property
    def selection(self) -> Selection:
        return self._selection

    def subcategories(self, index: int) -> tuple[str, ...]:
        if 0 <= index < len(self._labels):
            return tuple(self._labels[index])
        return ()

    def size_of_category(self, index: int) -> int:
        return len(self.subcategories(index))

    def fill_category(self, index: int, labels: Iterable[str]) -> None:
        """Append labels to a category. Unknown indices are ignored."""
        if 0 <= index < len(self._labels):
            self._labels[index].extend(labels)

    def selected_label(self) -> Optional[str]:
        selection = self._selection
        if isinstance(selection, OnSubcategory):
            return self._labels[selection.index][selection.sub_index]
        return None

    def current_query(self) -> SongQuery:
        label = self.selected_label()
        if label is None:
            return SongQuery()
        category = self._categories[self._selection.index]
        return SongQuery.match(category.source, label)

    def handle(self, event: Event) -> Optional[Response]:
        if isinstance(event, Down):
            self._move_down()
        elif isinstance(event, Up):
            self._move_up()
        elif isinstance(event, Right):
            self._switch_category(1)
        elif isinstance(event, Left):
            self._switch_category(-1)
        elif isinstance(event, Back):
            self._selection = OnCategory(self._selection.index)
        elif isinstance(event, Accept):
            return QueryByFields(self.current_query())
        return None

    def _move_down(self) -> None:
        selection = self._selection
        count = self.size_of_category(selection.index)
        if isinstance(selection, OnCategory):
            if count:
                self._selection = OnSubcategory(selection.index, 0)
            return
        self._selection = OnSubcategory(
            selection.index, min(count - 1, selection.sub_index + 1)
        )

    def _move_up(self) -> None:
        selection = self._selection
        if isinstance(selection, OnSubcategory):
            self._selection = OnSubcategory(
                selection.index, max(0, selection.sub_index - 1)
            )

    def _switch_category(self, step: int) -> None:
        index = (self._selection.index + step) % len(self._categories)
        if self.size_of_category(index):
            self._selection = OnSubcategory(index, 0)
        else:
            self._selection = OnCategory(index)
