"""Tests for the category navigator panel."""

from __future__ import annotations

import random

import pytest

from rumu.panels.events import ACCEPT, BACK, DOWN, LEFT, RIGHT, UP, QueryByFields
from rumu.panels.navigator import (
    DEFAULT_CATEGORIES,
    Category,
    Navigator,
    OnCategory,
    OnSubcategory,
)
from rumu.query import SongField, SongQuery


def _two_categories() -> Navigator:
    navigator = Navigator(
        [Category("Album", SongField.ALBUM), Category("Artist", SongField.ARTIST)]
    )
    navigator.fill_category(0, ["A", "B", "C"])
    return navigator


def test_down_clamps_inside_category() -> None:
    navigator = _two_categories()
    assert navigator.selection == OnCategory(0)
    navigator.handle(DOWN)
    assert navigator.selection == OnSubcategory(0, 0)
    navigator.handle(DOWN)
    navigator.handle(DOWN)
    assert navigator.selection == OnSubcategory(0, 2)
    navigator.handle(DOWN)
    assert navigator.selection == OnSubcategory(0, 2)


def test_up_clamps_at_first_label() -> None:
    navigator = _two_categories()
    navigator.handle(DOWN)
    navigator.handle(UP)
    assert navigator.selection == OnSubcategory(0, 0)


def test_up_on_category_row_is_noop() -> None:
    navigator = _two_categories()
    navigator.handle(UP)
    assert navigator.selection == OnCategory(0)


def test_down_into_empty_category_stays_on_row() -> None:
    navigator = _two_categories()
    navigator.handle(RIGHT)
    assert navigator.selection == OnCategory(1)
    navigator.handle(DOWN)
    assert navigator.selection == OnCategory(1)


def test_left_right_switch_category_and_wrap() -> None:
    navigator = _two_categories()
    navigator.handle(RIGHT)
    assert navigator.selection == OnCategory(1)
    navigator.handle(RIGHT)
    assert navigator.selection == OnSubcategory(0, 0)
    navigator.handle(LEFT)
    assert navigator.selection == OnCategory(1)


def test_back_collapses_to_category_row() -> None:
    navigator = _two_categories()
    navigator.handle(DOWN)
    navigator.handle(DOWN)
    navigator.handle(BACK)
    assert navigator.selection == OnCategory(0)


def test_accept_on_label_queries_by_field() -> None:
    navigator = _two_categories()
    navigator.handle(DOWN)
    navigator.handle(DOWN)
    response = navigator.handle(ACCEPT)
    assert response == QueryByFields(SongQuery.match(SongField.ALBUM, "B"))


def test_accept_on_category_row_queries_everything() -> None:
    navigator = _two_categories()
    response = navigator.handle(ACCEPT)
    assert isinstance(response, QueryByFields)
    assert response.query.is_empty()


def test_fill_category_appends_and_ignores_bad_index() -> None:
    navigator = _two_categories()
    navigator.fill_category(0, ["D"])
    navigator.fill_category(5, ["ignored"])
    navigator.fill_category(-1, ["ignored"])
    assert navigator.subcategories(0) == ("A", "B", "C", "D")
    assert navigator.size_of_category(1) == 0
    assert navigator.subcategories(9) == ()


def test_default_categories() -> None:
    navigator = Navigator()
    assert navigator.categories == DEFAULT_CATEGORIES
    assert [category.name for category in navigator.categories] == [
        "Album",
        "Artist",
        "Genre",
    ]


def test_requires_a_category() -> None:
    with pytest.raises(ValueError):
        Navigator([])


def test_selection_always_valid() -> None:
    rng = random.Random(11)
    navigator = Navigator()
    navigator.fill_category(0, ["a", "b", "c", "d"])
    navigator.fill_category(2, ["rock"])
    events = [UP, DOWN, LEFT, RIGHT, BACK]
    for _ in range(500):
        navigator.handle(rng.choice(events))
        selection = navigator.selection
        assert 0 <= selection.index < len(navigator.categories)
        if isinstance(selection, OnSubcategory):
            assert 0 <= selection.sub_index < navigator.size_of_category(
                selection.index
            )
            assert navigator.selected_label() is not None
