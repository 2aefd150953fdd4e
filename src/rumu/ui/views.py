"""Read-only renderings of panel state.

Everything here takes a panel and returns ``rich.text.Text``; nothing
mutates the panel.
"""

from __future__ import annotations

from rich.text import Text

from rumu.panels.navigator import Navigator, OnCategory, OnSubcategory
from rumu.panels.search import Search
from rumu.panels.songlist import SongList
from rumu.panels.songqueue import SongQueue
from rumu.song import song_label
from rumu.ui.tui_formatters import ellipsize

CURSOR_MARK = ">>"
CURSOR_STYLE = "bold reverse"
PLAYING_STYLE = "bold green"
CATEGORY_STYLE = "bold #5fc9d6"


def _line(text: str, width: int, *, selected: bool) -> str:
    prefix = f"{CURSOR_MARK} " if selected else "   "
    return prefix + ellipsize(text, max(0, width - len(prefix)))


def render_navigator(navigator: Navigator, width: int = 40) -> Text:
    content = Text()
    selection = navigator.selection
    for index, category in enumerate(navigator.categories):
        on_row = isinstance(selection, OnCategory) and selection.index == index
        content.append(
            _line(category.name, width, selected=on_row) + "\n",
            style=CATEGORY_STYLE + (" reverse" if on_row else ""),
        )
        if selection.index != index:
            continue
        for sub_index, label in enumerate(navigator.subcategories(index)):
            picked = (
                isinstance(selection, OnSubcategory) and selection.sub_index == sub_index
            )
            content.append(
                _line("  " + label, width, selected=picked) + "\n",
                style=CURSOR_STYLE if picked else None,
            )
    content.rstrip()
    return content


def visible_window(count: int, cursor: int | None, height: int) -> range:
    """Rows to draw so the cursor stays on screen."""
    if count <= 0 or height <= 0:
        return range(0)
    if count <= height:
        return range(count)
    anchor = 0 if cursor is None else max(0, min(cursor, count - 1))
    start = max(0, min(anchor - height // 2, count - height))
    return range(start, start + height)


def render_song_list(song_list: SongList, width: int = 80, height: int = 0) -> Text:
    if song_list.is_empty():
        return Text("No songs", style="dim")
    songs = song_list.songs
    rows = visible_window(len(songs), song_list.cursor, height or len(songs))
    content = Text()
    for index in rows:
        picked = index == song_list.cursor
        content.append(
            _line(song_label(songs[index]), width, selected=picked) + "\n",
            style=CURSOR_STYLE if picked else None,
        )
    content.rstrip()
    return content


def render_queue(queue: SongQueue, width: int = 40, height: int = 0) -> Text:
    if queue.is_empty():
        return Text("Queue empty", style="dim")
    songs = queue.songs
    rows = visible_window(len(songs), queue.selection, height or len(songs))
    content = Text()
    for index in rows:
        picked = index == queue.selection
        styles = []
        if index == queue.currently_playing:
            styles.append(PLAYING_STYLE)
        if picked:
            styles.append(CURSOR_STYLE)
        content.append(
            _line(songs[index].title, width, selected=picked) + "\n",
            style=" ".join(styles) or None,
        )
    content.rstrip()
    return content


def render_search(search: Search, *, focused: bool = False) -> Text:
    content = Text(search.text)
    if focused:
        content.append("_", style="blink")
    return content
