from __future__ import annotations

import curses
import html
import re
import textwrap
from typing import List, Optional

from syncast.controllers.navigation import Navigator, View
from syncast.models import Episode, Folder
from syncast.ui.keys import footer_text


TAB_ORDER = (View.FOLDERS, View.EPISODES, View.HISTORY, View.FAVORITES)
LEFT_PANE_RATIO = 0.3
# tabs row + pane title row above the list, status + footer rows below
CHROME_ROWS = 4
TOO_SMALL = 'Terminal too small'

PAIR_ACCENT = 1
PAIR_DIM = 2

_TAG_RE = re.compile(r'<[^>]+>')
_WS_RE = re.compile(r'[ \t\r\f\v]+')


def plain_text(markup: str) -> str:
    """Strip tags from a feed summary for terminal display."""
    text = _TAG_RE.sub('', markup or '')
    text = html.unescape(text)
    lines = [_WS_RE.sub(' ', line).strip() for line in text.splitlines()]
    return '\n'.join(line for line in lines if line)


def list_height(rows: int) -> int:
    return max(1, rows - CHROME_ROWS)


def item_label(view: View, item) -> str:
    if view is View.FOLDERS:
        folder: Folder = item
        return f"{folder.name} ({len(folder.feeds)})"
    if view is View.EPISODES:
        episode: Episode = item
        mark = '♪ ' if episode.media_url else '  '
        return mark + (episode.title or '(untitled)')
    return item.title or item.url


def details_lines(nav: Navigator, width: int) -> List[str]:
    view = nav.active_view
    item = nav.selected()
    width = max(10, width)
    if view is View.FOLDERS:
        folder = nav.folder
        if folder is None:
            return ['No folders configured']
        lines = [f"Folder: {folder.name}", f"Feeds: {len(folder.feeds)}", '']
        lines.extend(f"  {url}" for url in folder.feeds)
        return lines
    if view is View.EPISODES:
        feed = nav.feed
        if feed is None:
            return ['This folder has no feeds']
        count = len(nav.tree.feeds_of(nav.folder_index))
        lines = [f"Feed {nav.feed_index + 1}/{count}: {feed.url}", '']
        if item is None:
            lines.append('No episodes')
            return lines
        lines.append(f"Title: {item.title or '(untitled)'}")
        lines.append(f"URL: {item.media_url or '(no audio enclosure)'}")
        lines.append('')
        for para in plain_text(item.description).splitlines():
            lines.extend(textwrap.wrap(para, width) or [''])
        return lines
    if item is None:
        return [f"{view.value} is empty"]
    return [f"Title: {item.title}", f"URL: {item.url}"]


class Screen:
    """Curses renderer. Reads navigator state, never changes it."""

    def __init__(self, stdscr):
        self.stdscr = stdscr
        self.colors = False

    def setup(self) -> None:
        try:
            curses.curs_set(0)
        except curses.error:
            pass
        self.stdscr.timeout(100)
        self.stdscr.keypad(True)
        if curses.has_colors():
            try:
                curses.use_default_colors()
                curses.init_pair(PAIR_ACCENT, curses.COLOR_BLACK, curses.COLOR_YELLOW)
                curses.init_pair(PAIR_DIM, curses.COLOR_CYAN, -1)
                self.colors = True
            except curses.error:
                # Monochrome fallback uses reverse/dim attributes
                self.colors = False

    def size(self):
        return self.stdscr.getmaxyx()

    def _attr(self, pair: int, fallback: int = curses.A_NORMAL) -> int:
        return curses.color_pair(pair) if self.colors else fallback

    def _put(self, y: int, x: int, text: str, width: int, attr: int = curses.A_NORMAL) -> None:
        if width <= 0:
            return
        try:
            self.stdscr.addnstr(y, x, text, width, attr)
        except curses.error:
            # Writing the bottom-right cell raises after the character is drawn
            pass

    def draw(self, nav: Navigator, status: Optional[str] = None) -> None:
        rows, cols = self.size()
        self.stdscr.erase()
        if rows <= CHROME_ROWS:
            # No room for a single list row below the tabs
            self._put(0, 0, TOO_SMALL, cols, curses.A_BOLD)
            self.stdscr.refresh()
            return
        self._draw_tabs(nav, cols)
        left_w = max(12, int(cols * LEFT_PANE_RATIO))
        self._draw_list(nav, left_w, rows)
        self._draw_details(nav, left_w + 1, cols - left_w - 1, rows)
        self._put(rows - 2, 0, f"{(status or ''):<{cols}}", cols, self._attr(PAIR_DIM, curses.A_DIM))
        self._put(rows - 1, 0, footer_text().center(cols), cols, curses.A_DIM)
        self.stdscr.refresh()

    def _draw_tabs(self, nav: Navigator, cols: int) -> None:
        x = 1
        for i, view in enumerate(TAB_ORDER):
            if i:
                self._put(0, x, ' | ', cols - x)
                x += 3
            attr = self._attr(PAIR_ACCENT, curses.A_REVERSE) | curses.A_BOLD if view is nav.active_view else curses.A_NORMAL
            self._put(0, x, view.value, cols - x, attr)
            x += len(view.value)

    def _draw_list(self, nav: Navigator, width: int, rows: int) -> None:
        view = nav.active_view
        items = nav.items()
        title = f" {view.value} "
        if view is View.EPISODES and nav.folder is not None:
            title = f" {nav.folder.name} "
        self._put(1, 0, title, width, curses.A_BOLD)
        selected = nav.cursor().selected_index
        for row, index in enumerate(nav.visible_rows()):
            y = 2 + row
            if y >= rows - 2:
                break
            label = item_label(view, items[index])
            if index == selected:
                self._put(y, 0, f"► {label:<{width}}", width, self._attr(PAIR_ACCENT, curses.A_REVERSE))
            else:
                self._put(y, 0, f"  {label}", width)

    def _draw_details(self, nav: Navigator, x: int, width: int, rows: int) -> None:
        self._put(1, x, ' Details ', width, curses.A_BOLD)
        for row, line in enumerate(details_lines(nav, width - 1)):
            y = 2 + row
            if y >= rows - 2:
                break
            self._put(y, x, line, width)
