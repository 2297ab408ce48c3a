"""Selection state machine shared by the four list views.

The navigator never raises and never does I/O. Transitions that need the
outside world (persisting a favorite, starting the player, telling the
user something) are returned as effect objects for the session to run.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Optional, Sequence

from syncast.controllers.view_state import ViewCursor
from syncast.models import Episode, FavoriteItem, Feed, FeedTree, Folder, HistoryItem


logger = logging.getLogger(__name__)

DEFAULT_WINDOW_HEIGHT = 10


class View(Enum):
    FOLDERS = 'Folders'
    EPISODES = 'Episodes'
    HISTORY = 'History'
    FAVORITES = 'Favorites'


CYCLE_ORDER = {
    View.FOLDERS: View.EPISODES,
    View.EPISODES: View.FAVORITES,
    View.FAVORITES: View.FOLDERS,
    View.HISTORY: View.FAVORITES,
}
BASE_VIEWS = (View.FOLDERS, View.EPISODES)


# ---- Events ----
@dataclass(frozen=True)
class MoveUp:
    pass


@dataclass(frozen=True)
class MoveDown:
    pass


@dataclass(frozen=True)
class SwitchView:
    target: View


@dataclass(frozen=True)
class CycleView:
    pass


@dataclass(frozen=True)
class ToggleHistory:
    pass


@dataclass(frozen=True)
class ToggleFavorites:
    pass


@dataclass(frozen=True)
class SelectFolder:
    index: int


@dataclass(frozen=True)
class NextFeed:
    pass


@dataclass(frozen=True)
class PrevFeed:
    pass


@dataclass(frozen=True)
class PromoteToFavorite:
    pass


@dataclass(frozen=True)
class Activate:
    pass


@dataclass(frozen=True)
class Resize:
    height: int


@dataclass(frozen=True)
class Quit:
    pass


# ---- Effects ----
@dataclass(frozen=True)
class PersistFavorite:
    item: FavoriteItem


@dataclass(frozen=True)
class LaunchPlayer:
    episode: Episode


@dataclass(frozen=True)
class Notify:
    message: str


class Navigator:
    def __init__(
        self,
        tree: FeedTree,
        history: Optional[List[HistoryItem]] = None,
        favorites: Optional[List[FavoriteItem]] = None,
        window_height: int = DEFAULT_WINDOW_HEIGHT,
    ) -> None:
        self.tree = tree
        self.history: List[HistoryItem] = history if history is not None else []
        self.favorites: List[FavoriteItem] = favorites if favorites is not None else []
        self.window_height = max(1, int(window_height))
        self.active_view = View.FOLDERS
        self.base_view = View.FOLDERS
        self.folder_index = 0
        self.feed_index = 0
        self.running = True
        self.cursors: Dict[View, ViewCursor] = {view: ViewCursor() for view in View}
        self._handlers: Dict[type, Callable] = {
            MoveUp: lambda e: self._move(-1),
            MoveDown: lambda e: self._move(1),
            SwitchView: lambda e: self._switch(e.target),
            CycleView: lambda e: self._switch(CYCLE_ORDER[self.active_view]),
            ToggleHistory: lambda e: self._toggle(View.HISTORY),
            ToggleFavorites: lambda e: self._toggle(View.FAVORITES),
            SelectFolder: lambda e: self._select_folder(e.index),
            NextFeed: lambda e: self._step_feed(1),
            PrevFeed: lambda e: self._step_feed(-1),
            PromoteToFavorite: lambda e: self._promote(),
            Activate: lambda e: self._activate(),
            Resize: lambda e: self._resize(e.height),
            Quit: lambda e: self._quit(),
        }

    # ---- Read-only accessors used by the renderer ----
    @property
    def folders(self) -> List[Folder]:
        return self.tree.folders

    @property
    def folder(self) -> Optional[Folder]:
        if 0 <= self.folder_index < len(self.folders):
            return self.folders[self.folder_index]
        return None

    @property
    def feed(self) -> Optional[Feed]:
        return self.tree.feed(self.folder_index, self.feed_index)

    @property
    def episodes(self) -> List[Episode]:
        return self.tree.episodes(self.folder_index, self.feed_index)

    def items(self, view: Optional[View] = None) -> Sequence:
        view = view or self.active_view
        if view is View.FOLDERS:
            return self.folders
        if view is View.EPISODES:
            return self.episodes
        if view is View.HISTORY:
            return self.history
        return self.favorites

    def cursor(self, view: Optional[View] = None) -> ViewCursor:
        return self.cursors[view or self.active_view]

    def selected(self, view: Optional[View] = None):
        items = self.items(view)
        if not items:
            return None
        return items[self.cursor(view).selected_index]

    def visible_rows(self, view: Optional[View] = None) -> range:
        return self.cursor(view).window(len(self.items(view)), self.window_height)

    # ---- Transitions ----
    def apply(self, event) -> List:
        handler = self._handlers.get(type(event))
        if handler is None:
            logger.debug('Ignoring unknown event %r', event)
            return []
        if not self.running:
            return []
        return handler(event) or []

    def _clamp(self, view: View) -> None:
        self.cursors[view].clamp(len(self.items(view)), self.window_height)

    def _move(self, delta: int) -> List:
        view = self.active_view
        self._clamp(view)
        cursor = self.cursors[view]
        changed = cursor.move(delta, len(self.items(view)), self.window_height)
        if changed and view is View.FOLDERS:
            self._select_folder(cursor.selected_index)
        return []

    def _switch(self, target: View) -> List:
        self.active_view = target
        if target in BASE_VIEWS:
            self.base_view = target
        self._clamp(target)
        return []

    def _toggle(self, overlay: View) -> List:
        if self.active_view is overlay:
            return self._switch(self.base_view)
        return self._switch(overlay)

    def _select_folder(self, index: int) -> List:
        if not self.folders:
            self.folder_index = 0
        else:
            self.folder_index = min(max(int(index), 0), len(self.folders) - 1)
        self.feed_index = 0
        self.cursors[View.EPISODES].reset()
        folders_cursor = self.cursors[View.FOLDERS]
        if folders_cursor.selected_index != self.folder_index:
            folders_cursor.selected_index = self.folder_index
            self._clamp(View.FOLDERS)
        return []

    def _step_feed(self, delta: int) -> List:
        count = len(self.tree.feeds_of(self.folder_index))
        target = self.feed_index + delta
        if count == 0 or target < 0 or target > count - 1:
            return []
        self.feed_index = target
        self.cursors[View.EPISODES].reset()
        return []

    def _promote(self) -> List:
        if self.active_view is not View.HISTORY or not self.history:
            return []
        self._clamp(View.HISTORY)
        entry = self.history[self.cursors[View.HISTORY].selected_index]
        item = FavoriteItem(title=entry.title, url=entry.url)
        self.favorites.append(item)
        return [PersistFavorite(item)]

    def _activate(self) -> List:
        if self.active_view is not View.EPISODES or not self.episodes:
            return []
        self._clamp(View.EPISODES)
        episode = self.episodes[self.cursors[View.EPISODES].selected_index]
        if not episode.media_url:
            return [Notify(f"Nothing to play: {episode.title or 'untitled episode'}")]
        return [LaunchPlayer(episode)]

    def _resize(self, height: int) -> List:
        self.window_height = max(1, int(height))
        for view in View:
            self._clamp(view)
        return []

    def _quit(self) -> List:
        self.running = False
        return []
