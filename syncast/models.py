from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Tuple

from syncast.errors import FetchError


@dataclass
class Folder:
    name: str
    feeds: List[str] = field(default_factory=list)


@dataclass
class Episode:
    title: str = ''
    media_url: str = ''
    description: str = ''


@dataclass
class Feed:
    url: str
    episodes: List[Episode] = field(default_factory=list)


@dataclass
class HistoryItem:
    title: str
    url: str


@dataclass
class FavoriteItem:
    title: str
    url: str


@dataclass
class FeedTree:
    """Fetched feeds laid out parallel to the folder configuration.

    ``feeds[i][j]`` is the Feed fetched for ``folders[i].feeds[j]``.
    """

    folders: List[Folder] = field(default_factory=list)
    feeds: List[List[Feed]] = field(default_factory=list)
    failures: List[Tuple[str, FetchError]] = field(default_factory=list)

    def feeds_of(self, folder_index: int) -> List[Feed]:
        if 0 <= folder_index < len(self.feeds):
            return self.feeds[folder_index]
        return []

    def feed(self, folder_index: int, feed_index: int):
        feeds = self.feeds_of(folder_index)
        if 0 <= feed_index < len(feeds):
            return feeds[feed_index]
        return None

    def episodes(self, folder_index: int, feed_index: int) -> List[Episode]:
        feed = self.feed(folder_index, feed_index)
        return feed.episodes if feed is not None else []
