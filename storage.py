import logging
import os
from typing import Callable, Generic, List, Type, TypeVar, Union

from syncast.errors import ConfigError, PersistenceError
from syncast.models import FavoriteItem, Folder, HistoryItem


logger = logging.getLogger(__name__)

FOLDER_DELIMITER = ':'
DEFAULT_CONFIG = 'default_folder:\nhttps://example.com/rss\n'

Item = TypeVar('Item', HistoryItem, FavoriteItem)


def ensure_dir(path: str) -> None:
    if path:
        os.makedirs(path, exist_ok=True)


def parse_folders(lines) -> List[Folder]:
    folders: List[Folder] = []
    current = None
    for raw in lines:
        line = raw.strip()
        if not line:
            continue
        if line.endswith(FOLDER_DELIMITER):
            current = Folder(name=line[:-1].strip())
            folders.append(current)
        elif current is not None:
            current.feeds.append(line)
        else:
            logger.debug('Skipping feed line outside of any folder: %s', line)
    return folders


def _collapse(text: str) -> str:
    return ' '.join((text or '').split())


def format_folders(folders: List[Folder]) -> str:
    out = []
    for folder in folders:
        # Names and URLs must each stay on one line
        out.append(f"{_collapse(folder.name)}{FOLDER_DELIMITER}")
        out.extend(u for u in map(_collapse, folder.feeds) if u)
    return ''.join(line + '\n' for line in out)


class ConfigStore:
    """Plain-text folder configuration: ``name:`` lines followed by feed URLs."""

    def __init__(self, path: str):
        self.path = path

    def load(self) -> List[Folder]:
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                return parse_folders(f)
        except FileNotFoundError:
            pass
        except (OSError, UnicodeDecodeError) as e:
            raise ConfigError(f"Cannot read config {self.path}: {e}") from e

        # First run: write the default config and return what it describes
        logger.info('No config at %s, creating default', self.path)
        folders = parse_folders(DEFAULT_CONFIG.splitlines())
        self.save(folders)
        return folders

    def save(self, folders: List[Folder]) -> None:
        try:
            ensure_dir(os.path.dirname(self.path))
            with open(self.path, 'w', encoding='utf-8') as f:
                f.write(format_folders(folders))
        except OSError as e:
            raise ConfigError(f"Cannot write config {self.path}: {e}") from e


def _one_line(text: str) -> str:
    return ' '.join((text or '').splitlines())


class ItemStore(Generic[Item]):
    """Append-only ``<title> <url>`` log backing the history or favorites list.

    Lines are split on the first space, so a title that contains spaces
    does not survive a reload intact. There is no escaping.
    """

    def __init__(self, path: str, factory: Union[Type[Item], Callable[[str, str], Item]]):
        self.path = path
        self.factory = factory

    def load(self) -> List[Item]:
        items: List[Item] = []
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                for lineno, raw in enumerate(f, 1):
                    title, sep, url = raw.rstrip('\r\n').partition(' ')
                    if not sep or not title or not url.strip():
                        logger.debug('Skipping malformed line %d in %s', lineno, self.path)
                        continue
                    items.append(self.factory(title, url.strip()))
        except FileNotFoundError:
            return []
        except (OSError, UnicodeDecodeError) as e:
            raise PersistenceError(f"Cannot read {self.path}: {e}") from e
        return items

    def append(self, item: Item) -> None:
        try:
            ensure_dir(os.path.dirname(self.path))
            with open(self.path, 'a', encoding='utf-8') as f:
                f.write(f"{_one_line(item.title)} {_one_line(item.url)}\n")
        except OSError as e:
            raise PersistenceError(f"Cannot append to {self.path}: {e}") from e


def history_store(path: str) -> 'ItemStore[HistoryItem]':
    return ItemStore(path, HistoryItem)


def favorites_store(path: str) -> 'ItemStore[FavoriteItem]':
    return ItemStore(path, FavoriteItem)
