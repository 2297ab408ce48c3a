"""Session object for the SynCast terminal reader."""
import contextlib
import curses
import logging
import sys
from typing import Iterable, List, Optional

from storage import ItemStore, favorites_store, history_store
from syncast.controllers.navigation import LaunchPlayer, Navigator, Notify, PersistFavorite, Resize
from syncast.errors import PersistenceError, PlaybackLaunchError
from syncast.models import FeedTree, HistoryItem
from syncast.services.player import PlayerLauncher
from syncast.ui.keys import event_for_key
from syncast.ui.screen import Screen, list_height
from syncast.ui.status import StatusLineHandler
from syncast.utils.settings import get_setting

# Prefer syncast_tui.get_user_data_path to allow test monkeypatching
from syncast.utils.paths import get_user_data_path as _default_get_user_data_path


LOG_FORMAT = '%(asctime)s %(levelname)s %(name)s: %(message)s'

logger = logging.getLogger(__name__)


def get_user_data_path(filename: str) -> str:
    mod = sys.modules.get('syncast_tui')
    fn = getattr(mod, 'get_user_data_path', None) if mod else None
    if callable(fn):
        return fn(filename)
    return _default_get_user_data_path(filename)


def configure_logging(debug: bool = False) -> None:
    """Log to syncast.log and stderr. Level comes from settings unless debugging."""
    level_name = 'DEBUG' if debug else get_setting('log_level')
    level = getattr(logging, str(level_name).upper(), logging.INFO)
    root = logging.getLogger()
    if root.handlers:
        # Already configured (embedding application or test runner)
        root.setLevel(level)
        return
    log_path = get_user_data_path('syncast.log')
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=[logging.FileHandler(log_path, encoding='utf-8'), logging.StreamHandler(sys.stderr)],
    )
    logger.debug('Logging initialized, level=%s, file=%s', level_name, log_path)


@contextlib.contextmanager
def status_channel(handler: StatusLineHandler):
    """Route log output to the status line while curses owns the terminal."""
    root = logging.getLogger()
    streams = [
        h for h in root.handlers
        if isinstance(h, logging.StreamHandler) and not isinstance(h, logging.FileHandler)
    ]
    for h in streams:
        root.removeHandler(h)
    root.addHandler(handler)
    try:
        yield handler
    finally:
        root.removeHandler(handler)
        for h in streams:
            root.addHandler(h)


def load_items(store: ItemStore, kind: str) -> List:
    try:
        items = store.load()
    except PersistenceError as e:
        logger.warning('Could not load %s: %s', kind, e)
        return []
    logger.debug('Loaded %d %s entries from %s', len(items), kind, store.path)
    return items


class SynCastApp:
    """Owns the navigator, the stores and the player for one session."""

    def __init__(
        self,
        tree: FeedTree,
        history: ItemStore,
        favorites: ItemStore,
        player: PlayerLauncher,
        status: Optional[StatusLineHandler] = None,
    ) -> None:
        self.history_store = history
        self.favorites_store = favorites
        self.player = player
        self.status = status or StatusLineHandler()
        self.navigator = Navigator(
            tree,
            history=load_items(history, 'history'),
            favorites=load_items(favorites, 'favorites'),
        )
        for url, err in tree.failures:
            self.status.push(f"Feed unavailable: {url} ({err.reason})")

    @classmethod
    def from_user_data(cls, tree: FeedTree, player: Optional[PlayerLauncher] = None) -> 'SynCastApp':
        return cls(
            tree,
            history=history_store(get_user_data_path('history.txt')),
            favorites=favorites_store(get_user_data_path('favorites.txt')),
            player=player or PlayerLauncher(),
        )

    # ---- Event handling ----
    def dispatch(self, event) -> None:
        self.execute(self.navigator.apply(event))

    def handle_key(self, key: int) -> None:
        event = event_for_key(key)
        if event is not None:
            self.dispatch(event)

    def execute(self, effects: Iterable) -> None:
        for effect in effects:
            if isinstance(effect, PersistFavorite):
                self._persist_favorite(effect)
            elif isinstance(effect, LaunchPlayer):
                self._play(effect)
            elif isinstance(effect, Notify):
                self.status.push(effect.message)

    def _persist_favorite(self, effect: PersistFavorite) -> None:
        try:
            self.favorites_store.append(effect.item)
        except PersistenceError as e:
            # In-memory favorites stay authoritative for this session
            logger.warning('Favorite not saved: %s', e)
            return
        self.status.push(f"Added to favorites: {effect.item.title}")

    def _play(self, effect: LaunchPlayer) -> None:
        episode = effect.episode
        try:
            self.player.launch(episode.media_url)
        except PlaybackLaunchError as e:
            logger.warning('Playback failed: %s', e)
            return
        item = HistoryItem(title=episode.title or 'untitled', url=episode.media_url)
        self.navigator.history.append(item)
        self.status.push(f"Playing: {item.title}")
        try:
            self.history_store.append(item)
        except PersistenceError as e:
            logger.warning('History entry not saved: %s', e)

    # ---- Main loop ----
    def _sync_height(self, screen: Screen) -> None:
        rows, _cols = screen.size()
        self.dispatch(Resize(list_height(rows)))

    def run(self, stdscr) -> None:
        screen = Screen(stdscr)
        screen.setup()
        self._sync_height(screen)
        while self.navigator.running:
            screen.draw(self.navigator, self.status.latest)
            key = stdscr.getch()
            if key == curses.KEY_RESIZE:
                self._sync_height(screen)
                continue
            self.handle_key(key)
