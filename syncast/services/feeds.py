import functools
import logging
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple, Union

import feedparser
import requests
from PyQt5.QtCore import QRunnable, QThreadPool, pyqtSlot

from syncast.errors import FetchError
from syncast.models import Episode, Feed, FeedTree, Folder
from syncast.utils.settings import get_setting


USER_AGENT = 'SynCast/1.0 (terminal podcast reader)'
DEFAULT_TIMEOUT = (5, 15)

Fetcher = Callable[[str], Feed]

logger = logging.getLogger(__name__)


def _is_audio(mime: Optional[str]) -> bool:
    return (mime or '').strip().lower().startswith('audio/')


def media_url_for(entry: Dict[str, Any]) -> str:
    """Return the first audio enclosure (or audio-typed link) of an entry."""
    for enc in entry.get('enclosures') or []:
        if _is_audio(enc.get('type')) and enc.get('href'):
            return enc.get('href')
    for link in entry.get('links') or []:
        if _is_audio(link.get('type')) and link.get('href'):
            return link.get('href')
    return ''


def episode_from_entry(entry: Dict[str, Any]) -> Episode:
    return Episode(
        title=entry.get('title') or '',
        media_url=media_url_for(entry),
        description=entry.get('summary') or '',
    )


def parse_feed(url: str, content: Union[bytes, str]) -> Feed:
    parsed = feedparser.parse(content)
    if not parsed.entries and (parsed.bozo or not parsed.get('version')):
        reason = parsed.get('bozo_exception') or 'not a feed document'
        raise FetchError(url, f"parse failed: {reason}")
    if parsed.bozo:
        logger.debug("Feed %s parsed with warnings: %s", url, parsed.get('bozo_exception'))
    return Feed(url=url, episodes=[episode_from_entry(e) for e in parsed.entries])


def fetch(url: str, timeout: Tuple[float, float] = DEFAULT_TIMEOUT) -> Feed:
    """Download and parse one feed. Raises FetchError on any failure."""
    try:
        resp = requests.get(
            url,
            timeout=timeout,
            allow_redirects=True,
            headers={'User-Agent': USER_AGENT},
        )
    except requests.RequestException as e:
        raise FetchError(url, f"network error: {e}") from e
    if not 200 <= resp.status_code < 300:
        raise FetchError(url, f"HTTP {resp.status_code}")
    return parse_feed(url, resp.content)


class FetchFeedRunnable(QRunnable):
    """Runs one fetch on the pool and stores the outcome in its result slot."""

    def __init__(self, url: str, slot: int, results: List[Any], fetcher: Fetcher):
        super().__init__()
        self.url = url
        self.slot = slot
        self.results = results
        self.fetcher = fetcher
        # Python keeps the reference; Qt must not delete the wrapper under us
        self.setAutoDelete(False)

    @pyqtSlot()
    def run(self):
        try:
            self.results[self.slot] = self.fetcher(self.url)
        except FetchError as e:
            self.results[self.slot] = e
        except Exception as e:
            # Never let exceptions escape QRunnable.run(); PyQt/Qt can abort the process.
            logger.debug("Unexpected error fetching %s", self.url, exc_info=True)
            self.results[self.slot] = FetchError(self.url, str(e) or type(e).__name__)


def _timeout_from_settings() -> Tuple[float, float]:
    return (
        get_setting('fetch_connect_timeout', typ=int),
        get_setting('fetch_read_timeout', typ=int),
    )


def fetch_all(
    folders: Sequence[Folder],
    fetcher: Optional[Fetcher] = None,
    max_workers: Optional[int] = None,
) -> FeedTree:
    """Fetch every feed of every folder, one pool task per feed.

    The returned tree keeps configuration order whatever order the fetches
    finish in. Failed feeds are logged, listed in ``tree.failures`` and get
    an empty episode list.
    """
    if fetcher is None:
        fetcher = functools.partial(fetch, timeout=_timeout_from_settings())
    if max_workers is None:
        max_workers = get_setting('fetch_workers', typ=int)

    jobs = [(i, j, url) for i, folder in enumerate(folders) for j, url in enumerate(folder.feeds)]
    results: List[Any] = [None] * len(jobs)
    if jobs:
        pool = QThreadPool()
        pool.setMaxThreadCount(max(1, int(max_workers or 1)))
        runnables = [FetchFeedRunnable(url, slot, results, fetcher) for slot, (_i, _j, url) in enumerate(jobs)]
        for runnable in runnables:
            pool.start(runnable)
        pool.waitForDone()

    tree = FeedTree(folders=list(folders), feeds=[[] for _ in folders])
    for (i, _j, url), result in zip(jobs, results):
        if isinstance(result, Feed):
            tree.feeds[i].append(result)
            continue
        err = result if isinstance(result, FetchError) else FetchError(url, 'no result')
        logger.warning("Failed to fetch feed %s: %s", url, err.reason)
        tree.failures.append((url, err))
        tree.feeds[i].append(Feed(url=url))
    logger.info("Fetched %d feeds, %d failed", len(jobs), len(tree.failures))
    return tree
