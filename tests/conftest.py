import os
import uuid

import pytest

from syncast.models import Episode, Feed, FeedTree, Folder


def pytest_configure(config):  # noqa: ANN001
    # Unique per test run to avoid leaking state between separate pytest invocations.
    os.environ.setdefault('SYNCAST_TEST_RUN_ID', uuid.uuid4().hex[:10])
    os.environ['SYNCAST_TESTS'] = '1'


def pytest_runtest_setup(item):  # noqa: ANN001
    # Stable per-test identifier for isolating user data paths and settings.
    os.environ['SYNCAST_TEST_ID'] = item.nodeid


def pytest_runtest_teardown(item, nextitem):  # noqa: ANN001
    os.environ.pop('SYNCAST_TEST_ID', None)


def episodes(prefix: str, count: int, audio: bool = True):
    return [
        Episode(
            title=f"{prefix}{i}",
            media_url=f"https://cdn.example/{prefix}{i}.mp3" if audio else '',
            description=f"<p>{prefix} episode {i}</p>",
        )
        for i in range(count)
    ]


@pytest.fixture
def tree():
    """Two folders: News with two feeds, Music with one; Empty has none."""
    folders = [
        Folder('News', ['https://a.example/feed', 'https://a2.example/feed']),
        Folder('Music', ['https://b.example/feed']),
        Folder('Empty', []),
    ]
    feeds = [
        [Feed(folders[0].feeds[0], episodes('news', 25)), Feed(folders[0].feeds[1], episodes('extra', 3))],
        [Feed(folders[1].feeds[0], episodes('song', 4, audio=False))],
        [],
    ]
    return FeedTree(folders=folders, feeds=feeds)
