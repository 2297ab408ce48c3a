import time

import pytest
import requests

from syncast.errors import FetchError
from syncast.models import Episode, Feed, Folder
from syncast.services import feeds


RSS = b"""<?xml version="1.0" encoding="utf-8"?>
<rss version="2.0">
  <channel>
    <title>Show</title>
    <link>https://show.example/</link>
    <description>A show</description>
    <item>
      <title>Ep 1</title>
      <description>First episode</description>
      <enclosure url="https://cdn.example/ep1.mp3" type="audio/mpeg" length="100"/>
    </item>
    <item>
      <title>Ep 2</title>
      <description>Video only</description>
      <enclosure url="https://cdn.example/ep2.mp4" type="video/mp4" length="100"/>
    </item>
    <item>
      <description>No title here</description>
      <enclosure url="https://cdn.example/ep3.m4a" type="audio/x-m4a" length="100"/>
    </item>
    <item>
      <title>Ep 4</title>
    </item>
  </channel>
</rss>
"""

ATOM = b"""<?xml version="1.0" encoding="utf-8"?>
<feed xmlns="http://www.w3.org/2005/Atom">
  <title>Atom show</title>
  <id>urn:show</id>
  <updated>2024-01-01T00:00:00Z</updated>
  <entry>
    <title>Atom ep</title>
    <id>urn:ep1</id>
    <updated>2024-01-01T00:00:00Z</updated>
    <summary>Atom summary</summary>
    <link rel="alternate" type="text/html" href="https://show.example/ep1"/>
    <link rel="enclosure" type="audio/ogg" href="https://cdn.example/ep1.ogg"/>
  </entry>
</feed>
"""


class FakeResponse:
    def __init__(self, status_code=200, content=b''):
        self.status_code = status_code
        self.content = content


def test_parse_rss_entries():
    feed = feeds.parse_feed('https://show.example/rss', RSS)
    assert feed.url == 'https://show.example/rss'
    assert [e.title for e in feed.episodes] == ['Ep 1', 'Ep 2', '', 'Ep 4']
    assert feed.episodes[0].media_url == 'https://cdn.example/ep1.mp3'
    assert feed.episodes[0].description == 'First episode'
    assert feed.episodes[2].media_url == 'https://cdn.example/ep3.m4a'


def test_episode_without_audio_enclosure_has_empty_media_url():
    feed = feeds.parse_feed('https://show.example/rss', RSS)
    assert feed.episodes[1].media_url == ''
    assert feed.episodes[3].media_url == ''
    assert feed.episodes[3].description == ''


def test_parse_atom_audio_link():
    feed = feeds.parse_feed('https://show.example/atom', ATOM)
    assert feed.episodes == [
        Episode(title='Atom ep', media_url='https://cdn.example/ep1.ogg', description='Atom summary'),
    ]


def test_media_url_prefers_first_audio_enclosure():
    entry = {
        'enclosures': [
            {'href': 'https://cdn.example/a.jpg', 'type': 'image/jpeg'},
            {'href': 'https://cdn.example/a.mp3', 'type': 'Audio/MPEG'},
            {'href': 'https://cdn.example/b.mp3', 'type': 'audio/mpeg'},
        ],
        'links': [{'href': 'https://cdn.example/c.mp3', 'type': 'audio/mpeg'}],
    }
    assert feeds.media_url_for(entry) == 'https://cdn.example/a.mp3'


def test_parse_garbage_raises_fetch_error():
    with pytest.raises(FetchError) as exc:
        feeds.parse_feed('https://bad.example/rss', b'this is { not a feed')
    assert exc.value.url == 'https://bad.example/rss'


def test_fetch_uses_requests_and_parses(monkeypatch):
    calls = {}

    def fake_get(url, **kwargs):
        calls['url'] = url
        calls['kwargs'] = kwargs
        return FakeResponse(200, RSS)

    monkeypatch.setattr(requests, 'get', fake_get)
    feed = feeds.fetch('https://show.example/rss', timeout=(1, 2))
    assert len(feed.episodes) == 4
    assert calls['url'] == 'https://show.example/rss'
    assert calls['kwargs']['timeout'] == (1, 2)
    assert 'User-Agent' in calls['kwargs']['headers']


def test_fetch_non_2xx_raises(monkeypatch):
    monkeypatch.setattr(requests, 'get', lambda url, **kw: FakeResponse(404, b'not found'))
    with pytest.raises(FetchError) as exc:
        feeds.fetch('https://show.example/missing')
    assert 'HTTP 404' in exc.value.reason


def test_fetch_network_error_raises(monkeypatch):
    def boom(url, **kw):
        raise requests.ConnectionError('connection refused')

    monkeypatch.setattr(requests, 'get', boom)
    with pytest.raises(FetchError) as exc:
        feeds.fetch('https://down.example/rss')
    assert isinstance(exc.value.__cause__, requests.ConnectionError)


def test_fetch_all_isolates_unreachable_feed(monkeypatch, caplog):
    def fake_get(url, **kw):
        if 'down' in url:
            raise requests.ConnectionError('unreachable')
        return FakeResponse(200, RSS)

    monkeypatch.setattr(requests, 'get', fake_get)
    folders = [Folder('News', ['https://ok.example/rss', 'https://down.example/rss'])]
    tree = feeds.fetch_all(folders, max_workers=2)
    ok, down = tree.feeds[0]
    assert ok.url == 'https://ok.example/rss' and len(ok.episodes) == 4
    assert down.url == 'https://down.example/rss' and down.episodes == []
    assert [url for url, _err in tree.failures] == ['https://down.example/rss']
    assert [r.name for r in caplog.records if r.levelname == 'WARNING'] == ['syncast.services.feeds']


def test_fetch_all_preserves_order_when_completions_are_reversed():
    urls = [f"https://f{i}.example/rss" for i in range(6)]
    folders = [Folder('A', urls[:4]), Folder('Empty', []), Folder('B', urls[4:])]

    def slow_first(url):
        idx = urls.index(url)
        time.sleep(0.02 * (len(urls) - idx))
        return Feed(url=url, episodes=[Episode(title=url)])

    tree = feeds.fetch_all(folders, fetcher=slow_first, max_workers=6)
    assert [[f.url for f in group] for group in tree.feeds] == [urls[:4], [], urls[4:]]
    assert tree.failures == []


def test_fetch_all_survives_unexpected_exceptions():
    def flaky(url):
        if url.endswith('bad'):
            raise ValueError('boom')
        return Feed(url=url, episodes=[Episode(title='x')])

    folders = [Folder('A', ['https://a.example/bad', 'https://a.example/good'])]
    tree = feeds.fetch_all(folders, fetcher=flaky, max_workers=1)
    assert tree.episodes(0, 0) == []
    assert tree.episodes(0, 1) == [Episode(title='x')]
    assert isinstance(tree.failures[0][1], FetchError)


def test_fetch_all_with_no_feeds():
    tree = feeds.fetch_all([Folder('Empty', [])], fetcher=lambda url: pytest.fail('should not fetch'))
    assert tree.feeds == [[]]
