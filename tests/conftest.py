"""Shared fixtures: fake gpodder.net pages and a patched ``requests.get``."""
import threading
from datetime import date, timedelta
from unittest import mock

import pytest

from GpodderPodcastScraper import GpodderPodcastScraper

PODCAST_URL = "https://gpodder.net/podcast/test-show"
NEWEST = date(2020, 6, 30)


def format_date(d: date) -> str:
    return f"{d:%B} {d.day}, {d.year}"


def episode_block(slug, title, released, description="", href=True):
    link = f'<a href="/podcast/test-show/{slug}">{title}</a>' if href else f'<a>{title}</a>'
    return (
        '<div class="episode">'
        '<div class="header">'
        f'<span class="title">{link}</span>'
        f'<span class="released">\n  {released}  \n</span>'
        '</div>'
        f'<div class="description">\n  {description}\n</div>'
        '</div>'
    )


def listing_html(blocks):
    return f"<html><body><div class='episodes'>{''.join(blocks)}</div></body></html>"


def listing_page(page, per_page=20):
    """A full listing page; page 1 holds the newest episodes, one per day."""
    blocks = []
    for i in range(per_page):
        position = (page - 1) * per_page + i
        released = NEWEST - timedelta(days=position)
        blocks.append(episode_block(f"ep-{position}", f"Episode {position}", format_date(released)))
    return listing_html(blocks)


def detail_html(audio_href="https://cdn.example.com/ep.mp3"):
    return (
        '<html><body><div class="description">'
        '<p>Show notes</p>'
        f'<a href="{audio_href}">Download</a>'
        '</div></body></html>'
    )


def fake_response(text="", status_code=200):
    response = mock.Mock()
    response.status_code = status_code
    response.text = text
    return response


class FakeSite:
    """Answers GET requests from a url -> (status, body) table and records them."""

    def __init__(self, pages=None):
        self.pages = dict(pages or {})
        self.requested = []
        self._lock = threading.Lock()

    def get(self, url, timeout=None):
        with self._lock:
            self.requested.append(url)
        if url not in self.pages:
            return fake_response("not found", status_code=404)
        answer = self.pages[url]
        if isinstance(answer, Exception):
            raise answer
        status_code, text = answer
        return fake_response(text, status_code)


@pytest.fixture
def site():
    fake = FakeSite()
    with mock.patch("requests.get", side_effect=fake.get):
        yield fake


@pytest.fixture
def podcast():
    return GpodderPodcastScraper(PODCAST_URL)
