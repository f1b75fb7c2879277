import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from datetime import date
from typing import List, NamedTuple, Optional

from bs4 import BeautifulSoup
from helper_functions import *
from errors import ScraperError

logger = logging.getLogger(__name__)


class Episode:
    def __init__(self, url: str, title: str, description: str, release_date: date, podcast: 'PodcastScraper'):
        self.url = url
        self.title = title
        self.description = description
        self.release_date = release_date
        self.podcast = podcast
        self._audio_url = ""
        self._audio_lock = threading.Lock()

    @property
    def audio_url(self) -> str:
        """Resolved audio link, empty until ``resolve_audio_url`` succeeds."""
        return self._audio_url

    @property
    def has_release_date(self) -> bool:
        return not is_unparsed(self.release_date)

    def resolve_audio_url(self) -> str:
        """Fetch the episode page once and remember its audio link.

        Concurrent callers wait for the first fetch instead of repeating it.
        Raises FetchError, ParseError or NotFoundError on failure; nothing is
        remembered in that case.
        """
        if self._audio_url:
            return self._audio_url
        with self._audio_lock:
            if self._audio_url:
                return self._audio_url
            soup = make_soup(fetch_page(self.url, timeout=self.podcast.timeout))
            self._audio_url = self.podcast.parse_audio_link(soup)
            logger.debug(f"Resolved audio link for {self.url}: {self._audio_url}")
        return self._audio_url

    def to_dict(self) -> dict:
        return {
            'url': self.url,
            'title': self.title,
            'description': self.description,
            'release-date': self.release_date.isoformat() if self.has_release_date else None,
            'audio-url': self._audio_url or None,
        }

    def __str__(self):
        return f"title : {self.title}, url: {self.url}"

    def __repr__(self):
        return f"Episode(url={self.url!r}, release_date={self.release_date!r})"


class EpisodeCache(NamedTuple):
    offset: int
    count: int
    episodes: List[Episode]


class PodcastScraper:
    """Pages through a podcast's episode listing.

    Subclasses describe the site markup through ``parse_episode_list`` and
    ``parse_audio_link``.
    """

    def __init__(self, url: str, n_threads: Optional[int] = None, timeout: float = DEFAULT_TIMEOUT):
        self.url = url.rstrip('/')
        self.n_threads = n_threads
        self.timeout = timeout
        self._cache: Optional[EpisodeCache] = None

    def listing_url(self, page: int) -> str:
        return f"{self.url}/-episodes?page={page}"

    def episodes(self, offset: int = 0, count: int = EPISODES_PER_PAGE) -> List[Episode]:
        cache = self._cache
        if cache is not None and cache.offset == offset and cache.count == count:
            return cache.episodes

        start_page, pages_to_fetch = page_window(offset, count)
        pages = [start_page + i for i in range(pages_to_fetch)]
        found = []
        if pages:
            n_threads = self.n_threads or len(pages)
            with ThreadPoolExecutor(n_threads) as mt_pool:
                for page_episodes in mt_pool.map(self._scrape_page_or_nothing, pages):
                    found.extend(page_episodes)

        found = sort_by_release_date(found)
        if len(found) > count:
            found = found[:count]
        self._cache = EpisodeCache(offset=offset, count=count, episodes=found)
        return found

    def clear_cache(self) -> None:
        self._cache = None

    def scrape_page(self, page: int) -> List[Episode]:
        url = self.listing_url(page)
        soup = make_soup(fetch_page(url, timeout=self.timeout))
        episodes = self.parse_episode_list(soup)
        logger.debug(f"Found {len(episodes)} episodes on {url}")
        return episodes

    def _scrape_page_or_nothing(self, page: int) -> List[Episode]:
        try:
            return self.scrape_page(page)
        except ScraperError as e:
            logger.warning(f"[SKIPPING] page {page} of {self.url}: {e}")
            return []

    def parse_episode_list(self, soup: BeautifulSoup) -> List[Episode]:
        raise NotImplementedError

    def parse_audio_link(self, soup: BeautifulSoup) -> str:
        raise NotImplementedError
