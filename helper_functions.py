import logging
import math
import re
import requests
from bs4 import BeautifulSoup
from datetime import date, datetime
from typing import Iterable, List, Tuple

from errors import FetchError, ParseError

logger = logging.getLogger(__name__)

EPISODES_PER_PAGE = 20
DEFAULT_TIMEOUT = 30

# Tried in order, first match wins
RELEASE_DATE_FORMATS = ("%b. %d, %Y", "%B %d, %Y")
MONTH_ABBREVIATIONS = {"Sept.": "September"}

# Sorts as the oldest possible date
UNPARSED_DATE = date.min


def fetch_page(url: str, timeout: float = DEFAULT_TIMEOUT) -> str:
    try:
        response = requests.get(url, timeout=timeout)
    except requests.RequestException as e:
        raise FetchError(url, reason=str(e)) from e
    if response.status_code != 200:
        raise FetchError(url, status_code=response.status_code)
    return response.text


def make_soup(html: str) -> BeautifulSoup:
    if not isinstance(html, (str, bytes)):
        raise ParseError(f"Expected an HTML document, got {type(html).__name__}")
    try:
        return BeautifulSoup(html, 'html.parser')
    except Exception as e:
        raise ParseError(f"Failed to parse HTML: {e}") from e


def parse_release_date(text: str) -> date:
    """Best-effort conversion of dates such as ``Sept. 30, 2019``.

    Unknown formats return ``UNPARSED_DATE`` instead of raising, so a single
    odd entry never breaks a listing page. Use ``is_unparsed`` to detect it.
    """
    text = text.strip()
    for abbreviation, month in MONTH_ABBREVIATIONS.items():
        text = text.replace(abbreviation, month)
    for date_format in RELEASE_DATE_FORMATS:
        try:
            return datetime.strptime(text, date_format).date()
        except ValueError:
            continue
    logger.debug(f"Unrecognized release date {text!r}")
    return UNPARSED_DATE


def is_unparsed(release_date: date) -> bool:
    return release_date == UNPARSED_DATE


def page_window(offset: int, count: int, per_page: int = EPISODES_PER_PAGE) -> Tuple[int, int]:
    """Return ``(start_page, pages_to_fetch)`` covering ``count`` episodes from ``offset``.

    Pages are 1-indexed.
    """
    if offset < 0 or count < 0:
        raise ValueError(f"offset and count must be non-negative, got {offset}, {count}")
    start_page = offset // per_page + 1
    pages = math.ceil((count + offset % per_page) / per_page) if count else 0
    return start_page, pages


def sort_by_release_date(episodes: Iterable) -> List:
    return sorted(episodes, key=lambda e: e.release_date, reverse=True)


def search_episodes(episodes: Iterable, query: str) -> List:
    try:
        pattern = re.compile(query, re.IGNORECASE)
    except re.error as e:
        logger.debug(f"Invalid search pattern {query!r}: {e}")
        return []
    matched = [
        episode for episode in episodes
        if pattern.search(episode.title or "") or pattern.search(episode.description or "")
    ]
    return sort_by_release_date(matched)
