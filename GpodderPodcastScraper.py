import argparse
import json
import logging
import sys

from PodcastScraper import *
from errors import NotFoundError, ScraperError

GPODDER_HOST = "https://gpodder.net"


class GpodderPodcastScraper(PodcastScraper):
    """Episode listings and audio links from gpodder.net podcast pages."""

    EPISODE_SELECTOR = '.episode'
    LINK_SELECTOR = '.header > .title > a'
    DESCRIPTION_SELECTOR = '.description'
    RELEASED_SELECTOR = '.header > .released'
    AUDIO_LINK_SELECTOR = '.description > a:nth-child(2)'

    def __init__(self, url: str, n_threads: Optional[int] = None,
                 timeout: float = DEFAULT_TIMEOUT, host: str = GPODDER_HOST):
        super().__init__(url=url, n_threads=n_threads, timeout=timeout)
        self.host = host.rstrip('/')

    def parse_episode_list(self, soup: BeautifulSoup) -> List[Episode]:
        episodes = []
        for block in soup.select(self.EPISODE_SELECTOR):
            link = block.select_one(self.LINK_SELECTOR)
            if link is None or not link.has_attr('href'):
                continue
            description = block.select_one(self.DESCRIPTION_SELECTOR)
            released = block.select_one(self.RELEASED_SELECTOR)
            episodes.append(Episode(
                url=self.host + link['href'],
                title=link.getText(),
                description=description.getText().strip(" \n") if description else "",
                release_date=parse_release_date(released.getText().strip(" \n") if released else ""),
                podcast=self,
            ))
        return episodes

    def parse_audio_link(self, soup: BeautifulSoup) -> str:
        link = soup.select_one(self.AUDIO_LINK_SELECTOR)
        if link is None or not link.get('href'):
            raise NotFoundError("Failed to find audio link")
        return link['href']


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="List episodes of a podcast hosted on gpodder.net")
    parser.add_argument(
        '--podcast', '-p',
        type=str,
        action='store',
        required=True,
        help="Podcast page URL, e.g. https://gpodder.net/podcast/some-show"
    )
    parser.add_argument(
        '--offset',
        type=int,
        default=0,
        help="Position of the first episode, newest first, default=0"
    )
    parser.add_argument(
        '--count', '-n',
        type=int,
        default=EPISODES_PER_PAGE,
        help=f"Number of episodes to list, default={EPISODES_PER_PAGE}"
    )
    parser.add_argument(
        '--search', '-s',
        type=str,
        default=None,
        help="Only keep episodes whose title or description matches this pattern"
    )
    parser.add_argument(
        '--audio',
        action='store_true',
        help="Also resolve the audio link of every listed episode"
    )
    parser.add_argument(
        '--json',
        action='store_true',
        help="Print episodes as JSON"
    )
    parser.add_argument(
        '--threads',
        type=int,
        default=None,
        help="Maximum number of pages fetched in parallel, default is one per page"
    )
    parser.add_argument(
        '--timeout',
        type=float,
        default=DEFAULT_TIMEOUT,
        help=f"Network timeout in seconds, default={DEFAULT_TIMEOUT}"
    )
    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help="Log every page request"
    )
    args = parser.parse_args(argv)
    if args.offset < 0 or args.count < 0:
        parser.error("--offset and --count must be non-negative")
    if args.threads is not None and args.threads < 1:
        parser.error("--threads must be at least 1")

    return args


def main(args) -> int:
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )
    podcast = GpodderPodcastScraper(args.podcast, n_threads=args.threads, timeout=args.timeout)
    episodes = podcast.episodes(args.offset, args.count)
    if args.search:
        episodes = search_episodes(episodes, args.search)

    if args.audio:
        for episode in episodes:
            try:
                episode.resolve_audio_url()
            except ScraperError as e:
                print(f"[NO AUDIO] {episode.title}: {e}", file=sys.stderr)

    if args.json:
        print(json.dumps([episode.to_dict() for episode in episodes], indent=4))
    else:
        for episode in episodes:
            released = episode.release_date.isoformat() if episode.has_release_date else "unknown"
            print(f"{released} {episode}")
            if episode.audio_url:
                print(f"    {episode.audio_url}")
    return 0


def run():
    sys.exit(main(parse_args()))


if __name__ == "__main__":
    cli_args = parse_args()
    sys.exit(main(cli_args))
