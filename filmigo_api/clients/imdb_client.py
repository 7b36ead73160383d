import json
import logging
import re
from typing import Any, Dict, List, Optional

import httpx
from bs4 import BeautifulSoup

from ..utils.utils_clients import (
    BROWSER_HEADERS,
    DEFAULT_TIMEOUT,
    MovieNotFoundError,
    fetch_text,
    make_client,
)

logger = logging.getLogger(__name__)

BASE_URL = 'https://www.imdb.com'

_TITLE_TYPES = ('Movie', 'TVSeries', 'TVMiniSeries', 'TVEpisode', 'TVSpecial', 'VideoGame')
_DURATION_RE = re.compile(r'^PT(?:(\d+)H)?(?:(\d+)M)?$')


class ImdbClient:
    """
    Scrapes IMDb title pages and returns the structured data embedded in them.
    """

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.timeout = timeout
        self._transport = transport

    async def get_movie(self, imdb_id: str) -> Dict[str, Any]:
        """
        Fetch a title page and parse it into a flat record.

        :param imdb_id: IMDb title id, e.g. 'tt0111161'.
        :return: Dictionary describing the title.
        :raises MovieNotFoundError: If IMDb has no such title.
        :raises MovieClientError: On any other failure.
        """
        url = f"{BASE_URL}/title/{imdb_id}/"
        async with make_client(self.timeout, self._transport, BROWSER_HEADERS) as client:
            html = await fetch_text(client, url, f"IMDb title {imdb_id}")
        movie = parse_title_page(html, imdb_id)
        if not movie.get('title'):
            raise MovieNotFoundError(f"IMDb title {imdb_id} has no title data")
        return movie


def _jsonld_blocks(soup: BeautifulSoup) -> List[dict]:
    blocks: List[dict] = []
    for node in soup.find_all('script', attrs={'type': 'application/ld+json'}):
        raw = node.string or node.get_text(strip=True)
        if not raw:
            continue
        try:
            payload = json.loads(raw)
        except json.JSONDecodeError:
            continue
        if isinstance(payload, list):
            blocks += [p for p in payload if isinstance(p, dict)]
        elif isinstance(payload, dict):
            blocks.append(payload)
    return blocks


def _primary_block(blocks: List[dict]) -> dict:
    for block in blocks:
        kind = block.get('@type')
        kinds = kind if isinstance(kind, list) else [kind]
        if any(isinstance(k, str) and k in _TITLE_TYPES for k in kinds):
            return block
    return blocks[0] if blocks else {}


def _names(value: Any) -> List[str]:
    """Collect 'name' fields from a JSON-LD person/organisation value."""
    if isinstance(value, dict):
        value = [value]
    if not isinstance(value, list):
        return []
    return [v['name'] for v in value if isinstance(v, dict) and v.get('name')]


def _as_list(value: Any) -> List[str]:
    if isinstance(value, str):
        return [value]
    if isinstance(value, list):
        return [v for v in value if isinstance(v, str)]
    return []


def duration_minutes(duration: Optional[str]) -> Optional[int]:
    """
    Convert an ISO-8601 duration such as 'PT2H22M' to minutes.

    :param duration: Duration string from JSON-LD.
    :return: Whole minutes, or None when the value is missing or malformed.
    """
    if not isinstance(duration, str) or not duration:
        return None
    match = _DURATION_RE.match(duration)
    if not match or not any(match.groups()):
        return None
    hours, minutes = match.groups()
    return int(hours or 0) * 60 + int(minutes or 0)


def _title_fallback(soup: BeautifulSoup) -> Optional[str]:
    if not soup.title:
        return None
    text = soup.title.get_text(' ', strip=True)
    if text.endswith('- IMDb'):
        text = text[:-len('- IMDb')].strip()
    return text or None


def parse_title_page(html: str, imdb_id: str) -> Dict[str, Any]:
    """
    Parse an IMDb title page.

    The JSON-LD block carries nearly everything; the <title> tag and
    og:image meta are used when it is incomplete.

    :param html: Page source.
    :param imdb_id: Id the page was requested for.
    :return: Dictionary describing the title.
    """
    soup = BeautifulSoup(html or '', 'html.parser')
    data = _primary_block(_jsonld_blocks(soup))

    poster = data.get('image')
    if not poster:
        og_image = soup.find('meta', attrs={'property': 'og:image'})
        poster = og_image.get('content') if og_image else None

    rating = data.get('aggregateRating')
    if not isinstance(rating, dict):
        rating = {}
    trailer = data.get('trailer')
    if isinstance(trailer, list):
        trailer = trailer[0] if trailer else None
    if not isinstance(trailer, dict):
        trailer = {}
    keywords = data.get('keywords')
    if not isinstance(keywords, str):
        keywords = ''

    return {
        'id': imdb_id,
        'title': data.get('name') or _title_fallback(soup),
        'type': data.get('@type'),
        'url': f"{BASE_URL}/title/{imdb_id}/",
        'poster': poster,
        'description': data.get('description'),
        'content_rating': data.get('contentRating'),
        'date_published': data.get('datePublished'),
        'duration': data.get('duration'),
        'runtime_minutes': duration_minutes(data.get('duration')),
        'genres': _as_list(data.get('genre')),
        'keywords': [k.strip() for k in keywords.split(',') if k.strip()],
        'rating': rating.get('ratingValue'),
        'rating_count': rating.get('ratingCount'),
        'actors': _names(data.get('actor')),
        'directors': _names(data.get('director')),
        'creators': _names(data.get('creator')),
        'trailer': trailer.get('embedUrl') or trailer.get('url'),
    }
