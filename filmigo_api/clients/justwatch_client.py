import logging
from typing import Any, Dict, List, Optional

import httpx

from ..utils.utils_clients import (
    DEFAULT_TIMEOUT,
    MovieClientError,
    fetch_json,
    make_client,
)

logger = logging.getLogger(__name__)

GRAPHQL_URL = 'https://apis.justwatch.com/graphql'
IMAGE_BASE_URL = 'https://images.justwatch.com'

SEARCH_TITLES_QUERY = """
query GetSearchTitles(
  $searchTitlesFilter: TitleFilter!
  $country: Country!
  $language: Language!
  $first: Int!
) {
  popularTitles(country: $country, filter: $searchTitlesFilter, first: $first) {
    edges {
      node {
        id
        objectType
        content(country: $country, language: $language) {
          title
          fullPath
          originalReleaseYear
          posterUrl
          externalIds {
            imdbId
          }
        }
        offers(country: $country, platform: WEB) {
          monetizationType
          presentationType
          standardWebURL
          retailPrice(language: $language)
          package {
            clearName
          }
        }
      }
    }
  }
}
"""


class JustWatchClient:
    """
    Client for JustWatch's public GraphQL API (streaming availability).
    """

    def __init__(
        self,
        country: str = 'US',
        language: str = 'en',
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.country = country.upper()
        self.language = language
        self.timeout = timeout
        self._transport = transport

    async def search(
        self,
        query: str,
        country: Optional[str] = None,
        limit: int = 5
    ) -> List[Dict[str, Any]]:
        """
        Search titles and their streaming offers.

        :param query: Free-text title query.
        :param country: Two-letter country code, defaults to the client's.
        :param limit: Maximum number of titles.
        :return: List of flattened titles with their offers.
        :raises MovieClientError: On transport errors or GraphQL errors.
        """
        what = f"JustWatch search {query!r}"
        body = {
            'operationName': 'GetSearchTitles',
            'query': SEARCH_TITLES_QUERY,
            'variables': {
                'searchTitlesFilter': {'searchQuery': query},
                'country': (country or self.country).upper(),
                'language': self.language,
                'first': limit,
            },
        }
        async with make_client(self.timeout, self._transport) as client:
            data = await fetch_json(client, 'POST', GRAPHQL_URL, what, json=body)

        if not isinstance(data, dict):
            raise MovieClientError(f"{what} returned an unexpected payload")
        if data.get('errors'):
            message = data['errors'][0].get('message', 'unknown error')
            logger.warning("%s failed: %s", what, message)
            raise MovieClientError(f"{what}: {message}")

        edges = ((data.get('data') or {}).get('popularTitles') or {}).get('edges') or []
        return [map_title(edge.get('node') or {}) for edge in edges]


def _poster_url(path: Optional[str]) -> Optional[str]:
    if not path:
        return None
    # posterUrl is a template like /poster/123/{profile}/slug.{format}
    path = path.replace('{profile}', 's592').replace('{format}', 'jpg')
    return f"{IMAGE_BASE_URL}{path}"


def map_title(node: Dict[str, Any]) -> Dict[str, Any]:
    """
    Flatten one GraphQL title node.

    :param node: Node from popularTitles.edges.
    :return: Dictionary with the title's identity and offers.
    """
    content = node.get('content') or {}
    external = content.get('externalIds') or {}
    offers = [
        {
            'monetization_type': o.get('monetizationType'),
            'presentation_type': o.get('presentationType'),
            'provider': (o.get('package') or {}).get('clearName'),
            'url': o.get('standardWebURL'),
            'price': o.get('retailPrice'),
        }
        for o in node.get('offers') or []
    ]
    return {
        'id': node.get('id'),
        'object_type': node.get('objectType'),
        'title': content.get('title'),
        'original_release_year': content.get('originalReleaseYear'),
        'imdb_id': external.get('imdbId'),
        'full_path': content.get('fullPath'),
        'poster': _poster_url(content.get('posterUrl')),
        'offers': offers,
    }
