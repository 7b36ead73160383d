import logging
from typing import Any, Dict, List, Optional

import httpx

from ..utils.utils_clients import (
    DEFAULT_TIMEOUT,
    MovieClientError,
    MovieNotFoundError,
    fetch_json,
    make_client,
)

logger = logging.getLogger(__name__)

OMDB_BASE_URL = 'https://www.omdbapi.com/'


class OmdbClient:
    """
    Client for the OMDb API.

    OMDb answers 200 even for failed lookups and reports the failure in the
    body as ``{"Response": "False", "Error": "..."}``.
    """

    def __init__(
        self,
        api_key: str,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        if not api_key or not api_key.strip():
            raise ValueError("OMDb API key is required for the OmdbClient.")
        self.api_key = api_key.strip()
        self.timeout = timeout
        self._transport = transport

    async def _query(self, params: Dict[str, str], what: str) -> Dict[str, Any]:
        query = {'apikey': self.api_key, 'r': 'json', **params}
        async with make_client(self.timeout, self._transport) as client:
            data = await fetch_json(client, 'GET', OMDB_BASE_URL, what, params=query)
        if not isinstance(data, dict):
            raise MovieClientError(f"{what} returned an unexpected payload")
        return data

    async def get_movie(self, imdb_id: str) -> Dict[str, Any]:
        """
        Fetch full details for one title.

        :param imdb_id: IMDb title id.
        :return: The OMDb record.
        :raises MovieNotFoundError: If OMDb has no such title.
        :raises MovieClientError: On any other failure.
        """
        what = f"OMDb lookup {imdb_id}"
        data = await self._query({'i': imdb_id, 'plot': 'full'}, what)
        if data.get('Response') == 'True':
            return data
        error = data.get('Error') or 'unknown error'
        logger.warning("%s failed: %s", what, error)
        if _is_not_found(error):
            raise MovieNotFoundError(f"{what}: {error}")
        raise MovieClientError(f"{what}: {error}")

    async def search(self, query: str) -> List[Dict[str, Any]]:
        """
        Search titles by name.

        :param query: Free-text title query.
        :return: List of OMDb search hits, empty when nothing matched.
        :raises MovieClientError: When OMDb reports any other error.
        """
        what = f"OMDb search {query!r}"
        data = await self._query({'s': query}, what)
        if data.get('Response') == 'True':
            return data.get('Search') or []
        error = data.get('Error') or 'unknown error'
        if _is_not_found(error):
            return []
        logger.warning("%s failed: %s", what, error)
        raise MovieClientError(f"{what}: {error}")


def _is_not_found(error: str) -> bool:
    error = error.lower()
    return 'not found' in error or 'incorrect imdb id' in error
