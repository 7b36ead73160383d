import logging
from typing import Any, Dict, Optional

import httpx

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0

BROWSER_HEADERS = {
    'accept': 'text/html,application/xhtml+xml',
    'accept-language': 'en-US,en;q=0.9',
    'user-agent': (
        'Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 '
        '(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36'
    ),
}


class MovieClientError(Exception):
    """Raised when a backend cannot answer a lookup or search."""


class MovieNotFoundError(MovieClientError):
    """Raised when a backend reports that the requested record does not exist."""


def make_client(
    timeout: float,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    headers: Optional[Dict[str, str]] = None
) -> httpx.AsyncClient:
    """
    Build a short-lived async HTTP client for a single backend call.

    :param timeout: Seconds allowed for the whole request.
    :param transport: Optional transport override, used by tests.
    :param headers: Extra default headers.
    :return: An httpx.AsyncClient, to be used as an async context manager.
    """
    return httpx.AsyncClient(
        timeout=timeout,
        transport=transport,
        headers=headers,
        follow_redirects=True
    )


def _check_response(resp: httpx.Response, what: str) -> None:
    if resp.status_code == 404:
        raise MovieNotFoundError(f"{what} not found")
    try:
        resp.raise_for_status()
    except httpx.HTTPStatusError as e:
        raise MovieClientError(
            f"{what} failed with HTTP {resp.status_code}") from e


async def fetch_json(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    what: str,
    **kwargs: Any
) -> Any:
    """
    Perform one request and decode its JSON body.

    :param client: HTTP client for making API requests.
    :param method: HTTP method, 'GET' or 'POST'.
    :param url: Target URL.
    :param what: Short description used in error messages.
    :return: The decoded JSON payload.
    :raises MovieNotFoundError: On HTTP 404.
    :raises MovieClientError: On transport errors, other bad statuses or invalid JSON.
    """
    try:
        resp = await client.request(method, url, **kwargs)
    except httpx.HTTPError as e:
        logger.warning("%s request error: %s", what, e)
        raise MovieClientError(f"{what} request error: {e}") from e
    _check_response(resp, what)
    try:
        return resp.json()
    except ValueError as e:
        raise MovieClientError(f"{what} returned invalid JSON") from e


async def fetch_text(
    client: httpx.AsyncClient,
    url: str,
    what: str,
    **kwargs: Any
) -> str:
    """
    Perform one GET and return the decoded body text.

    :param client: HTTP client for making API requests.
    :param url: Target URL.
    :param what: Short description used in error messages.
    :return: The response body.
    """
    try:
        resp = await client.get(url, **kwargs)
    except httpx.HTTPError as e:
        logger.warning("%s request error: %s", what, e)
        raise MovieClientError(f"{what} request error: {e}") from e
    _check_response(resp, what)
    return resp.text
