import httpx
import pytest

from filmigo_api.clients.omdb_client import OmdbClient
from filmigo_api.utils.utils_clients import MovieClientError, MovieNotFoundError


def omdb_with(payload, status_code=200, seen=None):
    def handler(request):
        if seen is not None:
            seen.append(request)
        return httpx.Response(status_code, json=payload)
    return OmdbClient("secret", transport=httpx.MockTransport(handler))


def test_requires_api_key():
    with pytest.raises(ValueError):
        OmdbClient("  ")


@pytest.mark.asyncio
async def test_get_movie_sends_key_and_id():
    seen = []
    record = {"Title": "The Shawshank Redemption", "imdbID": "tt0111161", "Response": "True"}
    client = omdb_with(record, seen=seen)

    assert await client.get_movie("tt0111161") == record
    params = seen[0].url.params
    assert params["apikey"] == "secret"
    assert params["i"] == "tt0111161"
    assert params["plot"] == "full"


@pytest.mark.asyncio
async def test_get_movie_not_found():
    client = omdb_with({"Response": "False", "Error": "Incorrect IMDb ID."})
    with pytest.raises(MovieNotFoundError):
        await client.get_movie("tt0")


@pytest.mark.asyncio
async def test_get_movie_invalid_key_is_client_error():
    client = omdb_with({"Response": "False", "Error": "Invalid API key!"}, status_code=401)
    with pytest.raises(MovieClientError) as info:
        await client.get_movie("tt0111161")
    assert not isinstance(info.value, MovieNotFoundError)


@pytest.mark.asyncio
async def test_search_returns_hits():
    seen = []
    hits = [{"Title": "Inception", "Year": "2010", "imdbID": "tt1375666"}]
    client = omdb_with({"Search": hits, "totalResults": "1", "Response": "True"}, seen=seen)

    assert await client.search("inception") == hits
    assert seen[0].url.params["s"] == "inception"


@pytest.mark.asyncio
async def test_search_no_match_is_empty():
    client = omdb_with({"Response": "False", "Error": "Movie not found!"})
    assert await client.search("zzzzzz") == []


@pytest.mark.asyncio
async def test_search_api_error_raises():
    client = omdb_with({"Response": "False", "Error": "Too many results."})
    with pytest.raises(MovieClientError):
        await client.search("a")


@pytest.mark.asyncio
async def test_transport_failure_raises_client_error():
    def handler(request):
        raise httpx.ConnectTimeout("timed out", request=request)

    client = OmdbClient("secret", transport=httpx.MockTransport(handler))
    with pytest.raises(MovieClientError):
        await client.search("inception")
