import logging
from dataclasses import dataclass
from typing import Optional

from ..config import Settings
from .imdb_client import ImdbClient
from .justwatch_client import JustWatchClient
from .omdb_client import OmdbClient

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MovieClients:
    """
    Backend handles shared read-only by every request.

    ``omdb`` is None when no OMDb API key is configured.
    """
    imdb: ImdbClient
    omdb: Optional[OmdbClient]
    justwatch: JustWatchClient


def build_clients(config: Settings) -> MovieClients:
    """
    Construct the three backend clients from settings.

    :param config: Application settings.
    :return: MovieClients bundle.
    """
    omdb = None
    if config.omdb_enabled:
        omdb = OmdbClient(config.OMDB_API_KEY, timeout=config.HTTP_TIMEOUT)
    else:
        logger.warning(
            "OMDB_API_KEY not set. OMDB features will be disabled.")

    return MovieClients(
        imdb=ImdbClient(timeout=config.HTTP_TIMEOUT),
        omdb=omdb,
        justwatch=JustWatchClient(
            country=config.JUSTWATCH_COUNTRY, timeout=config.HTTP_TIMEOUT),
    )
