import logging
from typing import Optional

from pydantic import ConfigDict
from pydantic_settings import BaseSettings

LOG_FORMAT = '[%(asctime)s] %(levelname)s [%(name)s] %(message)s'
LOG_DATE_FORMAT = '%Y/%m/%d - %H:%M:%S'


class Settings(BaseSettings):
    OMDB_API_KEY: Optional[str] = None
    APP_MODE: str = 'debug'
    HOST: str = '0.0.0.0'
    PORT: int = 8080
    HTTP_TIMEOUT: float = 10.0
    LOG_LEVEL: str = 'INFO'
    JUSTWATCH_COUNTRY: str = 'US'

    model_config = ConfigDict(
        env_file=".env",
        extra="ignore"
    )

    @property
    def omdb_enabled(self) -> bool:
        return bool(self.OMDB_API_KEY and self.OMDB_API_KEY.strip())

    @property
    def is_release(self) -> bool:
        return self.APP_MODE.strip().lower() == 'release'


def configure_logging(level: str) -> None:
    """
    Install a single stream handler on the root logger.
    Calling it again only adjusts the level.

    :param level: Log level name, e.g. 'INFO'.
    """
    root = logging.getLogger()
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT, LOG_DATE_FORMAT))
        root.addHandler(handler)
    root.setLevel(level.upper())


settings = Settings()
