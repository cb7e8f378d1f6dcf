"""
Environment-driven configuration for the clinic API
"""

import os
import logging
from functools import lru_cache
from typing import Optional
from urllib.parse import quote_plus

logger = logging.getLogger(__name__)

DEFAULT_SECRET_KEY = "your-secret-key-change-in-production"


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class Settings:
    """Application settings, read once from the process environment"""

    def __init__(
        self,
        port: int = 8000,
        origin: str = "http://localhost:3000",
        token_secret_key: str = DEFAULT_SECRET_KEY,
        database_url: str = "sqlite:///./clinic.db",
        db_pool_size: int = 10,
        db_pool_timeout: int = 30,
        cookie_secure: bool = True,
        log_level: str = "INFO",
    ):
        self.port = port
        self.origin = origin
        self.token_secret_key = token_secret_key
        self.database_url = database_url
        self.db_pool_size = db_pool_size
        self.db_pool_timeout = db_pool_timeout
        self.cookie_secure = cookie_secure
        self.log_level = log_level

    @classmethod
    def from_env(cls) -> "Settings":
        secret = os.getenv("TOKEN_SECRET_KEY")
        if not secret:
            logger.warning("TOKEN_SECRET_KEY is not set; using the development secret")
            secret = DEFAULT_SECRET_KEY

        return cls(
            port=int(os.getenv("PORT", "8000")),
            origin=os.getenv("ORIGIN", "http://localhost:3000"),
            token_secret_key=secret,
            database_url=cls._database_url_from_env(),
            db_pool_size=int(os.getenv("DB_POOL_SIZE", "10")),
            db_pool_timeout=int(os.getenv("DB_POOL_TIMEOUT", "30")),
            cookie_secure=_env_bool("COOKIE_SECURE", True),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )

    @staticmethod
    def _database_url_from_env() -> str:
        url: Optional[str] = os.getenv("DATABASE_URL")
        if url:
            return url

        host = os.getenv("DB_HOST")
        if not host:
            return "sqlite:///./clinic.db"

        user = quote_plus(os.getenv("DB_USER", ""))
        password = quote_plus(os.getenv("DB_PASSWORD", ""))
        name = os.getenv("DB_NAME", "")
        return f"mysql+pymysql://{user}:{password}@{host}/{name}"


@lru_cache()
def get_settings() -> Settings:
    return Settings.from_env()
