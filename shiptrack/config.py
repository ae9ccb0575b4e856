# shiptrack/config.py
import logging
from functools import lru_cache
from typing import List, Optional

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Only ever used when DEMO_MODE is switched on explicitly
DEMO_SECRET_KEY = "fedexpress-demo-secret-key"

LOG_FORMAT = "%(asctime)s [%(levelname)-5s] %(name)s: %(message)s"


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite+aiosqlite:///./shiptrack.db"
    SQL_ECHO: bool = False
    AUTO_CREATE_TABLES: bool = True

    SECRET_KEY: Optional[str] = None
    DEMO_MODE: bool = False
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_DAYS: int = 7
    BCRYPT_ROUNDS: int = 10

    VERIFICATION_CODE_EXPIRE_MINUTES: int = 10
    TRACKING_ID_PREFIX: str = "FDX"
    TRACKING_ID_MAX_ATTEMPTS: int = 5

    ALLOWED_ORIGINS: List[str] = ["http://localhost:5173"]
    ALLOWED_HOSTS: List[str] = ["*"]

    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding='utf-8', extra='ignore')

    @model_validator(mode='after')
    def require_secret_key(self):
        """Refuse to sign tokens with a guessable key outside demo deployments."""
        if not self.SECRET_KEY:
            if not self.DEMO_MODE:
                raise ValueError("SECRET_KEY must be set (or enable DEMO_MODE for the demo secret)")
            self.SECRET_KEY = DEMO_SECRET_KEY
        return self

    @property
    def uses_demo_secret(self) -> bool:
        return self.SECRET_KEY == DEMO_SECRET_KEY


@lru_cache()
def get_settings() -> Settings:
    return Settings()


def configure_logging(level_name: str = "INFO"):
    """
    Configure the root logger once: a single stream handler with a shared format.
    Calling it again only updates level and formatter of the existing handler.
    """
    level = getattr(logging, (level_name or "INFO").upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt="%H:%M:%S")

    stream_handler = None
    for h in root_logger.handlers:
        if isinstance(h, logging.StreamHandler) and not isinstance(h, logging.FileHandler):
            stream_handler = h
            break
    if stream_handler is None:
        stream_handler = logging.StreamHandler()
        root_logger.addHandler(stream_handler)
    stream_handler.setLevel(level)
    stream_handler.setFormatter(formatter)

    # Third-party noise
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)
