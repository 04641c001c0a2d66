"""
Application configuration and environment variables.
"""

import os
from dotenv import load_dotenv

from docdrop.utils.durations import parse_duration

load_dotenv()


class Settings:
    """Application settings loaded from environment variables."""

    # App settings
    APP_NAME: str = "docdrop"
    APP_VERSION: str = "1.0.0"

    # Server
    LISTEN_ADDR: str = os.getenv("DOC_LISTEN_ADDR", "127.0.0.1:8080")
    DOCS_ROOT: str = os.getenv("DOC_ROOT", "docs")

    # Capacity
    MAX_DOC_SIZE: int = int(os.getenv("DOC_MAX_SIZE", "10000000"))
    MAX_DOC_COUNT: int = int(os.getenv("DOC_MAX_COUNT", "2000"))

    # Document defaults, overridable per request
    DEFAULT_LIFETIME: float = parse_duration(os.getenv("DOC_LIFETIME", "168h"))
    DEFAULT_NAME_LENGTH: int = int(os.getenv("DOC_NAME_LENGTH", "9"))
    DEFAULT_NAME_CHARSET: str = os.getenv(
        "DOC_NAME_CHARSET", "abcdefghijklmnopqrstuvwxyz0123456789"
    )
    NAME_MAX_ATTEMPTS: int = int(os.getenv("DOC_NAME_MAX_ATTEMPTS", "100000"))

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # CORS
    CORS_ORIGINS: list = os.getenv("CORS_ORIGINS", "*").split(",")

    def __init__(self, **overrides):
        for key, value in overrides.items():
            if not hasattr(type(self), key):
                raise AttributeError(f"Unknown setting: {key}")
            setattr(self, key, value)

    def listen_host_port(self) -> tuple[str, int]:
        """Split LISTEN_ADDR ("host:port") for uvicorn."""
        host, _, port = self.LISTEN_ADDR.rpartition(":")
        return host or "127.0.0.1", int(port)


settings = Settings()
