"""Application settings and validation."""

import logging
import os
from pathlib import Path

BASE = Path(__file__).resolve().parent.parent


class Settings:
    ENV: str
    DATABASE_URL: str
    LOG_LEVEL: str
    SQL_ECHO: bool
    ALLOW_DEV_CORS: bool
    ALLOW_INSECURE_CORS: bool
    MAX_IMPORT_BYTES: int

    def __init__(self):
        self.ENV = os.getenv("ENV", "dev").lower()
        self.DATABASE_URL = os.getenv("DATABASE_URL", f"sqlite:///{BASE / 'students.db'}")
        self.LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
        self.SQL_ECHO = os.getenv("SQL_ECHO", "false").lower() == "true"
        self.ALLOW_DEV_CORS = os.getenv("ALLOW_DEV_CORS", "true").lower() == "true"
        self.ALLOW_INSECURE_CORS = os.getenv("ALLOW_INSECURE_CORS", "false").lower() == "true"
        self.MAX_IMPORT_BYTES = int(os.getenv("MAX_IMPORT_BYTES", str(2 * 1024 * 1024)))  # 2 MB default
        self._validate()

    @property
    def is_sqlite(self) -> bool:
        return self.DATABASE_URL.startswith("sqlite")

    def _validate(self):
        if not self.DATABASE_URL:
            raise RuntimeError("DATABASE_URL must not be empty")
        if not isinstance(logging.getLevelName(self.LOG_LEVEL), int):
            raise RuntimeError(f"LOG_LEVEL must be a standard logging level, got {self.LOG_LEVEL!r}")
        if self.ENV != "dev" and self.ALLOW_DEV_CORS and not self.ALLOW_INSECURE_CORS:
            raise RuntimeError("ALLOW_DEV_CORS must be disabled in non-dev environments")
        if self.MAX_IMPORT_BYTES <= 0:
            raise RuntimeError("MAX_IMPORT_BYTES must be positive")


settings = Settings()
