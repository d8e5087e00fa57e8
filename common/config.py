"""Environment-driven settings shared by the API service and its clients."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import List, Mapping, Optional

from dotenv import load_dotenv
from sqlalchemy.engine import URL

DEFAULT_ALLOWED_ORIGINS = ("http://localhost:5173", "http://127.0.0.1:5173")
DEFAULT_API_URL = "http://localhost:3000"


def _split_origins(raw: Optional[str]) -> List[str]:
    if raw is None:
        return list(DEFAULT_ALLOWED_ORIGINS)
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


@dataclass(frozen=True)
class Settings:
    host: str = "127.0.0.1"
    port: int = 3000
    db_host: str = "localhost"
    db_port: int = 5432
    db_user: str = "postgres"
    db_password: str = "postgres"
    db_name: str = "expenses"
    database_url: Optional[str] = None
    env_name: str = "prod"
    allowed_origins: List[str] = field(default_factory=lambda: list(DEFAULT_ALLOWED_ORIGINS))

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from the process environment, reading ``.env`` first."""
        if environ is None:
            load_dotenv()
            environ = os.environ
        return cls(
            host=environ.get("HOST", "127.0.0.1"),
            port=int(environ.get("PORT", "3000")),
            db_host=environ.get("DB_HOST", "localhost"),
            db_port=int(environ.get("DB_PORT", "5432")),
            db_user=environ.get("DB_USER", "postgres"),
            db_password=environ.get("DB_PASSWORD", "postgres"),
            db_name=environ.get("DB_NAME", "expenses"),
            database_url=environ.get("DATABASE_URL") or None,
            env_name=environ.get("EXPENSE_TRACKER_ENV", "prod").lower(),
            allowed_origins=_split_origins(environ.get("EXPENSE_TRACKER_ALLOWED_ORIGINS")),
        )

    @property
    def is_dev(self) -> bool:
        return self.env_name in {"dev", "development"}

    def sqlalchemy_url(self) -> URL | str:
        if self.database_url:
            return self.database_url
        return URL.create(
            "postgresql+psycopg",
            username=self.db_user,
            password=self.db_password,
            host=self.db_host,
            port=self.db_port,
            database=self.db_name,
        )


def api_url_from_env(environ: Optional[Mapping[str, str]] = None) -> str:
    if environ is None:
        load_dotenv()
        environ = os.environ
    return environ.get("EXPENSE_API_URL", DEFAULT_API_URL).rstrip("/")
