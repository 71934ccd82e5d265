"""Connection settings for the flight reservation store."""
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from sqlalchemy.engine import URL, make_url

DEFAULT_DB_URL = "sqlite+pysqlite:///flights.db"

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass
class Settings:
    url: str = DEFAULT_DB_URL
    username: Optional[str] = None
    password: Optional[str] = None
    echo: bool = False
    create_schema: bool = False

    def engine_url(self) -> URL:
        """Return ``url`` with explicit credentials applied on top of any embedded ones."""

        url = make_url(self.url)
        overrides = {}
        if self.username:
            overrides["username"] = self.username
        if self.password:
            overrides["password"] = self.password
        if overrides:
            url = url.set(**overrides)
        return url


def _flag(value: Optional[str]) -> bool:
    return bool(value) and value.strip().lower() in _TRUTHY


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Read ``FLIGHTSERVICE_*`` variables from ``environ`` (``os.environ`` by default)."""

    env = os.environ if environ is None else environ
    return Settings(
        url=env.get("FLIGHTSERVICE_URL", DEFAULT_DB_URL),
        username=env.get("FLIGHTSERVICE_USERNAME") or None,
        password=env.get("FLIGHTSERVICE_PASSWORD") or None,
        echo=_flag(env.get("FLIGHTSERVICE_ECHO")),
        create_schema=_flag(env.get("FLIGHTSERVICE_CREATE_SCHEMA")),
    )
