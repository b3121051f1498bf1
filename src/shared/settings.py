"""Application settings loaded from the environment.

Domain infrastructure (databases, event store, brokers) is configured per
domain in ``domain.toml``. Everything the HTTP layer and the storefront
services need on top of that lives here.
"""

import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv


@dataclass(frozen=True)
class Settings:
    # Auth
    jwt_secret: str
    jwt_algorithm: str
    jwt_cookie_name: str
    jwt_ttl_days: int
    cookie_secure: bool

    # Catalogue
    catalogue_base_url: str
    catalogue_timeout: float

    # Assistant
    chat_cooldown_seconds: int
    chat_history_window: int

    # CORS
    allowed_origins: tuple[str, ...]

    @property
    def jwt_ttl_seconds(self) -> int:
        return self.jwt_ttl_days * 24 * 60 * 60


def _as_bool(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    load_dotenv()

    origins = os.getenv("ALLOWED_ORIGINS", "http://localhost:3000")

    return Settings(
        jwt_secret=os.getenv("JWT_SECRET", "change-me-in-production"),
        jwt_algorithm=os.getenv("JWT_ALGORITHM", "HS256"),
        jwt_cookie_name=os.getenv("JWT_COOKIE_NAME", "jwt"),
        jwt_ttl_days=int(os.getenv("JWT_TTL_DAYS", "30")),
        cookie_secure=_as_bool(os.getenv("COOKIE_SECURE"), default=False),
        catalogue_base_url=os.getenv("CATALOGUE_BASE_URL", "https://fakestoreapi.com"),
        catalogue_timeout=float(os.getenv("CATALOGUE_TIMEOUT", "10")),
        chat_cooldown_seconds=int(os.getenv("CHAT_COOLDOWN_SECONDS", "3")),
        chat_history_window=int(os.getenv("CHAT_HISTORY_WINDOW", "6")),
        allowed_origins=tuple(o.strip() for o in origins.split(",") if o.strip()),
    )
