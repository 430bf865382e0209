import os
from dataclasses import dataclass
from typing import List

from dotenv import load_dotenv


load_dotenv()


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Config:
    """Application configuration loaded from environment variables.

    Provides validated access to the remote flavor store (REST or Supabase).
    """

    FLAVOR_API_BASE_URL: str = os.getenv("FLAVOR_API_BASE_URL", "")
    FLAVOR_COLLECTION_PATH: str = os.getenv("FLAVOR_COLLECTION_PATH", "/collection")
    FLAVOR_DELETE_PATH: str = os.getenv("FLAVOR_DELETE_PATH", "/collection/{id}")
    FLAVOR_STORE_BACKEND: str = os.getenv("FLAVOR_STORE_BACKEND", "rest")
    FLAVOR_HTTP_TIMEOUT_SECONDS_ENV: str = os.getenv("FLAVOR_HTTP_TIMEOUT_SECONDS", "60")
    FLAVOR_ANONYMOUS_OWNER: str = os.getenv("FLAVOR_ANONYMOUS_OWNER", "anonymous")
    FLAVOR_REQUIRE_SIGN_IN: bool = _env_flag("FLAVOR_REQUIRE_SIGN_IN", "true")

    SUPABASE_URL: str = os.getenv("SUPABASE_URL", "")
    SUPABASE_SERVICE_KEY: str = os.getenv("SUPABASE_SERVICE_KEY", "")
    SUPABASE_TABLE: str = os.getenv("SUPABASE_TABLE", "flavors")

    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "production")
    PORT_ENV: str = os.getenv("PORT", "8080")

    CORS_ALLOWED_ORIGINS_ENV: str = os.getenv("CORS_ALLOWED_ORIGINS", "http://localhost:3000")

    @staticmethod
    def allowed_origins(extra_origins: List[str] | None = None) -> List[str]:
        env_origins = [o.strip() for o in os.getenv("CORS_ALLOWED_ORIGINS", "http://localhost:3000").split(",") if o.strip()]
        # Metro bundler and Expo dev servers
        defaults = [
            "http://localhost:8081",
            "http://localhost:19006",
        ]
        merged = env_origins + defaults
        if extra_origins:
            merged.extend(extra_origins)
        # Deduplicate while preserving order
        seen = set()
        result: List[str] = []
        for origin in merged:
            if origin not in seen:
                seen.add(origin)
                result.append(origin)
        return result

    @classmethod
    def http_timeout_seconds(cls) -> float:
        try:
            timeout = float(cls.FLAVOR_HTTP_TIMEOUT_SECONDS_ENV)
        except ValueError:
            raise ValueError(f"FLAVOR_HTTP_TIMEOUT_SECONDS must be a number, got {cls.FLAVOR_HTTP_TIMEOUT_SECONDS_ENV!r}") from None
        if timeout <= 0:
            raise ValueError("FLAVOR_HTTP_TIMEOUT_SECONDS must be positive")
        return timeout

    @classmethod
    def port(cls) -> int:
        try:
            return int(cls.PORT_ENV)
        except ValueError:
            raise ValueError(f"PORT must be an integer, got {cls.PORT_ENV!r}") from None

    @classmethod
    def validate(cls) -> None:
        cls.http_timeout_seconds()
        cls.port()
        if cls.FLAVOR_STORE_BACKEND not in ("rest", "supabase"):
            raise ValueError(f"Unknown FLAVOR_STORE_BACKEND: {cls.FLAVOR_STORE_BACKEND}")
        if cls.FLAVOR_STORE_BACKEND == "rest":
            if not cls.FLAVOR_API_BASE_URL:
                raise ValueError("FLAVOR_API_BASE_URL environment variable is required")
            if "{id}" not in cls.FLAVOR_DELETE_PATH:
                raise ValueError("FLAVOR_DELETE_PATH must contain an {id} placeholder")
        else:
            if not cls.SUPABASE_URL:
                raise ValueError("SUPABASE_URL environment variable is required")
            if not cls.SUPABASE_SERVICE_KEY:
                raise ValueError("SUPABASE_SERVICE_KEY environment variable is required")
