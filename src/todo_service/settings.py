from __future__ import annotations

import os
from dataclasses import dataclass
from typing import List, Optional

from sqlalchemy.engine import URL, make_url


@dataclass(frozen=True)
class Settings:
    """
    Application settings loaded from environment variables.

    Env vars:
    - PERSISTENCE_BACKEND: 'memory' (default) or 'sql'
    - DATABASE_URL: full SQLAlchemy URL; takes precedence over the DB_* variables
    - DB_DRIVER: SQLAlchemy driver name used with DB_HOST. Default 'mysql+pymysql'
    - DB_HOST, DB_PORT, DB_USER, DB_PASSWORD, DB_NAME: connection parts of the server database
    - SQLITE_DB_PATH: sqlite file used when neither DATABASE_URL nor DB_HOST is set. Default './data/todos.db'
    - DB_POOL_SIZE: connection pool size for server databases. Default 5
    - DB_CREATE_SCHEMA: 'true' (default) to create the todo table when it is missing
    - RAPIDAPI_KEY: API key for the quote API; the quote endpoint is disabled without it
    - QUOTE_API_HOST / QUOTE_API_URL / QUOTE_TIMEOUT_SECONDS: quote API endpoint and timeout
    - CORS_ALLOW_ORIGINS: comma-separated list of allowed origins; '*' by default
    - LOG_LEVEL: logging level name. Default 'INFO'
    - PORT: port served by `python -m todo_service`. Default 9000
    """

    persistence_backend: str
    database_url: str
    db_pool_size: int
    db_create_schema: bool
    rapidapi_key: Optional[str]
    quote_api_host: str
    quote_api_url: str
    quote_timeout_seconds: float
    cors_allow_origins: List[str]
    log_level: str
    port: int


def _get_env(name: str, default: str) -> str:
    value = os.getenv(name, default)
    if value is None or value == "":
        return default
    return value


def _parse_bool(value: str, default: bool = False) -> bool:
    v = value.strip().lower()
    if v in {"1", "true", "yes", "on"}:
        return True
    if v in {"0", "false", "no", "off"}:
        return False
    return default


def _parse_int(value: str, default: int) -> int:
    try:
        parsed = int(value.strip())
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _parse_float(value: str, default: float) -> float:
    try:
        parsed = float(value.strip())
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _parse_origins(origins_value: str) -> List[str]:
    """
    Parse CORS origins from env. Supports:
    - '*' to allow all origins
    - Comma-separated list of origins
    """
    value = origins_value.strip()
    if value == "*":
        return ["*"]
    return [o.strip() for o in value.split(",") if o.strip()]


# PUBLIC_INTERFACE
def build_database_url(
    *,
    driver: str,
    host: str,
    port: Optional[int],
    user: Optional[str],
    password: Optional[str],
    name: Optional[str],
) -> str:
    """
    Assemble a SQLAlchemy connection URL from its parts.

    MySQL URLs get charset=utf8mb4 so that titles round-trip any unicode text.
    """
    query = {"charset": "utf8mb4"} if driver.startswith("mysql") else {}
    url = URL.create(
        drivername=driver,
        username=user or None,
        password=password or None,
        host=host,
        port=port,
        database=name or None,
        query=query,
    )
    return url.render_as_string(hide_password=False)


def _resolve_database_url() -> str:
    explicit = os.getenv("DATABASE_URL")
    if explicit:
        # Fail fast on a malformed URL instead of at first query
        make_url(explicit)
        return explicit

    host = os.getenv("DB_HOST")
    if host:
        port = _parse_int(_get_env("DB_PORT", "0"), 0)
        return build_database_url(
            driver=_get_env("DB_DRIVER", "mysql+pymysql").strip(),
            host=host.strip(),
            port=port or None,
            user=os.getenv("DB_USER"),
            password=os.getenv("DB_PASSWORD"),
            name=os.getenv("DB_NAME"),
        )

    sqlite_path = _get_env("SQLITE_DB_PATH", "./data/todos.db").strip()
    return f"sqlite:///{sqlite_path}"


# PUBLIC_INTERFACE
def get_settings() -> Settings:
    """Return application settings loaded from environment variables."""
    backend = _get_env("PERSISTENCE_BACKEND", "memory").strip().lower()
    if backend not in {"memory", "sql"}:
        # Fallback to memory if unsupported
        backend = "memory"

    return Settings(
        persistence_backend=backend,
        database_url=_resolve_database_url(),
        db_pool_size=_parse_int(_get_env("DB_POOL_SIZE", "5"), 5),
        db_create_schema=_parse_bool(_get_env("DB_CREATE_SCHEMA", "true"), True),
        rapidapi_key=os.getenv("RAPIDAPI_KEY") or None,
        quote_api_host=_get_env("QUOTE_API_HOST", "quotes15.p.rapidapi.com").strip(),
        quote_api_url=_get_env(
            "QUOTE_API_URL", "https://quotes15.p.rapidapi.com/quotes/random/"
        ).strip(),
        quote_timeout_seconds=_parse_float(_get_env("QUOTE_TIMEOUT_SECONDS", "10"), 10.0),
        cors_allow_origins=_parse_origins(_get_env("CORS_ALLOW_ORIGINS", "*")),
        log_level=_get_env("LOG_LEVEL", "INFO").strip().upper(),
        port=_parse_int(_get_env("PORT", "9000"), 9000),
    )
