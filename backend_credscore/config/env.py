"""
Environment variable loading for CredScore.

- CREDSCORE_DB_URL / DATABASE_URL: SQLAlchemy URL (Postgres etc.)
- CREDSCORE_DB_PATH: SQLite file used when no URL is set (default credscore.db)
- TWITTER_API_HOST / TWITTER_API_KEY: RapidAPI host and key for social profiles
- MORALIS_API_KEY / MORALIS_BASE_URL / WALLET_CHAINS: wallet summary source
- VERIDA_API_BASE_URL: data-vault REST API
- Loads .env from project root when available.
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

# Project root: config is backend_credscore/config/, root is 2 levels up
_CONFIG_DIR = Path(__file__).resolve().parent
_BACKEND_DIR = _CONFIG_DIR.parent
_ROOT = _BACKEND_DIR.parent
_ENV_PATH = _ROOT / ".env"

DEFAULT_SQLITE_PATH = "credscore.db"
DEFAULT_TWITTER_API_HOST = "twitter241.p.rapidapi.com"
DEFAULT_MORALIS_BASE_URL = "https://deep-index.moralis.io/api/v2.2"
DEFAULT_WALLET_CHAINS = ("eth", "polygon", "bsc", "arbitrum", "base", "optimism")
DEFAULT_VERIDA_API_BASE_URL = "https://api.verida.ai"
DEFAULT_HTTP_TIMEOUT_SEC = 10.0
DEFAULT_TOKEN_TTL_SEC = 3600.0
DEFAULT_TOKEN_STORE_MAX_ENTRIES = 10_000

_env_loaded = False


def load_credscore_env() -> None:
    """Load .env from project root. Safe to call multiple times."""
    global _env_loaded
    if _env_loaded:
        return
    load_dotenv(_ENV_PATH)
    _env_loaded = True


def _get(name: str, default: str = "") -> str:
    return (os.getenv(name) or default).strip()


def _get_float(name: str, default: float) -> float:
    raw = _get(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _get_int(name: str, default: int) -> int:
    raw = _get(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def get_database_url() -> str:
    """
    Return CREDSCORE_DB_URL or DATABASE_URL if set; else SQLite from
    CREDSCORE_DB_PATH (default credscore.db).
    """
    load_credscore_env()
    url = _get("CREDSCORE_DB_URL") or _get("DATABASE_URL")
    if url:
        return url
    path = _get("CREDSCORE_DB_PATH") or DEFAULT_SQLITE_PATH
    return f"sqlite:///{path}"


def get_twitter_api_host() -> str:
    load_credscore_env()
    return _get("TWITTER_API_HOST", DEFAULT_TWITTER_API_HOST)


def get_twitter_api_key() -> str:
    load_credscore_env()
    return _get("TWITTER_API_KEY") or _get("RAPIDAPI_KEY")


def get_moralis_api_key() -> str:
    load_credscore_env()
    return _get("MORALIS_API_KEY")


def get_moralis_base_url() -> str:
    load_credscore_env()
    return _get("MORALIS_BASE_URL", DEFAULT_MORALIS_BASE_URL).rstrip("/")


def get_wallet_chains() -> tuple[str, ...]:
    """Comma-separated WALLET_CHAINS; default covers the main EVM chains."""
    load_credscore_env()
    raw = _get("WALLET_CHAINS")
    if not raw:
        return DEFAULT_WALLET_CHAINS
    return tuple(c.strip().lower() for c in raw.split(",") if c.strip())


def get_verida_api_base_url() -> str:
    load_credscore_env()
    return _get("VERIDA_API_BASE_URL", DEFAULT_VERIDA_API_BASE_URL).rstrip("/")


def get_http_timeout_sec() -> float:
    load_credscore_env()
    return _get_float("HTTP_TIMEOUT_SEC", DEFAULT_HTTP_TIMEOUT_SEC)


def get_token_ttl_sec() -> float:
    load_credscore_env()
    return _get_float("TOKEN_TTL_SEC", DEFAULT_TOKEN_TTL_SEC)


def get_token_store_max_entries() -> int:
    load_credscore_env()
    return _get_int("TOKEN_STORE_MAX_ENTRIES", DEFAULT_TOKEN_STORE_MAX_ENTRIES)


def get_api_host() -> str:
    load_credscore_env()
    return _get("API_HOST", "0.0.0.0")


def get_api_port() -> int:
    load_credscore_env()
    return _get_int("API_PORT", 8000)


def mask_secret(value: str) -> str:
    """Mask a key or token for logs: first 4 chars then ***."""
    value = value or ""
    if len(value) <= 4:
        return "***" if value else ""
    return value[:4] + "***"
