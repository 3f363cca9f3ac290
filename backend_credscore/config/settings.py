"""
Application settings.

Typed view over the environment (see config.env) shared by the collectors,
database layer and API server. Built once and cached; tests call
reset_settings_cache() after changing the environment.
"""

from __future__ import annotations

import functools
from dataclasses import dataclass

from backend_credscore.config import env


@dataclass(frozen=True)
class Settings:
    """Service configuration read from the environment."""

    database_url: str
    twitter_api_host: str
    twitter_api_key: str
    moralis_api_key: str
    moralis_base_url: str
    wallet_chains: tuple[str, ...]
    verida_api_base_url: str
    http_timeout_sec: float
    token_ttl_sec: float
    token_store_max_entries: int
    api_host: str
    api_port: int


@functools.lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the current application settings (cached)."""
    return Settings(
        database_url=env.get_database_url(),
        twitter_api_host=env.get_twitter_api_host(),
        twitter_api_key=env.get_twitter_api_key(),
        moralis_api_key=env.get_moralis_api_key(),
        moralis_base_url=env.get_moralis_base_url(),
        wallet_chains=env.get_wallet_chains(),
        verida_api_base_url=env.get_verida_api_base_url(),
        http_timeout_sec=env.get_http_timeout_sec(),
        token_ttl_sec=env.get_token_ttl_sec(),
        token_store_max_entries=env.get_token_store_max_entries(),
        api_host=env.get_api_host(),
        api_port=env.get_api_port(),
    )


def reset_settings_cache() -> None:
    """Drop the cached Settings so the next get_settings() re-reads the environment."""
    get_settings.cache_clear()
