"""
FastAPI dependencies: upstream clients and the vault token store.

Tests replace these through app.dependency_overrides.
"""

from __future__ import annotations

from fastapi import Request

from backend_credscore.collectors import InMemoryTokenStore, SocialClient, TokenStore, VaultClient, WalletClient
from backend_credscore.config import Settings, get_settings


def build_token_store(settings: Settings | None = None) -> InMemoryTokenStore:
    settings = settings or get_settings()
    return InMemoryTokenStore(
        ttl_sec=settings.token_ttl_sec,
        max_entries=settings.token_store_max_entries,
    )


def get_social_client() -> SocialClient:
    return SocialClient(get_settings())


def get_wallet_client() -> WalletClient:
    return WalletClient(get_settings())


def get_vault_client() -> VaultClient:
    return VaultClient(get_settings())


def get_token_store(request: Request) -> TokenStore:
    """The app-scoped store created with the app (see server.app.state)."""
    return request.app.state.token_store
