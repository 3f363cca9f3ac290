"""
Pytest fixtures for CredScore tests. Uses a temporary SQLite DB for the score store
and fake upstream clients for the API.
"""

from __future__ import annotations

from datetime import datetime, timezone
from types import SimpleNamespace

import pytest

# Fixed clock: the sample profile is exactly 2192 days old (six years incl. two leap days)
NOW = datetime(2024, 10, 10, 20, 19, 24, tzinfo=timezone.utc)


class FakeSocialClient:
    def __init__(self, profile=None, error=None):
        self.profile = profile if profile is not None else {}
        self.error = error
        self.calls: list[str] = []

    def fetch_social_profile(self, username):
        self.calls.append(username)
        if self.error is not None:
            raise self.error
        return self.profile


class FakeWalletClient:
    def __init__(self, summary=None, error=None):
        self.summary = summary if summary is not None else {}
        self.error = error
        self.calls: list[str] = []

    def fetch_wallet_summary(self, address):
        self.calls.append(address)
        if self.error is not None:
            raise self.error
        return self.summary


class FakeVaultClient:
    def __init__(self, groups=None, messages=None, error=None):
        self.groups = groups if groups is not None else []
        self.messages = messages if messages is not None else []
        self.error = error
        self.tokens: list[str] = []

    def fetch_vault_groups(self, auth_token):
        self.tokens.append(auth_token)
        if self.error is not None:
            raise self.error
        return self.groups

    def fetch_vault_messages(self, auth_token):
        self.tokens.append(auth_token)
        if self.error is not None:
            raise self.error
        return self.messages


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def social_payload():
    """Verified account since Oct 2018 with moderate activity."""
    return {
        "result": {
            "is_blue_verified": True,
            "super_follow_eligible": False,
            "creator_subscriptions_count": 0,
            "legacy": {
                "created_at": "Wed Oct 10 20:19:24 +0000 2018",
                "followers_count": 12000,
                "favourites_count": 3400,
                "media_count": 150,
                "listed_count": 40,
                "statuses_count": 5200,
                "friends_count": 1100,
                "retweet_count": 600,
                "quote_count": 20,
                "reply_count": 80,
                "pinned_tweet_ids_str": ["1780000000000000000"],
            },
        }
    }


@pytest.fixture
def wallet_payload():
    return {
        "Native Balance Result": 1.5,
        "Token Balances Result": [{"token_address": f"0x{i:040x}", "balance": "1"} for i in range(6)],
        "Active Chains Result": {"activeChains": [{"chain": "eth"}, {"chain": "polygon"}]},
        "DeFi Positions Summary Result": [{"protocol": f"p{i}"} for i in range(5)],
        "Resolved Address Result": "vitalik.eth",
        "Wallet NFTs Result": [{"token_id": "1"}, {"token_id": "2"}, {"token_id": "3"}],
        "Transaction Count": 250,
        "Unique Token Interactions": 6,
    }


@pytest.fixture
def vault_groups():
    return [
        {"sourceData": {"permissions": {"can_send_polls": True, "can_pin_messages": True}}},
        {"sourceData": {"permissions": {"can_send_polls": False, "can_pin_messages": False}}},
        {"sourceData": {}},
    ]


@pytest.fixture
def vault_messages():
    return [
        {"sourceData": {"is_pinned": True, "content": {"_": "messagePhoto", "caption": {"entities": [
            {"type": {"_": "textEntityTypeHashtag"}},
            {"type": {"_": "textEntityTypeHashtag"}},
        ]}}}},
        {"sourceData": {"content": {"_": "messageSticker"}, "via_bot_user_id": 93372553}},
        {"sourceData": {"content": {"_": "messageAnimation"}, "via_bot_user_id": 0}},
        {"sourceData": {"content": {"_": "messageText", "entities": [
            {"type": {"_": "textEntityTypeMention"}},
            {"type": {"_": "textEntityTypeUrl"}},
        ]}}},
    ]


@pytest.fixture
def score_db(tmp_path, monkeypatch):
    """
    Point the score store at a temporary SQLite DB and create tables.
    Resets engine and settings caches so each test gets a fresh DB. Unset DB URLs so we use SQLite.
    """
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.delenv("CREDSCORE_DB_URL", raising=False)
    monkeypatch.setenv("CREDSCORE_DB_PATH", str(tmp_path / "credscore.db"))

    from backend_credscore.config import reset_settings_cache
    import backend_credscore.database.score_store as store

    reset_settings_cache()
    store.reset_engine_for_test()
    store.init_db()
    yield store
    store.reset_engine_for_test()
    reset_settings_cache()


@pytest.fixture
def fakes():
    from backend_credscore.collectors import InMemoryTokenStore

    return SimpleNamespace(
        social=FakeSocialClient(),
        wallet=FakeWalletClient(),
        vault=FakeVaultClient(),
        store=InMemoryTokenStore(ttl_sec=60),
    )


@pytest.fixture
def client(score_db, fakes):
    """FastAPI TestClient with upstream clients and token store replaced by fakes."""
    from fastapi.testclient import TestClient

    from backend_credscore.api_server import dependencies
    from backend_credscore.api_server.server import app

    app.dependency_overrides[dependencies.get_social_client] = lambda: fakes.social
    app.dependency_overrides[dependencies.get_wallet_client] = lambda: fakes.wallet
    app.dependency_overrides[dependencies.get_vault_client] = lambda: fakes.vault
    app.dependency_overrides[dependencies.get_token_store] = lambda: fakes.store
    yield TestClient(app)
    app.dependency_overrides.clear()
