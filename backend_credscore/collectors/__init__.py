"""
Collectors: upstream data sources for the scoring engine.

Social profile (Twitter via RapidAPI), wallet summary (Moralis) and data-vault
chat history (Verida), plus the vault auth token store. Retries, timeouts and
credentials live here; the scoring engine only sees the payloads.
"""

from backend_credscore.collectors.social_client import SocialClient
from backend_credscore.collectors.token_store import InMemoryTokenStore, TokenStore
from backend_credscore.collectors.vault_client import VaultClient
from backend_credscore.collectors.wallet_client import WalletClient, empty_wallet_summary

__all__ = [
    "SocialClient",
    "InMemoryTokenStore",
    "TokenStore",
    "VaultClient",
    "WalletClient",
    "empty_wallet_summary",
]
