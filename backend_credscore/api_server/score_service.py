"""
Score service: collect the three sources, evaluate, persist.

Collector failures are logged and scored as empty input; the sources that
failed are reported back so the caller can surface them. A persistence failure
is logged and the computed result is still returned.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Iterable

from backend_credscore.collectors import SocialClient, VaultClient, WalletClient, empty_wallet_summary
from backend_credscore.core.exceptions import CollectorError, PersistenceError
from backend_credscore.credscore_logging import get_logger
from backend_credscore.database import persist_evaluation
from backend_credscore.scoring import EvaluationResult, evaluate

logger = get_logger(__name__)

SOURCE_SOCIAL = "social"
SOURCE_WALLET = "wallet"
SOURCE_VAULT_GROUPS = "vault_groups"
SOURCE_VAULT_MESSAGES = "vault_messages"


@dataclass
class EvaluationOutcome:
    result: EvaluationResult
    wallet_count: int = 0
    failed_sources: list[str] = field(default_factory=list)
    persisted: bool = False

    def to_response(self, user_key: str) -> dict[str, Any]:
        data = self.result.to_dict()
        return {
            "success": True,
            "userKey": user_key,
            "title": data["title"],
            "badges": data["badges"],
            "scores": data["scores"],
            "walletCount": self.wallet_count,
            "failedSources": list(self.failed_sources),
        }


def resolve_wallets(wallet_address: str | None, wallet_addresses: Iterable[str] | None) -> tuple[str | None, list[str]]:
    """
    Return (primary, linked). The explicit address is primary; otherwise the first
    linked one. Linked wallets keep request order with blanks and repeats dropped.
    """
    linked: list[str] = []
    for w in [wallet_address, *(wallet_addresses or [])]:
        w = (w or "").strip()
        if w and w not in linked:
            linked.append(w)
    primary = (wallet_address or "").strip() or (linked[0] if linked else None)
    return primary, linked


def collect_and_evaluate(
    user_key: str,
    *,
    social_client: SocialClient,
    wallet_client: WalletClient,
    vault_client: VaultClient,
    username: str | None = None,
    wallet_address: str | None = None,
    wallet_addresses: Iterable[str] | None = None,
    email: str | None = None,
    vault_token: str | None = None,
    now: datetime | None = None,
    persist: bool = True,
) -> EvaluationOutcome:
    """
    Fetch social profile, wallet summary and vault data for one user, evaluate and store.

    A source the user did not connect (no username, no wallet, no vault token) is
    skipped and scored as empty; it is not counted as failed.
    """
    failed: list[str] = []
    primary, linked = resolve_wallets(wallet_address, wallet_addresses)

    social: dict[str, Any] = {}
    if (username or "").strip():
        try:
            social = social_client.fetch_social_profile(username)
        except CollectorError as e:
            failed.append(SOURCE_SOCIAL)
            logger.warning("social_fetch_failed", user_key=user_key, error=str(e))

    wallet: dict[str, Any] = empty_wallet_summary()
    if primary:
        try:
            wallet = wallet_client.fetch_wallet_summary(primary)
        except CollectorError as e:
            failed.append(SOURCE_WALLET)
            logger.warning("wallet_fetch_failed", user_key=user_key, wallet=primary[:16] + "...", error=str(e))

    groups: list[Any] = []
    messages: list[Any] = []
    if vault_token:
        try:
            groups = vault_client.fetch_vault_groups(vault_token)
        except CollectorError as e:
            failed.append(SOURCE_VAULT_GROUPS)
            logger.warning("vault_groups_fetch_failed", user_key=user_key, error=str(e))
        try:
            messages = vault_client.fetch_vault_messages(vault_token)
        except CollectorError as e:
            failed.append(SOURCE_VAULT_MESSAGES)
            logger.warning("vault_messages_fetch_failed", user_key=user_key, error=str(e))

    result = evaluate(social, wallet, groups, messages, now=now)
    outcome = EvaluationOutcome(result=result, wallet_count=len(linked), failed_sources=failed)

    if persist:
        try:
            persist_evaluation(
                user_key,
                result,
                username=username,
                email=email,
                wallets=linked,
                primary_wallet=primary,
                vault_connected=bool(vault_token),
            )
            outcome.persisted = True
        except PersistenceError as e:
            logger.error("score_persist_failed", user_key=user_key, error=str(e))

    logger.info(
        "score_evaluated",
        user_key=user_key,
        title=result.title,
        badge_count=len(result.badges),
        failed_sources=failed,
        persisted=outcome.persisted,
    )
    return outcome
