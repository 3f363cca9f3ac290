"""Persistence of evaluations, wallet scores and wallet links (SQLAlchemy)."""

from backend_credscore.database.score_store import (
    CONNECTED_WALLET_SCORE,
    DEFAULT_ADDITIONAL_WALLET_SCORE,
    connect_wallet,
    disconnect_wallet,
    get_total_score,
    get_wallet_status,
    init_db,
    persist_evaluation,
    reset_engine_for_test,
)

__all__ = [
    "CONNECTED_WALLET_SCORE",
    "DEFAULT_ADDITIONAL_WALLET_SCORE",
    "connect_wallet",
    "disconnect_wallet",
    "get_total_score",
    "get_wallet_status",
    "init_db",
    "persist_evaluation",
    "reset_engine_for_test",
]
