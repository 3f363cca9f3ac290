"""
CredScore score store: SQLAlchemy-backed per-user evaluations and wallet scores.

Also records which sources a user has connected and the wallet link lifecycle
(connect, disconnect, status). Uses CREDSCORE_DB_URL / DATABASE_URL when set;
otherwise falls back to SQLite (CREDSCORE_DB_PATH or credscore.db). The API
server is the only writer.
"""

from __future__ import annotations

import json
import time
from contextlib import contextmanager
from typing import Any, Iterable, Iterator

from sqlalchemy import Boolean, Column, Float, Integer, String, Text, UniqueConstraint, create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from backend_credscore.config.env import get_database_url
from backend_credscore.core.exceptions import PersistenceError
from backend_credscore.credscore_logging import get_logger
from backend_credscore.scoring.badge_assigner import badges_by_category, badges_to_dict
from backend_credscore.scoring.evaluator import EvaluationResult
from backend_credscore.scoring.score_calculator import breakdown_from_dict

logger = get_logger(__name__)

Base = declarative_base()

# Score given to a linked wallet that was never evaluated on its own
DEFAULT_ADDITIONAL_WALLET_SCORE = 10.0

# Score of a wallet linked through connect_wallet and not yet evaluated
CONNECTED_WALLET_SCORE = 0.0

# -----------------------------------------------------------------------------
# SQLAlchemy models
# -----------------------------------------------------------------------------


class ScoreRecord(Base):
    """Latest evaluation per user: one row per user key, overwritten on each evaluation."""

    __tablename__ = "score_records"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_key = Column(String(128), unique=True, nullable=False, index=True)
    username = Column(String(128), nullable=True)
    email = Column(String(256), nullable=True)
    wallet_address = Column(String(128), nullable=True)  # primary wallet while one is linked
    social_connected = Column(Boolean, nullable=False, default=False)
    wallet_connected = Column(Boolean, nullable=False, default=False)
    vault_connected = Column(Boolean, nullable=False, default=False)
    title = Column(String(64), nullable=False, default="")
    social_score = Column(Float, nullable=False, default=0.0)
    vault_score = Column(Float, nullable=False, default=0.0)
    community_score = Column(Float, nullable=False, default=0.0)
    total_score = Column(Float, nullable=False, default=0.0)
    badges_json = Column(Text, nullable=True)  # {"Badge Name": {"tier": ..., "value": ...}}
    scores_json = Column(Text, nullable=True)  # ScoreBreakdown.to_dict()
    updated_at = Column(Integer, nullable=False, index=True)  # Unix seconds

    def to_dict(self) -> dict[str, Any]:
        return {
            "user_key": self.user_key,
            "username": self.username or "",
            "email": self.email or "",
            "wallet_address": self.wallet_address,
            "connections": {
                "social": bool(self.social_connected),
                "wallet": bool(self.wallet_connected),
                "vault": bool(self.vault_connected),
            },
            "title": self.title or "",
            "social_score": self.social_score,
            "vault_score": self.vault_score,
            "community_score": self.community_score,
            "total_score": self.total_score,
            "badges": json.loads(self.badges_json) if self.badges_json else {},
            "scores": json.loads(self.scores_json) if self.scores_json else {},
            "updated_at": self.updated_at,
        }


class WalletScore(Base):
    """Score attributed to one wallet linked to a user."""

    __tablename__ = "wallet_scores"
    __table_args__ = (UniqueConstraint("user_key", "wallet", name="uq_wallet_scores_user_wallet"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_key = Column(String(128), nullable=False, index=True)
    wallet = Column(String(128), nullable=False)
    score = Column(Float, nullable=False, default=0.0)
    updated_at = Column(Integer, nullable=False)


# -----------------------------------------------------------------------------
# Engine and session
# -----------------------------------------------------------------------------

_engine = None
_SessionLocal: sessionmaker | None = None


def _safe_url(url: str) -> str:
    return url.split("?")[0].split("//")[-1].split("@")[-1]


def _get_engine():
    """Create or return the cached engine; tables are created on first use."""
    global _engine
    if _engine is None:
        url = get_database_url()
        connect_args = {}
        if url.startswith("sqlite"):
            connect_args["check_same_thread"] = False
        _engine = create_engine(url, connect_args=connect_args, pool_pre_ping=True)
        Base.metadata.create_all(bind=_engine)
        logger.info("score_store_engine", url=_safe_url(url))
    return _engine


def _get_session_factory() -> sessionmaker:
    global _SessionLocal
    if _SessionLocal is None:
        _SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=_get_engine())
    return _SessionLocal


@contextmanager
def _session_scope() -> Iterator[Session]:
    """Context manager for a single session. Commits on success, rolls back on error."""
    factory = _get_session_factory()
    session = factory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def init_db() -> None:
    """Create score tables if they do not exist. Safe to call on every startup."""
    try:
        engine = _get_engine()
        Base.metadata.create_all(bind=engine)
        logger.info("score_store_init_db", url=_safe_url(get_database_url()))
    except SQLAlchemyError as e:
        logger.exception("score_store_init_db_failed", error=str(e))
        raise PersistenceError(f"init_db failed: {e}") from e


def reset_engine_for_test() -> None:
    """Drop the cached engine and session factory. For tests only; set a new CREDSCORE_DB_PATH first."""
    global _engine, _SessionLocal
    if _engine is not None:
        _engine.dispose()
    _engine = None
    _SessionLocal = None


# -----------------------------------------------------------------------------
# Public API
# -----------------------------------------------------------------------------


def _clean_wallets(wallets: Iterable[str] | None, primary_wallet: str | None) -> list[str]:
    """Primary first, then the rest in order; blanks and duplicates dropped."""
    seen: set[str] = set()
    out: list[str] = []
    for w in [primary_wallet, *(wallets or [])]:
        w = (w or "").strip()
        if w and w not in seen:
            seen.add(w)
            out.append(w)
    return out


def _new_record(user_key: str, now: int) -> ScoreRecord:
    return ScoreRecord(
        user_key=user_key,
        title="",
        social_connected=False,
        wallet_connected=False,
        vault_connected=False,
        social_score=0.0,
        vault_score=0.0,
        community_score=0.0,
        total_score=0.0,
        updated_at=now,
    )


def _wallet_rows(session: Session, user_key: str) -> list[WalletScore]:
    return (
        session.query(WalletScore)
        .filter(WalletScore.user_key == user_key)
        .order_by(WalletScore.id)
        .all()
    )


def _stored_total(record: ScoreRecord, wallet_rows: Iterable[WalletScore]) -> float:
    """social + vault + the sum of linked wallet scores."""
    return (record.social_score or 0.0) + (record.vault_score or 0.0) + sum(w.score for w in wallet_rows)


def _wallet_status(record: ScoreRecord, wallet_rows: Iterable[WalletScore]) -> dict[str, Any]:
    return {
        "userKey": record.user_key,
        "walletConnected": bool(record.wallet_connected),
        "walletAddress": record.wallet_address,
        "wallets": [{"wallet": w.wallet, "score": w.score} for w in wallet_rows],
        "totalScore": record.total_score,
    }


def persist_evaluation(
    user_key: str,
    result: EvaluationResult,
    *,
    username: str | None = None,
    email: str | None = None,
    wallets: Iterable[str] | None = None,
    primary_wallet: str | None = None,
    vault_connected: bool = False,
) -> dict[str, Any]:
    """
    Upsert the user's evaluation and wallet scores; return the stored record as dict.

    The primary wallet is scored crypto + nft from this evaluation. Other linked
    wallets keep their stored score, or get DEFAULT_ADDITIONAL_WALLET_SCORE when
    first seen. The stored total is social + vault + the sum of wallet scores.
    A source supplied to this evaluation (username, wallets, vault) is marked
    connected; connection flags are never cleared here.

    Raises:
        ValueError: user_key is empty.
        PersistenceError: the database write failed.
    """
    user_key = (user_key or "").strip()
    if not user_key:
        raise ValueError("user_key is required")
    primary = (primary_wallet or "").strip() or None
    linked = _clean_wallets(wallets, primary)
    scores = result.scores
    now = int(time.time())

    try:
        with _session_scope() as session:
            existing = {row.wallet: row for row in _wallet_rows(session, user_key)}
            for wallet in linked:
                row = existing.get(wallet)
                if wallet == primary:
                    score = scores.crypto_score + scores.nft_score
                elif row is not None:
                    continue
                else:
                    score = DEFAULT_ADDITIONAL_WALLET_SCORE
                if row is None:
                    row = WalletScore(user_key=user_key, wallet=wallet, score=score, updated_at=now)
                    session.add(row)
                    existing[wallet] = row
                else:
                    row.score = score
                    row.updated_at = now

            record = session.query(ScoreRecord).filter(ScoreRecord.user_key == user_key).first()
            if record is None:
                record = _new_record(user_key, now)
                session.add(record)
            if username and username.strip():
                record.username = username.strip()
                record.social_connected = True
            if email and email.strip():
                record.email = email.strip()
            if linked:
                record.wallet_connected = True
                record.wallet_address = primary or linked[0]
            if vault_connected:
                record.vault_connected = True
            record.title = result.title
            record.social_score = scores.social_score
            record.vault_score = scores.vault_score
            record.community_score = scores.community_score
            record.total_score = _stored_total(record, existing.values())
            record.badges_json = json.dumps(badges_to_dict(result.badges))
            record.scores_json = json.dumps(scores.to_dict())
            record.updated_at = now
            session.flush()
            stored = record.to_dict()
    except SQLAlchemyError as e:
        logger.exception("score_persist_db_error", user_key=user_key, error=str(e))
        raise PersistenceError(f"persist_evaluation failed for {user_key}: {e}") from e

    logger.info(
        "score_persisted",
        user_key=user_key,
        wallets=len(linked),
        total_score=round(stored["total_score"], 4),
    )
    return stored


def get_total_score(user_key: str) -> dict[str, Any]:
    """
    Return stored totals for a user:
    {totalScore, socialScore, vaultScore, walletScores, badges, socialBadges,
    walletBadges, vaultBadges, connections, walletAddress, title, scores}.
    Unknown user gives zeros, no wallets, no badges, nothing connected and an empty title.
    """
    user_key = (user_key or "").strip()
    try:
        with _session_scope() as session:
            record = session.query(ScoreRecord).filter(ScoreRecord.user_key == user_key).first()
            if record is None:
                data = _new_record(user_key, 0).to_dict()
                wallet_rows: list[WalletScore] = []
            else:
                data = record.to_dict()
                wallet_rows = _wallet_rows(session, user_key)
            badges = list(data["badges"])
            grouped = badges_by_category(badges)
            return {
                "totalScore": data["total_score"],
                "socialScore": data["social_score"],
                "vaultScore": data["vault_score"],
                "walletScores": [{"wallet": w.wallet, "score": w.score} for w in wallet_rows],
                "badges": badges,
                "socialBadges": grouped["social"],
                "walletBadges": grouped["wallet"],
                "vaultBadges": grouped["vault"],
                "connections": data["connections"],
                "walletAddress": data["wallet_address"],
                "title": data["title"],
                "scores": breakdown_from_dict(data["scores"]).to_dict(),
            }
    except SQLAlchemyError as e:
        logger.exception("score_total_db_error", user_key=user_key, error=str(e))
        raise PersistenceError(f"get_total_score failed for {user_key}: {e}") from e


def connect_wallet(
    user_key: str,
    wallet_address: str,
    wallet_addresses: Iterable[str] | None = None,
) -> dict[str, Any]:
    """
    Link one or more wallets to a user (creating the user record if needed).

    Newly linked wallets are stored with CONNECTED_WALLET_SCORE until an
    evaluation scores them; already linked wallets keep their score. The given
    wallet_address becomes the user's primary wallet.

    Raises:
        ValueError: user_key or wallet_address is empty.
        PersistenceError: the database write failed.
    """
    user_key = (user_key or "").strip()
    primary = (wallet_address or "").strip()
    if not user_key or not primary:
        raise ValueError("user_key and wallet_address are required")
    linked = _clean_wallets(wallet_addresses, primary)
    now = int(time.time())

    try:
        with _session_scope() as session:
            record = session.query(ScoreRecord).filter(ScoreRecord.user_key == user_key).first()
            if record is None:
                record = _new_record(user_key, now)
                session.add(record)
            known = {row.wallet for row in _wallet_rows(session, user_key)}
            added = 0
            for wallet in linked:
                if wallet not in known:
                    session.add(
                        WalletScore(user_key=user_key, wallet=wallet, score=CONNECTED_WALLET_SCORE, updated_at=now)
                    )
                    added += 1
            session.flush()
            rows = _wallet_rows(session, user_key)
            record.wallet_connected = True
            record.wallet_address = primary
            record.total_score = _stored_total(record, rows)
            record.updated_at = now
            session.flush()
            status = _wallet_status(record, rows)
    except SQLAlchemyError as e:
        logger.exception("wallet_connect_db_error", user_key=user_key, error=str(e))
        raise PersistenceError(f"connect_wallet failed for {user_key}: {e}") from e

    logger.info("wallet_connected", user_key=user_key, wallet=primary, added=added, linked=len(status["wallets"]))
    return status


def disconnect_wallet(user_key: str, wallet_address: str | None = None) -> dict[str, Any] | None:
    """
    Unlink one wallet, or every wallet when wallet_address is not given, and
    recompute the stored total without it. Returns None for an unknown user.

    The user stays wallet-connected while any linked wallet remains; the primary
    moves to the oldest remaining wallet when the primary itself is removed.
    """
    user_key = (user_key or "").strip()
    target = (wallet_address or "").strip() or None
    now = int(time.time())

    try:
        with _session_scope() as session:
            record = session.query(ScoreRecord).filter(ScoreRecord.user_key == user_key).first()
            if record is None:
                return None
            removed = 0
            for row in _wallet_rows(session, user_key):
                if target is None or row.wallet == target:
                    session.delete(row)
                    removed += 1
            session.flush()
            remaining = _wallet_rows(session, user_key)
            remaining_wallets = [row.wallet for row in remaining]
            if record.wallet_address not in remaining_wallets:
                record.wallet_address = remaining_wallets[0] if remaining_wallets else None
            record.wallet_connected = bool(remaining_wallets)
            record.total_score = _stored_total(record, remaining)
            record.updated_at = now
            session.flush()
            status = _wallet_status(record, remaining)
    except SQLAlchemyError as e:
        logger.exception("wallet_disconnect_db_error", user_key=user_key, error=str(e))
        raise PersistenceError(f"disconnect_wallet failed for {user_key}: {e}") from e

    logger.info("wallet_disconnected", user_key=user_key, removed=removed, remaining=len(status["wallets"]))
    return status


def get_wallet_status(user_key: str) -> dict[str, Any] | None:
    """{userKey, walletConnected, walletAddress, wallets, totalScore}, or None for an unknown user."""
    user_key = (user_key or "").strip()
    try:
        with _session_scope() as session:
            record = session.query(ScoreRecord).filter(ScoreRecord.user_key == user_key).first()
            if record is None:
                return None
            return _wallet_status(record, _wallet_rows(session, user_key))
    except SQLAlchemyError as e:
        logger.exception("wallet_status_db_error", user_key=user_key, error=str(e))
        raise PersistenceError(f"get_wallet_status failed for {user_key}: {e}") from e
