"""
Evaluation orchestrator: raw sources -> title, badges, scores.

normalize -> (compute_scores, assign_badges) on the same metrics -> select_title.
Never raises: an unexpected failure is logged and the safe default result
(fallback title, no badges, all scores 0) is returned instead.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from backend_credscore.credscore_logging import get_logger
from backend_credscore.scoring.badge_assigner import BadgeAward, assign_badges, badges_to_dict
from backend_credscore.scoring.normalizer import normalize
from backend_credscore.scoring.score_calculator import ScoreBreakdown, compute_scores
from backend_credscore.scoring.tables import DEFAULT_TABLES, ScoringTables
from backend_credscore.scoring.title_selector import select_title

logger = get_logger(__name__)


@dataclass(frozen=True)
class EvaluationResult:
    title: str
    badges: dict[str, BadgeAward] = field(default_factory=dict)
    scores: ScoreBreakdown = field(default_factory=ScoreBreakdown.zero)

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "badges": badges_to_dict(self.badges),
            "scores": self.scores.to_dict(),
        }

    @property
    def badge_names(self) -> list[str]:
        return list(self.badges)

    @classmethod
    def safe_default(cls, tables: ScoringTables = DEFAULT_TABLES) -> "EvaluationResult":
        return cls(title=tables.fallback_title, badges={}, scores=ScoreBreakdown.zero())


def evaluate(
    social: Any,
    wallet: Any,
    vault_groups: Any,
    vault_messages: Any,
    *,
    now: datetime | None = None,
    tables: ScoringTables | None = None,
) -> EvaluationResult:
    """
    Evaluate one user from the three raw sources.

    Args:
        social: Social profile payload (missing/empty allowed).
        wallet: Wallet summary payload (missing/empty allowed).
        vault_groups: Vault chat groups.
        vault_messages: Vault chat messages.
        now: Clock reference for account age; read once from UTC when omitted.
        tables: Scoring tables; DEFAULT_TABLES when omitted.

    Returns:
        EvaluationResult. Identical inputs and now give identical results.
    """
    tables = tables or DEFAULT_TABLES
    if now is None:
        now = datetime.now(timezone.utc)
    try:
        metrics = normalize(social, wallet, vault_groups, vault_messages, now=now)
        scores = compute_scores(metrics, tables)
        badges = assign_badges(metrics, tables)
        title = select_title(badges, tables)
    except Exception as e:
        logger.exception("evaluation_failed", error=str(e))
        return EvaluationResult.safe_default(tables)

    logger.debug(
        "evaluation_done",
        title=title,
        badge_count=len(badges),
        total_score=round(scores.total_score, 4),
    )
    return EvaluationResult(title=title, badges=badges, scores=scores)
