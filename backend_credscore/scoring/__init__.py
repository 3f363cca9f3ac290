"""
Scoring engine: normalization, weighted scores, badges and titles.

Pure and synchronous: no network, file or environment access. Consumes raw
social, wallet and vault payloads and produces an EvaluationResult.
"""

from backend_credscore.scoring.badge_assigner import (
    BadgeAward,
    assign_badges,
    badge_tier,
)
from backend_credscore.scoring.evaluator import EvaluationResult, evaluate
from backend_credscore.scoring.normalizer import NormalizedMetrics, normalize
from backend_credscore.scoring.score_calculator import ScoreBreakdown, compute_scores
from backend_credscore.scoring.tables import DEFAULT_TABLES, FALLBACK_TITLE, ScoringTables
from backend_credscore.scoring.title_selector import select_title

__all__ = [
    "BadgeAward",
    "assign_badges",
    "badge_tier",
    "EvaluationResult",
    "evaluate",
    "NormalizedMetrics",
    "normalize",
    "ScoreBreakdown",
    "compute_scores",
    "DEFAULT_TABLES",
    "FALLBACK_TITLE",
    "ScoringTables",
    "select_title",
]
