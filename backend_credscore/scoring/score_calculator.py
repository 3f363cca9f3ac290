"""
Weighted score calculator: NormalizedMetrics -> ScoreBreakdown.

Five category scores, each a fixed linear combination of metrics and named
weights. Category scores are reported uncapped; the total sums each category
clipped to its cap (social 50, crypto 40, nft 30, community 20, vault 15).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from backend_credscore.scoring.normalizer import NormalizedMetrics
from backend_credscore.scoring.tables import DEFAULT_TABLES, ScoringTables


@dataclass(frozen=True)
class ScoreBreakdown:
    social_score: float = 0.0
    crypto_score: float = 0.0
    nft_score: float = 0.0
    community_score: float = 0.0
    vault_score: float = 0.0
    total_score: float = 0.0

    def to_dict(self) -> dict[str, float]:
        """API / storage shape (camelCase keys)."""
        return {
            "socialScore": self.social_score,
            "cryptoScore": self.crypto_score,
            "nftScore": self.nft_score,
            "communityScore": self.community_score,
            "vaultScore": self.vault_score,
            "totalScore": self.total_score,
        }

    @classmethod
    def zero(cls) -> "ScoreBreakdown":
        return cls()


def social_score(m: NormalizedMetrics, t: ScoringTables = DEFAULT_TABLES) -> float:
    w = t.weight
    return (
        m.followers * w("followers")
        + m.engagement * w("engagement")
        + (w("verification") if m.blue_verified else 0)
        + m.statuses * w("tweet_freq")
        + m.subscriptions * w("subscriptions")
        + m.account_age_years * w("account_age")
        + m.media * w("media")
        + (w("pinned") if m.has_pinned_tweet else 0)
        + m.friends * w("friends")
        + m.listed * w("listed")
        + (w("super_follow") if m.super_follow_eligible else 0)
        + m.retweets * w("retweets")
        + m.quotes * w("quotes")
        + m.replies * w("replies")
    )


def crypto_score(m: NormalizedMetrics, t: ScoringTables = DEFAULT_TABLES) -> float:
    w = t.weight
    return (
        m.active_chain_count * w("active_chains")
        + m.native_balance * w("native_balance")
        + m.token_count * w("token_holdings")
        + m.defi_position_count * w("defi_positions")
        + (w("web3_domains") if m.resolved_domain else 0)
        + m.transaction_count * w("transaction_count")
        + m.unique_token_interactions * w("unique_token_interactions")
    )


def nft_score(m: NormalizedMetrics, t: ScoringTables = DEFAULT_TABLES) -> float:
    return m.nft_count * t.weight("nft_holdings")


def community_score(m: NormalizedMetrics, t: ScoringTables = DEFAULT_TABLES) -> float:
    return m.subscriptions * t.weight("subscriptions") + m.group_count * t.weight("group_count")


def vault_score(m: NormalizedMetrics, t: ScoringTables = DEFAULT_TABLES) -> float:
    w = t.weight
    return (
        m.group_count * w("group_count")
        + m.message_count * w("message_freq")
        + m.pinned_message_count * w("pinned_messages")
        + m.photo_message_count * w("media_messages")
        + m.hashtag_count * w("hashtags")
        + (w("polls") if m.polls_allowed else 0)
        + (w("leadership") if m.pinning_allowed else 0)
        + m.bot_message_count * w("bot_interactions")
        + m.sticker_message_count * w("sticker_messages")
        + m.gif_message_count * w("gif_messages")
        + m.mention_count * w("mention_count")
    )


def capped_total(categories: dict[str, float], t: ScoringTables = DEFAULT_TABLES) -> float:
    """Sum of each category clipped to [0, cap]."""
    return sum(max(0.0, min(value, t.cap(name))) for name, value in categories.items())


def compute_scores(metrics: NormalizedMetrics, tables: ScoringTables = DEFAULT_TABLES) -> ScoreBreakdown:
    """Compute all five category scores and the capped total."""
    categories = {
        "social": social_score(metrics, tables),
        "crypto": crypto_score(metrics, tables),
        "nft": nft_score(metrics, tables),
        "community": community_score(metrics, tables),
        "vault": vault_score(metrics, tables),
    }
    return ScoreBreakdown(
        social_score=categories["social"],
        crypto_score=categories["crypto"],
        nft_score=categories["nft"],
        community_score=categories["community"],
        vault_score=categories["vault"],
        total_score=capped_total(categories, tables),
    )


def breakdown_from_dict(data: dict[str, Any]) -> ScoreBreakdown:
    """Inverse of ScoreBreakdown.to_dict for stored records; missing keys are 0."""
    return ScoreBreakdown(
        social_score=float(data.get("socialScore") or 0),
        crypto_score=float(data.get("cryptoScore") or 0),
        nft_score=float(data.get("nftScore") or 0),
        community_score=float(data.get("communityScore") or 0),
        vault_score=float(data.get("vaultScore") or 0),
        total_score=float(data.get("totalScore") or 0),
    )
