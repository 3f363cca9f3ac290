"""
Badge assigner: NormalizedMetrics -> {badge name: BadgeAward}.

Each badge reads one metric (or a simple derived value) and is tiered against its
(silver, gold, platinum) thresholds. Badges are computed one at a time: a failure
in one value function is logged and leaves that badge out, the rest continue.
Only awarded badges appear in the result.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Iterable, Mapping, Sequence

from backend_credscore.credscore_logging import get_logger
from backend_credscore.scoring.normalizer import NormalizedMetrics
from backend_credscore.scoring.tables import (
    DEFAULT_TABLES,
    TIER_GOLD,
    TIER_PLATINUM,
    TIER_SILVER,
    ScoringTables,
)

logger = get_logger(__name__)

ValueFn = Callable[[NormalizedMetrics, ScoringTables], float]

CATEGORY_SOCIAL = "social"
CATEGORY_WALLET = "wallet"
CATEGORY_VAULT = "vault"


@dataclass(frozen=True)
class BadgeAward:
    tier: str
    value: float

    def to_dict(self) -> dict[str, Any]:
        return {"tier": self.tier, "value": self.value}


def badge_tier(value: float, thresholds: Sequence[float]) -> str | None:
    """
    Highest tier whose threshold value reaches (inclusive), or None below silver.

    >>> badge_tier(49, (10, 50, 100))
    'Silver'
    """
    silver, gold, platinum = thresholds
    if value >= platinum:
        return TIER_PLATINUM
    if value >= gold:
        return TIER_GOLD
    if value >= silver:
        return TIER_SILVER
    return None


def _flag(value: bool) -> float:
    return 1.0 if value else 0.0


def _fast_grower(m: NormalizedMetrics, t: ScoringTables) -> float:
    return m.followers / max(m.account_age_years, 1.0)


def _telegram_titan(m: NormalizedMetrics, t: ScoringTables) -> float:
    return m.message_count + (t.poll_permission_bonus if m.polls_allowed else 0)


def _governance_griot(m: NormalizedMetrics, t: ScoringTables) -> float:
    return _flag(m.polls_allowed) + _flag(m.pinning_allowed)


SOCIAL_BADGES: Mapping[str, ValueFn] = {
    "Influence Investor": lambda m, t: m.followers,
    "Tweet Trader": lambda m, t: m.statuses / 100,
    "Engagement Economist": lambda m, t: m.favourites,
    "Media Mogul": lambda m, t: m.media,
    "List Legend": lambda m, t: m.listed,
    "Verified Visionary": lambda m, t: _flag(m.blue_verified),
    "Pinned Post Pro": lambda m, t: _flag(m.has_pinned_tweet),
    "Super Follower": lambda m, t: _flag(m.super_follow_eligible),
    "Creator Subscriber": lambda m, t: m.subscriptions,
    "Twitter Veteran": lambda m, t: m.account_age_years,
    "Retweet Riches": lambda m, t: m.retweets,
    "Crypto Communicator": lambda m, t: m.statuses / 100,
    "Social Connector": lambda m, t: m.friends,
    "Engagement Star": lambda m, t: m.favourites + m.retweets,
    "Fast Grower": _fast_grower,
    "Viral Validator": lambda m, t: m.retweets,
}

WALLET_BADGES: Mapping[str, ValueFn] = {
    "Chain Explorer": lambda m, t: m.active_chain_count,
    "Token Holder": lambda m, t: m.token_count,
    "NFT Networker": lambda m, t: m.nft_count,
    "DeFi Drifter": lambda m, t: m.defi_position_count,
    "Gas Spender": lambda m, t: m.gas_spent,
    "Staking Veteran": lambda m, t: m.staking_positions,
    "Airdrop Veteran": lambda m, t: m.airdrops,
    "DAO Diplomat": lambda m, t: m.dao_votes,
    "Web3 Domain Owner": lambda m, t: _flag(m.resolved_domain),
    "Degen Dualist": lambda m, t: m.transaction_count,
    "Transaction Titan": lambda m, t: m.transaction_count,
    "Token Interactor": lambda m, t: m.unique_token_interactions,
    "NFT Whale": lambda m, t: m.nft_count,
    "DeFi Master": lambda m, t: m.defi_position_count,
    "Bridge Blazer": lambda m, t: m.active_chain_count,
    "Social HODLer": lambda m, t: m.native_balance,
    # Same value as DeFi Master / DeFi Drifter; kept as a separate badge
    "Liquidity Laureate": lambda m, t: m.defi_position_count,
}

VAULT_BADGES: Mapping[str, ValueFn] = {
    "Group Guru": lambda m, t: m.group_count,
    "Message Maestro": lambda m, t: m.message_count,
    "Pinned Message Master": lambda m, t: m.pinned_message_count,
    "Media Messenger": lambda m, t: m.photo_message_count,
    "Hashtag Hero": lambda m, t: m.hashtag_count,
    "Poll Creator": lambda m, t: _flag(m.polls_allowed),
    "Community Leader": lambda m, t: m.pin_permission_group_count,
    "Bot Interactor": lambda m, t: m.bot_message_count,
    "Sticker Star": lambda m, t: m.sticker_message_count,
    "GIF Guru": lambda m, t: m.gif_message_count,
    "Mention Magnet": lambda m, t: m.mention_count,
    "Telegram Titan": _telegram_titan,
    "Governance Griot": _governance_griot,
    # Same value as Bot Interactor; kept as a separate badge
    "Dapp Diplomat": lambda m, t: m.bot_message_count,
}

BADGE_CATEGORIES: Mapping[str, Mapping[str, ValueFn]] = {
    CATEGORY_SOCIAL: SOCIAL_BADGES,
    CATEGORY_WALLET: WALLET_BADGES,
    CATEGORY_VAULT: VAULT_BADGES,
}


def badge_names(category: str) -> tuple[str, ...]:
    """Badge names of one category (social, wallet, vault), in evaluation order."""
    return tuple(BADGE_CATEGORIES[category])


def badges_by_category(names: Iterable[str]) -> dict[str, list[str]]:
    """Split awarded badge names into {social, wallet, vault}; unknown names are dropped."""
    awarded = set(names)
    return {
        category: [name for name in badge_names(category) if name in awarded]
        for category in BADGE_CATEGORIES
    }


def _evaluate_badge(
    name: str,
    value_fn: ValueFn,
    metrics: NormalizedMetrics,
    tables: ScoringTables,
) -> BadgeAward | None:
    thresholds = tables.badge_thresholds.get(name)
    if thresholds is None:
        return None
    try:
        value = float(value_fn(metrics, tables))
        tier = badge_tier(value, thresholds)
    except Exception as e:
        logger.warning("badge_value_failed", badge=name, error=str(e))
        return None
    if tier is None:
        return None
    return BadgeAward(tier=tier, value=value)


def assign_badges(
    metrics: NormalizedMetrics,
    tables: ScoringTables = DEFAULT_TABLES,
) -> dict[str, BadgeAward]:
    """
    Evaluate every badge of every category against the threshold table.

    Returns only badges that reached at least silver, in category order
    (social, wallet, vault).
    """
    badges: dict[str, BadgeAward] = {}
    for category, value_fns in BADGE_CATEGORIES.items():
        for name, value_fn in value_fns.items():
            award = _evaluate_badge(name, value_fn, metrics, tables)
            if award is not None:
                badges[name] = award
    return badges


def badges_to_dict(badges: Mapping[str, BadgeAward]) -> dict[str, dict[str, Any]]:
    return {name: award.to_dict() for name, award in badges.items()}
