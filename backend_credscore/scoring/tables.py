"""
Reference scoring tables: metric weights, category caps, badge thresholds, title rules.

Held as data, built once at import into immutable structures. Calculators take a
ScoringTables instance so alternative tables can be passed in (tests, experiments)
without touching calculation code.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

# Badge tiers, highest first
TIER_PLATINUM = "Platinum"
TIER_GOLD = "Gold"
TIER_SILVER = "Silver"

FALLBACK_TITLE = "ALL ROUNDOOR"

# Category caps applied when summing the total score
SOCIAL_SCORE_CAP = 50.0
CRYPTO_SCORE_CAP = 40.0
NFT_SCORE_CAP = 30.0
COMMUNITY_SCORE_CAP = 20.0
VAULT_SCORE_CAP = 15.0

# Telegram Titan: permission bonus added to the message count when polls are allowed
POLL_PERMISSION_BONUS = 1000

WEIGHTS: Mapping[str, float] = MappingProxyType({
    # social
    "followers": 0.001,
    "retweets": 0.005,
    "quotes": 0.005,
    "replies": 0.002,
    "engagement": 0.0001,
    "verification": 5,
    "tweet_freq": 0.001,
    "subscriptions": 2,
    "account_age": 0.1,
    "media": 0.01,
    "pinned": 5,
    "friends": 0.001,
    "listed": 0.01,
    "super_follow": 5,
    # wallet
    "active_chains": 5,
    "native_balance": 10,
    "token_holdings": 2,
    "nft_holdings": 5,
    "defi_positions": 5,
    "web3_domains": 5,
    "transaction_count": 0.01,
    "unique_token_interactions": 1,
    # vault
    "group_count": 2,
    "message_freq": 0.1,
    "pinned_messages": 5,
    "media_messages": 2,
    "hashtags": 1,
    "polls": 2,
    "leadership": 5,
    "bot_interactions": 1,
    "sticker_messages": 0.5,
    "gif_messages": 0.5,
    "mention_count": 1,
})

CATEGORY_CAPS: Mapping[str, float] = MappingProxyType({
    "social": SOCIAL_SCORE_CAP,
    "crypto": CRYPTO_SCORE_CAP,
    "nft": NFT_SCORE_CAP,
    "community": COMMUNITY_SCORE_CAP,
    "vault": VAULT_SCORE_CAP,
})

# badge -> (silver, gold, platinum); table order is output order
BADGE_THRESHOLDS: Mapping[str, tuple[float, float, float]] = MappingProxyType({
    # social
    "Influence Investor": (1_000_000, 5_000_000, 10_000_000),
    "Tweet Trader": (5, 10, 20),
    "Engagement Economist": (1000, 5000, 10000),
    "Media Mogul": (100, 500, 1000),
    "List Legend": (100, 500, 1000),
    "Verified Visionary": (1, 1, 1),
    "Pinned Post Pro": (1, 1, 1),
    "Super Follower": (1, 1, 1),
    "Creator Subscriber": (5, 10, 20),
    "Twitter Veteran": (5, 10, 15),
    "Retweet Riches": (100, 500, 1000),
    "Crypto Communicator": (50, 100, 200),
    "Social Connector": (1000, 5000, 10000),
    "Engagement Star": (2000, 10000, 20000),
    "Fast Grower": (100_000, 500_000, 1_000_000),
    "Viral Validator": (500, 2000, 5000),
    # wallet
    "Chain Explorer": (2, 5, 10),
    "Token Holder": (5, 20, 50),
    "NFT Networker": (1, 5, 10),
    "DeFi Drifter": (1, 3, 5),
    "Gas Spender": (100, 500, 1000),
    "Staking Veteran": (1, 3, 5),
    "Airdrop Veteran": (1, 5, 10),
    "DAO Diplomat": (1, 5, 10),
    "Web3 Domain Owner": (1, 1, 1),
    "Degen Dualist": (10_000, 50_000, 100_000),
    "Transaction Titan": (100, 500, 1000),
    "Token Interactor": (10, 50, 100),
    "NFT Whale": (10, 50, 100),
    "DeFi Master": (5, 10, 20),
    "Bridge Blazer": (5, 10, 20),
    "Social HODLer": (1, 10, 50),
    "Liquidity Laureate": (1, 3, 5),
    # vault
    "Group Guru": (5, 10, 20),
    "Message Maestro": (100, 500, 1000),
    "Pinned Message Master": (1, 5, 10),
    "Media Messenger": (10, 50, 100),
    "Hashtag Hero": (10, 50, 100),
    "Poll Creator": (1, 5, 10),
    "Community Leader": (1, 3, 5),
    "Bot Interactor": (10, 50, 100),
    "Sticker Star": (10, 50, 100),
    "GIF Guru": (10, 50, 100),
    "Mention Magnet": (10, 50, 100),
    "Telegram Titan": (500, 1000, 2000),
    "Governance Griot": (2, 5, 10),
    "Dapp Diplomat": (50, 100, 200),
})

# Ordered: first title whose badges are all held wins
TITLE_RULES: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("Crypto Connoisseur", ("Crypto Communicator", "Social Connector", "Liquidity Laureate", "Telegram Titan")),
    ("Blockchain Baron", ("DeFi Master", "Liquidity Laureate", "Governance Griot", "Staking Veteran", "Gas Spender")),
    ("Digital Dynamo", ("Twitter Veteran", "Fast Grower", "Engagement Star", "Verified Visionary", "Degen Dualist")),
    ("DeFi Dynamo", ("DeFi Master", "Airdrop Veteran", "Dapp Diplomat")),
    ("NFT Aficionado", ("NFT Networker", "NFT Whale")),
    ("Social Savant", ("Crypto Communicator", "Social Connector", "Twitter Veteran", "Engagement Economist", "Retweet Riches")),
    ("Protocol Pioneer", ("Chain Explorer", "Bridge Blazer", "DeFi Drifter")),
    ("Token Titan", ("Influence Investor", "NFT Networker", "Tweet Trader")),
    ("Chain Champion", ("Bridge Blazer", "Viral Validator", "Social HODLer")),
    ("Governance Guru", ("DAO Diplomat", "Community Leader", "Governance Griot")),
)


@dataclass(frozen=True)
class ScoringTables:
    """Immutable bundle of every table the calculators read."""

    weights: Mapping[str, float] = field(default_factory=lambda: WEIGHTS)
    caps: Mapping[str, float] = field(default_factory=lambda: CATEGORY_CAPS)
    badge_thresholds: Mapping[str, tuple[float, float, float]] = field(default_factory=lambda: BADGE_THRESHOLDS)
    title_rules: tuple[tuple[str, tuple[str, ...]], ...] = TITLE_RULES
    fallback_title: str = FALLBACK_TITLE
    poll_permission_bonus: float = POLL_PERMISSION_BONUS

    def weight(self, name: str) -> float:
        return float(self.weights[name])

    def cap(self, category: str) -> float:
        return float(self.caps[category])

    def with_overrides(
        self,
        *,
        weights: Mapping[str, float] | None = None,
        caps: Mapping[str, float] | None = None,
        badge_thresholds: Mapping[str, tuple[float, float, float]] | None = None,
    ) -> "ScoringTables":
        """Return a copy with some entries replaced; unspecified entries are kept."""
        return ScoringTables(
            weights=MappingProxyType({**self.weights, **(weights or {})}),
            caps=MappingProxyType({**self.caps, **(caps or {})}),
            badge_thresholds=MappingProxyType({**self.badge_thresholds, **(badge_thresholds or {})}),
            title_rules=self.title_rules,
            fallback_title=self.fallback_title,
            poll_permission_bonus=self.poll_permission_bonus,
        )


DEFAULT_TABLES = ScoringTables()
