"""
Metric normalizer: raw social / wallet / vault payloads -> NormalizedMetrics.

The only place that knows upstream field names. Every field the calculators
read has a documented default (0, 0.0, False), so scoring is straight-line
arithmetic over valid values. Never raises for malformed input.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from typing import Any

from backend_credscore.credscore_logging import get_logger
from backend_credscore.scoring.accessors import (
    as_items,
    as_number,
    read_amount,
    read_array,
    read_bool,
    read_int,
    read_mapping,
    read_path,
    read_str,
)

logger = get_logger(__name__)

SECONDS_PER_YEAR = 365 * 24 * 60 * 60

# Twitter legacy created_at, e.g. "Wed Oct 10 20:19:24 +0000 2018"
TWITTER_DATE_FORMAT = "%a %b %d %H:%M:%S %z %Y"

# Upstream wallet summary keys
WALLET_NATIVE_BALANCE = "Native Balance Result"
WALLET_TOKEN_BALANCES = "Token Balances Result"
WALLET_ACTIVE_CHAINS = "Active Chains Result"
WALLET_DEFI_POSITIONS = "DeFi Positions Summary Result"
WALLET_RESOLVED_ADDRESS = "Resolved Address Result"
WALLET_NFTS = "Wallet NFTs Result"
WALLET_TX_COUNT = "Transaction Count"
WALLET_UNIQUE_TOKENS = "Unique Token Interactions"
WALLET_GAS_SPENT = "Gas Spent"
WALLET_STAKING_POSITIONS = "Staking Positions"
WALLET_AIRDROPS = "Airdrops"
WALLET_DAO_VOTES = "DAO Votes"

# Vault message content / entity tags
CONTENT_PHOTO = "messagePhoto"
CONTENT_STICKER = "messageSticker"
CONTENT_ANIMATION = "messageAnimation"
ENTITY_HASHTAG = "textEntityTypeHashtag"
ENTITY_MENTION = "textEntityTypeMention"


@dataclass(frozen=True)
class NormalizedMetrics:
    """Flat, defaulted view of all three sources. Created per evaluation, never stored."""

    # social
    followers: int = 0
    favourites: int = 0
    media: int = 0
    listed: int = 0
    statuses: int = 0
    friends: int = 0
    retweets: int = 0
    quotes: int = 0
    replies: int = 0
    subscriptions: int = 0
    blue_verified: bool = False
    super_follow_eligible: bool = False
    has_pinned_tweet: bool = False
    account_age_years: float = 0.0
    # wallet
    native_balance: float = 0.0
    token_count: int = 0
    active_chain_count: int = 0
    defi_position_count: int = 0
    resolved_domain: bool = False
    nft_count: int = 0
    transaction_count: int = 0
    unique_token_interactions: int = 0
    gas_spent: float = 0.0
    staking_positions: int = 0
    airdrops: int = 0
    dao_votes: int = 0
    # vault
    group_count: int = 0
    message_count: int = 0
    pinned_message_count: int = 0
    photo_message_count: int = 0
    sticker_message_count: int = 0
    gif_message_count: int = 0
    bot_message_count: int = 0
    hashtag_count: int = 0
    mention_count: int = 0
    polls_allowed: bool = False
    pin_permission_group_count: int = 0

    @property
    def pinning_allowed(self) -> bool:
        return self.pin_permission_group_count > 0

    @property
    def engagement(self) -> int:
        return self.favourites + self.media + self.listed

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def parse_created_at(raw: Any) -> datetime | None:
    """Parse Twitter-format or ISO 8601 timestamps (epoch seconds also accepted). Naive values are UTC."""
    if isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        try:
            return datetime.fromtimestamp(float(raw), tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    if not isinstance(raw, str) or not raw.strip():
        return None
    text = raw.strip()
    parsed: datetime | None = None
    try:
        parsed = datetime.strptime(text, TWITTER_DATE_FORMAT)
    except ValueError:
        try:
            parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
        except ValueError:
            return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def account_age_years(created_at: datetime | None, now: datetime) -> float:
    """(now - created_at) in 365-day years; 0 when unknown or in the future."""
    if created_at is None:
        return 0.0
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    seconds = (now - created_at).total_seconds()
    return max(0.0, seconds / SECONDS_PER_YEAR)


def _social_fields(social: Any, now: datetime) -> dict[str, Any]:
    result = read_mapping(social, "result")
    legacy = read_mapping(result, "legacy")
    created_at = parse_created_at(read_path(legacy, "created_at"))
    return {
        "followers": read_int(legacy, "followers_count"),
        "favourites": read_int(legacy, "favourites_count"),
        "media": read_int(legacy, "media_count"),
        "listed": read_int(legacy, "listed_count"),
        "statuses": read_int(legacy, "statuses_count"),
        "friends": read_int(legacy, "friends_count"),
        "retweets": read_int(legacy, "retweet_count"),
        "quotes": read_int(legacy, "quote_count"),
        "replies": read_int(legacy, "reply_count"),
        "subscriptions": read_int(result, "creator_subscriptions_count"),
        "blue_verified": read_bool(result, "is_blue_verified"),
        "super_follow_eligible": read_bool(result, "super_follow_eligible"),
        "has_pinned_tweet": len(read_array(legacy, "pinned_tweet_ids_str")) > 0,
        "account_age_years": account_age_years(created_at, now),
    }


def _wallet_fields(wallet: Any) -> dict[str, Any]:
    return {
        "native_balance": read_amount(wallet, [WALLET_NATIVE_BALANCE]),
        "token_count": len(read_array(wallet, [WALLET_TOKEN_BALANCES])),
        "active_chain_count": len(read_array(wallet, [WALLET_ACTIVE_CHAINS, "activeChains"])),
        "defi_position_count": len(read_array(wallet, [WALLET_DEFI_POSITIONS])),
        "resolved_domain": read_bool(wallet, [WALLET_RESOLVED_ADDRESS]),
        "nft_count": len(read_array(wallet, [WALLET_NFTS])),
        "transaction_count": read_int(wallet, [WALLET_TX_COUNT]),
        "unique_token_interactions": read_int(wallet, [WALLET_UNIQUE_TOKENS]),
        "gas_spent": read_amount(wallet, [WALLET_GAS_SPENT]),
        "staking_positions": read_int(wallet, [WALLET_STAKING_POSITIONS]),
        "airdrops": read_int(wallet, [WALLET_AIRDROPS]),
        "dao_votes": read_int(wallet, [WALLET_DAO_VOTES]),
    }


def _count_entities(entities: list[Any], entity_type: str) -> int:
    return sum(1 for e in entities if read_str(e, "type._") == entity_type)


def _is_bot_message(source: Mapping[str, Any]) -> bool:
    return as_number(source.get("via_bot_user_id")) != 0


def _vault_fields(vault_groups: Any, vault_messages: Any) -> dict[str, Any]:
    groups = [g for g in as_items(vault_groups) if isinstance(g, Mapping)]
    messages = [m for m in as_items(vault_messages) if isinstance(m, Mapping)]

    polls_allowed = any(read_bool(g, "sourceData.permissions.can_send_polls") for g in groups)
    pin_groups = sum(1 for g in groups if read_bool(g, "sourceData.permissions.can_pin_messages"))

    pinned = photos = stickers = gifs = bots = hashtags = mentions = 0
    malformed = 0
    for message in messages:
        source = message.get("sourceData")
        if not isinstance(source, Mapping):
            malformed += 1
            continue
        content_type = read_str(source, "content._")
        if read_bool(source, "is_pinned"):
            pinned += 1
        if content_type == CONTENT_PHOTO:
            photos += 1
        elif content_type == CONTENT_STICKER:
            stickers += 1
        elif content_type == CONTENT_ANIMATION:
            gifs += 1
        if _is_bot_message(source):
            bots += 1
        hashtags += _count_entities(read_array(source, "content.caption.entities"), ENTITY_HASHTAG)
        mentions += _count_entities(read_array(source, "content.entities"), ENTITY_MENTION)

    if malformed:
        logger.debug("vault_message_malformed", skipped=malformed, total=len(messages))

    return {
        "group_count": len(groups),
        "message_count": len(messages),
        "pinned_message_count": pinned,
        "photo_message_count": photos,
        "sticker_message_count": stickers,
        "gif_message_count": gifs,
        "bot_message_count": bots,
        "hashtag_count": hashtags,
        "mention_count": mentions,
        "polls_allowed": polls_allowed,
        "pin_permission_group_count": pin_groups,
    }


def normalize(
    social: Any,
    wallet: Any,
    vault_groups: Any,
    vault_messages: Any,
    *,
    now: datetime,
) -> NormalizedMetrics:
    """
    Build NormalizedMetrics from the three raw sources.

    Args:
        social: Social profile payload ({"result": {"legacy": {...}, ...}}); any shape accepted.
        wallet: Wallet summary mapping keyed by upstream result names.
        vault_groups: Vault chat groups (list, or {"items": [...]}).
        vault_messages: Vault chat messages (list, or {"items": [...]}).
        now: Reference time for account age; the caller reads the clock once.
    """
    return NormalizedMetrics(
        **_social_fields(social, now),
        **_wallet_fields(wallet),
        **_vault_fields(vault_groups, vault_messages),
    )
