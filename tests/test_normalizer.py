"""
Tests for the metric normalizer: field mapping, defaults, malformed vault items.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from backend_credscore.scoring.normalizer import (
    NormalizedMetrics,
    account_age_years,
    normalize,
    parse_created_at,
)


def test_normalize_empty_sources_gives_defaults(now):
    m = normalize({}, {}, [], [], now=now)
    assert m == NormalizedMetrics()
    assert m.engagement == 0
    assert m.pinning_allowed is False


def test_normalize_wrong_types_gives_defaults(now):
    m = normalize("junk", 42, {"items": "nope"}, None, now=now)
    assert m == NormalizedMetrics()


def test_social_fields(social_payload, now):
    m = normalize(social_payload, {}, [], [], now=now)
    assert m.followers == 12000
    assert m.favourites == 3400
    assert m.media == 150
    assert m.listed == 40
    assert m.statuses == 5200
    assert m.friends == 1100
    assert m.retweets == 600
    assert m.quotes == 20
    assert m.replies == 80
    assert m.blue_verified is True
    assert m.super_follow_eligible is False
    assert m.has_pinned_tweet is True
    assert m.engagement == 3400 + 150 + 40
    assert m.account_age_years == pytest.approx(2192 / 365)


def test_wallet_fields(wallet_payload, now):
    m = normalize({}, wallet_payload, [], [], now=now)
    assert m.native_balance == 1.5
    assert m.token_count == 6
    assert m.active_chain_count == 2
    assert m.defi_position_count == 5
    assert m.resolved_domain is True
    assert m.nft_count == 3
    assert m.transaction_count == 250
    assert m.unique_token_interactions == 6
    # Optional counters absent from the summary
    assert m.gas_spent == 0.0
    assert m.staking_positions == 0
    assert m.airdrops == 0
    assert m.dao_votes == 0


def test_wallet_optional_counters_read_when_present(now):
    m = normalize({}, {"Gas Spent": "150.5", "Staking Positions": 2, "Airdrops": 4, "DAO Votes": 6}, [], [], now=now)
    assert m.gas_spent == 150.5
    assert m.staking_positions == 2
    assert m.airdrops == 4
    assert m.dao_votes == 6


def test_negative_native_balance_clamped(now):
    m = normalize({}, {"Native Balance Result": -3}, [], [], now=now)
    assert m.native_balance == 0.0


def test_vault_fields(vault_groups, vault_messages, now):
    m = normalize({}, {}, vault_groups, vault_messages, now=now)
    assert m.group_count == 3
    assert m.polls_allowed is True
    assert m.pin_permission_group_count == 1
    assert m.pinning_allowed is True
    assert m.message_count == 4
    assert m.pinned_message_count == 1
    assert m.photo_message_count == 1
    assert m.sticker_message_count == 1
    assert m.gif_message_count == 1
    assert m.bot_message_count == 1
    assert m.hashtag_count == 2
    assert m.mention_count == 1


def test_vault_collections_wrapped_in_items(vault_groups, vault_messages, now):
    wrapped = normalize({}, {}, {"items": vault_groups}, {"results": vault_messages}, now=now)
    plain = normalize({}, {}, vault_groups, vault_messages, now=now)
    assert wrapped == plain


def test_message_with_null_source_data_contributes_zero(vault_messages, now):
    """A message whose sourceData is null is counted as a message but adds nothing else."""
    baseline = normalize({}, {}, [], vault_messages, now=now)
    with_bad = normalize({}, {}, [], [*vault_messages, {"sourceData": None}], now=now)
    assert with_bad.message_count == baseline.message_count + 1
    for name in (
        "pinned_message_count",
        "photo_message_count",
        "sticker_message_count",
        "gif_message_count",
        "bot_message_count",
        "hashtag_count",
        "mention_count",
    ):
        assert getattr(with_bad, name) == getattr(baseline, name)


def test_non_mapping_items_are_skipped(now):
    m = normalize({}, {}, ["group", None, {"sourceData": {}}], [42, "text"], now=now)
    assert m.group_count == 1
    assert m.message_count == 0


def test_bot_message_requires_nonzero_id(now):
    messages = [
        {"sourceData": {"via_bot_user_id": 5}},
        {"sourceData": {"via_bot_user_id": "7"}},
        {"sourceData": {"via_bot_user_id": 0}},
        {"sourceData": {"via_bot_user_id": None}},
        {"sourceData": {}},
    ]
    assert normalize({}, {}, [], messages, now=now).bot_message_count == 2


def test_parse_created_at_formats():
    twitter = parse_created_at("Wed Oct 10 20:19:24 +0000 2018")
    assert twitter == datetime(2018, 10, 10, 20, 19, 24, tzinfo=timezone.utc)
    assert parse_created_at("2018-10-10T20:19:24Z") == twitter
    assert parse_created_at("2018-10-10T20:19:24") == twitter
    assert parse_created_at(twitter.timestamp()) == twitter
    assert parse_created_at("not a date") is None
    assert parse_created_at("") is None
    assert parse_created_at(None) is None
    assert parse_created_at(True) is None


def test_account_age_never_negative(now):
    assert account_age_years(None, now) == 0.0
    assert account_age_years(now + timedelta(days=30), now) == 0.0
    assert account_age_years(now - timedelta(days=365), now) == pytest.approx(1.0)


def test_created_at_only_feeds_account_age(social_payload, now):
    """An unparseable creation date leaves every metric at its default."""
    assert normalize({"result": {"legacy": {"created_at": "not a date"}}}, {}, [], [], now=now) == NormalizedMetrics()
    m = normalize({"result": {"legacy": social_payload["result"]["legacy"]}}, {}, [], [], now=now)
    assert m.account_age_years > 6


def test_normalize_is_deterministic(social_payload, wallet_payload, vault_groups, vault_messages, now):
    a = normalize(social_payload, wallet_payload, vault_groups, vault_messages, now=now)
    b = normalize(social_payload, wallet_payload, vault_groups, vault_messages, now=now)
    assert a == b
    assert a.to_dict() == b.to_dict()
