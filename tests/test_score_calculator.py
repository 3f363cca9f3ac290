"""
Tests for the weighted score calculator: category formulas, caps and the total.
"""

from __future__ import annotations

import pytest

from backend_credscore.scoring.normalizer import NormalizedMetrics, normalize
from backend_credscore.scoring.score_calculator import (
    ScoreBreakdown,
    breakdown_from_dict,
    capped_total,
    compute_scores,
)
from backend_credscore.scoring.tables import DEFAULT_TABLES


def test_empty_metrics_score_zero():
    scores = compute_scores(NormalizedMetrics())
    assert scores == ScoreBreakdown.zero()


def test_million_followers_verified_social_capped_in_total(now):
    """followers=1,000,000 + verified: social contributes its cap of 50 to the total; nothing else scores."""
    social = {"result": {"is_blue_verified": True, "legacy": {"followers_count": 1_000_000}}}
    scores = compute_scores(normalize(social, {}, [], [], now=now))
    assert scores.social_score == pytest.approx(1000 + 5)
    assert min(scores.social_score, DEFAULT_TABLES.cap("social")) == 50
    assert scores.crypto_score == 0
    assert scores.nft_score == 0
    assert scores.community_score == 0
    assert scores.vault_score == 0
    assert scores.total_score == pytest.approx(50)


def test_two_chains_three_nfts(now):
    wallet = {
        "Active Chains Result": {"activeChains": ["eth", "base"]},
        "Wallet NFTs Result": ["x", "y", "z"],
    }
    scores = compute_scores(normalize({}, wallet, [], [], now=now))
    assert scores.nft_score == pytest.approx(15)
    assert scores.crypto_score == pytest.approx(10)
    assert scores.total_score == pytest.approx(25)


def test_sample_sources(social_payload, wallet_payload, vault_groups, vault_messages, now):
    scores = compute_scores(normalize(social_payload, wallet_payload, vault_groups, vault_messages, now=now))
    assert scores.social_score == pytest.approx(34.4195, abs=1e-3)
    # 2 chains*5 + 1.5*10 + 6 tokens*2 + 5 defi*5 + domain 5 + 250*0.01 + 6 unique
    assert scores.crypto_score == pytest.approx(75.5)
    assert scores.nft_score == pytest.approx(15)
    assert scores.community_score == pytest.approx(6)
    assert scores.vault_score == pytest.approx(25.4)
    # crypto capped at 40, vault at 15
    assert scores.total_score == pytest.approx(34.4195 + 40 + 15 + 6 + 15, abs=1e-3)


def test_total_never_exceeds_sum_of_caps():
    huge = NormalizedMetrics(
        followers=10**9,
        native_balance=10**6,
        nft_count=10**5,
        group_count=10**4,
        message_count=10**6,
    )
    scores = compute_scores(huge)
    assert scores.total_score == pytest.approx(50 + 40 + 30 + 20 + 15)


def test_capped_total_clips_each_category():
    total = capped_total({"social": 80, "crypto": -5, "nft": 10, "community": 25, "vault": 1})
    assert total == pytest.approx(50 + 0 + 10 + 20 + 1)


def test_monotonic_in_followers(now):
    low = compute_scores(normalize({"result": {"legacy": {"followers_count": 100}}}, {}, [], [], now=now))
    high = compute_scores(normalize({"result": {"legacy": {"followers_count": 5000}}}, {}, [], [], now=now))
    assert high.social_score >= low.social_score
    assert high.total_score >= low.total_score


def test_custom_caps_via_overrides(now):
    tables = DEFAULT_TABLES.with_overrides(caps={"social": 10})
    social = {"result": {"legacy": {"followers_count": 50_000}}}
    scores = compute_scores(normalize(social, {}, [], [], now=now), tables)
    assert scores.social_score == pytest.approx(50)
    assert scores.total_score == pytest.approx(10)
    # Defaults untouched
    assert DEFAULT_TABLES.cap("social") == 50


def test_breakdown_dict_shape():
    b = ScoreBreakdown(social_score=1, crypto_score=2, nft_score=3, community_score=4, vault_score=5, total_score=15)
    data = b.to_dict()
    assert list(data) == ["socialScore", "cryptoScore", "nftScore", "communityScore", "vaultScore", "totalScore"]
    assert breakdown_from_dict(data) == b
    assert breakdown_from_dict({}) == ScoreBreakdown.zero()
