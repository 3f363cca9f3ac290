"""
Tests for the evaluation orchestrator: end-to-end results, determinism, safe default.
"""

from __future__ import annotations

import json
import math

from unittest.mock import patch

import pytest

from backend_credscore.scoring import EvaluationResult, ScoreBreakdown, evaluate
from backend_credscore.scoring.tables import FALLBACK_TITLE


def test_empty_sources_safe(now):
    result = evaluate({}, {}, [], [], now=now)
    assert result.title == FALLBACK_TITLE
    assert result.badges == {}
    assert result.scores == ScoreBreakdown.zero()


def test_none_sources_safe(now):
    result = evaluate(None, None, None, None, now=now)
    assert result == EvaluationResult.safe_default()


def test_social_only_title(social_payload, now):
    result = evaluate(social_payload, {}, [], [], now=now)
    assert result.title == "Social Savant"


def test_all_sources(social_payload, wallet_payload, vault_groups, vault_messages, now):
    result = evaluate(social_payload, wallet_payload, vault_groups, vault_messages, now=now)
    # Crypto Communicator + Social Connector + Liquidity Laureate + Telegram Titan
    assert result.title == "Crypto Connoisseur"
    assert "Telegram Titan" in result.badge_names
    assert result.scores.total_score == pytest.approx(110.4195, abs=1e-3)


def test_defi_dynamo_end_to_end(now):
    wallet = {"DeFi Positions Summary Result": [{}] * 5, "Airdrops": 1}
    messages = [{"sourceData": {"via_bot_user_id": 1000 + i}} for i in range(50)]
    result = evaluate({}, wallet, [], messages, now=now)
    assert {"DeFi Master", "Airdrop Veteran", "Dapp Diplomat"} <= set(result.badges)
    assert result.title == "DeFi Dynamo"


def test_deterministic(social_payload, wallet_payload, vault_groups, vault_messages, now):
    a = evaluate(social_payload, wallet_payload, vault_groups, vault_messages, now=now)
    b = evaluate(social_payload, wallet_payload, vault_groups, vault_messages, now=now)
    assert a == b
    assert a.to_dict() == b.to_dict()


def test_malformed_message_does_not_crash(vault_messages, now):
    result = evaluate({}, {}, [], [*vault_messages, {"sourceData": None}], now=now)
    assert isinstance(result, EvaluationResult)
    assert result.scores.vault_score > 0


def test_unexpected_failure_returns_safe_default(social_payload, now):
    with patch("backend_credscore.scoring.evaluator.compute_scores", side_effect=RuntimeError("boom")):
        result = evaluate(social_payload, {}, [], [], now=now)
    assert result == EvaluationResult.safe_default()


def test_to_dict_shape(social_payload, now):
    data = evaluate(social_payload, {}, [], [], now=now).to_dict()
    assert set(data) == {"title", "badges", "scores"}
    assert data["badges"]["Verified Visionary"] == {"tier": "Platinum", "value": 1.0}
    assert data["scores"]["totalScore"] == pytest.approx(data["scores"]["socialScore"])


def test_clock_read_when_now_omitted(social_payload):
    result = evaluate(social_payload, {}, [], [])
    # Account created in 2018: at least six years old on any current clock
    assert "Twitter Veteran" in result.badges


def test_oversized_social_field_keeps_other_sources(wallet_payload, now):
    """One out-of-range counter degrades that field only; wallet scoring is unaffected."""
    social = json.loads('{"result":{"legacy":{"followers_count":1' + "0" * 400 + "}}}")
    result = evaluate(social, wallet_payload, [], [], now=now)
    assert result != EvaluationResult.safe_default()
    assert result.scores.social_score == 0
    assert result.scores.crypto_score == pytest.approx(75.5)
    assert "Liquidity Laureate" in result.badges


def test_near_max_values_keep_scores_finite(now):
    social = {"result": {"legacy": {"favourites_count": 1.7e308, "media_count": 1.7e308, "listed_count": 1.7e308}}}
    wallet = {"Native Balance Result": 1.7e308, "Gas Spent": 1.7e308}
    result = evaluate(social, wallet, [], [], now=now)
    assert all(math.isfinite(v) for v in result.scores.to_dict().values())
    assert "Engagement Star" in result.badges
    assert "Gas Spender" in result.badges
