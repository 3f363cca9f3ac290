"""
Tests for title selection from held badges.
"""

from __future__ import annotations

from backend_credscore.scoring.badge_assigner import BadgeAward
from backend_credscore.scoring.tables import FALLBACK_TITLE, TITLE_RULES, TIER_SILVER
from backend_credscore.scoring.title_selector import select_title


def test_no_badges_gives_fallback():
    assert select_title([]) == FALLBACK_TITLE == "ALL ROUNDOOR"


def test_defi_dynamo():
    assert select_title({"DeFi Master", "Airdrop Veteran", "Dapp Diplomat"}) == "DeFi Dynamo"


def test_partial_rule_does_not_match():
    assert select_title({"DeFi Master", "Airdrop Veteran"}) == FALLBACK_TITLE


def test_first_matching_rule_wins():
    """Holding badges for both NFT Aficionado and Token Titan: the earlier rule wins."""
    held = {"NFT Networker", "NFT Whale", "Influence Investor", "Tweet Trader"}
    assert select_title(held) == "NFT Aficionado"


def test_extra_badges_do_not_block_match():
    held = {"DAO Diplomat", "Community Leader", "Governance Griot", "Sticker Star", "GIF Guru"}
    assert select_title(held) == "Governance Guru"


def test_accepts_award_mapping():
    awards = {name: BadgeAward(tier=TIER_SILVER, value=1) for name in ("NFT Networker", "NFT Whale")}
    assert select_title(awards) == "NFT Aficionado"


def test_every_rule_reachable_with_its_own_badges():
    for title, required in TITLE_RULES:
        # Earlier rules may share badges; a rule's own set must yield that title or an earlier one
        chosen = select_title(required)
        titles = [t for t, _ in TITLE_RULES]
        assert titles.index(chosen) <= titles.index(title)
