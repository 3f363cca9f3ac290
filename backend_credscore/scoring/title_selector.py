"""
Title selector: first title rule whose required badges are all held.

Tiers are ignored; only badge presence counts. Rule order breaks ties.
"""

from __future__ import annotations

from typing import Iterable

from backend_credscore.scoring.tables import DEFAULT_TABLES, ScoringTables


def select_title(badges: Iterable[str], tables: ScoringTables = DEFAULT_TABLES) -> str:
    """
    Return the first matching title, or the fallback title when none match.

    badges may be a mapping of awarded badges (keys are used) or any iterable of names.
    """
    held = set(badges)
    for title, required in tables.title_rules:
        if held.issuperset(required):
            return title
    return tables.fallback_title
