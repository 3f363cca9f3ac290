"""
Social profile collector (Twitter via RapidAPI).

GET https://{TWITTER_API_HOST}/user?username=... and unwrap the user object into
the {"result": {...}} shape the normalizer reads.
"""

from __future__ import annotations

from typing import Any

import requests

from backend_credscore.collectors.http import request_json
from backend_credscore.config import Settings, get_settings
from backend_credscore.core.exceptions import CollectorError, ConfigurationError
from backend_credscore.credscore_logging import get_logger

logger = get_logger(__name__)

SOURCE = "social"

# Known response envelopes, most specific first
_RESULT_PATHS = (
    ("result", "data", "user", "result"),
    ("data", "user", "result"),
    ("user", "result"),
    ("result",),
)


def unwrap_user_result(payload: Any) -> dict[str, Any]:
    """Return {"result": user} from whichever envelope the API used; empty result if none match."""
    for path in _RESULT_PATHS:
        node = payload
        for key in path:
            node = node.get(key) if isinstance(node, dict) else None
        if isinstance(node, dict) and ("legacy" in node or "is_blue_verified" in node):
            return {"result": node}
    return {"result": {}}


class SocialClient:
    """Fetches a social profile by username."""

    def __init__(self, settings: Settings | None = None, session: requests.Session | None = None) -> None:
        self._settings = settings or get_settings()
        self._session = session

    def fetch_social_profile(self, username: str) -> dict[str, Any]:
        username = (username or "").strip().lstrip("@")
        if not username:
            raise CollectorError(SOURCE, "username is required")
        if not self._settings.twitter_api_key:
            raise ConfigurationError(SOURCE, "TWITTER_API_KEY is not configured")
        host = self._settings.twitter_api_host
        payload = request_json(
            SOURCE,
            "GET",
            f"https://{host}/user",
            headers={"x-rapidapi-key": self._settings.twitter_api_key, "x-rapidapi-host": host},
            params={"username": username},
            timeout=self._settings.http_timeout_sec,
            session=self._session,
        )
        profile = unwrap_user_result(payload)
        logger.info("social_profile_fetched", username=username, found=bool(profile["result"]))
        return profile
