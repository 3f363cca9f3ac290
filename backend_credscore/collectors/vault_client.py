"""
Data-vault collector (Verida REST API): chat groups and chat messages.

POST {VERIDA_API_BASE_URL}/api/rest/v1/ds/query/{schema} with a Bearer token.
Items are read from "results" or "items", whichever the API returned.
"""

from __future__ import annotations

import base64
from typing import Any

import requests

from backend_credscore.collectors.http import request_json
from backend_credscore.config import Settings, get_settings
from backend_credscore.config.env import mask_secret
from backend_credscore.core.exceptions import CollectorError
from backend_credscore.credscore_logging import get_logger
from backend_credscore.scoring.accessors import as_items

logger = get_logger(__name__)

SOURCE = "vault"
API_PATH_PREFIX = "/api/rest/v1"
GROUP_SCHEMA_URL = "https://common.schemas.verida.io/social/chat/group/v0.1.0/schema.json"
MESSAGE_SCHEMA_URL = "https://common.schemas.verida.io/social/chat/message/v0.1.0/schema.json"
QUERY_LIMIT = 100_000


def encode_schema(schema_url: str) -> str:
    """Schemas are addressed by their URL, base64-encoded (padding percent-escaped)."""
    encoded = base64.b64encode(schema_url.encode("utf-8")).decode("ascii")
    return encoded.replace("=", "%3D")


def bearer(auth_token: str) -> str:
    token = (auth_token or "").strip()
    return token if token.startswith("Bearer ") else f"Bearer {token}"


class VaultClient:
    """Queries chat groups and messages from a user's data vault."""

    def __init__(self, settings: Settings | None = None, session: requests.Session | None = None) -> None:
        self._settings = settings or get_settings()
        self._session = session

    def _query(self, schema_url: str, auth_token: str) -> list[Any]:
        if not (auth_token or "").strip():
            raise CollectorError(SOURCE, "auth token is required")
        url = f"{self._settings.verida_api_base_url}{API_PATH_PREFIX}/ds/query/{encode_schema(schema_url)}"
        payload = request_json(
            SOURCE,
            "POST",
            url,
            headers={"Content-Type": "application/json", "Authorization": bearer(auth_token)},
            json_body={"options": {"sort": [{"_id": "desc"}], "limit": QUERY_LIMIT}},
            timeout=self._settings.http_timeout_sec,
            session=self._session,
        )
        items = as_items(payload)
        logger.info(
            "vault_query_done",
            schema=schema_url.rsplit("/", 3)[-3],
            items=len(items),
            token=mask_secret(auth_token),
        )
        return items

    def fetch_vault_groups(self, auth_token: str) -> list[Any]:
        return self._query(GROUP_SCHEMA_URL, auth_token)

    def fetch_vault_messages(self, auth_token: str) -> list[Any]:
        return self._query(MESSAGE_SCHEMA_URL, auth_token)
