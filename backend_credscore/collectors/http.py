"""
Shared HTTP helper for upstream collectors: bounded retries, 429 handling, JSON decode.

Retries happen here and only here; the scoring engine never retries.
"""

from __future__ import annotations

import time
from typing import Any

import requests

from backend_credscore.core.exceptions import CollectorError
from backend_credscore.credscore_logging import get_logger

logger = get_logger(__name__)

MAX_RETRIES = 3
RETRY_DELAY_SEC = 2.0
RATE_LIMIT_STATUS = 429


def request_json(
    source: str,
    method: str,
    url: str,
    *,
    headers: dict[str, str] | None = None,
    params: dict[str, Any] | None = None,
    json_body: Any = None,
    timeout: float = 10.0,
    max_retries: int = MAX_RETRIES,
    retry_delay_sec: float = RETRY_DELAY_SEC,
    session: requests.Session | None = None,
) -> Any:
    """
    Send one request with retries and return the decoded JSON body.

    Retries on connection errors, timeouts, 429 and 5xx. 4xx (other than 429)
    fail immediately. Raises CollectorError(source, ...) once retries are exhausted.
    """
    http = session or requests
    last_error = "no attempt made"
    for attempt in range(max_retries):
        try:
            r = http.request(method, url, headers=headers, params=params, json=json_body, timeout=timeout)
        except requests.RequestException as e:
            last_error = str(e)
            logger.warning("collector_request_error", source=source, attempt=attempt + 1, error=last_error)
            if attempt < max_retries - 1:
                time.sleep(retry_delay_sec)
            continue

        if r.status_code == RATE_LIMIT_STATUS or r.status_code >= 500:
            last_error = f"HTTP {r.status_code}"
            logger.warning("collector_retryable_status", source=source, attempt=attempt + 1, status=r.status_code)
            if attempt < max_retries - 1:
                time.sleep(retry_delay_sec * (attempt + 1))
            continue
        if r.status_code >= 400:
            raise CollectorError(source, f"HTTP {r.status_code}")
        try:
            return r.json()
        except ValueError as e:
            raise CollectorError(source, f"invalid JSON: {e}") from e
    raise CollectorError(source, last_error)
