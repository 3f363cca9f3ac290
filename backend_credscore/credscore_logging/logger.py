"""
CredScore structured logging.

Every record is one JSON line on stdout carrying event_type, level, ISO
timestamp and the emitting module; evaluation paths add user_key through
bind_user(). LOG_LEVEL filters, LOG_FORMAT=console switches to the coloured
renderer for local runs.

Imports nothing from backend_credscore so config and collectors can log at import.
"""

from __future__ import annotations

import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any

import structlog

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_LEVEL_VALUE = getattr(logging, LOG_LEVEL, logging.INFO)

# JSON output for production (LOG_FORMAT=json); human-readable for local
LOG_FORMAT = os.getenv("LOG_FORMAT", "json").strip().lower()


def _add_timestamp(
    logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Ensure timestamp is always present (ISO 8601)."""
    if "timestamp" not in event_dict:
        event_dict["timestamp"] = datetime.now(timezone.utc).isoformat()
    return event_dict


def _normalize_event(
    logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Rename structlog 'event' to event_type; keep message if present."""
    if "event" in event_dict and "event_type" not in event_dict:
        event_dict["event_type"] = event_dict.pop("event")
    if "message" not in event_dict and "event_type" in event_dict:
        event_dict["message"] = str(event_dict["event_type"])
    return event_dict


# Wallet addresses in log records are cut to this many characters
WALLET_LOG_CHARS = 16
WALLET_LOG_KEYS = ("wallet", "wallet_address", "primary_wallet")


def _shorten_wallets(
    logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Truncate wallet address fields so full addresses never reach the log sink."""
    for key in WALLET_LOG_KEYS:
        value = event_dict.get(key)
        if isinstance(value, str) and len(value) > WALLET_LOG_CHARS and not value.endswith("..."):
            event_dict[key] = value[:WALLET_LOG_CHARS] + "..."
    return event_dict


def configure_structlog() -> None:
    """Configure structlog once at import: JSON, timestamp, level, event_type, short wallets."""
    shared_processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        _add_timestamp,
        _normalize_event,
        _shorten_wallets,
    ]
    if LOG_FORMAT == "json":
        shared_processors.append(structlog.processors.JSONRenderer())
    else:
        shared_processors.append(
            structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())
        )
    structlog.configure(
        processors=shared_processors,
        wrapper_class=structlog.make_filtering_bound_logger(LOG_LEVEL_VALUE),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=True,
    )


if not structlog.is_configured():
    configure_structlog()


def get_logger(name: str) -> structlog.BoundLogger:
    """
    Return a structured logger for the given module name.

        logger = get_logger(__name__)
        logger.info("evaluation_done", title="DeFi Dynamo", total_score=42.5)

    Output (JSON): {"event_type": "evaluation_done", "title": "...", "total_score": 42.5,
    "timestamp": "...", "level": "info", "logger": "module.name"}
    """
    return structlog.get_logger(name).bind(logger=name)


def bind_user(user_key: str) -> structlog.BoundLogger:
    """Return a logger with user_key bound to all subsequent log calls."""
    return get_logger("backend_credscore").bind(user_key=user_key)
