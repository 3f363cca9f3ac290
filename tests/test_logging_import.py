"""
Test that credscore_logging can be imported without circular import and logger works.
"""

from __future__ import annotations


def test_logging_import():
    """Import get_logger from credscore_logging and use the logger."""
    from backend_credscore.credscore_logging import get_logger

    logger = get_logger("test")
    assert logger is not None
    assert hasattr(logger, "info")
    assert hasattr(logger, "debug")
    assert hasattr(logger, "warning")
    assert hasattr(logger, "error")
    # Smoke test: call info (should not raise)
    logger.info("test_message", key="value")


def test_bind_user():
    """bind_user returns a logger carrying user_key."""
    from backend_credscore.credscore_logging import bind_user

    logger = bind_user("did:privy:abc")
    logger.info("test_bound_message")


def test_wallet_fields_are_shortened():
    from backend_credscore.credscore_logging.logger import _shorten_wallets

    wallet = "0x1111111111111111111111111111111111111111"
    out = _shorten_wallets(None, "info", {"wallet": wallet, "primary_wallet": "0xabc", "user_key": wallet})
    assert out["wallet"] == "0x11111111111111..."
    assert out["primary_wallet"] == "0xabc"
    assert out["user_key"] == wallet
    assert _shorten_wallets(None, "info", {"wallet": out["wallet"]})["wallet"] == out["wallet"]
