"""
Application-level exceptions.

Raised at the collector, repository and API seams. The scoring engine never
raises these; it degrades to defaults instead.
"""

from __future__ import annotations


class CredScoreError(Exception):
    """Base class for CredScore errors."""


class CollectorError(CredScoreError):
    """An upstream data source could not be fetched."""

    def __init__(self, source: str, message: str) -> None:
        super().__init__(f"{source}: {message}")
        self.source = source
        self.message = message


class ConfigurationError(CollectorError):
    """A collector is missing its API key; raised before any request is made."""


class PersistenceError(CredScoreError):
    """A score record could not be read or written."""


class TokenNotFound(CredScoreError, KeyError):
    """No (unexpired) vault auth token is stored for the user."""

    def __init__(self, user_id: str) -> None:
        super().__init__(user_id)
        self.user_id = user_id

    def __str__(self) -> str:
        return f"No auth token found for user {self.user_id}"
