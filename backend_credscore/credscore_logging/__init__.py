"""
Structured logging for Backend CredScore.

JSON logs with timestamp, user_key, event_type. Use get_logger() in all modules
for aggregation-friendly output.
"""

from backend_credscore.credscore_logging.logger import bind_user, get_logger

__all__ = ["bind_user", "get_logger"]
