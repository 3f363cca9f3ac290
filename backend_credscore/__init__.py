"""
Backend CredScore: reputation scoring backend for social, wallet and vault signals.

Collects a user's social profile, wallet summary and data-vault chat history,
evaluates them into category scores, tiered badges and a title, and stores the
result per user. The scoring engine (backend_credscore.scoring) is pure; the
collectors, database and API server are the plumbing around it.
"""

__version__ = "0.1.0"
