"""
FastAPI Routes.

모두 /api prefix 아래 JSON API.
"""

from . import avatar, chat, health, summarize

__all__ = ["avatar", "chat", "health", "summarize"]
