"""API routes module."""
from . import health
from . import leaderboard
from . import admin

__all__ = ["health", "leaderboard", "admin"]
