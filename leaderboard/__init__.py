"""Leaderboard API service and client."""

__version__ = "1.0.0"
