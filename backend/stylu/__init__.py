"""Stylu mobile backend-for-frontend."""

__version__ = "1.0.0"
