"""Hela inventory core: classification, query planning and search."""

__version__ = "0.1.0"
