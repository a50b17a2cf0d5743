"""Command-line interface for streamchat."""

from .app import app

__all__ = ["app"]
