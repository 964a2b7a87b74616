"""Typer CLI for book generation and validation."""

from .book_cli import app

__all__ = ["app"]
