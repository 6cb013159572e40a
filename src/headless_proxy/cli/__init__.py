"""Command-line interface for headless-proxy."""

from .main import cli, main

__all__ = ["cli", "main"]
