"""Shared utilities for headless-proxy."""
