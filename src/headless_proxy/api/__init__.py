"""Local HTTP API for headless-proxy."""
