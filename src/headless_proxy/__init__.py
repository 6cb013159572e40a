"""headless-proxy: credential-injecting proxy for headless site projects."""

__all__ = ["__version__"]

__version__ = "0.1.0"
