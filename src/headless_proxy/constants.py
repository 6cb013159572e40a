"""Application-wide constants for headless-proxy.

Constants that define application behavior.
For user-configurable settings per deployment, see config.py.
"""

__all__ = [
    # Application identity
    "APP_NAME",
    # Local server
    "DEFAULT_HOST",
    "DEFAULT_PORT",
    # Storage
    "PROJECTS_FILENAME",
    "SERVER_CONFIG_FILENAME",
    # Upstream provider
    "DEFAULT_UPSTREAM_BASE_URL",
    "DEFAULT_UPSTREAM_TIMEOUT_SECONDS",
    "DEFAULT_REGISTER_PASSWORD",
    "SITE_ID_HEADER",
    "MEMBERS_PAGE_SIZE",
    # CLI
    "CLI_REQUEST_TIMEOUT_SECONDS",
]

APP_NAME = "headless-proxy"

# ==========================================================================
# Local server
# ==========================================================================

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8787

# ==========================================================================
# Storage
# ==========================================================================

PROJECTS_FILENAME = "headless-config.json"
SERVER_CONFIG_FILENAME = "server.json"

# ==========================================================================
# Upstream provider
# ==========================================================================

DEFAULT_UPSTREAM_BASE_URL = "https://www.wixapis.com"
DEFAULT_UPSTREAM_TIMEOUT_SECONDS = 30.0

# Password assigned to members created through bulk registration
DEFAULT_REGISTER_PASSWORD = "Password123!"

SITE_ID_HEADER = "wix-site-id"

# Page size used by the paginated member listing (provider maximum)
MEMBERS_PAGE_SIZE = 1000

# ==========================================================================
# CLI
# ==========================================================================

CLI_REQUEST_TIMEOUT_SECONDS = 120.0
