"""Default configuration values for the archive client.

All hardcoded defaults live here. The client should be importable and
constructible with these defaults (minus calls requiring credentials).

Config hierarchy: .env → environment → these defaults
"""

from typing import Any

# =============================================================================
# Configuration Defaults
# =============================================================================

DEFAULTS: dict[str, Any] = {
    # -------------------------------------------------------------------------
    # Archive REST API
    # -------------------------------------------------------------------------
    "ARCHIVE_API_URL": "https://api.opentok.com",
    "ARCHIVE_API_KEY": "",
    "ARCHIVE_API_SECRET": "",
    "ARCHIVE_TIMEOUT": 30.0,

    # -------------------------------------------------------------------------
    # Logging
    # -------------------------------------------------------------------------
    "LOG_LEVEL": "INFO",
}


# =============================================================================
# Config Categories (for display)
# =============================================================================

CONFIG_CATEGORIES: dict[str, list[str]] = {
    "api": [
        "ARCHIVE_API_URL",
        "ARCHIVE_API_KEY",
        "ARCHIVE_API_SECRET",
        "ARCHIVE_TIMEOUT",
    ],
    "logging": [
        "LOG_LEVEL",
    ],
}


# =============================================================================
# Sensitive Keys (should be masked when displayed)
# =============================================================================

SENSITIVE_KEYS = {
    "ARCHIVE_API_SECRET",
}


def get_default(key: str) -> Any:
    """Get the default value for a config key.

    Args:
        key: Configuration key name

    Returns:
        Default value, or None if key not found
    """
    return DEFAULTS.get(key)


def is_sensitive(key: str) -> bool:
    """Check if a config key contains sensitive data."""
    return key in SENSITIVE_KEYS


def get_category(key: str) -> str | None:
    """Get the category for a config key.

    Args:
        key: Configuration key name

    Returns:
        Category name, or None if not categorized
    """
    for category, keys in CONFIG_CATEGORIES.items():
        if key in keys:
            return category
    return None
