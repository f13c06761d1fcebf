"""
icons.py - Icon definitions for Coursecart validation and log output

Usage:
    from coursecart.icons import ERROR, WARNING
    print(f"{ERROR} Course title is required")

Unicode icons are defined here once; other modules import them.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class Icons:
    """
    Icon definitions.

    Categories:
    - Status: SUCCESS, ERROR, WARNING, INFO
    - Logging: DEBUG, CRITICAL
    """

    # Status
    SUCCESS: str = "✅"
    ERROR: str = "❌"
    WARNING: str = "⚠️"
    INFO: str = "ℹ️"

    # Logging
    DEBUG: str = "🔍"
    CRITICAL: str = "💥"


icons = Icons()

SUCCESS = icons.SUCCESS
ERROR = icons.ERROR
WARNING = icons.WARNING
INFO = icons.INFO
