"""Configuration module."""

from billing.config.logging import configure_logging, get_logger
from billing.config.settings import (
    BillingSettings,
    Settings,
    get_settings,
    reset_settings,
)

__all__ = [
    "Settings",
    "BillingSettings",
    "get_settings",
    "reset_settings",
    "configure_logging",
    "get_logger",
]
