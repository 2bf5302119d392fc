"""
permitrack.settings
===================

Configuration settings for the permitrack application.

Plain module constants cover the HTTP server, logging and chart output,
and can be overridden via environment variables.  :class:`AppConfig`
holds the startup defaults for expiry reminders; HR can replace those
at runtime through :pymeth:`permitrack.registry.ExpatRegistry.save_settings`.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .models import LEAD_TIMES, NotificationChannel, NotificationSettings

# ---------------------------------------------------------------------------
# Base directories
# ---------------------------------------------------------------------------
BASE_DIR = Path(__file__).resolve().parent.parent

# API settings
# ---------------------------------------------------------------------------
API_HOST = os.environ.get("PERMITRACK_API_HOST", "127.0.0.1")
API_PORT = int(os.environ.get("PERMITRACK_API_PORT", "8000"))
API_DEBUG = os.environ.get("PERMITRACK_API_DEBUG", "False").lower() == "true"

# Logging
# ---------------------------------------------------------------------------
LOG_LEVEL = os.environ.get("PERMITRACK_LOG_LEVEL", "INFO").upper()
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# Chart output
# ---------------------------------------------------------------------------
CHART_DIR = Path(os.environ.get("PERMITRACK_CHART_DIR", "images"))


# ---------------------------------------------------------------------------
# Pydantic settings model for reminder defaults
# ---------------------------------------------------------------------------
class AppConfig(BaseSettings):
    """Startup defaults, loaded from ``PERMITRACK_*`` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="PERMITRACK_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    notifications_enabled: bool = Field(True, description="Reminders on at startup")
    default_lead_time: int = Field(60, description=f"Days before expiry, one of {LEAD_TIMES}")
    default_channels: List[NotificationChannel] = Field(
        default_factory=lambda: [NotificationChannel.IN_APP],
        description="Reminder channels enabled at startup",
    )
    seed_demo_data: bool = Field(True, description="Start the API with the demo roster")


def default_notification_settings(config: AppConfig | None = None) -> NotificationSettings:
    """Build the NotificationSettings installed at startup."""
    config = config or AppConfig()
    return NotificationSettings(
        enabled=config.notifications_enabled,
        channels=list(config.default_channels),
        lead_time=config.default_lead_time,
    )


# Initialize settings
config = AppConfig()
