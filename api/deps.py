"""
api.deps
========

FastAPI dependency providers.

`get_registry` returns the process‑wide :class:`ExpatRegistry`; it is the
single writer for the roster, seeded with the demo data when
``PERMITRACK_SEED_DEMO_DATA`` is on.
"""

from datetime import date
from functools import lru_cache

from permitrack.registry import ExpatRegistry
from permitrack.seed import demo_roster
from permitrack.settings import AppConfig, config, default_notification_settings


@lru_cache
def get_config() -> AppConfig:
    """Return application settings."""
    return config


@lru_cache
def get_registry() -> ExpatRegistry:
    """Singleton in‑memory registry (persists across requests)."""
    cfg = get_config()
    settings = default_notification_settings(cfg)
    roster = demo_roster(date.today(), settings.lead_time) if cfg.seed_demo_data else ()
    return ExpatRegistry(roster, settings)
