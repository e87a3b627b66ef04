"""
Settings component - payment settings snapshot with fallback defaults.
"""

from .component import (
    get_fallback_settings,
    get_seeded_settings,
    load_payment_settings,
    parse_settings,
)
from .models import LoadSettingsOutput, SettingsSource
from .ports import SettingsProviderPort

__all__ = [
    "load_payment_settings",
    "parse_settings",
    "get_fallback_settings",
    "get_seeded_settings",
    "LoadSettingsOutput",
    "SettingsSource",
    "SettingsProviderPort",
]
