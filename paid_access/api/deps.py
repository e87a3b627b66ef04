import os
from functools import lru_cache
from pathlib import Path

from fastapi import Depends

from paid_access.adapters.settings_static import RulesSettingsProvider
from paid_access.components.settings import SettingsProviderPort
from paid_access.rules.loader import RULES_ENV_VAR, load_rules
from paid_access.rules.models import Rules


# --- Settings ---
class Settings:
    def __init__(self) -> None:
        self.base_dir = Path(os.getcwd())
        self.rules_path = Path(os.environ.get(RULES_ENV_VAR, self.base_dir / "rules.yaml"))


@lru_cache
def get_settings() -> Settings:
    return Settings()


# --- Rules ---
def get_rules(settings: Settings = Depends(get_settings)) -> Rules:
    return _load_rules_cached(settings.rules_path)


@lru_cache
def _load_rules_cached(path: Path) -> Rules:
    return load_rules(path)


# --- Providers ---
def get_settings_provider() -> SettingsProviderPort:
    return RulesSettingsProvider()
