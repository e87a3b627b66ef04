"""Rules file loading and schema."""

from .loader import default_rules_path, load_rules
from .models import Rules

__all__ = ["Rules", "default_rules_path", "load_rules"]
