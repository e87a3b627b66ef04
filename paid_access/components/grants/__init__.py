"""
Grants component - access-grant notification and grant records.
"""

from .component import (
    AccessGrantNotifier,
    build_access_grant,
    generate_free_access_token,
    is_free_access_token,
)
from .models import DEFAULT_FREE_TOKEN_PREFIX, AccessGrant
from .ports import GrantCallback

__all__ = [
    "AccessGrantNotifier",
    "build_access_grant",
    "generate_free_access_token",
    "is_free_access_token",
    "AccessGrant",
    "DEFAULT_FREE_TOKEN_PREFIX",
    "GrantCallback",
]
