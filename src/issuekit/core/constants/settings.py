"""Well-known settings keys.

Seeding, login bookkeeping and :meth:`AppStorage.reset` all use these names so
what one writes the other clears.
"""

from __future__ import annotations

from enum import StrEnum


class SettingsKey(StrEnum):
    IS_LOGGED_IN = "isLoggedIn"
    CURRENT_USER_ID = "currentUserId"
    HAS_SETUP = "hasSetup"
    APP_INITIALIZED = "appInitialized"
    NOTIFICATIONS_ENABLED = "notificationsEnabled"


DASHBOARD_GADGETS_PREFIX = "dashboard_gadgets_"

RESET_KEYS: tuple[str, ...] = tuple(key.value for key in SettingsKey)
"""Keys removed by a full reset, in addition to every dashboard gadget key."""

SESSION_KEYS: tuple[str, ...] = (SettingsKey.IS_LOGGED_IN.value, SettingsKey.CURRENT_USER_ID.value)
"""Keys still removed when a reset has to fall back."""


def dashboard_gadgets_key(user_id: str) -> str:
    return f"{DASHBOARD_GADGETS_PREFIX}{user_id}"
