"""Decides what a page shows given its maintenance state"""
import enum
from typing import Optional

DEFAULT_MAINTENANCE_MESSAGE = "This page is currently under maintenance. Please check back soon."
ADMIN_NOTICE = "ADMIN NOTICE: This page is in maintenance mode. Only admins can view this page."


class PageView(str, enum.Enum):
    LOADING = "loading"
    MAINTENANCE = "maintenance"
    ADMIN_PREVIEW = "admin_preview"
    CONTENT = "content"


def choose_view(state, *, is_admin: bool = False, allow_admin_bypass: bool = True) -> PageView:
    """
    state is anything exposing is_loading and is_maintenance_mode
    (usually a MaintenanceWatcher). Errors never select the maintenance view.
    """
    if state.is_loading:
        return PageView.LOADING

    if state.is_maintenance_mode:
        if allow_admin_bypass and is_admin:
            return PageView.ADMIN_PREVIEW
        return PageView.MAINTENANCE

    return PageView.CONTENT


def maintenance_notice(message: Optional[str]) -> str:
    if message and message.strip():
        return message
    return DEFAULT_MAINTENANCE_MESSAGE
