"""Action API - request dispatch over the admin core."""

from web.api.actions import ActionName, ActionRegistry, build_actions

__all__ = [
    "ActionName",
    "ActionRegistry",
    "build_actions",
]
