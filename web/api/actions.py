"""Action dispatch - request action name -> handler.

The set of actions is closed (ActionName). build_actions() registers a
handler for every name and refuses to start if one is missing, so an
unknown action is always a typed UnknownActionError, never a fall-through.
"""

from collections.abc import Callable
from datetime import datetime
from enum import StrEnum
from typing import Any

from loguru import logger
from pydantic import BaseModel

from app.container import Container
from app.errors import AppError, UnknownActionError, ValidationError
from app.models import LOGS
from web.api.cache import invalidate_cache, rebuild_cache
from web.api.dashboard import get_dashboard_stats, get_recent_operations
from web.api.schema import get_registry, reconcile_schema
from web.api.schemas import ErrorResponse, SuccessResponse

Handler = Callable[[Container, dict[str, Any]], Any]


class ActionName(StrEnum):
    HEALTH_CHECK = "health_check"
    GET_REGISTRY = "get_registry"
    RECONCILE_SCHEMA = "reconcile_schema"
    DASHBOARD_STATS = "dashboard_stats"
    RECENT_OPERATIONS = "recent_operations"
    INVALIDATE_CACHE = "invalidate_cache"
    REBUILD_CACHE = "rebuild_cache"


class ActionRegistry:
    """Registered handlers for the closed set of actions."""

    def __init__(self, container: Container):
        self._container = container
        self._handlers: dict[ActionName, Handler] = {}

    @staticmethod
    def _resolve(action: str) -> ActionName:
        try:
            return ActionName(action)
        except ValueError:
            raise UnknownActionError(action) from None

    def register(self, action: str, handler: Handler) -> None:
        name = self._resolve(action)
        if name in self._handlers:
            raise ValueError(f"Action '{name}' already registered")
        self._handlers[name] = handler

    def validate(self) -> None:
        """Fail at startup unless every action has a handler."""
        missing = [a.value for a in ActionName if a not in self._handlers]
        if missing:
            raise ValueError(f"Actions without handler: {missing}")

    def dispatch(self, action: str, payload: dict[str, Any] | None = None) -> dict[str, Any]:
        """Run an action and wrap the outcome in the response envelope."""
        try:
            name = self._resolve(action)
            handler = self._handlers.get(name)
            if handler is None:
                raise UnknownActionError(action)
            if payload is not None and not isinstance(payload, dict):
                raise ValidationError("Payload must be an object")

            result = handler(self._container, payload or {})
            data = result.model_dump(mode="json") if isinstance(result, BaseModel) else result
            return SuccessResponse(data=data).model_dump(mode="json")
        except AppError as e:
            log = logger.warning if e.retryable else logger.error
            log("Action {} failed ({}): {}", action, e.kind, e.message)
            return ErrorResponse.from_error(e).model_dump(mode="json")


# Handlers


def _health_check(container: Container, payload: dict[str, Any]) -> dict[str, Any]:
    sheets = container.open_sheets()
    timestamp = datetime.now()
    logged = sheets.table_exists(LOGS.name)
    if logged:
        sheets.append_record(LOGS.name, {"Fecha": timestamp, "Estado": "OK", "Mensaje": "Health check"})
    return {"status": "System Online", "timestamp": timestamp.isoformat(), "logged": logged}


def _recent_operations(container: Container, payload: dict[str, Any]):
    try:
        limit = int(payload.get("limit", 50))
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid limit: {payload.get('limit')!r}") from None
    return get_recent_operations(container, limit)


def build_actions(container: Container) -> ActionRegistry:
    """Registry with every action wired to its view."""
    actions = ActionRegistry(container)
    actions.register(ActionName.HEALTH_CHECK, _health_check)
    actions.register(ActionName.GET_REGISTRY, lambda c, p: get_registry(c))
    actions.register(ActionName.RECONCILE_SCHEMA, lambda c, p: reconcile_schema(c))
    actions.register(ActionName.DASHBOARD_STATS, lambda c, p: get_dashboard_stats(c))
    actions.register(ActionName.RECENT_OPERATIONS, _recent_operations)
    actions.register(ActionName.INVALIDATE_CACHE, lambda c, p: invalidate_cache(c, p.get("category")))
    actions.register(ActionName.REBUILD_CACHE, lambda c, p: rebuild_cache(c, p.get("category")))
    actions.validate()
    return actions
