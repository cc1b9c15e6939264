"""Tests for action dispatch over a wired container."""

import pytest

from app.errors import UnknownActionError
from app.models import LOGS
from web.api import ActionName, ActionRegistry, build_actions


@pytest.fixture
def actions(container):
    return build_actions(container)


class TestRegistry:
    def test_every_action_has_handler(self, actions):
        actions.validate()

    def test_incomplete_registry(self, container):
        registry = ActionRegistry(container)
        registry.register(ActionName.HEALTH_CHECK, lambda c, p: {})
        with pytest.raises(ValueError, match="without handler"):
            registry.validate()

    def test_register_unknown(self, container):
        with pytest.raises(UnknownActionError):
            ActionRegistry(container).register("drop_tables", lambda c, p: {})

    def test_register_twice(self, actions):
        with pytest.raises(ValueError):
            actions.register(ActionName.HEALTH_CHECK, lambda c, p: {})


class TestDispatch:
    def test_unknown_action(self, actions):
        response = actions.dispatch("drop_tables")
        assert response == {
            "status": "error",
            "message": "Unknown action: 'drop_tables'",
            "kind": "unknown_action",
            "retryable": False,
        }

    def test_payload_must_be_object(self, actions):
        response = actions.dispatch("dashboard_stats", ["nope"])
        assert response["kind"] == "validation"

    def test_health_check(self, actions, container):
        response = actions.dispatch("health_check")
        assert response["status"] == "success"
        assert response["data"]["logged"] is False

        actions.dispatch("reconcile_schema")
        response = actions.dispatch("health_check")
        assert response["data"]["logged"] is True
        assert container.open_sheets().records(LOGS.name)[0]["Estado"] == "OK"


class TestSchemaActions:
    def test_reconcile(self, actions):
        first = actions.dispatch("reconcile_schema")
        assert first["status"] == "success"
        assert first["data"]["changed"] is True
        assert first["data"]["failures"] == []
        assert first["data"]["fingerprint"].startswith("sha256:")

        second = actions.dispatch("reconcile_schema")
        assert second["data"]["changed"] is False
        assert second["data"]["changes"] == []

    def test_busy(self, actions, container):
        assert container.lock.try_acquire(0)
        try:
            response = actions.dispatch("reconcile_schema")
        finally:
            container.lock.release()
        assert response["status"] == "error"
        assert response["kind"] == "busy"
        assert response["retryable"] is True
        assert response["message"] == "Server is busy, try again"

    def test_registry(self, actions):
        tables = actions.dispatch("get_registry")["data"]["tables"]
        names = [t["name"] for t in tables]
        assert names[0] == "Clientes Minoristas"
        assert "_LOGS" in names
        libro = next(t for t in tables if t["name"] == "Libro Diario")
        assert libro["uuid_column"] == "ID"


class TestCacheActions:
    def test_stats_source(self, actions):
        assert actions.dispatch("dashboard_stats")["data"]["source"] == "rebuild"
        assert actions.dispatch("dashboard_stats")["data"]["source"] == "cache"

    def test_invalidate(self, actions):
        actions.dispatch("dashboard_stats")
        response = actions.dispatch("invalidate_cache", {"category": "dashboard"})
        assert response["data"]["invalidated"] == 1
        assert response["data"]["keys"] == ["dashboardStats"]
        assert actions.dispatch("dashboard_stats")["data"]["source"] == "rebuild"

    @pytest.mark.parametrize("payload", [{}, {"category": "clientes"}])
    def test_invalid_category(self, actions, payload):
        response = actions.dispatch("invalidate_cache", payload)
        assert response["kind"] == "validation"
        assert response["retryable"] is False

    def test_rebuild(self, actions):
        response = actions.dispatch("rebuild_cache", {"category": "operaciones"})
        assert response["data"]["rebuilt"] is True
        assert response["data"]["data"]["balances"] == {"ARS": {}, "USD": {}}


class TestRecentOperations:
    def test_default(self, actions):
        data = actions.dispatch("recent_operations")["data"]
        assert data["limit"] == 50
        assert data["minorista"] == []

    def test_custom_limit(self, actions):
        assert actions.dispatch("recent_operations", {"limit": 10})["data"]["source"] == "no-cache"

    @pytest.mark.parametrize("limit", ["abc", -1, 6000])
    def test_invalid_limit(self, actions, limit):
        assert actions.dispatch("recent_operations", {"limit": limit})["kind"] == "validation"
