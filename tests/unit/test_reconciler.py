"""Tests for the schema reconciler."""

import threading

import pytest

from app.errors import ConfigurationError, LockTimeoutError, StoreError
from app.models import SchemaRegistry, TableSpec, UUIDBackfillTarget
from app.repositories import SheetStore
from app.services.schema import SchemaReconciler

LIBRO = TableSpec("Libro Diario", ("Fecha", "Monto", "ID"))
TAREAS = TableSpec("Tareas", ("ID", "Descripcion"))


@pytest.fixture
def registry():
    registry = SchemaRegistry([LIBRO, TAREAS], [UUIDBackfillTarget("Libro Diario", "ID")])
    registry.freeze()
    return registry


@pytest.fixture
def reconciler(registry, sheets, lock):
    return SchemaReconciler(registry, open_store=lambda: sheets, lock=lock, lock_timeout=0.1)


class TestStructure:
    def test_creates_missing_tables(self, reconciler, sheets):
        report = reconciler.reconcile()
        assert sheets.read_header("Libro Diario") == ["Fecha", "Monto", "ID"]
        assert sheets.read_header("Tareas") == ["ID", "Descripcion"]
        assert report.changes == ["created table 'Libro Diario'", "created table 'Tareas'"]
        assert report.ok

    def test_appends_missing_column(self, reconciler, sheets):
        sheets.create_table("Libro Diario", ["Fecha", "Monto"])
        report = reconciler.reconcile([LIBRO])
        assert sheets.read_header("Libro Diario") == ["Fecha", "Monto", "ID"]
        assert any("'ID'" in c and "added" in c for c in report)

    def test_keeps_extra_columns_in_place(self, reconciler, sheets):
        sheets.create_table("Libro Diario", ["Notas", "Monto", "Fecha"])
        reconciler.reconcile([LIBRO])
        assert sheets.read_header("Libro Diario") == ["Notas", "Monto", "Fecha", "ID"]

    def test_names_are_case_sensitive(self, reconciler, sheets):
        sheets.create_table("Libro Diario", ["fecha", "Monto", "ID"])
        reconciler.reconcile([LIBRO])
        assert sheets.read_header("Libro Diario") == ["fecha", "Monto", "ID", "Fecha"]

    def test_idempotent(self, reconciler, sheets):
        sheets.create_table("Libro Diario", ["Fecha"])
        sheets.append_row("Libro Diario", ["2025-01-01"])
        assert reconciler.reconcile()
        second = reconciler.reconcile()
        assert not second
        assert second.changes == []

    def test_padded_column_name_is_idempotent(self, reconciler, sheets):
        sheets.create_table("Libro Diario", ["Fecha"])
        spec = TableSpec("Libro Diario", ("Fecha", "Monto "))
        assert reconciler.reconcile([spec]).changes == ["added columns 'Monto' to 'Libro Diario'"]
        assert not reconciler.reconcile([spec])
        assert sheets.read_header("Libro Diario") == ["Fecha", "Monto"]


class TestBackfill:
    def test_fills_only_empty_ids(self, reconciler, sheets):
        sheets.create_table("Libro Diario", ["Fecha", "Monto", "ID"])
        sheets.append_row("Libro Diario", ["d1", "10", "keep-me"])
        sheets.append_row("Libro Diario", ["d2", "20"])
        sheets.append_row("Libro Diario", ["d3", "30", "  "])

        report = reconciler.reconcile([LIBRO])

        ids = sheets.read_column("Libro Diario", 3, 2, 3)
        assert ids[0] == "keep-me"
        assert ids[1] and ids[2].strip()
        assert len(set(ids)) == 3
        assert "backfilled 2 identifiers in 'Libro Diario'" in report.changes
        # Other cells untouched
        assert sheets.read_column("Libro Diario", 2, 2, 3) == ["10", "20", "30"]

    def test_backfills_appended_id_column(self, reconciler, sheets):
        sheets.create_table("Libro Diario", ["Fecha", "Monto"])
        sheets.append_row("Libro Diario", ["d1", "10"])
        reconciler.reconcile([LIBRO])
        assert sheets.records("Libro Diario")[0]["ID"]

    def test_ids_are_stable(self, reconciler, sheets):
        sheets.create_table("Libro Diario", ["Fecha", "Monto", "ID"])
        sheets.append_row("Libro Diario", ["d1", "10"])
        reconciler.reconcile([LIBRO])
        first = sheets.read_column("Libro Diario", 3, 2, 1)
        reconciler.reconcile([LIBRO])
        assert sheets.read_column("Libro Diario", 3, 2, 1) == first

    def test_table_without_target(self, reconciler, sheets):
        sheets.create_table("Tareas", ["ID", "Descripcion"])
        sheets.append_row("Tareas", [None, "llamar"])
        reconciler.reconcile([TAREAS])
        assert sheets.read_column("Tareas", 1, 2, 1) == [""]


class TestFailures:
    def test_store_unavailable(self, registry, lock):
        def broken():
            raise StoreError("no store")

        reconciler = SchemaReconciler(registry, open_store=broken, lock=lock)
        with pytest.raises(ConfigurationError):
            reconciler.reconcile()
        assert lock.try_acquire(0)

    def test_lock_busy(self, reconciler, sheets, lock):
        assert lock.try_acquire(0)
        with pytest.raises(LockTimeoutError) as exc:
            reconciler.reconcile()
        assert exc.value.retryable
        assert sheets.table_names() == []
        lock.release()

    def test_lock_held_by_other_thread(self, reconciler, lock):
        acquired, done = threading.Event(), threading.Event()

        def holder():
            lock.try_acquire(1)
            acquired.set()
            done.wait(1)
            lock.release()

        t = threading.Thread(target=holder)
        t.start()
        acquired.wait(1)
        try:
            with pytest.raises(LockTimeoutError):
                reconciler.reconcile()
        finally:
            done.set()
            t.join()

    def test_lock_released_after_run(self, reconciler, lock):
        reconciler.reconcile()
        assert lock.try_acquire(0)
        lock.release()

    def test_table_failure_does_not_stop_others(self, registry, conn, sheets, lock):
        class FlakyStore(SheetStore):
            def create_table(self, name, header):
                if name == "Libro Diario":
                    raise StoreError("quota exceeded")
                super().create_table(name, header)

        flaky = FlakyStore(conn)
        reconciler = SchemaReconciler(registry, open_store=lambda: flaky, lock=lock)
        report = reconciler.reconcile()

        assert not report.ok
        assert report.failures[0].table == "Libro Diario"
        assert report.changes == ["created table 'Tareas'"]
        assert sheets.table_exists("Tareas")
        assert lock.try_acquire(0)
