"""Schema reconciler - self-heal backing tables against the registry.

For every registered table, in registry order:

1. create it with its declared header when it does not exist,
2. append required columns missing from its header (exact, case-sensitive
   names) after the last column,
3. fill empty identifier cells of backfill target columns with fresh ids.

Existing columns are never removed or reordered and non-empty cells are
never rewritten, so a second run with no writes in between changes nothing.
The whole pass holds the host lock; structural writes never run unlocked.
"""

from collections.abc import Callable, Sequence

from loguru import logger

from app.errors import AppError, ConfigurationError
from app.models import ReconciliationReport, SchemaRegistry, TableSpec, UUIDBackfillTarget
from app.repositories.common.lock import HostLock, hold
from app.repositories.sheets import FIRST_DATA_ROW, HeaderMap, TableStore, normalize


class SchemaReconciler:
    """Makes the backing store match a SchemaRegistry."""

    def __init__(
        self,
        registry: SchemaRegistry,
        open_store: Callable[[], TableStore],
        lock: HostLock,
        lock_timeout: float = 10.0,
    ):
        self._registry = registry
        self._open_store = open_store
        self._lock = lock
        self._lock_timeout = lock_timeout

    def reconcile(self, table_specs: Sequence[TableSpec] | None = None) -> ReconciliationReport:
        """Run one reconciliation pass.

        Raises:
            ConfigurationError: the backing store cannot be opened (nothing written).
            LockTimeoutError: the host lock was not acquired in time (retryable).
        """
        specs = list(self._registry.tables if table_specs is None else table_specs)

        try:
            store = self._open_store()
        except ConfigurationError:
            raise
        except AppError as e:
            raise ConfigurationError(f"Backing store unavailable: {e.message}") from e

        report = ReconciliationReport()
        with hold(self._lock, self._lock_timeout):
            logger.info("Reconciling {} tables against {}", len(specs), self._registry.fingerprint)
            for spec in specs:
                try:
                    self._reconcile_table(store, spec, report)
                except AppError as e:
                    logger.error("Reconcile failed for {}: {}", spec.name, e.message)
                    report.fail(spec.name, e.message)

        if report.changes:
            logger.info("Reconcile finished: {} changes", len(report.changes))
        else:
            logger.debug("Reconcile finished: no changes")
        if report.failures:
            logger.warning("Reconcile finished with {} failed tables", len(report.failures))
        return report

    def _reconcile_table(self, store: TableStore, spec: TableSpec, report: ReconciliationReport) -> None:
        if not store.table_exists(spec.name):
            store.create_table(spec.name, spec.required_columns)
            report.record(f"created table '{spec.name}'")
            logger.info("Created table {}", spec.name)
            header = HeaderMap(spec.required_columns)
        else:
            header = HeaderMap(store.read_header(spec.name))
            missing = header.missing(spec.required_columns)
            if missing:
                store.append_columns(spec.name, missing)
                report.record(f"added columns {', '.join(repr(c) for c in missing)} to '{spec.name}'")
                logger.info("Added columns {} to {}", missing, spec.name)
                header = HeaderMap(store.read_header(spec.name))

        target = self._registry.uuid_target_for(spec.name)
        if target is not None:
            filled = self._backfill_ids(store, target, header)
            if filled:
                report.record(f"backfilled {filled} identifiers in '{spec.name}'")
                logger.info("Backfilled {} identifiers in {}", filled, spec.name)

    def _backfill_ids(self, store: TableStore, target: UUIDBackfillTarget, header: HeaderMap) -> int:
        """Fill empty cells of the id column. Returns how many were filled."""
        col = header.offset(target.column)
        if col is None:
            logger.warning("Id column {} not found in {}", target.column, target.table)
            return 0

        n_rows = store.last_row(target.table) - FIRST_DATA_ROW + 1
        if n_rows <= 0:
            return 0

        values = store.read_column(target.table, col, FIRST_DATA_ROW, n_rows)
        empty = [i for i, v in enumerate(values) if not normalize(v)]
        if not empty:
            return 0

        # Write back only the empty cells, one contiguous run at a time
        for start, length in _runs(empty):
            ids = [store.new_id() for _ in range(length)]
            store.write_column(target.table, col, FIRST_DATA_ROW + start, ids)
        return len(empty)


def _runs(indexes: list[int]) -> list[tuple[int, int]]:
    """Group sorted indexes into (start, length) runs of consecutive values."""
    runs: list[tuple[int, int]] = []
    for i in indexes:
        if runs and runs[-1][0] + runs[-1][1] == i:
            start, length = runs[-1]
            runs[-1] = (start, length + 1)
        else:
            runs.append((i, 1))
    return runs
