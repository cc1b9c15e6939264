"""Schema registry - declared shape of every backing table."""

import hashlib
import json
from collections.abc import Iterable, Iterator

from loguru import logger

from app.models.common import TableSpec, UUIDBackfillTarget


class RegistryFrozenError(Exception):
    """Raised when modifying a frozen registry."""


class DuplicateTableError(Exception):
    """Raised when a table name is registered twice."""


class SchemaRegistry:
    """Ordered mapping of table name to its TableSpec, plus backfill targets.

    Registration order is the order the reconciler walks tables in. Build the
    registry at startup, freeze it, and pass it to whoever needs it.
    """

    def __init__(
        self,
        tables: Iterable[TableSpec] = (),
        uuid_targets: Iterable[UUIDBackfillTarget] = (),
    ):
        self._tables: dict[str, TableSpec] = {}
        self._uuid_targets: dict[str, UUIDBackfillTarget] = {}
        self._frozen = False
        self._fingerprint: str | None = None

        for spec in tables:
            self.register(spec)
        for target in uuid_targets:
            self.register_uuid_target(target)

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def tables(self) -> tuple[TableSpec, ...]:
        return tuple(self._tables.values())

    @property
    def uuid_targets(self) -> tuple[UUIDBackfillTarget, ...]:
        return tuple(self._uuid_targets.values())

    @property
    def fingerprint(self) -> str:
        """SHA-256 of the ordered registry contents."""
        if self._fingerprint is not None:
            return self._fingerprint
        return self._compute_fingerprint()

    def register(self, spec: TableSpec) -> None:
        """Append a table spec to the registry."""
        if self._frozen:
            raise RegistryFrozenError(f"Cannot register table '{spec.name}': registry is frozen")
        if spec.name in self._tables:
            raise DuplicateTableError(f"Table '{spec.name}' already registered")

        self._tables[spec.name] = spec
        logger.debug("Registered table {} ({} columns)", spec.name, len(spec.required_columns))

    def register_uuid_target(self, target: UUIDBackfillTarget) -> None:
        """Mark a registered table column for identifier backfill."""
        if self._frozen:
            raise RegistryFrozenError(f"Cannot register backfill target '{target.table}': registry is frozen")

        spec = self._tables.get(target.table)
        if spec is None:
            raise ValueError(f"Backfill target references unregistered table '{target.table}'")
        if target.column not in spec.required_columns:
            raise ValueError(f"Column '{target.column}' is not required by table '{target.table}'")

        self._uuid_targets[target.table] = target

    def get(self, name: str) -> TableSpec | None:
        return self._tables.get(name)

    def uuid_target_for(self, table: str) -> UUIDBackfillTarget | None:
        return self._uuid_targets.get(table)

    def freeze(self) -> str:
        """Make the registry immutable and return its fingerprint."""
        if not self._frozen:
            self._fingerprint = self._compute_fingerprint()
            self._frozen = True
            logger.info(
                "Schema registry frozen: {} tables, {} backfill targets, {}",
                len(self._tables),
                len(self._uuid_targets),
                self._fingerprint,
            )
        return self._fingerprint

    def to_dict(self) -> dict:
        return {
            "tables": [{"name": s.name, "columns": list(s.required_columns)} for s in self._tables.values()],
            "uuid_targets": [{"table": t.table, "column": t.column} for t in self._uuid_targets.values()],
        }

    def _compute_fingerprint(self) -> str:
        # Table order matters to the reconciler, so it is not sorted away
        canonical = json.dumps(self.to_dict(), ensure_ascii=False, separators=(",", ":"))
        return "sha256:" + hashlib.sha256(canonical.encode("utf-8")).hexdigest()

    def __contains__(self, name: object) -> bool:
        return name in self._tables

    def __iter__(self) -> Iterator[TableSpec]:
        return iter(self._tables.values())

    def __len__(self) -> int:
        return len(self._tables)
