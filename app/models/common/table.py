"""Table shape definitions and the reconciliation report."""

from dataclasses import dataclass, field

from app.models.common.base import BaseEntity


@dataclass(frozen=True)
class TableSpec:
    """Required, ordered columns of one backing table.

    Column order is the header order used when the table is created. Columns
    missing from an existing table are appended at the end.
    """

    name: str
    required_columns: tuple[str, ...]

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("TableSpec name must not be empty")
        # Headers are read back trimmed, so names are trimmed the same way
        columns = tuple(str(c).strip() for c in self.required_columns)
        if not all(columns):
            raise ValueError(f"Empty column name in '{self.name}'")
        object.__setattr__(self, "required_columns", columns)
        dupes = sorted({c for c in columns if columns.count(c) > 1})
        if dupes:
            raise ValueError(f"Duplicate columns in '{self.name}': {dupes}")


@dataclass(frozen=True)
class UUIDBackfillTarget:
    """Column whose empty cells get freshly generated identifiers."""

    table: str
    column: str


@dataclass
class TableFailure(BaseEntity):
    """A table the reconciler could not finish."""

    table: str
    message: str


@dataclass
class ReconciliationReport(BaseEntity):
    """Changes made by one reconcile call. Empty means nothing to do."""

    changes: list[str] = field(default_factory=list)
    failures: list[TableFailure] = field(default_factory=list)

    def record(self, change: str) -> None:
        self.changes.append(change)

    def fail(self, table: str, message: str) -> None:
        self.failures.append(TableFailure(table=table, message=message))

    @property
    def ok(self) -> bool:
        return not self.failures

    def __bool__(self) -> bool:
        return bool(self.changes or self.failures)

    def __len__(self) -> int:
        return len(self.changes)

    def __iter__(self):
        return iter(self.changes)
