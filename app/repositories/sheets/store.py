"""Sheet store - a spreadsheet-shaped backing store on DuckDB.

Each sheet is a named grid of string cells. Row 1 is the header; data rows
start at row 2. Cells are addressed by 1-based (row, column) offsets and
absent cells read as empty strings.
"""

import uuid
from collections.abc import Sequence
from datetime import datetime
from typing import Any, Protocol

from loguru import logger

from app.errors import StoreError
from app.repositories.base import BaseRepository
from app.repositories.sheets.rows import HeaderMap, Row, normalize

HEADER_ROW = 1
FIRST_DATA_ROW = 2


class TableStore(Protocol):
    """Backing store operations the schema reconciler relies on."""

    def table_exists(self, name: str) -> bool: ...

    def create_table(self, name: str, header: Sequence[str]) -> None: ...

    def read_header(self, name: str) -> list[str]: ...

    def append_columns(self, name: str, columns: Sequence[str]) -> int: ...

    def last_row(self, name: str) -> int: ...

    def read_column(self, name: str, col: int, start_row: int, n_rows: int) -> list[str]: ...

    def write_column(self, name: str, col: int, start_row: int, values: Sequence[Any]) -> None: ...

    def new_id(self) -> str: ...


def _cell(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    return str(value)


class SheetStore(BaseRepository):
    """DuckDB-backed TableStore."""

    # Table existence and shape

    def table_names(self) -> list[str]:
        rows = self.fetchall("SELECT name FROM sheet ORDER BY created_at, name")
        return [r[0] for r in rows]

    def table_exists(self, name: str) -> bool:
        row = self.fetchone("SELECT COUNT(*) FROM sheet WHERE name = ?", [name])
        return row[0] > 0

    def _require(self, name: str) -> None:
        if not self.table_exists(name):
            raise StoreError(f"Sheet '{name}' does not exist")

    def create_table(self, name: str, header: Sequence[str]) -> None:
        """Create a sheet and write its header row."""
        if self.table_exists(name):
            raise StoreError(f"Sheet '{name}' already exists")

        with self.transaction():
            self.execute("INSERT INTO sheet (name, created_at) VALUES (?, ?)", [name, datetime.now()])
            self.executemany(
                "INSERT INTO sheet_cell (sheet, row_idx, col_idx, value) VALUES (?, ?, ?, ?)",
                [[name, HEADER_ROW, i, h] for i, h in enumerate(header, start=1)],
            )
        self._forget(f"header_{name}")
        logger.debug("Sheet created: {} ({} columns)", name, len(header))

    def read_header(self, name: str) -> list[str]:
        """Header cells, trimmed and stringified, gaps read as ''."""
        self._require(name)
        rows = self.fetchall(
            "SELECT col_idx, value FROM sheet_cell WHERE sheet = ? AND row_idx = ? ORDER BY col_idx",
            [name, HEADER_ROW],
        )
        width = self.last_column(name)
        header = [""] * width
        for col, value in rows:
            header[col - 1] = normalize(value)
        return header

    def header_map(self, name: str) -> HeaderMap:
        """HeaderMap for the sheet's current shape (cached until it changes)."""
        return self._cached(f"header_{name}", lambda: HeaderMap(self.read_header(name)))

    def last_column(self, name: str) -> int:
        row = self.fetchone("SELECT MAX(col_idx) FROM sheet_cell WHERE sheet = ?", [name])
        return row[0] or 0

    def last_row(self, name: str) -> int:
        """Highest row holding any cell (1 when only the header exists)."""
        self._require(name)
        row = self.fetchone("SELECT MAX(row_idx) FROM sheet_cell WHERE sheet = ?", [name])
        return row[0] or 0

    def append_columns(self, name: str, columns: Sequence[str]) -> int:
        """Write new header cells after the last used column.

        Returns the 1-based column of the first appended header.
        """
        self._require(name)
        start = self.last_column(name) + 1
        self.executemany(
            "INSERT OR REPLACE INTO sheet_cell (sheet, row_idx, col_idx, value) VALUES (?, ?, ?, ?)",
            [[name, HEADER_ROW, start + i, c] for i, c in enumerate(columns)],
        )
        self._forget(f"header_{name}")
        logger.debug("Sheet {}: appended {} at column {}", name, list(columns), start)
        return start

    # Column ranges

    def read_column(self, name: str, col: int, start_row: int, n_rows: int) -> list[str]:
        """n_rows cells of one column starting at start_row."""
        self._require(name)
        if n_rows <= 0:
            return []
        rows = self.fetchall(
            """
            SELECT row_idx, value FROM sheet_cell
            WHERE sheet = ? AND col_idx = ? AND row_idx BETWEEN ? AND ?
            """,
            [name, col, start_row, start_row + n_rows - 1],
        )
        values = [""] * n_rows
        for row_idx, value in rows:
            values[row_idx - start_row] = "" if value is None else value
        return values

    def write_column(self, name: str, col: int, start_row: int, values: Sequence[Any]) -> None:
        """Write consecutive cells of one column starting at start_row."""
        self._require(name)
        self.executemany(
            "INSERT OR REPLACE INTO sheet_cell (sheet, row_idx, col_idx, value) VALUES (?, ?, ?, ?)",
            [[name, start_row + i, col, _cell(v)] for i, v in enumerate(values)],
        )

    def write_cells(self, name: str, col: int, cells: dict[int, Any]) -> None:
        """Write selected rows of one column, leaving the others untouched."""
        self._require(name)
        self.executemany(
            "INSERT OR REPLACE INTO sheet_cell (sheet, row_idx, col_idx, value) VALUES (?, ?, ?, ?)",
            [[name, row_idx, col, _cell(v)] for row_idx, v in sorted(cells.items())],
        )

    # Rows

    def append_row(self, name: str, values: Sequence[Any]) -> int:
        """Append a data row after the last used row. Returns its row number."""
        row_idx = max(self.last_row(name), HEADER_ROW) + 1
        self.executemany(
            "INSERT INTO sheet_cell (sheet, row_idx, col_idx, value) VALUES (?, ?, ?, ?)",
            [[name, row_idx, i, _cell(v)] for i, v in enumerate(values, start=1) if v is not None],
        )
        return row_idx

    def append_record(self, name: str, record: dict[str, Any]) -> int:
        """Append a row mapped onto the header by column name.

        Keys absent from the header are ignored; the reconciler owns structure.
        """
        header = self.header_map(name)
        values: list[Any] = [None] * header.width
        matched = 0
        for key, value in record.items():
            col = header.offset(key)
            if col is not None:
                values[col - 1] = value
                matched += 1
        if record and not matched:
            logger.warning("Row saved to '{}' but no column matched", name)
        return self.append_row(name, values)

    def read_rows(self, name: str, start_row: int, n_rows: int) -> list[list[str]]:
        """Rows start_row..start_row+n_rows-1, each as wide as the sheet."""
        self._require(name)
        if n_rows <= 0:
            return []
        width = self.last_column(name)
        rows = self.fetchall(
            """
            SELECT row_idx, col_idx, value FROM sheet_cell
            WHERE sheet = ? AND row_idx BETWEEN ? AND ?
            """,
            [name, start_row, start_row + n_rows - 1],
        )
        grid = [[""] * width for _ in range(n_rows)]
        for row_idx, col, value in rows:
            grid[row_idx - start_row][col - 1] = "" if value is None else value
        return grid

    def records(self, name: str, limit: int | None = None) -> list[Row]:
        """Latest data rows as named Rows, newest first.

        A missing sheet reads as empty. limit=None reads every row.
        """
        if not self.table_exists(name):
            return []

        last = self.last_row(name)
        total = last - HEADER_ROW
        if total <= 0:
            return []

        count = total if limit is None else min(limit, total)
        start = last - count + 1
        header = HeaderMap(self.read_header(name))
        grid = self.read_rows(name, start, count)
        rows = [Row(header, values, start + i) for i, values in enumerate(grid)]
        rows.reverse()
        return rows

    def new_id(self) -> str:
        return str(uuid.uuid4())
