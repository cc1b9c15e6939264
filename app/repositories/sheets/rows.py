"""Named access to sheet rows.

A sheet row is a list of cell values whose meaning comes from the header
row. HeaderMap resolves a column name to its 1-based offset once per table
shape; Row reads cells by name so appended columns never shift lookups.
"""

from collections.abc import Iterator, Sequence
from typing import Any


def normalize(cell: Any) -> str:
    """Stringify and trim a cell value (None reads as empty)."""
    if cell is None:
        return ""
    return str(cell).strip()


class HeaderMap:
    """Column name -> 1-based column offset for one header row."""

    def __init__(self, header: Sequence[Any]):
        self._names = tuple(normalize(h) for h in header)
        self._offsets: dict[str, int] = {}
        for i, name in enumerate(self._names, start=1):
            # First occurrence wins, like a spreadsheet header lookup
            if name and name not in self._offsets:
                self._offsets[name] = i

    @property
    def names(self) -> tuple[str, ...]:
        return self._names

    @property
    def width(self) -> int:
        return len(self._names)

    def offset(self, name: str) -> int | None:
        """1-based column of name, or None when the header lacks it."""
        return self._offsets.get(name)

    def require(self, name: str) -> int:
        col = self.offset(name)
        if col is None:
            raise KeyError(f"Column '{name}' not in header")
        return col

    def missing(self, required: Sequence[str]) -> list[str]:
        """Required names absent from the header, in required order."""
        return [c for c in required if c not in self._offsets]

    def __contains__(self, name: object) -> bool:
        return name in self._offsets

    def __eq__(self, other: object) -> bool:
        return isinstance(other, HeaderMap) and self._names == other._names

    def __hash__(self) -> int:
        return hash(self._names)

    def __repr__(self) -> str:
        return f"HeaderMap({list(self._names)!r})"


class Row:
    """One data row with cells addressed by column name."""

    __slots__ = ("_header", "_values", "number")

    def __init__(self, header: HeaderMap, values: Sequence[Any], number: int):
        self._header = header
        self._values = list(values)
        self.number = number

    def get(self, name: str, default: str = "") -> str:
        col = self._header.offset(name)
        if col is None or col > len(self._values):
            return default
        value = normalize(self._values[col - 1])
        return value if value else default

    def __getitem__(self, name: str) -> str:
        if name not in self._header:
            raise KeyError(name)
        return self.get(name)

    def __iter__(self) -> Iterator[str]:
        return iter(self._header.names)

    def to_dict(self) -> dict[str, str]:
        return {name: self.get(name) for name in self._header.names if name}

    def __repr__(self) -> str:
        return f"Row({self.number}, {self.to_dict()!r})"
