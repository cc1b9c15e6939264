"""Sheet storage - spreadsheet-shaped backing store and row access."""

from app.repositories.sheets.rows import HeaderMap, Row, normalize
from app.repositories.sheets.store import FIRST_DATA_ROW, HEADER_ROW, SheetStore, TableStore

__all__ = [
    "TableStore",
    "SheetStore",
    "HeaderMap",
    "Row",
    "normalize",
    "HEADER_ROW",
    "FIRST_DATA_ROW",
]
