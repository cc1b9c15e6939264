"""Sheet storage tables - a spreadsheet laid out as cells."""

SHEET_DDL = """
CREATE TABLE IF NOT EXISTS sheet (
    name VARCHAR PRIMARY KEY,
    created_at TIMESTAMP NOT NULL
)
"""

# Row 1 holds the header; data rows start at 2. Offsets are 1-based.
SHEET_CELL_DDL = """
CREATE TABLE IF NOT EXISTS sheet_cell (
    sheet VARCHAR NOT NULL,
    row_idx INTEGER NOT NULL,
    col_idx INTEGER NOT NULL,
    value VARCHAR,
    PRIMARY KEY (sheet, row_idx, col_idx)
)
"""
