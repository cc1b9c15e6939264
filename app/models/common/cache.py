"""Host cache table - key/value entries with expiry (epoch seconds)."""

CACHE_DDL = """
CREATE TABLE IF NOT EXISTS cache_entry (
    key VARCHAR PRIMARY KEY,
    value VARCHAR NOT NULL,
    expires_at DOUBLE NOT NULL
)
"""
