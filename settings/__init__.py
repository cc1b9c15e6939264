"""Application settings."""

import os
from dataclasses import dataclass
from pathlib import Path

# Backing store (sheet database)
DB_PATH = os.getenv("ICONNECT_DB_PATH", "iconnect.duckdb")

# Host cache
CACHE_PATH = os.getenv("ICONNECT_CACHE_PATH", "")
CACHE_PREFIX = os.getenv("ICONNECT_CACHE_PREFIX", "ICONNECT_")
CACHE_MAX_ENTRY_SIZE = int(os.getenv("ICONNECT_CACHE_MAX_ENTRY_SIZE", "100000"))
CACHE_PART_SIZE = int(os.getenv("ICONNECT_CACHE_PART_SIZE", "90000"))
CACHE_TTL = int(os.getenv("ICONNECT_CACHE_TTL", "900"))
CACHE_MAX_TTL = 21600

# Host lock
LOCK_PATH = os.getenv("ICONNECT_LOCK_PATH", "")
LOCK_TIMEOUT = float(os.getenv("ICONNECT_LOCK_TIMEOUT", "10"))

# Logging
LOG_DIR = Path("logs")


@dataclass(frozen=True)
class Settings:
    """Runtime configuration handed to the container."""

    db_path: str = DB_PATH
    cache_path: str = CACHE_PATH
    cache_prefix: str = CACHE_PREFIX
    cache_max_entry_size: int = CACHE_MAX_ENTRY_SIZE
    cache_part_size: int = CACHE_PART_SIZE
    cache_ttl: int = CACHE_TTL
    cache_max_ttl: int = CACHE_MAX_TTL
    lock_path: str = LOCK_PATH
    lock_timeout: float = LOCK_TIMEOUT

    @classmethod
    def from_env(cls) -> "Settings":
        """Re-read environment variables (module constants are read at import)."""
        return cls(
            db_path=os.getenv("ICONNECT_DB_PATH", DB_PATH),
            cache_path=os.getenv("ICONNECT_CACHE_PATH", CACHE_PATH),
            cache_prefix=os.getenv("ICONNECT_CACHE_PREFIX", CACHE_PREFIX),
            cache_max_entry_size=int(os.getenv("ICONNECT_CACHE_MAX_ENTRY_SIZE", str(CACHE_MAX_ENTRY_SIZE))),
            cache_part_size=int(os.getenv("ICONNECT_CACHE_PART_SIZE", str(CACHE_PART_SIZE))),
            cache_ttl=int(os.getenv("ICONNECT_CACHE_TTL", str(CACHE_TTL))),
            lock_path=os.getenv("ICONNECT_LOCK_PATH", LOCK_PATH),
            lock_timeout=float(os.getenv("ICONNECT_LOCK_TIMEOUT", str(LOCK_TIMEOUT))),
        )
