"""Base class for report and aggregate records."""

from dataclasses import asdict, dataclass
from typing import Any


@dataclass
class BaseEntity:
    """Plain record that serializes to JSON-ready dicts for the cache and API."""

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
