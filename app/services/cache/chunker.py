"""Chunking of values larger than one host cache entry.

A chunked entry is a manifest at the logical key plus numbered parts:

    key          -> "##CHUNKS##|3"
    key__part0   -> first slice
    key__part1   -> second slice
    key__part2   -> third slice
"""

from collections.abc import Sequence

CHUNK_MARKER = "##CHUNKS##|"
PART_SUFFIX = "__part"


def split(value: str, max_part_size: int) -> list[str]:
    """Contiguous slices of at most max_part_size characters.

    An empty value yields one empty part so a manifest always has a count.
    """
    if max_part_size <= 0:
        raise ValueError(f"max_part_size must be positive, got {max_part_size}")
    if not value:
        return [""]
    return [value[i : i + max_part_size] for i in range(0, len(value), max_part_size)]


def join(parts: Sequence[str]) -> str:
    """Inverse of split."""
    return "".join(parts)


def manifest(part_count: int) -> str:
    return f"{CHUNK_MARKER}{part_count}"


def parse_manifest(raw: str | None) -> int | None:
    """Part count of a manifest value, None for anything else."""
    if not raw or not raw.startswith(CHUNK_MARKER):
        return None
    count = raw[len(CHUNK_MARKER) :]
    if not count.isdigit():
        return None
    return int(count)


def part_key(key: str, index: int) -> str:
    return f"{key}{PART_SUFFIX}{index}"
