"""Tests for cache value chunking."""

import pytest

from app.services.cache import chunker


class TestSplit:
    def test_exact_multiple(self):
        assert chunker.split("abcdef", 2) == ["ab", "cd", "ef"]

    def test_remainder(self):
        assert chunker.split("abcde", 3) == ["abc", "de"]

    def test_fits_one_part(self):
        assert chunker.split("abc", 10) == ["abc"]

    def test_empty_value(self):
        assert chunker.split("", 10) == [""]

    @pytest.mark.parametrize("size", [0, -1])
    def test_invalid_size(self, size):
        with pytest.raises(ValueError):
            chunker.split("abc", size)

    def test_large_value_part_count(self):
        value = "ñ" * 250_001
        parts = chunker.split(value, 90_000)
        assert len(parts) == 3
        assert chunker.join(parts) == value

    @pytest.mark.parametrize("value", ["", "a", "abcd", "abcde", "ñandú€😀", "x" * 17])
    @pytest.mark.parametrize("size", [1, 2, 4, 5, 100])
    def test_join_restores_value(self, value, size):
        parts = chunker.split(value, size)
        assert chunker.join(parts) == value
        assert all(len(p) <= size for p in parts)
        assert len(parts) == max(1, -(-len(value) // size))


class TestManifest:
    def test_parse(self):
        assert chunker.parse_manifest(chunker.manifest(3)) == 3

    def test_format(self):
        assert chunker.manifest(3) == "##CHUNKS##|3"

    @pytest.mark.parametrize("raw", [None, "", '{"a": 1}', "##CHUNKS##|", "##CHUNKS##|x"])
    def test_not_a_manifest(self, raw):
        assert chunker.parse_manifest(raw) is None

    def test_part_key(self):
        assert chunker.part_key("dashboardStats", 2) == "dashboardStats__part2"
