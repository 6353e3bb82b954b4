"""Tests for byte-size parsing and formatting."""

from __future__ import annotations

import pytest

from lsh.data.size import bytes_of, format_size, is_size_column


class TestBytesOf:
    """Tests for bytes_of."""

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("500", 500),
            ("500b", 500),
            ("10kb", 10 * 1024),
            ("10KB", 10 * 1024),
            ("3.5MB", int(3.5 * 1024**2)),
            ("2 gb", 2 * 1024**3),
            ("1tb", 1024**4),
            ("2.5 KB", 2560),
            ("10.5 KB", 10752),
        ],
    )
    def test_units(self, text: str, expected: int) -> None:
        """Units are powers of 1024, case-insensitive, optional space."""
        assert bytes_of(text) == expected

    def test_short_units(self) -> None:
        """Single-letter units are accepted."""
        assert bytes_of("4k") == 4096
        assert bytes_of("1m") == 1024**2
        assert bytes_of("1g") == 1024**3

    def test_sign(self) -> None:
        """A leading sign is honored."""
        assert bytes_of("-1kb") == -1024
        assert bytes_of("+2b") == 2

    def test_fraction_truncates(self) -> None:
        """Fractional byte counts truncate toward zero."""
        assert bytes_of("1.9") == 1
        assert bytes_of("-1.9") == -1
        assert bytes_of(".5kb") == 512

    def test_surrounding_whitespace(self) -> None:
        """Leading and trailing whitespace is ignored."""
        assert bytes_of("  10 kb  ") == 10240

    @pytest.mark.parametrize("text", ["", "-", "abc", "kb", "10 parsecs", "1.2.3kb", "10kb extra"])
    def test_malformed_is_zero(self, text: str) -> None:
        """Malformed or unrecognized input yields 0 instead of raising."""
        assert bytes_of(text) == 0

    def test_unrepresentable_is_zero(self) -> None:
        """Quantities past float range yield 0 instead of raising."""
        assert bytes_of("9" * 400 + "kb") == 0
        assert bytes_of("9" * 400) == 0


class TestFormatSize:
    """Tests for format_size."""

    def test_bytes(self) -> None:
        assert format_size(0) == "0 B"
        assert format_size(1023) == "1023 B"

    def test_larger_units(self) -> None:
        assert format_size(1024) == "1.0 KB"
        assert format_size(10752) == "10.5 KB"
        assert format_size(2 * 1024**2) == "2.0 MB"
        assert format_size(3 * 1024**3) == "3.0 GB"
        assert format_size(1024**4) == "1.0 TB"

    def test_formatted_sizes_parse_back(self) -> None:
        """Listing output stays comparable through bytes_of."""
        assert bytes_of(format_size(10752)) == 10752


class TestIsSizeColumn:
    """Tests for size column detection."""

    def test_named_columns(self) -> None:
        assert is_size_column("Size")
        assert is_size_column("size")
        assert is_size_column("MEMORY")

    def test_other_columns(self) -> None:
        assert not is_size_column("Name")
        assert not is_size_column("FileSize")
