"""
Tests for size string parsing and formatting — used for the --min-size filter and
for every size printed by the CLI.
"""
import math

import pytest

from spacesaver.utils.size_spec import (
    KILOBYTE, MEGABYTE, GIGABYTE, TERABYTE, MAX_SIZE,
    SizeSpec, SizeSpecError, InvalidUnitError, InvalidNumberError, SizeOverflowError, MalformedSizeError)


class TestParse:
    """Test conversion from size strings to byte counts."""

    def test_single_units(self):
        assert SizeSpec.parse("5b") == 5
        assert SizeSpec.parse("5bytes") == 5
        assert SizeSpec.parse("5kb") == 5 * KILOBYTE
        assert SizeSpec.parse("5mb") == 5 * MEGABYTE
        assert SizeSpec.parse("5gb") == 5 * GIGABYTE
        assert SizeSpec.parse("5tb") == 5 * TERABYTE

    def test_binary_aliases(self):
        """kib/mib/gib/tib are the same binary multipliers as kb/mb/gb/tb."""
        assert SizeSpec.parse("4500MiB") == 4500 * MEGABYTE
        assert SizeSpec.parse("1kib") == SizeSpec.parse("1kb")
        assert SizeSpec.parse("1gib") == SizeSpec.parse("1gb")
        assert SizeSpec.parse("1tib") == SizeSpec.parse("1tb")

    def test_case_insensitivity(self):
        assert SizeSpec.parse("1KB") == 1024
        assert SizeSpec.parse("1Kb") == 1024
        assert SizeSpec.parse("5MiB") == 5 * MEGABYTE

    def test_fraction_is_floored(self):
        assert SizeSpec.parse("5.4mb") == 5 * MEGABYTE + math.floor(0.4 * MEGABYTE)
        assert SizeSpec.parse("0.5kb") == 512
        assert SizeSpec.parse(".5kb") == 512
        assert SizeSpec.parse("1.0001kb") == 1024

    def test_composite(self):
        assert SizeSpec.parse("5mb10kb") == 5 * MEGABYTE + 10 * KILOBYTE
        assert SizeSpec.parse("1gb1b") == GIGABYTE + 1
        assert SizeSpec.parse("1kb1kb") == 2 * KILOBYTE

    def test_bare_integer_is_bytes(self):
        assert SizeSpec.parse("0") == 0
        assert SizeSpec.parse("1024") == 1024

    def test_whitespace_tolerance(self):
        assert SizeSpec.parse(" 1KB ") == 1024
        assert SizeSpec.parse("\t1MB\n") == MEGABYTE

    def test_unknown_unit(self):
        with pytest.raises(InvalidUnitError):
            SizeSpec.parse("5xb")
        with pytest.raises(InvalidUnitError):
            SizeSpec.parse("5mb10pb")

    def test_unit_without_number_counts_once(self):
        assert SizeSpec.parse("kb") == KILOBYTE
        assert SizeSpec.parse("MiB") == MEGABYTE
        assert SizeSpec.parse("mb10kb") == MEGABYTE + 10 * KILOBYTE

    def test_fraction_floor_is_exact(self):
        """Long fractions must not be rounded up before flooring."""
        assert SizeSpec.parse("0." + "9" * 30 + "b") == 0
        assert SizeSpec.parse("0." + "9" * 60 + "tb") == TERABYTE - 1
        assert SizeSpec.parse("1." + "0" * 50 + "1kb") == KILOBYTE
        assert SizeSpec.parse("0.5" + "0" * 60 + "b") == 0

    def test_invalid_number(self):
        with pytest.raises(InvalidNumberError):
            SizeSpec.parse("1.2.3kb")
        with pytest.raises(InvalidNumberError):
            SizeSpec.parse(".kb")

    @pytest.mark.parametrize("text", ["\u00b2", "\u0665", "1\u00b2kb"])
    def test_non_ascii_digits_are_rejected(self, text):
        with pytest.raises(SizeSpecError):
            SizeSpec.parse(text)

    def test_malformed(self):
        with pytest.raises(MalformedSizeError):
            SizeSpec.parse("")
        with pytest.raises(MalformedSizeError):
            SizeSpec.parse("5mb 10kb")
        with pytest.raises(MalformedSizeError):
            SizeSpec.parse("1kb2")
        with pytest.raises(MalformedSizeError):
            SizeSpec.parse("-1kb")
        with pytest.raises(MalformedSizeError):
            SizeSpec.parse("5mb!")

    def test_overflow(self):
        assert SizeSpec.parse(str(MAX_SIZE)) == MAX_SIZE
        with pytest.raises(SizeOverflowError):
            SizeSpec.parse(str(MAX_SIZE + 1))
        with pytest.raises(SizeOverflowError):
            SizeSpec.parse("16777216tb")  # exactly 2**64
        with pytest.raises(SizeOverflowError):
            SizeSpec.parse("16777215tb1tb")

    def test_very_long_numbers_overflow(self):
        with pytest.raises(SizeOverflowError):
            SizeSpec.parse("1" * 5000)
        with pytest.raises(SizeOverflowError):
            SizeSpec.parse("9" * 5000 + "kb")
        assert SizeSpec.parse("0" * 5000 + "1kb") == KILOBYTE

    def test_all_errors_are_value_errors(self):
        """Callers that only know about ValueError must still catch parse failures."""
        for bad in ["", ".kb", "5xb", "16777216tb", "\u00b2", "1" * 5000]:
            with pytest.raises(ValueError):
                SizeSpec.parse(bad)
            with pytest.raises(SizeSpecError):
                SizeSpec.parse(bad)

    def test_is_valid(self):
        assert SizeSpec.is_valid("5MiB")
        assert not SizeSpec.is_valid("five megabytes")
        assert not SizeSpec.is_valid("\u00b2")
        assert not SizeSpec.is_valid("1" * 5000)


class TestFormat:
    """Test the compact multi-unit format."""

    def test_boundaries(self):
        assert SizeSpec.format(0) == "0b"
        assert SizeSpec.format(5) == "5b"
        assert SizeSpec.format(1023) == "1023b"
        assert SizeSpec.format(1024) == "1kb"
        assert SizeSpec.format(MEGABYTE) == "1mb"

    def test_greedy_decomposition(self):
        assert SizeSpec.format(5 * MEGABYTE) == "5mb"
        assert SizeSpec.format(5 * MEGABYTE + 10 * KILOBYTE) == "5mb10kb"
        assert SizeSpec.format(TERABYTE + 3) == "1tb3b"
        assert SizeSpec.format(2 * GIGABYTE + 5 * KILOBYTE + 7) == "2gb5kb7b"

    def test_parse_of_format_is_identity(self):
        for n in [0, 1, 1023, 1024, 1025, 5 * MEGABYTE + 10 * KILOBYTE, 123456789012, MAX_SIZE]:
            assert SizeSpec.parse(SizeSpec.format(n)) == n

    def test_rejects_negative(self):
        with pytest.raises(ValueError):
            SizeSpec.format(-1)


class TestFormatFraction:
    """Test the single-unit, three-decimal format used for savings totals."""

    def test_whole_units(self):
        assert SizeSpec.format_fraction(5 * MEGABYTE) == "5.000mb"
        assert SizeSpec.format_fraction(KILOBYTE) == "1.000kb"
        assert SizeSpec.format_fraction(2 * TERABYTE) == "2.000tb"

    def test_fractional_values(self):
        assert SizeSpec.format_fraction(5_500_000) == "5.245mb"
        assert SizeSpec.format_fraction(1536) == "1.500kb"
        assert SizeSpec.format_fraction(GIGABYTE - 1) == "1024.000mb"

    def test_below_one_kilobyte(self):
        assert SizeSpec.format_fraction(0) == "0b"
        assert SizeSpec.format_fraction(1023) == "1023b"
