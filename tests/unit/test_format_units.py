# PATH: tests/unit/test_format_units.py
"""
Unit tests for format_units module.
"""

import unittest

from core.format_units import format_ether, format_units, truncate_identifier


class TestFormatUnits(unittest.TestCase):
    """Tests for format_units function."""

    def test_whole_ether(self):
        self.assertEqual(format_units(10**18), "1.0")
        self.assertEqual(format_units(5 * 10**18), "5.0")

    def test_fractional(self):
        self.assertEqual(format_units(1_500_000_000_000_000_000), "1.5")
        self.assertEqual(format_units(1), "0.000000000000000001")

    def test_zero(self):
        self.assertEqual(format_units(0), "0.0")

    def test_none_is_not_zero(self):
        """Absent values are rejected, never shown as 0.0."""
        with self.assertRaises(TypeError):
            format_units(None)
        with self.assertRaises(TypeError):
            format_ether(None)

    def test_large_values_exact(self):
        """No float rounding for supply-sized values."""
        self.assertEqual(
            format_units(123_456_789_012_345_678_901_234_567_890),
            "123456789012.34567890123456789",
        )

    def test_other_decimals(self):
        self.assertEqual(format_units(1_234_567, 6), "1.234567")
        self.assertEqual(format_units(42, 0), "42.0")

    def test_negative_value(self):
        self.assertEqual(format_units(-25 * 10**16), "-0.25")

    def test_rejects_non_int(self):
        with self.assertRaises(TypeError):
            format_units(1.5)
        with self.assertRaises(TypeError):
            format_units("100")
        with self.assertRaises(TypeError):
            format_units(True)

    def test_rejects_negative_decimals(self):
        with self.assertRaises(ValueError):
            format_units(1, -1)

    def test_format_ether(self):
        self.assertEqual(format_ether(2 * 10**17), "0.2")


class TestTruncateIdentifier(unittest.TestCase):
    """Tests for truncate_identifier function."""

    def test_long_hash(self):
        tx_hash = "0x" + "ab" * 32

        self.assertEqual(truncate_identifier(tx_hash), "0xabababababababab...")

    def test_short_value_unchanged(self):
        self.assertEqual(truncate_identifier("0x1234"), "0x1234")
        self.assertEqual(truncate_identifier("a" * 18), "a" * 18)

    def test_custom_length(self):
        self.assertEqual(truncate_identifier("abcdef", keep=3, ellipsis="~"), "abc~")

    def test_invalid_keep(self):
        with self.assertRaises(ValueError):
            truncate_identifier("abc", keep=0)


if __name__ == "__main__":
    unittest.main()
