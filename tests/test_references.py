"""
Application reference number format.
Run from the project root: python -m pytest tests/test_references.py -v
"""
import unittest
from datetime import datetime

from services.errors import ValidationFailed
from services.references import format_reference, is_valid_reference


class TestReferences(unittest.TestCase):
    def test_format(self):
        """Prefix, year and month, then a four-digit sequence."""
        self.assertEqual(format_reference(datetime(2025, 3, 9), 7), "DASHEN-202503-0007")
        self.assertEqual(format_reference(datetime(2025, 12, 31), 9999, prefix="ACME"), "ACME-202512-9999")

    def test_sequence_bounds(self):
        """Sequence must stay within 1-9999."""
        with self.assertRaises(ValidationFailed):
            format_reference(datetime(2025, 3, 9), 0)
        with self.assertRaises(ValidationFailed):
            format_reference(datetime(2025, 3, 9), 10_000)

    def test_is_valid_reference(self):
        """Only well-formed references pass."""
        self.assertTrue(is_valid_reference("DASHEN-202503-0007"))
        self.assertFalse(is_valid_reference("DASHEN-20253-0007"))
        self.assertFalse(is_valid_reference("dashen-202503-0007"))
        self.assertFalse(is_valid_reference(""))
        self.assertFalse(is_valid_reference(None))


if __name__ == "__main__":
    unittest.main()
