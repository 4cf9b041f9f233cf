"""
Supervisor score arithmetic: clamping, overall mean, color buckets.
Run from the project root: python -m pytest tests/test_scoring.py -v
"""
import unittest

from services.scoring import clamp_score, overall_score, score_class, score_color


class TestClampScore(unittest.TestCase):
    def test_missing_counts_as_zero(self):
        """No score given -> 0."""
        self.assertEqual(clamp_score(None), 0.0)

    def test_out_of_range_is_clamped(self):
        """Scores above 100 or below 0 are pulled to the nearest bound."""
        self.assertEqual(clamp_score(140), 100.0)
        self.assertEqual(clamp_score(-5), 0.0)

    def test_in_range_unchanged(self):
        """Scores inside 0-100 pass through untouched."""
        self.assertEqual(clamp_score(72.5), 72.5)


class TestOverallScore(unittest.TestCase):
    def test_mean_of_five(self):
        """Overall score is the plain mean of the five categories."""
        self.assertEqual(overall_score([80, 60, 100, 40, 70]), 70.0)

    def test_missing_score_counts_as_zero(self):
        """A missing category drags the mean down as a 0."""
        self.assertEqual(overall_score([80, None, 100, 40, 70]), 58.0)

    def test_short_list_is_padded(self):
        """Two scores given -> the other three count as 0."""
        self.assertEqual(overall_score([100, 100]), 40.0)

    def test_values_clamped_before_averaging(self):
        """Out-of-range inputs are clamped before they reach the mean."""
        self.assertEqual(overall_score([150, 100, 100, 100, -20]), 80.0)

    def test_all_missing(self):
        """Nothing scored -> 0."""
        self.assertEqual(overall_score([]), 0.0)


class TestScoreColor(unittest.TestCase):
    def test_boundaries(self):
        """Green from 80, yellow from 60, red below."""
        self.assertEqual(score_color(80), "green")
        self.assertEqual(score_color(79.9), "yellow")
        self.assertEqual(score_color(60), "yellow")
        self.assertEqual(score_color(59.9), "red")
        self.assertEqual(score_color(None), "red")

    def test_class(self):
        """Each bucket maps to its CSS class."""
        self.assertEqual(score_class(95), "text-green-600 font-bold")
        self.assertEqual(score_class(10), "text-red-600 font-bold")


if __name__ == "__main__":
    unittest.main()
