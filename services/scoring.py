"""
Supervisor scoring: five category scores on a 0-100 scale and their mean.
Out-of-range inputs are clamped, never rejected; a missing score counts as 0.
"""
from __future__ import annotations

from typing import Iterable, Optional

SCORE_MIN = 0.0
SCORE_MAX = 100.0
SCORE_CATEGORIES = 5

GREEN_THRESHOLD = 80
YELLOW_THRESHOLD = 60

SCORE_CLASSES = {
    "green": "text-green-600 font-bold",
    "yellow": "text-yellow-600 font-bold",
    "red": "text-red-600 font-bold",
}


def clamp_score(value: Optional[float]) -> float:
    if value is None:
        return SCORE_MIN
    return max(SCORE_MIN, min(SCORE_MAX, float(value)))


def overall_score(scores: Iterable[Optional[float]]) -> float:
    """Mean of the five category scores, missing entries as 0.

    >>> overall_score([80, 60, 100, 40, 70])
    70.0
    >>> overall_score([80, None, 100, 40, 70])
    58.0
    """
    values = list(scores)[:SCORE_CATEGORIES]
    values += [None] * (SCORE_CATEGORIES - len(values))
    return sum(clamp_score(v) for v in values) / SCORE_CATEGORIES


def score_color(score: Optional[float]) -> str:
    """Bucket a score: red below 60, yellow 60-79, green from 80."""
    s = clamp_score(score)
    if s >= GREEN_THRESHOLD:
        return "green"
    if s >= YELLOW_THRESHOLD:
        return "yellow"
    return "red"


def score_class(score: Optional[float]) -> str:
    return SCORE_CLASSES[score_color(score)]
