#!/usr/bin/env python3
"""
Confidence Scorer - Deterministic score from the fields that were matched
"""

from typing import Iterable

from .config import CONFIDENCE_WEIGHTS


def calculate_confidence(fields_matched: Iterable[str]) -> float:
    """
    Weighted sum over matched field names, capped at 1.0

    total 0.70, date 0.10, store_name 0.10, order_id 0.05, items 0.05.
    Unknown names and duplicates add nothing.

    Args:
        fields_matched: Names of fields that were located (not defaulted)

    Returns:
        Confidence in [0, 1], rounded to two decimals
    """
    score = sum(CONFIDENCE_WEIGHTS.get(field, 0.0) for field in set(fields_matched))
    return min(round(score, 2), 1.0)
