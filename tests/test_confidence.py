#!/usr/bin/env python3
"""
Tests for the confidence scorer
"""

from itertools import combinations

import pytest

from vendor_extract.confidence import calculate_confidence

ALL_FIELDS = ['total', 'date', 'store_name', 'order_id', 'items']


class TestCalculateConfidence:

    def test_total_only(self):
        assert calculate_confidence(['total']) == 0.70

    def test_total_and_date(self):
        assert calculate_confidence(['total', 'date']) == 0.80

    def test_all_fields_exactly_one(self):
        assert calculate_confidence(ALL_FIELDS) == 1.0

    @pytest.mark.parametrize('fields, expected', [
        ([], 0.0),
        (['total', 'store_name'], 0.80),
        (['total', 'date', 'store_name'], 0.90),
        (['total', 'date', 'order_id'], 0.85),
        (['total', 'date', 'store_name', 'order_id'], 0.95),
    ])
    def test_weights(self, fields, expected):
        assert calculate_confidence(fields) == expected

    def test_duplicates_and_unknown_names_add_nothing(self):
        assert calculate_confidence(['total', 'total', 'vat', 'date', 'date']) == 0.80

    def test_monotonic_over_subsets(self):
        """Adding a field never lowers the score, and it never exceeds 1.0"""
        for size in range(len(ALL_FIELDS)):
            for subset in combinations(ALL_FIELDS, size):
                base = calculate_confidence(subset)
                for extra in ALL_FIELDS:
                    bigger = calculate_confidence(subset + (extra,))
                    assert bigger >= base
                    assert bigger <= 1.0
