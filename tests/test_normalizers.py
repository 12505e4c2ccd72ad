#!/usr/bin/env python3
"""
Unit tests for currency and date normalization
"""

import pytest

from vendor_extract.normalizers import normalize_currency, normalize_date


class TestNormalizeCurrency:
    """Amounts come back as positive two-decimal strings"""

    @pytest.mark.parametrize('raw, expected', [
        ('R 1,234.56', '1234.56'),
        ('150,00', '150.00'),
        ('1.234,56', '1234.56'),
        ('ZAR 99.90', '99.90'),
        ('$5', '5.00'),
        ('€ 12,50', '12.50'),
        ('R150.00 incl. VAT', '150.00'),
        ('  R 2 499.00 ', '2499.00'),
        ('R 1,000,000.10', '1000000.10'),
    ])
    def test_valid_amounts(self, raw, expected):
        assert normalize_currency(raw) == expected

    @pytest.mark.parametrize('raw', [
        'abc', '-5.00', 'R-5.00', '-R5.00', '- R 5.00', '-$ 12.00', '0.00', 'R0.001', '', None, 'R', '---',
    ])
    def test_invalid_amounts(self, raw):
        assert normalize_currency(raw) is None

    def test_overflowing_digit_run(self):
        """A digit run past the float range is not an amount"""
        assert normalize_currency('9' * 400) is None
        assert normalize_currency('R ' + '9' * 400 + '.00') is None

    def test_ambiguous_comma_reads_as_decimal(self):
        """Two digits after a lone comma are treated as cents"""
        assert normalize_currency('1,50') == '1.50'

    def test_three_digits_after_comma_is_thousands(self):
        assert normalize_currency('1,500') == '1500.00'


class TestNormalizeDate:
    """Dates come back as zero-padded YYYY-MM-DD"""

    @pytest.mark.parametrize('raw, expected', [
        ('2024-12-25', '2024-12-25'),
        ('25.12.2024', '2024-12-25'),
        ('25 December 2024', '2024-12-25'),
        ('25 Dec 2024', '2024-12-25'),
        ('5 March 2024', '2024-03-05'),
        ('December 25, 2024', '2024-12-25'),
        ('Mar 5 2024', '2024-03-05'),
        ('25/12/2024', '2024-12-25'),
        ('5-1-2024', '2024-01-05'),
        ('Order placed on 3 Jan 2025 at 10:00', '2025-01-03'),
        ('  Delivered: 2025-02-28T09:15:00Z ', '2025-02-28'),
    ])
    def test_valid_dates(self, raw, expected):
        assert normalize_date(raw) == expected

    @pytest.mark.parametrize('raw', ['not a date', '', None, '32.13.2024', 'December 2024'])
    def test_invalid_dates(self, raw):
        assert normalize_date(raw) is None

    def test_impossible_date_falls_through_to_next_pattern(self):
        """An ISO-shaped but impossible date does not block a later valid one"""
        assert normalize_date('ref 2024-13-40, paid 25.12.2024') == '2024-12-25'

    def test_iso_wins_over_dotted(self):
        assert normalize_date('25.12.2024 / 2024-11-01') == '2024-11-01'
