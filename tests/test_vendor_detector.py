#!/usr/bin/env python3
"""
Tests for vendor detection from sender, subject and body
"""

import pytest

from vendor_extract.rule_loader import RuleLoader
from vendor_extract.vendor_detector import VendorDetector, extract_sender_domain


@pytest.fixture(scope='module')
def detector():
    return VendorDetector()


class TestExtractSenderDomain:

    @pytest.mark.parametrize('sender, expected', [
        ('Takealot <orders@takealot.com>', 'takealot.com'),
        ('orders@TakeALot.com', 'takealot.com'),
        ('"Pick n Pay" <no-reply@pnp.co.za>', 'pnp.co.za'),
        ('', ''),
        (None, ''),
        ('Customer Service', ''),
    ])
    def test_domain(self, sender, expected):
        assert extract_sender_domain(sender) == expected


class TestDetectVendor:

    def test_domain_and_subject(self, detector):
        assert detector.detect_vendor(
            subject='Your Takealot order', sender='orders@takealot.com'
        ) == ('Takealot', 0.8)

    def test_subject_and_body_reach_threshold(self, detector):
        vendor, confidence = detector.detect_vendor(
            subject='Checkers Sixty60 order',
            raw_html='<p>Thanks for shopping at Checkers</p>'
        )
        assert vendor == 'Checkers'
        assert confidence == 0.5

    def test_subject_alone_is_not_enough(self, detector):
        assert detector.detect_vendor(subject='Your Takealot order') == (None, 0.0)

    def test_all_signals(self, detector):
        assert detector.detect_vendor(
            subject='Pick n Pay Digital Receipt - Canal Walk - 25.12.2024',
            sender='Pick n Pay <no-reply@pnp.co.za>',
            raw_html='<p>Thank you for shopping at Pick n Pay</p>'
        ) == ('Pick n Pay', 1.0)

    def test_plain_text_body_preferred(self, detector):
        vendor, _ = detector.detect_vendor(
            subject='Your Uber Eats order',
            raw_html='<p>nothing useful</p>',
            raw_text='Uber Eats receipt'
        )
        assert vendor == 'Uber Eats'

    def test_unknown_email(self, detector):
        assert detector.detect_vendor(
            subject='Your order has shipped', sender='info@example.com', raw_html='<p>Hello</p>'
        ) == (None, 0.0)

    def test_body_scan_is_limited(self, detector):
        raw_html = 'x' * 6000 + 'takealot'
        assert detector.detect_vendor(subject='takealot', raw_html=raw_html) == (None, 0.0)

    def test_empty_input(self, detector):
        assert detector.detect_vendor() == (None, 0.0)


class TestCustomDetectionRules:

    def test_threshold_and_bad_pattern(self, tmp_path):
        (tmp_path / '10_vendor_detection.yaml').write_text(
            "vendor_detection:\n"
            "  threshold: 0.8\n"
            "  vendors:\n"
            "    - name: Broken\n"
            "      sender_domains: ['(']\n"
            "    - name: Spar\n"
            "      sender_domains: ['spar\\.co\\.za$']\n"
            "      subject_patterns: ['spar']\n"
            "      body_phrases: [spar]\n",
            encoding='utf-8'
        )
        detector = VendorDetector(RuleLoader(tmp_path))

        assert [vendor['name'] for vendor in detector.vendors] == ['Spar']
        assert detector.detect_vendor(sender='a@spar.co.za') == (None, 0.0)
        assert detector.detect_vendor(subject='Your SPAR slip', sender='a@spar.co.za') == ('Spar', 0.8)

    def test_null_lists_and_non_string_phrases(self, tmp_path):
        (tmp_path / '10_vendor_detection.yaml').write_text(
            "vendor_detection:\n"
            "  vendors:\n"
            "    - just a string\n"
            "    - name: Spar\n"
            "      sender_domains:\n"
            "      subject_patterns: ['spar']\n"
            "      body_phrases: [1234, spar]\n",
            encoding='utf-8'
        )
        detector = VendorDetector(RuleLoader(tmp_path))

        assert [vendor['name'] for vendor in detector.vendors] == ['Spar']
        assert detector.vendors[0]['sender_domains'] == []
        assert detector.vendors[0]['body_phrases'] == ['1234', 'spar']
        assert detector.detect_vendor(subject='Spar slip', raw_text='till 1234') == ('Spar', 0.5)

    def test_missing_rules_detect_nothing(self, tmp_path):
        detector = VendorDetector(RuleLoader(tmp_path))
        assert detector.threshold == 0.5
        assert detector.detect_vendor(subject='takealot', sender='a@takealot.com') == (None, 0.0)
