"""
Shared fixtures for vendor_extract tests
"""

import pytest

from vendor_extract.html_document import HtmlDocument
from vendor_extract.rule_loader import RuleLoader
from vendor_extract.vendor_config import VendorConfigRegistry


@pytest.fixture(scope='session')
def rule_loader():
    return RuleLoader()


@pytest.fixture(scope='session')
def registry(rule_loader):
    return VendorConfigRegistry.from_rules(rule_loader)


@pytest.fixture
def make_doc():
    """Build an HtmlDocument from an HTML string"""
    def _make(html):
        return HtmlDocument(html)
    return _make
