"""
Vendor HTML Extraction
Deterministic first-pass receipt extraction from vendor confirmation emails.
Uses YAML vendor configs, label-adjacency/colon/regex locators over the HTML
(or label-anchored patterns over a plain-text body) and a fixed confidence
weighting; returns None when no total can be found so callers can escalate
to another extractor.
"""

from .extraction_engine import ExtractionResult, extract, get_supported_vendors, is_vendor_supported
from .normalizers import normalize_currency, normalize_date
from .confidence import calculate_confidence
from .rule_loader import RuleLoader
from .vendor_config import VendorConfig, VendorConfigRegistry, get_config, is_supported, list_vendors
from .vendor_detector import VendorDetector, extract_sender_domain
from .vendor_strategies import VendorExtractionStrategy, get_strategy
from .text_extraction import TextReceiptExtractor, extract_from_text
from .exceptions import VendorExtractError, VendorConfigError

__all__ = [
    'ExtractionResult',
    'extract',
    'get_supported_vendors',
    'is_vendor_supported',
    'normalize_currency',
    'normalize_date',
    'calculate_confidence',
    'RuleLoader',
    'VendorConfig',
    'VendorConfigRegistry',
    'get_config',
    'is_supported',
    'list_vendors',
    'VendorDetector',
    'extract_sender_domain',
    'VendorExtractionStrategy',
    'get_strategy',
    'TextReceiptExtractor',
    'extract_from_text',
    'VendorExtractError',
    'VendorConfigError',
]
