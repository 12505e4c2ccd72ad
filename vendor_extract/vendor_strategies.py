#!/usr/bin/env python3
"""
Vendor Strategies - Vendor-specific field derivation run before generic search

A strategy carries its VendorConfig and may implement extract_custom_fields,
returning a partial receipt (store_name / date / order_id / total) derived
from the subject line or an unusual layout. Strategies are picked by the
config's 'strategy' key.
"""

import re
import logging
from typing import Dict, Optional, Type

from .html_document import HtmlDocument
from .normalizers import normalize_date
from .vendor_config import VendorConfig

logger = logging.getLogger(__name__)


class VendorExtractionStrategy:
    """Generic vendor: labels only, no custom fields"""

    key = 'generic'

    def __init__(self, config: VendorConfig):
        self.config = config

    def extract_custom_fields(self, document: HtmlDocument, subject: str) -> Optional[Dict[str, str]]:
        """
        Derive fields the generic locators cannot find

        Args:
            document: Parsed email body
            subject: Email subject line

        Returns:
            Partial receipt dict, or None when the vendor has no custom logic
        """
        return None


class PickNPayStrategy(VendorExtractionStrategy):
    """
    Pick n Pay digital receipts carry the branch and date only in the subject:
    "Pick n Pay Digital Receipt - Canal Walk - 25.12.2024"
    """

    key = 'pick_n_pay'

    SUBJECT_PATTERN = re.compile(
        r'pick\s*n\s*pay.*?(?:digital\s*receipt\s*-?\s*)(.+?)(?:\s*-\s*(\d{2}\.\d{2}\.\d{4}))?$',
        re.IGNORECASE
    )
    TRAILING_DATE = re.compile(r'\s*-\s*\d{2}\.\d{2}\.\d{4}.*$')
    ANY_DOTTED_DATE = re.compile(r'\d{2}\.\d{2}\.\d{4}')

    def extract_custom_fields(self, document: HtmlDocument, subject: str) -> Optional[Dict[str, str]]:
        fields = {}
        subject = (subject or '').strip()

        match = self.SUBJECT_PATTERN.search(subject)
        if match:
            branch = self.TRAILING_DATE.sub('', match.group(1) or '').strip()
            if len(branch) > 2:
                fields['store_name'] = f"{self.config.name} {branch}"
            if match.group(2):
                parsed = normalize_date(match.group(2))
                if parsed:
                    fields['date'] = parsed

        if 'date' not in fields:
            dotted = self.ANY_DOTTED_DATE.search(subject)
            if dotted:
                parsed = normalize_date(dotted.group(0))
                if parsed:
                    fields['date'] = parsed

        logger.debug(f"Pick n Pay subject fields: {fields}")
        return fields


class UberEatsStrategy(VendorExtractionStrategy):
    """Restaurant name from "Your order from <restaurant> is on its way" style subjects"""

    key = 'uber_eats'

    ORDER_FROM = re.compile(r'(?:your\s+)?(?:order\s+(?:from|at|with)\s+)(.+?)(?:\s+is|\s+has|\s*$)', re.IGNORECASE)
    UBER_EATS_FROM = re.compile(r'uber\s*eats.*?(?:from\s+)(.+?)$', re.IGNORECASE)

    def extract_custom_fields(self, document: HtmlDocument, subject: str) -> Optional[Dict[str, str]]:
        fields = {}
        subject = (subject or '').strip()
        match = self.ORDER_FROM.search(subject) or self.UBER_EATS_FROM.search(subject)
        if match and match.group(1).strip():
            fields['store_name'] = match.group(1).strip()
        logger.debug(f"Uber Eats subject fields: {fields}")
        return fields


STRATEGY_MAP: Dict[str, Type[VendorExtractionStrategy]] = {
    VendorExtractionStrategy.key: VendorExtractionStrategy,
    PickNPayStrategy.key: PickNPayStrategy,
    UberEatsStrategy.key: UberEatsStrategy,
}


def get_strategy(config: VendorConfig) -> VendorExtractionStrategy:
    """Instantiate the strategy named by the config, generic if unknown"""
    strategy_cls = STRATEGY_MAP.get(config.strategy)
    if strategy_cls is None:
        logger.warning(f"Unknown strategy '{config.strategy}' for {config.name}, using generic")
        strategy_cls = VendorExtractionStrategy
    return strategy_cls(config)
