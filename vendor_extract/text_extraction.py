#!/usr/bin/env python3
"""
Text Extraction - Deterministic receipt extraction from plain-text email bodies

For emails whose text/plain part is all the caller has. Each supported vendor
has a TextReceiptExtractor holding its total labels and order id patterns;
amounts must follow their label ("Total: R 150.00"). Uber Eats also reads the
restaurant name and line items from the body.

Results use the same ExtractionResult, normalizers and confidence weights as
the HTML engine, so a plain-text receipt with items can reach 1.0.
"""

import re
import logging
from datetime import datetime, timezone
from typing import Dict, List, Optional, Pattern, Sequence, Type

from .confidence import calculate_confidence
from .config import DEFAULT_CURRENCY, ITEM_NAME_LENGTH, TEXT_ITEM_LIMIT
from .extraction_engine import ExtractionResult, build_diagnostic
from .normalizers import MONTH_NAMES, normalize_currency, normalize_date
from .value_locators import accept_store_name, clean_order_id

logger = logging.getLogger(__name__)

TEXT_DATE_PATTERNS = [
    re.compile(r'\d{4}-\d{2}-\d{2}'),
    re.compile(r'\d{2}\.\d{2}\.\d{4}'),
    re.compile(rf'\d{{1,2}}\s+(?:{MONTH_NAMES})[a-z]*\s+\d{{4}}', re.IGNORECASE),
    re.compile(r'\d{1,2}[/-]\d{1,2}[/-]\d{4}'),
]


def _today() -> str:
    return datetime.now(timezone.utc).date().isoformat()


def find_labelled_amount(text: str, label: str) -> Optional[str]:
    """
    Amount written straight after its label: "Total: R 1,234.56", "Amount charged ZAR 99.00"

    Args:
        text: Plain-text body
        label: Label text, matched case-insensitively at a word start

    Returns:
        Normalized amount or None
    """
    pattern = rf'\b{re.escape(label)}[:\s]*(?:ZAR|R|\$)?\s*([\d,]+\.\d{{2}})'
    match = re.search(pattern, text, re.IGNORECASE)
    if match:
        return normalize_currency(match.group(1))
    return None


def find_text_date(text: str) -> Optional[str]:
    """First date-shaped string in the text that is a real date"""
    for pattern in TEXT_DATE_PATTERNS:
        for match in pattern.finditer(text):
            value = normalize_date(match.group(0))
            if value:
                return value
    return None


class TextReceiptExtractor:
    """Total, date and order id from a plain-text body"""

    vendor = ''
    total_labels: Sequence[str] = ('Total',)
    order_id_patterns: Sequence[Pattern] = ()

    def find_total(self, text: str) -> Optional[str]:
        for label in self.total_labels:
            total = find_labelled_amount(text, label)
            if total:
                return total
        return None

    def find_order_id(self, text: str) -> Optional[str]:
        for pattern in self.order_id_patterns:
            match = pattern.search(text)
            if match:
                order_id = clean_order_id(match.group(1))
                if order_id:
                    return order_id
        return None

    def find_store_name(self, text: str) -> Optional[str]:
        return None

    def find_items(self, text: str) -> List[str]:
        return []

    def extract(self, text: str, subject: str = '') -> Optional[ExtractionResult]:
        """
        Extract a receipt from a plain-text body

        Args:
            text: Plain-text body of the email
            subject: Email subject line (date fallback)

        Returns:
            ExtractionResult, or None when no positive total follows a total label
        """
        total = self.find_total(text)
        if not total:
            record = build_diagnostic(self.vendor, 'failed', 'total_not_found', [])
            logger.warning(
                f'[DETERMINISTIC_EXTRACTION_FAILED] vendor="{self.vendor}" could not find total. '
                f'Labels tried: [{", ".join(self.total_labels)}]',
                extra={'diagnostic': record}
            )
            return None

        fields_matched = ['total']

        date = find_text_date(text) or normalize_date(subject)
        if date:
            fields_matched.append('date')

        store_name = self.find_store_name(text)
        if store_name:
            fields_matched.append('store_name')

        order_id = self.find_order_id(text)
        if order_id:
            fields_matched.append('order_id')

        items = self.find_items(text)
        if items:
            fields_matched.append('items')

        confidence = calculate_confidence(fields_matched)
        logger.info(
            f'[DETERMINISTIC_EXTRACTION_SUCCESS] vendor="{self.vendor}" total={total} date={date} '
            f'store="{store_name or self.vendor}" items={len(items)} confidence={confidence}',
            extra={'diagnostic': build_diagnostic(self.vendor, 'success', None, fields_matched, confidence)}
        )

        return ExtractionResult(
            store_name=store_name or self.vendor,
            total=total,
            date=date or _today(),
            currency=DEFAULT_CURRENCY,
            items=items,
            order_id=order_id,
            confidence=confidence,
            fields_matched=fields_matched,
        )


class UberEatsTextExtractor(TextReceiptExtractor):
    """
    Uber Eats text receipts name the restaurant ("Your order from Spur") and
    list items either as "2 x Cheese Burger R 89.00" or as "Cheese Burger R 89.00".
    """

    vendor = 'Uber Eats'
    total_labels = ('Total', 'Amount charged')
    order_id_patterns = (
        re.compile(r'order\s*(?:#|id|number)[:\s]*([A-Z0-9-]+)', re.IGNORECASE),
        re.compile(r'#([A-F0-9]{4,})', re.IGNORECASE),
    )

    STORE_PATTERNS = (
        re.compile(r'your order (?:from|at|with)\s+([^\n|]+)', re.IGNORECASE),
        re.compile(r'order (?:from|at)\s+([^\n|]+)', re.IGNORECASE),
        re.compile(r'restaurant[:\s]+([^\n|]+)', re.IGNORECASE),
    )
    TRAILING_STATUS = re.compile(r'\s+(?:is|has)\b.*$', re.IGNORECASE)

    QUANTITY_LINE = re.compile(r'(\d+)[ \t]*x[ \t]+(.+?)(?:[ \t]+R?[ \t]*[\d,.]+|$)', re.IGNORECASE | re.MULTILINE)
    PRICED_LINE = re.compile(r'^[ \t]*(?!\d+[ \t]*[xX][ \t])(.+?)[ \t]+R?[ \t]*[\d,]+\.\d{2}[ \t]*$', re.MULTILINE)
    NON_ITEM = re.compile(r'^(?:total|subtotal|delivery|service|vat|discount|amount|tip|you paid)', re.IGNORECASE)

    def find_store_name(self, text: str) -> Optional[str]:
        for pattern in self.STORE_PATTERNS:
            match = pattern.search(text)
            if match:
                name = re.sub(r'\s+', ' ', match.group(1)).strip()
                name = self.TRAILING_STATUS.sub('', name)
                if accept_store_name(name):
                    return name
        return None

    def _is_item(self, name: str) -> bool:
        return (ITEM_NAME_LENGTH['min_exclusive'] < len(name) < ITEM_NAME_LENGTH['max_exclusive']
                and not self.NON_ITEM.match(name))

    def find_items(self, text: str) -> List[str]:
        # quantity lines win; priced lines are only read when there are none
        for pattern, group in ((self.QUANTITY_LINE, 2), (self.PRICED_LINE, 1)):
            items = []
            for match in pattern.finditer(text):
                name = match.group(group).strip()
                if self._is_item(name):
                    items.append(name)
                if len(items) >= TEXT_ITEM_LIMIT:
                    break
            if items:
                return items
        return []


class TakealotTextExtractor(TextReceiptExtractor):
    vendor = 'Takealot'
    total_labels = ('Total', 'Order Total', 'Amount')
    order_id_patterns = (
        re.compile(r'order\s*(?:#|number|id)[:\s]*(\d+)', re.IGNORECASE),
    )


class PickNPayTextExtractor(TextReceiptExtractor):
    vendor = 'Pick n Pay'
    total_labels = ('Total', 'Amount Due')


class CheckersTextExtractor(TextReceiptExtractor):
    vendor = 'Checkers'
    total_labels = ('Total', 'Amount')


class AmazonTextExtractor(TextReceiptExtractor):
    vendor = 'Amazon'
    total_labels = ('Grand Total', 'Order Total', 'Total')
    order_id_patterns = (
        re.compile(r'order\s*(?:#|number|id)[:\s]*(\d{3}-\d{7}-\d{7})', re.IGNORECASE),
        re.compile(r'order\s*(?:#|number|id)[:\s]*([A-Z0-9-]+)', re.IGNORECASE),
    )


TEXT_EXTRACTORS: Dict[str, Type[TextReceiptExtractor]] = {
    extractor.vendor: extractor
    for extractor in (
        UberEatsTextExtractor,
        TakealotTextExtractor,
        PickNPayTextExtractor,
        CheckersTextExtractor,
        AmazonTextExtractor,
    )
}


def extract_from_text(vendor_id: str, raw_text: str, subject: str = '') -> Optional[ExtractionResult]:
    """
    Extract a receipt from a plain-text email body

    Args:
        vendor_id: Vendor id, case-sensitive (e.g. 'Uber Eats')
        raw_text: Plain-text body of the email
        subject: Email subject line

    Returns:
        ExtractionResult, or None if the vendor has no text extractor, the body
        is not text, or no total can be found
    """
    extractor_cls = TEXT_EXTRACTORS.get(vendor_id)
    if extractor_cls is None:
        record = build_diagnostic(vendor_id, 'failed', 'unsupported_vendor', [])
        logger.warning(f'[DETERMINISTIC_EXTRACTION_FAILED] No text extractor for vendor="{vendor_id}"',
                       extra={'diagnostic': record})
        return None

    if not isinstance(raw_text, str):
        record = build_diagnostic(vendor_id, 'failed', 'parse_error', [])
        logger.warning(f'[DETERMINISTIC_EXTRACTION_FAILED] vendor="{vendor_id}" body is not text '
                       f'({type(raw_text).__name__})', extra={'diagnostic': record})
        return None

    return extractor_cls().extract(raw_text, subject or '')
