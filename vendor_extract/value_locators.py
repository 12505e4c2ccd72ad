#!/usr/bin/env python3
"""
Value Locators - Find receipt field values next to their labels

Each locator implements locate(document, labels) and returns the raw text
it found (or None). A LocatorChain asks its locators in order, normalizes
each candidate and stops at the first usable value.

Locator order per field:
- total:      adjacent cell -> inline amount -> colon label
- date:       adjacent cell -> colon label -> subject line -> body date patterns
- order id:   adjacent cell -> colon label
- store name: adjacent cell -> colon label (only if the vendor has store labels)

Table adjacency comes first because it has the lowest false-positive rate;
colon scanning over the whole body text is the most permissive.
"""

import re
import logging
from abc import ABC, abstractmethod
from typing import Callable, Iterable, List, Optional, Sequence

from bs4 import Tag

from .config import (
    COLON_VALUE_MAX_LENGTH,
    LABEL_LENGTH_SLACK,
    ORDER_ID_MAX_LENGTH,
    STORE_NAME_LENGTH,
)
from .html_document import HtmlDocument
from .normalizers import MONTH_NAMES, normalize_currency, normalize_date

logger = logging.getLogger(__name__)

_ORDER_ID_TOKEN = re.compile(r'[A-Z0-9-]{3,}', re.IGNORECASE)
_BARE_AMOUNT = re.compile(r'[\d,]+\.\d{2}')

BODY_DATE_PATTERNS = [
    re.compile(r'(\d{4}-\d{2}-\d{2})'),
    re.compile(r'(\d{2}\.\d{2}\.\d{4})'),
    re.compile(rf'(\d{{1,2}}\s+(?:{MONTH_NAMES})\s+\d{{4}})', re.IGNORECASE),
    re.compile(rf'((?:{MONTH_NAMES})\s+\d{{1,2}},?\s+\d{{4}})', re.IGNORECASE),
]


def _lower_labels(labels: Iterable[str]) -> List[str]:
    return [label.lower() for label in labels if label]


class ValueLocator(ABC):
    """A single search strategy"""

    name = 'locator'

    @abstractmethod
    def locate(self, document: HtmlDocument, labels: Sequence[str]) -> Optional[str]:
        """Return the raw value found for any of the labels, or None"""


class AdjacentCellLocator(ValueLocator):
    """
    Label-adjacency search.

    Looks for a table cell (then an inline element) whose own text contains
    a label and is not much longer than it, and reads the structurally
    adjacent cell/element.
    """

    name = 'adjacent_cell'

    def __init__(self, slack: int = LABEL_LENGTH_SLACK):
        self.slack = slack

    def _is_label_text(self, text: str, labels: List[str]) -> bool:
        return any(label in text and len(text) < len(label) + self.slack for label in labels)

    def locate(self, document: HtmlDocument, labels: Sequence[str]) -> Optional[str]:
        lower_labels = _lower_labels(labels)
        if not lower_labels:
            return None

        for cell in document.table_cells():
            if not self._is_label_text(document.collapsed_text(cell).lower(), lower_labels):
                continue
            value = self._value_beside_cell(document, cell)
            if value:
                return value

        for element in document.inline_elements():
            if not self._is_label_text(document.collapsed_text(element).lower(), lower_labels):
                continue
            value = self._value_beside_element(document, element)
            if value:
                return value

        return None

    @staticmethod
    def _value_beside_cell(document: HtmlDocument, cell: Tag) -> Optional[str]:
        # (a) next cell
        next_cell = document.next_sibling_cell(cell)
        if next_cell is not None:
            value = document.text_of(next_cell)
            if value:
                return value

        row = document.parent_row(cell)
        if row is None:
            return None

        # (b) next cell in the same row
        cells = document.row_cells(row)
        index = document.index_of(cells, cell)
        if 0 <= index < len(cells) - 1:
            value = document.text_of(cells[index + 1])
            if value:
                return value

        # (c) value row underneath a label row: <tr><td>Total</td></tr><tr><td>R 10.00</td></tr>
        following = document.next_row(row)
        if following is not None:
            following_cells = document.row_cells(following)
            if len(following_cells) == 1:
                value = document.text_of(following_cells[0])
                if value:
                    return value

        return None

    @staticmethod
    def _value_beside_element(document: HtmlDocument, element: Tag) -> Optional[str]:
        # (d) next sibling element
        sibling = document.next_sibling_element(element)
        if sibling is not None:
            value = document.text_of(sibling)
            if value:
                return value

        # (e) next element child of the same parent
        siblings = document.element_children(element.parent)
        index = document.index_of(siblings, element)
        if 0 <= index < len(siblings) - 1:
            value = document.text_of(siblings[index + 1])
            if value:
                return value

        return None


class ColonLabelLocator(ValueLocator):
    """Scan body text for "<label>: value" (then "<label> value") up to end of line"""

    name = 'colon_label'

    def __init__(self, max_length: int = COLON_VALUE_MAX_LENGTH):
        self.max_length = max_length

    def locate(self, document: HtmlDocument, labels: Sequence[str]) -> Optional[str]:
        body_text = document.body_text
        for label in _lower_labels(labels):
            escaped = re.escape(label)
            patterns = [
                rf'{escaped}\s*[:;]\s*(.+?)(?:\n|$)',
                rf'{escaped}\s+(.+?)(?:\n|$)',
            ]
            for pattern in patterns:
                match = re.search(pattern, body_text, re.IGNORECASE)
                if match:
                    value = match.group(1).strip()[:self.max_length]
                    if value:
                        return value
        return None


class InlineAmountLocator(ValueLocator):
    """
    Amount embedded in the same element as its label ("Total R 150.00").
    Amounts prefixed with one of the vendor's currency symbols are preferred
    over bare amounts.
    """

    name = 'inline_amount'

    def __init__(self, currency_symbols: Sequence[str] = ()):
        symbols = sorted({symbol for symbol in currency_symbols if symbol}, key=len, reverse=True)
        self._patterns = []
        if symbols:
            alternatives = '|'.join(re.escape(symbol) for symbol in symbols)
            self._patterns.append(re.compile(rf'(?:{alternatives})\s*[\d,]+\.\d{{2}}'))
        self._patterns.append(_BARE_AMOUNT)

    def locate(self, document: HtmlDocument, labels: Sequence[str]) -> Optional[str]:
        lower_labels = _lower_labels(labels)
        if not lower_labels:
            return None

        for element in document.labelled_elements():
            text = document.collapsed_text(element)
            lower = text.lower()
            if not any(label in lower for label in lower_labels):
                continue
            for pattern in self._patterns:
                match = pattern.search(text)
                if match and normalize_currency(match.group(0)):
                    return match.group(0)
        return None


class SubjectLocator(ValueLocator):
    """The email subject itself as a candidate (labels are ignored)"""

    name = 'subject'

    def __init__(self, subject: Optional[str]):
        self.subject = subject

    def locate(self, document: HtmlDocument, labels: Sequence[str]) -> Optional[str]:
        return self.subject or None


class BodyDatePatternLocator(ValueLocator):
    """First date-shaped string anywhere in the body text (labels are ignored)"""

    name = 'body_date_pattern'

    def locate(self, document: HtmlDocument, labels: Sequence[str]) -> Optional[str]:
        body_text = document.body_text
        for pattern in BODY_DATE_PATTERNS:
            match = pattern.search(body_text)
            if match and normalize_date(match.group(1)):
                return match.group(1)
        return None


class LocatorChain:
    """Ordered locators sharing one normalizer; first normalized value wins"""

    def __init__(self, field: str, locators: List[ValueLocator], normalizer: Callable[[str], Optional[str]]):
        self.field = field
        self.locators = locators
        self.normalizer = normalizer

    def run(self, document: HtmlDocument, labels: Sequence[str]) -> Optional[str]:
        for locator in self.locators:
            raw = locator.locate(document, labels)
            if not raw:
                continue
            value = self.normalizer(raw)
            if value:
                logger.debug(f"[{self.field}] {locator.name} matched {value!r}")
                return value
            logger.debug(f"[{self.field}] {locator.name} candidate rejected: {raw[:60]!r}")
        return None


# ---------- candidate acceptance ----------

def clean_order_id(raw: str) -> Optional[str]:
    """Strip whitespace, truncate, and require an id-like token"""
    cleaned = re.sub(r'\s+', '', raw)[:ORDER_ID_MAX_LENGTH]
    if cleaned and _ORDER_ID_TOKEN.search(cleaned):
        return cleaned
    return None


def accept_store_name(raw: str) -> Optional[str]:
    if STORE_NAME_LENGTH['min_exclusive'] < len(raw) < STORE_NAME_LENGTH['max_exclusive']:
        return raw
    return None


# ---------- field searches ----------

def find_value_in_adjacent_cells(document: HtmlDocument, labels: Sequence[str]) -> Optional[str]:
    return AdjacentCellLocator().locate(document, labels)


def find_value_by_colon(document: HtmlDocument, labels: Sequence[str]) -> Optional[str]:
    return ColonLabelLocator().locate(document, labels)


def find_amount_in_html(document: HtmlDocument, labels: Sequence[str],
                        currency_symbols: Sequence[str] = ()) -> Optional[str]:
    """Locate and normalize the receipt total"""
    chain = LocatorChain('total', [
        AdjacentCellLocator(),
        InlineAmountLocator(currency_symbols),
        ColonLabelLocator(),
    ], normalize_currency)
    return chain.run(document, labels)


def find_date_in_html(document: HtmlDocument, labels: Sequence[str], subject: Optional[str] = None) -> Optional[str]:
    """Locate and normalize the transaction date, falling back to the subject and body text"""
    chain = LocatorChain('date', [
        AdjacentCellLocator(),
        ColonLabelLocator(),
        SubjectLocator(subject),
        BodyDatePatternLocator(),
    ], normalize_date)
    return chain.run(document, labels)


def find_order_id_in_html(document: HtmlDocument, labels: Sequence[str]) -> Optional[str]:
    chain = LocatorChain('order_id', [
        AdjacentCellLocator(),
        ColonLabelLocator(),
    ], clean_order_id)
    return chain.run(document, labels)


def find_store_name_in_html(document: HtmlDocument, labels: Sequence[str]) -> Optional[str]:
    if not labels:
        return None
    chain = LocatorChain('store_name', [
        AdjacentCellLocator(),
        ColonLabelLocator(),
    ], accept_store_name)
    return chain.run(document, labels)
