#!/usr/bin/env python3
"""
HTML Document - Thin wrapper over a BeautifulSoup tree
Exposes the traversal the value locators need: table cells, inline
elements, body text and sibling/parent/child relationships.
"""

import re
import logging
from typing import List, Optional

from bs4 import BeautifulSoup, Tag

from .config import HTML_PARSER, INLINE_ELEMENTS, TABLE_CELLS

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r'\s+')


class HtmlDocument:
    """Parsed email body"""

    def __init__(self, raw_html: str, parser: str = HTML_PARSER):
        """
        Parse raw HTML

        Args:
            raw_html: Full HTML body of the email
            parser: BeautifulSoup parser backend

        Raises:
            TypeError: raw_html is not a string
        """
        if not isinstance(raw_html, str):
            raise TypeError(f"raw_html must be str, got {type(raw_html).__name__}")
        self.soup = BeautifulSoup(raw_html, parser)
        self._body_text = None

    # ---------- element collections (document order) ----------

    def table_cells(self) -> List[Tag]:
        return self.soup.find_all(TABLE_CELLS)

    def inline_elements(self) -> List[Tag]:
        return self.soup.find_all(INLINE_ELEMENTS)

    def labelled_elements(self) -> List[Tag]:
        """Cells and inline elements together, in document order"""
        return self.soup.find_all(TABLE_CELLS + INLINE_ELEMENTS)

    @property
    def body_text(self) -> str:
        """Rendered text of <body>, or of the whole document for fragments"""
        if self._body_text is None:
            root = self.soup.body or self.soup
            self._body_text = root.get_text()
        return self._body_text

    # ---------- text helpers ----------

    @staticmethod
    def text_of(element: Tag) -> str:
        """Stripped text of an element"""
        return element.get_text().strip()

    @staticmethod
    def collapsed_text(element: Tag) -> str:
        """Text with whitespace runs collapsed to single spaces"""
        return _WHITESPACE.sub(' ', element.get_text()).strip()

    # ---------- relationships ----------

    @staticmethod
    def next_sibling_element(element: Tag) -> Optional[Tag]:
        return element.find_next_sibling()

    @staticmethod
    def next_sibling_cell(cell: Tag) -> Optional[Tag]:
        """Immediately following sibling element, only if it is a td/th"""
        sibling = cell.find_next_sibling()
        if sibling is not None and sibling.name in TABLE_CELLS:
            return sibling
        return None

    @staticmethod
    def parent_row(cell: Tag) -> Optional[Tag]:
        return cell.find_parent('tr')

    @staticmethod
    def row_cells(row: Tag) -> List[Tag]:
        return row.find_all(TABLE_CELLS)

    @staticmethod
    def next_row(row: Tag) -> Optional[Tag]:
        """Immediately following sibling element, only if it is a tr"""
        sibling = row.find_next_sibling()
        if sibling is not None and sibling.name == 'tr':
            return sibling
        return None

    @staticmethod
    def element_children(element: Tag) -> List[Tag]:
        if element is None:
            return []
        return [child for child in element.children if isinstance(child, Tag)]

    @staticmethod
    def index_of(elements: List[Tag], element: Tag) -> int:
        """Identity-based index (Tag equality compares markup, not position)"""
        for i, candidate in enumerate(elements):
            if candidate is element:
                return i
        return -1
