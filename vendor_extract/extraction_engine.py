#!/usr/bin/env python3
"""
Extraction Engine - Deterministic receipt extraction from vendor email HTML

Flow for one email:
1. Look up the vendor config (unsupported vendor -> None, nothing parsed)
2. Parse the HTML (parse error -> None)
3. Run the vendor strategy's custom fields (e.g. branch/date from the subject)
   - a custom total that normalizes returns immediately
4. Search the generic locators for total (mandatory), date, order id, store name
5. Score confidence from the fields matched

Misses are reported as None, never raised. Every call logs one diagnostic
record (extra={'diagnostic': {...}}) for the observability sink.
"""

import logging
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from .confidence import calculate_confidence
from .config import DEFAULT_CURRENCY
from .html_document import HtmlDocument
from .normalizers import normalize_currency
from .value_locators import (
    find_amount_in_html,
    find_date_in_html,
    find_order_id_in_html,
    find_store_name_in_html,
)
from .vendor_config import VendorConfigRegistry, get_registry
from .vendor_strategies import get_strategy

logger = logging.getLogger(__name__)

FIELD_NAMES = ('total', 'date', 'store_name', 'order_id', 'items')


@dataclass
class ExtractionResult:
    """Structured receipt extracted from one email"""
    store_name: str
    total: str
    date: str
    currency: str = DEFAULT_CURRENCY
    items: List[str] = field(default_factory=list)
    order_id: Optional[str] = None
    confidence: float = 0.0
    fields_matched: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _today() -> str:
    return datetime.now(timezone.utc).date().isoformat()


def build_diagnostic(vendor_id: str, status: str, reason: Optional[str],
                     fields_matched: List[str], confidence: Optional[float] = None) -> Dict[str, Any]:
    """Structured record attached to extraction log lines as extra={'diagnostic': ...}"""
    return {
        'vendor': vendor_id,
        'status': status,
        'reason': reason,
        'fields_matched': list(fields_matched),
        'fields_unmatched': [name for name in FIELD_NAMES if name not in fields_matched],
        'confidence': confidence,
    }


def _fail(vendor_id: str, reason: str, message: str, fields_matched: Optional[List[str]] = None) -> None:
    record = build_diagnostic(vendor_id, 'failed', reason, fields_matched or [])
    logger.warning(f'[VENDOR_HTML_PARSE_FAILED] vendor="{vendor_id}" {message}', extra={'diagnostic': record})
    return None


def _succeed(vendor_id: str, store_name: str, total: str, date: Optional[str],
             order_id: Optional[str], fields_matched: List[str]) -> ExtractionResult:
    confidence = calculate_confidence(fields_matched)
    record = build_diagnostic(vendor_id, 'success', None, fields_matched, confidence)
    logger.info(
        f'[VENDOR_HTML_PARSE_SUCCESS] vendor="{vendor_id}" total={total} date={date} '
        f'store="{store_name}" order_id={order_id or "none"} confidence={confidence} '
        f'fields=[{",".join(fields_matched)}]',
        extra={'diagnostic': record}
    )
    logger.info(f'[DETERMINISTIC_CONFIDENCE_SCORE] vendor="{vendor_id}" score={confidence} fields={len(fields_matched)}')

    return ExtractionResult(
        store_name=store_name,
        total=total,
        date=date or _today(),
        currency=DEFAULT_CURRENCY,
        items=[],
        order_id=order_id,
        confidence=confidence,
        fields_matched=list(fields_matched),
    )


def extract(vendor_id: str, raw_html: str, subject: str,
            registry: Optional[VendorConfigRegistry] = None) -> Optional[ExtractionResult]:
    """
    Extract a receipt from a vendor confirmation email

    Args:
        vendor_id: Registry key, case-sensitive (e.g. 'Pick n Pay')
        raw_html: Full HTML body of the email
        subject: Email subject line (date fallback, store name source for some vendors)
        registry: Vendor config registry (defaults to the module-level registry)

    Returns:
        ExtractionResult, or None if the vendor is unsupported, the HTML cannot
        be parsed, or no total can be located
    """
    registry = registry or get_registry()
    config = registry.get_config(vendor_id)
    if config is None:
        return _fail(vendor_id, 'unsupported_vendor', 'no HTML config for vendor')

    try:
        document = HtmlDocument(raw_html)
    except Exception as e:
        return _fail(vendor_id, 'parse_error', f'HTML parse error: {e}')

    subject = subject or ''
    fields_matched = []
    store_name = config.name
    date = None
    order_id = None

    custom = get_strategy(config).extract_custom_fields(document, subject)
    if custom:
        if custom.get('store_name'):
            store_name = custom['store_name']
            fields_matched.append('store_name')
        if custom.get('date'):
            date = custom['date']
            fields_matched.append('date')
        if custom.get('order_id'):
            order_id = custom['order_id']
            fields_matched.append('order_id')
        if custom.get('total'):
            total = normalize_currency(custom['total'])
            if total:
                fields_matched.append('total')
                return _succeed(vendor_id, store_name, total, date, order_id, fields_matched)

    total = find_amount_in_html(document, config.total_labels, config.currency_symbols)
    if not total:
        return _fail(
            vendor_id, 'total_not_found',
            f'could not find total in HTML. Labels tried: [{", ".join(config.total_labels)}]',
            fields_matched
        )
    fields_matched.append('total')

    if not date:
        date = find_date_in_html(document, config.date_labels, subject)
        if date:
            fields_matched.append('date')

    if not order_id:
        order_id = find_order_id_in_html(document, config.order_id_labels)
        if order_id:
            fields_matched.append('order_id')

    if 'store_name' not in fields_matched and config.store_name_labels:
        found_store = find_store_name_in_html(document, config.store_name_labels)
        if found_store:
            store_name = found_store
            fields_matched.append('store_name')

    return _succeed(vendor_id, store_name, total, date, order_id, fields_matched)


def get_supported_vendors(registry: Optional[VendorConfigRegistry] = None) -> List[str]:
    return (registry or get_registry()).list_vendors()


def is_vendor_supported(vendor_id: str, registry: Optional[VendorConfigRegistry] = None) -> bool:
    return (registry or get_registry()).is_supported(vendor_id)
