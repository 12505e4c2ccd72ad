#!/usr/bin/env python3
"""
Command line entry point - run the extraction engine on a saved email body

Examples:
    python -m vendor_extract.main receipt.html --subject "Pick n Pay Digital Receipt - Canal Walk - 25.12.2024"
    python -m vendor_extract.main order.html --sender "Takealot <orders@takealot.com>"
    python -m vendor_extract.main receipt.txt --vendor "Uber Eats" --text
    python -m vendor_extract.main --list-vendors
"""

import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .exceptions import VendorConfigError
from .extraction_engine import extract, get_supported_vendors
from .logger import setup_logger
from .rule_loader import RuleLoader
from .text_extraction import extract_from_text
from .vendor_config import VendorConfigRegistry
from .vendor_detector import VendorDetector

logger = logging.getLogger(__name__)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for vendor_extract"""
    import argparse

    parser = argparse.ArgumentParser(
        description='Extract a structured receipt from a vendor confirmation email body',
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.add_argument(
        'body_file',
        type=str,
        nargs='?',
        help='File containing the email body (HTML, or plain text with --text)'
    )
    parser.add_argument(
        '--subject',
        type=str,
        default='',
        help='Email subject line'
    )
    parser.add_argument(
        '--vendor',
        type=str,
        default=None,
        help='Vendor id (e.g. "Pick n Pay"); detected from sender/subject/body when omitted'
    )
    parser.add_argument(
        '--sender',
        type=str,
        default='',
        help='From header, used for vendor detection'
    )
    parser.add_argument(
        '--rules-dir',
        type=str,
        default=None,
        help='Directory containing rule YAML files (default: vendor_extract/rules)'
    )
    parser.add_argument(
        '--log-level',
        type=str,
        default='WARNING',
        help='Logging level (default: WARNING)'
    )
    parser.add_argument(
        '--text',
        action='store_true',
        help='Treat the file as a plain-text email body instead of HTML'
    )
    parser.add_argument(
        '--list-vendors',
        action='store_true',
        help='Print supported vendor ids and exit'
    )

    args = parser.parse_args(argv)
    setup_logger(args.log_level, stream=sys.stderr)

    rule_loader = RuleLoader(Path(args.rules_dir)) if args.rules_dir else RuleLoader()
    try:
        registry = VendorConfigRegistry.from_rules(rule_loader)
    except VendorConfigError as e:
        print(f"Could not load vendor configs: {e}", file=sys.stderr)
        return 2

    if args.list_vendors:
        for vendor_id in get_supported_vendors(registry):
            print(vendor_id)
        return 0

    if not args.body_file:
        parser.error('body_file is required unless --list-vendors is given')

    body_path = Path(args.body_file)
    try:
        body = body_path.read_text(encoding='utf-8', errors='replace')
    except OSError as e:
        print(f"Could not read {body_path}: {e}", file=sys.stderr)
        return 2

    vendor_id = args.vendor
    if not vendor_id:
        vendor_id, detection_confidence = VendorDetector(rule_loader).detect_vendor(
            subject=args.subject, sender=args.sender,
            raw_html='' if args.text else body, raw_text=body if args.text else ''
        )
        if not vendor_id:
            print("Could not detect vendor; pass --vendor", file=sys.stderr)
            return 1
        logger.info(f"Detected vendor {vendor_id} (confidence: {detection_confidence:.2f})")

    if args.text:
        result = extract_from_text(vendor_id, body, args.subject)
    else:
        result = extract(vendor_id, body, args.subject, registry=registry)
    if result is None:
        print(f"No receipt extracted for vendor '{vendor_id}'", file=sys.stderr)
        return 1

    print(json.dumps({'vendor': vendor_id, **result.to_dict()}, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
