#!/usr/bin/env python3
"""
Configuration for the vendor HTML extraction engine
Edit these values to tune label matching and scoring
"""

import os
from pathlib import Path

# Rule files directory
# Uses rule files from vendor_extract/rules/:
# - 10_vendor_detection.yaml: Vendor detection rules (sender domain, subject, body phrases)
# - 20_vendor_configs.yaml: Per-vendor label sets used by the extraction engine
# Set VENDOR_EXTRACT_RULES_DIR to point at a different rules folder
RULES_DIR = Path(os.getenv('VENDOR_EXTRACT_RULES_DIR', Path(__file__).parent / 'rules'))

VENDOR_DETECTION_FILE = '10_vendor_detection.yaml'
VENDOR_CONFIG_FILE = '20_vendor_configs.yaml'

# Currency Settings
# Single-currency deployment: every extracted receipt is reported in rands
DEFAULT_CURRENCY = 'ZAR'

# HTML Parsing
HTML_PARSER = 'html.parser'            # BeautifulSoup parser backend

# Label Matching Settings
LABEL_LENGTH_SLACK = 30                # Element text may be at most len(label) + this long
COLON_VALUE_MAX_LENGTH = 100           # Truncate values captured after "<label>:"
ORDER_ID_MAX_LENGTH = 50               # Truncate order ids after whitespace removal
STORE_NAME_LENGTH = {
    'min_exclusive': 2,                # "Pn" is too short to be a branch name
    'max_exclusive': 100,
}

# Elements scanned by label-adjacency search outside of tables
INLINE_ELEMENTS = ['span', 'div', 'p', 'strong', 'b', 'dt', 'dd', 'li']
TABLE_CELLS = ['td', 'th']

# Plain-text Body Settings
TEXT_ITEM_LIMIT = 20                   # Line items kept from a plain-text body
ITEM_NAME_LENGTH = {
    'min_exclusive': 2,
    'max_exclusive': 100,
}

# Vendor Detection Settings
BODY_SCAN_LIMIT = 5000                 # Characters of body text checked for vendor phrases
DETECTION_THRESHOLD = 0.5              # Minimum score for a vendor to be detected

# Confidence Weights (summed over matched fields, capped at 1.0)
CONFIDENCE_WEIGHTS = {
    'total': 0.70,
    'date': 0.10,
    'store_name': 0.10,
    'order_id': 0.05,
    'items': 0.05,
}

# Logging Settings
LOGGING = {
    'level': 'INFO',                   # DEBUG, INFO, WARNING, ERROR
    'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
}
