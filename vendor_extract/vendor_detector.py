#!/usr/bin/env python3
"""
Vendor Detection - Apply vendor detection rules from 10_vendor_detection.yaml
Detects the vendor id of an email from its sender domain, subject and body
"""

import re
import logging
from typing import Any, Dict, List, Optional, Tuple

from .config import BODY_SCAN_LIMIT, DETECTION_THRESHOLD
from .rule_loader import RuleLoader

logger = logging.getLogger(__name__)

DEFAULT_WEIGHTS = {
    'sender_domain': 0.5,
    'subject': 0.3,
    'body': 0.2,
}


def extract_sender_domain(sender: Optional[str]) -> str:
    """
    Domain part of a From header

    Handles "Name <user@host>" and bare "user@host"; returns '' when there is no address.
    """
    if not sender:
        return ''
    bracketed = re.search(r'<([^>]+)>', sender)
    if bracketed:
        email = bracketed.group(1)
    else:
        bare = re.search(r'[\w.+-]+@[\w.-]+', sender)
        email = bare.group(0) if bare else sender
    parts = email.split('@')
    return parts[1].lower() if len(parts) > 1 else ''


class VendorDetector:
    """Detect vendor using rules from 10_vendor_detection.yaml"""

    def __init__(self, rule_loader: Optional[RuleLoader] = None):
        """
        Initialize vendor detector

        Args:
            rule_loader: RuleLoader instance (defaults to the configured rules directory)
        """
        self.rule_loader = rule_loader or RuleLoader()
        rules = self.rule_loader.get_vendor_detection_rules()
        self.threshold = float(rules.get('threshold', DETECTION_THRESHOLD))
        self.weights = {**DEFAULT_WEIGHTS, **(rules.get('weights') or {})}
        self.vendors = self._compile_vendors(rules.get('vendors') or [])

    @staticmethod
    def _compile_vendors(vendor_rules: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        compiled = []
        for rule in vendor_rules:
            if not isinstance(rule, dict):
                logger.warning(f"Skipping vendor detection rule that is not a mapping: {rule!r}")
                continue
            name = rule.get('name')
            if not name:
                logger.warning(f"Skipping vendor detection rule without name: {rule}")
                continue
            try:
                compiled.append({
                    'name': name,
                    'sender_domains': [re.compile(str(p), re.IGNORECASE) for p in rule.get('sender_domains') or []],
                    'subject_patterns': [re.compile(str(p), re.IGNORECASE) for p in rule.get('subject_patterns') or []],
                    'body_phrases': [str(phrase).lower() for phrase in rule.get('body_phrases') or []],
                })
            except re.error as e:
                logger.error(f"Invalid detection pattern for {name}: {e}")
        return compiled

    def detect_vendor(self, subject: str = '', sender: str = '', raw_html: str = '',
                      raw_text: str = '') -> Tuple[Optional[str], float]:
        """
        Detect vendor id from email metadata and content

        Args:
            subject: Email subject line
            sender: From header ("Name <user@host>" or bare address)
            raw_html: HTML body (used when raw_text is empty)
            raw_text: Plain-text body

        Returns:
            Tuple of (vendor_id, confidence); (None, 0.0) when no vendor reaches the threshold
        """
        subject = subject or ''
        sender_domain = extract_sender_domain(sender)
        subject_lower = subject.lower()
        body_lower = (raw_text or raw_html or '').lower()[:BODY_SCAN_LIMIT]

        for vendor in self.vendors:
            score = 0.0
            if any(pattern.search(sender_domain) for pattern in vendor['sender_domains']):
                score += self.weights['sender_domain']
            if any(pattern.search(subject_lower) for pattern in vendor['subject_patterns']):
                score += self.weights['subject']
            if any(phrase in body_lower for phrase in vendor['body_phrases']):
                score += self.weights['body']

            score = round(score, 2)
            if score >= self.threshold:
                confidence = min(score, 1.0)
                logger.info(f'[VENDOR_DETECTED] vendor="{vendor["name"]}" confidence={confidence} '
                            f'domain="{sender_domain}" subject="{subject[:60]}"')
                return vendor['name'], confidence

        logger.info(f'[VENDOR_DETECTED] vendor=null domain="{sender_domain}" subject="{subject[:60]}"')
        return None, 0.0
