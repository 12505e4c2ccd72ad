#!/usr/bin/env python3
"""
Rule Loader - Load YAML rules from the vendor_extract rules directory
Rule files are read once and cached by filename
"""

import yaml
import logging
from pathlib import Path
from typing import Dict, Any, Optional

from .config import RULES_DIR, VENDOR_CONFIG_FILE, VENDOR_DETECTION_FILE

logger = logging.getLogger(__name__)


class RuleLoader:
    """Load and cache YAML rule files"""

    def __init__(self, rules_dir: Optional[Path] = None):
        """
        Initialize rule loader with rules directory

        Args:
            rules_dir: Path to rules directory (defaults to config RULES_DIR)
        """
        self.rules_dir = Path(rules_dir) if rules_dir else RULES_DIR
        self._rules_cache = {}
        self._file_read_count = 0

    def _load_yaml_file(self, file_path: Path) -> Dict[str, Any]:
        """Load a YAML file directly"""
        self._file_read_count += 1
        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                return yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.error(f"Error loading YAML file {file_path}: {e}")
            return {}

    def load_rule_file_by_name(self, filename: str) -> Dict[str, Any]:
        """
        Load a specific rule file by filename (e.g., '10_vendor_detection.yaml')

        Args:
            filename: Rule file name

        Returns:
            Rule dictionary or empty dict if not found
        """
        if filename in self._rules_cache:
            return self._rules_cache[filename]

        rule_file = self.rules_dir / filename
        if not rule_file.exists():
            logger.warning(f"Rule file not found: {rule_file}")
            return {}

        rules = self._load_yaml_file(rule_file)
        if not isinstance(rules, dict):
            logger.error(f"Rule file {filename} must contain a mapping, got {type(rules).__name__}")
            rules = {}
        self._rules_cache[filename] = rules
        logger.debug(f"Loaded rule file: {filename}")
        return rules

    def get_vendor_configs(self) -> Dict[str, Any]:
        """Get per-vendor extraction configs from 20_vendor_configs.yaml"""
        rules = self.load_rule_file_by_name(VENDOR_CONFIG_FILE)
        return rules.get('vendors', {}) or {}

    def get_vendor_detection_rules(self) -> Dict[str, Any]:
        """Get vendor detection rules from 10_vendor_detection.yaml"""
        rules = self.load_rule_file_by_name(VENDOR_DETECTION_FILE)
        return rules.get('vendor_detection', {}) or {}

    def get_file_read_count(self) -> int:
        """Number of rule files read from disk (cache hits are not counted)"""
        return self._file_read_count

    def clear_cache(self):
        """Clear the rules cache"""
        logger.debug("Clearing rules cache")
        self._rules_cache.clear()
