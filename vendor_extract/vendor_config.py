#!/usr/bin/env python3
"""
Vendor Config Registry - Immutable per-vendor label sets
Built once from 20_vendor_configs.yaml and never mutated afterwards
"""

import logging
import threading
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .exceptions import VendorConfigError
from .rule_loader import RuleLoader

logger = logging.getLogger(__name__)

_LABEL_FIELDS = ('total_labels', 'date_labels', 'order_id_labels', 'store_name_labels',
                 'item_selectors', 'currency_symbols')


@dataclass(frozen=True)
class VendorConfig:
    """Which labels identify each receipt field for one vendor"""
    name: str
    total_labels: Tuple[str, ...] = ()
    date_labels: Tuple[str, ...] = ()
    order_id_labels: Tuple[str, ...] = ()
    store_name_labels: Tuple[str, ...] = ()
    item_selectors: Tuple[str, ...] = ()   # reserved for line-item extraction
    currency_symbols: Tuple[str, ...] = ()
    strategy: str = 'generic'

    @classmethod
    def from_rule(cls, vendor_id: str, rule: Dict[str, Any]) -> 'VendorConfig':
        """
        Build a config from one entry of the vendors mapping

        Args:
            vendor_id: Key of the entry (used in error messages)
            rule: Raw YAML mapping

        Raises:
            VendorConfigError: entry is not a mapping, has no name, or a label field is not a list
        """
        if not isinstance(rule, dict):
            raise VendorConfigError(vendor_id, 'entry must be a mapping')
        name = rule.get('name')
        if not name or not isinstance(name, str):
            raise VendorConfigError(vendor_id, "missing 'name'")

        fields = {}
        for field in _LABEL_FIELDS:
            values = rule.get(field) or []
            if not isinstance(values, list):
                raise VendorConfigError(vendor_id, f"'{field}' must be a list")
            fields[field] = tuple(str(value) for value in values)

        return cls(name=name, strategy=str(rule.get('strategy') or 'generic'), **fields)


class VendorConfigRegistry:
    """Lookup of VendorConfig by vendor id (case-sensitive)"""

    def __init__(self, configs: Mapping[str, VendorConfig]):
        self._configs = MappingProxyType(dict(configs))

    @classmethod
    def from_rules(cls, rule_loader: Optional[RuleLoader] = None) -> 'VendorConfigRegistry':
        """Build the registry from the vendor config rule file"""
        rule_loader = rule_loader or RuleLoader()
        vendors = rule_loader.get_vendor_configs()
        if not isinstance(vendors, dict):
            raise VendorConfigError('*', "'vendors' must be a mapping")
        if not vendors:
            raise VendorConfigError('*', f"no vendor configs found in {rule_loader.rules_dir}")
        configs = {str(vendor_id): VendorConfig.from_rule(str(vendor_id), rule)
                   for vendor_id, rule in vendors.items()}
        logger.info(f"Loaded {len(configs)} vendor configs from {rule_loader.rules_dir}")
        return cls(configs)

    def get_config(self, vendor_id: str) -> Optional[VendorConfig]:
        return self._configs.get(vendor_id)

    def is_supported(self, vendor_id: str) -> bool:
        return vendor_id in self._configs

    def list_vendors(self) -> List[str]:
        return list(self._configs)


_DEFAULT_REGISTRY = None
_DEFAULT_REGISTRY_LOCK = threading.Lock()


def get_registry() -> VendorConfigRegistry:
    """Module-level registry, built from the default rules directory on first use"""
    global _DEFAULT_REGISTRY
    if _DEFAULT_REGISTRY is None:
        with _DEFAULT_REGISTRY_LOCK:
            if _DEFAULT_REGISTRY is None:
                _DEFAULT_REGISTRY = VendorConfigRegistry.from_rules()
    return _DEFAULT_REGISTRY


def get_config(vendor_id: str) -> Optional[VendorConfig]:
    return get_registry().get_config(vendor_id)


def is_supported(vendor_id: str) -> bool:
    return get_registry().is_supported(vendor_id)


def list_vendors() -> List[str]:
    return get_registry().list_vendors()
