#!/usr/bin/env python3
"""
Tests for the vendor config registry
"""

import dataclasses

import pytest

from vendor_extract import vendor_config
from vendor_extract.exceptions import VendorConfigError
from vendor_extract.rule_loader import RuleLoader
from vendor_extract.vendor_config import VendorConfig, VendorConfigRegistry

EXPECTED_VENDORS = ['Pick n Pay', 'Takealot', 'Amazon', 'Checkers', 'Uber Eats']


class TestRegistry:
    """Registry built from the packaged rule files"""

    def test_list_vendors_in_rule_order(self, registry):
        assert registry.list_vendors() == EXPECTED_VENDORS

    def test_lookup_is_case_sensitive(self, registry):
        assert registry.get_config('Checkers') is not None
        assert registry.get_config('checkers') is None
        assert registry.is_supported('Checkers')
        assert not registry.is_supported('CHECKERS')
        assert not registry.is_supported('Woolworths')

    def test_checkers_labels(self, registry):
        config = registry.get_config('Checkers')
        assert config.name == 'Checkers'
        assert config.total_labels[0] == 'total'
        assert 'delivery date' in config.date_labels
        assert config.store_name_labels == ('store', 'branch')
        assert config.strategy == 'generic'

    def test_hash_labels_survive_yaml(self, registry):
        """'order #' must be quoted in YAML or it turns into a comment"""
        for vendor_id in ('Takealot', 'Amazon', 'Checkers', 'Uber Eats'):
            assert 'order #' in registry.get_config(vendor_id).order_id_labels
        assert registry.get_config('Takealot').order_id_labels[-1] == 'order'

    def test_amazon_accepts_foreign_symbols(self, registry):
        symbols = registry.get_config('Amazon').currency_symbols
        for symbol in ('$', '£', '€', 'USD', 'GBP', 'EUR'):
            assert symbol in symbols

    def test_item_selectors_unused(self, registry):
        for vendor_id in registry.list_vendors():
            assert registry.get_config(vendor_id).item_selectors == ()

    def test_custom_strategies(self, registry):
        assert registry.get_config('Pick n Pay').strategy == 'pick_n_pay'
        assert registry.get_config('Uber Eats').strategy == 'uber_eats'

    def test_configs_are_frozen(self, registry):
        config = registry.get_config('Amazon')
        with pytest.raises(dataclasses.FrozenInstanceError):
            config.name = 'Not Amazon'

    def test_list_vendors_returns_copy(self, registry):
        vendors = registry.list_vendors()
        vendors.append('Woolworths')
        assert registry.list_vendors() == EXPECTED_VENDORS

    def test_registry_does_not_follow_source_mapping(self):
        source = {'Shop': VendorConfig(name='Shop', total_labels=('total',))}
        registry = VendorConfigRegistry(source)
        source['Other'] = VendorConfig(name='Other')
        assert registry.list_vendors() == ['Shop']

    def test_module_level_helpers(self):
        assert vendor_config.list_vendors() == EXPECTED_VENDORS
        assert vendor_config.is_supported('Takealot')
        assert vendor_config.get_config('Takealot').name == 'Takealot'
        assert vendor_config.get_registry() is vendor_config.get_registry()


class TestVendorConfigFromRule:
    """Validation of raw YAML entries"""

    def test_minimal_entry(self):
        config = VendorConfig.from_rule('Shop', {'name': 'Shop', 'total_labels': ['total']})
        assert config.total_labels == ('total',)
        assert config.date_labels == ()
        assert config.strategy == 'generic'

    def test_missing_name(self):
        with pytest.raises(VendorConfigError) as exc_info:
            VendorConfig.from_rule('Shop', {'total_labels': ['total']})
        assert exc_info.value.vendor_id == 'Shop'

    def test_labels_must_be_list(self):
        with pytest.raises(VendorConfigError):
            VendorConfig.from_rule('Shop', {'name': 'Shop', 'total_labels': 'total'})

    def test_entry_must_be_mapping(self):
        with pytest.raises(VendorConfigError):
            VendorConfig.from_rule('Shop', ['total'])


class TestRegistryFromCustomRules:
    """Registry built from a rules directory other than the packaged one"""

    def test_custom_rules_dir(self, tmp_path):
        (tmp_path / '20_vendor_configs.yaml').write_text(
            "vendors:\n"
            "  Spar:\n"
            "    name: SPAR\n"
            "    total_labels: [total]\n"
            "    currency_symbols: [R]\n",
            encoding='utf-8'
        )
        registry = VendorConfigRegistry.from_rules(RuleLoader(tmp_path))
        assert registry.list_vendors() == ['Spar']
        assert registry.get_config('Spar').name == 'SPAR'

    def test_missing_rules_file_raises(self, tmp_path):
        with pytest.raises(VendorConfigError) as exc_info:
            VendorConfigRegistry.from_rules(RuleLoader(tmp_path))
        assert 'no vendor configs found' in str(exc_info.value)

    @pytest.mark.parametrize('content', ['', 'vendors:\n', 'vendors: {}\n', 'vendors: [unclosed\n'])
    def test_empty_or_unreadable_rules_raise(self, tmp_path, content):
        (tmp_path / '20_vendor_configs.yaml').write_text(content, encoding='utf-8')
        with pytest.raises(VendorConfigError):
            VendorConfigRegistry.from_rules(RuleLoader(tmp_path))

    def test_empty_registry_can_still_be_built_directly(self):
        assert VendorConfigRegistry({}).list_vendors() == []

    def test_broken_entry_raises(self, tmp_path):
        (tmp_path / '20_vendor_configs.yaml').write_text(
            "vendors:\n"
            "  Spar:\n"
            "    total_labels: [total]\n",
            encoding='utf-8'
        )
        with pytest.raises(VendorConfigError):
            VendorConfigRegistry.from_rules(RuleLoader(tmp_path))
