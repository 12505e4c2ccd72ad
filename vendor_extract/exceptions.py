#!/usr/bin/env python3
"""
Exceptions raised by the vendor extraction package.
Extraction misses are never exceptions; these cover broken rule data only.
"""


class VendorExtractError(Exception):
    """Base class for vendor_extract errors"""


class VendorConfigError(VendorExtractError):
    """A vendor entry in the rule files is missing or malformed"""
    
    def __init__(self, vendor_id: str, message: str):
        self.vendor_id = vendor_id
        super().__init__(f"Invalid vendor config '{vendor_id}': {message}")
