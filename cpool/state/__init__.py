"""
Value objects: assets, tagged amounts and exact prices.
"""

from .assets import AmountOfAsset, Asset, checksum_address, equals, sort_pair, sorts_before
from .price import Price

__all__ = [
    "AmountOfAsset",
    "Asset",
    "Price",
    "checksum_address",
    "equals",
    "sort_pair",
    "sorts_before",
]
