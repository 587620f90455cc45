from .blobs import LedgerBlob
from .records import (
    Product,
    Sale,
    Expense,
    Customer,
    PRICE_TIER_REGULAR,
    PRICE_TIER_DISCOUNTED,
    PRICE_TIERS,
)

__all__ = [
    'LedgerBlob',
    'Product', 'Sale', 'Expense', 'Customer',
    'PRICE_TIER_REGULAR', 'PRICE_TIER_DISCOUNTED', 'PRICE_TIERS',
]
