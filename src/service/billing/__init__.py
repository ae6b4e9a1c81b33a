"""
Billing Module: Stripe product catalog
"""

from .products import (
    PRODUCTS,
    Product,
    ProductMode,
    get_product_by_id,
    get_product_by_price_id,
    get_products,
)

__all__ = [
    "PRODUCTS",
    "Product",
    "ProductMode",
    "get_product_by_id",
    "get_product_by_price_id",
    "get_products",
]
