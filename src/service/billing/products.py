"""
Stripe product catalog.

Prices are in whole units of ``currency``.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class ProductMode(str, Enum):
    PAYMENT = "payment"
    SUBSCRIPTION = "subscription"


@dataclass(frozen=True)
class Product:
    id: str
    price_id: str
    name: str
    description: str
    price: float
    currency: str
    mode: ProductMode
    features: List[str] = field(default_factory=list)
    popular: bool = False


PRODUCTS: List[Product] = [
    Product(
        id="prod_SanxmQQ4qkYU78",
        price_id="price_1RfcLDG3rwHz1Z4E5pLZtbAj",
        name="P3",
        description="Premium enterprise plan with advanced lending features and priority support",
        price=5000.00,
        currency="usd",
        mode=ProductMode.PAYMENT,
        features=[
            "Unlimited loan requests and funding",
            "Advanced AI risk assessment",
            "Priority customer support",
            "Custom lending terms",
            "Advanced analytics dashboard",
            "Dedicated account manager",
            "White-label options",
            "API access for integrations",
        ],
    ),
    Product(
        id="prod_SanwoH3JZ835rh",
        price_id="price_1RfcKuG3rwHz1Z4E7AdXNyqO",
        name="P2",
        description="Professional plan for serious lenders with enhanced features",
        price=1000.00,
        currency="usd",
        mode=ProductMode.PAYMENT,
        features=[
            "Extended loan limits up to ₹5,00,000",
            "Professional loan tools",
            "Priority verification process",
            "Advanced reporting and analytics",
            "Email and chat support",
            "Bulk lending operations",
            "Custom interest rate settings",
        ],
    ),
    Product(
        id="prod_SaTx0bJvrWeFRQ",
        price_id="price_1RfIzoG3rwHz1Z4E29SKAJt4",
        name="Vibe",
        description="Monthly subscription for continuous access to the Vibe platform",
        price=10.00,
        currency="usd",
        mode=ProductMode.SUBSCRIPTION,
        popular=True,
        features=[
            "Unlimited loan requests",
            "Basic AI verification",
            "Community support",
            "Mobile app access",
            "Standard verification",
            "Basic analytics",
        ],
    ),
]


def get_product_by_id(product_id: str) -> Optional[Product]:
    return next((p for p in PRODUCTS if p.id == product_id), None)


def get_product_by_price_id(price_id: str) -> Optional[Product]:
    return next((p for p in PRODUCTS if p.price_id == price_id), None)


def get_products(mode: Optional[ProductMode] = None) -> List[Product]:
    """All products, optionally filtered by billing mode."""
    if mode is None:
        return list(PRODUCTS)
    return [p for p in PRODUCTS if p.mode == mode]
