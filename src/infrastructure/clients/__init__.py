"""External service clients."""

from .gemini_client import GeminiClient
from .stripe_gateway import StripePaymentGateway, subscription_from_stripe

__all__ = [
    "GeminiClient",
    "StripePaymentGateway",
    "subscription_from_stripe",
]
