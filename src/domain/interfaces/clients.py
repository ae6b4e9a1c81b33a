"""External client interfaces."""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from src.domain.entities import PaymentIntent, SubscriptionUpdate, WebhookEvent


class GenerativeAIClient(ABC):
    """
    Abstract client for a hosted generative model.

    Callers build prompts and parse the free-text reply; the client only
    moves content parts to the model and text back.
    """

    @property
    @abstractmethod
    def is_configured(self) -> bool:
        """False when running on canned demo responses."""
        ...

    @abstractmethod
    async def generate(
        self,
        parts: List[Dict[str, Any]],
        temperature: float = 0.7,
    ) -> str:
        """
        Send one user turn to the model.

        Args:
            parts: Content parts (``{"text": ...}`` or ``{"inline_data": ...}``)
            temperature: Sampling temperature

        Returns:
            The text of the first candidate

        Raises:
            AIServiceException: If the API returns an error or malformed reply
            AIServiceTimeoutException: If every attempt timed out
        """
        ...


class PaymentGateway(ABC):
    """
    Abstract client for the payment provider.

    Amounts are in minor units of ``currency``.
    """

    @abstractmethod
    async def create_customer(
        self,
        user_id: str,
        email: str,
        name: Optional[str] = None,
    ) -> str:
        """
        Create a provider customer for a platform user.

        Returns:
            The provider customer ID
        """
        ...

    @abstractmethod
    async def create_payment_intent(
        self,
        amount: int,
        currency: str,
        customer_id: str,
        metadata: Dict[str, str],
        description: Optional[str] = None,
    ) -> PaymentIntent:
        ...

    @abstractmethod
    async def retrieve_payment_intent(self, payment_intent_id: str) -> PaymentIntent:
        ...

    @abstractmethod
    async def cancel_subscription_at_period_end(
        self,
        subscription_id: str,
    ) -> SubscriptionUpdate:
        ...

    @abstractmethod
    def construct_webhook_event(self, payload: bytes, signature: str) -> WebhookEvent:
        """
        Verify a webhook signature and decode the event.

        Raises:
            WebhookSignatureException: If the signature doesn't match
        """
        ...
