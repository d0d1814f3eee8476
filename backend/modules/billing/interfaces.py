"""
Billing module interfaces.

Route handlers depend on IBillingService; the service talks to Stripe only
through IPaymentGateway, so tests and unconfigured deployments can swap
the gateway without touching the service.
"""

from typing import Protocol, Optional, runtime_checkable

from modules.storage.models import User
from .models import PaymentIntentResult, WebhookEvent


@runtime_checkable
class IPaymentGateway(Protocol):
    """Payment provider operations used by the billing service."""

    @property
    def configured(self) -> bool:
        """Whether the gateway can talk to the provider."""
        ...

    def create_payment_intent(self, user_id: str) -> PaymentIntentResult:
        """
        Create a one-time Pro payment intent for a user.

        Raises:
            PaymentNotConfiguredError: If no Stripe credentials are set
            PaymentFailedError: If Stripe rejects the request
        """
        ...

    def verify_webhook(self, payload: bytes, signature: Optional[str]) -> WebhookEvent:
        """
        Verify a webhook's Stripe-Signature header and parse the event.

        Raises:
            PaymentNotConfiguredError: If no webhook secret is set
            WebhookVerificationError: If the signature is missing or invalid
        """
        ...


@runtime_checkable
class IBillingService(Protocol):
    """
    Interface for the Pro purchase flow.

    The webhook is the only path that grants paid access.
    """

    @property
    def configured(self) -> bool:
        """Whether Stripe credentials are present."""
        ...

    async def create_payment_intent(self, user_id: str) -> PaymentIntentResult:
        """Start a Pro purchase for the user."""
        ...

    async def handle_webhook(self, payload: bytes, signature: Optional[str]) -> Optional[User]:
        """
        Process a Stripe webhook.

        Returns:
            The user that was granted access, or None for ignored events
        """
        ...
