"""
Billing service implementation.

Creates Stripe PaymentIntents for the one-time Pro unlock and grants paid
access when Stripe confirms the payment through a signed webhook.

The gateway is chosen once from settings by create_payment_gateway():
without Stripe credentials the UnconfiguredPaymentGateway is used and every
payment operation raises PaymentNotConfiguredError.
"""

import json
import logging
from typing import Optional

import stripe

from shared.config import Settings
from modules.storage.interfaces import IStorageService
from modules.storage.models import User
from .interfaces import IBillingService, IPaymentGateway
from .models import PaymentIntentResult, WebhookEvent, PAYMENT_INTENT_SUCCEEDED
from .exceptions import (
    PaymentNotConfiguredError,
    PaymentFailedError,
    WebhookVerificationError,
)

logger = logging.getLogger(__name__)

# Stripe's default tolerance for webhook timestamps, in seconds
WEBHOOK_TOLERANCE = 300


class StripePaymentGateway(IPaymentGateway):
    """IPaymentGateway backed by the Stripe API."""

    def __init__(
        self,
        secret_key: str,
        webhook_secret: str,
        amount: int,
        currency: str = "usd",
        tolerance: int = WEBHOOK_TOLERANCE,
    ):
        self._secret_key = secret_key
        self._webhook_secret = webhook_secret
        self._amount = amount
        self._currency = currency
        self._tolerance = tolerance

    @property
    def configured(self) -> bool:
        return True

    def create_payment_intent(self, user_id: str) -> PaymentIntentResult:
        try:
            intent = stripe.PaymentIntent.create(
                amount=self._amount,
                currency=self._currency,
                metadata={"user_id": user_id},
                api_key=self._secret_key,
            )
        except stripe.StripeError as e:
            logger.error("Stripe rejected payment intent for user %s: %s", user_id, e)
            raise PaymentFailedError(
                "Failed to create payment intent",
                stripe_error=getattr(e, "user_message", None) or str(e),
            ) from e

        logger.info("Created payment intent %s for user %s", intent.id, user_id)
        return PaymentIntentResult(
            client_secret=intent.client_secret,
            payment_intent_id=intent.id,
        )

    def verify_webhook(self, payload: bytes, signature: Optional[str]) -> WebhookEvent:
        if not signature:
            raise WebhookVerificationError("Missing Stripe-Signature header")

        try:
            body = payload.decode("utf-8")
            stripe.WebhookSignature.verify_header(
                body, signature, self._webhook_secret, self._tolerance
            )
            event = json.loads(body)
        except stripe.SignatureVerificationError as e:
            raise WebhookVerificationError(str(e)) from e
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise WebhookVerificationError("Malformed payload") from e

        try:
            return WebhookEvent(
                id=event["id"],
                type=event["type"],
                data=event.get("data", {}).get("object", {}),
            )
        except (KeyError, TypeError, AttributeError) as e:
            raise WebhookVerificationError("Malformed event") from e


class UnconfiguredPaymentGateway(IPaymentGateway):
    """Gateway used when Stripe credentials are absent."""

    @property
    def configured(self) -> bool:
        return False

    def create_payment_intent(self, user_id: str) -> PaymentIntentResult:
        raise PaymentNotConfiguredError()

    def verify_webhook(self, payload: bytes, signature: Optional[str]) -> WebhookEvent:
        raise PaymentNotConfiguredError()


def create_payment_gateway(settings: Settings) -> IPaymentGateway:
    """Build the payment gateway the settings describe."""
    if not settings.payments_configured:
        logger.warning("Stripe is not configured; payment endpoints will return 503")
        return UnconfiguredPaymentGateway()

    return StripePaymentGateway(
        secret_key=settings.stripe_secret_key,
        webhook_secret=settings.stripe_webhook_secret,
        amount=settings.pro_price_cents,
        currency=settings.pro_currency,
    )


class BillingService(IBillingService):
    """
    Pro purchase flow on top of a payment gateway and the storage service.

    Paid access is granted only from verified webhooks. Stripe may deliver
    an event more than once; grant_paid_access is idempotent, so replays
    change nothing.
    """

    def __init__(self, gateway: IPaymentGateway, storage: IStorageService):
        self._gateway = gateway
        self._storage = storage

    @property
    def configured(self) -> bool:
        return self._gateway.configured

    async def create_payment_intent(self, user_id: str) -> PaymentIntentResult:
        return self._gateway.create_payment_intent(user_id)

    async def handle_webhook(self, payload: bytes, signature: Optional[str]) -> Optional[User]:
        event = self._gateway.verify_webhook(payload, signature)
        logger.info("Received Stripe webhook %s (%s)", event.id, event.type)

        if event.type != PAYMENT_INTENT_SUCCEEDED:
            logger.debug("Ignoring Stripe event type %s", event.type)
            return None

        user_id = event.user_id
        if not user_id:
            logger.warning("Payment intent in event %s has no user_id metadata", event.id)
            return None

        return await self._storage.grant_paid_access(user_id, event.customer)
