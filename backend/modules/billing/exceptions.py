"""
Billing module exceptions.

These exceptions are raised by the billing module and can be caught
by API error handlers to return appropriate HTTP responses.
"""

from typing import Optional

from shared.exceptions import EcoBagError, ExternalServiceError


class BillingError(EcoBagError):
    """Base exception for billing-related errors."""

    pass


class PaymentNotConfiguredError(BillingError):
    """
    Raised when a payment operation is attempted without Stripe credentials.

    The API maps this to 503 so the frontend can hide the upgrade flow.
    """

    def __init__(self):
        super().__init__(
            "Payment processing not configured",
            code="PAYMENT_NOT_CONFIGURED",
        )


class PaymentFailedError(ExternalServiceError):
    """Raised when Stripe rejects or fails a payment request."""

    def __init__(self, message: str, stripe_error: Optional[str] = None):
        super().__init__(
            message,
            service="stripe",
            code="PAYMENT_FAILED",
            details={"stripe_error": stripe_error} if stripe_error else {},
        )


class WebhookVerificationError(BillingError):
    """Raised when Stripe webhook signature verification fails."""

    def __init__(self, reason: Optional[str] = None):
        super().__init__(
            "Webhook signature verification failed",
            code="WEBHOOK_VERIFICATION_FAILED",
            details={"reason": reason} if reason else {},
        )
