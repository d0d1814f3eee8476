"""
Billing module.

Handles the Stripe one-time payment that unlocks EcoBag Pro.

Public API:
- IBillingService: Interface for the purchase flow
- IPaymentGateway: Interface for the payment provider
- PaymentIntentResult, WebhookEvent: Gateway results
- Billing exceptions: PaymentNotConfiguredError, etc.
"""

from .interfaces import IBillingService, IPaymentGateway
from .models import (
    PaymentIntentResult,
    WebhookEvent,
    PaymentIntentResponse,
    WebhookResponse,
    PAYMENT_INTENT_SUCCEEDED,
)
from .exceptions import (
    BillingError,
    PaymentNotConfiguredError,
    PaymentFailedError,
    WebhookVerificationError,
)
from .service import (
    BillingService,
    StripePaymentGateway,
    UnconfiguredPaymentGateway,
    create_payment_gateway,
)

__all__ = [
    # Interfaces
    "IBillingService",
    "IPaymentGateway",
    # Models
    "PaymentIntentResult",
    "WebhookEvent",
    "PaymentIntentResponse",
    "WebhookResponse",
    "PAYMENT_INTENT_SUCCEEDED",
    # Exceptions
    "BillingError",
    "PaymentNotConfiguredError",
    "PaymentFailedError",
    "WebhookVerificationError",
    # Service
    "BillingService",
    "StripePaymentGateway",
    "UnconfiguredPaymentGateway",
    "create_payment_gateway",
]
