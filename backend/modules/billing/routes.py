"""
Payment API endpoints.

POST /create-payment-intent starts the one-time Pro purchase; Stripe then
calls POST /stripe/webhook, which is the only place paid access is granted.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Header, Request

from api.dependencies import get_billing_service
from api.errors import translate_errors
from api.middleware.auth import get_current_user
from shared.models import AuthenticatedUser

from .interfaces import IBillingService
from .models import PaymentIntentResponse, WebhookResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/create-payment-intent", response_model=PaymentIntentResponse)
async def create_payment_intent(
    user: AuthenticatedUser = Depends(get_current_user),
    billing: IBillingService = Depends(get_billing_service),
) -> PaymentIntentResponse:
    """
    Create a Stripe PaymentIntent for EcoBag Pro.

    Returns 503 when Stripe is not configured on the server.
    """
    with translate_errors("create payment intent"):
        result = await billing.create_payment_intent(user.id)
    return PaymentIntentResponse(client_secret=result.client_secret)


@router.post("/stripe/webhook", response_model=WebhookResponse)
async def stripe_webhook(
    request: Request,
    stripe_signature: Optional[str] = Header(default=None, alias="Stripe-Signature"),
    billing: IBillingService = Depends(get_billing_service),
) -> WebhookResponse:
    """
    Receive Stripe events.

    Unauthenticated; the Stripe-Signature header is verified against the
    raw request body instead. Invalid signatures return 400.
    """
    payload = await request.body()
    with translate_errors("process webhook"):
        await billing.handle_webhook(payload, stripe_signature)
    return WebhookResponse(received=True)
