"""
Billing module data models.

These models define the data structures used by the billing module
and exposed to other modules through the interface.
"""

from typing import Any, Optional

from pydantic import BaseModel, Field


PAYMENT_INTENT_SUCCEEDED = "payment_intent.succeeded"


class PaymentIntentResult(BaseModel):
    """A created Stripe PaymentIntent, as handed to the frontend."""

    client_secret: str = Field(..., description="Secret used by Stripe.js to confirm the payment")
    payment_intent_id: str = Field(..., description="Stripe PaymentIntent ID")


class WebhookEvent(BaseModel):
    """
    A verified Stripe webhook event.

    Only the parts the backend acts on are kept; `data` is the event's
    `data.object` payload as sent by Stripe.
    """

    id: str = Field(..., description="Stripe event ID")
    type: str = Field(..., description="Event type, e.g. payment_intent.succeeded")
    data: dict[str, Any] = Field(default_factory=dict, description="The event's data.object")

    @property
    def user_id(self) -> Optional[str]:
        """User ID stored in the object's metadata when the intent was created."""
        metadata = self.data.get("metadata") or {}
        return metadata.get("user_id")

    @property
    def customer(self) -> Optional[str]:
        return self.data.get("customer")


class PaymentIntentResponse(BaseModel):
    """Response body of POST /api/create-payment-intent."""

    client_secret: str


class WebhookResponse(BaseModel):
    """Response body of POST /api/stripe/webhook."""

    received: bool = True
