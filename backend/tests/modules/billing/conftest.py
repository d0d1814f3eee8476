"""
Billing test fixtures.

Webhook payloads are signed exactly the way Stripe signs them, so the
real stripe signature verification runs in tests.
"""

import hashlib
import hmac
import json
import time
from typing import Optional

import pytest

WEBHOOK_SECRET = "whsec_test_secret"


def sign_payload(payload: bytes, secret: str = WEBHOOK_SECRET, timestamp: Optional[int] = None) -> str:
    """Build a Stripe-Signature header the way Stripe does (HMAC-SHA256 over "t.payload")."""
    timestamp = int(time.time()) if timestamp is None else timestamp
    signed = f"{timestamp}.".encode() + payload
    signature = hmac.new(secret.encode(), signed, hashlib.sha256).hexdigest()
    return f"t={timestamp},v1={signature}"


def event_payload(
    event_type: str = "payment_intent.succeeded",
    user_id: Optional[str] = "user-123",
    customer: Optional[str] = "cus_123",
    event_id: str = "evt_1",
) -> bytes:
    metadata = {"user_id": user_id} if user_id else {}
    event = {
        "id": event_id,
        "object": "event",
        "type": event_type,
        "data": {
            "object": {
                "id": "pi_123",
                "object": "payment_intent",
                "amount": 299,
                "currency": "usd",
                "customer": customer,
                "metadata": metadata,
            }
        },
    }
    return json.dumps(event).encode()


@pytest.fixture
def sign():
    return sign_payload


@pytest.fixture
def make_event():
    return event_payload


@pytest.fixture
def webhook_secret() -> str:
    return WEBHOOK_SECRET
