"""
Translation of domain exceptions into HTTP responses.

Route handlers wrap service calls in translate_errors() instead of
repeating the same except clauses in every endpoint.
"""

import logging
from contextlib import contextmanager
from typing import Iterator

from fastapi import HTTPException, status

from shared.exceptions import (
    EcoBagError,
    NotFoundError,
    ValidationError,
    AuthenticationError,
    AuthorizationError,
)
from modules.billing.exceptions import (
    PaymentNotConfiguredError,
    PaymentFailedError,
    WebhookVerificationError,
)

logger = logging.getLogger(__name__)


def status_for(error: EcoBagError) -> int:
    """HTTP status code for a domain exception."""
    if isinstance(error, NotFoundError):
        return status.HTTP_404_NOT_FOUND
    if isinstance(error, (ValidationError, WebhookVerificationError)):
        return status.HTTP_400_BAD_REQUEST
    if isinstance(error, AuthenticationError):
        return status.HTTP_401_UNAUTHORIZED
    if isinstance(error, AuthorizationError):
        return status.HTTP_403_FORBIDDEN
    if isinstance(error, PaymentNotConfiguredError):
        return status.HTTP_503_SERVICE_UNAVAILABLE
    if isinstance(error, PaymentFailedError):
        return status.HTTP_502_BAD_GATEWAY
    return status.HTTP_500_INTERNAL_SERVER_ERROR


@contextmanager
def translate_errors(action: str) -> Iterator[None]:
    """
    Map exceptions raised inside the block to HTTPException.

    Args:
        action: What the handler was doing, used in the 500 message
            ("Failed to <action>").

    Usage:
        with translate_errors("create car"):
            return await storage.create_car(user.id, request)
    """
    try:
        yield
    except HTTPException:
        raise
    except EcoBagError as e:
        code = status_for(e)
        if code >= 500:
            logger.error("Failed to %s: %s (%s)", action, e.message, e.code)
            detail = e.message if code != 500 else f"Failed to {action}"
        else:
            logger.info("Rejected request to %s: %s (%s)", action, e.message, e.code)
            detail = e.message
        raise HTTPException(status_code=code, detail=detail) from e
    except Exception as e:
        logger.exception("Failed to %s", action)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to {action}",
        ) from e
