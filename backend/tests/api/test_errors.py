"""Tests for domain exception translation."""

import pytest
from fastapi import HTTPException

from api.errors import status_for, translate_errors
from shared.exceptions import EcoBagError, ExternalServiceError, AuthenticationError
from modules.storage.exceptions import (
    CarNotFoundError,
    InvalidQuantityError,
    PaidAccessRequiredError,
    BagTypeInUseError,
)
from modules.billing.exceptions import (
    PaymentNotConfiguredError,
    PaymentFailedError,
    WebhookVerificationError,
)


class TestStatusFor:

    @pytest.mark.parametrize("error, expected", [
        (CarNotFoundError(1), 404),
        (InvalidQuantityError("quantity", -1, "Quantity must not be negative"), 400),
        (BagTypeInUseError(1), 400),
        (WebhookVerificationError(), 400),
        (AuthenticationError("Token has expired"), 401),
        (PaidAccessRequiredError("Family sharing"), 403),
        (PaymentNotConfiguredError(), 503),
        (PaymentFailedError("Failed to create payment intent"), 502),
        (ExternalServiceError("Supabase down", service="supabase"), 500),
        (EcoBagError("Something odd"), 500),
    ])
    def test_mapping(self, error, expected):
        assert status_for(error) == expected


class TestTranslateErrors:

    def test_passes_through_on_success(self):
        with translate_errors("do nothing"):
            value = 1
        assert value == 1

    def test_domain_error_keeps_message(self):
        with pytest.raises(HTTPException) as exc_info:
            with translate_errors("delete car"):
                raise CarNotFoundError(7)

        assert exc_info.value.status_code == 404
        assert exc_info.value.detail == CarNotFoundError(7).message

    def test_unexpected_error_is_500(self, caplog):
        with pytest.raises(HTTPException) as exc_info:
            with translate_errors("create car"):
                raise RuntimeError("connection reset")

        assert exc_info.value.status_code == 500
        assert exc_info.value.detail == "Failed to create car"
        assert "Failed to create car" in caplog.text

    def test_internal_domain_error_hides_message(self):
        with pytest.raises(HTTPException) as exc_info:
            with translate_errors("fetch savings"):
                raise EcoBagError("row 42 is corrupt")

        assert exc_info.value.detail == "Failed to fetch savings"

    def test_http_exception_untouched(self):
        with pytest.raises(HTTPException) as exc_info:
            with translate_errors("anything"):
                raise HTTPException(status_code=418, detail="teapot")

        assert exc_info.value.status_code == 418


class TestRouteErrors:

    def test_repository_failure_is_500(self, client, auth_headers, memory_repository, monkeypatch):
        def boom(user_id):
            raise RuntimeError("db gone")

        monkeypatch.setattr(memory_repository, "list_cars", boom)

        response = client.get("/api/cars", headers=auth_headers)

        assert response.status_code == 500
        assert response.json() == {"detail": "Failed to fetch cars"}
