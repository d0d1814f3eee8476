"""
Dependency injection setup for FastAPI.

This module provides the "container" that wires together all module
implementations. Each module exposes its service through an interface,
and this file creates the concrete implementations.

The container is created by the application factory and stored on
app.state, so every application instance (and every test) gets its own
services. Route handlers reach it through the dependency functions below.
"""

import logging
from typing import TYPE_CHECKING

from fastapi import Request

from shared.config import Settings

# Type checking imports for interfaces (avoids circular imports)
if TYPE_CHECKING:
    from modules.storage.interfaces import IStorageService, IStorageRepository
    from modules.billing.interfaces import IBillingService, IPaymentGateway

logger = logging.getLogger(__name__)


class ServiceContainer:
    """
    Container for all service instances.

    This class manages the lifecycle of service instances and their
    dependencies. Services are created lazily on first access and cached
    for the lifetime of the container.

    A repository or payment gateway passed to the constructor is used as
    is; otherwise they are built from settings.
    """

    def __init__(
        self,
        settings: Settings,
        repository: "IStorageRepository | None" = None,
        gateway: "IPaymentGateway | None" = None,
    ) -> None:
        self._settings = settings
        self._repository = repository
        self._gateway = gateway
        self._storage_service: "IStorageService | None" = None
        self._billing_service: "IBillingService | None" = None

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def repository(self) -> "IStorageRepository":
        """Get the storage repository selected by settings.storage_backend."""
        if self._repository is None:
            if self._settings.storage_backend == "memory":
                from modules.storage.memory import InMemoryStorageRepository
                self._repository = InMemoryStorageRepository()
            else:
                from modules.storage.repository import StorageRepository
                from shared.database import get_supabase_client
                self._repository = StorageRepository(get_supabase_client(self._settings))
        return self._repository

    @property
    def storage(self) -> "IStorageService":
        """Get the storage service instance."""
        if self._storage_service is None:
            from modules.storage.service import StorageService
            self._storage_service = StorageService(self.repository)
        return self._storage_service

    @property
    def payments(self) -> "IPaymentGateway":
        """Get the payment gateway (unconfigured variant when Stripe keys are absent)."""
        if self._gateway is None:
            from modules.billing.service import create_payment_gateway
            self._gateway = create_payment_gateway(self._settings)
        return self._gateway

    @property
    def billing(self) -> "IBillingService":
        """Get the billing service instance."""
        if self._billing_service is None:
            from modules.billing.service import BillingService
            self._billing_service = BillingService(self.payments, self.storage)
        return self._billing_service

    async def startup(self) -> None:
        """Build services eagerly so configuration errors surface at boot."""
        billing = self.billing
        logger.info(
            "Services ready (storage=%s, payments=%s)",
            self._settings.storage_backend,
            "configured" if billing.configured else "not configured",
        )

    async def shutdown(self) -> None:
        """Drop cached services and the shared Supabase client."""
        from shared.database import reset_client_cache

        self.reset()
        reset_client_cache()
        logger.info("Services shut down")

    def reset(self) -> None:
        """
        Reset all cached services.

        Injected repositories and gateways are kept; everything built
        from settings is recreated on next access.
        """
        self._storage_service = None
        self._billing_service = None


# FastAPI dependency functions
# These are the functions that should be used in route Depends() calls


def get_container(request: Request) -> ServiceContainer:
    """FastAPI dependency for the application's service container."""
    return request.app.state.container


def get_app_settings(request: Request) -> Settings:
    """FastAPI dependency for the application's settings."""
    return get_container(request).settings


def get_storage_service(request: Request) -> "IStorageService":
    """FastAPI dependency for storage service."""
    return get_container(request).storage


def get_billing_service(request: Request) -> "IBillingService":
    """FastAPI dependency for billing service."""
    return get_container(request).billing
