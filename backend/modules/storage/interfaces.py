"""
Storage module interfaces.

IStorageService is the contract route handlers and the billing module
depend on. IStorageRepository is the persistence port the service is
built on; it has a Supabase implementation for production and an
in-memory one for development and tests.
"""

from decimal import Decimal
from typing import Protocol, Optional, Any, runtime_checkable

from .models import (
    User,
    BagType,
    Car,
    InventoryRow,
    Location,
    BagUsage,
    FamilyMember,
    SocialShare,
    SavingsSummary,
    FamilySavings,
    CreateBagTypeRequest,
    CreateCarRequest,
    CreateLocationRequest,
    RecordBagUsageRequest,
    SocialShareRequest,
)


@runtime_checkable
class IStorageService(Protocol):
    """
    Owner-scoped operations over all EcoBag entities.

    Every method takes the caller's user id first. Rows owned by other
    users are never returned and never modified.
    """

    # Users

    async def get_user(self, user_id: str) -> Optional[User]:
        """Get a user by ID, or None if the user has never signed in."""
        ...

    async def upsert_user(
        self,
        user_id: str,
        email: Optional[str] = None,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
        profile_image_url: Optional[str] = None,
    ) -> User:
        """
        Create the user or refresh their profile fields.

        Setup and payment flags are never changed by an upsert.
        """
        ...

    async def complete_setup(self, user_id: str) -> User:
        """
        Mark onboarding as finished.

        Raises:
            UserNotFoundError: If the user does not exist
        """
        ...

    async def grant_paid_access(self, user_id: str, customer_ref: Optional[str]) -> User:
        """
        Unlock Pro features for a user.

        Idempotent: once access is granted, later calls return the user
        unchanged and do not overwrite the stored customer reference.

        Raises:
            UserNotFoundError: If the user does not exist
        """
        ...

    # Bag types

    async def create_bag_type(self, user_id: str, request: CreateBagTypeRequest) -> BagType:
        """Create a bag type owned by the user."""
        ...

    async def list_bag_types(self, user_id: str) -> list[BagType]:
        """List the user's bag types."""
        ...

    async def delete_bag_type(self, user_id: str, bag_type_id: int) -> None:
        """
        Delete an owned bag type and its inventory rows.

        Raises:
            BagTypeNotFoundError: If the bag type is not the user's
            BagTypeInUseError: If usage records refer to it
        """
        ...

    # Cars

    async def create_car(self, user_id: str, request: CreateCarRequest) -> Car:
        """Create a car owned by the user."""
        ...

    async def list_cars(self, user_id: str) -> list[Car]:
        """List the user's cars, newest first."""
        ...

    async def delete_car(self, user_id: str, car_id: int) -> None:
        """Delete an owned car and its inventory. Raises CarNotFoundError otherwise."""
        ...

    # Inventory

    async def get_car_inventory(self, user_id: str, car_id: int) -> list[InventoryRow]:
        """Get inventory rows of an owned car."""
        ...

    async def set_car_inventory(
        self,
        user_id: str,
        car_id: int,
        bag_type_id: int,
        quantity: int,
        low_stock_threshold: int = 2,
    ) -> InventoryRow:
        """Insert or update the inventory row for (car_id, bag_type_id)."""
        ...

    async def list_low_stock(self, user_id: str) -> list[InventoryRow]:
        """Inventory rows across the user's cars that are at or below threshold."""
        ...

    # Locations

    async def create_location(self, user_id: str, request: CreateLocationRequest) -> Location:
        """Save a location. Raises InvalidReminderRadiusError for radius outside [50, 1000]."""
        ...

    async def list_locations(self, user_id: str) -> list[Location]:
        """List the user's locations, newest first."""
        ...

    async def toggle_location_active(self, user_id: str, location_id: int) -> Location:
        """Flip a location's reminder on or off."""
        ...

    async def delete_location(self, user_id: str, location_id: int) -> None:
        """Delete an owned location."""
        ...

    # Bag usage

    async def record_bag_usage(self, user_id: str, request: RecordBagUsageRequest) -> BagUsage:
        """
        Record bag usage and decrement the matching car inventory.

        The inventory quantity is floored at zero; excess usage is not rejected.
        """
        ...

    async def list_bag_usage(self, user_id: str, limit: int = 20) -> list[BagUsage]:
        """Most recent usage records first."""
        ...

    async def get_user_savings(self, user_id: str) -> SavingsSummary:
        """Sum of savings and bags over all of the user's usage records."""
        ...

    # Family

    async def invite_family_member(self, user_id: str, member_email: str) -> FamilyMember:
        """
        Invite another registered user by email. Requires paid access.

        Emails match case-insensitively. A declined invitation is replaced
        by a new pending one; pending or accepted ones are rejected.
        """
        ...

    async def list_family_members(self, user_id: str) -> list[FamilyMember]:
        """Invitations the user has sent. Requires paid access."""
        ...

    async def list_family_invitations(self, user_id: str) -> list[FamilyMember]:
        """Invitations addressed to the user."""
        ...

    async def accept_family_invite(self, user_id: str, invite_id: int) -> FamilyMember:
        """Accept a pending invitation addressed to the user."""
        ...

    async def decline_family_invite(self, user_id: str, invite_id: int) -> FamilyMember:
        """Decline a pending invitation addressed to the user."""
        ...

    async def get_family_savings(self, user_id: str) -> FamilySavings:
        """Family savings (currently the user's own savings only). Requires paid access."""
        ...

    # Social

    async def record_social_share(self, user_id: str, request: SocialShareRequest) -> SocialShare:
        """Append a social share record."""
        ...

    # Health

    async def ping(self) -> bool:
        """Check that the underlying store is reachable."""
        ...


@runtime_checkable
class IStorageRepository(Protocol):
    """
    Row-level persistence for the EcoBag tables.

    Repositories do NOT perform authorization checks or enforce business
    rules; the storage service is responsible for both.
    """

    # users
    def get_user(self, user_id: str) -> Optional[User]: ...
    def get_user_by_email(self, email: str) -> Optional[User]: ...
    def upsert_user(self, data: dict[str, Any]) -> User: ...
    def update_user(self, user_id: str, data: dict[str, Any]) -> Optional[User]: ...
    def grant_paid_access(self, user_id: str, customer_ref: Optional[str]) -> Optional[User]: ...

    # bag_types
    def insert_bag_type(self, data: dict[str, Any]) -> BagType: ...
    def get_bag_type(self, bag_type_id: int) -> Optional[BagType]: ...
    def list_bag_types(self, user_id: str) -> list[BagType]: ...
    def delete_bag_type(self, bag_type_id: int) -> None: ...

    # cars
    def insert_car(self, data: dict[str, Any]) -> Car: ...
    def get_car(self, car_id: int) -> Optional[Car]: ...
    def list_cars(self, user_id: str) -> list[Car]: ...
    def delete_car(self, car_id: int) -> None: ...

    # car_bag_inventory
    def list_inventory(self, car_ids: list[int]) -> list[InventoryRow]: ...
    def get_inventory_row(self, car_id: int, bag_type_id: int) -> Optional[InventoryRow]: ...
    def upsert_inventory(self, data: dict[str, Any]) -> InventoryRow: ...
    def update_inventory_quantity(self, car_id: int, bag_type_id: int, quantity: int) -> None: ...

    # locations
    def insert_location(self, data: dict[str, Any]) -> Location: ...
    def get_location(self, location_id: int) -> Optional[Location]: ...
    def list_locations(self, user_id: str) -> list[Location]: ...
    def update_location(self, location_id: int, data: dict[str, Any]) -> Location: ...
    def delete_location(self, location_id: int) -> None: ...

    # bag_usage
    def insert_bag_usage(self, data: dict[str, Any]) -> BagUsage: ...
    def list_bag_usage(self, user_id: str, limit: int) -> list[BagUsage]: ...
    def get_usage_totals(self, user_id: str) -> tuple[Decimal, int]:
        """(sum of savings_amount, sum of quantity), aggregated by the database."""
        ...
    def has_bag_usage(self, bag_type_id: int) -> bool: ...

    # family_members
    def insert_family_member(self, data: dict[str, Any]) -> FamilyMember: ...
    def get_family_member(self, invite_id: int) -> Optional[FamilyMember]: ...
    def find_family_member(self, inviter_id: str, member_id: str) -> Optional[FamilyMember]: ...
    def list_family_members(self, inviter_id: str) -> list[FamilyMember]: ...
    def list_family_invitations(self, member_id: str) -> list[FamilyMember]: ...
    def update_family_member(self, invite_id: int, data: dict[str, Any]) -> FamilyMember: ...
    def delete_family_member(self, invite_id: int) -> None: ...

    # social_shares
    def insert_social_share(self, data: dict[str, Any]) -> SocialShare: ...

    def ping(self) -> None: ...
