"""
Storage service implementation.

The single data-access boundary of the backend. Every operation is scoped
to the calling user: rows are looked up through the repository and
checked for ownership before they are returned or changed.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from .interfaces import IStorageService, IStorageRepository
from .models import (
    User,
    BagType,
    Car,
    InventoryRow,
    Location,
    BagUsage,
    FamilyMember,
    FamilyMemberStatus,
    SocialShare,
    SavingsSummary,
    FamilySavings,
    CreateBagTypeRequest,
    CreateCarRequest,
    CreateLocationRequest,
    RecordBagUsageRequest,
    SocialShareRequest,
    MIN_REMINDER_RADIUS,
    MAX_REMINDER_RADIUS,
    DEFAULT_LOW_STOCK_THRESHOLD,
    to_cents,
    normalize_email,
)
from .exceptions import (
    UserNotFoundError,
    BagTypeNotFoundError,
    BagTypeInUseError,
    CarNotFoundError,
    LocationNotFoundError,
    FamilyInviteNotFoundError,
    InvalidReminderRadiusError,
    InvalidQuantityError,
    InvalidPriceError,
    InvalidFamilyInviteError,
    InvalidStatusTransitionError,
    NotInviteRecipientError,
    PaidAccessRequiredError,
)

logger = logging.getLogger(__name__)


class StorageService(IStorageService):
    """
    Storage service built on an IStorageRepository.

    Implements IStorageService with ownership checks and the entity
    invariants; the repository only moves rows.
    """

    def __init__(self, repository: IStorageRepository):
        self._repo = repository

    # -------------------------------------------------------------------------
    # Users
    # -------------------------------------------------------------------------

    async def get_user(self, user_id: str) -> Optional[User]:
        return self._repo.get_user(user_id)

    async def upsert_user(
        self,
        user_id: str,
        email: Optional[str] = None,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
        profile_image_url: Optional[str] = None,
    ) -> User:
        data = {
            "id": user_id,
            "email": normalize_email(email),
            "first_name": first_name,
            "last_name": last_name,
            "profile_image_url": profile_image_url,
        }
        return self._repo.upsert_user(data)

    async def complete_setup(self, user_id: str) -> User:
        user = self._repo.update_user(user_id, {"has_completed_setup": True})
        if user is None:
            raise UserNotFoundError(user_id)
        logger.info("User %s completed setup", user_id)
        return user

    async def grant_paid_access(self, user_id: str, customer_ref: Optional[str]) -> User:
        user = self._repo.grant_paid_access(user_id, customer_ref)
        if user is not None:
            logger.info("Granted paid access to user %s", user_id)
            return user

        # Nothing changed: either the user already paid or does not exist
        existing = self._repo.get_user(user_id)
        if existing is None:
            raise UserNotFoundError(user_id)
        logger.debug("User %s already has paid access, skipping", user_id)
        return existing

    # -------------------------------------------------------------------------
    # Bag types
    # -------------------------------------------------------------------------

    async def create_bag_type(self, user_id: str, request: CreateBagTypeRequest) -> BagType:
        if request.price_per_bag < 0:
            raise InvalidPriceError(request.price_per_bag)

        return self._repo.insert_bag_type({
            "user_id": user_id,
            "name": request.name,
            "price_per_bag": to_cents(request.price_per_bag),
            "color": request.color,
            "icon": request.icon,
        })

    async def list_bag_types(self, user_id: str) -> list[BagType]:
        return self._repo.list_bag_types(user_id)

    async def delete_bag_type(self, user_id: str, bag_type_id: int) -> None:
        self._get_owned_bag_type(user_id, bag_type_id)
        if self._repo.has_bag_usage(bag_type_id):
            raise BagTypeInUseError(bag_type_id)
        self._repo.delete_bag_type(bag_type_id)

    # -------------------------------------------------------------------------
    # Cars
    # -------------------------------------------------------------------------

    async def create_car(self, user_id: str, request: CreateCarRequest) -> Car:
        return self._repo.insert_car({
            "user_id": user_id,
            "name": request.name,
            "model": request.model,
        })

    async def list_cars(self, user_id: str) -> list[Car]:
        return self._repo.list_cars(user_id)

    async def delete_car(self, user_id: str, car_id: int) -> None:
        self._get_owned_car(user_id, car_id)
        self._repo.delete_car(car_id)

    # -------------------------------------------------------------------------
    # Inventory
    # -------------------------------------------------------------------------

    async def get_car_inventory(self, user_id: str, car_id: int) -> list[InventoryRow]:
        self._get_owned_car(user_id, car_id)
        return self._repo.list_inventory([car_id])

    async def set_car_inventory(
        self,
        user_id: str,
        car_id: int,
        bag_type_id: int,
        quantity: int,
        low_stock_threshold: int = DEFAULT_LOW_STOCK_THRESHOLD,
    ) -> InventoryRow:
        if quantity < 0:
            raise InvalidQuantityError("quantity", quantity, "Quantity must not be negative")
        if low_stock_threshold < 0:
            raise InvalidQuantityError(
                "low_stock_threshold",
                low_stock_threshold,
                "Threshold must not be negative",
            )

        self._get_owned_car(user_id, car_id)
        self._get_owned_bag_type(user_id, bag_type_id)

        return self._repo.upsert_inventory({
            "car_id": car_id,
            "bag_type_id": bag_type_id,
            "quantity": quantity,
            "low_stock_threshold": low_stock_threshold,
        })

    async def list_low_stock(self, user_id: str) -> list[InventoryRow]:
        car_ids = [car.id for car in self._repo.list_cars(user_id)]
        return [row for row in self._repo.list_inventory(car_ids) if row.is_low_stock]

    # -------------------------------------------------------------------------
    # Locations
    # -------------------------------------------------------------------------

    async def create_location(self, user_id: str, request: CreateLocationRequest) -> Location:
        radius = request.reminder_radius
        if radius < MIN_REMINDER_RADIUS or radius > MAX_REMINDER_RADIUS:
            raise InvalidReminderRadiusError(radius, MIN_REMINDER_RADIUS, MAX_REMINDER_RADIUS)

        return self._repo.insert_location({
            "user_id": user_id,
            "name": request.name,
            "address": request.address,
            "latitude": request.latitude,
            "longitude": request.longitude,
            "is_active": request.is_active,
            "reminder_radius": radius,
        })

    async def list_locations(self, user_id: str) -> list[Location]:
        return self._repo.list_locations(user_id)

    async def toggle_location_active(self, user_id: str, location_id: int) -> Location:
        location = self._get_owned_location(user_id, location_id)
        return self._repo.update_location(location_id, {"is_active": not location.is_active})

    async def delete_location(self, user_id: str, location_id: int) -> None:
        self._get_owned_location(user_id, location_id)
        self._repo.delete_location(location_id)

    # -------------------------------------------------------------------------
    # Bag usage
    # -------------------------------------------------------------------------

    async def record_bag_usage(self, user_id: str, request: RecordBagUsageRequest) -> BagUsage:
        if request.quantity <= 0:
            raise InvalidQuantityError("quantity", request.quantity, "Quantity must be positive")

        bag_type = self._get_owned_bag_type(user_id, request.bag_type_id)
        if request.car_id is not None:
            self._get_owned_car(user_id, request.car_id)
        if request.location_id is not None:
            self._get_owned_location(user_id, request.location_id)

        savings = to_cents(bag_type.price_per_bag * request.quantity)

        usage = self._repo.insert_bag_usage({
            "user_id": user_id,
            "car_id": request.car_id,
            "bag_type_id": request.bag_type_id,
            "location_id": request.location_id,
            "quantity": request.quantity,
            "savings_amount": savings,
        })
        logger.info(
            "Recorded %d bag(s) of type %d for user %s (saved %s)",
            request.quantity, request.bag_type_id, user_id, savings,
        )

        # Separate write: a failure here leaves the usage row in place
        if request.car_id is not None:
            row = self._repo.get_inventory_row(request.car_id, request.bag_type_id)
            if row is not None:
                new_quantity = max(0, row.quantity - request.quantity)
                self._repo.update_inventory_quantity(
                    request.car_id, request.bag_type_id, new_quantity
                )
                if new_quantity <= row.low_stock_threshold:
                    logger.debug(
                        "Car %d is low on bag type %d (%d left)",
                        request.car_id, request.bag_type_id, new_quantity,
                    )

        return usage

    async def list_bag_usage(self, user_id: str, limit: int = 20) -> list[BagUsage]:
        return self._repo.list_bag_usage(user_id, limit)

    async def get_user_savings(self, user_id: str) -> SavingsSummary:
        total_savings, total_bags = self._repo.get_usage_totals(user_id)
        return SavingsSummary(
            total_savings=to_cents(total_savings),
            total_bags_saved=total_bags,
        )

    # -------------------------------------------------------------------------
    # Family
    # -------------------------------------------------------------------------

    async def invite_family_member(self, user_id: str, member_email: str) -> FamilyMember:
        self._require_paid_access(user_id, "Family sharing")

        member = self._repo.get_user_by_email(normalize_email(member_email))
        if member is None:
            raise UserNotFoundError(email=member_email)
        if member.id == user_id:
            raise InvalidFamilyInviteError("You cannot invite yourself", member.id)

        existing = self._repo.find_family_member(user_id, member.id)
        if existing is not None and existing.status != FamilyMemberStatus.DECLINED:
            raise InvalidFamilyInviteError(
                f"Invitation already {existing.status.value}",
                member.id,
            )

        if existing is not None:
            # A declined invitation is final; re-inviting replaces it
            self._repo.delete_family_member(existing.id)

        invite = self._repo.insert_family_member({
            "inviter_id": user_id,
            "member_id": member.id,
            "status": FamilyMemberStatus.PENDING,
        })

        logger.info("User %s invited %s to their family", user_id, member.id)
        return invite

    async def list_family_members(self, user_id: str) -> list[FamilyMember]:
        self._require_paid_access(user_id, "Family sharing")
        return self._repo.list_family_members(user_id)

    async def list_family_invitations(self, user_id: str) -> list[FamilyMember]:
        return self._repo.list_family_invitations(user_id)

    async def accept_family_invite(self, user_id: str, invite_id: int) -> FamilyMember:
        return self._answer_invite(user_id, invite_id, FamilyMemberStatus.ACCEPTED)

    async def decline_family_invite(self, user_id: str, invite_id: int) -> FamilyMember:
        return self._answer_invite(user_id, invite_id, FamilyMemberStatus.DECLINED)

    async def get_family_savings(self, user_id: str) -> FamilySavings:
        self._require_paid_access(user_id, "Family savings")
        # TODO: aggregate accepted members' usage once family sharing rules are decided
        own = await self.get_user_savings(user_id)
        return FamilySavings(
            total_savings=own.total_savings,
            total_bags_saved=own.total_bags_saved,
            members=[],
        )

    # -------------------------------------------------------------------------
    # Social
    # -------------------------------------------------------------------------

    async def record_social_share(self, user_id: str, request: SocialShareRequest) -> SocialShare:
        return self._repo.insert_social_share({
            "user_id": user_id,
            "platform": request.platform,
            "content": request.content,
        })

    async def ping(self) -> bool:
        self._repo.ping()
        return True

    # -------------------------------------------------------------------------
    # Private helpers
    # -------------------------------------------------------------------------

    def _get_owned_bag_type(self, user_id: str, bag_type_id: int) -> BagType:
        bag_type = self._repo.get_bag_type(bag_type_id)
        if bag_type is None or bag_type.user_id != user_id:
            raise BagTypeNotFoundError(bag_type_id)
        return bag_type

    def _get_owned_car(self, user_id: str, car_id: int) -> Car:
        car = self._repo.get_car(car_id)
        if car is None or car.user_id != user_id:
            raise CarNotFoundError(car_id)
        return car

    def _get_owned_location(self, user_id: str, location_id: int) -> Location:
        location = self._repo.get_location(location_id)
        if location is None or location.user_id != user_id:
            raise LocationNotFoundError(location_id)
        return location

    def _require_paid_access(self, user_id: str, feature: str) -> User:
        user = self._repo.get_user(user_id)
        if user is None or not user.has_paid_access:
            raise PaidAccessRequiredError(feature)
        return user

    def _answer_invite(
        self,
        user_id: str,
        invite_id: int,
        status: FamilyMemberStatus,
    ) -> FamilyMember:
        invite = self._repo.get_family_member(invite_id)
        if invite is None:
            raise FamilyInviteNotFoundError(invite_id)
        if invite.member_id != user_id:
            raise NotInviteRecipientError(invite_id, user_id)
        if invite.status != FamilyMemberStatus.PENDING:
            raise InvalidStatusTransitionError(invite_id, invite.status.value, status.value)

        data: dict = {"status": status}
        if status == FamilyMemberStatus.ACCEPTED:
            data["accepted_at"] = datetime.now(timezone.utc)

        logger.info("User %s %s family invitation %d", user_id, status.value, invite_id)
        return self._repo.update_family_member(invite_id, data)
