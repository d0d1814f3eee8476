"""
In-memory storage repository.

Keeps every table in process memory. Used for local development
(STORAGE_BACKEND=memory) and by the test suite; it mimics the Supabase
repository's behavior, including the cascades declared in the migrations
and the foreign keys to users: rows for a user who has never signed in
are rejected with the same APIError PostgREST raises.
"""

from datetime import datetime, timezone
from decimal import Decimal
from itertools import count
from typing import Optional, Any

from postgrest.exceptions import APIError

from .models import (
    User,
    BagType,
    Car,
    InventoryRow,
    Location,
    BagUsage,
    FamilyMember,
    SocialShare,
)


class InMemoryStorageRepository:
    """Dict-backed implementation of IStorageRepository."""

    def __init__(self) -> None:
        self._users: dict[str, User] = {}
        self._bag_types: dict[int, BagType] = {}
        self._cars: dict[int, Car] = {}
        self._inventory: dict[tuple[int, int], InventoryRow] = {}
        self._locations: dict[int, Location] = {}
        self._bag_usage: dict[int, BagUsage] = {}
        self._family_members: dict[int, FamilyMember] = {}
        self._social_shares: dict[int, SocialShare] = {}
        self._ids = count(1)

    def _next_id(self) -> int:
        return next(self._ids)

    @staticmethod
    def _now() -> datetime:
        return datetime.now(timezone.utc)

    def _require_user(self, user_id: str) -> None:
        if user_id not in self._users:
            raise APIError({
                "code": "23503",
                "message": "insert or update violates foreign key constraint",
                "details": f"Key (user_id)=({user_id}) is not present in table \"users\".",
                "hint": None,
            })

    # users

    def get_user(self, user_id: str) -> Optional[User]:
        return self._users.get(user_id)

    def get_user_by_email(self, email: str) -> Optional[User]:
        for user in self._users.values():
            if user.email is not None and user.email.lower() == email.lower():
                return user
        return None

    def upsert_user(self, data: dict[str, Any]) -> User:
        existing = self._users.get(data["id"])
        if existing is None:
            user = User(**data)
        else:
            user = existing.model_copy(update={**data, "updated_at": self._now()})
        self._users[user.id] = user
        return user

    def update_user(self, user_id: str, data: dict[str, Any]) -> Optional[User]:
        existing = self._users.get(user_id)
        if existing is None:
            return None
        user = existing.model_copy(update={**data, "updated_at": self._now()})
        self._users[user_id] = user
        return user

    def grant_paid_access(self, user_id: str, customer_ref: Optional[str]) -> Optional[User]:
        existing = self._users.get(user_id)
        if existing is None or existing.has_paid_access:
            return None
        return self.update_user(
            user_id,
            {"has_paid_access": True, "stripe_customer_id": customer_ref},
        )

    # bag_types

    def insert_bag_type(self, data: dict[str, Any]) -> BagType:
        self._require_user(data["user_id"])
        bag_type = BagType(id=self._next_id(), **data)
        self._bag_types[bag_type.id] = bag_type
        return bag_type

    def get_bag_type(self, bag_type_id: int) -> Optional[BagType]:
        return self._bag_types.get(bag_type_id)

    def list_bag_types(self, user_id: str) -> list[BagType]:
        return [b for b in self._bag_types.values() if b.user_id == user_id]

    def delete_bag_type(self, bag_type_id: int) -> None:
        self._bag_types.pop(bag_type_id, None)
        for key in [k for k in self._inventory if k[1] == bag_type_id]:
            del self._inventory[key]

    # cars

    def insert_car(self, data: dict[str, Any]) -> Car:
        self._require_user(data["user_id"])
        car = Car(id=self._next_id(), **data)
        self._cars[car.id] = car
        return car

    def get_car(self, car_id: int) -> Optional[Car]:
        return self._cars.get(car_id)

    def list_cars(self, user_id: str) -> list[Car]:
        cars = [c for c in self._cars.values() if c.user_id == user_id]
        return sorted(cars, key=lambda c: (c.created_at, c.id), reverse=True)

    def delete_car(self, car_id: int) -> None:
        self._cars.pop(car_id, None)
        for key in [k for k in self._inventory if k[0] == car_id]:
            del self._inventory[key]
        for usage in list(self._bag_usage.values()):
            if usage.car_id == car_id:
                self._bag_usage[usage.id] = usage.model_copy(update={"car_id": None})

    # car_bag_inventory

    def list_inventory(self, car_ids: list[int]) -> list[InventoryRow]:
        wanted = set(car_ids)
        rows = [r for r in self._inventory.values() if r.car_id in wanted]
        return sorted(rows, key=lambda r: r.id)

    def get_inventory_row(self, car_id: int, bag_type_id: int) -> Optional[InventoryRow]:
        return self._inventory.get((car_id, bag_type_id))

    def upsert_inventory(self, data: dict[str, Any]) -> InventoryRow:
        key = (data["car_id"], data["bag_type_id"])
        existing = self._inventory.get(key)
        if existing is None:
            row = InventoryRow(id=self._next_id(), **data)
        else:
            row = existing.model_copy(update={**data, "updated_at": self._now()})
        self._inventory[key] = row
        return row

    def update_inventory_quantity(self, car_id: int, bag_type_id: int, quantity: int) -> None:
        existing = self._inventory.get((car_id, bag_type_id))
        if existing is not None:
            self._inventory[(car_id, bag_type_id)] = existing.model_copy(
                update={"quantity": quantity, "updated_at": self._now()}
            )

    # locations

    def insert_location(self, data: dict[str, Any]) -> Location:
        self._require_user(data["user_id"])
        location = Location(id=self._next_id(), **data)
        self._locations[location.id] = location
        return location

    def get_location(self, location_id: int) -> Optional[Location]:
        return self._locations.get(location_id)

    def list_locations(self, user_id: str) -> list[Location]:
        locations = [loc for loc in self._locations.values() if loc.user_id == user_id]
        return sorted(locations, key=lambda loc: (loc.created_at, loc.id), reverse=True)

    def update_location(self, location_id: int, data: dict[str, Any]) -> Location:
        location = self._locations[location_id].model_copy(update=data)
        self._locations[location_id] = location
        return location

    def delete_location(self, location_id: int) -> None:
        self._locations.pop(location_id, None)
        for usage in list(self._bag_usage.values()):
            if usage.location_id == location_id:
                self._bag_usage[usage.id] = usage.model_copy(update={"location_id": None})

    # bag_usage

    def insert_bag_usage(self, data: dict[str, Any]) -> BagUsage:
        self._require_user(data["user_id"])
        usage = BagUsage(id=self._next_id(), **data)
        self._bag_usage[usage.id] = usage
        return usage

    def list_bag_usage(self, user_id: str, limit: int) -> list[BagUsage]:
        records = [u for u in self._bag_usage.values() if u.user_id == user_id]
        records.sort(key=lambda u: (u.used_at, u.id), reverse=True)
        return records[:limit]

    def get_usage_totals(self, user_id: str) -> tuple[Decimal, int]:
        records = [u for u in self._bag_usage.values() if u.user_id == user_id]
        return (
            sum((u.savings_amount for u in records), Decimal("0.00")),
            sum(u.quantity for u in records),
        )

    def has_bag_usage(self, bag_type_id: int) -> bool:
        return any(u.bag_type_id == bag_type_id for u in self._bag_usage.values())

    # family_members

    def insert_family_member(self, data: dict[str, Any]) -> FamilyMember:
        self._require_user(data["inviter_id"])
        self._require_user(data["member_id"])
        member = FamilyMember(id=self._next_id(), **data)
        self._family_members[member.id] = member
        return member

    def get_family_member(self, invite_id: int) -> Optional[FamilyMember]:
        return self._family_members.get(invite_id)

    def find_family_member(self, inviter_id: str, member_id: str) -> Optional[FamilyMember]:
        for member in self._family_members.values():
            if member.inviter_id == inviter_id and member.member_id == member_id:
                return member
        return None

    def list_family_members(self, inviter_id: str) -> list[FamilyMember]:
        members = [m for m in self._family_members.values() if m.inviter_id == inviter_id]
        return sorted(members, key=lambda m: (m.invited_at, m.id), reverse=True)

    def list_family_invitations(self, member_id: str) -> list[FamilyMember]:
        members = [m for m in self._family_members.values() if m.member_id == member_id]
        return sorted(members, key=lambda m: (m.invited_at, m.id), reverse=True)

    def update_family_member(self, invite_id: int, data: dict[str, Any]) -> FamilyMember:
        member = self._family_members[invite_id].model_copy(update=data)
        self._family_members[invite_id] = member
        return member

    def delete_family_member(self, invite_id: int) -> None:
        self._family_members.pop(invite_id, None)

    # social_shares

    def insert_social_share(self, data: dict[str, Any]) -> SocialShare:
        self._require_user(data["user_id"])
        share = SocialShare(id=self._next_id(), **data)
        self._social_shares[share.id] = share
        return share

    def ping(self) -> None:
        return None
