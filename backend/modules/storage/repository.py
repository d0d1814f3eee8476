"""
Storage repository for Supabase.

Encapsulates all Supabase queries and data mapping for the EcoBag tables:
- users
- bag_types
- cars
- car_bag_inventory
- locations
- bag_usage
- family_members
- social_shares
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional, Any

from supabase import Client

from shared.repository import BaseRepository
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
    DEFAULT_REMINDER_RADIUS,
)


class StorageRepository(BaseRepository[User]):
    """
    Repository for EcoBag data access.

    All methods return Pydantic models mapped from database rows.

    Note: This repository does NOT perform authorization checks.
    The storage service is responsible for verifying ownership.
    """

    def __init__(self, db: Client) -> None:
        super().__init__(db)

    # -------------------------------------------------------------------------
    # Users
    # -------------------------------------------------------------------------

    def get_user(self, user_id: str) -> Optional[User]:
        result = self._db.table("users").select("*").eq("id", user_id).execute()
        if not result.data:
            return None
        return self._map_to_user(result.data[0])

    def get_user_by_email(self, email: str) -> Optional[User]:
        result = self._db.table("users").select("*").eq("email", email).limit(1).execute()
        if not result.data:
            return None
        return self._map_to_user(result.data[0])

    def upsert_user(self, data: dict[str, Any]) -> User:
        """
        Insert a user or update the given columns if the id already exists.

        Args:
            data: Column values; must include "id".
        """
        payload = {**data, "updated_at": self._now()}
        result = self._db.table("users").upsert(payload, on_conflict="id").execute()
        return self._map_to_user(result.data[0])

    def update_user(self, user_id: str, data: dict[str, Any]) -> Optional[User]:
        payload = {**data, "updated_at": self._now()}
        result = self._db.table("users").update(payload).eq("id", user_id).execute()
        if not result.data:
            return None
        return self._map_to_user(result.data[0])

    def grant_paid_access(self, user_id: str, customer_ref: Optional[str]) -> Optional[User]:
        """
        Flip has_paid_access for a user who does not have it yet.

        The filter on has_paid_access makes the update a no-op for users
        who already paid, so the first customer reference is kept.

        Returns:
            The updated user, or None if no row changed.
        """
        payload = {
            "has_paid_access": True,
            "stripe_customer_id": customer_ref,
            "updated_at": self._now(),
        }
        result = (
            self._db.table("users")
            .update(payload)
            .eq("id", user_id)
            .eq("has_paid_access", False)
            .execute()
        )
        if not result.data:
            return None
        return self._map_to_user(result.data[0])

    # -------------------------------------------------------------------------
    # Bag types
    # -------------------------------------------------------------------------

    def insert_bag_type(self, data: dict[str, Any]) -> BagType:
        payload = {**data, "price_per_bag": str(data["price_per_bag"])}
        result = self._db.table("bag_types").insert(payload).execute()
        return self._map_to_bag_type(result.data[0])

    def get_bag_type(self, bag_type_id: int) -> Optional[BagType]:
        result = self._db.table("bag_types").select("*").eq("id", bag_type_id).execute()
        if not result.data:
            return None
        return self._map_to_bag_type(result.data[0])

    def list_bag_types(self, user_id: str) -> list[BagType]:
        result = (
            self._db.table("bag_types")
            .select("*")
            .eq("user_id", user_id)
            .order("id")
            .execute()
        )
        return [self._map_to_bag_type(row) for row in result.data]

    def delete_bag_type(self, bag_type_id: int) -> None:
        self._db.table("bag_types").delete().eq("id", bag_type_id).execute()

    # -------------------------------------------------------------------------
    # Cars
    # -------------------------------------------------------------------------

    def insert_car(self, data: dict[str, Any]) -> Car:
        result = self._db.table("cars").insert(data).execute()
        return self._map_to_car(result.data[0])

    def get_car(self, car_id: int) -> Optional[Car]:
        result = self._db.table("cars").select("*").eq("id", car_id).execute()
        if not result.data:
            return None
        return self._map_to_car(result.data[0])

    def list_cars(self, user_id: str) -> list[Car]:
        result = (
            self._db.table("cars")
            .select("*")
            .eq("user_id", user_id)
            .order("created_at", desc=True)
            .execute()
        )
        return [self._map_to_car(row) for row in result.data]

    def delete_car(self, car_id: int) -> None:
        """Delete a car. Inventory rows are removed via CASCADE."""
        self._db.table("cars").delete().eq("id", car_id).execute()

    # -------------------------------------------------------------------------
    # Inventory
    # -------------------------------------------------------------------------

    def list_inventory(self, car_ids: list[int]) -> list[InventoryRow]:
        if not car_ids:
            return []
        result = (
            self._db.table("car_bag_inventory")
            .select("*")
            .in_("car_id", car_ids)
            .order("id")
            .execute()
        )
        return [self._map_to_inventory(row) for row in result.data]

    def get_inventory_row(self, car_id: int, bag_type_id: int) -> Optional[InventoryRow]:
        result = (
            self._db.table("car_bag_inventory")
            .select("*")
            .eq("car_id", car_id)
            .eq("bag_type_id", bag_type_id)
            .execute()
        )
        if not result.data:
            return None
        return self._map_to_inventory(result.data[0])

    def upsert_inventory(self, data: dict[str, Any]) -> InventoryRow:
        """Insert or update the row keyed by (car_id, bag_type_id)."""
        payload = {**data, "updated_at": self._now()}
        result = (
            self._db.table("car_bag_inventory")
            .upsert(payload, on_conflict="car_id,bag_type_id")
            .execute()
        )
        return self._map_to_inventory(result.data[0])

    def update_inventory_quantity(self, car_id: int, bag_type_id: int, quantity: int) -> None:
        (
            self._db.table("car_bag_inventory")
            .update({"quantity": quantity, "updated_at": self._now()})
            .eq("car_id", car_id)
            .eq("bag_type_id", bag_type_id)
            .execute()
        )

    # -------------------------------------------------------------------------
    # Locations
    # -------------------------------------------------------------------------

    def insert_location(self, data: dict[str, Any]) -> Location:
        payload = dict(data)
        for key in ("latitude", "longitude"):
            if payload.get(key) is not None:
                payload[key] = str(payload[key])
        result = self._db.table("locations").insert(payload).execute()
        return self._map_to_location(result.data[0])

    def get_location(self, location_id: int) -> Optional[Location]:
        result = self._db.table("locations").select("*").eq("id", location_id).execute()
        if not result.data:
            return None
        return self._map_to_location(result.data[0])

    def list_locations(self, user_id: str) -> list[Location]:
        result = (
            self._db.table("locations")
            .select("*")
            .eq("user_id", user_id)
            .order("created_at", desc=True)
            .execute()
        )
        return [self._map_to_location(row) for row in result.data]

    def update_location(self, location_id: int, data: dict[str, Any]) -> Location:
        result = self._db.table("locations").update(data).eq("id", location_id).execute()
        return self._map_to_location(result.data[0])

    def delete_location(self, location_id: int) -> None:
        self._db.table("locations").delete().eq("id", location_id).execute()

    # -------------------------------------------------------------------------
    # Bag usage
    # -------------------------------------------------------------------------

    def insert_bag_usage(self, data: dict[str, Any]) -> BagUsage:
        payload = {**data, "savings_amount": str(data["savings_amount"])}
        result = self._db.table("bag_usage").insert(payload).execute()
        return self._map_to_bag_usage(result.data[0])

    def list_bag_usage(self, user_id: str, limit: int) -> list[BagUsage]:
        result = (
            self._db.table("bag_usage")
            .select("*")
            .eq("user_id", user_id)
            .order("used_at", desc=True)
            .limit(limit)
            .execute()
        )
        return [self._map_to_bag_usage(row) for row in result.data]

    def get_usage_totals(self, user_id: str) -> tuple[Decimal, int]:
        """
        Savings and bag totals over all of the user's usage rows.

        Summed by the get_usage_totals SQL function so the result does not
        depend on PostgREST's row limit.
        """
        result = self._db.rpc("get_usage_totals", {"p_user_id": user_id}).execute()
        rows = result.data if isinstance(result.data, list) else [result.data]
        if not rows or rows[0] is None:
            return Decimal("0.00"), 0
        row = rows[0]
        return (
            self._decimal(row.get("total_savings")) or Decimal("0.00"),
            int(row.get("total_bags") or 0),
        )

    def has_bag_usage(self, bag_type_id: int) -> bool:
        result = (
            self._db.table("bag_usage")
            .select("id")
            .eq("bag_type_id", bag_type_id)
            .limit(1)
            .execute()
        )
        return bool(result.data)

    # -------------------------------------------------------------------------
    # Family
    # -------------------------------------------------------------------------

    def insert_family_member(self, data: dict[str, Any]) -> FamilyMember:
        result = self._db.table("family_members").insert(self._family_payload(data)).execute()
        return self._map_to_family_member(result.data[0])

    def get_family_member(self, invite_id: int) -> Optional[FamilyMember]:
        result = self._db.table("family_members").select("*").eq("id", invite_id).execute()
        if not result.data:
            return None
        return self._map_to_family_member(result.data[0])

    def find_family_member(self, inviter_id: str, member_id: str) -> Optional[FamilyMember]:
        result = (
            self._db.table("family_members")
            .select("*")
            .eq("inviter_id", inviter_id)
            .eq("member_id", member_id)
            .execute()
        )
        if not result.data:
            return None
        return self._map_to_family_member(result.data[0])

    def list_family_members(self, inviter_id: str) -> list[FamilyMember]:
        result = (
            self._db.table("family_members")
            .select("*")
            .eq("inviter_id", inviter_id)
            .order("invited_at", desc=True)
            .execute()
        )
        return [self._map_to_family_member(row) for row in result.data]

    def list_family_invitations(self, member_id: str) -> list[FamilyMember]:
        result = (
            self._db.table("family_members")
            .select("*")
            .eq("member_id", member_id)
            .order("invited_at", desc=True)
            .execute()
        )
        return [self._map_to_family_member(row) for row in result.data]

    def update_family_member(self, invite_id: int, data: dict[str, Any]) -> FamilyMember:
        payload = self._family_payload(data)
        result = self._db.table("family_members").update(payload).eq("id", invite_id).execute()
        return self._map_to_family_member(result.data[0])

    def delete_family_member(self, invite_id: int) -> None:
        self._db.table("family_members").delete().eq("id", invite_id).execute()

    # -------------------------------------------------------------------------
    # Social shares
    # -------------------------------------------------------------------------

    def insert_social_share(self, data: dict[str, Any]) -> SocialShare:
        result = self._db.table("social_shares").insert(data).execute()
        return self._map_to_social_share(result.data[0])

    def ping(self) -> None:
        """Run a trivial query; raises if the database is unreachable."""
        self._db.table("users").select("id").limit(1).execute()

    # -------------------------------------------------------------------------
    # Private mapping methods
    # -------------------------------------------------------------------------

    @staticmethod
    def _family_payload(data: dict[str, Any]) -> dict[str, Any]:
        payload = dict(data)
        if isinstance(payload.get("status"), FamilyMemberStatus):
            payload["status"] = payload["status"].value
        for key in ("invited_at", "accepted_at"):
            if isinstance(payload.get(key), datetime):
                payload[key] = payload[key].isoformat()
        return payload

    def _map_to_user(self, data: dict[str, Any]) -> User:
        return User(
            id=str(data["id"]),
            email=data.get("email"),
            first_name=data.get("first_name"),
            last_name=data.get("last_name"),
            profile_image_url=data.get("profile_image_url"),
            has_completed_setup=bool(data.get("has_completed_setup")),
            has_paid_access=bool(data.get("has_paid_access")),
            stripe_customer_id=data.get("stripe_customer_id"),
            created_at=data["created_at"],
            updated_at=data["updated_at"],
        )

    def _map_to_bag_type(self, data: dict[str, Any]) -> BagType:
        return BagType(
            id=data["id"],
            user_id=str(data["user_id"]),
            name=data["name"],
            price_per_bag=self._decimal(data["price_per_bag"]),
            color=data["color"],
            icon=data["icon"],
            created_at=data["created_at"],
        )

    def _map_to_car(self, data: dict[str, Any]) -> Car:
        return Car(
            id=data["id"],
            user_id=str(data["user_id"]),
            name=data["name"],
            model=data.get("model"),
            created_at=data["created_at"],
        )

    def _map_to_inventory(self, data: dict[str, Any]) -> InventoryRow:
        return InventoryRow(
            id=data["id"],
            car_id=data["car_id"],
            bag_type_id=data["bag_type_id"],
            quantity=data["quantity"],
            low_stock_threshold=data["low_stock_threshold"],
            updated_at=data["updated_at"],
        )

    def _map_to_location(self, data: dict[str, Any]) -> Location:
        return Location(
            id=data["id"],
            user_id=str(data["user_id"]),
            name=data["name"],
            address=data["address"],
            latitude=self._decimal(data.get("latitude")),
            longitude=self._decimal(data.get("longitude")),
            is_active=data.get("is_active", True),
            reminder_radius=data.get("reminder_radius", DEFAULT_REMINDER_RADIUS),
            created_at=data["created_at"],
        )

    def _map_to_bag_usage(self, data: dict[str, Any]) -> BagUsage:
        return BagUsage(
            id=data["id"],
            user_id=str(data["user_id"]),
            car_id=data.get("car_id"),
            bag_type_id=data["bag_type_id"],
            location_id=data.get("location_id"),
            quantity=data["quantity"],
            savings_amount=self._decimal(data["savings_amount"]),
            used_at=data["used_at"],
        )

    def _map_to_family_member(self, data: dict[str, Any]) -> FamilyMember:
        return FamilyMember(
            id=data["id"],
            inviter_id=str(data["inviter_id"]),
            member_id=str(data["member_id"]),
            status=FamilyMemberStatus(data["status"]),
            invited_at=data["invited_at"],
            accepted_at=data.get("accepted_at"),
        )

    def _map_to_social_share(self, data: dict[str, Any]) -> SocialShare:
        return SocialShare(
            id=data["id"],
            user_id=str(data["user_id"]),
            platform=data["platform"],
            content=data["content"],
            shared_at=data["shared_at"],
        )

