"""
Storage module data models.

Entity models mirror the rows of the eight EcoBag tables. Request models
describe what a client may send when creating or changing an entity; they
never carry an owner id, which always comes from the authenticated caller.
"""

from datetime import datetime, timezone
from decimal import Decimal, ROUND_HALF_UP
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field, computed_field, field_serializer, model_validator


CENTS = Decimal("0.01")

MIN_REMINDER_RADIUS = 50
MAX_REMINDER_RADIUS = 1000
DEFAULT_REMINDER_RADIUS = 300
DEFAULT_LOW_STOCK_THRESHOLD = 2


def to_cents(amount: Decimal) -> Decimal:
    """Quantize a money amount to cents."""
    return amount.quantize(CENTS, rounding=ROUND_HALF_UP)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def normalize_email(email: Optional[str]) -> Optional[str]:
    """Emails are stored and matched lowercased, as Supabase Auth does."""
    if email is None:
        return None
    return email.strip().lower()


class FamilyMemberStatus(str, Enum):
    """Family invitation status."""

    PENDING = "pending"      # Invitation sent, no answer yet
    ACCEPTED = "accepted"    # Member joined the family
    DECLINED = "declined"    # Member turned the invitation down


# -----------------------------------------------------------------------------
# Entities
# -----------------------------------------------------------------------------


class User(BaseModel):
    """An EcoBag account, keyed by the auth provider's user id."""

    id: str = Field(..., description="User ID (from the auth provider)")
    email: Optional[str] = Field(None, description="Email address")
    first_name: Optional[str] = Field(None, description="Given name")
    last_name: Optional[str] = Field(None, description="Family name")
    profile_image_url: Optional[str] = Field(None, description="Avatar URL")
    has_completed_setup: bool = Field(default=False, description="Onboarding finished")
    has_paid_access: bool = Field(default=False, description="Pro features unlocked")
    stripe_customer_id: Optional[str] = Field(
        None,
        description="Payment provider customer reference",
    )
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class BagType(BaseModel):
    """A kind of reusable bag and what each use of it saves."""

    id: int
    user_id: str
    name: str
    price_per_bag: Decimal = Field(..., ge=0, description="Savings per bag used")
    color: str
    icon: str
    created_at: datetime = Field(default_factory=utc_now)


class Car(BaseModel):
    """A car that carries bags."""

    id: int
    user_id: str
    name: str
    model: Optional[str] = None
    created_at: datetime = Field(default_factory=utc_now)


class InventoryRow(BaseModel):
    """How many bags of one type are in one car."""

    id: int
    car_id: int
    bag_type_id: int
    quantity: int = Field(..., ge=0)
    low_stock_threshold: int = Field(default=DEFAULT_LOW_STOCK_THRESHOLD, ge=0)
    updated_at: datetime = Field(default_factory=utc_now)

    @computed_field
    @property
    def is_low_stock(self) -> bool:
        return self.quantity <= self.low_stock_threshold


class Location(BaseModel):
    """A saved shopping location used for bag reminders."""

    id: int
    user_id: str
    name: str
    address: str
    latitude: Optional[Decimal] = None
    longitude: Optional[Decimal] = None
    is_active: bool = True
    reminder_radius: int = Field(
        default=DEFAULT_REMINDER_RADIUS,
        description="Reminder radius in meters",
    )
    created_at: datetime = Field(default_factory=utc_now)


class BagUsage(BaseModel):
    """A record of bags used on a shopping trip."""

    id: int
    user_id: str
    car_id: Optional[int] = None
    bag_type_id: int
    location_id: Optional[int] = None
    quantity: int = Field(..., gt=0)
    savings_amount: Decimal = Field(
        ...,
        description="quantity x price_per_bag at the time of recording",
    )
    used_at: datetime = Field(default_factory=utc_now)


class FamilyMember(BaseModel):
    """A family sharing invitation between two users."""

    id: int
    inviter_id: str
    member_id: str
    status: FamilyMemberStatus = FamilyMemberStatus.PENDING
    invited_at: datetime = Field(default_factory=utc_now)
    accepted_at: Optional[datetime] = None


class SocialShare(BaseModel):
    """A logged share of the user's savings."""

    id: int
    user_id: str
    platform: str
    content: str
    shared_at: datetime = Field(default_factory=utc_now)


# -----------------------------------------------------------------------------
# Aggregates
# -----------------------------------------------------------------------------


class SavingsSummary(BaseModel):
    """Running totals of a user's bag usage."""

    total_savings: Decimal = Field(default=Decimal("0.00"))
    total_bags_saved: int = Field(default=0)

    @field_serializer("total_savings")
    def _serialize_total(self, value: Decimal) -> float:
        return float(value)


class FamilySavings(SavingsSummary):
    """
    Savings for a family.

    Only the caller's own usage is counted for now; members is always empty.
    """

    members: list[dict] = Field(default_factory=list)


# -----------------------------------------------------------------------------
# Requests
# -----------------------------------------------------------------------------


class CreateBagTypeRequest(BaseModel):
    """Request to create a bag type."""

    name: str = Field(..., min_length=1, max_length=100)
    price_per_bag: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    color: str = Field(..., min_length=1, max_length=32)
    icon: str = Field(..., min_length=1, max_length=64)


class CreateCarRequest(BaseModel):
    """Request to create a car."""

    name: str = Field(..., min_length=1, max_length=100)
    model: Optional[str] = Field(None, max_length=100)


class SetInventoryRequest(BaseModel):
    """Request to set the bag count of one type in a car."""

    bag_type_id: int
    quantity: int = Field(..., ge=0)
    low_stock_threshold: int = Field(default=DEFAULT_LOW_STOCK_THRESHOLD, ge=0)


class CreateLocationRequest(BaseModel):
    """Request to save a shopping location."""

    name: str = Field(..., min_length=1, max_length=200)
    address: str = Field(..., min_length=1, max_length=500)
    latitude: Optional[Decimal] = Field(None, ge=-90, le=90)
    longitude: Optional[Decimal] = Field(None, ge=-180, le=180)
    is_active: bool = True
    reminder_radius: int = Field(
        default=DEFAULT_REMINDER_RADIUS,
        ge=MIN_REMINDER_RADIUS,
        le=MAX_REMINDER_RADIUS,
        description="Reminder radius in meters",
    )

    @model_validator(mode="after")
    def _coordinates_come_in_pairs(self) -> "CreateLocationRequest":
        if (self.latitude is None) != (self.longitude is None):
            raise ValueError("latitude and longitude must be provided together")
        return self


class RecordBagUsageRequest(BaseModel):
    """
    Request to record bag usage.

    The savings amount is not accepted from the client; it is computed
    from the bag type's price when the usage is recorded.
    """

    bag_type_id: int
    quantity: int = Field(..., gt=0, le=1000)
    car_id: Optional[int] = None
    location_id: Optional[int] = None


class InviteFamilyMemberRequest(BaseModel):
    """Request to invite another user to the family."""

    email: str = Field(..., min_length=3, max_length=320)


class SocialShareRequest(BaseModel):
    """Request to log a social share."""

    platform: str = Field(..., min_length=1, max_length=50)
    content: str = Field(..., min_length=1, max_length=5000)
