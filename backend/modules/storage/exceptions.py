"""
Storage module exceptions.

Raised by the storage service when a request breaks an entity invariant
or refers to a row the caller does not own. Rows owned by someone else
are reported as not found so their existence is not leaked.
"""

from typing import Optional

from shared.exceptions import (
    NotFoundError,
    ValidationError,
    AuthorizationError,
)


class UserNotFoundError(NotFoundError):
    """Raised when a user record does not exist."""

    def __init__(self, user_id: Optional[str] = None, email: Optional[str] = None):
        target = user_id or email or "unknown"
        details = {}
        if user_id:
            details["user_id"] = user_id
        if email:
            details["email"] = email
        super().__init__(
            f"User not found: {target}",
            code="USER_NOT_FOUND",
            details=details,
        )


class BagTypeNotFoundError(NotFoundError):
    """Raised when a bag type is missing or owned by someone else."""

    def __init__(self, bag_type_id: int):
        super().__init__(
            f"Bag type not found: {bag_type_id}",
            code="BAG_TYPE_NOT_FOUND",
            details={"bag_type_id": bag_type_id},
        )


class CarNotFoundError(NotFoundError):
    """Raised when a car is missing or owned by someone else."""

    def __init__(self, car_id: int):
        super().__init__(
            f"Car not found: {car_id}",
            code="CAR_NOT_FOUND",
            details={"car_id": car_id},
        )


class LocationNotFoundError(NotFoundError):
    """Raised when a location is missing or owned by someone else."""

    def __init__(self, location_id: int):
        super().__init__(
            f"Location not found: {location_id}",
            code="LOCATION_NOT_FOUND",
            details={"location_id": location_id},
        )


class FamilyInviteNotFoundError(NotFoundError):
    """Raised when a family invitation does not exist."""

    def __init__(self, invite_id: int):
        super().__init__(
            f"Family invitation not found: {invite_id}",
            code="FAMILY_INVITE_NOT_FOUND",
            details={"invite_id": invite_id},
        )


class InvalidReminderRadiusError(ValidationError):
    """Raised when a reminder radius is outside the allowed range."""

    def __init__(self, radius: int, minimum: int, maximum: int):
        super().__init__(
            f"Reminder radius must be between {minimum} and {maximum} meters, got {radius}",
            code="INVALID_REMINDER_RADIUS",
            details={"reminder_radius": radius, "min": minimum, "max": maximum},
        )


class InvalidQuantityError(ValidationError):
    """Raised when a bag quantity or threshold is out of range."""

    def __init__(self, field: str, value: int, reason: str):
        super().__init__(
            f"Invalid {field}: {value}. {reason}",
            code="INVALID_QUANTITY",
            details={"field": field, "value": value, "reason": reason},
        )


class InvalidPriceError(ValidationError):
    """Raised when a bag price is negative."""

    def __init__(self, price: object):
        super().__init__(
            f"Price per bag must not be negative, got {price}",
            code="INVALID_PRICE",
            details={"price_per_bag": str(price)},
        )


class InvalidFamilyInviteError(ValidationError):
    """Raised when an invitation cannot be created (self-invite, duplicate)."""

    def __init__(self, reason: str, member_id: Optional[str] = None):
        super().__init__(
            f"Cannot invite family member. {reason}",
            code="INVALID_FAMILY_INVITE",
            details={"member_id": member_id} if member_id else {},
        )


class InvalidStatusTransitionError(ValidationError):
    """Raised when an invitation is answered twice."""

    def __init__(self, invite_id: int, current: str, requested: str):
        super().__init__(
            f"Invitation {invite_id} is already {current}; cannot mark it {requested}",
            code="INVALID_STATUS_TRANSITION",
            details={"invite_id": invite_id, "current": current, "requested": requested},
        )


class NotInviteRecipientError(AuthorizationError):
    """Raised when someone other than the invitee answers an invitation."""

    def __init__(self, invite_id: int, user_id: str):
        super().__init__(
            f"Only the invited member can answer invitation {invite_id}",
            code="NOT_INVITE_RECIPIENT",
            details={"invite_id": invite_id, "user_id": user_id},
        )


class PaidAccessRequiredError(AuthorizationError):
    """Raised when a Pro feature is used without paid access."""

    def __init__(self, feature: str):
        super().__init__(
            f"{feature} requires EcoBag Pro",
            code="PAID_ACCESS_REQUIRED",
            details={"feature": feature},
        )


class BagTypeInUseError(ValidationError):
    """Raised when deleting a bag type that usage records still refer to."""

    def __init__(self, bag_type_id: int):
        super().__init__(
            f"Bag type {bag_type_id} has recorded usage and cannot be deleted",
            code="BAG_TYPE_IN_USE",
            details={"bag_type_id": bag_type_id},
        )
