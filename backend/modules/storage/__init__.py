"""
Storage module.

Owner-scoped persistence for users, bag types, cars, inventory, locations,
bag usage, family sharing and social shares.

Public API:
- IStorageService: Interface for storage operations
- IStorageRepository: Row-level persistence port
- StorageService: Service implementation with the business rules
- StorageRepository / InMemoryStorageRepository: Supabase and in-process backends
- Entity and request models, storage exceptions
"""

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
    SetInventoryRequest,
    CreateLocationRequest,
    RecordBagUsageRequest,
    InviteFamilyMemberRequest,
    SocialShareRequest,
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
from .repository import StorageRepository
from .memory import InMemoryStorageRepository
from .service import StorageService

__all__ = [
    # Interfaces
    "IStorageService",
    "IStorageRepository",
    # Models
    "User",
    "BagType",
    "Car",
    "InventoryRow",
    "Location",
    "BagUsage",
    "FamilyMember",
    "FamilyMemberStatus",
    "SocialShare",
    "SavingsSummary",
    "FamilySavings",
    "CreateBagTypeRequest",
    "CreateCarRequest",
    "SetInventoryRequest",
    "CreateLocationRequest",
    "RecordBagUsageRequest",
    "InviteFamilyMemberRequest",
    "SocialShareRequest",
    # Exceptions
    "UserNotFoundError",
    "BagTypeNotFoundError",
    "BagTypeInUseError",
    "CarNotFoundError",
    "LocationNotFoundError",
    "FamilyInviteNotFoundError",
    "InvalidReminderRadiusError",
    "InvalidQuantityError",
    "InvalidPriceError",
    "InvalidFamilyInviteError",
    "InvalidStatusTransitionError",
    "NotInviteRecipientError",
    "PaidAccessRequiredError",
    # Implementations
    "StorageRepository",
    "InMemoryStorageRepository",
    "StorageService",
]
