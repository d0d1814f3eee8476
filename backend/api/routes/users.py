"""
User-related endpoints.

Provides the current user's profile and onboarding state. The profile row
is created on first sign-in from the token claims.
"""

from fastapi import APIRouter, Depends

from shared.models import AuthenticatedUser
from modules.storage.interfaces import IStorageService
from modules.storage.models import User
from ..dependencies import get_storage_service
from ..errors import translate_errors
from ..middleware.auth import get_current_user

router = APIRouter()


@router.get("/auth/user", response_model=User)
async def get_current_user_profile(
    user: AuthenticatedUser = Depends(get_current_user),
    storage: IStorageService = Depends(get_storage_service),
) -> User:
    """
    Get the current user's profile.

    Creates the user on first call and refreshes profile fields from the
    token afterwards. Setup and payment flags are left alone.
    """
    with translate_errors("fetch user"):
        return await storage.upsert_user(
            user.id,
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
            profile_image_url=user.profile_image_url,
        )


@router.post("/setup/complete", response_model=User)
async def complete_setup(
    user: AuthenticatedUser = Depends(get_current_user),
    storage: IStorageService = Depends(get_storage_service),
) -> User:
    """Mark onboarding as finished for the current user."""
    with translate_errors("complete setup"):
        return await storage.complete_setup(user.id)
