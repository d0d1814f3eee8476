"""Social share logging endpoint."""

from fastapi import APIRouter, Depends, status

from shared.models import AuthenticatedUser
from modules.storage.interfaces import IStorageService
from modules.storage.models import SocialShare, SocialShareRequest
from ..dependencies import get_storage_service
from ..errors import translate_errors
from ..middleware.auth import get_current_user

router = APIRouter()


@router.post("/social-share", response_model=SocialShare, status_code=status.HTTP_201_CREATED)
async def record_social_share(
    request: SocialShareRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    storage: IStorageService = Depends(get_storage_service),
) -> SocialShare:
    """Log that the user shared their savings on a social platform."""
    with translate_errors("record social share"):
        return await storage.record_social_share(user.id, request)
