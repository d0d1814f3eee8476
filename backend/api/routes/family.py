"""
Family sharing endpoints.

Sending invitations and viewing family savings are Pro features; any
user can answer an invitation addressed to them.
"""

from fastapi import APIRouter, Depends, status

from shared.models import AuthenticatedUser
from modules.storage.interfaces import IStorageService
from modules.storage.models import FamilyMember, FamilySavings, InviteFamilyMemberRequest
from ..dependencies import get_storage_service
from ..errors import translate_errors
from ..middleware.auth import get_current_user

router = APIRouter()


@router.get("/family/members", response_model=list[FamilyMember])
async def list_family_members(
    user: AuthenticatedUser = Depends(get_current_user),
    storage: IStorageService = Depends(get_storage_service),
) -> list[FamilyMember]:
    """Invitations the current user has sent, with their status."""
    with translate_errors("fetch family members"):
        return await storage.list_family_members(user.id)


@router.get("/family/invitations", response_model=list[FamilyMember])
async def list_family_invitations(
    user: AuthenticatedUser = Depends(get_current_user),
    storage: IStorageService = Depends(get_storage_service),
) -> list[FamilyMember]:
    """Invitations addressed to the current user."""
    with translate_errors("fetch family invitations"):
        return await storage.list_family_invitations(user.id)


@router.post("/family/invite", response_model=FamilyMember, status_code=status.HTTP_201_CREATED)
async def invite_family_member(
    request: InviteFamilyMemberRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    storage: IStorageService = Depends(get_storage_service),
) -> FamilyMember:
    """Invite a registered user by email."""
    with translate_errors("invite family member"):
        return await storage.invite_family_member(user.id, request.email)


@router.post("/family/invitations/{invite_id}/accept", response_model=FamilyMember)
async def accept_family_invite(
    invite_id: int,
    user: AuthenticatedUser = Depends(get_current_user),
    storage: IStorageService = Depends(get_storage_service),
) -> FamilyMember:
    with translate_errors("accept family invitation"):
        return await storage.accept_family_invite(user.id, invite_id)


@router.post("/family/invitations/{invite_id}/decline", response_model=FamilyMember)
async def decline_family_invite(
    invite_id: int,
    user: AuthenticatedUser = Depends(get_current_user),
    storage: IStorageService = Depends(get_storage_service),
) -> FamilyMember:
    with translate_errors("decline family invitation"):
        return await storage.decline_family_invite(user.id, invite_id)


@router.get("/family/savings", response_model=FamilySavings)
async def get_family_savings(
    user: AuthenticatedUser = Depends(get_current_user),
    storage: IStorageService = Depends(get_storage_service),
) -> FamilySavings:
    with translate_errors("fetch family savings"):
        return await storage.get_family_savings(user.id)
