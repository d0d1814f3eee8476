"""
JWT Authentication middleware.

Validates Supabase JWT tokens and extracts user information.
"""

import logging
from typing import Optional
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError
from datetime import datetime, timezone

from shared.config import Settings
from shared.exceptions import AuthenticationError
from shared.models import AuthenticatedUser
from ..dependencies import get_app_settings
from ..models.user import TokenPayload

logger = logging.getLogger(__name__)

# Bearer token extractor
bearer_scheme = HTTPBearer(auto_error=False)


class AuthError(HTTPException):
    """Authentication error with consistent format."""
    def __init__(self, detail: str):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )


def decode_token(token: str, settings: Settings) -> TokenPayload:
    """
    Decode and validate a Supabase JWT token.

    Args:
        token: The JWT token string
        settings: Settings holding the Supabase JWT secret

    Returns:
        TokenPayload with decoded claims

    Raises:
        AuthenticationError: If token is invalid or expired
    """
    if not settings.supabase_jwt_secret:
        logger.error("SUPABASE_JWT_SECRET is not set; rejecting all tokens")
        raise AuthenticationError("Server authentication not configured", code="AUTH_NOT_CONFIGURED")

    try:
        payload = jwt.decode(
            token,
            settings.supabase_jwt_secret,
            algorithms=["HS256"],
            audience="authenticated",
        )
        return TokenPayload(**payload)
    except jwt.ExpiredSignatureError:
        raise AuthenticationError("Token has expired", code="TOKEN_EXPIRED")
    except JWTError as e:
        logger.warning("Rejected token: %s", e)
        raise AuthenticationError(f"Invalid token: {str(e)}", code="INVALID_TOKEN")
    except (TypeError, ValueError) as e:
        # Signed correctly but missing the claims we rely on
        logger.warning("Rejected token with malformed claims: %s", e)
        raise AuthenticationError("Invalid token: malformed claims", code="INVALID_TOKEN")


def get_user_from_payload(payload: TokenPayload) -> AuthenticatedUser:
    """
    Convert JWT payload to AuthenticatedUser model.

    Profile fields come from Supabase's user_metadata, which holds
    whatever the identity provider sent (Google uses given_name,
    family_name and picture).

    Args:
        payload: Decoded JWT payload

    Returns:
        AuthenticatedUser instance
    """
    metadata = payload.user_metadata or {}
    return AuthenticatedUser(
        id=payload.sub,
        email=payload.email,
        email_verified=payload.email_confirmed_at is not None,
        first_name=metadata.get("first_name") or metadata.get("given_name"),
        last_name=metadata.get("last_name") or metadata.get("family_name"),
        profile_image_url=metadata.get("avatar_url") or metadata.get("picture"),
        last_sign_in=datetime.fromtimestamp(payload.iat, tz=timezone.utc),
    )


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    settings: Settings = Depends(get_app_settings),
) -> AuthenticatedUser:
    """
    Dependency that requires authentication.

    Use this for endpoints that require a logged-in user.

    Usage:
        @router.get("/protected")
        async def protected_route(user: AuthenticatedUser = Depends(get_current_user)):
            return {"user_id": user.id}
    """
    if credentials is None:
        raise AuthError("Missing authorization header")

    try:
        payload = decode_token(credentials.credentials, settings)
    except AuthenticationError as e:
        raise AuthError(e.message) from e

    try:
        return get_user_from_payload(payload)
    except ValueError as e:
        logger.warning("Rejected token for %s: %s", payload.sub, e)
        raise AuthError("Invalid token: malformed claims")

