"""
Token models for authentication.

The authenticated user itself lives in shared.models; this module only
describes the JWT claims Supabase issues.
"""

from pydantic import BaseModel, ConfigDict
from typing import Any, Optional


class TokenPayload(BaseModel):
    """JWT token payload structure."""
    model_config = ConfigDict(extra="ignore")  # Ignore extra fields from JWT

    sub: str  # User ID
    email: str
    email_confirmed_at: Optional[str] = None
    aud: str  # Audience
    exp: int  # Expiration timestamp
    iat: int  # Issued at timestamp
    user_metadata: Optional[dict[str, Any]] = None  # Provider profile claims
