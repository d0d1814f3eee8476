"""API models package."""

from .user import TokenPayload

__all__ = [
    "TokenPayload",
]
