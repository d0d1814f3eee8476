"""
EcoBag API package.

Provides the FastAPI application for the EcoBag reusable-bag tracker.
"""

from .app import app, create_app

__all__ = ["app", "create_app"]
