"""
Base repository class for database access.

Provides a common abstraction layer for all repositories, encapsulating
Supabase client access and providing shared utilities for data operations.
"""

from datetime import datetime, timezone
from decimal import Decimal
from typing import TypeVar, Generic, Any, Optional
from supabase import Client


T = TypeVar("T")


class BaseRepository(Generic[T]):
    """
    Base class for all repositories.

    Provides common functionality for database operations:
    - Supabase client access via self._db
    - Generic type parameter for model type hints
    - Helpers for the column types PostgREST returns as strings

    Subclasses should implement domain-specific data access methods
    and handle dict-to-Pydantic model mapping internally.

    Example:
        class CarRepository(BaseRepository[Car]):
            def get_car(self, car_id: int) -> Optional[Car]:
                result = self._db.table("cars").select("*").eq("id", car_id).execute()
                if not result.data:
                    return None
                return self._map_to_car(result.data[0])
    """

    def __init__(self, db: Client) -> None:
        """
        Initialize the repository with a Supabase client.

        Args:
            db: Supabase client instance for database operations.
        """
        self._db = db

    @staticmethod
    def _now() -> str:
        """Current UTC time as an ISO string for timestamp columns."""
        return datetime.now(timezone.utc).isoformat()

    @staticmethod
    def _decimal(value: Any) -> Optional[Decimal]:
        """Convert a numeric/decimal column value to Decimal."""
        if value is None:
            return None
        return Decimal(str(value))
