"""Generic repository interface.

``IRepository[T]`` is the base contract every aggregate repository
extends.  Services depend on these abstractions and receive the Django ORM
implementations through their constructors, so unit tests can hand them
stubs instead.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, Generic, Optional, TypeVar

from django.db import models

T = TypeVar("T")


class IRepository(ABC, Generic[T]):
    """Base generic repository contract.

    ``T`` is the aggregate managed by the repository (``Event``,
    ``Product``, ``Order``).
    """

    @abstractmethod
    def get_by_id(self, id: str) -> Optional[T]:
        """Retrieve an aggregate by primary key, ``None`` when absent."""

    @abstractmethod
    def get_for_update(self, id: str) -> Optional[T]:
        """Retrieve an aggregate with a row-level lock (SELECT FOR UPDATE).

        Must be called inside ``transaction.atomic``.
        """

    @abstractmethod
    def list(self, filters: Optional[Dict[str, Any]] = None) -> models.QuerySet:
        """List aggregates with optional ORM look-ups."""

    @abstractmethod
    def save(self, entity: T) -> T:
        """Persist (create or update) an aggregate."""
