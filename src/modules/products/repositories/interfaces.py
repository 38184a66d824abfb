"""Product repository interface.

Extends ``IRepository[Product]`` with the look-ups the rest of the system
needs: resolving display names (orders and events reference products by
name) and soft deletion.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Iterable, List, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.products.models import Product


class IProductRepository(IRepository["Product"]):
    """Repository contract for the Product aggregate."""

    @abstractmethod
    def get_by_name(self, name: str) -> Optional[Product]:
        """Retrieve the oldest live product with exactly this display name."""

    @abstractmethod
    def list_by_names(self, names: Iterable[str]) -> List[Product]:
        """Live products whose name is in ``names`` (first match per name)."""

    @abstractmethod
    def delete(self, id: str) -> bool:
        """Soft-delete a product; ``False`` when it does not exist."""
