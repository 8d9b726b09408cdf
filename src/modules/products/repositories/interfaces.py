"""Product repository interfaces.

Extend ``IRepository`` with the look-ups required by the catalog:
natural-key resolution (title / slug), paginated listing with images,
and the *preload* merge used by partial updates.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Any, List, Mapping, Optional, Sequence

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.products.models import Product, ProductImage


class IProductRepository(IRepository["Product"]):
    """Repository contract for the Product aggregate."""

    @abstractmethod
    def save(
        self,
        entity: Product,
        images: Optional[Sequence[ProductImage]] = None,
    ) -> Product:
        """Persist a product.

        When ``images`` is given, the product's stored images are replaced
        by it in the same transaction.  The returned product has its
        images loaded.
        """

    @abstractmethod
    def paginate(self, limit: int, offset: int) -> List[Product]:
        """Return a page of products with their images loaded."""

    @abstractmethod
    def find_by_term(self, term: str) -> Optional[Product]:
        """Match ``UPPER(title) = UPPER(term)`` or ``slug = LOWER(term)``."""

    @abstractmethod
    def preload(self, id: str, changes: Mapping[str, Any]) -> Optional[Product]:
        """Return the stored product with *changes* merged in, unsaved.

        Returns ``None`` if no product exists with that ID.
        """


class IProductImageRepository(IRepository["ProductImage"]):
    """Repository contract for ProductImage records."""
