"""Product service layer (Use Cases).

Orchestrates the catalog use-cases for the Product aggregate, delegating
persistence to the injected ``IProductRepository`` and
``IProductImageRepository``.

Rules enforced here:
- Products resolve by UUID, or by natural key (title, case-insensitive,
  or slug).
- Images are replaced wholesale on update; omitting ``images`` clears them.
- Storage failures are classified into ``ProductAlreadyExists`` or an
  opaque ``ProductServiceError``; unresolved look-ups raise ``ProductNotFound``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List, NoReturn, Optional, Sequence

import structlog
from django.db import transaction

from modules.core.repositories.errors import StorageError
from modules.core.validators import is_uuid
from modules.products.dtos import ProductOutputDTO
from modules.products.exceptions import (
    ProductAlreadyExists,
    ProductNotFound,
    ProductServiceError,
)

if TYPE_CHECKING:
    from modules.products.dtos import (
        CreateProductDTO,
        PaginationDTO,
        UpdateProductDTO,
    )
    from modules.products.models import Product, ProductImage
    from modules.products.repositories.interfaces import (
        IProductImageRepository,
        IProductRepository,
    )


class ProductService:
    """Application service for Product use-cases.

    Receives both repositories and, optionally, a structlog logger via
    constructor injection (DIP).
    """

    def __init__(
        self,
        product_repository: IProductRepository,
        image_repository: IProductImageRepository,
        logger: Optional[structlog.stdlib.BoundLogger] = None,
    ) -> None:
        self._repo = product_repository
        self._image_repo = image_repository
        self._logger = logger or structlog.get_logger(__name__).bind(
            service="ProductService"
        )

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def create_product(self, dto: CreateProductDTO) -> ProductOutputDTO:
        """Create a product together with its images.

        Returns the saved fields with ``images`` as the URLs supplied.

        Raises:
            ProductAlreadyExists: title or slug already taken.
            ProductServiceError: any other storage failure.
        """
        try:
            product = self._repo.build(dto.product_fields())
            product = self._repo.save(product, images=self._build_images(dto.images))
        except StorageError as exc:
            self._handle_storage_error(exc)

        self._logger.info(
            "product.created", product_id=str(product.id), slug=product.slug
        )
        return ProductOutputDTO.from_entity(product, images=list(dto.images))

    @transaction.atomic
    def update_product(self, id: str, dto: UpdateProductDTO) -> Product:
        """Merge the supplied fields onto product ``id`` and replace its images.

        Omitting ``images`` (or sending an empty list) leaves the product
        without images.

        Raises:
            ProductNotFound: no product with that ID.
            ProductAlreadyExists: the new title or slug is already taken.
            ProductServiceError: any other storage failure.
        """
        try:
            product = self._repo.preload(id, dto.product_fields())
            if product is None:
                raise ProductNotFound(f"Product with id {id} not found")
            product = self._repo.save(product, images=self._build_images(dto.images))
        except StorageError as exc:
            self._handle_storage_error(exc)

        self._logger.info(
            "product.updated",
            product_id=str(product.id),
            image_count=len(product.images.all()),
        )
        return product

    @transaction.atomic
    def remove_product(self, id: str) -> Product:
        """Delete product ``id`` and return it as it was before deletion.

        Raises:
            ProductNotFound: nothing resolves for ``id``.
            ProductServiceError: any other storage failure.
        """
        product = self.find_one(id)
        try:
            deleted = self._repo.delete(id)
        except StorageError as exc:
            self._handle_storage_error(exc)
        if not deleted:
            raise ProductNotFound(f"Product with id {id} not found")

        self._logger.info("product.removed", product_id=str(product.id))
        return product

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_products(self, pagination: PaginationDTO) -> List[ProductOutputDTO]:
        """Return one page of products with images flattened to URLs."""
        try:
            products = self._repo.paginate(pagination.limit, pagination.offset)
        except StorageError as exc:
            self._handle_storage_error(exc)
        return [ProductOutputDTO.from_entity(product) for product in products]

    def find_one(self, term: str) -> Product:
        """Resolve a product by UUID, title (any case) or slug.

        Raises:
            ProductNotFound: nothing matches ``term``.
            ProductServiceError: any other storage failure.
        """
        try:
            if is_uuid(term):
                product = self._repo.get_by_id(term)
            else:
                product = self._repo.find_by_term(term)
        except StorageError as exc:
            self._handle_storage_error(exc)

        if product is None:
            raise ProductNotFound(f"Product with id {term} not found")
        return product

    def find_one_plain(self, term: str) -> ProductOutputDTO:
        """Same as ``find_one`` with images flattened to URLs."""
        return ProductOutputDTO.from_entity(self.find_one(term))

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _build_images(self, urls: Optional[Sequence[str]]) -> List[ProductImage]:
        return [self._image_repo.build({"url": url}) for url in urls or []]

    def _handle_storage_error(self, error: StorageError) -> NoReturn:
        """Raise ``ProductAlreadyExists`` or an opaque ``ProductServiceError``."""
        if error.is_unique_violation:
            raise ProductAlreadyExists(error.detail) from error
        self._logger.error(
            "product.unexpected_storage_error",
            error=str(error),
            kind=error.kind.value,
            exc_info=error,
        )
        raise ProductServiceError() from error
