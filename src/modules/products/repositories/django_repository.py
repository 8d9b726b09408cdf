"""Django ORM implementation of the Product repositories.

Satisfies ``IProductRepository`` / ``IProductImageRepository`` using
Django's QuerySet API.  Missing entities follow the Null Object pattern
(methods return ``None`` / ``False``); every database failure leaves the
repository as a ``StorageError`` so the Service Layer never handles
driver-specific exceptions.
"""

from __future__ import annotations

from typing import Any, List, Mapping, Optional, Sequence

import structlog

from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import Q, prefetch_related_objects

from modules.core.repositories.errors import storage_errors
from modules.products.models import Product, ProductImage, apply_product_fields
from modules.products.repositories.interfaces import (
    IProductImageRepository,
    IProductRepository,
)

logger = structlog.get_logger(__name__)


class ProductDjangoRepository(IProductRepository):
    """Concrete Product repository backed by Django ORM."""

    def build(self, data: Mapping[str, Any]) -> Product:
        """Create an unsaved product from the recognised keys of ``data``."""
        return apply_product_fields(Product(), data)

    def get_by_id(self, id: str) -> Optional[Product]:
        """Retrieve a product by primary key, images prefetched.

        Returns ``None`` for non-existent or invalid IDs.
        """
        with storage_errors():
            try:
                return (
                    Product.objects.prefetch_related("images").filter(id=id).first()
                )
            except (ValueError, ValidationError):
                return None

    def find_by_term(self, term: str) -> Optional[Product]:
        """Match the title case-insensitively or the slug in lower case.

        ``title__iexact`` runs as ``UPPER()`` on PostgreSQL but as ``LIKE`` on
        SQLite, which only folds ASCII letters.
        """
        with storage_errors():
            return (
                Product.objects.prefetch_related("images")
                .filter(Q(title__iexact=term) | Q(slug=term.lower()))
                .first()
            )

    def paginate(self, limit: int, offset: int) -> List[Product]:
        with storage_errors():
            queryset = Product.objects.prefetch_related("images").order_by(
                "created_at", "id"
            )
            return list(queryset[offset : offset + limit])

    def preload(self, id: str, changes: Mapping[str, Any]) -> Optional[Product]:
        with storage_errors():
            try:
                product = Product.objects.filter(id=id).first()
            except (ValueError, ValidationError):
                return None
        if product is None:
            return None
        return apply_product_fields(product, changes)

    def save(
        self,
        entity: Product,
        images: Optional[Sequence[ProductImage]] = None,
    ) -> Product:
        """Persist (create or update) a product and, optionally, its images."""
        with storage_errors():
            with transaction.atomic():
                entity.save()
                if images is not None:
                    ProductImage.objects.filter(product=entity).delete()
                    for image in images:
                        image.product = entity
                        image.save()
                entity.refresh_from_db()
                prefetch_related_objects([entity], "images")
        logger.info(
            "product.saved",
            product_id=str(entity.id),
            slug=entity.slug,
            image_count=len(entity.images.all()),
        )
        return entity

    def delete(self, id: str) -> bool:
        """Hard-delete a product by ID; images go with it (CASCADE).

        Returns ``True`` if a product was deleted, ``False`` if no product
        exists with the given ID.
        """
        with storage_errors():
            try:
                with transaction.atomic():
                    deleted, _ = Product.objects.filter(id=id).delete()
            except (ValueError, ValidationError):
                return False
        if not deleted:
            return False
        logger.info("product.deleted", product_id=str(id))
        return True


class ProductImageDjangoRepository(IProductImageRepository):
    """Concrete ProductImage repository backed by Django ORM.

    The catalog writes images through ``ProductDjangoRepository.save``; only
    ``build`` is used by ``ProductService``.
    """

    def build(self, data: Mapping[str, Any]) -> ProductImage:
        """Create an unsaved image; it is attached on the product's save."""
        return ProductImage(url=data["url"])

    def get_by_id(self, id: str) -> Optional[ProductImage]:
        with storage_errors():
            try:
                return ProductImage.objects.filter(id=id).first()
            except (ValueError, ValidationError):
                return None

    def save(self, entity: ProductImage) -> ProductImage:
        with storage_errors():
            entity.save()
        return entity

    def delete(self, id: str) -> bool:
        with storage_errors():
            try:
                deleted, _ = ProductImage.objects.filter(id=id).delete()
            except (ValueError, ValidationError):
                return False
        return bool(deleted)
