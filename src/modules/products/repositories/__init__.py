"""Product repositories package."""

from modules.products.repositories.django_repository import (
    ProductDjangoRepository,
    ProductImageDjangoRepository,
)
from modules.products.repositories.interfaces import (
    IProductImageRepository,
    IProductRepository,
)

__all__ = [
    "IProductImageRepository",
    "IProductRepository",
    "ProductDjangoRepository",
    "ProductImageDjangoRepository",
]
