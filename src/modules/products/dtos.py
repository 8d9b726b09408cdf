"""Product DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
These are the contracts between the API layer (DRF Views)
and the Service layer.  DTOs are immutable (``frozen=True``).

- ``CreateProductDTO``: input for product creation.
- ``UpdateProductDTO``: input for partial product updates.
- ``PaginationDTO``: ``limit`` / ``offset`` window for listings.
- ``ProductOutputDTO``: product fields with images flattened to URLs.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Dict, List, Literal, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

if TYPE_CHECKING:
    from modules.products.models import Product

GenderLiteral = Literal["men", "women", "kid", "unisex"]


# ---------------------------------------------------------------------------
# Input DTOs
# ---------------------------------------------------------------------------


class CreateProductDTO(BaseModel):
    """Immutable DTO for product creation requests.

    Validates:
    - ``title`` is a non-empty string.
    - ``price`` and ``stock`` are non-negative.
    - ``gender`` is one of men / women / kid / unisex.
    """

    model_config = ConfigDict(frozen=True)

    title: str
    price: Optional[Decimal] = None
    description: Optional[str] = None
    slug: Optional[str] = None
    stock: Optional[int] = None
    sizes: List[str]
    gender: GenderLiteral
    tags: List[str] = Field(default_factory=list)
    images: List[str] = Field(default_factory=list)

    @field_validator("title")
    @classmethod
    def title_must_not_be_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Title must not be empty.")
        return v.strip()

    @field_validator("price")
    @classmethod
    def price_must_be_non_negative(cls, v: Decimal | None) -> Decimal | None:
        if v is not None and v < 0:
            raise ValueError("Price cannot be negative.")
        return v

    @field_validator("stock")
    @classmethod
    def stock_must_be_non_negative(cls, v: int | None) -> int | None:
        if v is not None and v < 0:
            raise ValueError("Stock cannot be negative.")
        return v

    def product_fields(self) -> Dict[str, Any]:
        """Column values to build the product from (no ``images``)."""
        return self.model_dump(exclude={"images"}, exclude_none=True)


class UpdateProductDTO(BaseModel):
    """Immutable DTO for product update requests.

    All fields are optional; only fields explicitly supplied by the
    caller are merged onto the stored product.  ``images`` omitted (or
    empty) leaves the product without images after the update.
    """

    model_config = ConfigDict(frozen=True)

    title: Optional[str] = None
    price: Optional[Decimal] = None
    description: Optional[str] = None
    slug: Optional[str] = None
    stock: Optional[int] = None
    sizes: Optional[List[str]] = None
    gender: Optional[GenderLiteral] = None
    tags: Optional[List[str]] = None
    images: Optional[List[str]] = None

    @field_validator("title")
    @classmethod
    def title_must_not_be_empty(cls, v: str | None) -> str | None:
        if v is not None and not v.strip():
            raise ValueError("Title must not be empty.")
        return v.strip() if v is not None else v

    @field_validator("price")
    @classmethod
    def price_must_be_non_negative(cls, v: Decimal | None) -> Decimal | None:
        if v is not None and v < 0:
            raise ValueError("Price cannot be negative.")
        return v

    @field_validator("stock")
    @classmethod
    def stock_must_be_non_negative(cls, v: int | None) -> int | None:
        if v is not None and v < 0:
            raise ValueError("Stock cannot be negative.")
        return v

    def product_fields(self) -> Dict[str, Any]:
        """Only the fields the caller actually supplied (no ``images``).

        An explicit ``null`` is honoured for ``description`` only; the other
        columns are not nullable.
        """
        supplied = self.model_dump(include=self.model_fields_set - {"images"})
        return {
            name: value
            for name, value in supplied.items()
            if value is not None or name == "description"
        }


class PaginationDTO(BaseModel):
    """Immutable ``limit`` / ``offset`` window (defaults: 10 / 0)."""

    model_config = ConfigDict(frozen=True)

    limit: int = 10
    offset: int = 0

    @field_validator("limit")
    @classmethod
    def limit_must_be_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("Limit must be greater than zero.")
        return v

    @field_validator("offset")
    @classmethod
    def offset_must_be_non_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError("Offset cannot be negative.")
        return v


# ---------------------------------------------------------------------------
# Output DTO
# ---------------------------------------------------------------------------


class ProductOutputDTO(BaseModel):
    """Immutable DTO for product API responses (images as URL strings)."""

    model_config = ConfigDict(frozen=True)

    id: UUID
    title: str
    price: Decimal
    description: Optional[str]
    slug: str
    stock: int
    sizes: List[str]
    gender: str
    tags: List[str]
    images: List[str]
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(
        cls, product: Product, images: Optional[List[str]] = None
    ) -> ProductOutputDTO:
        """Build an output DTO from a Product model instance.

        ``images`` overrides the URLs read from ``product.images``.
        """
        if images is None:
            images = [image.url for image in product.images.all()]
        return cls(
            id=product.id,
            title=product.title,
            price=product.price,
            description=product.description,
            slug=product.slug,
            stock=product.stock,
            sizes=list(product.sizes),
            gender=product.gender,
            tags=list(product.tags),
            images=list(images),
            created_at=product.created_at,
            updated_at=product.updated_at,
        )
