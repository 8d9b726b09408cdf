"""Product and ProductImage models.

Business rules implemented:
- Title and slug are unique in the system (UNIQUE INDEX on both columns).
- Slug is derived from the title when absent and normalised on every save
  (lowercase, spaces -> ``_``, apostrophes stripped).
- Price and stock cannot be negative.
- ProductImage rows are owned by their Product: CASCADE removes them
  together with the product.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Mapping

import structlog

from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models

from modules.core.models import BaseModel

logger = structlog.get_logger(__name__)

# Writable Product attributes accepted from callers.  ``images`` is handled
# separately since it is a relation, not a column.
PRODUCT_FIELDS = (
    "title",
    "price",
    "description",
    "slug",
    "stock",
    "sizes",
    "gender",
    "tags",
)


class Gender(models.TextChoices):
    MEN = "men", "Men"
    WOMEN = "women", "Women"
    KID = "kid", "Kid"
    UNISEX = "unisex", "Unisex"


def normalize_slug(value: str) -> str:
    return value.lower().replace(" ", "_").replace("'", "")


def apply_product_fields(product: Product, fields: Mapping[str, Any]) -> Product:
    """Overwrite the recognised attributes present in *fields* on *product*.

    Unknown keys (``images``, ``id``, timestamps...) are ignored.
    """
    for name in PRODUCT_FIELDS:
        if name in fields:
            setattr(product, name, fields[name])
    return product


class Product(BaseModel):
    """Product aggregate root.

    ``slug`` is the URL-safe natural key; it is recomputed from the
    current value (or the title, when empty) on every save so that
    look-ups by ``slug = LOWER(term)`` keep working.
    """

    title = models.CharField(max_length=255, unique=True)
    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal("0"),
        validators=[MinValueValidator(Decimal("0"))],
    )
    description = models.TextField(null=True, blank=True, default=None)  # noqa: DJ01
    slug = models.CharField(max_length=255, unique=True, blank=True)
    stock = models.PositiveIntegerField(default=0)
    sizes = models.JSONField(default=list)
    gender = models.CharField(max_length=10, choices=Gender.choices)
    tags = models.JSONField(default=list, blank=True)

    class Meta:
        db_table = "products"
        constraints = [
            models.CheckConstraint(
                condition=models.Q(price__gte=0),
                name="products_price_non_negative",
            ),
        ]

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def clean(self) -> None:
        super().clean()
        self._normalize_slug()
        if self.price is not None and self.price < 0:
            raise ValidationError({"price": "Price cannot be negative."})

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def _normalize_slug(self) -> None:
        self.slug = normalize_slug(self.slug or self.title or "")

    def save(self, *args, **kwargs) -> None:
        is_new = self._state.adding
        self._normalize_slug()
        super().save(*args, **kwargs)
        if is_new:
            logger.info(
                "product_created",
                product_id=str(self.id),
                slug=self.slug,
                title=self.title,
            )

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------

    def __str__(self) -> str:
        return f"{self.slug} - {self.title}"


class ProductImage(models.Model):
    """Image URL attached to a product.

    Images have no lifecycle of their own: they are created through a
    product create/update and removed with their product.
    """

    url = models.TextField()
    product = models.ForeignKey(
        Product,
        on_delete=models.CASCADE,
        related_name="images",
    )

    class Meta:
        db_table = "product_images"
        ordering = ["id"]

    def __str__(self) -> str:
        return self.url
