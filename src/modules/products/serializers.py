"""Product DRF serializers for API output.

The serializer operates at the Interface layer (API Views) and renders
full product records, images included as ``{id, url}`` objects.
Input validation lives in the Pydantic DTOs from ``dtos.py``.
"""

from __future__ import annotations

from rest_framework import serializers

from modules.products.models import Product, ProductImage


class ProductImageSerializer(serializers.ModelSerializer):
    class Meta:
        model = ProductImage
        fields = ["id", "url"]
        read_only_fields = ["id"]


class ProductSerializer(serializers.ModelSerializer):
    """Read serializer for the full Product record."""

    images = ProductImageSerializer(many=True, read_only=True)

    class Meta:
        model = Product
        fields = [
            "id",
            "title",
            "price",
            "description",
            "slug",
            "stock",
            "sizes",
            "gender",
            "tags",
            "images",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "created_at", "updated_at"]
