from decimal import Decimal

import pytest

from rest_framework.test import APIClient


@pytest.fixture(autouse=True)
def _use_db(db):
    """Automatically use the test database for all tests."""


@pytest.fixture()
def api_client():
    """DRF APIClient for testing API endpoints."""
    return APIClient()


@pytest.fixture()
def api_client_with_correlation(api_client):
    """APIClient pre-configured with a known correlation ID header."""
    cid = "test-correlation-id-fixture"
    api_client.defaults["HTTP_X_REQUEST_ID"] = cid
    return api_client, cid


@pytest.fixture()
def make_product():
    """Factory persisting a Product (and its image URLs) straight through the ORM."""

    from modules.products.models import Product, ProductImage

    def _make(images=(), **overrides) -> Product:
        defaults = {
            "title": "Men's Chill Crew Neck Sweatshirt",
            "price": Decimal("75.00"),
            "sizes": ["S", "M", "L"],
            "gender": "men",
        }
        defaults.update(overrides)
        product = Product.objects.create(**defaults)
        for url in images:
            ProductImage.objects.create(product=product, url=url)
        return product

    return _make
