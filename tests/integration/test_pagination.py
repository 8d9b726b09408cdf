"""Integration tests for limit/offset pagination on the product listing."""

from __future__ import annotations

import pytest

pytestmark = pytest.mark.integration

URL = "/api/v1/products/"


@pytest.fixture()
def product_batch(make_product):
    """Create a batch of products, each with one image."""
    return [
        make_product(title=f"Product {idx:02d}", images=[f"p{idx:02d}.jpg"])
        for idx in range(1, 13)
    ]


class TestPagination:
    def test_default_limit(self, api_client, product_batch):
        response = api_client.get(URL)
        assert response.status_code == 200
        data = response.json()
        assert isinstance(data, list)
        assert len(data) == 10

    def test_limit_and_offset(self, api_client, product_batch):
        response = api_client.get(URL, {"limit": 2, "offset": 3})
        assert response.status_code == 200
        titles = [item["title"] for item in response.json()]
        assert titles == ["Product 04", "Product 05"]

    def test_limit_two_of_five(self, api_client, make_product):
        for idx in range(5):
            make_product(title=f"Five {idx}")
        response = api_client.get(URL, {"limit": 2})
        assert len(response.json()) == 2

    def test_offset_past_end_is_empty(self, api_client, product_batch):
        response = api_client.get(URL, {"offset": 50})
        assert response.status_code == 200
        assert response.json() == []

    def test_images_flattened_to_urls(self, api_client, product_batch):
        response = api_client.get(URL, {"limit": 1})
        assert response.json()[0]["images"] == ["p01.jpg"]

    def test_empty_catalog(self, api_client):
        response = api_client.get(URL)
        assert response.status_code == 200
        assert response.json() == []

    @pytest.mark.parametrize(
        "params",
        [{"limit": 0}, {"limit": -1}, {"offset": -1}, {"limit": "abc"}],
    )
    def test_invalid_window_returns_400(self, api_client, params):
        response = api_client.get(URL, params)
        assert response.status_code == 400
