"""Unit tests for the Product Django repositories.

Covers:
- build / get_by_id / save / delete (IRepository contract).
- find_by_term: title in any case, slug, no match.
- paginate: window, ordering, prefetched images.
- preload: merge without persisting; missing / invalid IDs.
- save with images: cascade create and replacement.
- StorageError raised for unique violations.
"""

from __future__ import annotations

import pytest
from django.db import connection
from django.test.utils import CaptureQueriesContext

from modules.core.repositories.errors import StorageError, StorageErrorKind
from modules.products.models import Product, ProductImage
from modules.products.repositories import (
    IProductImageRepository,
    IProductRepository,
    ProductDjangoRepository,
    ProductImageDjangoRepository,
)

pytestmark = pytest.mark.unit

MISSING_ID = "00000000-0000-0000-0000-000000000000"


@pytest.fixture()
def repo():
    return ProductDjangoRepository()


@pytest.fixture()
def image_repo():
    return ProductImageDjangoRepository()


# ===========================================================================
# Instantiation
# ===========================================================================


class TestRepositoryInstantiation:
    def test_product_repository_implements_interface(self, repo):
        assert isinstance(repo, IProductRepository)

    def test_image_repository_implements_interface(self, image_repo):
        assert isinstance(image_repo, IProductImageRepository)


# ===========================================================================
# build
# ===========================================================================


class TestBuild:
    def test_builds_unsaved_product(self, repo):
        product = repo.build({"title": "Built", "sizes": ["M"], "gender": "men"})
        assert product.title == "Built"
        assert product._state.adding is True
        assert not Product.objects.filter(id=product.id).exists()

    def test_ignores_images_key(self, repo):
        product = repo.build(
            {"title": "Built", "sizes": [], "gender": "men", "images": ["a.jpg"]}
        )
        assert product.title == "Built"

    def test_builds_unsaved_image(self, image_repo):
        image = image_repo.build({"url": "a.jpg"})
        assert image.url == "a.jpg"
        assert image.pk is None


# ===========================================================================
# get_by_id
# ===========================================================================


class TestGetById:
    def test_returns_product_when_found(self, repo, make_product):
        product = make_product()
        result = repo.get_by_id(str(product.id))
        assert result is not None
        assert result.id == product.id

    def test_returns_none_when_not_found(self, repo):
        assert repo.get_by_id(MISSING_ID) is None

    def test_returns_none_for_invalid_uuid(self, repo):
        assert repo.get_by_id("not-a-uuid") is None

    def test_images_prefetched(self, repo, make_product):
        product = make_product(images=["a.jpg", "b.jpg"])
        result = repo.get_by_id(str(product.id))
        with CaptureQueriesContext(connection) as ctx:
            urls = [image.url for image in result.images.all()]
        assert urls == ["a.jpg", "b.jpg"]
        assert len(ctx.captured_queries) == 0


# ===========================================================================
# find_by_term
# ===========================================================================


class TestFindByTerm:
    def test_matches_exact_title(self, repo, make_product):
        product = make_product(title="Cropped Puffer Jacket")
        assert repo.find_by_term("Cropped Puffer Jacket").id == product.id

    def test_matches_title_in_any_case(self, repo, make_product):
        product = make_product(title="Cropped Puffer Jacket")
        assert repo.find_by_term("cROPPED pUFFER jACKET").id == product.id

    def test_matches_slug(self, repo, make_product):
        product = make_product(title="Cropped Puffer Jacket")
        assert repo.find_by_term("cropped_puffer_jacket").id == product.id

    def test_matches_slug_given_in_upper_case(self, repo, make_product):
        product = make_product(title="Cropped Puffer Jacket")
        assert repo.find_by_term("CROPPED_PUFFER_JACKET").id == product.id

    def test_returns_none_without_match(self, repo, make_product):
        make_product(title="Cropped Puffer Jacket")
        assert repo.find_by_term("raven_hoodie") is None

    def test_non_ascii_title_matches_exactly(self, repo, make_product):
        product = make_product(title="Ñandú Poncho")
        assert repo.find_by_term("Ñandú Poncho").id == product.id

    def test_like_wildcards_are_literal(self, repo, make_product):
        make_product(title="Cropped Puffer Jacket")
        assert repo.find_by_term("Cropped%") is None
        assert repo.find_by_term("Cropped_Puffer_Jacke_") is None

    def test_images_loaded(self, repo, make_product):
        make_product(title="Raven Hoodie", images=["r1.jpg"])
        result = repo.find_by_term("raven_hoodie")
        assert [image.url for image in result.images.all()] == ["r1.jpg"]


# ===========================================================================
# paginate
# ===========================================================================


class TestPaginate:
    def test_returns_requested_window(self, repo, make_product):
        created = [make_product(title=f"Product {idx}") for idx in range(5)]
        page = repo.paginate(limit=2, offset=1)
        assert [p.id for p in page] == [created[1].id, created[2].id]

    def test_offset_past_end_returns_empty(self, repo, make_product):
        make_product()
        assert repo.paginate(limit=10, offset=5) == []

    def test_empty_table(self, repo):
        assert repo.paginate(limit=10, offset=0) == []

    def test_images_prefetched(self, repo, make_product):
        make_product(title="One", images=["1a.jpg", "1b.jpg"])
        make_product(title="Two", images=["2a.jpg"])
        page = repo.paginate(limit=10, offset=0)
        with CaptureQueriesContext(connection) as ctx:
            urls = [[image.url for image in p.images.all()] for p in page]
        assert urls == [["1a.jpg", "1b.jpg"], ["2a.jpg"]]
        assert len(ctx.captured_queries) == 0


# ===========================================================================
# preload
# ===========================================================================


class TestPreload:
    def test_merges_changes_without_saving(self, repo, make_product):
        product = make_product(stock=3)
        preloaded = repo.preload(str(product.id), {"stock": 10, "images": ["x"]})
        assert preloaded.stock == 10
        assert preloaded.title == product.title
        product.refresh_from_db()
        assert product.stock == 3

    def test_returns_none_when_not_found(self, repo):
        assert repo.preload(MISSING_ID, {"stock": 1}) is None

    def test_returns_none_for_invalid_uuid(self, repo):
        assert repo.preload("cropped_puffer_jacket", {"stock": 1}) is None


# ===========================================================================
# save
# ===========================================================================


class TestSave:
    def test_creates_product_with_images(self, repo, image_repo):
        product = repo.build({"title": "Saved", "sizes": ["M"], "gender": "women"})
        images = [image_repo.build({"url": url}) for url in ("a.jpg", "b.jpg")]

        saved = repo.save(product, images=images)

        assert saved is product
        assert Product.objects.filter(id=saved.id).exists()
        assert [image.url for image in saved.images.all()] == ["a.jpg", "b.jpg"]

    def test_replaces_existing_images(self, repo, image_repo, make_product):
        product = make_product(images=["old1.jpg", "old2.jpg"])
        repo.save(product, images=[image_repo.build({"url": "new.jpg"})])

        assert list(
            ProductImage.objects.filter(product=product).values_list("url", flat=True)
        ) == ["new.jpg"]

    def test_empty_images_clear_existing(self, repo, make_product):
        product = make_product(images=["old.jpg"])
        saved = repo.save(product, images=[])
        assert list(saved.images.all()) == []
        assert ProductImage.objects.count() == 0

    def test_images_none_keeps_existing(self, repo, make_product):
        product = make_product(images=["keep.jpg"])
        product.stock = 8
        saved = repo.save(product)
        assert [image.url for image in saved.images.all()] == ["keep.jpg"]

    def test_duplicate_slug_raises_unique_violation(self, repo, make_product):
        make_product(title="Taken", slug="taken")
        product = repo.build({"title": "Other", "slug": "taken", "sizes": [], "gender": "men"})

        with pytest.raises(StorageError) as info:
            repo.save(product, images=[])

        assert info.value.kind is StorageErrorKind.UNIQUE_VIOLATION

    def test_failed_save_does_not_keep_images(self, repo, image_repo, make_product):
        make_product(title="Taken")
        product = repo.build({"title": "Taken", "sizes": [], "gender": "men"})

        with pytest.raises(StorageError):
            repo.save(product, images=[image_repo.build({"url": "orphan.jpg"})])

        assert not ProductImage.objects.filter(url="orphan.jpg").exists()


# ===========================================================================
# delete
# ===========================================================================


class TestDelete:
    def test_deletes_product_and_images(self, repo, make_product):
        product = make_product(images=["a.jpg"])
        assert repo.delete(str(product.id)) is True
        assert not Product.objects.filter(id=product.id).exists()
        assert ProductImage.objects.count() == 0

    def test_returns_false_for_nonexistent(self, repo):
        assert repo.delete(MISSING_ID) is False

    def test_returns_false_for_invalid_uuid(self, repo, make_product):
        product = make_product()
        assert repo.delete(product.slug) is False
        assert Product.objects.filter(id=product.id).exists()


# ===========================================================================
# ProductImage repository
# ===========================================================================


class TestImageRepository:
    def test_save_get_delete(self, image_repo, make_product):
        product = make_product()
        image = image_repo.build({"url": "solo.jpg"})
        image.product = product
        image_repo.save(image)

        assert image_repo.get_by_id(str(image.pk)).url == "solo.jpg"
        assert image_repo.delete(str(image.pk)) is True
        assert image_repo.get_by_id(str(image.pk)) is None

    def test_invalid_id(self, image_repo):
        assert image_repo.get_by_id("abc") is None
        assert image_repo.delete("abc") is False
