"""Product API views.

Exposes the ``ProductService`` via HTTP using a DRF ViewSet.
Domain exceptions are caught and translated into HTTP status codes;
the view never swallows generic exceptions.
"""

from __future__ import annotations

from typing import Any, Callable

from pydantic import ValidationError as PydanticValidationError
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import ViewSet

from modules.core.validators import is_uuid
from modules.products.dtos import CreateProductDTO, PaginationDTO, UpdateProductDTO
from modules.products.exceptions import (
    ProductAlreadyExists,
    ProductNotFound,
    ProductServiceError,
)
from modules.products.repositories.django_repository import (
    ProductDjangoRepository,
    ProductImageDjangoRepository,
)
from modules.products.serializers import ProductSerializer
from modules.products.services import ProductService

UUID_EXPECTED = "Validation failed (uuid is expected)"


def _detail(message: str, code: int) -> Response:
    return Response({"detail": message}, status=code)


def _call_service(call: Callable[[], Any]) -> Any:
    """Run a service call, mapping domain exceptions to error responses.

    Returns either the service result or a ready ``Response``.
    """
    try:
        return call()
    except ProductAlreadyExists as exc:
        return _detail(str(exc), status.HTTP_400_BAD_REQUEST)
    except ProductNotFound as exc:
        return _detail(str(exc), status.HTTP_404_NOT_FOUND)
    except ProductServiceError as exc:
        return _detail(str(exc), status.HTTP_500_INTERNAL_SERVER_ERROR)


class ProductViewSet(ViewSet):
    """ViewSet for Product CRUD operations.

    Uses ``ProductService`` with the Django repositories (DIP).  All ORM
    access goes through the service/repository layer.
    """

    lookup_value_regex = "[^/]+"

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = ProductService(
            product_repository=ProductDjangoRepository(),
            image_repository=ProductImageDjangoRepository(),
        )

    # ------------------------------------------------------------------
    # List / Retrieve
    # ------------------------------------------------------------------

    def list(self, request: Request) -> Response:
        """GET /api/v1/products/?limit=&offset="""
        params = {
            key: request.query_params[key]
            for key in ("limit", "offset")
            if key in request.query_params
        }
        try:
            pagination = PaginationDTO.model_validate(params)
        except PydanticValidationError as exc:
            return _detail(str(exc), status.HTTP_400_BAD_REQUEST)

        result = _call_service(lambda: self._service.list_products(pagination))
        if isinstance(result, Response):
            return result
        return Response([product.model_dump(mode="json") for product in result])

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/products/{term}/ (UUID, title or slug)"""
        if pk is None:
            return _detail("Product not found.", status.HTTP_404_NOT_FOUND)
        result = _call_service(lambda: self._service.find_one_plain(pk))
        if isinstance(result, Response):
            return result
        return Response(result.model_dump(mode="json"))

    # ------------------------------------------------------------------
    # Create / Update / Destroy
    # ------------------------------------------------------------------

    def create(self, request: Request) -> Response:
        """POST /api/v1/products/"""
        try:
            dto = CreateProductDTO.model_validate(request.data)
        except (PydanticValidationError, ValueError) as exc:
            return _detail(str(exc), status.HTTP_400_BAD_REQUEST)

        result = _call_service(lambda: self._service.create_product(dto))
        if isinstance(result, Response):
            return result
        return Response(result.model_dump(mode="json"), status=status.HTTP_201_CREATED)

    def update(self, request: Request, pk: str | None = None) -> Response:
        """PUT/PATCH /api/v1/products/{id}/"""
        if pk is None or not is_uuid(pk):
            return _detail(UUID_EXPECTED, status.HTTP_400_BAD_REQUEST)
        try:
            dto = UpdateProductDTO.model_validate(request.data)
        except (PydanticValidationError, ValueError) as exc:
            return _detail(str(exc), status.HTTP_400_BAD_REQUEST)

        result = _call_service(lambda: self._service.update_product(pk, dto))
        if isinstance(result, Response):
            return result
        return Response(ProductSerializer(result).data)

    def partial_update(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /api/v1/products/{id}/"""
        return self.update(request, pk)

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/v1/products/{id}/, responds with the deleted product."""
        if pk is None or not is_uuid(pk):
            return _detail(UUID_EXPECTED, status.HTTP_400_BAD_REQUEST)
        result = _call_service(lambda: self._service.remove_product(pk))
        if isinstance(result, Response):
            return result
        return Response(ProductSerializer(result).data)
