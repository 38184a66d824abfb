"""Product API views (seller dashboard).

Exposes the ``ProductService`` via HTTP using DRF ViewSets.
Domain exceptions are caught and translated into appropriate
HTTP status codes — the view never swallows generic exceptions.
"""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.filters import OrderingFilter, SearchFilter
from rest_framework.mixins import ListModelMixin
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.core.http import request_payload, validation_error_response
from modules.products.dtos import CreateProductDTO, UpdateProductDTO, UpdateStockDTO
from modules.products.exceptions import ProductNotFound
from modules.products.filters import ProductFilter
from modules.products.models import Product
from modules.products.repositories.django_repository import ProductDjangoRepository
from modules.products.serializers import ProductSerializer
from modules.products.services import ProductService

_NOT_FOUND = {"detail": "Product not found."}


class ProductViewSet(ListModelMixin, GenericViewSet):
    """ViewSet for catalog management.

    Does **not** extend ``ModelViewSet`` — all ORM access goes through
    the service/repository layer.
    """

    filterset_class = ProductFilter
    search_fields = ["name", "category"]
    ordering_fields = ["name", "price", "stock_qty", "created_at"]
    ordering = ["name", "created_at"]
    filter_backends = [DjangoFilterBackend, SearchFilter, OrderingFilter]
    queryset = Product.objects.all()
    serializer_class = ProductSerializer

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = ProductService(repository=ProductDjangoRepository())

    def get_queryset(self):
        return self._service.list_products()

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/products/{pk}/"""
        try:
            product = self._service.get_product(pk)
        except ProductNotFound:
            return Response(_NOT_FOUND, status=status.HTTP_404_NOT_FOUND)
        return Response(ProductSerializer(product).data)

    def create(self, request: Request) -> Response:
        """POST /api/v1/products/"""
        try:
            dto = CreateProductDTO.model_validate(request_payload(request))
        except (ValueError, TypeError) as exc:
            return validation_error_response(exc)

        product = self._service.create_product(dto)
        return Response(ProductSerializer(product).data, status=status.HTTP_201_CREATED)

    def partial_update(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /api/v1/products/{pk}/

        ``stock_qty`` is ignored here; use ``PATCH /products/{pk}/stock/``.
        """
        try:
            data = request_payload(request)
            data.pop("stock_qty", None)
            dto = UpdateProductDTO.model_validate(data)
        except (ValueError, TypeError) as exc:
            return validation_error_response(exc)

        try:
            product = self._service.update_product(pk, dto)
        except ProductNotFound:
            return Response(_NOT_FOUND, status=status.HTTP_404_NOT_FOUND)
        return Response(ProductSerializer(product).data)

    def update(self, request: Request, pk: str | None = None) -> Response:
        """PUT /api/v1/products/{pk}/ — same partial semantics as PATCH."""
        return self.partial_update(request, pk)

    @action(detail=True, methods=["patch"], url_path="stock")
    def update_stock(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /api/v1/products/{pk}/stock/

        Accepts ``{"stock_qty": N}``; ``{"stock_qty": null}`` stops tracking.
        """
        if "stock_qty" not in request.data:
            return Response(
                {"detail": "Field 'stock_qty' is required."},
                status=status.HTTP_400_BAD_REQUEST,
            )
        try:
            dto = UpdateStockDTO(stock_qty=request.data.get("stock_qty"))
        except (ValueError, TypeError) as exc:
            return validation_error_response(exc)

        try:
            product = self._service.update_stock(pk, dto)
        except ProductNotFound:
            return Response(_NOT_FOUND, status=status.HTTP_404_NOT_FOUND)
        return Response(ProductSerializer(product).data)

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/v1/products/{pk}/"""
        try:
            self._service.delete_product(pk)
        except ProductNotFound:
            return Response(_NOT_FOUND, status=status.HTTP_404_NOT_FOUND)
        return Response(status=status.HTTP_204_NO_CONTENT)
