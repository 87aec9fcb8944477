"""Catalog API views.

The shelf (product listing, product detail, categories) is public; every
edit is staff only.  Domain exceptions are caught and translated into
``{"success": false, "message": ...}`` responses; store failures are
logged in full and answered with a generic message.
"""

from __future__ import annotations

from typing import Callable, Optional, Tuple

import structlog
from pydantic import ValidationError as PydanticValidationError
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny, IsAdminUser
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.core.exception_handlers import pydantic_message
from modules.core.exceptions import SimplifiedModeDisabled, StoreError
from modules.core.policies import SimplifiedMode
from modules.products.dtos import (
    CreateCategoryDTO,
    CreateProductDTO,
    UpdateCategoryDTO,
    UpdateProductDTO,
)
from modules.products.exceptions import (
    CategoryAlreadyExists,
    CategoryNotFound,
    ProductAlreadyExists,
    ProductNotFound,
)
from modules.products.repositories.django_repository import (
    CategoryDjangoRepository,
    ProductDjangoRepository,
)
from modules.products.serializers import (
    CategoryInputSerializer,
    CategorySerializer,
    ProductInputSerializer,
    ProductQuerySerializer,
    ProductSerializer,
    StockUpdateSerializer,
)
from modules.products.services import CategoryService, ProductService

logger = structlog.get_logger(__name__)

GENERIC_ERROR = "An error occurred"
PUBLIC_ACTIONS = ("list", "retrieve", "products")


def _failure(message: str, status_code: int) -> Response:
    return Response({"success": False, "message": message}, status=status_code)


def _product_service(simplified_mode: SimplifiedMode) -> ProductService:
    return ProductService(
        product_repository=ProductDjangoRepository(),
        category_repository=CategoryDjangoRepository(),
        simplified_mode=simplified_mode,
    )


def _run_edit(
    ensure_writable: Callable[[], None], edit: Callable, event: str
) -> Tuple[Optional[object], Optional[Response]]:
    """Run a staff edit: gate, then body, then the service call."""
    try:
        ensure_writable()
        return edit(), None
    except SimplifiedModeDisabled as exc:
        logger.info(f"{event}_refused", reason="simplified_mode")
        return None, _failure(str(exc), status.HTTP_403_FORBIDDEN)
    except PydanticValidationError as exc:
        return None, _failure(pydantic_message(exc), status.HTTP_400_BAD_REQUEST)
    except (ProductNotFound, CategoryNotFound) as exc:
        return None, _failure(str(exc), status.HTTP_404_NOT_FOUND)
    except (ProductAlreadyExists, CategoryAlreadyExists) as exc:
        return None, _failure(str(exc), status.HTTP_400_BAD_REQUEST)
    except StoreError:
        logger.exception(f"{event}_store_error")
        return None, _failure(GENERIC_ERROR, status.HTTP_500_INTERNAL_SERVER_ERROR)


class _CatalogViewSet(GenericViewSet):
    permission_classes = [IsAdminUser]

    def get_permissions(self):
        if self.action in PUBLIC_ACTIONS:
            return [AllowAny()]
        return super().get_permissions()


class ProductViewSet(_CatalogViewSet):
    """Storefront shelf and back-office product editor.

    Uses ``ProductService`` with the Django repositories (DIP).  Does
    **not** extend ``ModelViewSet``; all ORM access goes through the
    service/repository layer.
    """

    serializer_class = ProductSerializer
    lookup_value_regex = "[0-9]{1,18}"

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = _product_service(SimplifiedMode.from_settings())

    # ------------------------------------------------------------------
    # List / Retrieve
    # ------------------------------------------------------------------

    def list(self, request: Request) -> Response:
        """GET /api/v1/products/?search=&category=&limit=&offset="""
        query = ProductQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        params = query.validated_data
        # Only staff may look behind the shelf at inactive products.
        include_inactive = params["include_inactive"] and request.user.is_staff

        try:
            products = self._service.list_products(
                search=params.get("search") or None,
                category_id=params.get("category"),
                active_only=not include_inactive,
                limit=params["limit"],
                offset=params["offset"],
            )
        except StoreError:
            logger.exception("product.list_store_error")
            return _failure(GENERIC_ERROR, status.HTTP_500_INTERNAL_SERVER_ERROR)

        return Response(
            {"success": True, "products": ProductSerializer(products, many=True).data}
        )

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/products/{pk}/"""
        try:
            product = self._service.get_product(int(pk or 0))
        except ProductNotFound as exc:
            return _failure(str(exc), status.HTTP_404_NOT_FOUND)
        except StoreError:
            logger.exception("product.retrieve_store_error", product_id=pk)
            return _failure(GENERIC_ERROR, status.HTTP_500_INTERNAL_SERVER_ERROR)

        return Response({"success": True, "product": ProductSerializer(product).data})

    # ------------------------------------------------------------------
    # Create / Update / Destroy
    # ------------------------------------------------------------------

    def create(self, request: Request) -> Response:
        """POST /api/v1/products/"""

        def edit():
            serializer = ProductInputSerializer(data=request.data)
            serializer.is_valid(raise_exception=True)
            return self._service.create_product(
                CreateProductDTO(**serializer.validated_data)
            )

        product, failure = _run_edit(
            self._service.ensure_writable, edit, "product.create"
        )
        if failure is not None:
            return failure
        return Response(
            {"success": True, "product": ProductSerializer(product).data},
            status=status.HTTP_201_CREATED,
        )

    def partial_update(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /api/v1/products/{pk}/"""

        def edit():
            serializer = ProductInputSerializer(data=request.data, partial=True)
            serializer.is_valid(raise_exception=True)
            return self._service.update_product(
                int(pk or 0), UpdateProductDTO(**serializer.validated_data)
            )

        product, failure = _run_edit(
            self._service.ensure_writable, edit, "product.update"
        )
        if failure is not None:
            return failure
        return Response({"success": True, "product": ProductSerializer(product).data})

    @action(detail=True, methods=["patch"], url_path="stock")
    def update_stock(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /api/v1/products/{pk}/stock/ with ``{"stockQuantity": N}``."""

        def edit():
            serializer = StockUpdateSerializer(data=request.data)
            serializer.is_valid(raise_exception=True)
            return self._service.update_product(
                int(pk or 0), UpdateProductDTO(**serializer.validated_data)
            )

        product, failure = _run_edit(
            self._service.ensure_writable, edit, "product.stock"
        )
        if failure is not None:
            return failure
        return Response({"success": True, "product": ProductSerializer(product).data})

    @action(detail=True, methods=["post"])
    def toggle(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/products/{pk}/toggle/ flips ``isActive``."""
        product, failure = _run_edit(
            self._service.ensure_writable,
            lambda: self._service.toggle_active(int(pk or 0)),
            "product.toggle",
        )
        if failure is not None:
            return failure
        return Response({"success": True, "product": ProductSerializer(product).data})

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/v1/products/{pk}/"""
        _, failure = _run_edit(
            self._service.ensure_writable,
            lambda: self._service.delete_product(int(pk or 0)),
            "product.delete",
        )
        if failure is not None:
            return failure
        return Response({"success": True})


class CategoryViewSet(_CatalogViewSet):
    """Categories, addressed by slug."""

    serializer_class = CategorySerializer
    lookup_field = "slug"
    lookup_value_regex = "[a-z0-9-]+"

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        simplified_mode = SimplifiedMode.from_settings()
        self._service = CategoryService(
            category_repository=CategoryDjangoRepository(),
            simplified_mode=simplified_mode,
        )
        self._products = _product_service(simplified_mode)

    def list(self, request: Request) -> Response:
        """GET /api/v1/categories/"""
        try:
            categories = self._service.list_categories()
        except StoreError:
            logger.exception("category.list_store_error")
            return _failure(GENERIC_ERROR, status.HTTP_500_INTERNAL_SERVER_ERROR)

        return Response(
            {
                "success": True,
                "categories": CategorySerializer(categories, many=True).data,
            }
        )

    def retrieve(self, request: Request, slug: str | None = None) -> Response:
        """GET /api/v1/categories/{slug}/"""
        try:
            category = self._service.get_by_slug(slug or "")
        except CategoryNotFound as exc:
            return _failure(str(exc), status.HTTP_404_NOT_FOUND)
        except StoreError:
            logger.exception("category.retrieve_store_error", slug=slug)
            return _failure(GENERIC_ERROR, status.HTTP_500_INTERNAL_SERVER_ERROR)

        return Response(
            {"success": True, "category": CategorySerializer(category).data}
        )

    @action(detail=True, methods=["get"])
    def products(self, request: Request, slug: str | None = None) -> Response:
        """GET /api/v1/categories/{slug}/products/, empty for an unknown slug."""
        query = ProductQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        try:
            products = self._products.list_products(
                category_slug=slug,
                limit=query.validated_data["limit"],
                offset=query.validated_data["offset"],
            )
        except StoreError:
            logger.exception("category.products_store_error", slug=slug)
            return _failure(GENERIC_ERROR, status.HTTP_500_INTERNAL_SERVER_ERROR)

        return Response(
            {"success": True, "products": ProductSerializer(products, many=True).data}
        )

    def create(self, request: Request) -> Response:
        """POST /api/v1/categories/"""

        def edit():
            serializer = CategoryInputSerializer(data=request.data)
            serializer.is_valid(raise_exception=True)
            return self._service.create_category(
                CreateCategoryDTO(**serializer.validated_data)
            )

        category, failure = _run_edit(
            self._service.ensure_writable, edit, "category.create"
        )
        if failure is not None:
            return failure
        return Response(
            {"success": True, "category": CategorySerializer(category).data},
            status=status.HTTP_201_CREATED,
        )

    def partial_update(self, request: Request, slug: str | None = None) -> Response:
        """PATCH /api/v1/categories/{slug}/"""

        def edit():
            serializer = CategoryInputSerializer(data=request.data, partial=True)
            serializer.is_valid(raise_exception=True)
            return self._service.update_category(
                slug or "", UpdateCategoryDTO(**serializer.validated_data)
            )

        category, failure = _run_edit(
            self._service.ensure_writable, edit, "category.update"
        )
        if failure is not None:
            return failure
        return Response(
            {"success": True, "category": CategorySerializer(category).data}
        )

    def destroy(self, request: Request, slug: str | None = None) -> Response:
        """DELETE /api/v1/categories/{slug}/"""
        _, failure = _run_edit(
            self._service.ensure_writable,
            lambda: self._service.delete_category(slug or ""),
            "category.delete",
        )
        if failure is not None:
            return failure
        return Response({"success": True})
