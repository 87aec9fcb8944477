"""Order API views.

Exposes ``CheckoutService`` and ``OrderService`` via HTTP using DRF
ViewSets.  Domain exceptions are caught and translated into
``{"success": false, "message": ...}`` responses with the matching HTTP
status; store failures are logged in full and answered with a generic
message.
"""

from __future__ import annotations

import structlog
from pydantic import ValidationError as PydanticValidationError
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny, IsAdminUser, IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.core.exception_handlers import pydantic_message
from modules.core.exceptions import SimplifiedModeDisabled, StoreError
from modules.core.policies import SimplifiedMode
from modules.customers.repositories.django_repository import CustomerDjangoRepository
from modules.customers.services import CustomerService
from modules.orders.dtos import CartItemDTO
from modules.orders.exceptions import (
    EmptyCart,
    InvalidStatus,
    InvalidTransition,
    OrderNotFound,
    OrderTotalTooLarge,
    ReferenceCodeExhausted,
    Unauthorized,
)
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.serializers import (
    CheckoutSerializer,
    CustomerOrderSerializer,
    OrderListQuerySerializer,
    OrderReceiptSerializer,
    OrderSerializer,
    OrderStatsSerializer,
    OrderStatusSerializer,
    StatusUpdateSerializer,
)
from modules.orders.services import CheckoutService, OrderService

logger = structlog.get_logger(__name__)

GENERIC_ERROR = "An error occurred"


def _failure(message: str, status_code: int) -> Response:
    return Response({"success": False, "message": message}, status=status_code)


def _customer_service(simplified_mode: SimplifiedMode) -> CustomerService:
    return CustomerService(
        repository=CustomerDjangoRepository(), simplified_mode=simplified_mode
    )


class CheckoutViewSet(GenericViewSet):
    """``POST /api/v1/checkout/``.

    Open to anonymous callers so that the simplified-mode refusal (403)
    wins over the sign-in requirement (401), and both win over a malformed
    cart (400); ``CheckoutService.admit`` decides the first two.
    """

    permission_classes = [AllowAny]
    serializer_class = CheckoutSerializer

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        simplified_mode = SimplifiedMode.from_settings()
        self._customers = _customer_service(simplified_mode)
        self._service = CheckoutService(
            order_repository=OrderDjangoRepository(),
            simplified_mode=simplified_mode,
        )

    def create(self, request: Request) -> Response:
        # Gate, then identity, then cart shape.
        try:
            customer = self._service.admit(
                self._customers.resolve_identity(request.user)
            )
            serializer = CheckoutSerializer(data=request.data)
            serializer.is_valid(raise_exception=True)
            cart_items = [
                CartItemDTO(**item) for item in serializer.validated_data["items"]
            ]
            receipt = self._service.checkout(customer, cart_items)
        except SimplifiedModeDisabled as exc:
            logger.info("checkout.refused", reason="simplified_mode")
            return _failure(str(exc), status.HTTP_403_FORBIDDEN)
        except Unauthorized as exc:
            return _failure(str(exc), status.HTTP_401_UNAUTHORIZED)
        except PydanticValidationError as exc:
            return _failure(pydantic_message(exc), status.HTTP_400_BAD_REQUEST)
        except (EmptyCart, OrderTotalTooLarge) as exc:
            return _failure(str(exc), status.HTTP_400_BAD_REQUEST)
        except ReferenceCodeExhausted:
            # Already logged at critical severity by the service.
            return _failure(
                "An error occurred during checkout",
                status.HTTP_500_INTERNAL_SERVER_ERROR,
            )
        except StoreError:
            logger.exception("checkout.store_error")
            return _failure(
                "An error occurred during checkout",
                status.HTTP_500_INTERNAL_SERVER_ERROR,
            )

        return Response(
            {"success": True, "order": OrderReceiptSerializer(receipt).data}
        )


class OrderViewSet(GenericViewSet):
    """Back-office order endpoints, addressed by reference code.

    Uses ``OrderService`` with ``OrderDjangoRepository`` (DIP).  Staff only,
    except ``mine`` which lists the signed-in customer's own orders.
    """

    permission_classes = [IsAdminUser]
    serializer_class = OrderSerializer
    lookup_field = "reference"
    lookup_value_regex = "[A-Za-z0-9]+"

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._simplified = SimplifiedMode.from_settings()
        self._service = OrderService(
            order_repository=OrderDjangoRepository(),
            simplified_mode=self._simplified,
        )

    def get_permissions(self):
        if self.action == "mine":
            return [IsAuthenticated()]
        return super().get_permissions()

    # ------------------------------------------------------------------
    # List / Stats
    # ------------------------------------------------------------------

    def _list_params(self, request: Request) -> dict:
        query = OrderListQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        params = dict(query.validated_data)
        params["status"] = params.get("status") or None
        return params

    def list(self, request: Request) -> Response:
        """GET /api/v1/orders/?status=&limit=&offset="""
        params = self._list_params(request)
        try:
            orders = self._service.list_orders(**params)
        except InvalidStatus as exc:
            return _failure(str(exc), status.HTTP_400_BAD_REQUEST)
        except StoreError:
            logger.exception("order.list_store_error")
            return _failure(GENERIC_ERROR, status.HTTP_500_INTERNAL_SERVER_ERROR)

        return Response(
            {"success": True, "orders": OrderSerializer(orders, many=True).data}
        )

    @action(detail=False, methods=["get"])
    def stats(self, request: Request) -> Response:
        """GET /api/v1/orders/stats/"""
        try:
            stats = self._service.get_stats()
        except StoreError:
            logger.exception("order.stats_store_error")
            return _failure(GENERIC_ERROR, status.HTTP_500_INTERNAL_SERVER_ERROR)

        return Response({"success": True, "stats": OrderStatsSerializer(stats).data})

    @action(detail=False, methods=["get"])
    def overview(self, request: Request) -> Response:
        """GET /api/v1/orders/overview/: the listing plus the stats block."""
        params = self._list_params(request)
        try:
            result = self._service.list_with_stats(**params)
        except InvalidStatus as exc:
            return _failure(str(exc), status.HTTP_400_BAD_REQUEST)
        except StoreError:
            logger.exception("order.overview_store_error")
            return _failure(GENERIC_ERROR, status.HTTP_500_INTERNAL_SERVER_ERROR)

        return Response(
            {
                "success": True,
                "orders": OrderSerializer(result.orders, many=True).data,
                "stats": OrderStatsSerializer(result.stats).data,
            }
        )

    @action(detail=False, methods=["get"])
    def mine(self, request: Request) -> Response:
        """GET /api/v1/orders/mine/, empty for accounts without a customer profile."""
        try:
            customer = _customer_service(self._simplified).resolve_identity(
                request.user
            )
            orders = (
                self._service.list_for_customer(customer.id) if customer else []
            )
        except StoreError:
            logger.exception("order.history_store_error")
            return _failure(GENERIC_ERROR, status.HTTP_500_INTERNAL_SERVER_ERROR)

        return Response(
            {"success": True, "orders": CustomerOrderSerializer(orders, many=True).data}
        )

    # ------------------------------------------------------------------
    # Retrieve / Status Update
    # ------------------------------------------------------------------

    def retrieve(self, request: Request, reference: str | None = None) -> Response:
        """GET /api/v1/orders/{reference}/"""
        try:
            order = self._service.get_by_reference(reference or "")
        except OrderNotFound as exc:
            return _failure(str(exc), status.HTTP_404_NOT_FOUND)
        except StoreError:
            logger.exception("order.retrieve_store_error", reference=reference)
            return _failure(GENERIC_ERROR, status.HTTP_500_INTERNAL_SERVER_ERROR)

        return Response({"success": True, "order": OrderSerializer(order).data})

    def partial_update(
        self, request: Request, reference: str | None = None
    ) -> Response:
        """PATCH /api/v1/orders/{reference}/ with ``{"status": ...}``.

        Only pending orders can change; the service's conditional write
        decides, so there is no separate status check here.
        """
        try:
            self._simplified.guard_write()
            serializer = StatusUpdateSerializer(data=request.data)
            serializer.is_valid(raise_exception=True)
            order = self._service.apply_status(
                reference or "", serializer.validated_data["status"]
            )
        except SimplifiedModeDisabled as exc:
            logger.info("order.status_refused", reason="simplified_mode")
            return _failure(str(exc), status.HTTP_403_FORBIDDEN)
        except InvalidStatus as exc:
            return _failure(str(exc), status.HTTP_400_BAD_REQUEST)
        except OrderNotFound as exc:
            return _failure(str(exc), status.HTTP_404_NOT_FOUND)
        except InvalidTransition as exc:
            return _failure(str(exc), status.HTTP_400_BAD_REQUEST)
        except StoreError:
            logger.exception("order.status_store_error", reference=reference)
            return _failure(GENERIC_ERROR, status.HTTP_500_INTERNAL_SERVER_ERROR)

        return Response({"success": True, "order": OrderStatusSerializer(order).data})
