"""Customer API views.

Exposes ``CustomerService`` over HTTP.  Domain exceptions are caught and
translated into ``{"success": false, "message": ...}`` responses.
"""

from __future__ import annotations

import structlog
from pydantic import ValidationError as PydanticValidationError
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.core.exception_handlers import pydantic_message
from modules.core.exceptions import SimplifiedModeDisabled, StoreError
from modules.core.policies import SimplifiedMode
from modules.customers.dtos import RegisterCustomerDTO
from modules.customers.exceptions import CustomerAlreadyExists
from modules.customers.repositories.django_repository import CustomerDjangoRepository
from modules.customers.serializers import (
    CustomerIdentitySerializer,
    RegisterCustomerSerializer,
)
from modules.customers.services import CustomerService

logger = structlog.get_logger(__name__)

GENERIC_ERROR = "An error occurred"


def _failure(message: str, status_code: int) -> Response:
    return Response({"success": False, "message": message}, status=status_code)


class CustomerViewSet(GenericViewSet):
    """Self-service customer endpoints.

    Uses ``CustomerService`` with ``CustomerDjangoRepository`` (DIP).
    """

    permission_classes = [AllowAny]

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = CustomerService(
            repository=CustomerDjangoRepository(),
            simplified_mode=SimplifiedMode.from_settings(),
        )

    @action(detail=False, methods=["post"])
    def register(self, request: Request) -> Response:
        """POST /api/v1/customers/register/"""
        try:
            self._service.ensure_registration_open()
            serializer = RegisterCustomerSerializer(data=request.data)
            serializer.is_valid(raise_exception=True)
            dto = RegisterCustomerDTO(**serializer.validated_data)
            customer = self._service.register(dto)
        except SimplifiedModeDisabled as exc:
            logger.info("customer.registration_refused", reason="simplified_mode")
            return _failure(str(exc), status.HTTP_403_FORBIDDEN)
        except PydanticValidationError as exc:
            return _failure(pydantic_message(exc), status.HTTP_400_BAD_REQUEST)
        except CustomerAlreadyExists as exc:
            return _failure(str(exc), status.HTTP_400_BAD_REQUEST)
        except StoreError:
            logger.exception("customer.registration_store_error")
            return _failure(GENERIC_ERROR, status.HTTP_500_INTERNAL_SERVER_ERROR)

        return Response(
            {
                "success": True,
                "message": "Account created",
                "customer": CustomerIdentitySerializer(customer).data,
            },
            status=status.HTTP_201_CREATED,
        )

    @action(detail=False, methods=["get"])
    def me(self, request: Request) -> Response:
        """GET /api/v1/customers/me/, ``{"customer": null}`` when signed out."""
        try:
            identity = self._service.resolve_identity(request.user)
        except StoreError:
            logger.exception("customer.identity_store_error")
            return _failure(GENERIC_ERROR, status.HTTP_500_INTERNAL_SERVER_ERROR)

        data = CustomerIdentitySerializer(identity).data if identity else None
        return Response({"customer": data})
