"""Integration tests for POST /api/v1/checkout/.

Covers:
- Scenario A end to end, with camelCase receipt keys.
- 400 / 401 / 403 / 500 mapping with the uniform error body.
- No order row on any failure path.
"""

from __future__ import annotations

from unittest.mock import patch

import pytest

from modules.core.exceptions import StoreError
from modules.orders.constants import REFERENCE_CODE_ALPHABET
from modules.orders.models import Order

pytestmark = pytest.mark.integration

URL = "/api/v1/checkout/"
RICE = {"id": 1, "name": "Rice", "price": 25000, "quantity": 2}


class TestCheckoutApi:
    def test_scenario_a(self, customer_client, customer):
        response = customer_client.post(URL, {"items": [RICE]}, format="json")

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        order = body["order"]
        assert order["totalPrice"] == 50000
        assert order["items"] == [
            {"productId": 1, "name": "Rice", "quantity": 2, "unitPrice": 25000}
        ]
        assert len(order["referenceCode"]) == 8
        assert set(order["referenceCode"]) <= set(REFERENCE_CODE_ALPHABET)

        stored = Order.objects.get(pk=order["id"])
        assert stored.status == "pending"
        assert stored.customer_id == customer.id
        assert stored.reference_code == order["referenceCode"]
        assert stored.completed_at is None

    def test_empty_cart(self, customer_client):
        response = customer_client.post(URL, {"items": []}, format="json")

        assert response.status_code == 400
        assert response.json() == {"success": False, "message": "Cart is empty"}
        assert Order.objects.count() == 0

    def test_missing_items_is_empty_cart(self, customer_client):
        response = customer_client.post(URL, {}, format="json")
        assert response.status_code == 400
        assert response.json()["message"] == "Cart is empty"

    def test_anonymous_is_unauthorized(self, api_client):
        response = api_client.post(URL, {"items": [RICE]}, format="json")

        assert response.status_code == 401
        assert response.json() == {
            "success": False,
            "message": "Please sign in to checkout",
        }
        assert Order.objects.count() == 0

    def test_staff_without_customer_profile_is_unauthorized(self, staff_client):
        response = staff_client.post(URL, {"items": [RICE]}, format="json")
        assert response.status_code == 401

    def test_invalid_cart_item(self, customer_client):
        bad = {**RICE, "quantity": 0}
        response = customer_client.post(URL, {"items": [bad]}, format="json")

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert "quantity" in body["message"]
        assert Order.objects.count() == 0

    @pytest.mark.parametrize("client_fixture", ["customer_client", "api_client"])
    def test_simplified_mode_forbidden(self, request, settings, client_fixture):
        settings.SIMPLIFIED_MODE = True
        client = request.getfixturevalue(client_fixture)

        response = client.post(URL, {"items": [RICE]}, format="json")

        assert response.status_code == 403
        assert response.json() == {
            "success": False,
            "message": "Ordering is disabled in simplified mode.",
        }
        assert Order.objects.count() == 0

    def test_simplified_mode_wins_over_malformed_cart(self, customer_client, settings):
        settings.SIMPLIFIED_MODE = True
        bad = {**RICE, "price": -5}

        response = customer_client.post(URL, {"items": [bad]}, format="json")

        assert response.status_code == 403
        assert Order.objects.count() == 0

    def test_anonymous_with_malformed_cart_is_unauthorized(self, api_client):
        bad = {**RICE, "price": -5}

        response = api_client.post(URL, {"items": [bad]}, format="json")

        assert response.status_code == 401
        assert response.json()["message"] == "Please sign in to checkout"

    @pytest.mark.parametrize(
        "overrides",
        [{"quantity": 10**18}, {"price": 10**18}],
    )
    def test_oversized_cart_item_is_rejected(self, customer_client, overrides):
        item = {**RICE, **overrides}

        response = customer_client.post(URL, {"items": [item]}, format="json")

        assert response.status_code == 400
        assert response.json()["success"] is False
        assert Order.objects.count() == 0

    def test_store_error_is_generic_500(self, customer_client):
        with patch(
            "modules.orders.repositories.django_repository.OrderDjangoRepository.insert",
            side_effect=StoreError("relation orders does not exist"),
        ):
            response = customer_client.post(URL, {"items": [RICE]}, format="json")

        assert response.status_code == 500
        assert response.json() == {
            "success": False,
            "message": "An error occurred during checkout",
        }

    def test_exhausted_reference_codes_is_500(self, customer_client, make_order):
        make_order(reference_code="SAME2345")
        with patch(
            "modules.orders.services.generate_reference_code",
            return_value="SAME2345",
        ), patch(
            "modules.orders.repositories.django_repository."
            "OrderDjangoRepository.reference_code_exists",
            return_value=False,
        ):
            response = customer_client.post(URL, {"items": [RICE]}, format="json")

        assert response.status_code == 500
        assert response.json()["message"] == "An error occurred during checkout"
        assert Order.objects.count() == 1

    def test_orders_get_distinct_codes(self, customer_client):
        codes = set()
        for _ in range(3):
            response = customer_client.post(URL, {"items": [RICE]}, format="json")
            codes.add(response.json()["order"]["referenceCode"])
        assert len(codes) == 3
