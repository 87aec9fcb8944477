"""Integration tests for the back-office order endpoints.

Covers:
- GET /api/v1/orders/{reference}/ (case-insensitive, with customer).
- PATCH /api/v1/orders/{reference}/ (Scenario D, invalid status).
- GET /api/v1/orders/, /stats/, /overview/ and /mine/.
- Staff-only access and simplified mode.
"""

from __future__ import annotations

from datetime import timedelta
from unittest.mock import patch

import pytest
from django.utils import timezone

from modules.core.exceptions import StoreError
from modules.orders.models import Order

pytestmark = pytest.mark.integration

ORDERS = "/api/v1/orders/"


def _detail(reference: str) -> str:
    return f"{ORDERS}{reference}/"


# ---------------------------------------------------------------------------
# Retrieve
# ---------------------------------------------------------------------------


class TestRetrieveOrder:
    def test_returns_order_with_customer(self, staff_client, make_order, customer):
        order = make_order(reference_code="ABCD2345")

        response = staff_client.get(_detail("abcd2345"))

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        data = body["order"]
        assert data["id"] == order.pk
        assert data["referenceCode"] == "ABCD2345"
        assert data["totalPrice"] == 50000
        assert data["status"] == "pending"
        assert data["items"] == [
            {"productId": 1, "name": "Rice", "quantity": 2, "unitPrice": 25000}
        ]
        assert data["createdAt"]
        assert data["completedAt"] is None
        assert data["customer"] == {
            "id": customer.id,
            "name": "Layla Hassan",
            "email": "layla@example.com",
        }

    def test_unknown_reference(self, staff_client):
        response = staff_client.get(_detail("ZZZZ9999"))
        assert response.status_code == 404
        assert response.json() == {"success": False, "message": "Order not found"}

    def test_requires_staff(self, customer_client, make_order):
        make_order(reference_code="ABCD2345")
        response = customer_client.get(_detail("ABCD2345"))
        assert response.status_code == 403
        assert response.json()["success"] is False

    def test_requires_authentication(self, api_client, make_order):
        make_order(reference_code="ABCD2345")
        response = api_client.get(_detail("ABCD2345"))
        assert response.status_code == 401
        assert response.json()["success"] is False


# ---------------------------------------------------------------------------
# Status update
# ---------------------------------------------------------------------------


class TestUpdateOrderStatus:
    def test_scenario_d(self, staff_client, make_order):
        order = make_order(reference_code="ABCD2345")

        response = staff_client.patch(
            _detail("ABCD2345"), {"status": "completed"}, format="json"
        )
        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "order": {"id": order.pk, "referenceCode": "ABCD2345", "status": "completed"},
        }
        order.refresh_from_db()
        assert order.completed_at is not None
        completed_at = order.completed_at

        response = staff_client.patch(
            _detail("ABCD2345"), {"status": "cancelled"}, format="json"
        )
        assert response.status_code == 400
        assert response.json() == {
            "success": False,
            "message": "Order has already been processed",
        }
        order.refresh_from_db()
        assert order.status == "completed"
        assert order.completed_at == completed_at

    def test_cancel(self, staff_client, make_order):
        order = make_order(reference_code="ABCD2345")

        response = staff_client.patch(
            _detail("abcd2345"), {"status": "cancelled"}, format="json"
        )

        assert response.status_code == 200
        order.refresh_from_db()
        assert order.status == "cancelled"
        assert order.completed_at is None

    @pytest.mark.parametrize("value", ["shipped", "pending", "Completed"])
    def test_invalid_status(self, staff_client, make_order, value):
        make_order(reference_code="ABCD2345")

        response = staff_client.patch(_detail("ABCD2345"), {"status": value}, format="json")

        assert response.status_code == 400
        assert response.json() == {"success": False, "message": "Invalid status"}

    def test_missing_status(self, staff_client, make_order):
        make_order(reference_code="ABCD2345")
        response = staff_client.patch(_detail("ABCD2345"), {}, format="json")
        assert response.status_code == 400
        assert response.json()["success"] is False

    def test_unknown_reference(self, staff_client):
        response = staff_client.patch(
            _detail("ZZZZ9999"), {"status": "completed"}, format="json"
        )
        assert response.status_code == 404

    def test_requires_staff(self, customer_client, make_order):
        order = make_order(reference_code="ABCD2345")
        response = customer_client.patch(
            _detail("ABCD2345"), {"status": "completed"}, format="json"
        )
        assert response.status_code == 403
        order.refresh_from_db()
        assert order.status == "pending"

    def test_store_error_is_generic_500(self, staff_client, make_order):
        make_order(reference_code="ABCD2345")
        with patch(
            "modules.orders.repositories.django_repository.OrderDjangoRepository.update_status",
            side_effect=StoreError("deadlock detected"),
        ):
            response = staff_client.patch(
                _detail("ABCD2345"), {"status": "completed"}, format="json"
            )

        assert response.status_code == 500
        assert response.json() == {"success": False, "message": "An error occurred"}


# ---------------------------------------------------------------------------
# Listing and stats
# ---------------------------------------------------------------------------


class TestListOrders:
    def test_lists_most_recent_first(self, staff_client, make_order):
        older = make_order()
        newer = make_order()
        Order.objects.filter(pk=older.pk).update(
            created_at=timezone.now() - timedelta(hours=1)
        )

        response = staff_client.get(ORDERS)

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert [o["id"] for o in body["orders"]] == [newer.pk, older.pk]
        assert body["orders"][0]["customer"]["email"] == "layla@example.com"

    def test_status_filter_limit_offset(self, staff_client, make_order):
        pending = [make_order() for _ in range(3)]
        make_order(status="completed")

        response = staff_client.get(ORDERS, {"status": "pending", "limit": 2, "offset": 1})

        ids = [o["id"] for o in response.json()["orders"]]
        assert ids == [pending[1].pk, pending[0].pk]

    def test_invalid_status_filter(self, staff_client):
        response = staff_client.get(ORDERS, {"status": "shipped"})
        assert response.status_code == 400
        assert response.json() == {"success": False, "message": "Invalid status"}

    @pytest.mark.parametrize("params", [{"limit": 0}, {"limit": 201}, {"offset": -1}])
    def test_invalid_paging(self, staff_client, params):
        response = staff_client.get(ORDERS, params)
        assert response.status_code == 400
        assert response.json()["success"] is False

    def test_requires_staff(self, customer_client):
        assert customer_client.get(ORDERS).status_code == 403


class TestOrderStats:
    def test_stats(self, staff_client, make_order):
        make_order(status="pending")
        make_order(status="completed", total_price=40000)
        old = make_order(status="completed", total_price=10000)
        make_order(status="cancelled")
        Order.objects.filter(pk=old.pk).update(
            created_at=timezone.now() - timedelta(days=2)
        )

        response = staff_client.get(f"{ORDERS}stats/")

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "stats": {"pending": 1, "completed": 2, "cancelled": 1, "todayRevenue": 40000},
        }

    def test_overview(self, staff_client, make_order):
        order = make_order()

        response = staff_client.get(f"{ORDERS}overview/")

        body = response.json()
        assert body["success"] is True
        assert [o["id"] for o in body["orders"]] == [order.pk]
        assert body["stats"]["pending"] == 1


class TestMyOrders:
    def test_customer_sees_only_own_orders(
        self, customer_client, make_order, make_customer
    ):
        mine = make_order()
        other = make_customer(name="Omar", email="omar@example.com")
        make_order(owner=other)

        response = customer_client.get(f"{ORDERS}mine/")

        assert response.status_code == 200
        orders = response.json()["orders"]
        assert [o["id"] for o in orders] == [mine.pk]
        assert "customer" not in orders[0]

    def test_account_without_profile_has_no_orders(self, staff_client, make_order):
        make_order()
        response = staff_client.get(f"{ORDERS}mine/")
        assert response.json() == {"success": True, "orders": []}

    def test_requires_authentication(self, api_client):
        assert api_client.get(f"{ORDERS}mine/").status_code == 401


# ---------------------------------------------------------------------------
# Simplified mode
# ---------------------------------------------------------------------------


class TestSimplifiedMode:
    @pytest.fixture(autouse=True)
    def _simplified(self, settings):
        settings.SIMPLIFIED_MODE = True

    def test_reads_are_empty(self, staff_client, make_order):
        make_order(reference_code="ABCD2345")

        assert staff_client.get(ORDERS).json() == {"success": True, "orders": []}
        assert staff_client.get(f"{ORDERS}stats/").json()["stats"] == {
            "pending": 0,
            "completed": 0,
            "cancelled": 0,
            "todayRevenue": 0,
        }
        assert staff_client.get(_detail("ABCD2345")).status_code == 404

    def test_status_change_forbidden(self, staff_client, make_order):
        order = make_order(reference_code="ABCD2345")

        response = staff_client.patch(
            _detail("ABCD2345"), {"status": "completed"}, format="json"
        )

        assert response.status_code == 403
        assert response.json()["success"] is False
        order.refresh_from_db()
        assert order.status == "pending"

    def test_status_change_forbidden_before_body_checks(self, staff_client, make_order):
        make_order(reference_code="ABCD2345")

        response = staff_client.patch(_detail("ABCD2345"), {}, format="json")

        assert response.status_code == 403

    def test_my_orders_empty(self, customer_client, make_order):
        make_order()
        assert customer_client.get(f"{ORDERS}mine/").json()["orders"] == []
