import pytest

from modules.orders.models import Order

pytestmark = pytest.mark.unit


class TestBaseModelTimestamps:
    def test_timestamps_set_on_create(self, make_order):
        order = make_order()
        assert order.created_at is not None
        assert order.updated_at is not None

    def test_update_fields_refreshes_updated_at(self, make_order):
        order = make_order()
        before = order.updated_at

        order.status = "cancelled"
        order.save(update_fields=["status"])

        order.refresh_from_db()
        assert order.status == "cancelled"
        assert order.updated_at >= before
        assert Order.objects.get(pk=order.pk).updated_at == order.updated_at
