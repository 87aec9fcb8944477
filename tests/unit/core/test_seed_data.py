import pytest
from django.contrib.auth import get_user_model
from django.core.management import CommandError, call_command

from modules.customers.models import Customer
from modules.orders.models import Order
from modules.products.models import Category, Product

pytestmark = pytest.mark.unit


class TestSeedData:
    def test_seeds_staff_customers_and_orders(self):
        call_command("seed_data", orders=6)

        assert get_user_model().objects.filter(username="cashier", is_staff=True).exists()
        assert Category.objects.count() == 8
        assert Product.objects.count() == 10
        assert Customer.objects.count() == 5
        assert Order.objects.count() == 6
        for order in Order.objects.all():
            assert order.total_price == sum(i.subtotal for i in order.line_items)

    def test_orders_snapshot_seeded_products(self):
        call_command("seed_data", orders=4)

        shelf = {p.id: (p.name, p.price) for p in Product.objects.all()}
        for order in Order.objects.all():
            for item in order.line_items:
                assert shelf[item.product_id] == (item.name, item.unit_price)

    def test_is_rerunnable(self):
        call_command("seed_data", orders=2)
        call_command("seed_data", orders=2)

        assert Product.objects.count() == 10
        assert Customer.objects.count() == 5
        assert Order.objects.count() == 4

    def test_refused_in_simplified_mode(self, settings):
        settings.SIMPLIFIED_MODE = True
        with pytest.raises(CommandError):
            call_command("seed_data")
        assert not Order.objects.exists()
