from __future__ import annotations

import random

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError

from modules.core.policies import SimplifiedMode
from modules.customers.dtos import CustomerIdentityDTO
from modules.customers.models import Customer
from modules.customers.repositories import CustomerDjangoRepository
from modules.orders.constants import OrderStatus
from modules.orders.dtos import CartItemDTO
from modules.orders.repositories import OrderDjangoRepository
from modules.orders.services import CheckoutService, OrderService
from modules.products.fallback import FALLBACK_RECORDS
from modules.products.models import Category, Product
from modules.products.repositories import (
    CategoryDjangoRepository,
    ProductDjangoRepository,
)

# (name, slug, display order)
SEED_CATEGORIES = [
    ("Dairy", "dairy", 1),
    ("Produce", "produce", 2),
    ("Canned Goods", "canned", 3),
    ("Rice & Grains", "grains", 4),
    ("Beverages", "beverages", 5),
    ("Snacks", "snacks", 6),
    ("Frozen", "frozen", 7),
    ("Household", "household", 8),
]

# SKU -> category slug for the seeded shelf
SHELF = {
    "RICE-5KG": "grains",
    "TEA-500G": "beverages",
    "OIL-1800": "household",
    "SUGAR-2KG": "grains",
    "LENT-1KG": "grains",
    "TOMP-400": "canned",
    "BREAD-10": "produce",
    "DATES-1KG": "snacks",
    "YOG-1KG": "dairy",
    "EGGS-30": "dairy",
}

SEED_CUSTOMERS = [
    ("Layla Hassan", "layla@example.com"),
    ("Omar Saleh", "omar@example.com"),
    ("Zainab Kareem", "zainab@example.com"),
    ("Mustafa Ali", "mustafa@example.com"),
    ("Noor Jabbar", "noor@example.com"),
]


class Command(BaseCommand):
    help = "Seed database with demo grocery data (staff, catalog, customers, orders)."

    def add_arguments(self, parser):
        parser.add_argument("--orders", type=int, default=20)

    def handle(self, *args, **options):
        if SimplifiedMode.from_settings().enabled:
            raise CommandError("Seeding writes data; unset SIMPLIFIED first.")

        random.seed(42)
        self.stdout.write("Seeding demo data...")

        users_created = self._seed_staff()
        products = self._seed_catalog()
        customers = self._seed_customers()
        orders = self._seed_orders(customers, products, options["orders"])

        self.stdout.write(
            self.style.SUCCESS(
                "Seed completed: "
                f"staff={users_created}, "
                f"products={len(products)}, "
                f"customers={len(customers)}, "
                f"orders={orders}"
            )
        )

    def _seed_staff(self) -> int:
        User = get_user_model()
        created = 0
        if not User.objects.filter(username="admin").exists():
            User.objects.create_superuser("admin", password="admin123")
            created += 1
        if not User.objects.filter(username="cashier").exists():
            User.objects.create_user("cashier", password="cashier123", is_staff=True)
            created += 1
        return created

    def _seed_catalog(self) -> list[Product]:
        self.stdout.write("Creating catalog...")
        category_repo = CategoryDjangoRepository()
        product_repo = ProductDjangoRepository()

        categories = {}
        for name, slug, order in SEED_CATEGORIES:
            category = category_repo.get_by_slug(slug)
            if category is None:
                category = category_repo.save(
                    Category(name=name, slug=slug, display_order=order)
                )
            categories[slug] = category

        products: list[Product] = []
        for _, name, description, price, stock, sku in reversed(FALLBACK_RECORDS):
            product = product_repo.get_by_sku(sku)
            if product is None:
                product = product_repo.save(
                    Product(
                        name=name,
                        description=description,
                        price=price,
                        stock_quantity=stock,
                        sku=sku,
                        category=categories[SHELF[sku]],
                    )
                )
            products.append(product)
        self.stdout.write(self.style.SUCCESS("Creating catalog... Done!"))
        return products

    def _seed_customers(self) -> list[Customer]:
        self.stdout.write("Creating customers...")
        repo = CustomerDjangoRepository()
        customers: list[Customer] = []
        for name, email in SEED_CUSTOMERS:
            customer = repo.get_by_email(email)
            if customer is None:
                customer = repo.create(name=name, email=email, password="customer123")
            customers.append(customer)
        self.stdout.write(self.style.SUCCESS("Creating customers... Done!"))
        return customers

    def _seed_orders(
        self, customers: list[Customer], products: list[Product], count: int
    ) -> int:
        self.stdout.write("Creating orders...")
        repo = OrderDjangoRepository()
        checkout = CheckoutService(order_repository=repo)
        lifecycle = OrderService(order_repository=repo)

        outcomes = [OrderStatus.PENDING, OrderStatus.COMPLETED, OrderStatus.CANCELLED]
        for _ in range(count):
            customer = random.choice(customers)
            cart = [
                CartItemDTO(
                    id=product.id,
                    name=product.name,
                    price=product.price,
                    quantity=random.randint(1, 3),
                )
                for product in random.sample(products, k=random.randint(1, 4))
            ]
            receipt = checkout.checkout(CustomerIdentityDTO.from_entity(customer), cart)

            outcome = random.choices(outcomes, weights=[0.4, 0.45, 0.15], k=1)[0]
            if outcome == OrderStatus.COMPLETED:
                lifecycle.complete(receipt.id)
            elif outcome == OrderStatus.CANCELLED:
                lifecycle.cancel(receipt.id)

        self.stdout.write(self.style.SUCCESS("Creating orders... Done!"))
        return count
