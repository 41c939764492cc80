from __future__ import annotations

from decimal import Decimal
from typing import Dict

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand
from django.db import transaction

from modules.categories.models import Category
from modules.products.models import Product

MENU = {
    "Drinks": {
        "description": "Hot and cold beverages",
        "parent": None,
        "products": [
            ("Still Water", Decimal("2.50")),
            ("Orange Juice", Decimal("3.50")),
            ("Coffee", Decimal("3.00")),
        ],
    },
    "Alcoholic Drinks": {
        "description": "Served to adult passengers only",
        "parent": "Drinks",
        "products": [
            ("Red Wine", Decimal("7.00")),
            ("Beer", Decimal("5.50")),
        ],
    },
    "Snacks": {
        "description": "Sweet and savoury snacks",
        "parent": None,
        "products": [
            ("Salted Crisps", Decimal("2.00")),
            ("Chocolate Bar", Decimal("2.50")),
            ("Mixed Nuts", Decimal("3.00")),
        ],
    },
    "Meals": {
        "description": "Hot meals prepared on board",
        "parent": None,
        "products": [
            ("Chicken Sandwich", Decimal("8.50")),
            ("Vegetable Pasta", Decimal("10.00")),
        ],
    },
}


class Command(BaseCommand):
    help = "Seed the database with an example in-flight menu."

    def add_arguments(self, parser):
        parser.add_argument(
            "--with-user",
            action="store_true",
            help="Also create an 'admin' superuser (password 'admin123').",
        )

    @transaction.atomic
    def handle(self, *args, **options):
        self.stdout.write("Seeding catalog...")

        categories = self._seed_categories()
        products_created = self._seed_products(categories)
        users_created = self._seed_user() if options["with_user"] else 0

        self.stdout.write(
            self.style.SUCCESS(
                "Seed completed: "
                f"categories={len(categories)}, "
                f"products_created={products_created}, "
                f"users={users_created}"
            )
        )

    def _seed_categories(self) -> Dict[str, Category]:
        categories: Dict[str, Category] = {}
        # Parents are declared before their children in MENU
        for name, entry in MENU.items():
            parent = categories.get(entry["parent"]) if entry["parent"] else None
            category, _ = Category.objects.get_or_create(
                name=name,
                defaults={"description": entry["description"], "parent": parent},
            )
            categories[name] = category
        return categories

    def _seed_products(self, categories: Dict[str, Category]) -> int:
        created = 0
        for category_name, entry in MENU.items():
            for name, price in entry["products"]:
                _, was_created = Product.objects.get_or_create(
                    name=name,
                    defaults={"price": price, "category": categories[category_name]},
                )
                created += int(was_created)
        return created

    def _seed_user(self) -> int:
        User = get_user_model()
        if User.objects.filter(username="admin").exists():
            return 0
        User.objects.create_superuser("admin", password="admin123")
        return 1
