from io import StringIO

import pytest
from django.contrib.auth import get_user_model
from django.core.management import call_command

from modules.categories.models import Category
from modules.products.models import Product

pytestmark = pytest.mark.integration


class TestSeedCatalogCommand:
    def test_seeds_menu(self):
        out = StringIO()
        call_command("seed_catalog", stdout=out)

        assert Category.objects.count() == 4
        assert Category.objects.get(name="Alcoholic Drinks").parent.name == "Drinks"
        assert Product.objects.get(name="Beer").category.name == "Alcoholic Drinks"
        assert "Seed completed" in out.getvalue()

    def test_is_idempotent(self):
        call_command("seed_catalog", stdout=StringIO())
        products = Product.objects.count()

        out = StringIO()
        call_command("seed_catalog", stdout=out)

        assert Product.objects.count() == products
        assert "products_created=0" in out.getvalue()

    def test_with_user_creates_superuser(self):
        call_command("seed_catalog", "--with-user", stdout=StringIO())
        assert get_user_model().objects.get(username="admin").is_superuser
