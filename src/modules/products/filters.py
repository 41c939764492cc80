import django_filters

from modules.products.models import Product


class ProductFilter(django_filters.FilterSet):
    name = django_filters.CharFilter(field_name="name", lookup_expr="icontains")
    minPrice = django_filters.NumberFilter(field_name="price", lookup_expr="gte")
    maxPrice = django_filters.NumberFilter(field_name="price", lookup_expr="lte")
    categoryId = django_filters.UUIDFilter(field_name="category_id")

    class Meta:
        model = Product
        fields = ["name", "minPrice", "maxPrice", "categoryId"]
