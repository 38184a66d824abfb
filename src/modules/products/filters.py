import django_filters

from modules.products.models import Product


class ProductFilter(django_filters.FilterSet):
    name = django_filters.CharFilter(field_name="name", lookup_expr="icontains")
    category = django_filters.CharFilter(field_name="category", lookup_expr="iexact")
    status = django_filters.CharFilter(field_name="status", lookup_expr="iexact")
    min_price = django_filters.NumberFilter(field_name="price", lookup_expr="gte")
    max_price = django_filters.NumberFilter(field_name="price", lookup_expr="lte")
    tracked = django_filters.BooleanFilter(
        field_name="stock_qty", lookup_expr="isnull", exclude=True
    )

    class Meta:
        model = Product
        fields = ["name", "category", "status", "min_price", "max_price", "tracked"]
