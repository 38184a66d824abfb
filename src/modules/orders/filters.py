import django_filters

from modules.orders.constants import DeliveryMode, OrderChannel, OrderStatus
from modules.orders.models import Order


class OrderFilter(django_filters.FilterSet):
    status = django_filters.ChoiceFilter(choices=OrderStatus.choices)
    delivery_mode = django_filters.ChoiceFilter(choices=DeliveryMode.choices)
    channel = django_filters.ChoiceFilter(choices=OrderChannel.choices)
    delivery_date = django_filters.CharFilter(
        field_name="delivery_date", lookup_expr="iexact"
    )
    customer = django_filters.CharFilter(
        field_name="customer_name", lookup_expr="icontains"
    )
    start_date = django_filters.DateFilter(field_name="created_at", lookup_expr="date__gte")
    end_date = django_filters.DateFilter(field_name="created_at", lookup_expr="date__lte")

    class Meta:
        model = Order
        fields = [
            "status",
            "delivery_mode",
            "channel",
            "delivery_date",
            "customer",
            "start_date",
            "end_date",
        ]


class DeliveryFilter(OrderFilter):
    event = django_filters.UUIDFilter(field_name="event_id")
    delivered = django_filters.BooleanFilter(
        field_name="delivered_at", lookup_expr="isnull", exclude=True
    )

    class Meta(OrderFilter.Meta):
        fields = OrderFilter.Meta.fields + ["event", "delivered"]
