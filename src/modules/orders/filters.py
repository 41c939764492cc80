import django_filters

from modules.orders.constants import OrderStatus, PaymentStatus
from modules.orders.models import Order


class OrderFilter(django_filters.FilterSet):
    status = django_filters.ChoiceFilter(choices=OrderStatus.choices)
    paymentStatus = django_filters.ChoiceFilter(
        field_name="payment_status", choices=PaymentStatus.choices
    )
    seatLetter = django_filters.CharFilter(field_name="seat_letter", lookup_expr="iexact")
    seatNumber = django_filters.NumberFilter(field_name="seat_number")
    buyerEmail = django_filters.CharFilter(field_name="buyer_email", lookup_expr="iexact")
    createdFrom = django_filters.DateFilter(field_name="created_at", lookup_expr="date__gte")
    createdTo = django_filters.DateFilter(field_name="created_at", lookup_expr="date__lte")

    class Meta:
        model = Order
        fields = [
            "status",
            "paymentStatus",
            "seatLetter",
            "seatNumber",
            "buyerEmail",
            "createdFrom",
            "createdTo",
        ]
