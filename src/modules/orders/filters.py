import django_filters

from modules.orders.constants import OrderStatus
from modules.orders.models import Order


class OrderFilter(django_filters.FilterSet):
    """Validates list query parameters; the façade applies them."""

    status = django_filters.ChoiceFilter(choices=OrderStatus.choices)
    branch = django_filters.UUIDFilter(field_name="branch_id")
    is_express = django_filters.BooleanFilter()
    start_date = django_filters.DateFilter(field_name="created_at", lookup_expr="date__gte")
    end_date = django_filters.DateFilter(field_name="created_at", lookup_expr="date__lte")

    class Meta:
        model = Order
        fields = ["status", "branch", "is_express", "start_date", "end_date"]
