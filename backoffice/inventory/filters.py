import django_filters
from django.db.models import F
from .models import InventoryItem


class InventoryItemFilter(django_filters.FilterSet):
    search = django_filters.CharFilter(field_name='name', lookup_expr='icontains')
    type = django_filters.ChoiceFilter(choices=InventoryItem.TYPE_CHOICES)
    low_stock = django_filters.BooleanFilter(method='filter_low_stock')

    class Meta:
        model = InventoryItem
        fields = ['search', 'type', 'low_stock']

    def filter_low_stock(self, queryset, name, value):
        if value is None:
            return queryset
        if value:
            return queryset.filter(quantity__lte=F('min_quantity'))
        return queryset.filter(quantity__gt=F('min_quantity'))
