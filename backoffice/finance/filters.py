import django_filters
from .models import FinancialTransaction


class FinancialTransactionFilter(django_filters.FilterSet):
    type = django_filters.ChoiceFilter(choices=FinancialTransaction.TYPE_CHOICES)
    is_paid = django_filters.BooleanFilter()
    event = django_filters.NumberFilter(field_name='event_id')
    search = django_filters.CharFilter(field_name='description', lookup_expr='icontains')

    class Meta:
        model = FinancialTransaction
        fields = ['type', 'is_paid', 'event', 'search']
