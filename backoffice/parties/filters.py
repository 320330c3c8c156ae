import django_filters
from django.db.models import Q
from .models import Client


class ClientFilter(django_filters.FilterSet):
    """Client list filters"""
    search = django_filters.CharFilter(method='filter_search', label='Search')
    person_type = django_filters.ChoiceFilter(choices=Client.PERSON_TYPE_CHOICES)
    cidade = django_filters.CharFilter(lookup_expr='iexact')

    class Meta:
        model = Client
        fields = ['search', 'person_type', 'cidade']

    def filter_search(self, queryset, name, value):
        """Match name, phone, email or document"""
        value = (value or '').strip()
        if not value:
            return queryset
        return queryset.filter(
            Q(name__icontains=value) | Q(phone__icontains=value) | Q(email__icontains=value)
            | Q(cpf__icontains=value) | Q(cnpj__icontains=value)
        )
