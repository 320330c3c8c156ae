import django_filters
from django.db.models import Q
from .models import Employee


class EmployeeFilter(django_filters.FilterSet):
    """Filter employees by name/contact search, job title and availability"""
    search = django_filters.CharFilter(method='filter_search')
    role = django_filters.CharFilter(field_name='role', lookup_expr='iexact')
    is_available = django_filters.BooleanFilter(field_name='is_available')
    skill = django_filters.NumberFilter(field_name='skills__id', distinct=True)

    class Meta:
        model = Employee
        fields = ['search', 'role', 'is_available', 'skill']

    def filter_search(self, queryset, name, value):
        if not value:
            return queryset
        return queryset.filter(
            Q(name__icontains=value) |
            Q(phone__icontains=value) |
            Q(email__icontains=value) |
            Q(cpf__icontains=value)
        )
