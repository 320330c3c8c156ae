import django_filters
from django.db.models import Q
from .models import Event


class EventFilter(django_filters.FilterSet):
    """Event list filters (the date range is applied separately)"""
    search = django_filters.CharFilter(method='filter_search')
    status = django_filters.ChoiceFilter(choices=Event.STATUS_CHOICES)
    client = django_filters.NumberFilter(field_name='client_id')
    category = django_filters.NumberFilter(field_name='category_id')
    employee = django_filters.NumberFilter(field_name='event_employees__employee_id', distinct=True)

    class Meta:
        model = Event
        fields = ['search', 'status', 'client', 'category', 'employee']

    def filter_search(self, queryset, name, value):
        value = (value or '').strip()
        if not value:
            return queryset
        return queryset.filter(
            Q(title__icontains=value) | Q(location__icontains=value) | Q(client__name__icontains=value)
        )
