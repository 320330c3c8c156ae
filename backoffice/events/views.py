import logging
from decimal import Decimal

from django.http import HttpResponse
from django.utils.http import content_disposition_header
from django.utils import timezone
from rest_framework import serializers
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated

from backoffice.core.crud import CrudResource
from backoffice.core.permissions import EMPLOYEE, FINANCIAL_EVENT_FIELDS, role_access, sees_financials, user_role
from backoffice.core.utils import create_audit_log
from backoffice.finance.models import FinancialTransaction
from .contracts import CORPORATE, INDIVIDUAL, ContractData, assemble_contract, contract_filename, render_contract_pdf
from .filters import EventFilter
from .models import Event, EventCategory, Package
from .serializers import EventSerializer, EventCategorySerializer, PackageSerializer

logger = logging.getLogger(__name__)


def visible_events(request):
    """Events the requesting user may see"""
    queryset = Event.objects.select_related('client', 'category', 'package').prefetch_related(
        'characters', 'event_employees__employee'
    )
    if user_role(request.user) == EMPLOYEE:
        queryset = queryset.filter(event_employees__employee__user=request.user).distinct()
    return queryset


def strip_financials(data):
    """Drop contract values and staff fees from one serialized event"""
    for name in FINANCIAL_EVENT_FIELDS:
        data.pop(name, None)
    if 'event_employees' in data:
        data['event_employees'] = [
            {key: value for key, value in dict(item).items() if key != 'cache_value'}
            for item in data['event_employees']
        ]
    return data


class EventResource(CrudResource):
    def get_queryset(self, request):
        return visible_events(request)

    def represent(self, request, data):
        if not sees_financials(request.user):
            return strip_financials(data)
        return data

    def after_save(self, instance, created, previous, request):
        was_completed = previous is not None and previous['status'] == 'completed'
        if instance.status == 'completed' and not was_completed:
            self.create_receivable(instance)

    def create_receivable(self, event):
        """A completed event becomes money to receive"""
        amount = event.contract_value or Decimal('0')
        if amount <= 0:
            return None
        due_date = event.payment_date or timezone.localtime(event.date).date()
        transaction = FinancialTransaction.objects.create(
            type='receivable',
            description=f'Evento: {event.title} - {event.client.name}',
            amount=amount,
            event=event,
            due_date=due_date,
            notes=f"Evento concluído em {timezone.localdate().strftime('%d/%m/%Y')}",
        )
        logger.info(f"Receivable {transaction.pk} created for completed event {event.pk}")
        return transaction


events = EventResource(
    name='events',
    model=Event,
    serializer_class=EventSerializer,
    access='events',
    invalidates=('events', 'dashboard_metrics', 'upcoming_events', 'clients', 'transactions'),
    date_field='date',
    filterset_class=EventFilter,
)

event_categories = CrudResource(
    name='event-categories',
    model=EventCategory,
    serializer_class=EventCategorySerializer,
    access='settings',
    query_set='settings',
    invalidates=('settings', 'events'),
    cache_lists=False,
)

packages = CrudResource(
    name='packages',
    model=Package,
    serializer_class=PackageSerializer,
    access='settings',
    query_set='settings',
    invalidates=('settings', 'events'),
    cache_lists=False,
)


@api_view(['GET'])
@permission_classes([IsAuthenticated, role_access('contracts')])
def event_contract(request, pk):
    """Download the service contract of an event as PDF"""
    kind = request.query_params.get('kind') or None
    if kind not in (None, INDIVIDUAL, CORPORATE):
        raise serializers.ValidationError({'kind': 'Tipo de contrato deve ser fisica ou juridica'})

    event = events.get_object(request, pk)
    definition = assemble_contract(ContractData.from_event(event), kind)
    pdf = render_contract_pdf(definition)
    filename = contract_filename(definition)

    create_audit_log(request=request, action='contract_generate', model_name='Event',
                     object_id=event.pk, object_name=event.title, changes={'kind': definition.kind})

    return HttpResponse(pdf, content_type='application/pdf', headers={
        'Content-Disposition': content_disposition_header(True, filename),
    })
