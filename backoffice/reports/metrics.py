"""
Dashboard aggregates

Both builders are cached in their own query set and take the reference day
as an argument, so a cached result never outlives its day.
"""
from datetime import timedelta
from decimal import Decimal

from dateutil.relativedelta import relativedelta
from django.db.models import DecimalField, Q, Sum, Value
from django.db.models.functions import Coalesce
from django.utils import timezone

from backoffice.core.cache_utils import DASHBOARD_CACHE_TTL, UPCOMING_EVENTS_CACHE_TTL, cached_query
from backoffice.core.dates import end_of_day, start_of_day
from backoffice.events.models import Event
from backoffice.finance.models import FinancialTransaction
from backoffice.inventory.models import InventoryItem

MONTH_ABBR_PT = ['jan', 'fev', 'mar', 'abr', 'mai', 'jun', 'jul', 'ago', 'set', 'out', 'nov', 'dez']

ZERO = Value(Decimal('0.00'), output_field=DecimalField(max_digits=12, decimal_places=2))


def _total(queryset):
    return queryset.aggregate(total=Coalesce(Sum('amount'), ZERO))['total']


def _net(queryset):
    """Receivables minus payables of ``queryset``"""
    totals = queryset.aggregate(
        received=Coalesce(Sum('amount', filter=Q(type='receivable')), ZERO),
        paid=Coalesce(Sum('amount', filter=Q(type='payable')), ZERO),
    )
    return totals['received'] - totals['paid']


@cached_query('dashboard_metrics', cache_ttl=DASHBOARD_CACHE_TTL)
def dashboard_metrics(today):
    paid = FinancialTransaction.objects.filter(is_paid=True)
    received = paid.filter(type='receivable')
    month_start = today.replace(day=1)
    month_end = month_start + relativedelta(months=1, days=-1)

    revenue_chart = []
    for offset in range(5, -1, -1):
        first = month_start - relativedelta(months=offset)
        last = first + relativedelta(months=1, days=-1)
        revenue_chart.append({
            'month': MONTH_ABBR_PT[first.month - 1],
            'year': first.year,
            'revenue': _total(received.filter(paid_date__gte=first, paid_date__lte=last)),
        })

    cash_flow_chart = []
    for offset in range(6, -1, -1):
        day = today - timedelta(days=offset)
        cash_flow_chart.append({
            'date': day.strftime('%d/%m'),
            'balance': _net(paid.filter(paid_date=day)),
        })

    return {
        'cash_balance': _net(paid),
        'monthly_revenue': _total(received.filter(paid_date__gte=month_start, paid_date__lte=month_end)),
        'events_this_month': Event.objects.filter(
            date__gte=start_of_day(month_start), date__lte=end_of_day(month_end)
        ).exclude(status='cancelled').count(),
        'low_stock_items': InventoryItem.low_stock().count(),
        'monthly_revenue_chart': revenue_chart,
        'cash_flow_chart': cash_flow_chart,
    }


@cached_query('upcoming_events', cache_ttl=UPCOMING_EVENTS_CACHE_TTL)
def upcoming_events(today, limit=5):
    """Next scheduled events from the start of ``today``"""
    events = Event.objects.select_related('client').filter(
        status='scheduled', date__gte=start_of_day(today)
    ).order_by('date')[:limit]
    return [
        {
            'id': event.id,
            'title': event.title,
            'date': timezone.localtime(event.date).isoformat(),
            'location': event.location,
            'client_name': event.client.name,
            'status': event.status,
        }
        for event in events
    ]


def financial_summary(transactions):
    """Totals to receive, received, to pay and paid over serialized transactions"""
    summary = {'receivable': Decimal('0'), 'received': Decimal('0'), 'payable': Decimal('0'), 'paid': Decimal('0')}
    for transaction in transactions:
        amount = Decimal(str(transaction['amount']))
        if transaction['type'] == 'receivable':
            summary['receivable'] += amount
            if transaction['is_paid']:
                summary['received'] += amount
        else:
            summary['payable'] += amount
            if transaction['is_paid']:
                summary['paid'] += amount
    summary['balance'] = summary['received'] - summary['paid']
    return summary
