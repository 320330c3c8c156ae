import csv
import logging

from django.http import HttpResponse
from django.utils import timezone
from django.utils.http import content_disposition_header
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated

from backoffice.core.permissions import role_access
from backoffice.finance.views import transactions
from .metrics import dashboard_metrics, financial_summary, upcoming_events

logger = logging.getLogger(__name__)

TRANSACTION_COLUMNS = [
    ('type', 'Tipo'),
    ('description', 'Descrição'),
    ('amount', 'Valor'),
    ('due_date', 'Vencimento'),
    ('paid_date', 'Data Pagamento'),
    ('is_paid', 'Pago'),
    ('created_at', 'Data Cadastro'),
]

TYPE_LABELS = {'receivable': 'A Receber', 'payable': 'A Pagar'}


def _csv_value(row, key):
    if key == 'type':
        return TYPE_LABELS.get(row['type'], row['type'])
    if key == 'is_paid':
        return 'Sim' if row['is_paid'] else 'Não'
    value = row.get(key)
    return '' if value is None else value


@api_view(['GET'])
@permission_classes([IsAuthenticated, role_access('dashboard')])
def dashboard_metrics_view(request):
    """Cash balance, monthly revenue, events this month, low stock and charts"""
    return Response(dashboard_metrics(timezone.localdate()))


@api_view(['GET'])
@permission_classes([IsAuthenticated, role_access('dashboard')])
def upcoming_events_view(request):
    return Response(upcoming_events(timezone.localdate()))


@api_view(['GET'])
@permission_classes([IsAuthenticated, role_access('reports')])
def financial_report(request):
    """Summary of the transactions in the selected period"""
    data = transactions.list_data(request)
    return Response({'summary': financial_summary(data), 'count': len(data)})


@api_view(['GET'])
@permission_classes([IsAuthenticated, role_access('reports')])
def financial_report_export(request):
    """The selected transactions as a CSV download"""
    data = transactions.list_data(request)
    response = HttpResponse(content_type='text/csv; charset=utf-8', headers={
        'Content-Disposition': content_disposition_header(
            True, f'relatorio_financeiro_{timezone.localdate():%Y-%m-%d}.csv'
        ),
    })
    writer = csv.writer(response)
    writer.writerow([label for _, label in TRANSACTION_COLUMNS])
    for row in data:
        writer.writerow([_csv_value(row, key) for key, _ in TRANSACTION_COLUMNS])
    logger.info(f"Financial report exported with {len(data)} rows")
    return response
