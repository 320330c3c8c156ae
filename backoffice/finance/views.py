import logging

from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated

from backoffice.core.crud import CrudResource
from backoffice.core.permissions import role_access
from backoffice.core.utils import create_audit_log
from .filters import FinancialTransactionFilter
from .models import FinancialTransaction
from .serializers import FinancialTransactionSerializer

logger = logging.getLogger(__name__)


class TransactionResource(CrudResource):
    def get_queryset(self, request):
        return FinancialTransaction.objects.select_related('event')


transactions = TransactionResource(
    name='transactions',
    model=FinancialTransaction,
    serializer_class=FinancialTransactionSerializer,
    access='financial',
    invalidates=('transactions', 'dashboard_metrics'),
    date_field='due_date',
    filterset_class=FinancialTransactionFilter,
)


@api_view(['POST'])
@permission_classes([IsAuthenticated, role_access('financial')])
def transaction_pay(request, pk):
    """Mark a transaction as paid today (dar baixa)"""
    transaction = transactions.get_object(request, pk)
    transaction.mark_paid()
    transactions.invalidate()
    create_audit_log(request=request, action='transaction_pay', model_name='FinancialTransaction',
                     object_id=transaction.pk, object_name=transaction.description,
                     changes={'paid_date': transaction.paid_date})
    logger.info(f"Transaction {transaction.pk} marked as paid")
    return Response(transactions.detail_data(request, transaction))
