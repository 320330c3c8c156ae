import logging

from dateutil.relativedelta import relativedelta

from backoffice.core.crud import CrudResource
from backoffice.finance.models import FinancialTransaction
from backoffice.inventory.models import StockMovement
from .models import Purchase
from .serializers import PurchaseSerializer

logger = logging.getLogger(__name__)


def installment_due_dates(first_date, installments):
    """One due date per month starting at ``first_date``, clamped to month end"""
    return [first_date + relativedelta(months=index) for index in range(installments)]


class PurchaseResource(CrudResource):
    def get_queryset(self, request):
        return Purchase.objects.select_related('item')

    def after_save(self, instance, created, previous, request):
        if not created:
            return
        self.create_payables(instance)
        if instance.item_id and instance.quantity:
            movement = StockMovement.objects.create(
                item=instance.item,
                quantity=instance.quantity,
                type='entrada',
                notes=f'Compra #{instance.pk} - {instance.supplier}',
            )
            movement.apply()
            logger.info(f"Purchase {instance.pk} added {instance.quantity} to item {instance.item_id}")

    def create_payables(self, purchase):
        """Payables for a purchase: one per installment, or one on the purchase date"""
        notes = purchase.notes or ''
        if purchase.is_installment:
            due_dates = installment_due_dates(purchase.first_installment_date, purchase.installments)
            payables = [
                FinancialTransaction(
                    type='payable',
                    description=f'Compra: {purchase.description} - {purchase.supplier} ({index}/{purchase.installments})',
                    amount=purchase.installment_amount,
                    purchase=purchase,
                    due_date=due_date,
                    notes=notes,
                )
                for index, due_date in enumerate(due_dates, start=1)
            ]
        else:
            payables = [FinancialTransaction(
                type='payable',
                description=f'Compra: {purchase.description} - {purchase.supplier}',
                amount=purchase.amount,
                purchase=purchase,
                due_date=purchase.purchase_date,
                notes=notes,
            )]
        FinancialTransaction.objects.bulk_create(payables)
        return payables


purchases = PurchaseResource(
    name='purchases',
    model=Purchase,
    serializer_class=PurchaseSerializer,
    access='purchases',
    invalidates=('purchases', 'inventory', 'transactions', 'dashboard_metrics'),
    date_field='purchase_date',
)
