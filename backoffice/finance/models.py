from django.db import models
from django.utils import timezone


class FinancialTransaction(models.Model):
    """Money to receive (receivable) or to pay (payable)"""
    TYPE_CHOICES = [
        ('receivable', 'A receber'),
        ('payable', 'A pagar'),
    ]

    type = models.CharField(max_length=20, choices=TYPE_CHOICES)
    description = models.CharField(max_length=255)
    amount = models.DecimalField(max_digits=10, decimal_places=2)
    event = models.ForeignKey('events.Event', on_delete=models.SET_NULL, null=True, blank=True, related_name='transactions')
    purchase = models.ForeignKey('purchasing.Purchase', on_delete=models.CASCADE, null=True, blank=True, related_name='transactions')
    due_date = models.DateField()
    paid_date = models.DateField(null=True, blank=True)
    is_paid = models.BooleanField(default=False)
    notes = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'financial_transactions'
        ordering = ['due_date', 'id']
        indexes = [
            models.Index(fields=['type', 'is_paid'], name='transactions_type_paid_idx'),
            models.Index(fields=['due_date'], name='transactions_due_idx'),
        ]

    def __str__(self):
        return f"{self.get_type_display()}: {self.description} ({self.amount})"

    @property
    def is_overdue(self):
        return not self.is_paid and self.due_date < timezone.localdate()

    def mark_paid(self, paid_date=None):
        self.is_paid = True
        self.paid_date = paid_date or timezone.localdate()
        self.save(update_fields=['is_paid', 'paid_date', 'updated_at'])
