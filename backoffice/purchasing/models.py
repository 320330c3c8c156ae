from django.db import models


class Purchase(models.Model):
    """Purchase from a supplier, paid in cash or in monthly installments"""
    supplier = models.CharField(max_length=200)
    description = models.CharField(max_length=255)
    amount = models.DecimalField(max_digits=10, decimal_places=2)
    item = models.ForeignKey('inventory.InventoryItem', on_delete=models.SET_NULL, null=True, blank=True, related_name='purchases')
    quantity = models.PositiveIntegerField(default=0, help_text="Units added to the linked item")
    purchase_date = models.DateField()
    is_installment = models.BooleanField(default=False)
    installments = models.PositiveSmallIntegerField(null=True, blank=True)
    installment_amount = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    first_installment_date = models.DateField(null=True, blank=True)
    notes = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'purchases'
        ordering = ['-purchase_date', '-created_at']

    def __str__(self):
        return f"{self.supplier} - {self.description}"
