from django.db import models
from django.db.models import F


class InventoryItem(models.Model):
    """Consumable stock or a character costume"""
    TYPE_CHOICES = [
        ('consumable', 'Consumível'),
        ('character', 'Personagem'),
    ]

    name = models.CharField(max_length=200)
    type = models.CharField(max_length=20, choices=TYPE_CHOICES, default='consumable')
    quantity = models.IntegerField(default=0)
    min_quantity = models.IntegerField(default=0)
    unit = models.CharField(max_length=20, blank=True)
    cost_price = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    sale_price = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    notes = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'inventory_items'
        ordering = ['name']
        indexes = [
            models.Index(fields=['type'], name='inventory_type_idx'),
        ]

    def __str__(self):
        return self.name

    @property
    def is_low_stock(self):
        return self.quantity <= self.min_quantity

    @classmethod
    def low_stock(cls):
        return cls.objects.filter(quantity__lte=F('min_quantity'))


class StockMovement(models.Model):
    """Entry or exit of stock for one item"""
    TYPE_CHOICES = [
        ('entrada', 'Entrada'),
        ('saida', 'Saída'),
    ]

    item = models.ForeignKey(InventoryItem, on_delete=models.CASCADE, related_name='movements')
    quantity = models.PositiveIntegerField()
    type = models.CharField(max_length=10, choices=TYPE_CHOICES)
    notes = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'stock_movements'
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.get_type_display()} {self.quantity} {self.item}"

    @property
    def signed_quantity(self):
        return self.quantity if self.type == 'entrada' else -self.quantity

    def apply(self):
        """Adjust the item quantity by this movement"""
        InventoryItem.objects.filter(pk=self.item_id).update(quantity=F('quantity') + self.signed_quantity)
        self.item.refresh_from_db(fields=['quantity'])
