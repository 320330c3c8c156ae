from decimal import Decimal, ROUND_HALF_UP
from django.db import models


class EventCategory(models.Model):
    name = models.CharField(max_length=100, unique=True)
    description = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'event_categories'
        ordering = ['name']
        verbose_name_plural = 'Event categories'

    def __str__(self):
        return self.name


class Package(models.Model):
    """Sellable service package referenced by contracts"""
    name = models.CharField(max_length=100, unique=True)
    description = models.TextField(blank=True)
    price = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'packages'
        ordering = ['name']

    def __str__(self):
        return self.name


class Event(models.Model):
    """A booking: one party or corporate event for a client"""
    STATUS_CHOICES = [
        ('scheduled', 'Agendado'),
        ('completed', 'Concluído'),
        ('cancelled', 'Cancelado'),
    ]

    PAYMENT_METHOD_CHOICES = [
        ('pix', 'PIX'),
        ('dinheiro', 'Dinheiro'),
        ('cartao', 'Cartão'),
        ('transferencia', 'Transferência'),
        ('link', 'Link de pagamento'),
    ]

    CARD_TYPE_CHOICES = [
        ('credito', 'Crédito'),
        ('debito', 'Débito'),
    ]

    client = models.ForeignKey('parties.Client', on_delete=models.PROTECT, related_name='events')
    category = models.ForeignKey(EventCategory, on_delete=models.SET_NULL, null=True, blank=True, related_name='events')
    package = models.ForeignKey(Package, on_delete=models.SET_NULL, null=True, blank=True, related_name='events')
    title = models.CharField(max_length=200)
    date = models.DateTimeField()
    end_time = models.TimeField(null=True, blank=True)
    duration_hours = models.DecimalField(max_digits=4, decimal_places=1, default=Decimal('3'))
    location = models.CharField(max_length=255)
    contract_value = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0.00'))
    entry_value = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    payment_method = models.CharField(max_length=20, choices=PAYMENT_METHOD_CHOICES, blank=True)
    card_type = models.CharField(max_length=10, choices=CARD_TYPE_CHOICES, blank=True)
    payment_date = models.DateField(null=True, blank=True)
    installments = models.PositiveSmallIntegerField(default=1)
    estimated_children = models.PositiveSmallIntegerField(null=True, blank=True)
    package_notes = models.CharField(max_length=255, blank=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='scheduled')
    notes = models.TextField(blank=True)
    characters = models.ManyToManyField('inventory.InventoryItem', blank=True, related_name='events')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'events'
        ordering = ['date']
        indexes = [
            models.Index(fields=['date'], name='events_date_idx'),
            models.Index(fields=['status'], name='events_status_idx'),
        ]

    def __str__(self):
        return self.title

    @property
    def installment_value(self):
        """(contract value - entry) split over the installments, 2 decimals"""
        count = self.installments if self.installments and self.installments > 0 else 1
        remaining = (self.contract_value or Decimal('0')) - (self.entry_value or Decimal('0'))
        return (remaining / count).quantize(Decimal('0.01'), rounding=ROUND_HALF_UP)


class EventEmployee(models.Model):
    """Employee staffed on an event, with the fee (cachê) paid for it"""
    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name='event_employees')
    employee = models.ForeignKey('staff.Employee', on_delete=models.CASCADE, related_name='event_assignments')
    cache_value = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)

    class Meta:
        db_table = 'event_employees'
        unique_together = [['event', 'employee']]

    def __str__(self):
        return f"{self.employee} @ {self.event}"
