from django.contrib import admin
from .models import FinancialTransaction


@admin.register(FinancialTransaction)
class FinancialTransactionAdmin(admin.ModelAdmin):
    list_display = ['description', 'type', 'amount', 'due_date', 'is_paid', 'paid_date', 'event']
    list_filter = ['type', 'is_paid', 'due_date']
    search_fields = ['description', 'notes']
    date_hierarchy = 'due_date'
    raw_id_fields = ['event', 'purchase']
