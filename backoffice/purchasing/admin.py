from django.contrib import admin
from .models import Purchase


@admin.register(Purchase)
class PurchaseAdmin(admin.ModelAdmin):
    list_display = ['supplier', 'description', 'amount', 'purchase_date', 'is_installment', 'installments', 'item']
    list_filter = ['is_installment', 'purchase_date']
    search_fields = ['supplier', 'description']
    date_hierarchy = 'purchase_date'
