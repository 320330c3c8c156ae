from django.contrib import admin
from .models import InventoryItem, StockMovement


@admin.register(InventoryItem)
class InventoryItemAdmin(admin.ModelAdmin):
    list_display = ['name', 'type', 'quantity', 'min_quantity', 'unit', 'cost_price', 'sale_price']
    list_filter = ['type']
    search_fields = ['name']
    ordering = ['name']


@admin.register(StockMovement)
class StockMovementAdmin(admin.ModelAdmin):
    list_display = ['item', 'type', 'quantity', 'notes', 'created_at']
    list_filter = ['type', 'created_at']
    search_fields = ['item__name', 'notes']
    readonly_fields = ['created_at']
    date_hierarchy = 'created_at'
