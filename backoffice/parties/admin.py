from django.contrib import admin
from .models import Client


@admin.register(Client)
class ClientAdmin(admin.ModelAdmin):
    list_display = ['name', 'person_type', 'phone', 'email', 'cidade', 'created_at']
    list_filter = ['person_type', 'estado', 'created_at']
    search_fields = ['name', 'phone', 'email', 'cpf', 'cnpj']
    ordering = ['name']
