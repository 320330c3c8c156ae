from django.contrib import admin
from .models import Event, EventCategory, EventEmployee, Package


class EventEmployeeInline(admin.TabularInline):
    model = EventEmployee
    extra = 0
    autocomplete_fields = ['employee']


@admin.register(Event)
class EventAdmin(admin.ModelAdmin):
    list_display = ['title', 'client', 'date', 'location', 'contract_value', 'status']
    list_filter = ['status', 'category', 'date']
    search_fields = ['title', 'location', 'client__name']
    date_hierarchy = 'date'
    filter_horizontal = ['characters']
    inlines = [EventEmployeeInline]


@admin.register(EventCategory)
class EventCategoryAdmin(admin.ModelAdmin):
    list_display = ['name', 'description', 'created_at']
    search_fields = ['name']


@admin.register(Package)
class PackageAdmin(admin.ModelAdmin):
    list_display = ['name', 'price', 'created_at']
    search_fields = ['name']
