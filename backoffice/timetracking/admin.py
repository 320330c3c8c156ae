from django.contrib import admin
from .models import TimeRecord


@admin.register(TimeRecord)
class TimeRecordAdmin(admin.ModelAdmin):
    list_display = ['user', 'type', 'timestamp', 'notes']
    list_filter = ['type', 'timestamp']
    search_fields = ['user__username', 'user__name', 'notes']
    date_hierarchy = 'timestamp'
