from django.urls import path
from .views import time_records, time_record_delete, time_record_status, time_record_summary, time_record_all

urlpatterns = [
    path('time-records', time_records.list_create_view, name='time-records-list-create'),
    path('time-records/status', time_record_status, name='time-records-status'),
    path('time-records/summary', time_record_summary, name='time-records-summary'),
    path('time-records/all', time_record_all, name='time-records-all'),
    path('time-records/<int:pk>', time_record_delete, name='time-records-delete'),
]
