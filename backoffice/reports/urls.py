from django.urls import path
from .views import dashboard_metrics_view, upcoming_events_view, financial_report, financial_report_export

urlpatterns = [
    path('dashboard/metrics', dashboard_metrics_view, name='dashboard-metrics'),
    path('dashboard/upcoming-events', upcoming_events_view, name='dashboard-upcoming-events'),
    path('reports/financial', financial_report, name='report-financial'),
    path('reports/financial/export', financial_report_export, name='report-financial-export'),
]
