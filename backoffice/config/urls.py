"""
URL configuration for the backoffice project.

All API routes live under ``/api/`` without trailing slashes.
"""
from django.contrib import admin
from django.urls import path, include

admin.site.site_header = "Backoffice Admin Panel"
admin.site.site_title = "Backoffice Admin Portal"
admin.site.index_title = "Event management administration"

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/', include('backoffice.core.urls')),
    path('api/', include('backoffice.parties.urls')),
    path('api/', include('backoffice.staff.urls')),
    path('api/', include('backoffice.inventory.urls')),
    path('api/', include('backoffice.events.urls')),
    path('api/', include('backoffice.purchasing.urls')),
    path('api/', include('backoffice.finance.urls')),
    path('api/', include('backoffice.timetracking.urls')),
    path('api/', include('backoffice.reports.urls')),
    path('api/', include('backoffice.agenda.urls')),
]
