from django.urls import path
from .views import (
    CustomTokenObtainPairView, CustomTokenRefreshView, register, user_me, users,
    system_setting_list_upsert, system_setting_detail, audit_log_list,
)

urlpatterns = [
    # Auth endpoints
    path('auth/register', register, name='register'),
    path('auth/login', CustomTokenObtainPairView.as_view(), name='token_obtain_pair'),
    path('auth/refresh', CustomTokenRefreshView.as_view(), name='token_refresh'),
    path('auth/me', user_me, name='user-me'),

    # User endpoints
    *users.urlpatterns(),

    # System setting endpoints
    path('settings/system', system_setting_list_upsert, name='system-setting-list-upsert'),
    path('settings/system/<str:key>', system_setting_detail, name='system-setting-detail'),

    # AuditLog endpoints
    path('audit-logs', audit_log_list, name='audit-log-list'),
]
