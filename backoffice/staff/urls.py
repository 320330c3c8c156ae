from django.urls import path
from .views import (
    employees, employee_payments, employee_roles, skills,
    employee_payment_list_create, employee_skills,
)

urlpatterns = [
    # Employee endpoints
    *employees.urlpatterns(),
    path('employees/<int:pk>/payments', employee_payment_list_create, name='employee-payment-list-create'),
    path('employees/<int:pk>/skills', employee_skills, name='employee-skills'),

    # Payment endpoints
    *employee_payments.urlpatterns(),

    # Settings endpoints
    *employee_roles.urlpatterns('settings/employee-roles'),
    *skills.urlpatterns('settings/skills'),
]
