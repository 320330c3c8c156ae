import logging

from rest_framework import serializers, status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.db import transaction
from django.shortcuts import get_object_or_404

from backoffice.core.cache_utils import invalidate_query_sets
from backoffice.core.crud import CrudResource, EntityForm
from backoffice.core.dates import filter_by_date_range
from backoffice.core.permissions import role_access
from backoffice.core.utils import create_audit_log
from .filters import EmployeeFilter
from .models import Employee, EmployeeRole, Skill, EmployeeSkill, EmployeePayment
from .serializers import (
    EmployeeSerializer, EmployeeRoleSerializer, SkillSerializer, EmployeePaymentSerializer,
)

logger = logging.getLogger(__name__)


class EmployeeResource(CrudResource):
    def get_queryset(self, request):
        return Employee.objects.select_related('user').prefetch_related('skills')

    def perform_destroy(self, instance, request):
        user = instance.user
        instance.delete()
        if user is not None:
            # The login goes away with the employee record
            user.delete()


employees = EmployeeResource(
    name='employees',
    model=Employee,
    serializer_class=EmployeeSerializer,
    access='employees',
    invalidates=('employees', 'events'),
    filterset_class=EmployeeFilter,
)

employee_payments = CrudResource(
    name='employee-payments',
    model=EmployeePayment,
    serializer_class=EmployeePaymentSerializer,
    access='employee_payments',
    query_set='employee_payments',
    invalidates=('employee_payments', 'dashboard_metrics'),
    date_field='payment_date',
)

employee_roles = CrudResource(
    name='employee-roles',
    model=EmployeeRole,
    serializer_class=EmployeeRoleSerializer,
    access='settings',
    query_set='settings',
    cache_lists=False,
)

skills = CrudResource(
    name='skills',
    model=Skill,
    serializer_class=SkillSerializer,
    access='settings',
    query_set='settings',
    cache_lists=False,
)


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, role_access('employee_payments')])
def employee_payment_list_create(request, pk):
    """Payments made to one employee, filtered by payment date"""
    employee = get_object_or_404(Employee, pk=pk)
    if request.method == 'GET':
        payments = employee.payments.select_related('employee')
        data = EmployeePaymentSerializer(payments, many=True).data
        return Response(filter_by_date_range(data, 'payment_date', employee_payments.selection(request)))

    data = request.data.dict() if hasattr(request.data, 'dict') else dict(request.data)
    data['employee'] = employee.pk
    form = EntityForm(employee_payments, request)
    form.open()
    payment = form.submit(data)
    return Response(employee_payments.detail_data(request, payment), status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT'])
@permission_classes([IsAuthenticated, role_access('employees')])
def employee_skills(request, pk):
    """List or replace the skills of one employee"""
    employee = get_object_or_404(Employee, pk=pk)
    if request.method == 'GET':
        return Response(SkillSerializer(employee.skills.all(), many=True).data)

    skill_ids = request.data.get('skill_ids')
    if not isinstance(skill_ids, list):
        raise serializers.ValidationError({'message': 'skill_ids deve ser uma lista'})
    try:
        skill_ids = {int(skill_id) for skill_id in skill_ids}
    except (TypeError, ValueError):
        raise serializers.ValidationError({'message': 'skill_ids deve conter apenas números'})
    found = set(Skill.objects.filter(id__in=skill_ids).values_list('id', flat=True))
    missing = sorted(skill_ids - found)
    if missing:
        raise serializers.ValidationError({'message': f'Habilidades não encontradas: {missing}'})

    with transaction.atomic():
        EmployeeSkill.objects.filter(employee=employee).delete()
        EmployeeSkill.objects.bulk_create(
            [EmployeeSkill(employee=employee, skill_id=skill_id) for skill_id in sorted(found)]
        )
    invalidate_query_sets('employees')
    create_audit_log(request=request, action='update', model_name='Employee',
                     object_id=employee.pk, object_name=employee.name,
                     changes={'skill_ids': sorted(found)})
    return Response(SkillSerializer(employee.skills.all(), many=True).data)
