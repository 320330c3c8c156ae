import logging

from django.contrib.auth import get_user_model
from django.shortcuts import get_object_or_404
from django.utils import timezone
from rest_framework import serializers, status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated

from backoffice.core.crud import CrudResource
from backoffice.core.dates import filter_by_date_range
from backoffice.core.permissions import role_access
from .models import TimeRecord
from .serializers import TimeRecordSerializer
from .summary import time_summary

logger = logging.getLogger(__name__)

User = get_user_model()


class TimeRecordResource(CrudResource):
    """Punches of the requesting user"""
    def get_queryset(self, request):
        return TimeRecord.objects.filter(user=request.user).select_related('user')

    def perform_save(self, serializer, request):
        record = serializer.save(user=request.user, timestamp=timezone.now())
        logger.info(f"User {request.user.username} {record.type} at {record.timestamp:%H:%M}")
        return record


time_records = TimeRecordResource(
    name='time-records',
    model=TimeRecord,
    serializer_class=TimeRecordSerializer,
    access='time_tracking',
    query_set='time_records',
    date_field='timestamp',
)


@api_view(['DELETE'])
@permission_classes([IsAuthenticated, role_access('time_tracking', write_action='manage')])
def time_record_delete(request, pk):
    record = get_object_or_404(TimeRecord, pk=pk)
    time_records.destroy(record, request)
    return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['GET'])
@permission_classes([IsAuthenticated, role_access('time_tracking')])
def time_record_status(request):
    """Whether the user is clocked in, with the latest punch"""
    latest = TimeRecord.latest_for(request.user)
    return Response({
        'is_clocked_in': latest is not None and latest.type == 'clock_in',
        'latest_record': TimeRecordSerializer(latest).data if latest else None,
    })


@api_view(['GET'])
@permission_classes([IsAuthenticated, role_access('time_tracking')])
def time_record_summary(request):
    """Worked, expected and balance minutes for today, this week and this month"""
    return Response(time_summary(TimeRecord.objects.filter(user=request.user), timezone.now()))


@api_view(['GET'])
@permission_classes([IsAuthenticated, role_access('time_tracking', read_action='manage')])
def time_record_all(request):
    """Punches of every user, optionally narrowed to one user"""
    records = TimeRecord.objects.select_related('user')
    user_id = request.query_params.get('user')
    if user_id:
        if not user_id.isdigit():
            raise serializers.ValidationError({'user': 'Usuário inválido'})
        records = records.filter(user=get_object_or_404(User, pk=int(user_id)))
    data = TimeRecordSerializer(records, many=True).data
    return Response(filter_by_date_range(data, 'timestamp', time_records.selection(request)))
