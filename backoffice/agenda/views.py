import logging

from django.utils.dateparse import parse_date
from rest_framework import serializers
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated

from backoffice.core.permissions import role_access
from backoffice.events.views import events
from .calendar import VIEWS, CalendarBuckets, shift_anchor, today

logger = logging.getLogger(__name__)

AGENDA_PARAMS = ('view', 'date', 'step', 'max_visible')


def _anchor(params):
    raw = params.get('date')
    if not raw:
        return today()
    try:
        anchor = parse_date(raw)
    except ValueError:
        anchor = None
    if anchor is None:
        raise serializers.ValidationError({'date': 'Data inválida'})
    return anchor


def _neighbour(anchor, view, step):
    try:
        return shift_anchor(anchor, view, step).isoformat()
    except (ValueError, OverflowError):
        return None


def _event_params(params):
    return {key: value for key, value in params.items() if key not in AGENDA_PARAMS}


@api_view(['GET'])
@permission_classes([IsAuthenticated, role_access('agenda')])
def agenda(request):
    """Events grouped by month, week or year around an anchor day"""
    view = request.query_params.get('view', 'month')
    if view not in VIEWS:
        raise serializers.ValidationError({'view': f"Visualização deve ser uma de: {', '.join(VIEWS)}"})
    anchor = _anchor(request.query_params)
    try:
        step = int(request.query_params.get('step', 0))
    except ValueError:
        raise serializers.ValidationError({'step': 'Passo deve ser um número inteiro'})
    if step:
        try:
            anchor = shift_anchor(anchor, view, step)
        except (ValueError, OverflowError):
            raise serializers.ValidationError({'step': 'Passo fora do intervalo de datas'})

    buckets = CalendarBuckets(events.list_data(request, _event_params(request.query_params)))
    payload = {
        'view': view,
        'anchor': anchor.isoformat(),
        'previous': _neighbour(anchor, view, -1),
        'next': _neighbour(anchor, view, 1),
        'today': today().isoformat(),
    }
    if view == 'month':
        try:
            max_visible = max(int(request.query_params.get('max_visible', 2)), 0)
        except ValueError:
            raise serializers.ValidationError({'max_visible': 'Deve ser um número inteiro'})
        payload['cells'] = [cell.to_dict() for cell in buckets.month_view(anchor, max_visible)]
    elif view == 'week':
        payload.update(buckets.week_view(anchor).to_dict())
    else:
        payload['months'] = [month.to_dict() for month in buckets.year_view(anchor)]
    return Response(payload)
