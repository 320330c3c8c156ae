import logging

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.shortcuts import get_object_or_404

from backoffice.core.crud import CrudResource, EntityForm
from backoffice.core.dates import filter_by_date_range
from backoffice.core.permissions import role_access
from .filters import InventoryItemFilter
from .models import InventoryItem, StockMovement
from .serializers import InventoryItemSerializer, StockMovementSerializer

logger = logging.getLogger(__name__)


class StockMovementResource(CrudResource):
    def perform_save(self, serializer, request):
        movement = serializer.save()
        movement.apply()
        logger.info(f"Stock {movement.type} of {movement.quantity} for item {movement.item_id}")
        return movement


inventory = CrudResource(
    name='inventory',
    model=InventoryItem,
    serializer_class=InventoryItemSerializer,
    access='inventory',
    invalidates=('inventory', 'dashboard_metrics'),
    filterset_class=InventoryItemFilter,
)

stock_movements = StockMovementResource(
    name='stock-movements',
    model=StockMovement,
    serializer_class=StockMovementSerializer,
    access='inventory',
    query_set='inventory',
    invalidates=('inventory', 'dashboard_metrics'),
    date_field='created_at',
)


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, role_access('inventory')])
def inventory_movements(request, pk):
    """Stock movements of one item; POST records an entry or exit"""
    item = get_object_or_404(InventoryItem, pk=pk)
    if request.method == 'GET':
        data = StockMovementSerializer(item.movements.select_related('item'), many=True).data
        return Response(filter_by_date_range(data, 'created_at', stock_movements.selection(request)))

    data = request.data.dict() if hasattr(request.data, 'dict') else dict(request.data)
    data['item'] = item.pk
    form = EntityForm(stock_movements, request)
    form.open()
    movement = form.submit(data)
    return Response(stock_movements.detail_data(request, movement), status=status.HTTP_201_CREATED)
