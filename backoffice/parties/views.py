import logging

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated

from backoffice.core.crud import CrudResource
from backoffice.core.permissions import EMPLOYEE, role_access, user_role
from .cep import CepError, CepNotFound, InvalidCep, lookup_cep
from .filters import ClientFilter
from .models import Client
from .serializers import ClientSerializer

logger = logging.getLogger(__name__)


class ClientResource(CrudResource):
    def get_queryset(self, request):
        queryset = Client.objects.all()
        if user_role(request.user) == EMPLOYEE:
            # Employees only see clients of the events they work on
            queryset = queryset.filter(events__event_employees__employee__user=request.user).distinct()
        return queryset


clients = ClientResource(
    name='clients',
    model=Client,
    serializer_class=ClientSerializer,
    access='clients',
    invalidates=('clients', 'events'),
    date_field='created_at',
    filterset_class=ClientFilter,
)


@api_view(['GET'])
@permission_classes([IsAuthenticated, role_access('clients')])
def cep_lookup(request, cep):
    """Resolve a CEP into street, district, city and state"""
    try:
        address = lookup_cep(cep)
    except InvalidCep:
        return Response({'message': InvalidCep.message}, status=status.HTTP_400_BAD_REQUEST)
    except CepNotFound:
        return Response({'message': CepNotFound.message}, status=status.HTTP_404_NOT_FOUND)
    except CepError:
        return Response({'message': CepError.message}, status=status.HTTP_502_BAD_GATEWAY)
    return Response(address)
