from django.urls import path
from .views import clients, cep_lookup

urlpatterns = [
    # Client endpoints
    *clients.urlpatterns(),

    # Address lookup
    path('address/cep/<str:cep>', cep_lookup, name='address-cep-lookup'),
]
