from django.urls import path
from .views import inventory, inventory_movements

urlpatterns = [
    *inventory.urlpatterns(),
    path('inventory/<int:pk>/movements', inventory_movements, name='inventory-movements'),
]
