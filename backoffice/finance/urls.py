from django.urls import path
from .views import transactions, transaction_pay

urlpatterns = [
    *transactions.urlpatterns('financial/transactions'),
    path('financial/transactions/<int:pk>/pay', transaction_pay, name='transaction-pay'),
]
