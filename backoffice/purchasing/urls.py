from .views import purchases

urlpatterns = [
    *purchases.urlpatterns(),
]
