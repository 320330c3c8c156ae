from django.urls import path
from .views import events, event_categories, packages, event_contract

urlpatterns = [
    # Event endpoints
    *events.urlpatterns(),
    path('events/<int:pk>/contract', event_contract, name='event-contract'),

    # Settings endpoints
    *event_categories.urlpatterns('settings/event-categories'),
    *packages.urlpatterns('settings/packages'),
]
