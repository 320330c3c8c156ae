"""
Cache invalidation signals
Automatically invalidate cached query sets when data changes, including
writes made as side effects (purchases creating payables, stock movements...)
"""
from django.db.models.signals import post_save, post_delete
import logging

from .cache_utils import invalidate_query_sets

logger = logging.getLogger(__name__)

MODEL_QUERY_SETS = {
    'parties.Client': ('clients', 'events'),
    'staff.Employee': ('employees', 'events'),
    'staff.EmployeeRole': ('settings', 'employees'),
    'staff.Skill': ('settings', 'employees'),
    'staff.EmployeeSkill': ('employees',),
    'staff.EmployeePayment': ('employee_payments', 'dashboard_metrics'),
    'events.Event': ('events', 'dashboard_metrics', 'upcoming_events', 'clients'),
    'events.EventEmployee': ('events', 'upcoming_events'),
    'events.EventCategory': ('settings', 'events'),
    'events.Package': ('settings', 'events'),
    'inventory.InventoryItem': ('inventory', 'dashboard_metrics', 'events'),
    'inventory.StockMovement': ('inventory', 'dashboard_metrics'),
    'purchasing.Purchase': ('purchases', 'inventory', 'dashboard_metrics'),
    'finance.FinancialTransaction': ('transactions', 'dashboard_metrics'),
    'timetracking.TimeRecord': ('time_records',),
    'core.Setting': ('settings',),
}


def _handler(query_sets):
    def handler(sender, **kwargs):
        invalidate_query_sets(*query_sets)
    return handler


# Signal receivers hold weak references by default; keep the handlers alive here
_handlers = []


def connect_cache_signals():
    for label, query_sets in MODEL_QUERY_SETS.items():
        handler = _handler(query_sets)
        _handlers.append(handler)
        post_save.connect(handler, sender=label, dispatch_uid=f'cache_save_{label}')
        post_delete.connect(handler, sender=label, dispatch_uid=f'cache_delete_{label}')
    logger.debug(f"Connected cache invalidation for {len(MODEL_QUERY_SETS)} models")
