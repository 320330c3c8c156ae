from django.apps import AppConfig


class CoreConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'backoffice.core'

    def ready(self):
        """Connect cache invalidation signals when app is ready"""
        from backoffice.core.cache_signals import connect_cache_signals
        connect_cache_signals()
