"""
Query-set caching utilities

Cached results are grouped in named query sets ("events", "dashboard_metrics",
...). Each query set carries a version number stored in the cache itself;
invalidating a query set bumps its version so every key built from the old
version is never read again, whatever the cache backend.
"""
from django.core.cache import cache
from functools import wraps
import hashlib
import logging
import time

logger = logging.getLogger(__name__)

# Cache TTLs (in seconds)
LIST_CACHE_TTL = 120  # 2 minutes
DASHBOARD_CACHE_TTL = 300  # 5 minutes
UPCOMING_EVENTS_CACHE_TTL = 120  # 2 minutes

QUERY_SETS = (
    'clients',
    'employees',
    'employee_payments',
    'events',
    'inventory',
    'purchases',
    'transactions',
    'time_records',
    'settings',
    'users',
    'dashboard_metrics',
    'upcoming_events',
)


def make_cache_key(prefix, *args, **kwargs):
    """Generate a unique cache key from arguments"""
    key_data = f"{prefix}:{args}:{sorted(kwargs.items())}"
    # Hash it to keep key length reasonable
    key_hash = hashlib.md5(key_data.encode()).hexdigest()
    return f"{prefix}:{key_hash}"


def _version_key(query_set):
    return f"qs_version:{query_set}"


def get_query_set_version(query_set):
    version = cache.get(_version_key(query_set))
    if version is None:
        cache.add(_version_key(query_set), 1, None)
        version = cache.get(_version_key(query_set)) or 1
    return version


def query_set_key(query_set, *args, **kwargs):
    """Cache key bound to the current version of ``query_set``"""
    version = get_query_set_version(query_set)
    return make_cache_key(f"{query_set}:v{version}", *args, **kwargs)


def cached_query(query_set, cache_ttl=60):
    """
    Decorator to cache a function result inside a query set

    Usage:
        @cached_query('dashboard_metrics', cache_ttl=300)
        def build_metrics(today):
            return expensive_aggregation(today)
    """
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            cache_key = query_set_key(query_set, func.__name__, *args, **kwargs)

            cached_data = cache.get(cache_key)
            if cached_data is not None:
                logger.debug(f"Cache HIT for {query_set}: {cache_key}")
                return cached_data

            logger.debug(f"Cache MISS for {query_set}: {cache_key}")
            result = func(*args, **kwargs)
            cache.set(cache_key, result, cache_ttl)
            return result
        return wrapper
    return decorator


def invalidate_query_sets(*query_sets):
    """Drop every cached entry of the given query sets"""
    for query_set in query_sets:
        if query_set not in QUERY_SETS:
            logger.warning(f"Invalidating unknown query set: {query_set}")
        key = _version_key(query_set)
        try:
            try:
                cache.incr(key)
            except ValueError:
                # Version key missing or evicted; restart from a value never used before
                cache.set(key, int(time.time() * 1000), None)
        except Exception as e:
            logger.warning(f"Could not invalidate query set {query_set}: {str(e)}")
            continue
        logger.debug(f"Invalidated query set: {query_set}")
