"""
Named in-process caches (cachetools).

Only immutable, input-derived values belong here (Babel Locale objects and
the like); money functions themselves never cache. Each cache is looked up
by name so tests and endpoints can inspect or reset it.

    from couplesfin.utils.cache_utils import get_ttl_cache

    _locales = get_ttl_cache("babel_locales", maxsize=32, ttl=86400)
"""
from typing import Any, Dict, Optional

import structlog
from cachetools import TTLCache

logger = structlog.get_logger(__name__)

DEFAULT_MAXSIZE = 256
DEFAULT_TTL_SECONDS = 3600

_caches: Dict[str, TTLCache] = {}


def get_ttl_cache(name: str, maxsize: int = DEFAULT_MAXSIZE, ttl: int = DEFAULT_TTL_SECONDS) -> TTLCache:
    """
    Return the cache registered under `name`, creating it on first use.

    maxsize and ttl only apply at creation: later calls get the existing
    cache unchanged.
    """
    cache = _caches.get(name)
    if cache is None:
        cache = TTLCache(maxsize=maxsize, ttl=ttl)
        _caches[name] = cache
        logger.debug("TTL cache created", cache_name=name, maxsize=maxsize, ttl_seconds=ttl)
    return cache


def clear_cache(name: str) -> bool:
    """Empty a cache. False when no cache has that name."""
    cache = _caches.get(name)
    if cache is None:
        return False
    cache.clear()
    logger.debug("TTL cache cleared", cache_name=name)
    return True


def get_cache_stats(name: str) -> Optional[Dict[str, Any]]:
    """Size and limits of a cache, or None when no cache has that name."""
    cache = _caches.get(name)
    if cache is None:
        return None
    return {"name": name, "current_size": cache.currsize, "maxsize": cache.maxsize, "ttl": cache.ttl}
