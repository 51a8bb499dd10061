import weakref
from functools import wraps
from datetime import datetime


def ttl_cache(ttl_seconds=3600):
    """
    Cache a method's result per instance and argument tuple for ``ttl_seconds``.

    Entries live in a per-instance table keyed weakly on the instance, so a
    released service takes its cached results with it. Expired entries of an
    instance are dropped whenever that instance calls the method.
    """
    cache = weakref.WeakKeyDictionary()

    def decorator(func):
        @wraps(func)
        def wrapper(self, *args):
            now = datetime.now()
            entries = cache.setdefault(self, {})

            expired = [key for key, (timestamp, _) in entries.items()
                       if (now - timestamp).total_seconds() >= ttl_seconds]
            for key in expired:
                del entries[key]

            if args in entries:
                return entries[args][1]

            result = func(self, *args)
            entries[args] = (now, result)
            return result

        wrapper.cache_clear = cache.clear
        wrapper.cache_size = lambda: sum(len(entries) for entries in cache.values())
        return wrapper

    return decorator
