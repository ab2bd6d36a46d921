from django.core.cache import cache as default_cache
from rest_framework.throttling import SimpleRateThrottle


class IdentityRateThrottle(SimpleRateThrottle):
    """
    Per-identity request limit: the authenticated user, else the client IP.

    Counters live in the Django cache (Redis in production, local memory
    otherwise). Assign ``cache`` to use a different backend.
    """
    scope = 'orders'
    cache = default_cache

    def get_cache_key(self, request, view):
        if request.user and request.user.is_authenticated:
            ident = f'user:{request.user.pk}'
        else:
            ident = f'ip:{self.get_ident(request)}'
        return self.cache_format % {'scope': self.scope, 'ident': ident}
