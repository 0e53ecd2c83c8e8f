import logging

from django.conf import settings
from django.core.cache import cache
from django.http import JsonResponse

from .utils import RATE_LIMIT_MESSAGE, get_client_ip, is_loopback

logger = logging.getLogger(__name__)


class AdminProbeBlockMiddleware:
    """
    Block clients probing admin paths without a User-Agent.

    Each probe is rejected. ADMIN_PROBE_MAX_RETRY probes within
    ADMIN_PROBE_FIND_TIME seconds ban the address from every path for
    ADMIN_PROBE_BAN_TIME seconds. Loopback clients are exempt.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        ip = get_client_ip(request)

        if ip and not is_loopback(ip):
            if self.is_banned(ip):
                return self.blocked_response()

            if self.is_suspicious(request):
                self.register_probe(ip)
                return self.blocked_response()

        return self.get_response(request)

    @staticmethod
    def is_suspicious(request):
        return '/admin' in request.path and not request.META.get('HTTP_USER_AGENT', '').strip()

    @staticmethod
    def ban_key(ip):
        return f'admin_probe_ban_{ip}'

    @staticmethod
    def count_key(ip):
        return f'admin_probe_count_{ip}'

    def is_banned(self, ip):
        return cache.get(self.ban_key(ip)) is not None

    def register_probe(self, ip):
        key = self.count_key(ip)
        cache.add(key, 0, settings.ADMIN_PROBE_FIND_TIME)
        try:
            count = cache.incr(key)
        except ValueError:
            cache.set(key, 1, settings.ADMIN_PROBE_FIND_TIME)
            count = 1

        if count >= settings.ADMIN_PROBE_MAX_RETRY:
            cache.set(self.ban_key(ip), True, settings.ADMIN_PROBE_BAN_TIME)
            cache.delete(key)
            logger.warning(
                "Banned %s for %ss after %s admin probes",
                ip, settings.ADMIN_PROBE_BAN_TIME, count
            )

    @staticmethod
    def blocked_response():
        return JsonResponse({'error': RATE_LIMIT_MESSAGE}, status=429)
