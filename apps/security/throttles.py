"""
Request throttles.

Fixed-window counters kept in the default cache: the first request of a
window creates the counter with `cache.add`, every request bumps it with
`cache.incr`, so concurrent requests never lose an increment. Loopback
clients are never throttled.
"""

import logging
import re
import time

from rest_framework.throttling import SimpleRateThrottle

from .utils import get_client_ip, is_loopback

logger = logging.getLogger(__name__)

PERIODS = {'s': 1, 'm': 60, 'h': 3600, 'd': 86400}
RATE_PATTERN = re.compile(r'^(\d+)/(\d*)([smhd])')


class PolicyRateThrottle(SimpleRateThrottle):
    """
    Base throttle with atomic fixed-window counting.

    Rates accept a period multiplier: '5/20m' is five requests per
    twenty minutes, '10/m' ten per minute.
    """

    cache_format = 'throttle_%(scope)s_%(ident)s'

    def parse_rate(self, rate):
        if rate is None:
            return (None, None)

        match = RATE_PATTERN.match(rate)
        if not match:
            raise ValueError(f"Invalid throttle rate: {rate!r}")

        num, multiplier, unit = match.groups()
        return int(num), int(multiplier or 1) * PERIODS[unit]

    def get_ident(self, request):
        return get_client_ip(request)

    def allow_request(self, request, view):
        if self.rate is None:
            return True

        if is_loopback(self.get_ident(request)):
            return True

        key = self.get_cache_key(request, view)
        if key is None:
            return True

        self.now = time.time()
        window = int(self.now // self.duration)
        self.key = f'{key}:{window}'

        self.cache.add(self.key, 0, self.duration)
        try:
            count = self.cache.incr(self.key)
        except ValueError:
            # Window expired between add and incr
            self.cache.set(self.key, 1, self.duration)
            count = 1

        if count > self.num_requests:
            return self.throttle_failure()
        return True

    def throttle_failure(self):
        logger.warning("Throttled request: scope=%s key=%s", self.scope, self.key)
        return False

    def wait(self):
        return self.duration - (self.now % self.duration)


class IPRateThrottle(PolicyRateThrottle):
    """Counts requests per client address."""

    def get_cache_key(self, request, view):
        return self.cache_format % {
            'scope': self.scope,
            'ident': self.get_ident(request),
        }


class NotificationEmailRateThrottle(IPRateThrottle):
    """Endpoints that send email: 5 per IP per hour."""
    scope = 'notification_email'


class RegistrationRateThrottle(IPRateThrottle):
    """Sign-ups: 3 per IP per hour."""
    scope = 'registration'


class DebtAccessRateThrottle(IPRateThrottle):
    """Public token lookups: 10 per IP per minute."""
    scope = 'debt_access'


class LoginRateThrottle(PolicyRateThrottle):
    """Sign-in attempts: 5 per email per 20 minutes."""
    scope = 'login'

    def get_cache_key(self, request, view):
        email = request.data.get('email') if hasattr(request, 'data') else None
        if not email or not isinstance(email, str):
            return None

        return self.cache_format % {
            'scope': self.scope,
            'ident': email.strip().lower(),
        }
