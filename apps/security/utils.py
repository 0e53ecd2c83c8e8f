"""Client address helpers shared by throttles and middleware."""

import ipaddress

from rest_framework.settings import api_settings

RATE_LIMIT_MESSAGE = 'Rate limit exceeded. Please try again later.'


def get_client_ip(request):
    """
    Return the client address, honouring X-Forwarded-For only for
    NUM_PROXIES trusted hops.
    """
    remote_addr = request.META.get('REMOTE_ADDR')
    xff = request.META.get('HTTP_X_FORWARDED_FOR')
    num_proxies = api_settings.NUM_PROXIES

    if num_proxies and xff:
        addrs = [addr.strip() for addr in xff.split(',') if addr.strip()]
        if addrs:
            return addrs[-min(num_proxies, len(addrs))]

    return remote_addr


def is_loopback(address):
    if not address:
        return False
    try:
        return ipaddress.ip_address(address).is_loopback
    except ValueError:
        return False
