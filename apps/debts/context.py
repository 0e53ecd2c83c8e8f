"""Request-scoped viewer context handed to services instead of globals."""

from dataclasses import dataclass
from typing import Optional

from django.conf import settings
from django.utils import translation

from apps.accounts.models import User
from apps.security.utils import get_client_ip


@dataclass(frozen=True)
class RequestContext:
    """Who is asking, in which locale, from where."""

    user: Optional[User]
    locale: str
    ip_address: Optional[str] = None

    @classmethod
    def from_request(cls, request) -> 'RequestContext':
        user = getattr(request, 'user', None)
        if user is not None and not user.is_authenticated:
            user = None

        locale = getattr(request, 'LANGUAGE_CODE', None) or translation.get_language()
        if locale not in dict(settings.LANGUAGES):
            locale = settings.LANGUAGE_CODE

        return cls(user=user, locale=locale, ip_address=get_client_ip(request))

    @property
    def is_anonymous(self) -> bool:
        return self.user is None
