import logging

from django.conf import settings
from django.db import connection
from django.db.utils import DatabaseError
from django.http import JsonResponse
from django.urls import reverse
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import NotFound, PermissionDenied, Throttled
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import exception_handler
from drf_spectacular.utils import extend_schema

from apps.debts.abilities import Capability, can
from apps.debts.context import RequestContext
from apps.debts.services import DebtNotFoundError
from apps.security.utils import RATE_LIMIT_MESSAGE

logger = logging.getLogger('apps.config')


def error_404(request, exception):
    """Custom 404 handler."""
    return JsonResponse({
        'error': 'Not found',
        'status': 404
    }, status=404)


def error_500(request):
    """Custom 500 handler."""
    return JsonResponse({
        'error': 'Internal server error',
        'status': 500
    }, status=500)


def api_exception_handler(exc, context):
    """
    DRF exception handler.

    Every throttle answers with the same 429 body and no Retry-After
    header. Denials and misses carry their message under "error".
    """
    if isinstance(exc, Throttled):
        return Response({'error': RATE_LIMIT_MESSAGE}, status=status.HTTP_429_TOO_MANY_REQUESTS)

    response = exception_handler(exc, context)
    if response is not None and isinstance(exc, (PermissionDenied, NotFound, DebtNotFoundError)):
        response.data = {'error': str(exc.detail)}
    return response


@extend_schema(exclude=True)
@api_view(['GET'])
@permission_classes([AllowAny])
def health_check(request):
    """Liveness probe; also touches the database."""
    try:
        with connection.cursor() as cursor:
            cursor.execute('SELECT 1')
    except DatabaseError:
        logger.exception("Health check database query failed")
        return Response({'status': 'unhealthy'}, status=status.HTTP_503_SERVICE_UNAVAILABLE)
    return Response({'status': 'ok'})


@extend_schema(
    description="Homepage: the viewer's role and the links available to them.",
    tags=['public'],
)
@api_view(['GET'])
@permission_classes([AllowAny])
def homepage(request):
    ctx = RequestContext.from_request(request)
    viewer = ctx.user

    links = {}
    if can(viewer, Capability.READ_DASHBOARD):
        links['dashboard'] = reverse('debts:admin-dashboard')
        links['debts'] = reverse('debts:admin-debt-list')
    if can(viewer, Capability.READ_OWN_DEBTS):
        links['my_debts'] = reverse('debts:customer-debt-list')
    if can(viewer, Capability.UPDATE_OWN_ACCOUNT):
        links['account'] = reverse('users:current-user')
    if can(viewer, Capability.ACCESS_REGISTRATION):
        links['register'] = reverse('users:register')
        links['login'] = reverse('users:login')

    return Response({
        'message': 'Dlužírna',
        'locale': ctx.locale,
        'languages': [code for code, _ in settings.LANGUAGES],
        'role': viewer.role if viewer is not None else None,
        'links': links,
    })
