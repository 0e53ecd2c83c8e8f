from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework import viewsets, status
from rest_framework.decorators import action, api_view, permission_classes, throttle_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from drf_spectacular.utils import extend_schema

from apps.security.throttles import DebtAccessRateThrottle, NotificationEmailRateThrottle

from .abilities import accessible_debts
from .context import RequestContext
from .permissions import CanReadDashboard, CanSendNotification, IsAdminRole, IsDebtOwner
from .serializers import (
    CustomerDebtSerializer,
    CustomerSummarySerializer,
    DashboardSerializer,
    DebtFilterSerializer,
    DebtListSerializer,
    DebtSerializer,
    DebtWriteSerializer,
    DisclosureSerializer,
    NotificationResultSerializer,
)
from .services import (
    DebtNotFoundError,
    DebtValidationError,
    create_debt,
    delete_debt,
    disclose_debt_by_token,
    get_customer_summary,
    get_dashboard_stats,
    resend_notification,
    update_debt,
)


class DebtPagination(PageNumberPagination):
    """Admin debt list pagination."""
    page_size = 25
    page_size_query_param = 'page_size'
    max_page_size = 100


class ScopedDebtLookupMixin:
    """
    Look debts up only inside the viewer's accessible set.

    A debt outside that set raises the same DebtNotFoundError as a
    nonexistent id.
    """

    def get_queryset(self):
        return accessible_debts(self.request.user).with_includes().recent()

    def get_object(self):
        queryset = self.filter_queryset(self.get_queryset())
        try:
            obj = queryset.get(pk=self.kwargs[self.lookup_field])
        except (queryset.model.DoesNotExist, DjangoValidationError, ValueError, TypeError):
            raise DebtNotFoundError()

        self.check_object_permissions(self.request, obj)
        return obj


# =============================================================================
# Public token page
# =============================================================================

@extend_schema(
    responses={200: DisclosureSerializer},
    description="Show a debt by its public token. Unknown tokens return 404.",
    tags=['public'],
)
@api_view(['GET'])
@permission_classes([AllowAny])
@throttle_classes([DebtAccessRateThrottle])
def public_debt(request, token):
    """Public debt page reachable through the emailed link."""
    context = RequestContext.from_request(request)
    disclosure = disclose_debt_by_token(viewer=context.user, token=token)
    return Response(DisclosureSerializer(disclosure).data)


# =============================================================================
# Admin
# =============================================================================

@extend_schema(
    responses={200: DashboardSerializer},
    description="Admin dashboard: debt counts and the ten most recent debts.",
    tags=['admin'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated, CanReadDashboard])
def admin_dashboard(request):
    return Response(DashboardSerializer(get_dashboard_stats()).data)


class AdminDebtViewSet(ScopedDebtLookupMixin, viewsets.ModelViewSet):
    """
    ViewSet for admin debt management.

    list: All debts, newest first (filter by status, search by email)
    create: Create a debt and email the customer
    retrieve: Get a specific debt
    update / partial_update: Edit a debt, optionally resending the email
    destroy: Delete a debt
    send_notification: Resend the notification email
    """

    serializer_class = DebtSerializer
    permission_classes = [IsAuthenticated, IsAdminRole]
    pagination_class = DebtPagination

    def get_queryset(self):
        queryset = super().get_queryset()

        if self.action != 'list':
            return queryset

        filter_serializer = DebtFilterSerializer(data=self.request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        params = filter_serializer.validated_data

        if params.get('status'):
            queryset = queryset.filter(status=params['status'])
        if params.get('search'):
            queryset = queryset.search_by_email(params['search'])

        return queryset

    def get_serializer_class(self):
        if self.action == 'list':
            return DebtListSerializer
        if self.action in ['create', 'update', 'partial_update']:
            return DebtWriteSerializer
        return DebtSerializer

    def get_permissions(self):
        if self.action == 'send_notification':
            return [IsAuthenticated(), CanSendNotification()]
        return super().get_permissions()

    def get_throttles(self):
        if self.action in ['create', 'send_notification'] or self.requests_resend():
            return [NotificationEmailRateThrottle()]
        return super().get_throttles()

    def requests_resend(self):
        if self.action not in ['update', 'partial_update']:
            return False
        flag = self.request.data.get('send_notification', False)
        return str(flag).lower() in ('true', '1', 'on')

    @extend_schema(
        request=DebtWriteSerializer,
        responses={201: NotificationResultSerializer},
        description="Create a debt; the customer is emailed the public link.",
        tags=['admin'],
    )
    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_422_UNPROCESSABLE_ENTITY)

        data = serializer.validated_data.copy()
        data.pop('send_notification', None)
        data.pop('status', None)

        context = RequestContext.from_request(request)
        try:
            result = create_debt(admin_user=request.user, locale=context.locale, **data)
        except DebtValidationError as e:
            return Response(e.errors, status=status.HTTP_422_UNPROCESSABLE_ENTITY)

        output = NotificationResultSerializer(result, context={'request': request})
        return Response(output.data, status=status.HTTP_201_CREATED)

    @extend_schema(
        request=DebtWriteSerializer,
        responses={200: NotificationResultSerializer},
        description="Update a debt. Set send_notification=true to resend the email.",
        tags=['admin'],
    )
    def update(self, request, *args, **kwargs):
        partial = kwargs.pop('partial', False)
        debt = self.get_object()

        serializer = self.get_serializer(debt, data=request.data, partial=partial)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_422_UNPROCESSABLE_ENTITY)

        data = serializer.validated_data.copy()
        send_notification = data.pop('send_notification', False)

        try:
            debt = update_debt(debt=debt, **data)
        except DebtValidationError as e:
            return Response(e.errors, status=status.HTTP_422_UNPROCESSABLE_ENTITY)

        delivered = None
        if send_notification:
            context = RequestContext.from_request(request)
            result = resend_notification(debt=debt, locale=context.locale)
            debt, delivered = result.debt, result.notification_delivered

        return Response({
            'debt': DebtSerializer(debt).data,
            'notification_delivered': delivered,
        })

    def destroy(self, request, *args, **kwargs):
        delete_debt(debt=self.get_object())
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(
        request=None,
        responses={200: NotificationResultSerializer},
        description="Resend the notification email for a debt.",
        tags=['admin'],
    )
    @action(detail=True, methods=['patch'])
    def send_notification(self, request, pk=None):
        """Resend the notification email (admin only)."""
        debt = self.get_object()
        context = RequestContext.from_request(request)
        result = resend_notification(debt=debt, locale=context.locale)
        return Response(NotificationResultSerializer(result).data)


# =============================================================================
# Customer
# =============================================================================

class CustomerDebtViewSet(ScopedDebtLookupMixin, viewsets.ReadOnlyModelViewSet):
    """
    Debts linked to the signed-in customer.

    list: Own debts newest first, with totals
    retrieve: One own debt; anything else is "not found"
    """

    serializer_class = CustomerDebtSerializer
    permission_classes = [IsAuthenticated, IsDebtOwner]

    @extend_schema(
        responses={200: CustomerSummarySerializer},
        description="List own debts with summary totals.",
        tags=['customer'],
    )
    def list(self, request, *args, **kwargs):
        summary = get_customer_summary(customer=request.user)
        return Response(CustomerSummarySerializer(summary).data)
