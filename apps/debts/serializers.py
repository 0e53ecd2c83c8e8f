from decimal import Decimal

from rest_framework import serializers

from apps.accounts.models import User, UserRole
from .models import Debt, DebtStatus


# =============================================================================
# Input Serializers
# =============================================================================

class DebtFilterSerializer(serializers.Serializer):
    """
    Validate query parameters for the admin debt list.

    Query Parameters:
        status (str): Filter by lifecycle status
        search (str): Case-insensitive substring of customer email
    """

    status = serializers.ChoiceField(choices=DebtStatus.choices, required=False)
    search = serializers.CharField(max_length=255, required=False, allow_blank=True)


class DebtWriteSerializer(serializers.ModelSerializer):
    """Admin create/update payload. The token is never writable."""

    amount = serializers.DecimalField(max_digits=10, decimal_places=2)
    customer_user = serializers.PrimaryKeyRelatedField(
        queryset=User.objects.filter(role=UserRole.CUSTOMER),
        required=False,
        allow_null=True
    )
    send_notification = serializers.BooleanField(
        write_only=True,
        required=False,
        default=False,
        help_text="Resend the notification email after updating"
    )

    class Meta:
        model = Debt
        fields = [
            'amount',
            'due_date',
            'customer_email',
            'description',
            'status',
            'customer_user',
            'send_notification',
        ]
        extra_kwargs = {
            'description': {'required': False, 'allow_blank': True},
            'status': {'required': False},
        }

    def validate_amount(self, value):
        if value <= Decimal('0'):
            raise serializers.ValidationError('Amount must be greater than zero.')
        return value


# =============================================================================
# Output Serializers
# =============================================================================

class UserMinimalSerializer(serializers.ModelSerializer):
    """Minimal user info for nested serialization."""

    class Meta:
        model = User
        fields = ['id', 'email', 'display_name']
        read_only_fields = fields


class DebtSerializer(serializers.ModelSerializer):
    """Full debt record for admins."""

    customer_user = UserMinimalSerializer(read_only=True)
    admin_user = UserMinimalSerializer(read_only=True)
    overdue = serializers.BooleanField(source='is_overdue', read_only=True)

    class Meta:
        model = Debt
        fields = [
            'id',
            'amount',
            'due_date',
            'customer_email',
            'description',
            'token',
            'status',
            'overdue',
            'customer_user',
            'admin_user',
            'notified_at',
            'viewed_at',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class DebtListSerializer(serializers.ModelSerializer):
    """Lightweight serializer for lists."""

    overdue = serializers.BooleanField(source='is_overdue', read_only=True)

    class Meta:
        model = Debt
        fields = [
            'id',
            'amount',
            'due_date',
            'customer_email',
            'status',
            'overdue',
            'created_at',
        ]
        read_only_fields = fields


class CustomerDebtSerializer(serializers.ModelSerializer):
    """Debt as seen by its linked customer."""

    overdue = serializers.BooleanField(source='is_overdue', read_only=True)

    class Meta:
        model = Debt
        fields = [
            'id',
            'amount',
            'due_date',
            'customer_email',
            'description',
            'status',
            'overdue',
            'notified_at',
            'created_at',
        ]
        read_only_fields = fields


class PublicDebtSerializer(serializers.ModelSerializer):
    """Debt detail on the token page; no internal identifiers."""

    overdue = serializers.BooleanField(source='is_overdue', read_only=True)

    class Meta:
        model = Debt
        fields = [
            'amount',
            'due_date',
            'customer_email',
            'description',
            'status',
            'overdue',
        ]
        read_only_fields = fields


class DisclosureSerializer(serializers.Serializer):
    disclosure = serializers.CharField(source='level')
    full_details = serializers.BooleanField()
    debt = PublicDebtSerializer()


class NotificationResultSerializer(serializers.Serializer):
    debt = DebtSerializer()
    notification_delivered = serializers.BooleanField()


class DashboardSerializer(serializers.Serializer):
    total_debts = serializers.IntegerField()
    pending_debts = serializers.IntegerField()
    overdue_debts = serializers.IntegerField()
    recent_debts = DebtListSerializer(many=True)


class CustomerSummarySerializer(serializers.Serializer):
    count = serializers.IntegerField()
    total_amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    overdue_count = serializers.IntegerField()
    resolved_count = serializers.IntegerField()
    results = CustomerDebtSerializer(many=True)
