from decimal import Decimal
import uuid

from django.core.exceptions import ValidationError
from django.db import models
from django.utils import timezone

from .tokens import generate_unique_token


class DebtStatus(models.TextChoices):
    PENDING = 'pending', 'Pending'
    NOTIFIED = 'notified', 'Notified'
    VIEWED = 'viewed', 'Viewed'
    REGISTERED = 'registered', 'Registered'
    RESOLVED = 'resolved', 'Resolved'


class DebtQuerySet(models.QuerySet):

    def overdue(self):
        return self.filter(due_date__lt=timezone.localdate())

    def recent(self):
        return self.order_by('-created_at')

    def for_customer_email(self, email):
        return self.filter(customer_email__iexact=email)

    def search_by_email(self, fragment):
        return self.filter(customer_email__icontains=fragment)

    def with_includes(self):
        return self.select_related('customer_user', 'admin_user')


class Debt(models.Model):
    """Amount owed by a customer, reachable publicly only through its token."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    amount = models.DecimalField(max_digits=10, decimal_places=2)
    due_date = models.DateField()
    customer_email = models.EmailField(max_length=255)
    description = models.TextField(blank=True)

    # Bearer credential for the public page; never changes after creation
    token = models.CharField(max_length=64, unique=True, editable=False)

    status = models.CharField(
        max_length=20,
        choices=DebtStatus.choices,
        default=DebtStatus.PENDING
    )

    customer_user = models.ForeignKey(
        'accounts.User',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='customer_debts'
    )
    admin_user = models.ForeignKey(
        'accounts.User',
        on_delete=models.PROTECT,
        related_name='created_debts'
    )

    # Lifecycle timestamps
    notified_at = models.DateTimeField(null=True, blank=True)
    viewed_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = DebtQuerySet.as_manager()

    class Meta:
        db_table = 'debts'
        indexes = [
            models.Index(fields=['customer_email'], name='debts_email_idx'),
            models.Index(fields=['status'], name='debts_status_idx'),
            models.Index(fields=['due_date'], name='debts_due_date_idx'),
            models.Index(fields=['customer_email', 'status'], name='debts_email_status_idx'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.amount} CZK - {self.customer_email} ({self.status})"

    def clean(self):
        if self.amount is not None and self.amount <= Decimal('0'):
            raise ValidationError({'amount': 'Amount must be greater than zero.'})

    def save(self, *args, **kwargs):
        if self._state.adding:
            self.assign_token()
        super().save(*args, **kwargs)

    def assign_token(self):
        """Generate a token unless one was supplied."""
        if not self.token:
            self.token = generate_unique_token(
                lambda token: Debt.objects.filter(token=token).exists()
            )
        return self.token

    @property
    def is_overdue(self):
        return self.due_date < timezone.localdate()
