from datetime import timedelta
from decimal import Decimal
from unittest.mock import patch

import pytest
from django.conf import settings
from django.core.cache import cache
from django.utils import timezone, translation
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User
from apps.debts.models import Debt

REMOTE_IP = '203.0.113.5'


@pytest.fixture(autouse=True)
def clear_cache():
    """Throttle and ban counters live in the cache."""
    cache.clear()
    yield
    cache.clear()


@pytest.fixture(autouse=True)
def frozen_throttle_clock():
    """Keep every request of a test inside one throttle window."""
    with patch('apps.security.throttles.time') as clock:
        clock.time.return_value = 1_700_000_000.0
        yield clock


@pytest.fixture(autouse=True)
def default_locale():
    """Locale-prefixed requests activate their language; start each test from the default."""
    translation.activate(settings.LANGUAGE_CODE)
    yield
    translation.activate(settings.LANGUAGE_CODE)


@pytest.fixture
def api_client():
    """Return an unauthenticated API client (loopback address)."""
    return APIClient()


@pytest.fixture
def remote_client():
    """Return an unauthenticated API client from a non-loopback address."""
    return APIClient(REMOTE_ADDR=REMOTE_IP, HTTP_USER_AGENT='pytest')


@pytest.fixture
def user(db):
    """Create and return a confirmed customer."""
    return User.objects.create_user(
        email='testuser@example.com',
        password='TestPass123!',
        display_name='Test User',
        email_verified=True,
    )


@pytest.fixture
def user_unverified(db):
    """Create and return a customer with unconfirmed email."""
    user = User.objects.create_user(
        email='unverified@example.com',
        password='TestPass123!',
        display_name='Unverified User',
        email_verified=False,
    )
    user.verification_token = 'test-verification-token'
    user.save()
    return user


@pytest.fixture
def user_inactive(db):
    """Create and return an inactive user."""
    return User.objects.create_user(
        email='inactive@example.com',
        password='TestPass123!',
        display_name='Inactive User',
        email_verified=True,
        is_active=False,
    )


@pytest.fixture
def admin_user(db):
    """Create and return an admin."""
    return User.objects.create_admin(
        email='admin@example.com',
        password='AdminPass123!',
        display_name='Admin',
    )


@pytest.fixture
def authenticated_client(api_client, user):
    """Return a customer-authenticated API client using JWT."""
    refresh = RefreshToken.for_user(user)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return api_client


@pytest.fixture
def admin_client(admin_user):
    """Return an admin-authenticated API client using JWT."""
    client = APIClient()
    refresh = RefreshToken.for_user(admin_user)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client


@pytest.fixture
def user_with_reset_token(db):
    """Create a user with a password reset token."""
    user = User.objects.create_user(
        email='resetuser@example.com',
        password='OldPass123!',
        display_name='Reset User',
        email_verified=True,
    )
    user.password_reset_token = 'valid-reset-token-12345'
    user.save()
    return user


@pytest.fixture
def make_debt(admin_user):
    """Factory for debts created directly in the database."""

    def _make(**kwargs):
        kwargs.setdefault('amount', Decimal('100.00'))
        kwargs.setdefault('due_date', timezone.localdate() + timedelta(days=14))
        kwargs.setdefault('customer_email', 'testuser@example.com')
        kwargs.setdefault('admin_user', admin_user)
        return Debt.objects.create(**kwargs)

    return _make

