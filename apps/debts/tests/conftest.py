from datetime import timedelta
from decimal import Decimal

import pytest
from unittest.mock import patch
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
    translation.activate(settings.LANGUAGE_CODE)
    yield
    translation.activate(settings.LANGUAGE_CODE)


def client_for(user, **defaults):
    client = APIClient(**defaults)
    refresh = RefreshToken.for_user(user)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client


@pytest.fixture
def api_client():
    """Return an unauthenticated API client (loopback address)."""
    return APIClient()


@pytest.fixture
def remote_client():
    """Return an unauthenticated API client from a non-loopback address."""
    return APIClient(REMOTE_ADDR=REMOTE_IP, HTTP_USER_AGENT='pytest')


@pytest.fixture
def admin_user(db):
    return User.objects.create_admin(
        email='admin@example.com',
        password='AdminPass123!',
        display_name='Admin',
    )


@pytest.fixture
def customer(db):
    return User.objects.create_user(
        email='customer@example.com',
        password='TestPass123!',
        display_name='Customer',
        email_verified=True,
    )


@pytest.fixture
def other_customer(db):
    return User.objects.create_user(
        email='other@example.com',
        password='TestPass123!',
        display_name='Other Customer',
        email_verified=True,
    )


@pytest.fixture
def admin_client(admin_user):
    """Admin client on loopback: never throttled."""
    return client_for(admin_user)


@pytest.fixture
def remote_admin_client(admin_user):
    """Admin client from a non-loopback address with a User-Agent."""
    return client_for(admin_user, REMOTE_ADDR=REMOTE_IP, HTTP_USER_AGENT='pytest')


@pytest.fixture
def customer_client(customer):
    return client_for(customer)


@pytest.fixture
def other_customer_client(other_customer):
    return client_for(other_customer)


@pytest.fixture
def make_debt(admin_user):
    """Factory for debts created directly in the database."""

    def _make(**kwargs):
        kwargs.setdefault('amount', Decimal('1234.50'))
        kwargs.setdefault('due_date', timezone.localdate() + timedelta(days=14))
        kwargs.setdefault('customer_email', 'customer@example.com')
        kwargs.setdefault('description', 'Invoice 2024-001')
        kwargs.setdefault('admin_user', admin_user)
        return Debt.objects.create(**kwargs)

    return _make


@pytest.fixture
def debt(make_debt):
    """A pending debt not linked to any account."""
    return make_debt()


@pytest.fixture
def owned_debt(make_debt, customer):
    """A debt linked to `customer`."""
    return make_debt(customer_user=customer, status='notified')
