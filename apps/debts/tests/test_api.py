import uuid
from datetime import timedelta

import pytest
from django.urls import reverse
from django.utils import timezone, translation
from rest_framework import status

from apps.debts.models import Debt, DebtStatus

RATE_LIMIT_BODY = {'error': 'Rate limit exceeded. Please try again later.'}
NOT_FOUND_BODY = {'error': 'Debt not found.'}


def debt_payload(**overrides):
    data = {
        'amount': '2500.00',
        'due_date': (timezone.localdate() + timedelta(days=30)).isoformat(),
        'customer_email': 'petr@example.com',
        'description': 'Betonová směs C 25/30',
    }
    data.update(overrides)
    return data


def public_url(token):
    return reverse('debts:public-debt', kwargs={'token': token})


def admin_detail_url(debt_id):
    return reverse('debts:admin-debt-detail', kwargs={'pk': debt_id})


def customer_detail_url(debt_id):
    return reverse('debts:customer-debt-detail', kwargs={'pk': debt_id})


# =============================================================================
# Public Token Page Tests
# =============================================================================

@pytest.mark.django_db
class TestPublicDebt:
    """Tests for GET /{locale}/pohledavky/{token}/"""

    def test_anonymous_with_token(self, api_client, debt):
        response = api_client.get(public_url(debt.token))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['disclosure'] == 'token'
        assert response.data['full_details'] is False
        assert response.data['debt']['amount'] == '1234.50'
        assert 'token' not in response.data['debt']
        assert 'id' not in response.data['debt']

    def test_first_view_marks_viewed(self, api_client, debt):
        api_client.get(public_url(debt.token))

        debt.refresh_from_db()
        assert debt.status == DebtStatus.VIEWED
        assert debt.viewed_at is not None

    def test_owner_disclosure(self, customer_client, owned_debt):
        response = customer_client.get(public_url(owned_debt.token))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['disclosure'] == 'owner'
        assert response.data['full_details'] is True

    def test_english_prefix(self, api_client, debt):
        with translation.override('en'):
            url = public_url(debt.token)

        assert url.startswith('/en/pohledavky/')
        assert api_client.get(url).status_code == status.HTTP_200_OK

    def test_unknown_token(self, api_client, debt):
        response = api_client.get(public_url('no-such-token'))

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data == NOT_FOUND_BODY

    def test_rate_limited_per_ip(self, remote_client, debt):
        """Eleventh lookup within a minute is refused, hits and misses alike."""
        for i in range(10):
            token = debt.token if i % 2 else f'guess-{i}'
            response = remote_client.get(public_url(token))
            assert response.status_code in (status.HTTP_200_OK, status.HTTP_404_NOT_FOUND)

        response = remote_client.get(public_url(debt.token))

        assert response.status_code == status.HTTP_429_TOO_MANY_REQUESTS
        assert response.data == RATE_LIMIT_BODY
        assert 'Retry-After' not in response

    def test_loopback_not_rate_limited(self, api_client, debt):
        for _ in range(15):
            assert api_client.get(public_url(debt.token)).status_code == status.HTTP_200_OK


# =============================================================================
# Admin Dashboard Tests
# =============================================================================

@pytest.mark.django_db
class TestAdminDashboard:

    def test_dashboard(self, admin_client, debt):
        response = admin_client.get(reverse('debts:admin-dashboard'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['total_debts'] == 1
        assert response.data['pending_debts'] == 1
        assert len(response.data['recent_debts']) == 1

    def test_customer_denied(self, customer_client):
        response = customer_client.get(reverse('debts:admin-dashboard'))

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.data == {'error': 'Access denied.'}

    def test_anonymous_unauthenticated(self, api_client):
        response = api_client.get(reverse('debts:admin-dashboard'))

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


# =============================================================================
# Admin Debt Management Tests
# =============================================================================

@pytest.mark.django_db
class TestAdminDebtList:
    """Tests for GET /{locale}/admin/pohledavky/"""

    def test_list_newest_first(self, admin_client, make_debt):
        older = make_debt(customer_email='older@example.com')
        newer = make_debt(customer_email='newer@example.com')
        Debt.objects.filter(pk=older.pk).update(created_at=timezone.now() - timedelta(days=1))

        response = admin_client.get(reverse('debts:admin-debt-list'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['count'] == 2
        assert [d['id'] for d in response.data['results']] == [str(newer.pk), str(older.pk)]

    def test_paginated_by_25(self, admin_client, make_debt):
        for _ in range(27):
            make_debt()

        response = admin_client.get(reverse('debts:admin-debt-list'))

        assert response.data['count'] == 27
        assert len(response.data['results']) == 25
        assert response.data['next'] is not None

    def test_filter_by_status(self, admin_client, make_debt):
        make_debt(status=DebtStatus.RESOLVED)
        make_debt()

        response = admin_client.get(reverse('debts:admin-debt-list'), {'status': 'resolved'})

        assert response.data['count'] == 1
        assert response.data['results'][0]['status'] == 'resolved'

    def test_search_by_email(self, admin_client, make_debt):
        make_debt(customer_email='jan.novak@email.cz')
        make_debt(customer_email='marie@firma.cz')

        response = admin_client.get(reverse('debts:admin-debt-list'), {'search': 'NOVAK'})

        assert response.data['count'] == 1

    def test_customer_denied(self, customer_client):
        response = customer_client.get(reverse('debts:admin-debt-list'))

        assert response.status_code == status.HTTP_403_FORBIDDEN


@pytest.mark.django_db
class TestAdminDebtCreate:
    """Tests for POST /{locale}/admin/pohledavky/"""

    def test_create_sends_notification(self, admin_client, admin_user, mailoutbox):
        response = admin_client.post(reverse('debts:admin-debt-list'), debt_payload(), format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['notification_delivered'] is True
        assert response.data['debt']['status'] == DebtStatus.NOTIFIED
        assert response.data['debt']['admin_user']['id'] == str(admin_user.pk)

        debt = Debt.objects.get()
        assert len(mailoutbox) == 1
        assert mailoutbox[0].to == ['petr@example.com']
        assert f'/cs/pohledavky/{debt.token}/' in mailoutbox[0].body

    def test_create_ignores_client_token(self, admin_client):
        response = admin_client.post(
            reverse('debts:admin-debt-list'),
            debt_payload(token='chosen-by-client'),
            format='json'
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert Debt.objects.get().token != 'chosen-by-client'

    def test_create_linked_to_customer(self, admin_client, customer):
        response = admin_client.post(
            reverse('debts:admin-debt-list'),
            debt_payload(customer_user=str(customer.pk)),
            format='json'
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert Debt.objects.get().customer_user == customer

    def test_link_to_admin_rejected(self, admin_client, admin_user):
        response = admin_client.post(
            reverse('debts:admin-debt-list'),
            debt_payload(customer_user=str(admin_user.pk)),
            format='json'
        )

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    @pytest.mark.parametrize('amount', ['0', '0.00', '-10'])
    def test_non_positive_amount(self, admin_client, mailoutbox, amount):
        response = admin_client.post(
            reverse('debts:admin-debt-list'),
            debt_payload(amount=amount),
            format='json'
        )

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        assert 'amount' in response.data
        assert not Debt.objects.exists()
        assert len(mailoutbox) == 0

    def test_missing_fields(self, admin_client):
        response = admin_client.post(reverse('debts:admin-debt-list'), {}, format='json')

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        assert {'amount', 'due_date', 'customer_email'} <= set(response.data)

    def test_customer_cannot_create(self, customer_client):
        response = customer_client.post(reverse('debts:admin-debt-list'), debt_payload(), format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert not Debt.objects.exists()

    def test_sixth_create_from_same_ip_throttled(self, remote_admin_client, mailoutbox):
        url = reverse('debts:admin-debt-list')
        for i in range(5):
            response = remote_admin_client.post(url, debt_payload(customer_email=f'c{i}@example.com'), format='json')
            assert response.status_code == status.HTTP_201_CREATED

        response = remote_admin_client.post(url, debt_payload(), format='json')

        assert response.status_code == status.HTTP_429_TOO_MANY_REQUESTS
        assert response.data == RATE_LIMIT_BODY
        assert Debt.objects.count() == 5
        assert len(mailoutbox) == 5


@pytest.mark.django_db
class TestAdminDebtDetail:

    def test_retrieve(self, admin_client, debt):
        response = admin_client.get(admin_detail_url(debt.pk))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['token'] == debt.token

    def test_retrieve_unknown(self, admin_client):
        response = admin_client.get(admin_detail_url(uuid.uuid4()))

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data == NOT_FOUND_BODY

    def test_retrieve_malformed_id(self, admin_client):
        response = admin_client.get(admin_detail_url('not-a-uuid'))

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data == NOT_FOUND_BODY

    def test_partial_update(self, admin_client, debt, mailoutbox):
        response = admin_client.patch(
            admin_detail_url(debt.pk),
            {'amount': '99.90', 'status': 'registered'},
            format='json'
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data['notification_delivered'] is None
        assert response.data['debt']['status'] == 'registered'
        assert len(mailoutbox) == 0

    def test_update_with_resend(self, admin_client, debt, mailoutbox):
        response = admin_client.patch(
            admin_detail_url(debt.pk),
            {'description': 'Updated', 'send_notification': True},
            format='json'
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data['notification_delivered'] is True
        assert len(mailoutbox) == 1

    def test_update_cannot_change_token(self, admin_client, debt):
        token = debt.token
        admin_client.patch(admin_detail_url(debt.pk), {'token': 'new'}, format='json')

        debt.refresh_from_db()
        assert debt.token == token

    def test_update_invalid_amount(self, admin_client, debt):
        response = admin_client.patch(admin_detail_url(debt.pk), {'amount': '0'}, format='json')

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    def test_plain_updates_not_email_throttled(self, remote_admin_client, debt):
        for i in range(7):
            response = remote_admin_client.patch(
                admin_detail_url(debt.pk),
                {'description': f'rev {i}'},
                format='json'
            )
            assert response.status_code == status.HTTP_200_OK

    def test_destroy(self, admin_client, debt):
        response = admin_client.delete(admin_detail_url(debt.pk))

        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert not Debt.objects.filter(pk=debt.pk).exists()


@pytest.mark.django_db
class TestSendNotification:
    """Tests for PATCH /{locale}/admin/pohledavky/{id}/send_notification/"""

    def url(self, debt):
        return reverse('debts:admin-debt-send-notification', kwargs={'pk': debt.pk})

    def test_resend(self, admin_client, debt, mailoutbox):
        response = admin_client.patch(self.url(debt))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['notification_delivered'] is True
        assert response.data['debt']['status'] == DebtStatus.NOTIFIED
        assert len(mailoutbox) == 1

    def test_customer_denied(self, customer_client, owned_debt, mailoutbox):
        response = customer_client.patch(self.url(owned_debt))

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert len(mailoutbox) == 0


# =============================================================================
# Customer Tests
# =============================================================================

@pytest.mark.django_db
class TestCustomerDebts:
    """Tests for /{locale}/zakaznik/pohledavky/"""

    def test_list_own_debts_with_summary(self, customer_client, owned_debt, make_debt, other_customer):
        make_debt(customer_user=other_customer, customer_email=other_customer.email)
        make_debt()  # same email, not linked

        response = customer_client.get(reverse('debts:customer-debt-list'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['count'] == 1
        assert response.data['total_amount'] == '1234.50'
        assert [d['id'] for d in response.data['results']] == [str(owned_debt.pk)]

    def test_retrieve_own(self, customer_client, owned_debt):
        response = customer_client.get(customer_detail_url(owned_debt.pk))

        assert response.status_code == status.HTTP_200_OK
        assert 'token' not in response.data

    def test_foreign_debt_looks_missing(self, other_customer_client, owned_debt):
        foreign = other_customer_client.get(customer_detail_url(owned_debt.pk))
        missing = other_customer_client.get(customer_detail_url(uuid.uuid4()))

        assert foreign.status_code == missing.status_code == status.HTTP_404_NOT_FOUND
        assert foreign.data == missing.data == NOT_FOUND_BODY

    def test_admin_denied(self, admin_client):
        response = admin_client.get(reverse('debts:customer-debt-list'))

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_anonymous_unauthenticated(self, api_client):
        response = api_client.get(reverse('debts:customer-debt-list'))

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


# =============================================================================
# Homepage & Routing Tests
# =============================================================================

@pytest.mark.django_db
class TestHomepage:

    def test_root_redirects_to_default_locale(self, api_client):
        response = api_client.get('/')

        assert response.status_code == status.HTTP_302_FOUND
        assert response['Location'] == '/cs/'

    def test_anonymous_links(self, api_client):
        response = api_client.get(reverse('home'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['locale'] == 'cs'
        assert response.data['role'] is None
        assert 'register' in response.data['links']
        assert 'dashboard' not in response.data['links']

    def test_admin_links(self, admin_client):
        response = admin_client.get('/en/')

        assert response.data['locale'] == 'en'
        assert response.data['role'] == 'admin'
        assert response.data['links']['dashboard'] == '/en/admin/'
        assert 'register' not in response.data['links']

    def test_customer_links(self, customer_client):
        response = customer_client.get(reverse('home'))

        assert response.data['links']['my_debts'] == '/cs/zakaznik/pohledavky/'

    def test_health_check(self, api_client):
        response = api_client.get('/api/health/')

        assert response.status_code == status.HTTP_200_OK
        assert response.data == {'status': 'ok'}
