from datetime import timedelta
from decimal import Decimal

import pytest
from django.core.exceptions import ValidationError
from django.utils import timezone

from apps.debts.models import Debt, DebtStatus
from apps.debts.tokens import (
    TokenGenerationError,
    generate_token,
    generate_unique_token,
    tokens_match,
)


class TestTokens:

    def test_generated_token_is_url_safe(self):
        token = generate_token()

        assert len(token) == 43
        assert all(c.isalnum() or c in '-_' for c in token)

    def test_tokens_differ(self):
        assert len({generate_token() for _ in range(50)}) == 50

    def test_unique_token_skips_taken(self):
        seen = []

        def is_taken(token):
            seen.append(token)
            return len(seen) < 3

        token = generate_unique_token(is_taken)

        assert token == seen[-1]
        assert len(seen) == 3

    def test_unique_token_gives_up(self):
        with pytest.raises(TokenGenerationError):
            generate_unique_token(lambda token: True, max_attempts=3)

    def test_tokens_match(self):
        assert tokens_match('abc', 'abc')
        assert not tokens_match('abc', 'abd')
        assert not tokens_match('', '')
        assert not tokens_match(None, 'abc')


@pytest.mark.django_db
class TestDebtModel:

    def test_token_assigned_on_create(self, debt):
        assert len(debt.token) == 43
        assert debt.status == DebtStatus.PENDING

    def test_supplied_token_kept(self, make_debt):
        debt = make_debt(token='preset-token')
        assert debt.token == 'preset-token'

    def test_token_stable_on_save(self, debt):
        token = debt.token
        debt.description = 'Changed'
        debt.save()

        debt.refresh_from_db()
        assert debt.token == token

    @pytest.mark.parametrize('amount', [Decimal('0'), Decimal('-5.00')])
    def test_amount_must_be_positive(self, debt, amount):
        debt.amount = amount
        with pytest.raises(ValidationError) as exc:
            debt.full_clean()
        assert 'amount' in exc.value.message_dict

    def test_is_overdue(self, make_debt):
        today = timezone.localdate()
        assert make_debt(due_date=today - timedelta(days=1)).is_overdue
        assert not make_debt(due_date=today).is_overdue

    def test_queryset_helpers(self, make_debt):
        today = timezone.localdate()
        late = make_debt(due_date=today - timedelta(days=3), customer_email='Late@Example.com')
        make_debt(due_date=today + timedelta(days=3), customer_email='ontime@example.com')

        assert list(Debt.objects.overdue()) == [late]
        assert list(Debt.objects.for_customer_email('late@example.com')) == [late]
        assert Debt.objects.search_by_email('example').count() == 2
