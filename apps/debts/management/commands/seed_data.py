"""
Management command to seed development data.

Usage:
    python manage.py seed_data [--clear]

This creates:
- 2 admins (admin@dluzirna.cz, spravce@dluzirna.cz)
- 3 customers (two confirmed, one not)
- Debts across every status, some overdue, some unlinked

Seeding is idempotent; no emails are sent.
"""

from datetime import timedelta
from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone

from apps.accounts.models import User, UserRole
from apps.debts.models import Debt, DebtStatus

PASSWORD = 'password123'

ADMINS = [
    ('admin@dluzirna.cz', 'Administrátor'),
    ('spravce@dluzirna.cz', 'Správce'),
]

CUSTOMERS = [
    ('jan.novak@email.cz', 'Jan Novák', True),
    ('marie.svobodova@firma.cz', 'Marie Svobodová', True),
    ('petr.dvorak@stavba.cz', 'Petr Dvořák', False),
]


class Command(BaseCommand):
    help = 'Seed admins, customers and debts for development'

    def add_arguments(self, parser):
        parser.add_argument(
            '--clear',
            action='store_true',
            help='Delete all debts before seeding',
        )

    @transaction.atomic
    def handle(self, *args, **options):
        if options['clear']:
            self.stdout.write('Clearing debts...')
            Debt.objects.all().delete()

        self.stdout.write('Seeding database...')

        admins = self.create_admins()
        customers = self.create_customers()
        created = self.create_debts(admins, customers)

        self.stdout.write(self.style.SUCCESS(f'Seeded {created} new debt(s).'))
        self.stdout.write('')
        self.stdout.write('Test accounts (password: %s):' % PASSWORD)
        for email, _ in ADMINS:
            self.stdout.write(f'  {email} (admin)')
        for email, _, confirmed in CUSTOMERS:
            suffix = '' if confirmed else ', unconfirmed'
            self.stdout.write(f'  {email} (customer{suffix})')

    def create_admins(self):
        self.stdout.write('  Creating admins...')
        admins = []
        for email, name in ADMINS:
            user = User.objects.filter(email=email).first()
            if user is None:
                user = User.objects.create_admin(email=email, password=PASSWORD, display_name=name)
            admins.append(user)
        return admins

    def create_customers(self):
        self.stdout.write('  Creating customers...')
        customers = {}
        for email, name, confirmed in CUSTOMERS:
            user, created = User.objects.get_or_create(
                email=email,
                defaults={
                    'display_name': name,
                    'role': UserRole.CUSTOMER,
                    'email_verified': confirmed,
                }
            )
            if created:
                user.set_password(PASSWORD)
                user.save(update_fields=['password'])
            customers[email] = user
        return customers

    def create_debts(self, admins, customers):
        self.stdout.write('  Creating debts...')
        now = timezone.now()
        today = timezone.localdate()
        jan = customers['jan.novak@email.cz']
        marie = customers['marie.svobodova@firma.cz']

        debts = [
            {
                'customer_email': jan.email,
                'amount': Decimal('15450.50'),
                'due_date': today + timedelta(days=30),
                'description': 'Faktura č. 2024-001 - Cement Portland 42.5 R (20 pytlů)',
                'status': DebtStatus.REGISTERED,
                'customer_user': jan,
                'notified_at': now - timedelta(days=2),
                'viewed_at': now - timedelta(days=1),
            },
            {
                'customer_email': marie.email,
                'amount': Decimal('8750.00'),
                'due_date': today + timedelta(days=14),
                'description': 'Faktura č. 2024-002 - Ocelová výztuž fi 12mm (500kg)',
                'status': DebtStatus.VIEWED,
                'customer_user': marie,
                'notified_at': now - timedelta(days=3),
                'viewed_at': now - timedelta(days=2),
            },
            {
                'customer_email': 'stavebni.firma@example.com',
                'amount': Decimal('32100.75'),
                'due_date': today - timedelta(days=30),
                'description': 'Faktura č. 2024-003 - Železobetonové panely (10ks)',
                'status': DebtStatus.NOTIFIED,
                'notified_at': now - timedelta(days=7),
            },
            {
                'customer_email': 'petr.dvorak@stavba.cz',
                'amount': Decimal('4200.00'),
                'due_date': today + timedelta(days=7),
                'description': 'Faktura č. 2024-004 - Sádrokartonové desky (30ks)',
                'status': DebtStatus.PENDING,
            },
            {
                'customer_email': jan.email,
                'amount': Decimal('1999.90'),
                'due_date': today - timedelta(days=60),
                'description': 'Faktura č. 2023-118 - Tmel a spárovací hmota',
                'status': DebtStatus.RESOLVED,
                'customer_user': jan,
                'notified_at': now - timedelta(days=90),
                'viewed_at': now - timedelta(days=89),
            },
        ]

        created = 0
        for index, fields in enumerate(debts):
            description = fields.pop('description')
            _, was_created = Debt.objects.get_or_create(
                customer_email=fields.pop('customer_email'),
                description=description,
                defaults={**fields, 'admin_user': admins[index % len(admins)]},
            )
            created += int(was_created)
        return created
