# Generated manually for debts app

import uuid
from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Debt',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('amount', models.DecimalField(decimal_places=2, max_digits=10)),
                ('due_date', models.DateField()),
                ('customer_email', models.EmailField(max_length=255)),
                ('description', models.TextField(blank=True)),
                ('token', models.CharField(editable=False, max_length=64, unique=True)),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('notified', 'Notified'), ('viewed', 'Viewed'), ('registered', 'Registered'), ('resolved', 'Resolved')], default='pending', max_length=20)),
                ('notified_at', models.DateTimeField(blank=True, null=True)),
                ('viewed_at', models.DateTimeField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('admin_user', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='created_debts', to=settings.AUTH_USER_MODEL)),
                ('customer_user', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='customer_debts', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'debts',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['customer_email'], name='debts_email_idx'),
                    models.Index(fields=['status'], name='debts_status_idx'),
                    models.Index(fields=['due_date'], name='debts_due_date_idx'),
                    models.Index(fields=['customer_email', 'status'], name='debts_email_status_idx'),
                ],
            },
        ),
    ]
