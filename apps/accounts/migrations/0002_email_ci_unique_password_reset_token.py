# Generated manually for accounts app

import django.db.models.functions.text
from django.db import migrations, models


def lowercase_emails(apps, schema_editor):
    User = apps.get_model('accounts', 'User')
    for user in User.objects.all():
        lowered = user.email.lower()
        if lowered != user.email:
            user.email = lowered
            user.save(update_fields=['email'])


class Migration(migrations.Migration):

    dependencies = [
        ('accounts', '0001_initial'),
    ]

    operations = [
        migrations.AddField(
            model_name='user',
            name='password_reset_token',
            field=models.CharField(blank=True, max_length=64, null=True),
        ),
        migrations.RunPython(lowercase_emails, migrations.RunPython.noop),
        migrations.AddConstraint(
            model_name='user',
            constraint=models.UniqueConstraint(
                django.db.models.functions.text.Lower('email'),
                name='users_email_ci_unique',
                violation_error_message='A user with this email already exists.',
            ),
        ),
    ]
