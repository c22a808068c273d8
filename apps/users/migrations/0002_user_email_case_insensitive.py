from django.db import migrations, models
import django.db.models.functions.text


def lowercase_emails(apps, schema_editor):
    User = apps.get_model("users", "User")
    for user in User.objects.exclude(email__isnull=True).only("id", "email"):
        normalized = user.email.strip().lower() or None
        if normalized != user.email:
            User.objects.filter(pk=user.pk).update(email=normalized)


class Migration(migrations.Migration):
    dependencies = [
        ("users", "0001_initial"),
    ]

    operations = [
        migrations.RunPython(lowercase_emails, migrations.RunPython.noop),
        migrations.AddConstraint(
            model_name="user",
            constraint=models.UniqueConstraint(
                django.db.models.functions.text.Lower("email"),
                name="unique_user_email_ci",
            ),
        ),
    ]
