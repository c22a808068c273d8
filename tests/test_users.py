import pytest
from django.db import IntegrityError, transaction

from apps.users.models import User


def test_email_is_stored_lowercase(make_user):
    user = make_user("bob", "  Bob@Example.COM ")

    user.refresh_from_db()
    assert user.email == "bob@example.com"


def test_email_unique_regardless_of_case(make_user):
    make_user("bob", "b@example.com")

    with pytest.raises(IntegrityError), transaction.atomic():
        User.objects.create(username="bobby", email="B@EXAMPLE.com")


def test_email_case_insensitive_constraint_at_db_level(make_user):
    make_user("bob", "b@example.com")

    # Bypass save() to check the functional unique index itself.
    with pytest.raises(IntegrityError), transaction.atomic():
        User.objects.bulk_create([User(username="bobby", email="B@Example.com")])


def test_blank_emails_do_not_collide(make_user):
    first = make_user("ann", email="")
    second = make_user("ben", email="")

    first.refresh_from_db()
    second.refresh_from_db()
    assert first.email is None
    assert second.email is None
