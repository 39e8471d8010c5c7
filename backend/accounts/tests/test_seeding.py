# accounts/tests/test_seeding.py
from io import StringIO

import pytest
from django.contrib.auth import get_user_model
from django.contrib.auth.models import Group
from django.core.management import call_command

from accounts.permission_defaults import ROLE_NAMES
from accounts.seeding import seed_identity, seed_roles

User = get_user_model()


@pytest.mark.django_db
class TestSeedIdentity:
    def test_roles_exist_after_migrate(self):
        assert set(Group.objects.values_list("name", flat=True)) >= set(ROLE_NAMES)

    def test_seed_roles_recreates_missing(self):
        Group.objects.filter(name="ReportViewer").delete()

        assert seed_roles() == 1
        assert seed_roles() == 0

    def test_admin_requires_password(self, settings):
        settings.BOOTSTRAP_ADMIN_PASSWORD = ""

        result = seed_identity(admin_email="boss@example.com")

        assert result["admin_created"] is False
        assert result["admin_email"] is None
        assert not User.objects.filter(email="boss@example.com").exists()

    def test_admin_created_once(self):
        first = seed_identity(admin_email="boss@example.com", admin_password="s3cret-pass")
        second = seed_identity(admin_email="boss@example.com", admin_password="other-pass")

        assert first["admin_created"] is True
        assert second["admin_created"] is False
        admin = User.objects.get(email="boss@example.com")
        assert admin.check_password("s3cret-pass")
        assert admin.groups.filter(name="Admin").exists()
        assert User.objects.filter(email__iexact="boss@example.com").count() == 1

    def test_existing_user_is_promoted(self, registered_user):
        result = seed_identity(admin_email=registered_user.email)

        assert result["admin_created"] is False
        assert registered_user.groups.filter(name="Admin").exists()

    def test_management_command(self):
        out = StringIO()

        call_command(
            "seed_identity",
            email="cmd@example.com",
            password="cmd-password",
            stdout=out,
        )
        call_command("seed_identity", email="cmd@example.com", password="cmd-password", stdout=out)

        output = out.getvalue()
        assert "admin: cmd@example.com (new)." in output
        assert output.count("(new)") == 1
        assert User.objects.filter(email="cmd@example.com").count() == 1
