# accounts/apps.py
"""Accounts app configuration."""

from django.apps import AppConfig
from django.db.models.signals import post_migrate


class AccountsConfig(AppConfig):
    """Configuration for the accounts app."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "accounts"
    verbose_name = "Accounts & Roles"

    def ready(self):
        """Seed roles (and the bootstrap admin, when configured) after migrate."""
        from accounts.seeding import seed_after_migrate

        post_migrate.connect(
            seed_after_migrate,
            sender=self,
            dispatch_uid="accounts.seed_identity",
        )
