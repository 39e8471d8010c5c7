# accounts/seeding.py
"""
Idempotent identity bootstrap.

Ensures the role groups exist and, when credentials are configured,
that the bootstrap admin user exists and holds the Admin role. Every
routine takes the database alias explicitly so it can run from the
post_migrate signal as well as from the management command.
"""
import logging
from typing import Optional

from django.conf import settings
from django.contrib.auth import get_user_model
from django.contrib.auth.models import Group
from django.db import transaction

from accounts.permission_defaults import ROLE_ADMIN, ROLE_NAMES

logger = logging.getLogger(__name__)


def seed_roles(using: str = "default") -> int:
    """Create missing role groups. Returns how many were created."""
    created = 0
    for name in ROLE_NAMES:
        _, was_created = Group.objects.using(using).get_or_create(name=name)
        if was_created:
            created += 1
    return created


def seed_identity(
    using: str = "default",
    admin_email: Optional[str] = None,
    admin_password: Optional[str] = None,
) -> dict:
    """
    Seed roles and the bootstrap admin.

    The admin is only created when both an email and a password are
    available; an existing admin keeps its password. Safe to call any
    number of times.
    """
    User = get_user_model()
    admin_email = admin_email or getattr(settings, "BOOTSTRAP_ADMIN_EMAIL", "")
    admin_password = admin_password or getattr(settings, "BOOTSTRAP_ADMIN_PASSWORD", "")

    result = {"roles_created": 0, "admin_created": False, "admin_email": None}

    with transaction.atomic(using=using):
        result["roles_created"] = seed_roles(using=using)

        if not admin_email:
            return result

        admin = User.objects.using(using).filter(email__iexact=admin_email).first()
        if admin is None:
            if not admin_password:
                logger.info(
                    "Bootstrap admin not created: no password configured",
                    extra={"admin_email": admin_email},
                )
                return result
            admin = User(email=User.objects.normalize_email(admin_email), name="Administrator")
            admin.set_password(admin_password)
            admin.save(using=using)
            result["admin_created"] = True
            logger.info("Bootstrap admin created", extra={"admin_email": admin.email})

        admin_group = Group.objects.using(using).get(name=ROLE_ADMIN)
        admin.groups.add(admin_group)
        result["admin_email"] = admin.email

    return result


def seed_after_migrate(sender, using="default", **kwargs):
    """post_migrate receiver for the accounts app."""
    seed_identity(using=using)
