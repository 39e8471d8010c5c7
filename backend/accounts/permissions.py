# accounts/permissions.py
from __future__ import annotations

import logging

from django.conf import settings
from django.contrib.auth.models import Group
from django.db import transaction

from accounts.authz import actor_for_user
from accounts.permission_defaults import (
    ASSIGNABLE_LEVELS,
    REGISTERED,
    ROLE_ADMIN,
    ROLE_BOOKKEEPER,
    ROLE_REPORT_VIEWER,
)

logger = logging.getLogger(__name__)


class AccessLevelError(ValueError):
    """Raised when an access level cannot be applied to a user."""


def access_level_for(user) -> str:
    return actor_for_user(user).access_level


def is_bootstrap_admin(user) -> bool:
    admin_email = getattr(settings, "BOOTSTRAP_ADMIN_EMAIL", "") or ""
    return bool(admin_email) and (user.email or "").lower() == admin_email.lower()


@transaction.atomic
def set_access_level(user, level: str) -> str:
    """
    Replace the user's Bookkeeper/ReportViewer membership with ``level``.

    "Registered" removes both roles. Admins (and the bootstrap admin in
    particular) are never changed here. Returns the applied level.
    """
    level = (level or "").strip()
    if not level:
        raise AccessLevelError("access_level is required.")
    if level not in ASSIGNABLE_LEVELS:
        raise AccessLevelError(
            f"Invalid access_level. Allowed: {', '.join(ASSIGNABLE_LEVELS)}"
        )
    if is_bootstrap_admin(user) or access_level_for(user) == ROLE_ADMIN:
        raise AccessLevelError("Cannot change the admin account access level.")

    managed = [
        Group.objects.get_or_create(name=name)[0]
        for name in (ROLE_BOOKKEEPER, ROLE_REPORT_VIEWER)
    ]
    user.groups.remove(*managed)

    if level != REGISTERED:
        user.groups.add(next(g for g in managed if g.name == level))

    logger.info(
        "Access level changed",
        extra={"user_id": user.pk, "access_level": level},
    )
    return level
