# accounts/authz.py
"""
Authorization utilities for Bookwise.

Provides:
- ActorContext: Immutable context for the current request
- resolve_actor: Extract actor context from request
- require: Check permissions and raise if not granted

Permissions are checked:
1. Inactive users: nothing
2. Superusers: implicit allow
3. Everyone else: the union of their roles' default codes
"""

from dataclasses import dataclass
from typing import FrozenSet

from django.core.exceptions import PermissionDenied
from rest_framework.exceptions import NotAuthenticated

from accounts.permission_defaults import (
    REGISTERED,
    ROLE_ADMIN,
    ROLE_NAMES,
    permissions_for_roles,
)


@dataclass(frozen=True)
class ActorContext:
    """
    Immutable context for the current actor.

    Passed to commands so they can check who is performing an action.

    Attributes:
        user: The authenticated user
        roles: Role names the user holds, highest first
        perms: Permission codes granted by those roles
    """
    user: object  # User model
    roles: tuple
    perms: FrozenSet[str]

    def has(self, code: str) -> bool:
        if not getattr(self.user, "is_active", False):
            return False
        if getattr(self.user, "is_superuser", False):
            return True
        return code in self.perms

    @property
    def is_admin(self) -> bool:
        return ROLE_ADMIN in self.roles or bool(getattr(self.user, "is_superuser", False))

    @property
    def access_level(self) -> str:
        """Highest role held, or "Registered" for a user without one."""
        if self.is_admin:
            return ROLE_ADMIN
        return self.roles[0] if self.roles else REGISTERED


def roles_for_user(user) -> tuple:
    """Role names held by ``user``, ordered highest first."""
    held = set(user.groups.filter(name__in=ROLE_NAMES).values_list("name", flat=True))
    return tuple(name for name in ROLE_NAMES if name in held)


def actor_for_user(user) -> ActorContext:
    roles = roles_for_user(user)
    return ActorContext(user=user, roles=roles, perms=permissions_for_roles(roles))


def resolve_actor(request) -> ActorContext:
    """
    Extract ActorContext from the current request.

    Roles are loaded fresh from the database on every call so that an
    access-level change takes effect on the next request.

    Raises:
        NotAuthenticated: If user is not authenticated
    """
    user = getattr(request, "user", None)

    if not user or not user.is_authenticated:
        raise NotAuthenticated("Authentication required.")

    return actor_for_user(user)


def require(actor: ActorContext, code: str) -> None:
    """
    Require that the actor has a specific permission.

    Raises:
        PermissionDenied: If permission is not granted

    Example:
        require(actor, "journal.create")
        # If we get here, permission is granted
    """
    if not actor.has(code):
        raise PermissionDenied(f"Permission denied: {code}")
