# conftest.py
"""
Pytest fixtures shared by every Bookwise test module.

- Role groups and one user per role
- ActorContext helpers
- A small chart of accounts
- Authenticated API clients
"""

import os
from datetime import datetime, timezone
from decimal import Decimal

import django
import pytest

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "bookwise_backend.settings")


def pytest_configure():
    """Configure Django and test-only settings before collection."""
    django.setup()

    from django.conf import settings

    settings.PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]
    settings.REST_FRAMEWORK = {
        **settings.REST_FRAMEWORK,
        "DEFAULT_THROTTLE_CLASSES": [],
    }

    from rest_framework.settings import api_settings
    api_settings.reload()


@pytest.fixture(autouse=True)
def _clear_cache():
    """Throttle counters live in the cache; start every test from zero."""
    from django.core.cache import cache
    cache.clear()
    yield


# =============================================================================
# Role & User Fixtures
# =============================================================================

@pytest.fixture
def roles(db):
    """Role groups (normally created by post_migrate seeding)."""
    from accounts.seeding import seed_roles

    seed_roles()
    from django.contrib.auth.models import Group
    return {g.name: g for g in Group.objects.all()}


def _make_user(email, role_group=None):
    from django.contrib.auth import get_user_model

    user = get_user_model().objects.create_user(
        email=email,
        password="testpass123",
        name=email.split("@")[0].title(),
    )
    if role_group is not None:
        user.groups.add(role_group)
    return user


@pytest.fixture
def admin_user(roles):
    return _make_user("admin@test.com", roles["Admin"])


@pytest.fixture
def bookkeeper_user(roles):
    return _make_user("bookkeeper@test.com", roles["Bookkeeper"])


@pytest.fixture
def viewer_user(roles):
    return _make_user("viewer@test.com", roles["ReportViewer"])


@pytest.fixture
def registered_user(roles):
    return _make_user("registered@test.com")


# =============================================================================
# Actor Context Fixtures
# =============================================================================

@pytest.fixture
def bookkeeper_actor(bookkeeper_user):
    from accounts.authz import actor_for_user
    return actor_for_user(bookkeeper_user)


@pytest.fixture
def viewer_actor(viewer_user):
    from accounts.authz import actor_for_user
    return actor_for_user(viewer_user)


# =============================================================================
# Chart of Accounts Fixtures
# =============================================================================

@pytest.fixture
def cash(db):
    from accounting.models import Account
    return Account.objects.create(code="1000", name="Cash", account_type=Account.AccountType.ASSET)


@pytest.fixture
def revenue(db):
    from accounting.models import Account
    return Account.objects.create(code="4000", name="Sales", account_type=Account.AccountType.REVENUE)


@pytest.fixture
def rent(db):
    from accounting.models import Account
    return Account.objects.create(code="6000", name="Rent", account_type=Account.AccountType.EXPENSE)


@pytest.fixture
def occurred_on():
    return datetime(2026, 1, 15, 10, 0, tzinfo=timezone.utc)


@pytest.fixture
def make_entry(cash, revenue, occurred_on):
    """Build a balanced draft dict: cash debit / revenue credit."""

    def _make(amount="100.00", description="Cash sale", account_ids=None, **overrides):
        debit_id, credit_id = account_ids or (cash.pk, revenue.pk)
        draft = {
            "occurred_on": occurred_on,
            "description": description,
            "reference_no": None,
            "lines": [
                {"account_id": debit_id, "debit": Decimal(amount), "credit": Decimal("0")},
                {"account_id": credit_id, "debit": Decimal("0"), "credit": Decimal(amount)},
            ],
        }
        draft.update(overrides)
        return draft

    return _make


# =============================================================================
# API Client Fixtures
# =============================================================================

def _client_for(user):
    from rest_framework.test import APIClient

    client = APIClient()
    client.force_authenticate(user=user)
    return client


@pytest.fixture
def admin_client(admin_user):
    return _client_for(admin_user)


@pytest.fixture
def bookkeeper_client(bookkeeper_user):
    return _client_for(bookkeeper_user)


@pytest.fixture
def viewer_client(viewer_user):
    return _client_for(viewer_user)


@pytest.fixture
def registered_client(registered_user):
    return _client_for(registered_user)


@pytest.fixture
def anon_client():
    from rest_framework.test import APIClient
    return APIClient()
