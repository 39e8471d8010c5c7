# tests/test_health.py
import pytest
from django.contrib.auth.models import Group
from django.db import DatabaseError

from ops.health import HealthCheck


def test_liveness(client):
    response = client.get("/_health/live")

    assert response.status_code == 200
    assert response.json() == {"status": "alive"}


@pytest.mark.django_db
class TestReadiness:
    def test_ready(self, client):
        response = client.get("/_health/ready")

        assert response.status_code == 200
        assert response.json()["status"] == "ready"

    def test_database_down(self, client, monkeypatch):
        def broken(alias="default"):
            return {"status": "unhealthy", "alias": alias, "error": "down"}

        monkeypatch.setattr(HealthCheck, "check_database", staticmethod(broken))

        response = client.get("/_health/ready")

        assert response.status_code == 503
        assert response.json()["status"] == "not_ready"


@pytest.mark.django_db
class TestFullHealth:
    def test_healthy(self, client):
        response = client.get("/_health/full")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["checks"]["roles"]["status"] == "healthy"

    def test_missing_role_is_degraded(self, client):
        Group.objects.filter(name="Bookkeeper").delete()

        response = client.get("/_health/full")

        assert response.status_code == 503
        body = response.json()
        assert body["status"] == "degraded"
        assert body["checks"]["roles"]["missing"] == ["Bookkeeper"]

    def test_role_query_failure(self, monkeypatch):
        def fail(*args, **kwargs):
            raise DatabaseError("no such table")

        monkeypatch.setattr(Group.objects, "filter", fail)

        assert HealthCheck.check_roles() == {"status": "error", "error": "no such table"}
