"""
Health check endpoints for operations monitoring.

Endpoints:
- /_health/live    - liveness probe (is the process running?)
- /_health/ready   - readiness probe (can the default database answer?)
- /_health/full    - full report: every database plus role seeding
"""
import logging
import time
from typing import Dict, Any

from django.conf import settings
from django.db import connections, DatabaseError
from django.http import JsonResponse
from django.views import View

logger = logging.getLogger(__name__)


class HealthCheck:
    """Health check implementation."""

    @staticmethod
    def check_database(alias: str = "default") -> Dict[str, Any]:
        """Check database connectivity."""
        start = time.time()
        try:
            conn = connections[alias]
            conn.ensure_connection()
            with conn.cursor() as cursor:
                cursor.execute("SELECT 1")
                cursor.fetchone()
        except DatabaseError as e:
            logger.warning("Database health check failed", extra={"alias": alias, "error": str(e)})
            return {
                "status": "unhealthy",
                "alias": alias,
                "error": str(e),
                "duration_ms": round((time.time() - start) * 1000, 2),
            }
        return {
            "status": "healthy",
            "alias": alias,
            "duration_ms": round((time.time() - start) * 1000, 2),
        }

    @staticmethod
    def check_all_databases() -> Dict[str, Any]:
        """Check all configured databases."""
        results = {alias: HealthCheck.check_database(alias) for alias in settings.DATABASES}
        all_healthy = all(r["status"] == "healthy" for r in results.values())
        return {
            "status": "healthy" if all_healthy else "degraded",
            "databases": results,
        }

    @staticmethod
    def check_roles() -> Dict[str, Any]:
        """Check that every role group has been seeded."""
        from django.contrib.auth.models import Group
        from accounts.permission_defaults import ROLE_NAMES

        try:
            present = set(Group.objects.filter(name__in=ROLE_NAMES).values_list("name", flat=True))
        except DatabaseError as e:
            return {"status": "error", "error": str(e)}

        missing = sorted(set(ROLE_NAMES) - present)
        if missing:
            return {"status": "degraded", "missing": missing}
        return {"status": "healthy", "roles": list(ROLE_NAMES)}

    @staticmethod
    def get_full_health() -> Dict[str, Any]:
        """Get comprehensive health report."""
        checks = {
            "databases": HealthCheck.check_all_databases(),
            "roles": HealthCheck.check_roles(),
        }

        statuses = [c.get("status", "unknown") for c in checks.values()]
        if all(s == "healthy" for s in statuses):
            overall = "healthy"
        elif any(s in ("unhealthy", "error") for s in statuses):
            overall = "unhealthy"
        else:
            overall = "degraded"

        return {
            "status": overall,
            "checks": checks,
            "version": getattr(settings, "VERSION", "unknown"),
            "environment": "development" if settings.DEBUG else "production",
        }


class LivenessView(View):
    """
    Liveness probe.

    Returns 200 if the process is running. Touches nothing external.
    """

    def get(self, request):
        return JsonResponse({"status": "alive"})


class ReadinessView(View):
    """Readiness probe; 503 when the default database is unreachable."""

    def get(self, request):
        db_check = HealthCheck.check_database("default")

        if db_check["status"] == "healthy":
            return JsonResponse({"status": "ready", "database": db_check})
        return JsonResponse({"status": "not_ready", "database": db_check}, status=503)


class FullHealthView(View):
    """
    Full health report for debugging and dashboards.

    Should be kept on the internal network in production.
    """

    def get(self, request):
        health = HealthCheck.get_full_health()
        status_code = 200 if health["status"] == "healthy" else 503
        return JsonResponse(health, status=status_code)
