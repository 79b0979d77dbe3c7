import time

from django.conf import settings
from django.db import connections
from django.db.utils import OperationalError
from django.utils import timezone
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView


class HealthCheckView(APIView):
    """
    Uptime probe.
    - DB connectivity
    - count of pending invites already past due; a growing number means
      the expiry sweeper is not running
    """
    permission_classes = [AllowAny]
    authentication_classes = []  # public endpoint

    def get(self, request, *args, **kwargs):
        from hackathons.models import TeamInvite

        start = time.monotonic()

        db_ok = True
        stale_invites = None
        try:
            connections["default"].ensure_connection()
            stale_invites = TeamInvite.objects.filter(
                status=TeamInvite.STATUS_PENDING,
                expires_at__lt=timezone.now(),
            ).count()
        except OperationalError:
            db_ok = False

        return Response(
            {
                "status": "ok" if db_ok else "degraded",
                "db": db_ok,
                "stale_invites": stale_invites,
                "env": getattr(settings, "ENV", "unknown"),
                "latency_ms": int((time.monotonic() - start) * 1000),
            }
        )
