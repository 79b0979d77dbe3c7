from django.contrib.auth import get_user_model
from django.conf import settings
from django.test import SimpleTestCase, TestCase
from rest_framework import status
from rest_framework.test import APIClient, APITestCase

from core.models import ActivityLog
from core.services import ActivityService
from projects.models import Project

User = get_user_model()


class HealthCheckTests(APITestCase):
    def test_health_is_public(self):
        resp = APIClient().get("/api/health/")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data["status"], "ok")
        self.assertTrue(resp.data["db"])


class ErrorEnvelopeTests(APITestCase):
    def test_not_found_is_wrapped(self):
        user = User.objects.create_user(username="x", password="pass1234")
        client = APIClient()
        client.force_authenticate(user=user)

        resp = client.get("/api/hackathons/teams/999999/")
        self.assertEqual(resp.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(resp.data["success"], False)
        self.assertEqual(resp.data["status_code"], 404)
        self.assertEqual(str(resp.data["errors"]["detail"]), "Team not found")


class ActivityServiceTests(TestCase):
    def test_log_activity_points_at_target(self):
        user = User.objects.create_user(username="x", password="pass1234")
        project = Project.objects.create(author=user, title="Ledger Lens")

        activity = ActivityService.log_activity(user, "project.touched", project, metadata={"k": 1})

        self.assertEqual(ActivityLog.objects.count(), 1)
        self.assertEqual(activity.content_object, project)
        self.assertIsNone(activity.hackathon)
        self.assertEqual(activity.metadata, {"k": 1})


class SettingsTests(SimpleTestCase):
    def test_hackathon_defaults(self):
        self.assertEqual(settings.HACKATHON_INVITE_TTL_DAYS, 7)
        self.assertEqual(settings.HACKATHON_TEAM_MAX_MEMBERS_LIMIT, 10)
        self.assertIn("expire-stale-team-invites", settings.CELERY_BEAT_SCHEDULE)

    def test_throttle_scopes_are_configured(self):
        rates = settings.REST_FRAMEWORK["DEFAULT_THROTTLE_RATES"]
        self.assertEqual(set(rates), {"team-invite", "submission-vote"})
        self.assertEqual(settings.REST_FRAMEWORK["EXCEPTION_HANDLER"], "core.exceptions.custom_exception_handler")
