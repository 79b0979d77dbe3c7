from datetime import timedelta

from django.test import TestCase
from django.utils import timezone
from rest_framework import status
from rest_framework.exceptions import NotFound, PermissionDenied, ValidationError
from rest_framework.test import APIClient, APITestCase

from core.constants import ACTIVITY_INVITE_ACCEPTED, ACTIVITY_TEAM_JOINED
from core.exceptions import Conflict
from core.models import ActivityLog
from hackathons import state_machine
from hackathons.models import HackathonRegistration, TeamInvite, TeamMembership
from hackathons.services import invites, teams
from hackathons.tasks import expire_stale_invites_task
from .base import HackathonFixturesMixin


class InviteStateMachineTests(HackathonFixturesMixin, TestCase):
    def setUp(self):
        super().setUp()
        self.x = self.make_registered_user("x")
        self.y = self.make_registered_user("y")
        self.team = teams.create_team("h1", self.x, "Alpha")
        self.invite = invites.invite(self.team.id, self.x, self.y.id)

    def test_pending_moves_to_each_answer(self):
        for target in (TeamInvite.STATUS_ACCEPTED, TeamInvite.STATUS_REJECTED, TeamInvite.STATUS_EXPIRED):
            self.assertTrue(state_machine.can_transition(self.invite, target)[0])

    def test_terminal_states_accept_nothing(self):
        ok, _ = state_machine.transition(self.invite, TeamInvite.STATUS_REJECTED, actor=self.y)
        self.assertTrue(ok)
        self.assertIsNotNone(self.invite.responded_at)
        self.assertTrue(state_machine.is_terminal_status(self.invite.status))

        with self.assertLogs("gmi.hackathons", level="WARNING"):
            ok, reason = state_machine.transition(self.invite, TeamInvite.STATUS_ACCEPTED, actor=self.y)
        self.assertFalse(ok)
        self.assertIn("rejected", reason)

        self.invite.refresh_from_db()
        self.assertEqual(self.invite.status, TeamInvite.STATUS_REJECTED)

    def test_expiry_does_not_stamp_responded_at(self):
        state_machine.transition(self.invite, TeamInvite.STATUS_EXPIRED)
        self.invite.refresh_from_db()
        self.assertEqual(self.invite.status, TeamInvite.STATUS_EXPIRED)
        self.assertIsNone(self.invite.responded_at)


class InviteServiceTests(HackathonFixturesMixin, TestCase):
    def setUp(self):
        super().setUp()
        self.x = self.make_registered_user("x")
        self.y = self.make_registered_user("y")
        self.z = self.make_registered_user("z")
        self.team = teams.create_team("h1", self.x, "Alpha")

    def _expire(self, invite):
        TeamInvite.objects.filter(pk=invite.pk).update(expires_at=timezone.now() - timedelta(minutes=1))

    def test_invite_and_accept_joins_the_team(self):
        invite = invites.invite(self.team.id, self.x, self.y.id, message="Join us")
        self.assertEqual(invite.status, TeamInvite.STATUS_PENDING)
        self.assertGreater(invite.expires_at, timezone.now() + timedelta(days=6))

        accepted = invites.respond(invite.id, self.y, "accept")
        self.assertEqual(accepted.status, TeamInvite.STATUS_ACCEPTED)
        self.assertIsNotNone(accepted.responded_at)

        team = teams.get_team(self.team.id)
        self.assertEqual(team.member_count, 2)
        self.assertEqual(teams.member_role(team, self.y), TeamMembership.ROLE_MEMBER)
        self.assertTrue(ActivityLog.objects.filter(actor=self.y, verb=ACTIVITY_INVITE_ACCEPTED).exists())
        self.assertTrue(ActivityLog.objects.filter(actor=self.y, verb=ACTIVITY_TEAM_JOINED).exists())

        # Already on a team now
        with self.assertRaises(Conflict):
            teams.create_team("h1", self.y, "Beta")

    def test_accept_registers_an_unregistered_invitee(self):
        newcomer = self.make_user("newcomer")
        invite = invites.invite(self.team.id, self.x, newcomer.id)
        invites.respond(invite.id, newcomer, "accept")
        self.assertTrue(HackathonRegistration.objects.filter(hackathon=self.hackathon, user=newcomer).exists())

    def test_reject(self):
        invite = invites.invite(self.team.id, self.x, self.y.id)
        rejected = invites.respond(invite.id, self.y, "reject")
        self.assertEqual(rejected.status, TeamInvite.STATUS_REJECTED)
        self.assertFalse(TeamMembership.objects.filter(user=self.y).exists())

        with self.assertRaises(Conflict):
            invites.respond(invite.id, self.y, "accept")

        # A fresh invite is allowed once the old one is answered
        invites.invite(self.team.id, self.x, self.y.id)

    def test_invite_preconditions(self):
        with self.assertRaises(NotFound):
            invites.invite(999999, self.x, self.y.id)
        with self.assertRaises(NotFound):
            invites.invite(self.team.id, self.x, 999999)
        with self.assertRaises(PermissionDenied):
            invites.invite(self.team.id, self.z, self.y.id)

        invites.invite(self.team.id, self.x, self.y.id)
        with self.assertRaises(Conflict):
            invites.invite(self.team.id, self.x, self.y.id)

        beta = teams.create_team("h1", self.z, "Beta")
        with self.assertRaises(Conflict):
            invites.invite(self.team.id, self.x, self.z.id)
        self.assertFalse(TeamInvite.objects.filter(invitee=self.z).exists())
        self.assertEqual(beta.member_count, 1)

    def test_full_team_rejects_invites_up_front(self):
        teams.update_team(self.team.id, self.x, {"max_members": 2})
        invite = invites.invite(self.team.id, self.x, self.y.id)
        invites.respond(invite.id, self.y, "accept")

        with self.assertRaises(Conflict) as ctx:
            invites.invite(self.team.id, self.x, self.z.id)
        self.assertEqual(str(ctx.exception.detail), "Team is full")

    def test_accept_rechecks_capacity(self):
        teams.update_team(self.team.id, self.x, {"max_members": 2})
        to_y = invites.invite(self.team.id, self.x, self.y.id)
        to_z = invites.invite(self.team.id, self.x, self.z.id)

        invites.respond(to_y.id, self.y, "accept")
        with self.assertRaises(Conflict):
            invites.respond(to_z.id, self.z, "accept")

        self.assertEqual(teams.get_team(self.team.id).member_count, 2)
        to_z.refresh_from_db()
        self.assertEqual(to_z.status, TeamInvite.STATUS_PENDING)

    def test_accept_when_already_in_another_team(self):
        invite = invites.invite(self.team.id, self.x, self.y.id)
        teams.create_team("h1", self.y, "Beta")
        with self.assertRaises(Conflict):
            invites.respond(invite.id, self.y, "accept")

    def test_only_invitee_may_respond(self):
        invite = invites.invite(self.team.id, self.x, self.y.id)
        with self.assertRaises(PermissionDenied):
            invites.respond(invite.id, self.z, "accept")
        with self.assertRaises(NotFound):
            invites.respond(999999, self.y, "accept")
        with self.assertRaises(ValidationError):
            invites.respond(invite.id, self.y, "maybe")

    def test_expired_invite_is_persisted_before_conflict(self):
        invite = invites.invite(self.team.id, self.x, self.y.id)
        self._expire(invite)

        with self.assertRaises(Conflict) as ctx:
            invites.respond(invite.id, self.y, "accept")
        self.assertEqual(str(ctx.exception.detail), "This invite has expired")

        invite.refresh_from_db()
        self.assertEqual(invite.status, TeamInvite.STATUS_EXPIRED)
        self.assertFalse(TeamMembership.objects.filter(user=self.y).exists())
        self.assertEqual(invites.get_my_invites(self.y), [])

    def test_reject_on_expired_invite_persists_expiry(self):
        invite = invites.invite(self.team.id, self.x, self.y.id)
        self._expire(invite)

        with self.assertRaises(Conflict) as ctx:
            invites.respond(invite.id, self.y, "reject")
        self.assertEqual(str(ctx.exception.detail), "This invite has expired")

        invite.refresh_from_db()
        self.assertEqual(invite.status, TeamInvite.STATUS_EXPIRED)
        self.assertIsNone(invite.responded_at)
        self.assertFalse(TeamMembership.objects.filter(user=self.y).exists())

    def test_reject_rechecks_expiry_under_lock(self):
        # Invite lapses between the first read and the locked re-read
        invite = invites.invite(self.team.id, self.x, self.y.id)
        self._expire(invite)

        with self.assertRaises(Conflict) as ctx:
            invites._reject(invite, self.y)
        self.assertEqual(str(ctx.exception.detail), "This invite has expired")

        invite.refresh_from_db()
        self.assertEqual(invite.status, TeamInvite.STATUS_EXPIRED)
        self.assertIsNone(invite.responded_at)

    def test_accepted_invite_cannot_be_answered_again(self):
        invite = invites.invite(self.team.id, self.x, self.y.id)
        invites.respond(invite.id, self.y, "accept")

        for action in ("accept", "reject"):
            with self.assertRaises(Conflict):
                invites.respond(invite.id, self.y, action)

        invite.refresh_from_db()
        self.assertEqual(invite.status, TeamInvite.STATUS_ACCEPTED)
        self.assertEqual(teams.get_team(self.team.id).member_count, 2)

    def test_my_invites_lists_pending_newest_first(self):
        beta = teams.create_team("h1", self.z, "Beta")
        older = invites.invite(self.team.id, self.x, self.y.id)
        newer = invites.invite(beta.id, self.z, self.y.id)
        stale = invites.invite(self.team.id, self.x, self.make_user("w").id)
        self._expire(stale)

        self.assertEqual([i.id for i in invites.get_my_invites(self.y)], [newer.id, older.id])

        invites.respond(newer.id, self.y, "reject")
        self.assertEqual([i.id for i in invites.get_my_invites(self.y)], [older.id])

    def test_stale_pending_invite_does_not_block_a_new_one(self):
        stale = invites.invite(self.team.id, self.x, self.y.id)
        self._expire(stale)

        fresh = invites.invite(self.team.id, self.x, self.y.id)
        stale.refresh_from_db()
        self.assertEqual(stale.status, TeamInvite.STATUS_EXPIRED)
        self.assertEqual(fresh.status, TeamInvite.STATUS_PENDING)

    def test_cancel_invite(self):
        invite = invites.invite(self.team.id, self.x, self.y.id)

        with self.assertRaises(PermissionDenied):
            invites.cancel_invite(invite.id, self.y)

        invites.cancel_invite(invite.id, self.x)
        self.assertFalse(TeamInvite.objects.filter(pk=invite.id).exists())
        with self.assertRaises(NotFound):
            invites.cancel_invite(invite.id, self.x)

        answered = invites.invite(self.team.id, self.x, self.y.id)
        invites.respond(answered.id, self.y, "reject")
        with self.assertRaises(Conflict):
            invites.cancel_invite(answered.id, self.x)

    def test_team_invites_visible_to_members_only(self):
        invite = invites.invite(self.team.id, self.x, self.y.id)
        self.assertEqual([i.id for i in invites.get_team_invites(self.team.id, self.x)], [invite.id])
        with self.assertRaises(PermissionDenied):
            invites.get_team_invites(self.team.id, self.z)

    def test_sweeper_expires_stale_invites(self):
        stale = invites.invite(self.team.id, self.x, self.y.id)
        live = invites.invite(self.team.id, self.x, self.z.id)
        self._expire(stale)

        self.assertEqual(expire_stale_invites_task(), 1)
        stale.refresh_from_db()
        live.refresh_from_db()
        self.assertEqual(stale.status, TeamInvite.STATUS_EXPIRED)
        self.assertEqual(live.status, TeamInvite.STATUS_PENDING)
        self.assertEqual(invites.expire_stale_invites(), 0)


class InviteApiTests(HackathonFixturesMixin, APITestCase):
    def setUp(self):
        super().setUp()
        self.client = APIClient()
        self.x = self.make_registered_user("x")
        self.y = self.make_registered_user("y")
        self.team = teams.create_team("h1", self.x, "Alpha")
        self.base_api = "/api/hackathons/"

    def test_invite_accept_flow(self):
        self.client.force_authenticate(user=self.x)
        resp = self.client.post(
            f"{self.base_api}teams/{self.team.id}/invite/",
            {"invitee_id": self.y.id, "message": "<script>x</script>Join us"},
            format="json",
        )
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED, resp.content)
        self.assertEqual(resp.data["team_name"], "Alpha")
        self.assertEqual(resp.data["hackathon_id"], str(self.hackathon.id))
        self.assertNotIn("<script>", resp.data["message"])
        invite_id = resp.data["id"]

        resp = self.client.get(f"{self.base_api}teams/{self.team.id}/invite/")
        self.assertEqual([i["id"] for i in resp.data], [invite_id])

        self.client.force_authenticate(user=self.y)
        resp = self.client.get(f"{self.base_api}teams/invites/my/")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data[0]["inviter"]["username"], "x")

        resp = self.client.post(f"{self.base_api}teams/invites/{invite_id}/accept/")
        self.assertEqual(resp.status_code, status.HTTP_200_OK, resp.content)
        self.assertEqual(resp.data["status"], TeamInvite.STATUS_ACCEPTED)

        resp = self.client.post(f"{self.base_api}teams/invites/{invite_id}/reject/")
        self.assertEqual(resp.status_code, status.HTTP_409_CONFLICT)

        resp = self.client.get(f"{self.base_api}h1/my-team/")
        self.assertEqual(resp.data["role"], TeamMembership.ROLE_MEMBER)

    def test_unknown_action_is_400(self):
        invite = invites.invite(self.team.id, self.x, self.y.id)
        self.client.force_authenticate(user=self.y)
        resp = self.client.post(f"{self.base_api}teams/invites/{invite.id}/maybe/")
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)

    def test_cancel_twice(self):
        invite = invites.invite(self.team.id, self.x, self.y.id)
        self.client.force_authenticate(user=self.x)
        resp = self.client.delete(f"{self.base_api}teams/invites/{invite.id}/")
        self.assertEqual(resp.status_code, status.HTTP_204_NO_CONTENT)
        resp = self.client.delete(f"{self.base_api}teams/invites/{invite.id}/")
        self.assertEqual(resp.status_code, status.HTTP_404_NOT_FOUND)
