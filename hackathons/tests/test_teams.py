from django.db import IntegrityError, transaction
from django.test import TestCase
from rest_framework import status
from rest_framework.exceptions import NotFound, PermissionDenied
from rest_framework.test import APIClient, APITestCase

from core.exceptions import Conflict
from hackathons.models import Hackathon, HackathonTeam, TeamInvite, TeamMembership
from hackathons.services import invites, teams
from .base import HackathonFixturesMixin


class TeamServiceTests(HackathonFixturesMixin, TestCase):
    def setUp(self):
        super().setUp()
        self.x = self.make_registered_user("x")
        self.y = self.make_registered_user("y")

    def test_create_team_makes_creator_leader(self):
        team = teams.create_team("h1", self.x, "Alpha")

        self.assertEqual(team.leader_id, self.x.id)
        self.assertEqual(team.member_count, 1)
        self.assertFalse(team.is_full)
        self.assertEqual(team.max_members, 5)

        leader_rows = TeamMembership.objects.filter(team=team, role=TeamMembership.ROLE_LEADER)
        self.assertEqual([m.user_id for m in leader_rows], [self.x.id])

    def test_create_team_requires_registration(self):
        outsider = self.make_user("outsider")
        with self.assertRaises(PermissionDenied):
            teams.create_team("h1", outsider, "Alpha")
        self.assertFalse(HackathonTeam.objects.exists())

    def test_create_team_unknown_hackathon(self):
        with self.assertRaises(NotFound):
            teams.create_team("missing", self.x, "Alpha")

    def test_one_team_per_user_per_hackathon(self):
        teams.create_team("h1", self.x, "Alpha")
        with self.assertRaises(Conflict):
            teams.create_team("h1", self.x, "Beta")
        self.assertEqual(HackathonTeam.objects.count(), 1)

    def test_membership_constraint_backs_the_precheck(self):
        alpha = teams.create_team("h1", self.x, "Alpha")
        beta = teams.create_team("h1", self.y, "Beta")
        with self.assertRaises(IntegrityError):
            with transaction.atomic():
                TeamMembership.objects.create(team=beta, user=self.x)
        self.assertEqual(TeamMembership.objects.filter(user=self.x).get().team_id, alpha.id)

    def test_same_user_can_join_teams_in_different_hackathons(self):
        other = Hackathon.objects.create(slug="h2", title="Hackathon Two")
        self.x.hackathon_registrations.create(hackathon=other)

        teams.create_team("h1", self.x, "Alpha")
        team = teams.create_team("h2", self.x, "Alpha")
        self.assertEqual(team.hackathon_id, other.id)

    def test_duplicate_name_conflicts(self):
        teams.create_team("h1", self.x, "Alpha")
        with self.assertRaises(Conflict):
            teams.create_team("h1", self.y, "Alpha")
        # Nothing half-written for y
        self.assertFalse(TeamMembership.objects.filter(user=self.y).exists())

    def test_single_seat_team_is_full_at_creation(self):
        team = teams.create_team("h1", self.x, "Solo", max_members=1)
        self.assertTrue(team.is_full)
        with self.assertRaises(Conflict):
            invites.invite(team.id, self.x, self.y.id)

    def test_get_my_team(self):
        self.assertEqual(teams.get_my_team("h1", self.x), (None, None))

        team = teams.create_team("h1", self.x, "Alpha")
        my_team, role = teams.get_my_team("h1", self.x)
        self.assertEqual(my_team.id, team.id)
        self.assertEqual(role, TeamMembership.ROLE_LEADER)

    def test_list_teams_filters_and_counts(self):
        alpha = teams.create_team("h1", self.x, "Alpha Wolves", is_open=True)
        teams.create_team("h1", self.y, "Beta", max_members=1)

        page = teams.list_teams("h1", 20, 0)
        self.assertEqual(page["count"], 2)
        by_name = {t.name: t for t in page["results"]}
        self.assertEqual(by_name["Alpha Wolves"].member_count, 1)
        self.assertTrue(by_name["Beta"].is_full)

        page = teams.list_teams("h1", 20, 0, search="wolves")
        self.assertEqual([t.id for t in page["results"]], [alpha.id])

        page = teams.list_teams("h1", 20, 0, is_open=False)
        self.assertEqual([t.name for t in page["results"]], ["Beta"])

    def test_update_is_partial(self):
        team = teams.create_team("h1", self.x, "Alpha", description="Keep me", avatar_url="a.png")

        team = teams.update_team(team.id, self.x, {"is_open": True})
        self.assertTrue(team.is_open)
        self.assertEqual(team.description, "Keep me")
        self.assertEqual(team.avatar_url, "a.png")

        team = teams.update_team(team.id, self.x, {"avatar_url": None})
        self.assertIsNone(team.avatar_url)
        self.assertEqual(team.description, "Keep me")

    def test_update_leader_only(self):
        team = teams.create_team("h1", self.x, "Alpha")
        with self.assertRaises(PermissionDenied):
            teams.update_team(team.id, self.y, {"name": "Hijacked"})

    def test_rename_onto_existing_name_conflicts(self):
        teams.create_team("h1", self.x, "Alpha")
        beta = teams.create_team("h1", self.y, "Beta")
        with self.assertRaises(Conflict):
            teams.update_team(beta.id, self.y, {"name": "Alpha"})
        beta.refresh_from_db()
        self.assertEqual(beta.name, "Beta")

    def test_max_members_cannot_drop_below_live_count(self):
        team = teams.create_team("h1", self.x, "Alpha")
        invite = invites.invite(team.id, self.x, self.y.id)
        invites.respond(invite.id, self.y, "accept")

        with self.assertRaises(Conflict):
            teams.update_team(team.id, self.x, {"max_members": 1})

        team = teams.update_team(team.id, self.x, {"max_members": 2})
        self.assertTrue(team.is_full)

    def test_delete_team_removes_memberships_and_invites(self):
        team = teams.create_team("h1", self.x, "Alpha")
        invites.invite(team.id, self.x, self.y.id)

        with self.assertRaises(PermissionDenied):
            teams.delete_team(team.id, self.y)

        teams.delete_team(team.id, self.x)
        self.assertFalse(HackathonTeam.objects.filter(pk=team.id).exists())
        self.assertFalse(TeamMembership.objects.filter(team_id=team.id).exists())
        self.assertFalse(TeamInvite.objects.exists())
        self.assertEqual(invites.get_my_invites(self.y), [])

        # The leader is free to start over
        teams.create_team("h1", self.x, "Alpha")

    def test_leave_team(self):
        team = teams.create_team("h1", self.x, "Alpha")
        outsider = self.make_registered_user("outsider")

        with self.assertRaises(PermissionDenied):
            teams.leave_team(team.id, self.x)
        with self.assertRaises(PermissionDenied):
            teams.leave_team(team.id, outsider)
        with self.assertRaises(NotFound):
            teams.leave_team(999999, self.y)

        invite = invites.invite(team.id, self.x, self.y.id)
        invites.respond(invite.id, self.y, "accept")
        teams.leave_team(team.id, self.y)
        self.assertEqual(teams.get_team(team.id).member_count, 1)

    def test_kick_member(self):
        team = teams.create_team("h1", self.x, "Alpha")
        invite = invites.invite(team.id, self.x, self.y.id)
        invites.respond(invite.id, self.y, "accept")

        with self.assertRaises(PermissionDenied):
            teams.kick_member(team.id, self.y, self.x.id)
        with self.assertRaises(PermissionDenied):
            teams.kick_member(team.id, self.x, self.x.id)
        with self.assertRaises(NotFound):
            teams.kick_member(team.id, self.x, self.make_user("ghost").id)

        teams.kick_member(team.id, self.x, self.y.id)
        self.assertFalse(TeamMembership.objects.filter(user=self.y).exists())
        # Still exactly one leader
        self.assertEqual(
            TeamMembership.objects.filter(team=team, role=TeamMembership.ROLE_LEADER).count(), 1
        )


class TeamApiTests(HackathonFixturesMixin, APITestCase):
    def setUp(self):
        super().setUp()
        self.client = APIClient()
        self.x = self.make_registered_user("x")
        self.y = self.make_registered_user("y")
        self.base_api = "/api/hackathons/"

    def test_create_and_read_team(self):
        self.client.force_authenticate(user=self.x)

        resp = self.client.post(
            f"{self.base_api}h1/teams/",
            {"name": "  <i>Alpha</i>   Team ", "description": "We build"},
            format="json",
        )
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED, resp.content)
        self.assertEqual(resp.data["name"], "Alpha Team")
        self.assertEqual(resp.data["member_count"], 1)
        self.assertFalse(resp.data["is_full"])
        self.assertEqual(resp.data["my_role"], TeamMembership.ROLE_LEADER)
        self.assertEqual(resp.data["leader"]["id"], self.x.id)
        self.assertEqual(resp.data["members"][0]["user_id"], self.x.id)
        team_id = resp.data["id"]

        # Anonymous read has no role
        self.client.force_authenticate(user=None)
        resp = self.client.get(f"{self.base_api}teams/{team_id}/")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertIsNone(resp.data["my_role"])

        resp = self.client.get(f"{self.base_api}h1/teams/?is_open=false")
        self.assertEqual(resp.data["count"], 1)

    def test_create_rejects_out_of_range_max_members(self):
        self.client.force_authenticate(user=self.x)
        for bad in (0, 11):
            resp = self.client.post(
                f"{self.base_api}h1/teams/", {"name": "Alpha", "max_members": bad}, format="json"
            )
            self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST, resp.content)

    def test_unregistered_user_gets_403(self):
        self.client.force_authenticate(user=self.make_user("outsider"))
        resp = self.client.post(f"{self.base_api}h1/teams/", {"name": "Alpha"}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN, resp.content)

    def test_patch_distinguishes_absent_from_null(self):
        team = teams.create_team("h1", self.x, "Alpha", description="Keep me", avatar_url="a.png")
        self.client.force_authenticate(user=self.x)

        resp = self.client.patch(f"{self.base_api}teams/{team.id}/", {"avatar_url": None}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_200_OK, resp.content)
        self.assertIsNone(resp.data["avatar_url"])
        self.assertEqual(resp.data["description"], "Keep me")
        self.assertFalse(resp.data["is_open"])

    def test_my_team_endpoint(self):
        self.client.force_authenticate(user=self.y)
        resp = self.client.get(f"{self.base_api}h1/my-team/")
        self.assertEqual(resp.data, {"team": None, "role": None})

        team = teams.create_team("h1", self.y, "Beta")
        resp = self.client.get(f"{self.base_api}h1/my-team/")
        self.assertEqual(resp.data["team"]["id"], team.id)
        self.assertEqual(resp.data["role"], TeamMembership.ROLE_LEADER)

    def test_leader_cannot_leave(self):
        team = teams.create_team("h1", self.x, "Alpha")
        self.client.force_authenticate(user=self.x)
        resp = self.client.post(f"{self.base_api}teams/{team.id}/leave/")
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)

    def test_delete_team(self):
        team = teams.create_team("h1", self.x, "Alpha")
        self.client.force_authenticate(user=self.y)
        resp = self.client.delete(f"{self.base_api}teams/{team.id}/")
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)

        self.client.force_authenticate(user=self.x)
        resp = self.client.delete(f"{self.base_api}teams/{team.id}/")
        self.assertEqual(resp.status_code, status.HTTP_204_NO_CONTENT)
        resp = self.client.get(f"{self.base_api}teams/{team.id}/")
        self.assertEqual(resp.status_code, status.HTTP_404_NOT_FOUND)
