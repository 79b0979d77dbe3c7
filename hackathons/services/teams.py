# hackathons/services/teams.py

import logging

from django.conf import settings
from django.db import IntegrityError, transaction
from django.db.models import Count, Prefetch
from rest_framework.exceptions import NotFound, PermissionDenied

from core.constants import (
    ACTIVITY_TEAM_CREATED,
    ACTIVITY_TEAM_DELETED,
    ACTIVITY_TEAM_LEFT,
    ACTIVITY_TEAM_MEMBER_REMOVED,
    ACTIVITY_TEAM_UPDATED,
)
from core.exceptions import Conflict
from core.services import ActivityService
from hackathons.models import HackathonTeam, TeamInvite, TeamMembership
from hackathons.resolver import resolve_hackathon_id, require_hackathon
from hackathons.services import empty_page, paginate
from hackathons.services.registrations import is_registered

logger = logging.getLogger("gmi.hackathons")

UPDATABLE_TEAM_FIELDS = ("name", "description", "avatar_url", "max_members", "is_open")

ALREADY_IN_TEAM = "You are already in a team for this hackathon"
NAME_TAKEN = "A team with this name already exists in this hackathon"


def _team_queryset():
    return (
        HackathonTeam.objects.select_related("hackathon", "leader")
        .prefetch_related(
            Prefetch(
                "memberships",
                queryset=TeamMembership.objects.select_related("user").order_by("joined_at", "id"),
            )
        )
    )


def get_team_or_404(team_id, for_update=False):
    queryset = HackathonTeam.objects.select_related("hackathon", "leader")
    if for_update:
        queryset = queryset.select_for_update()
    try:
        return queryset.get(pk=team_id)
    except HackathonTeam.DoesNotExist:
        raise NotFound("Team not found")


def find_membership(hackathon_id, user):
    """The user's membership in any team of the hackathon, or None."""
    if not user or not user.is_authenticated:
        return None
    return (
        TeamMembership.objects.select_related("team")
        .filter(hackathon_id=hackathon_id, user=user)
        .first()
    )


def member_role(team, user):
    if not user or not user.is_authenticated:
        return None
    for membership in team.memberships.all():
        if membership.user_id == user.id:
            return membership.role
    return None


def create_team(
    hackathon_ref,
    creator,
    name,
    description=None,
    avatar_url=None,
    max_members=None,
    is_open=False,
):
    """
    Create a team with ``creator`` as its leader.

    Checks, first failure wins:
    1. creator registered for the hackathon  -> PermissionDenied
    2. creator not in any team of the hackathon -> Conflict
    3. name unique in the hackathon (DB constraint) -> Conflict
    """
    hackathon = require_hackathon(hackathon_ref)

    if not is_registered(hackathon.id, creator):
        raise PermissionDenied("You must register for this hackathon before creating a team")

    if find_membership(hackathon.id, creator):
        raise Conflict(ALREADY_IN_TEAM)

    if max_members is None:
        max_members = settings.HACKATHON_TEAM_DEFAULT_MAX_MEMBERS

    try:
        with transaction.atomic():
            team = HackathonTeam.objects.create(
                hackathon=hackathon,
                name=name,
                description=description,
                avatar_url=avatar_url,
                leader=creator,
                max_members=max_members,
                is_open=is_open,
            )
            # Team and leader row commit together or not at all
            TeamMembership.objects.create(
                team=team,
                hackathon=hackathon,
                user=creator,
                role=TeamMembership.ROLE_LEADER,
            )
            ActivityService.log_activity(
                actor=creator,
                verb=ACTIVITY_TEAM_CREATED,
                target=team,
                hackathon=hackathon,
                metadata={"team_name": team.name, "max_members": team.max_members},
            )
    except IntegrityError:
        if TeamMembership.objects.filter(hackathon=hackathon, user=creator).exists():
            raise Conflict(ALREADY_IN_TEAM)
        raise Conflict(NAME_TAKEN)

    logger.info(f"Team created: team={team.id}, hackathon={hackathon.id}, leader={creator.id}")
    return get_team(team.id)


def get_team(team_id):
    try:
        return _team_queryset().get(pk=team_id)
    except HackathonTeam.DoesNotExist:
        raise NotFound("Team not found")


def get_my_team(hackathon_ref, user):
    """Returns (team, role); (None, None) when the user has no team."""
    hackathon_id = resolve_hackathon_id(hackathon_ref)
    if hackathon_id is None:
        return None, None

    membership = find_membership(hackathon_id, user)
    if membership is None:
        return None, None

    return get_team(membership.team_id), membership.role


def list_teams(hackathon_ref, limit, offset, search=None, is_open=None):
    hackathon_id = resolve_hackathon_id(hackathon_ref)
    if hackathon_id is None:
        return empty_page(limit, offset)

    queryset = (
        HackathonTeam.objects.filter(hackathon_id=hackathon_id)
        .select_related("leader")
        .annotate(live_member_count=Count("memberships", distinct=True))
        .order_by("-created_at", "-id")
    )
    if search:
        queryset = queryset.filter(name__icontains=search)
    if is_open is not None:
        queryset = queryset.filter(is_open=is_open)

    return paginate(queryset, limit, offset)


def update_team(team_id, requester, patch):
    """
    Apply a partial update. ``patch`` only holds the fields the caller sent;
    a key mapped to None clears that field.
    """
    with transaction.atomic():
        team = get_team_or_404(team_id, for_update=True)

        if team.leader_id != requester.id:
            raise PermissionDenied("Only the team leader can update the team")

        if "max_members" in patch:
            current = team.memberships.count()
            if patch["max_members"] < current:
                raise Conflict(
                    f"max_members cannot be lower than the current member count ({current})"
                )

        changed = [field for field in UPDATABLE_TEAM_FIELDS if field in patch]
        if changed:
            for field in changed:
                setattr(team, field, patch[field])
            try:
                with transaction.atomic():
                    team.save(update_fields=changed + ["updated_at"])
            except IntegrityError:
                raise Conflict(NAME_TAKEN)

            ActivityService.log_activity(
                actor=requester,
                verb=ACTIVITY_TEAM_UPDATED,
                target=team,
                hackathon=team.hackathon,
                metadata={"fields": changed},
            )
            logger.info(f"Team updated: team={team.id}, fields={changed}")

    return get_team(team.id)


def delete_team(team_id, requester):
    """Leader only. Memberships and every invite of the team go with it."""
    with transaction.atomic():
        team = get_team_or_404(team_id, for_update=True)

        if team.leader_id != requester.id:
            raise PermissionDenied("Only the team leader can delete the team")

        pending_invites = team.invites.filter(status=TeamInvite.STATUS_PENDING).count()
        ActivityService.log_activity(
            actor=requester,
            verb=ACTIVITY_TEAM_DELETED,
            target=team,
            hackathon=team.hackathon,
            metadata={"team_name": team.name, "pending_invites": pending_invites},
        )
        team.invites.all().delete()
        team.delete()

    logger.info(f"Team deleted: team={team_id}, by={requester.id}, pending_invites={pending_invites}")


def leave_team(team_id, user):
    team = get_team_or_404(team_id)

    membership = TeamMembership.objects.filter(team=team, user=user).first()
    if membership is None:
        raise PermissionDenied("You are not a member of this team")

    if membership.role == TeamMembership.ROLE_LEADER or team.leader_id == user.id:
        raise PermissionDenied("Team leaders cannot leave. Transfer leadership or delete the team.")

    with transaction.atomic():
        membership.delete()
        ActivityService.log_activity(
            actor=user,
            verb=ACTIVITY_TEAM_LEFT,
            target=team,
            hackathon=team.hackathon,
            metadata={"team_name": team.name},
        )

    logger.info(f"Team left: team={team.id}, user={user.id}")


def kick_member(team_id, leader, member_id):
    team = get_team_or_404(team_id)

    if team.leader_id != leader.id:
        raise PermissionDenied("Only the team leader can remove members")

    if int(member_id) == leader.id:
        raise PermissionDenied("You cannot remove yourself. Delete the team instead.")

    membership = TeamMembership.objects.filter(team=team, user_id=member_id).first()
    if membership is None:
        raise NotFound("Member not found in this team")

    with transaction.atomic():
        membership.delete()
        ActivityService.log_activity(
            actor=leader,
            verb=ACTIVITY_TEAM_MEMBER_REMOVED,
            target=team,
            hackathon=team.hackathon,
            metadata={"team_name": team.name, "member_id": int(member_id)},
        )

    logger.info(f"Team member removed: team={team.id}, member={member_id}, by={leader.id}")
