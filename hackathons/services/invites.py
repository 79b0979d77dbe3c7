# hackathons/services/invites.py
"""
Team invitation workflow.

Invites are the only way (besides creating a team) to join one. Expiry is
resolved lazily: whenever an invite is read or answered after ``expires_at``
it is persisted as expired before anything else happens.
"""
import logging

from django.contrib.auth import get_user_model
from django.db import IntegrityError, transaction
from django.utils import timezone
from rest_framework.exceptions import NotFound, PermissionDenied, ValidationError

from core.constants import (
    ACTIVITY_INVITE_ACCEPTED,
    ACTIVITY_INVITE_CANCELED,
    ACTIVITY_INVITE_REJECTED,
    ACTIVITY_INVITE_SENT,
    ACTIVITY_TEAM_JOINED,
)
from core.exceptions import Conflict
from core.services import ActivityService
from hackathons import state_machine
from hackathons.models import HackathonRegistration, HackathonTeam, TeamInvite, TeamMembership
from hackathons.services.teams import ALREADY_IN_TEAM, get_team_or_404

logger = logging.getLogger("gmi.hackathons")

User = get_user_model()

ACTION_ACCEPT = "accept"
ACTION_REJECT = "reject"
RESPONSE_ACTIONS = (ACTION_ACCEPT, ACTION_REJECT)

TEAM_FULL = "Team is full"
INVITE_EXPIRED = "This invite has expired"


def expire_past_due(queryset, now=None) -> int:
    """Persist ``expired`` on every past-due pending invite in ``queryset``."""
    now = now or timezone.now()
    return queryset.filter(
        status=TeamInvite.STATUS_PENDING,
        expires_at__lt=now,
    ).update(status=TeamInvite.STATUS_EXPIRED)


def _invite_queryset():
    return TeamInvite.objects.select_related("team", "team__hackathon", "inviter", "invitee")


def _get_invite(invite_id):
    try:
        return _invite_queryset().get(pk=invite_id)
    except TeamInvite.DoesNotExist:
        raise NotFound("Invite not found")


def invite(team_id, inviter, invitee_id, message=None):
    team = get_team_or_404(team_id)

    invitee = User.objects.filter(pk=invitee_id).first()
    if invitee is None:
        raise NotFound("User not found")

    if not TeamMembership.objects.filter(team=team, user=inviter).exists():
        raise PermissionDenied("Only team members can send invites")

    if team.is_full:
        raise Conflict(TEAM_FULL)

    if TeamMembership.objects.filter(hackathon_id=team.hackathon_id, user=invitee).exists():
        raise Conflict("This user is already in a team for this hackathon")

    # A stale pending invite must not block a fresh one
    expire_past_due(TeamInvite.objects.filter(team=team, invitee=invitee))

    if TeamInvite.objects.filter(team=team, invitee=invitee, status=TeamInvite.STATUS_PENDING).exists():
        raise Conflict("An invite is already pending for this user")

    try:
        with transaction.atomic():
            team_invite = TeamInvite.objects.create(
                team=team,
                inviter=inviter,
                invitee=invitee,
                message=message or None,
            )
            ActivityService.log_activity(
                actor=inviter,
                verb=ACTIVITY_INVITE_SENT,
                target=team_invite,
                hackathon=team.hackathon,
                metadata={"team_id": team.id, "team_name": team.name, "invitee_id": invitee.id},
            )
    except IntegrityError:
        raise Conflict("An invite is already pending for this user")

    logger.info(f"Invite sent: invite={team_invite.id}, team={team.id}, inviter={inviter.id}, invitee={invitee.id}")
    return _get_invite(team_invite.id)


def respond(invite_id, user, action):
    """
    Accept or reject an invite addressed to ``user``.

    A past-due invite is stored as expired first, then the response fails.
    """
    if action not in RESPONSE_ACTIONS:
        raise ValidationError({"action": f"Must be one of: {', '.join(RESPONSE_ACTIONS)}"})

    team_invite = _get_invite(invite_id)

    if team_invite.invitee_id != user.id:
        raise PermissionDenied("This invite is not addressed to you")

    if state_machine.is_terminal_status(team_invite.status):
        raise Conflict(f"This invite has already been {team_invite.status}")

    if team_invite.is_past_due():
        state_machine.transition(team_invite, TeamInvite.STATUS_EXPIRED, actor=user)
        raise Conflict(INVITE_EXPIRED)

    if action == ACTION_REJECT:
        return _reject(team_invite, user)
    return _accept(team_invite, user)


def _lock_pending(invite_id):
    try:
        team_invite = _invite_queryset().select_for_update().get(pk=invite_id)
    except TeamInvite.DoesNotExist:
        raise NotFound("Invite not found")

    if state_machine.is_terminal_status(team_invite.status):
        raise Conflict(f"This invite has already been {team_invite.status}")
    return team_invite


def _reject(team_invite, user):
    expired = False

    with transaction.atomic():
        team_invite = _lock_pending(team_invite.id)

        if team_invite.is_past_due():
            state_machine.transition(team_invite, TeamInvite.STATUS_EXPIRED, actor=user)
            expired = True
        else:
            state_machine.transition(team_invite, TeamInvite.STATUS_REJECTED, actor=user)
            ActivityService.log_activity(
                actor=user,
                verb=ACTIVITY_INVITE_REJECTED,
                target=team_invite,
                hackathon=team_invite.team.hackathon,
                metadata={"team_id": team_invite.team_id},
            )

    if expired:
        raise Conflict(INVITE_EXPIRED)

    logger.info(f"Invite rejected: invite={team_invite.id}, team={team_invite.team_id}, user={user.id}")
    return team_invite


def _accept(team_invite, user):
    expired = False

    with transaction.atomic():
        # Lock the team row first: capacity check and insert are serialized per team
        try:
            team = HackathonTeam.objects.select_for_update().select_related("hackathon").get(pk=team_invite.team_id)
        except HackathonTeam.DoesNotExist:
            raise NotFound("Team not found")

        team_invite = _lock_pending(team_invite.id)

        if team_invite.is_past_due():
            state_machine.transition(team_invite, TeamInvite.STATUS_EXPIRED, actor=user)
            expired = True
        else:
            if team.memberships.count() >= team.max_members:
                raise Conflict(TEAM_FULL)

            if TeamMembership.objects.filter(hackathon_id=team.hackathon_id, user=user).exists():
                raise Conflict(ALREADY_IN_TEAM)

            # Joining through an invite enrolls the user if they skipped registration
            HackathonRegistration.objects.get_or_create(hackathon_id=team.hackathon_id, user=user)

            try:
                with transaction.atomic():
                    TeamMembership.objects.create(
                        team=team,
                        hackathon_id=team.hackathon_id,
                        user=user,
                        role=TeamMembership.ROLE_MEMBER,
                    )
            except IntegrityError:
                raise Conflict(ALREADY_IN_TEAM)

            state_machine.transition(team_invite, TeamInvite.STATUS_ACCEPTED, actor=user)
            ActivityService.log_activity(
                actor=user,
                verb=ACTIVITY_INVITE_ACCEPTED,
                target=team_invite,
                hackathon=team.hackathon,
                metadata={"team_id": team.id},
            )
            ActivityService.log_activity(
                actor=user,
                verb=ACTIVITY_TEAM_JOINED,
                target=team,
                hackathon=team.hackathon,
                metadata={"team_name": team.name, "via_invite": team_invite.id},
            )

    # Raised after the block so the expired status is committed
    if expired:
        raise Conflict(INVITE_EXPIRED)

    logger.info(f"Invite accepted: invite={team_invite.id}, team={team.id}, user={user.id}")
    return team_invite


def cancel_invite(invite_id, user):
    """Inviter only, pending only. Cancelling deletes the invite."""
    team_invite = _get_invite(invite_id)

    if team_invite.inviter_id != user.id:
        raise PermissionDenied("Only the inviter can cancel this invite")

    if state_machine.is_terminal_status(team_invite.status):
        raise Conflict("Only pending invites can be cancelled")

    with transaction.atomic():
        ActivityService.log_activity(
            actor=user,
            verb=ACTIVITY_INVITE_CANCELED,
            target=team_invite,
            hackathon=team_invite.team.hackathon,
            metadata={"team_id": team_invite.team_id, "invitee_id": team_invite.invitee_id},
        )
        team_invite.delete()

    logger.info(f"Invite cancelled: invite={invite_id}, by={user.id}")


def get_my_invites(user):
    """Pending invites addressed to ``user``, newest first."""
    expire_past_due(TeamInvite.objects.filter(invitee=user))
    return list(
        _invite_queryset()
        .filter(invitee=user, status=TeamInvite.STATUS_PENDING)
        .order_by("-created_at", "-id")
    )


def get_team_invites(team_id, user):
    """Pending invites sent by a team; visible to its members."""
    team = get_team_or_404(team_id)
    if not TeamMembership.objects.filter(team=team, user=user).exists():
        raise PermissionDenied("Only team members can view the team's invites")

    expire_past_due(TeamInvite.objects.filter(team=team))
    return list(
        _invite_queryset()
        .filter(team=team, status=TeamInvite.STATUS_PENDING)
        .order_by("-created_at", "-id")
    )


def expire_stale_invites() -> int:
    count = expire_past_due(TeamInvite.objects.all())
    if count:
        logger.info(f"Expired {count} stale team invites")
    return count
