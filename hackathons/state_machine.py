# hackathons/state_machine.py
"""
Team invite state machine.

pending → accepted | rejected | expired

Cancelling deletes a pending invite outright, so it has no target state here.
Accepted, rejected and expired are terminal.
"""
from typing import Tuple
import logging

from django.utils import timezone

from .models import TeamInvite

logger = logging.getLogger("gmi.hackathons")


VALID_TRANSITIONS = {
    TeamInvite.STATUS_PENDING: [
        TeamInvite.STATUS_ACCEPTED,
        TeamInvite.STATUS_REJECTED,
        TeamInvite.STATUS_EXPIRED,
    ],
    TeamInvite.STATUS_ACCEPTED: [],
    TeamInvite.STATUS_REJECTED: [],
    TeamInvite.STATUS_EXPIRED: [],
}


def can_transition(invite: TeamInvite, new_status: str) -> Tuple[bool, str]:
    """
    Check if an invite can move to a new status.

    Returns (can_transition: bool, reason: str)
    """
    if new_status not in dict(TeamInvite.STATUS_CHOICES):
        return False, f"Invalid status: {new_status}"

    if new_status not in VALID_TRANSITIONS.get(invite.status, []):
        return False, f"Invite already {invite.status}"

    return True, ""


def transition(invite: TeamInvite, new_status: str, actor=None, save: bool = True) -> Tuple[bool, str]:
    """
    Move an invite to ``new_status``; answers also stamp ``responded_at``.

    Returns (success: bool, message: str)
    """
    can, reason = can_transition(invite, new_status)

    if not can:
        logger.warning(
            f"Invalid invite transition attempted: invite={invite.id}, "
            f"from={invite.status}, to={new_status}, actor={getattr(actor, 'id', 'unknown')}. "
            f"Reason: {reason}"
        )
        return False, reason

    old_status = invite.status
    invite.status = new_status
    if new_status != TeamInvite.STATUS_EXPIRED:
        invite.responded_at = timezone.now()

    if save:
        invite.save(update_fields=["status", "responded_at"])

    logger.info(
        f"Invite state transition: invite={invite.id}, "
        f"from={old_status}, to={new_status}, actor={getattr(actor, 'id', 'unknown')}"
    )
    return True, f"Transitioned from '{old_status}' to '{new_status}'"


def is_terminal_status(status: str) -> bool:
    return not VALID_TRANSITIONS.get(status)
