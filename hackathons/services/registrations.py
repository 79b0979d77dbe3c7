# hackathons/services/registrations.py

import logging

from django.db import IntegrityError, transaction

from core.constants import ACTIVITY_HACKATHON_REGISTERED
from core.exceptions import Conflict
from core.services import ActivityService
from hackathons.models import HackathonRegistration
from hackathons.resolver import resolve_hackathon_id, require_hackathon
from hackathons.services import empty_page, paginate

logger = logging.getLogger("gmi.hackathons")


def register(hackathon_ref, user, team_name=None):
    hackathon = require_hackathon(hackathon_ref)

    # Fast fail; the unique constraint below closes the race
    if HackathonRegistration.objects.filter(hackathon=hackathon, user=user).exists():
        raise Conflict("You are already registered for this hackathon")

    try:
        with transaction.atomic():
            registration = HackathonRegistration.objects.create(
                hackathon=hackathon,
                user=user,
                team_name=team_name or None,
            )
            ActivityService.log_activity(
                actor=user,
                verb=ACTIVITY_HACKATHON_REGISTERED,
                target=registration,
                hackathon=hackathon,
                metadata={"hackathon_slug": hackathon.slug, "team_name": registration.team_name},
            )
    except IntegrityError:
        raise Conflict("You are already registered for this hackathon")

    logger.info(f"Registration created: user={user.id}, hackathon={hackathon.id}")
    return registration


def get_registration(hackathon_ref, user):
    """Returns the registration or None. Never raises for "not registered"."""
    if not user or not user.is_authenticated:
        return None

    hackathon_id = resolve_hackathon_id(hackathon_ref)
    if hackathon_id is None:
        return None

    return HackathonRegistration.objects.filter(hackathon_id=hackathon_id, user=user).first()


def is_registered(hackathon_id, user) -> bool:
    return HackathonRegistration.objects.filter(hackathon_id=hackathon_id, user=user).exists()


def list_participants(hackathon_ref, limit, offset):
    hackathon_id = resolve_hackathon_id(hackathon_ref)
    if hackathon_id is None:
        return empty_page(limit, offset)

    queryset = (
        HackathonRegistration.objects.filter(hackathon_id=hackathon_id)
        .select_related("user")
        .order_by("-registered_at", "-id")
    )
    return paginate(queryset, limit, offset)
