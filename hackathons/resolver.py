# hackathons/resolver.py
"""
Maps a human-facing slug or a canonical id to the canonical hackathon id.

Reads that cannot resolve a hackathon degrade to neutral results; writes
must go through ``require_hackathon_id`` and fail loudly.
"""
import logging
import re
import uuid
from typing import Optional

from rest_framework.exceptions import NotFound

from .models import Hackathon

logger = logging.getLogger("gmi.hackathons")

UUID_RE = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$",
    re.IGNORECASE,
)


def resolve_hackathon_id(id_or_slug) -> Optional[uuid.UUID]:
    if isinstance(id_or_slug, uuid.UUID):
        return id_or_slug

    value = str(id_or_slug or "").strip()
    if not value:
        return None

    # Canonical ids are trusted as-is, no lookup
    if UUID_RE.match(value):
        return uuid.UUID(value)

    hackathon_id = (
        Hackathon.objects.filter(slug=value)
        .values_list("id", flat=True)
        .first()
    )
    if hackathon_id is None:
        logger.warning(f"Hackathon not found: {value}")
    return hackathon_id


def require_hackathon_id(id_or_slug) -> uuid.UUID:
    hackathon_id = resolve_hackathon_id(id_or_slug)
    if hackathon_id is None:
        raise NotFound(f"Hackathon not found: {id_or_slug}")
    return hackathon_id


def require_hackathon(id_or_slug) -> Hackathon:
    """Write-path lookup: the row itself must exist, not just a well-formed id."""
    hackathon_id = require_hackathon_id(id_or_slug)
    try:
        return Hackathon.objects.get(pk=hackathon_id)
    except Hackathon.DoesNotExist:
        raise NotFound(f"Hackathon not found: {id_or_slug}")
