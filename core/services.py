import logging

from django.contrib.contenttypes.models import ContentType

from .models import ActivityLog

logger = logging.getLogger("gmi.core")


class ActivityService:
    @staticmethod
    def log_activity(actor, verb, target, hackathon=None, metadata=None):
        """
        Logs a domain activity. Runs inside the caller's transaction so the
        record disappears together with a rolled-back mutation.
        """
        if metadata is None:
            metadata = {}

        activity = ActivityLog.objects.create(
            actor=actor,
            verb=verb,
            content_type=ContentType.objects.get_for_model(target),
            object_id=str(target.pk),
            hackathon=hackathon,
            metadata=metadata,
        )
        logger.debug("Activity logged: %s by user=%s on %s", verb, actor.pk, activity.object_id)
        return activity
