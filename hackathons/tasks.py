# hackathons/tasks.py

from celery import shared_task

from .services.invites import expire_stale_invites


@shared_task
def expire_stale_invites_task():
    """
    Periodic sweep (see CELERY_BEAT_SCHEDULE). Reads and responses expire
    invites lazily anyway; this keeps stored statuses tidy in between.
    """
    return expire_stale_invites()
