# hackathons/services/submissions.py

import logging

from django.db import IntegrityError, transaction
from django.db.models import Count, Exists, F, OuterRef, Q, Value
from django.utils import timezone
from rest_framework.exceptions import NotFound, PermissionDenied

from core.constants import (
    ACTIVITY_SUBMISSION_CREATED,
    ACTIVITY_SUBMISSION_DELETED,
    ACTIVITY_SUBMISSION_SCORED,
)
from core.exceptions import Conflict
from core.services import ActivityService
from hackathons.models import HackathonRegistration, HackathonSubmission, SubmissionVote
from hackathons.resolver import resolve_hackathon_id, require_hackathon
from hackathons.services import empty_page, paginate
from projects.models import Project

logger = logging.getLogger("gmi.hackathons")

UPDATABLE_SUBMISSION_FIELDS = ("pitch_video_url", "pitch_deck_url", "notes")

SORT_NEWEST = "newest"
SORT_VOTES = "votes"
SORT_SCORE = "score"
SORT_OPTIONS = (SORT_NEWEST, SORT_VOTES, SORT_SCORE)

ALREADY_SUBMITTED = "This project has already been submitted to this hackathon"


def _with_vote_info(queryset, viewer=None):
    queryset = queryset.annotate(vote_count=Count("votes", distinct=True))
    if viewer is not None and viewer.is_authenticated:
        queryset = queryset.annotate(
            has_voted=Exists(SubmissionVote.objects.filter(submission=OuterRef("pk"), user=viewer))
        )
    else:
        queryset = queryset.annotate(has_voted=Value(False))
    return queryset


def _submission_queryset(viewer=None):
    return _with_vote_info(
        HackathonSubmission.objects.select_related("hackathon", "project", "user", "scored_by"),
        viewer,
    )


def _get_submission_or_404(submission_id, for_update=False):
    queryset = HackathonSubmission.objects.select_related("hackathon", "project")
    if for_update:
        queryset = queryset.select_for_update()
    try:
        return queryset.get(pk=submission_id)
    except HackathonSubmission.DoesNotExist:
        raise NotFound("Submission not found")


def create_submission(
    hackathon_ref,
    project_id,
    submitter,
    pitch_video_url=None,
    pitch_deck_url=None,
    notes=None,
):
    """
    Submit one of the submitter's projects to a hackathon.

    A duplicate (hackathon, project) is reported as Conflict before ownership
    is checked, whoever the caller is.
    """
    hackathon = require_hackathon(hackathon_ref)

    if HackathonSubmission.objects.filter(hackathon=hackathon, project_id=project_id).exists():
        raise Conflict(ALREADY_SUBMITTED)

    project = Project.objects.filter(pk=project_id).first()
    if project is None or project.author_id != submitter.id:
        raise PermissionDenied("You can only submit your own projects")

    try:
        with transaction.atomic():
            submission = HackathonSubmission.objects.create(
                hackathon=hackathon,
                project=project,
                user=submitter,
                pitch_video_url=pitch_video_url or None,
                pitch_deck_url=pitch_deck_url or None,
                notes=notes or None,
                status=HackathonSubmission.STATUS_SUBMITTED,
            )
            ActivityService.log_activity(
                actor=submitter,
                verb=ACTIVITY_SUBMISSION_CREATED,
                target=submission,
                hackathon=hackathon,
                metadata={"project_id": project.id, "project_title": project.title},
            )
    except IntegrityError:
        raise Conflict(ALREADY_SUBMITTED)

    logger.info(f"Submission created: submission={submission.id}, hackathon={hackathon.id}, project={project.id}")
    return get_submission(submission.id, viewer=submitter)


def get_submission(submission_id, viewer=None):
    try:
        return _submission_queryset(viewer).get(pk=submission_id)
    except HackathonSubmission.DoesNotExist:
        raise NotFound("Submission not found")


def list_submissions(
    hackathon_ref,
    limit,
    offset,
    viewer=None,
    user_id=None,
    status=None,
    search=None,
    sort_by=SORT_NEWEST,
):
    hackathon_id = resolve_hackathon_id(hackathon_ref)
    if hackathon_id is None:
        return empty_page(limit, offset)

    queryset = _submission_queryset(viewer).filter(hackathon_id=hackathon_id)

    if user_id is not None:
        queryset = queryset.filter(user_id=user_id)
    if status:
        queryset = queryset.filter(status=status)
    if search:
        queryset = queryset.filter(Q(project__title__icontains=search) | Q(notes__icontains=search))

    if sort_by == SORT_VOTES:
        queryset = queryset.order_by("-vote_count", "-submitted_at", "-id")
    elif sort_by == SORT_SCORE:
        queryset = queryset.order_by(F("judge_score").desc(nulls_last=True), "-submitted_at", "-id")
    else:
        queryset = queryset.order_by("-submitted_at", "-id")

    return paginate(queryset, limit, offset)


def update_submission(submission_id, user, patch):
    """Owner only. ``patch`` carries just the supplied fields; None clears."""
    submission = _get_submission_or_404(submission_id)

    if submission.user_id != user.id:
        raise PermissionDenied("You can only edit your own submissions")

    changed = [field for field in UPDATABLE_SUBMISSION_FIELDS if field in patch]
    for field in changed:
        setattr(submission, field, patch[field])

    # A video turns a draft into a real submission; never the other way round
    if patch.get("pitch_video_url") and submission.status == HackathonSubmission.STATUS_DRAFT:
        submission.status = HackathonSubmission.STATUS_SUBMITTED
        changed.append("status")

    if changed:
        submission.save(update_fields=changed + ["updated_at"])
        logger.info(f"Submission updated: submission={submission.id}, fields={changed}")

    return get_submission(submission.id, viewer=user)


def delete_submission(submission_id, user):
    submission = _get_submission_or_404(submission_id)

    if submission.user_id != user.id:
        raise PermissionDenied("You can only delete your own submissions")

    with transaction.atomic():
        ActivityService.log_activity(
            actor=user,
            verb=ACTIVITY_SUBMISSION_DELETED,
            target=submission,
            hackathon=submission.hackathon,
            metadata={"project_id": submission.project_id},
        )
        submission.delete()

    logger.info(f"Submission deleted: submission={submission_id}, by={user.id}")


def vote_submission(submission_id, user):
    """
    Toggle the user's vote. Returns {"vote_count", "has_voted"}.
    """
    with transaction.atomic():
        submission = _get_submission_or_404(submission_id, for_update=True)

        deleted, _ = SubmissionVote.objects.filter(submission=submission, user=user).delete()
        if deleted:
            has_voted = False
        else:
            try:
                with transaction.atomic():
                    SubmissionVote.objects.create(submission=submission, user=user)
            except IntegrityError:
                # A concurrent insert won; the vote exists either way
                pass
            has_voted = True

        vote_count = submission.votes.count()

    logger.info(f"Submission vote toggled: submission={submission_id}, user={user.id}, has_voted={has_voted}")
    return {"vote_count": vote_count, "has_voted": has_voted}


def score_submission(
    submission_id,
    admin,
    score,
    score_breakdown=None,
    judge_notes=None,
    status=HackathonSubmission.STATUS_APPROVED,
):
    if not getattr(admin, "is_platform_admin", False):
        raise PermissionDenied("Only admins can score submissions")

    with transaction.atomic():
        submission = _get_submission_or_404(submission_id, for_update=True)

        submission.judge_score = score
        submission.score_breakdown = score_breakdown or {}
        submission.judge_notes = judge_notes
        submission.status = status
        submission.scored_by = admin
        submission.scored_at = timezone.now()
        submission.save(update_fields=[
            "judge_score", "score_breakdown", "judge_notes", "status",
            "scored_by", "scored_at", "updated_at",
        ])

        ActivityService.log_activity(
            actor=admin,
            verb=ACTIVITY_SUBMISSION_SCORED,
            target=submission,
            hackathon=submission.hackathon,
            metadata={"score": score, "status": status},
        )

    logger.info(f"Submission scored: submission={submission.id}, score={score}, status={status}, by={admin.id}")
    return get_submission(submission.id, viewer=admin)


def get_hackathon_stats(hackathon_ref):
    hackathon_id = resolve_hackathon_id(hackathon_ref)
    if hackathon_id is None:
        return {"total_submissions": 0, "total_participants": 0, "category_breakdown": {}}

    submissions = HackathonSubmission.objects.filter(hackathon_id=hackathon_id)
    rows = (
        submissions.exclude(project__category="")
        .values("project__category")
        .annotate(total=Count("id"))
        .order_by("project__category")
    )

    return {
        "total_submissions": submissions.count(),
        "total_participants": HackathonRegistration.objects.filter(hackathon_id=hackathon_id).count(),
        "category_breakdown": {row["project__category"]: row["total"] for row in rows},
    }
