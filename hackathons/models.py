# hackathons/models.py
import uuid
from datetime import timedelta

from django.conf import settings
from django.db import models
from django.db.models import Q
from django.utils import timezone


def default_invite_expiry():
    return timezone.now() + timedelta(days=settings.HACKATHON_INVITE_TTL_DAYS)


class Hackathon(models.Model):
    """
    Canonical hackathon record. The id never changes once created; status is
    driven by schedule/admin action and only read by the team core.
    """
    STATUS_DRAFT = "draft"
    STATUS_UPCOMING = "upcoming"
    STATUS_ACTIVE = "active"
    STATUS_JUDGING = "judging"
    STATUS_COMPLETED = "completed"
    STATUS_CANCELLED = "cancelled"

    STATUS_CHOICES = [
        (STATUS_DRAFT, "Draft"),
        (STATUS_UPCOMING, "Upcoming"),
        (STATUS_ACTIVE, "Active"),
        (STATUS_JUDGING, "Judging"),
        (STATUS_COMPLETED, "Completed"),
        (STATUS_CANCELLED, "Cancelled"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    slug = models.SlugField(max_length=120, unique=True)
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True, default="")
    status = models.CharField(max_length=32, choices=STATUS_CHOICES, default=STATUS_UPCOMING)
    start_date = models.DateTimeField(blank=True, null=True)
    end_date = models.DateTimeField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        indexes = [
            models.Index(fields=["status"], name="hackathon_status_idx"),
        ]

    def __str__(self):
        return self.title


class HackathonRegistration(models.Model):
    """
    A user's enrollment in a hackathon. Written once, never mutated.
    """
    hackathon = models.ForeignKey(Hackathon, on_delete=models.CASCADE, related_name="registrations")
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="hackathon_registrations",
    )
    team_name = models.CharField(max_length=100, blank=True, null=True, help_text="Free-form team name hint")
    registered_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["hackathon", "user"], name="uniq_registration_per_user"),
        ]
        indexes = [
            models.Index(fields=["hackathon", "-registered_at"], name="reg_hackathon_registered_idx"),
        ]

    def __str__(self):
        return f"{self.user} @ {self.hackathon}"


class HackathonTeam(models.Model):
    """
    Participant team inside a hackathon.

    - name is unique per hackathon
    - leader always holds the single leader membership
    - live member count never exceeds max_members
    """
    hackathon = models.ForeignKey(Hackathon, on_delete=models.CASCADE, related_name="teams")
    name = models.CharField(max_length=100)
    description = models.TextField(blank=True, null=True)
    avatar_url = models.CharField(max_length=1024, blank=True, null=True)
    leader = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="led_teams",
    )
    max_members = models.PositiveSmallIntegerField(default=5, help_text="Maximum team members, leader included")

    # Informational only: joining always goes through an invite
    is_open = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["hackathon", "name"], name="uniq_team_name_per_hackathon"),
        ]
        indexes = [
            models.Index(fields=["hackathon", "-created_at"], name="team_hackathon_created_idx"),
        ]

    def __str__(self):
        return f"{self.name} ({self.hackathon.title})"

    @property
    def member_count(self):
        # Annotated querysets provide the count up front
        annotated = getattr(self, "live_member_count", None)
        if annotated is not None:
            return annotated
        return self.memberships.count()

    @property
    def is_full(self):
        return self.member_count >= self.max_members


class TeamMembership(models.Model):
    """
    Roster row. ``hackathon`` is copied from the team so the database can
    enforce one team per user per hackathon.
    """
    ROLE_LEADER = "leader"
    ROLE_MEMBER = "member"

    ROLE_CHOICES = [
        (ROLE_LEADER, "Team Leader"),
        (ROLE_MEMBER, "Member"),
    ]

    team = models.ForeignKey(HackathonTeam, on_delete=models.CASCADE, related_name="memberships")
    hackathon = models.ForeignKey(Hackathon, on_delete=models.CASCADE, related_name="team_memberships")
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="team_memberships",
    )
    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default=ROLE_MEMBER)
    joined_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["hackathon", "user"], name="uniq_team_per_user_per_hackathon"),
            models.UniqueConstraint(
                fields=["team"],
                condition=Q(role="leader"),
                name="uniq_leader_per_team",
            ),
        ]
        indexes = [
            models.Index(fields=["team", "joined_at"], name="membership_team_joined_idx"),
        ]

    def save(self, *args, **kwargs):
        if self.hackathon_id is None and self.team_id is not None:
            self.hackathon_id = self.team.hackathon_id
        super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.user} in {self.team.name}"


class TeamInvite(models.Model):
    """
    Invitation for one user to join one team.

    pending -> accepted | rejected | expired; cancel deletes a pending row.
    """
    STATUS_PENDING = "pending"
    STATUS_ACCEPTED = "accepted"
    STATUS_REJECTED = "rejected"
    STATUS_EXPIRED = "expired"

    STATUS_CHOICES = [
        (STATUS_PENDING, "Pending"),
        (STATUS_ACCEPTED, "Accepted"),
        (STATUS_REJECTED, "Rejected"),
        (STATUS_EXPIRED, "Expired"),
    ]

    team = models.ForeignKey(HackathonTeam, on_delete=models.CASCADE, related_name="invites")
    inviter = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="sent_team_invites",
    )
    invitee = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="team_invites",
    )
    message = models.CharField(max_length=200, blank=True, null=True)
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=STATUS_PENDING)
    created_at = models.DateTimeField(auto_now_add=True)
    expires_at = models.DateTimeField(default=default_invite_expiry)
    responded_at = models.DateTimeField(blank=True, null=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["team", "invitee"],
                condition=Q(status="pending"),
                name="uniq_pending_invite_per_invitee",
            ),
        ]
        indexes = [
            models.Index(fields=["invitee", "status", "-created_at"], name="invite_invitee_status_idx"),
        ]

    def __str__(self):
        return f"{self.inviter} -> {self.invitee} ({self.team.name}, {self.status})"

    def is_past_due(self, now=None):
        return (now or timezone.now()) > self.expires_at


class HackathonSubmission(models.Model):
    STATUS_DRAFT = "draft"
    STATUS_SUBMITTED = "submitted"
    STATUS_APPROVED = "approved"
    STATUS_REJECTED = "rejected"
    STATUS_FINALIST = "finalist"
    STATUS_WINNER = "winner"

    STATUS_CHOICES = [
        (STATUS_DRAFT, "Draft"),
        (STATUS_SUBMITTED, "Submitted"),
        (STATUS_APPROVED, "Approved"),
        (STATUS_REJECTED, "Rejected"),
        (STATUS_FINALIST, "Finalist"),
        (STATUS_WINNER, "Winner"),
    ]

    # Outcomes a judge may set while scoring
    JUDGED_STATUSES = (STATUS_APPROVED, STATUS_REJECTED, STATUS_FINALIST, STATUS_WINNER)

    hackathon = models.ForeignKey(Hackathon, on_delete=models.CASCADE, related_name="submissions")
    project = models.ForeignKey(
        "projects.Project",
        on_delete=models.CASCADE,
        related_name="hackathon_submissions",
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="hackathon_submissions",
    )
    pitch_video_url = models.URLField(max_length=1024, blank=True, null=True)
    pitch_deck_url = models.URLField(max_length=1024, blank=True, null=True)
    notes = models.TextField(blank=True, null=True)
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=STATUS_SUBMITTED)

    # Judging
    judge_score = models.PositiveSmallIntegerField(blank=True, null=True)
    score_breakdown = models.JSONField(default=dict, blank=True)
    judge_notes = models.TextField(blank=True, null=True)
    scored_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="scored_submissions",
    )
    scored_at = models.DateTimeField(blank=True, null=True)

    submitted_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["hackathon", "project"], name="uniq_submission_per_project"),
        ]
        indexes = [
            models.Index(fields=["hackathon", "-submitted_at"], name="sub_hackathon_submitted_idx"),
        ]

    def __str__(self):
        return f"{self.project} @ {self.hackathon}"


class SubmissionVote(models.Model):
    """Community upvote. Row presence is the whole state."""
    submission = models.ForeignKey(HackathonSubmission, on_delete=models.CASCADE, related_name="votes")
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="submission_votes",
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["submission", "user"], name="uniq_vote_per_user"),
        ]
