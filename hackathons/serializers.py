# hackathons/serializers.py

from rest_framework import serializers

from projects.serializers import ProjectSummarySerializer
from users.serializers import UserSummarySerializer
from .models import HackathonRegistration, HackathonSubmission
from .sanitizers import sanitize_name, sanitize_text
from .services.submissions import SORT_NEWEST, SORT_OPTIONS


# -----------------------------------------
# REGISTRATIONS
# -----------------------------------------
class RegisterSerializer(serializers.Serializer):
    team_name = serializers.CharField(max_length=100, required=False, allow_null=True, allow_blank=True)

    def validate_team_name(self, value):
        return sanitize_name(value) or None


class RegistrationSerializer(serializers.ModelSerializer):
    hackathon_id = serializers.UUIDField(read_only=True)
    user_id = serializers.IntegerField(read_only=True)

    class Meta:
        model = HackathonRegistration
        fields = ["id", "hackathon_id", "user_id", "team_name", "registered_at"]
        read_only_fields = fields


class ParticipantSerializer(serializers.ModelSerializer):
    user_id = serializers.IntegerField(source="user.id", read_only=True)
    username = serializers.CharField(source="user.username", read_only=True)
    avatar = serializers.CharField(source="user.avatar", read_only=True)

    class Meta:
        model = HackathonRegistration
        fields = ["user_id", "username", "avatar", "team_name", "registered_at"]
        read_only_fields = fields


# -----------------------------------------
# SUBMISSIONS
# -----------------------------------------
class SubmissionSerializer(serializers.ModelSerializer):
    """
    Expects a queryset annotated with ``vote_count``/``has_voted``
    (see services.submissions).
    """
    hackathon_id = serializers.UUIDField(read_only=True)
    project = ProjectSummarySerializer(read_only=True)
    user = UserSummarySerializer(read_only=True)
    vote_count = serializers.SerializerMethodField()
    has_voted = serializers.SerializerMethodField()

    class Meta:
        model = HackathonSubmission
        fields = [
            "id", "hackathon_id", "project", "user",
            "pitch_video_url", "pitch_deck_url", "notes", "status",
            "judge_score", "score_breakdown", "judge_notes", "scored_at",
            "vote_count", "has_voted", "submitted_at", "updated_at",
        ]
        read_only_fields = fields

    def get_vote_count(self, obj):
        count = getattr(obj, "vote_count", None)
        if count is None:
            count = obj.votes.count()
        return count

    def get_has_voted(self, obj):
        return bool(getattr(obj, "has_voted", False))


def _clean_url(value):
    return (value or "").strip() or None


class SubmissionCreateSerializer(serializers.Serializer):
    hackathon_id = serializers.CharField(help_text="Hackathon id or slug")
    project_id = serializers.IntegerField()
    pitch_video_url = serializers.URLField(max_length=1024, required=False, allow_null=True, allow_blank=True)
    pitch_deck_url = serializers.URLField(max_length=1024, required=False, allow_null=True, allow_blank=True)
    notes = serializers.CharField(required=False, allow_null=True, allow_blank=True)

    def validate_pitch_video_url(self, value):
        return _clean_url(value)

    def validate_pitch_deck_url(self, value):
        return _clean_url(value)

    def validate_notes(self, value):
        return sanitize_text(value, max_length=5000) or None


class SubmissionUpdateSerializer(SubmissionCreateSerializer):
    """Used with ``partial=True``; hackathon and project are fixed."""
    hackathon_id = None
    project_id = None


class SubmissionScoreSerializer(serializers.Serializer):
    BREAKDOWN_KEYS = ("innovation", "execution", "impact", "presentation")

    score = serializers.IntegerField(min_value=0, max_value=100)
    score_breakdown = serializers.DictField(
        child=serializers.IntegerField(min_value=0, max_value=100),
        required=False,
    )
    judge_notes = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    status = serializers.ChoiceField(
        choices=HackathonSubmission.JUDGED_STATUSES,
        required=False,
        default=HackathonSubmission.STATUS_APPROVED,
    )

    def validate_score_breakdown(self, value):
        unknown = set(value) - set(self.BREAKDOWN_KEYS)
        if unknown:
            raise serializers.ValidationError(
                f"Unknown criteria: {', '.join(sorted(unknown))}. "
                f"Allowed: {', '.join(self.BREAKDOWN_KEYS)}"
            )
        return value

    def validate_judge_notes(self, value):
        return sanitize_text(value, max_length=5000) or None


class SubmissionQuerySerializer(serializers.Serializer):
    """Query-string filters for submission listings."""
    user_id = serializers.IntegerField(required=False)
    status = serializers.ChoiceField(choices=HackathonSubmission.STATUS_CHOICES, required=False)
    search = serializers.CharField(required=False, allow_blank=True)
    sort_by = serializers.ChoiceField(choices=SORT_OPTIONS, required=False, default=SORT_NEWEST)
