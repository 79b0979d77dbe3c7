# hackathons/team_serializers.py

from django.conf import settings
from rest_framework import serializers

from users.serializers import UserSummarySerializer
from .models import HackathonTeam, TeamInvite, TeamMembership
from .services.teams import member_role
from .sanitizers import sanitize_name, sanitize_text


class TeamMemberSerializer(serializers.ModelSerializer):
    """Roster row joined with the member's display data"""
    user_id = serializers.IntegerField(source="user.id", read_only=True)
    username = serializers.CharField(source="user.username", read_only=True)
    avatar = serializers.CharField(source="user.avatar", read_only=True)

    class Meta:
        model = TeamMembership
        fields = ["user_id", "username", "avatar", "role", "joined_at"]
        read_only_fields = fields


class TeamSerializer(serializers.ModelSerializer):
    leader = UserSummarySerializer(read_only=True)
    member_count = serializers.IntegerField(read_only=True)
    is_full = serializers.BooleanField(read_only=True)
    hackathon_id = serializers.UUIDField(read_only=True)

    class Meta:
        model = HackathonTeam
        fields = [
            "id", "hackathon_id", "name", "description", "avatar_url",
            "leader", "max_members", "member_count", "is_full", "is_open",
            "created_at", "updated_at",
        ]
        read_only_fields = fields


class TeamDetailSerializer(TeamSerializer):
    """Team with its roster and the viewer's role (context["viewer"])."""
    members = TeamMemberSerializer(source="memberships", many=True, read_only=True)
    my_role = serializers.SerializerMethodField()

    class Meta(TeamSerializer.Meta):
        fields = TeamSerializer.Meta.fields + ["members", "my_role"]
        read_only_fields = fields

    def get_my_role(self, obj):
        return member_role(obj, self.context.get("viewer"))


def _max_members_field(**kwargs):
    return serializers.IntegerField(
        min_value=1,
        max_value=settings.HACKATHON_TEAM_MAX_MEMBERS_LIMIT,
        **kwargs,
    )


class TeamCreateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=100)
    description = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    avatar_url = serializers.CharField(max_length=1024, required=False, allow_null=True, allow_blank=True)
    max_members = _max_members_field(required=False)
    is_open = serializers.BooleanField(required=False, default=False)

    def validate_name(self, value):
        value = sanitize_name(value)
        if not value:
            raise serializers.ValidationError("Team name cannot be empty")
        return value

    def validate_description(self, value):
        return sanitize_text(value, max_length=2000) or None

    def validate_avatar_url(self, value):
        return (value or "").strip() or None


class TeamUpdateSerializer(TeamCreateSerializer):
    """
    Used with ``partial=True``: validated_data only holds what was sent, and
    an explicit null clears description/avatar_url.
    """
    is_open = serializers.BooleanField(required=False)


class TeamInviteCreateSerializer(serializers.Serializer):
    invitee_id = serializers.IntegerField()
    message = serializers.CharField(required=False, allow_null=True, allow_blank=True)

    def validate_message(self, value):
        return sanitize_text(value, max_length=200) or None


class TeamInviteSerializer(serializers.ModelSerializer):
    team_id = serializers.IntegerField(source="team.id", read_only=True)
    team_name = serializers.CharField(source="team.name", read_only=True)
    hackathon_id = serializers.UUIDField(source="team.hackathon_id", read_only=True)
    inviter = UserSummarySerializer(read_only=True)
    invitee = UserSummarySerializer(read_only=True)

    class Meta:
        model = TeamInvite
        fields = [
            "id", "team_id", "team_name", "hackathon_id", "inviter", "invitee",
            "message", "status", "created_at", "expires_at", "responded_at",
        ]
        read_only_fields = fields
