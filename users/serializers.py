from rest_framework import serializers
from .models import User


class UserSummarySerializer(serializers.ModelSerializer):
    """Display-only projection used when joining users into hackathon payloads."""

    class Meta:
        model = User
        fields = ['id', 'username', 'avatar']
        read_only_fields = fields
