from rest_framework import serializers
from .models import Project

class ProjectSerializer(serializers.ModelSerializer):
    author_name = serializers.CharField(source='author.username', read_only=True)

    class Meta:
        model = Project
        fields = [
            'id',
            'author',
            'author_name',
            'title',
            'description',
            'category',
            'image_url',
            'votes',
            'created_at',
            'updated_at'
        ]
        read_only_fields = ['author', 'votes', 'created_at', 'updated_at']

    def create(self, validated_data):
        # Auto-assign author from request context
        validated_data['author'] = self.context['request'].user
        return super().create(validated_data)


class ProjectSummarySerializer(serializers.ModelSerializer):
    class Meta:
        model = Project
        fields = ['id', 'title', 'description', 'category', 'image_url', 'votes']
        read_only_fields = fields
