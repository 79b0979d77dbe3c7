from django.contrib import admin
from .models import ActivityLog


@admin.register(ActivityLog)
class ActivityLogAdmin(admin.ModelAdmin):
    list_display = ('verb', 'actor', 'hackathon', 'object_id', 'timestamp')
    list_filter = ('verb', 'timestamp')
    search_fields = ('actor__username', 'verb', 'object_id')
    readonly_fields = ('actor', 'verb', 'content_type', 'object_id', 'hackathon', 'metadata', 'timestamp')
