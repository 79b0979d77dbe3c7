from django.contrib import admin
from .models import Project


@admin.register(Project)
class ProjectAdmin(admin.ModelAdmin):
    list_display = ('title', 'author', 'category', 'votes', 'created_at')
    list_filter = ('category',)
    search_fields = ('title', 'description', 'author__username')
