from django.contrib import admin
from .models import (
    Hackathon, HackathonRegistration, HackathonTeam, TeamMembership,
    TeamInvite, HackathonSubmission, SubmissionVote,
)


@admin.register(Hackathon)
class HackathonAdmin(admin.ModelAdmin):
    list_display = ('title', 'slug', 'status', 'start_date', 'end_date')
    list_filter = ('status', 'start_date')
    search_fields = ('title', 'slug')
    prepopulated_fields = {'slug': ('title',)}


@admin.register(HackathonRegistration)
class HackathonRegistrationAdmin(admin.ModelAdmin):
    list_display = ('user', 'hackathon', 'team_name', 'registered_at')
    list_filter = ('hackathon',)
    search_fields = ('user__username', 'hackathon__title', 'team_name')


class TeamMembershipInline(admin.TabularInline):
    model = TeamMembership
    extra = 0
    fields = ('user', 'role', 'joined_at')
    readonly_fields = ('joined_at',)


@admin.register(HackathonTeam)
class HackathonTeamAdmin(admin.ModelAdmin):
    list_display = ('name', 'hackathon', 'leader', 'max_members', 'is_open', 'created_at')
    list_filter = ('is_open', 'hackathon')
    search_fields = ('name', 'leader__username', 'hackathon__title')
    inlines = [TeamMembershipInline]


@admin.register(TeamInvite)
class TeamInviteAdmin(admin.ModelAdmin):
    list_display = ('team', 'inviter', 'invitee', 'status', 'created_at', 'expires_at')
    list_filter = ('status',)
    search_fields = ('team__name', 'inviter__username', 'invitee__username')


@admin.register(HackathonSubmission)
class HackathonSubmissionAdmin(admin.ModelAdmin):
    list_display = ('project', 'hackathon', 'user', 'status', 'judge_score', 'submitted_at')
    list_filter = ('status', 'hackathon')
    search_fields = ('project__title', 'user__username', 'notes')


@admin.register(SubmissionVote)
class SubmissionVoteAdmin(admin.ModelAdmin):
    list_display = ('submission', 'user', 'created_at')
    search_fields = ('user__username', 'submission__project__title')
