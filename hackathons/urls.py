# hackathons/urls.py

from django.urls import path

from .views.invites import CancelInviteView, MyInvitesView, RespondInviteView, TeamInviteView
from .views.registrations import MyRegistrationView, ParticipantListView, RegisterHackathonView
from .views.stats import HackathonStatsView
from .views.submissions import (
    HackathonSubmissionListView,
    MySubmissionListView,
    SubmissionCreateView,
    SubmissionDetailView,
    SubmissionScoreView,
    SubmissionVoteView,
)
from .views.teams import (
    HackathonTeamListCreateView,
    KickMemberView,
    LeaveTeamView,
    MyTeamView,
    TeamDetailView,
)

urlpatterns = [
    # Invites (fixed prefixes first so they never read as a hackathon ref)
    path("teams/invites/my/", MyInvitesView.as_view(), name="hackathon-my-invites"),
    path("teams/invites/<int:invite_id>/<str:action>/", RespondInviteView.as_view(), name="hackathon-invite-respond"),
    path("teams/invites/<int:invite_id>/", CancelInviteView.as_view(), name="hackathon-invite-cancel"),

    # Teams
    path("teams/<int:team_id>/", TeamDetailView.as_view(), name="hackathon-team-detail"),
    path("teams/<int:team_id>/leave/", LeaveTeamView.as_view(), name="hackathon-team-leave"),
    path("teams/<int:team_id>/members/<int:member_id>/", KickMemberView.as_view(), name="hackathon-team-kick"),
    path("teams/<int:team_id>/invite/", TeamInviteView.as_view(), name="hackathon-team-invite"),

    # Submissions
    path("submissions/", SubmissionCreateView.as_view(), name="hackathon-submission-create"),
    path("submissions/<int:submission_id>/", SubmissionDetailView.as_view(), name="hackathon-submission-detail"),
    path("submissions/<int:submission_id>/vote/", SubmissionVoteView.as_view(), name="hackathon-submission-vote"),
    path("submissions/<int:submission_id>/score/", SubmissionScoreView.as_view(), name="hackathon-submission-score"),

    # Per hackathon (id or slug)
    path("<str:hackathon_ref>/register/", RegisterHackathonView.as_view(), name="hackathon-register"),
    path("<str:hackathon_ref>/registration/", MyRegistrationView.as_view(), name="hackathon-registration"),
    path("<str:hackathon_ref>/participants/", ParticipantListView.as_view(), name="hackathon-participants"),
    path("<str:hackathon_ref>/teams/", HackathonTeamListCreateView.as_view(), name="hackathon-teams"),
    path("<str:hackathon_ref>/my-team/", MyTeamView.as_view(), name="hackathon-my-team"),
    path("<str:hackathon_ref>/submissions/", HackathonSubmissionListView.as_view(), name="hackathon-submissions"),
    path("<str:hackathon_ref>/my-submissions/", MySubmissionListView.as_view(), name="hackathon-my-submissions"),
    path("<str:hackathon_ref>/stats/", HackathonStatsView.as_view(), name="hackathon-stats"),
]
