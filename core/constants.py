# core/constants.py

# --- Activity Verbs (Standard Registry) ---

# Registration
ACTIVITY_HACKATHON_REGISTERED = "hackathon.registered"

# Teams
ACTIVITY_TEAM_CREATED = "team.created"
ACTIVITY_TEAM_UPDATED = "team.updated"
ACTIVITY_TEAM_DELETED = "team.deleted"
ACTIVITY_TEAM_JOINED = "team.joined"
ACTIVITY_TEAM_LEFT = "team.left"
ACTIVITY_TEAM_MEMBER_REMOVED = "team.member_removed"

# Invitations
ACTIVITY_INVITE_SENT = "invite.sent"
ACTIVITY_INVITE_ACCEPTED = "invite.accepted"
ACTIVITY_INVITE_REJECTED = "invite.rejected"
ACTIVITY_INVITE_CANCELED = "invite.canceled"

# Submissions
ACTIVITY_SUBMISSION_CREATED = "submission.created"
ACTIVITY_SUBMISSION_DELETED = "submission.deleted"
ACTIVITY_SUBMISSION_SCORED = "submission.scored"
