# hackathons/views/invites.py

from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from hackathons.services import invites
from hackathons.team_serializers import TeamInviteCreateSerializer, TeamInviteSerializer


class TeamInviteView(APIView):
    """
    POST /api/hackathons/teams/<id>/invite/   {"invitee_id": 12, "message": "..."}
    GET  /api/hackathons/teams/<id>/invite/   pending invites of the team
    """
    permission_classes = [IsAuthenticated]
    throttle_scope = "team-invite"

    def get_throttles(self):
        # Reading the team's outbox is not rate limited
        if self.request.method == "GET":
            return []
        return super().get_throttles()

    def get(self, request, team_id):
        pending = invites.get_team_invites(team_id, request.user)
        return Response(TeamInviteSerializer(pending, many=True).data)

    def post(self, request, team_id):
        serializer = TeamInviteCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        team_invite = invites.invite(
            team_id,
            request.user,
            serializer.validated_data["invitee_id"],
            message=serializer.validated_data.get("message"),
        )
        return Response(TeamInviteSerializer(team_invite).data, status=status.HTTP_201_CREATED)


class MyInvitesView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        pending = invites.get_my_invites(request.user)
        return Response(TeamInviteSerializer(pending, many=True).data)


class RespondInviteView(APIView):
    """POST /api/hackathons/teams/invites/<id>/accept/ or .../reject/"""
    permission_classes = [IsAuthenticated]

    def post(self, request, invite_id, action):
        team_invite = invites.respond(invite_id, request.user, action)
        return Response(TeamInviteSerializer(team_invite).data)


class CancelInviteView(APIView):
    """
    DELETE /api/hackathons/teams/invites/<id>/ (inviter only, pending only)

    Cancelling deletes the invite row, so a repeat cancel is 404 rather than 409.
    """
    permission_classes = [IsAuthenticated]

    def delete(self, request, invite_id):
        invites.cancel_invite(invite_id, request.user)
        return Response(status=status.HTTP_204_NO_CONTENT)
