# hackathons/views/teams.py - Team formation API views

from django.conf import settings
from rest_framework import status
from rest_framework.permissions import IsAuthenticated, IsAuthenticatedOrReadOnly
from rest_framework.response import Response
from rest_framework.views import APIView

from hackathons.services import teams
from hackathons.team_serializers import (
    TeamCreateSerializer,
    TeamDetailSerializer,
    TeamSerializer,
    TeamUpdateSerializer,
)
from .generics import page_response, parse_bool, parse_pagination


class HackathonTeamListCreateView(APIView):
    """
    GET  /api/hackathons/<ref>/teams/?search=&is_open=&limit=&offset=
    POST /api/hackathons/<ref>/teams/

    The creator becomes the team leader.
    """
    permission_classes = [IsAuthenticatedOrReadOnly]

    def get(self, request, hackathon_ref):
        limit, offset = parse_pagination(request, settings.HACKATHON_TEAMS_PAGE_SIZE)
        page = teams.list_teams(
            hackathon_ref,
            limit,
            offset,
            search=(request.query_params.get("search") or "").strip() or None,
            is_open=parse_bool(request.query_params.get("is_open"), "is_open"),
        )
        return Response(page_response(page, TeamSerializer))

    def post(self, request, hackathon_ref):
        serializer = TeamCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        team = teams.create_team(hackathon_ref, request.user, **serializer.validated_data)
        return Response(
            TeamDetailSerializer(team, context={"viewer": request.user}).data,
            status=status.HTTP_201_CREATED,
        )


class MyTeamView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, hackathon_ref):
        team, role = teams.get_my_team(hackathon_ref, request.user)
        return Response({
            "team": TeamDetailSerializer(team, context={"viewer": request.user}).data if team else None,
            "role": role,
        })


class TeamDetailView(APIView):
    """
    GET          /api/hackathons/teams/<id>/
    PUT / PATCH  /api/hackathons/teams/<id>/   (leader, partial)
    DELETE       /api/hackathons/teams/<id>/   (leader)
    """
    permission_classes = [IsAuthenticatedOrReadOnly]

    def get(self, request, team_id):
        team = teams.get_team(team_id)
        return Response(TeamDetailSerializer(team, context={"viewer": request.user}).data)

    def patch(self, request, team_id):
        serializer = TeamUpdateSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)

        team = teams.update_team(team_id, request.user, serializer.validated_data)
        return Response(TeamDetailSerializer(team, context={"viewer": request.user}).data)

    # Both verbs only touch the fields that were sent
    put = patch

    def delete(self, request, team_id):
        teams.delete_team(team_id, request.user)
        return Response(status=status.HTTP_204_NO_CONTENT)


class LeaveTeamView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request, team_id):
        teams.leave_team(team_id, request.user)
        return Response({"left": True})


class KickMemberView(APIView):
    permission_classes = [IsAuthenticated]

    def delete(self, request, team_id, member_id):
        teams.kick_member(team_id, request.user, member_id)
        return Response(status=status.HTTP_204_NO_CONTENT)
