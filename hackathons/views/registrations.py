# hackathons/views/registrations.py

from django.conf import settings
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from hackathons.serializers import ParticipantSerializer, RegisterSerializer, RegistrationSerializer
from hackathons.services import registrations
from .generics import page_response, parse_pagination


class RegisterHackathonView(APIView):
    """
    POST /api/hackathons/<ref>/register/
    Body: {"team_name": "optional hint"}
    """
    permission_classes = [IsAuthenticated]

    def post(self, request, hackathon_ref):
        serializer = RegisterSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        registration = registrations.register(
            hackathon_ref,
            request.user,
            team_name=serializer.validated_data.get("team_name"),
        )
        return Response(RegistrationSerializer(registration).data, status=status.HTTP_201_CREATED)


class MyRegistrationView(APIView):
    """GET /api/hackathons/<ref>/registration/ - never 404s for "not registered"."""
    permission_classes = [IsAuthenticated]

    def get(self, request, hackathon_ref):
        registration = registrations.get_registration(hackathon_ref, request.user)
        return Response({
            "registered": registration is not None,
            "registration": RegistrationSerializer(registration).data if registration else None,
        })


class ParticipantListView(APIView):
    permission_classes = [AllowAny]

    def get(self, request, hackathon_ref):
        limit, offset = parse_pagination(request, settings.HACKATHON_PARTICIPANTS_PAGE_SIZE)
        page = registrations.list_participants(hackathon_ref, limit, offset)
        return Response(page_response(page, ParticipantSerializer))
