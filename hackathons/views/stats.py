from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from hackathons.services.submissions import get_hackathon_stats


class HackathonStatsView(APIView):
    """GET /api/hackathons/<ref>/stats/ - zeros for an unknown hackathon."""
    permission_classes = [AllowAny]

    def get(self, request, hackathon_ref):
        return Response(get_hackathon_stats(hackathon_ref))
