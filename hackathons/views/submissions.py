# hackathons/views/submissions.py

from django.conf import settings
from rest_framework import status
from rest_framework.permissions import IsAuthenticated, IsAuthenticatedOrReadOnly
from rest_framework.response import Response
from rest_framework.views import APIView

from hackathons.serializers import (
    SubmissionCreateSerializer,
    SubmissionQuerySerializer,
    SubmissionScoreSerializer,
    SubmissionSerializer,
    SubmissionUpdateSerializer,
)
from hackathons.services import submissions
from .generics import page_response, parse_pagination


class HackathonSubmissionListView(APIView):
    """
    GET /api/hackathons/<ref>/submissions/?user_id=&status=&search=&sort_by=newest|votes|score
    """
    permission_classes = [IsAuthenticatedOrReadOnly]

    def get(self, request, hackathon_ref):
        limit, offset = parse_pagination(request, settings.HACKATHON_SUBMISSIONS_PAGE_SIZE)
        filters = SubmissionQuerySerializer(data=request.query_params)
        filters.is_valid(raise_exception=True)

        page = submissions.list_submissions(
            hackathon_ref,
            limit,
            offset,
            viewer=request.user,
            user_id=filters.validated_data.get("user_id"),
            status=filters.validated_data.get("status"),
            search=(filters.validated_data.get("search") or "").strip() or None,
            sort_by=filters.validated_data["sort_by"],
        )
        return Response(page_response(page, SubmissionSerializer))


class MySubmissionListView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, hackathon_ref):
        limit, offset = parse_pagination(request, settings.HACKATHON_SUBMISSIONS_PAGE_SIZE)
        page = submissions.list_submissions(
            hackathon_ref,
            limit,
            offset,
            viewer=request.user,
            user_id=request.user.id,
        )
        return Response(page_response(page, SubmissionSerializer))


class SubmissionCreateView(APIView):
    """
    POST /api/hackathons/submissions/
    Body: {"hackathon_id": "<id or slug>", "project_id": 1, "pitch_video_url": "...", ...}
    """
    permission_classes = [IsAuthenticated]

    def post(self, request):
        serializer = SubmissionCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        submission = submissions.create_submission(
            data["hackathon_id"],
            data["project_id"],
            request.user,
            pitch_video_url=data.get("pitch_video_url"),
            pitch_deck_url=data.get("pitch_deck_url"),
            notes=data.get("notes"),
        )
        return Response(SubmissionSerializer(submission).data, status=status.HTTP_201_CREATED)


class SubmissionDetailView(APIView):
    permission_classes = [IsAuthenticatedOrReadOnly]

    def get(self, request, submission_id):
        submission = submissions.get_submission(submission_id, viewer=request.user)
        return Response(SubmissionSerializer(submission).data)

    def patch(self, request, submission_id):
        serializer = SubmissionUpdateSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)

        submission = submissions.update_submission(submission_id, request.user, serializer.validated_data)
        return Response(SubmissionSerializer(submission).data)

    put = patch

    def delete(self, request, submission_id):
        submissions.delete_submission(submission_id, request.user)
        return Response(status=status.HTTP_204_NO_CONTENT)


class SubmissionVoteView(APIView):
    """POST toggles the caller's vote. Returns {"vote_count", "has_voted"}."""
    permission_classes = [IsAuthenticated]
    throttle_scope = "submission-vote"

    def post(self, request, submission_id):
        return Response(submissions.vote_submission(submission_id, request.user))


class SubmissionScoreView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request, submission_id):
        serializer = SubmissionScoreSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        submission = submissions.score_submission(
            submission_id,
            request.user,
            data["score"],
            score_breakdown=data.get("score_breakdown"),
            judge_notes=data.get("judge_notes"),
            status=data["status"],
        )
        return Response(SubmissionSerializer(submission).data)
