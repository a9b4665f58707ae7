# apps/interviews/api.py
"""
Interview workflow API endpoints.

Endpoints:
1) POST /api/interviews/                          - Propose an interview (company member)
2) GET  /api/interviews/                          - List interviews visible to the user
3) GET  /api/interviews/{id}/                     - Interview details
4) POST /api/interviews/{id}/review/              - Approve/reject (admin)
5) POST /api/interviews/{id}/respond/             - Accept/decline (candidate)
6) POST /api/interviews/{id}/outcome/             - Completed/no-show/cancelled (admin or company)
7) POST /api/interviews/{id}/feedback/            - Company feedback (company member)
8) POST /api/interviews/{id}/feedback/review/     - Approve/reject feedback (admin)
9) POST /api/interviews/{id}/candidate-feedback/  - Candidate rating (candidate)

Status Flow:
- pending_approval → scheduled (admin approves) | rejected (admin rejects)
- scheduled → confirmed (candidate accepts) | cancelled (candidate declines or operator cancels)
- confirmed → completed | no_show | cancelled (operator)

Errors are rendered by apps.common.utils.custom_exception_handler:
404 not found, 403 not allowed, 409 invalid transition or duplicate.
"""
import logging
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework.permissions import IsAuthenticated
from django.core.exceptions import ValidationError
from drf_yasg.utils import swagger_auto_schema
from drf_yasg import openapi

from .models import Interview
from .permissions import IsAdmin, IsAdminOrCompanyMember, IsCandidate, IsCompanyMember
from .serializers import (
    CandidateFeedbackSerializer,
    CandidateResponseSerializer,
    CompanyFeedbackSerializer,
    InterviewCreateSerializer,
    InterviewListSerializer,
    InterviewSerializer,
    OutcomeSerializer,
    ReviewActionSerializer,
)
from .services import InterviewQueryService, InterviewService

logger = logging.getLogger(__name__)

TRANSITION_RESPONSES = {
    200: InterviewSerializer,
    400: "Validation error",
    403: "Permission denied",
    404: "Interview not found",
    409: "Invalid state transition",
}


def interview_response(request, interview, status_code=status.HTTP_200_OK):
    serializer = InterviewSerializer(interview, context={'request': request})
    return Response(serializer.data, status=status_code)


def default_company_id(user):
    if user.company_id is not None:
        return user.company_id
    owned = list(user.owned_companies.values_list('id', flat=True)[:2])
    if len(owned) == 1:
        return owned[0]
    raise ValidationError({'company_id': 'This field is required.'})


# ========== LIST / CREATE / DETAIL ==========


class InterviewListCreateAPI(APIView):
    """
    GET  /api/interviews/ - interviews visible to the current user
    POST /api/interviews/ - propose a new interview

    Candidates see their own interviews, company members their company's,
    admins all of them.
    """

    permission_classes = [IsAuthenticated]

    @swagger_auto_schema(
        tags=["Interviews"],
        operation_summary="List Interviews",
        operation_description="Dashboard listing, newest first.",
        manual_parameters=[
            openapi.Parameter('overall_status', openapi.IN_QUERY, type=openapi.TYPE_STRING,
                              enum=[value for value, _ in Interview.STATUS_CHOICES]),
            openapi.Parameter('admin_status', openapi.IN_QUERY, type=openapi.TYPE_STRING,
                              enum=[value for value, _ in Interview.ADMIN_STATUS_CHOICES]),
            openapi.Parameter('feedback_status', openapi.IN_QUERY, type=openapi.TYPE_STRING,
                              enum=[value for value, _ in Interview.FEEDBACK_STATUS_CHOICES]),
            openapi.Parameter('candidate_id', openapi.IN_QUERY, type=openapi.TYPE_INTEGER),
            openapi.Parameter('company_id', openapi.IN_QUERY, type=openapi.TYPE_INTEGER),
            openapi.Parameter('page', openapi.IN_QUERY, type=openapi.TYPE_INTEGER, default=1),
            openapi.Parameter('page_size', openapi.IN_QUERY, type=openapi.TYPE_INTEGER, default=20),
        ],
    )
    def get(self, request):
        params = request.query_params
        filters = {
            key: params.get(key)
            for key in InterviewQueryService.FILTER_FIELDS
            if params.get(key)
        }
        try:
            page = int(params.get('page', 1))
            page_size = int(params.get('page_size', InterviewQueryService.DEFAULT_PAGE_SIZE))
        except ValueError:
            raise ValidationError("page and page_size must be integers.")

        items, total = InterviewQueryService.for_actor(
            request.user, filters, page=page, page_size=page_size
        )
        return Response({
            'count': total,
            'page': max(1, page),
            'results': InterviewListSerializer(items, many=True).data,
        })

    @swagger_auto_schema(
        tags=["Interviews"],
        operation_summary="Create Interview",
        operation_description="Propose an interview. It waits for admin approval before the candidate sees it.",
        request_body=InterviewCreateSerializer,
        responses={201: InterviewSerializer, 400: "Validation error", 403: "Permission denied",
                   404: "Candidate, company, job or application not found",
                   409: "Application already has an active interview"},
    )
    def post(self, request):
        if not IsCompanyMember().has_permission(request, self):
            return Response(
                {"error": True, "status_code": 403, "message": IsCompanyMember.message},
                status=status.HTTP_403_FORBIDDEN,
            )

        serializer = InterviewCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)

        company_id = data.pop('company_id', None) or default_company_id(request.user)
        result = InterviewService.create_interview(
            request.user,
            candidate_id=data.pop('candidate_id'),
            company_id=company_id,
            title=data.pop('title'),
            scheduled_date=data.pop('scheduled_date'),
            mode=data.pop('mode'),
            job_id=data.pop('job_id', None),
            application_id=data.pop('application_id', None),
            **data,
        )
        return interview_response(request, result.interview, status.HTTP_201_CREATED)


class InterviewDetailAPI(APIView):
    """GET /api/interviews/{id}/"""

    permission_classes = [IsAuthenticated]

    @swagger_auto_schema(
        tags=["Interviews"],
        operation_summary="Get Interview",
        responses={200: InterviewSerializer, 403: "Permission denied", 404: "Interview not found"},
    )
    def get(self, request, id):
        interview = InterviewQueryService.get_for_actor(request.user, id)
        return interview_response(request, interview)


# ========== WORKFLOW ACTIONS ==========


class InterviewReviewAPI(APIView):
    """
    Approve or reject a pending interview.

    POST /api/interviews/{id}/review/

    Request Body:
    - action: approve | reject
    - comments: Optional comments shared with the company
    """

    permission_classes = [IsAuthenticated, IsAdmin]

    @swagger_auto_schema(
        tags=["Interviews - Admin"],
        operation_summary="Review Interview",
        request_body=ReviewActionSerializer,
        responses=TRANSITION_RESPONSES,
    )
    def post(self, request, id):
        serializer = ReviewActionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = InterviewService.admin_review(
            id,
            request.user,
            serializer.validated_data['action'],
            serializer.validated_data['comments'],
        )
        logger.info(f"[API] interview={id} review={serializer.validated_data['action']} by={request.user.pk}")
        return interview_response(request, result.interview)


class InterviewRespondAPI(APIView):
    """
    Accept or decline an approved interview.

    POST /api/interviews/{id}/respond/

    Request Body:
    - response: accepted | rejected
    - comments: Optional
    """

    permission_classes = [IsAuthenticated, IsCandidate]

    @swagger_auto_schema(
        tags=["Interviews"],
        operation_summary="Respond to Interview",
        request_body=CandidateResponseSerializer,
        responses=TRANSITION_RESPONSES,
    )
    def post(self, request, id):
        serializer = CandidateResponseSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = InterviewService.candidate_respond(
            id,
            request.user,
            serializer.validated_data['response'],
            serializer.validated_data['comments'],
        )
        return interview_response(request, result.interview)


class InterviewOutcomeAPI(APIView):
    """
    Record how the interview ended.

    POST /api/interviews/{id}/outcome/

    Request Body:
    - outcome: completed | no_show | cancelled
    - reason: Optional
    """

    permission_classes = [IsAuthenticated, IsAdminOrCompanyMember]

    @swagger_auto_schema(
        tags=["Interviews"],
        operation_summary="Record Interview Outcome",
        request_body=OutcomeSerializer,
        responses=TRANSITION_RESPONSES,
    )
    def post(self, request, id):
        serializer = OutcomeSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = InterviewService.record_outcome(
            id,
            request.user,
            serializer.validated_data['outcome'],
            serializer.validated_data['reason'],
        )
        return interview_response(request, result.interview)


class CompanyFeedbackAPI(APIView):
    """
    Submit the company's scores for a completed interview.

    POST /api/interviews/{id}/feedback/
    """

    permission_classes = [IsAuthenticated, IsCompanyMember]

    @swagger_auto_schema(
        tags=["Interviews - Feedback"],
        operation_summary="Submit Company Feedback",
        request_body=CompanyFeedbackSerializer,
        responses=TRANSITION_RESPONSES,
    )
    def post(self, request, id):
        serializer = CompanyFeedbackSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = InterviewService.submit_company_feedback(id, request.user, **serializer.validated_data)
        return interview_response(request, result.interview)


class FeedbackReviewAPI(APIView):
    """
    Approve or reject submitted company feedback.

    POST /api/interviews/{id}/feedback/review/
    """

    permission_classes = [IsAuthenticated, IsAdmin]

    @swagger_auto_schema(
        tags=["Interviews - Admin"],
        operation_summary="Review Company Feedback",
        request_body=ReviewActionSerializer,
        responses=TRANSITION_RESPONSES,
    )
    def post(self, request, id):
        serializer = ReviewActionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = InterviewService.review_feedback(
            id,
            request.user,
            serializer.validated_data['action'],
            serializer.validated_data['comments'],
        )
        return interview_response(request, result.interview)


class CandidateFeedbackAPI(APIView):
    """
    Rate the interview as a candidate. One submission per interview.

    POST /api/interviews/{id}/candidate-feedback/
    """

    permission_classes = [IsAuthenticated, IsCandidate]

    @swagger_auto_schema(
        tags=["Interviews - Feedback"],
        operation_summary="Submit Candidate Feedback",
        request_body=CandidateFeedbackSerializer,
        responses=TRANSITION_RESPONSES,
    )
    def post(self, request, id):
        serializer = CandidateFeedbackSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = InterviewService.submit_candidate_feedback(
            id,
            request.user,
            serializer.validated_data['rating'],
            serializer.validated_data['comments'],
        )
        return interview_response(request, result.interview)
