# apps/interviews/urls.py
"""
URL configuration for interviews app.

Endpoints:
- /api/interviews/                               - List / create
- /api/interviews/{id}/                          - Detail
- /api/interviews/{id}/review/                   - Admin approval
- /api/interviews/{id}/respond/                  - Candidate response
- /api/interviews/{id}/outcome/                  - Completed / no-show / cancelled
- /api/interviews/{id}/feedback/                 - Company feedback
- /api/interviews/{id}/feedback/review/          - Feedback moderation
- /api/interviews/{id}/candidate-feedback/       - Candidate rating
"""
from django.urls import path
from . import api


app_name = 'interviews'

urlpatterns = [
    path('', api.InterviewListCreateAPI.as_view(), name='interview_list'),

    path('<uuid:id>/', api.InterviewDetailAPI.as_view(), name='interview_detail'),

    path('<uuid:id>/review/', api.InterviewReviewAPI.as_view(), name='interview_review'),

    path('<uuid:id>/respond/', api.InterviewRespondAPI.as_view(), name='interview_respond'),

    path('<uuid:id>/outcome/', api.InterviewOutcomeAPI.as_view(), name='interview_outcome'),

    # ========== FEEDBACK ==========
    path('<uuid:id>/feedback/', api.CompanyFeedbackAPI.as_view(), name='company_feedback'),

    path('<uuid:id>/feedback/review/', api.FeedbackReviewAPI.as_view(), name='feedback_review'),

    path('<uuid:id>/candidate-feedback/', api.CandidateFeedbackAPI.as_view(), name='candidate_feedback'),
]
