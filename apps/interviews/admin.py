# apps/interviews/admin.py
"""
Django admin configuration for Interviews.

Read-mostly: state changes go through InterviewService so that the
overall status and notifications stay consistent.
"""
from django.contrib import admin
from .models import Interview


@admin.register(Interview)
class InterviewAdmin(admin.ModelAdmin):
    list_display = [
        'title',
        'candidate',
        'company',
        'scheduled_date',
        'overall_status',
        'admin_status',
        'candidate_response',
        'feedback_status',
        'created_at',
    ]
    list_filter = [
        'overall_status',
        'admin_status',
        'feedback_status',
        'mode',
        'created_at',
    ]
    search_fields = [
        'title',
        'candidate__email',
        'company__name',
    ]
    readonly_fields = [
        'id',
        'overall_status',
        'admin_status',
        'admin_approved_by',
        'admin_approved_at',
        'candidate_response',
        'candidate_response_at',
        'session_outcome',
        'outcome_set_by',
        'outcome_set_at',
        'feedback_status',
        'feedback_submitted_at',
        'feedback_approved_by',
        'feedback_approved_at',
        'candidate_feedback_at',
        'reminder_sent_at',
        'created_at',
        'updated_at',
    ]
    raw_id_fields = ['candidate', 'company', 'job', 'application', 'created_by']
    ordering = ['-created_at']
