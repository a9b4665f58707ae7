# apps/interviews/directory.py
"""
Read-through lookups of the records an interview refers to.

Every helper returns the model instance or raises NotFound.
"""
from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError

from apps.accounts.models import Company
from apps.jobs.models import Application, Job

from .exceptions import NotFound

User = get_user_model()


def _get(queryset, pk, label):
    if pk in (None, ''):
        raise NotFound(f"{label} not found")
    try:
        obj = queryset.filter(pk=pk).first()
    except (ValueError, TypeError, ValidationError):
        obj = None
    if obj is None:
        raise NotFound(f"{label} {pk} not found")
    return obj


def find_user(user_id, role=None):
    queryset = User.objects.filter(is_active=True)
    if role:
        queryset = queryset.filter(role=role)
    return _get(queryset, user_id, role.capitalize() if role else 'User')


def find_company(company_id):
    return _get(Company.objects.select_related('owner'), company_id, 'Company')


def find_job(job_id):
    return _get(Job.objects.select_related('company'), job_id, 'Job')


def find_application(application_id):
    return _get(Application.objects.select_related('job', 'candidate'), application_id, 'Application')
