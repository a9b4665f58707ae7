# apps/common/utils.py
from django.conf import settings
from django.core.exceptions import ValidationError as DjangoValidationError
from django.http import JsonResponse
from rest_framework.views import exception_handler
from rest_framework.response import Response
from rest_framework import status as http_status
import logging

from apps.interviews.exceptions import InterviewWorkflowError

logger = logging.getLogger(__name__)


def error_body(status_code, message, details=None, code=None):
    body = {
        'error': True,
        'status_code': status_code,
        'message': message,
    }
    if code:
        body['code'] = code
    if details is not None:
        body['details'] = details
    return body


def _django_validation_details(exc):
    if hasattr(exc, 'error_dict'):
        return exc.message_dict
    return {'non_field_errors': exc.messages}


def _split_drf_data(status_code, data):
    """Turn DRF's default ``response.data`` into ``(message, details)``."""
    if isinstance(data, list):
        return 'Multiple errors occurred', data
    if not isinstance(data, dict):
        return str(data), None
    if 'detail' in data:
        rest = {key: value for key, value in data.items() if key != 'detail'}
        return str(data['detail']), rest or None
    return ('Validation error' if status_code == 400 else 'Request failed'), data


def custom_exception_handler(exc, context):
    """
    DRF exception handler.

    Workflow errors, Django model validation errors and DRF's own
    exceptions all answer with ``{error, status_code, message, details}``;
    workflow errors add a machine readable ``code``. Anything else is a 500.
    """
    if isinstance(exc, InterviewWorkflowError):
        logger.info(
            f"[WORKFLOW_ERROR] code={exc.default_code} status={exc.status_code} message={exc.message}"
        )
        return Response(
            error_body(exc.status_code, exc.message, exc.details, code=exc.default_code),
            status=exc.status_code,
        )

    if isinstance(exc, DjangoValidationError):
        return Response(
            error_body(400, 'Validation error', _django_validation_details(exc)),
            status=http_status.HTTP_400_BAD_REQUEST,
        )

    response = exception_handler(exc, context)
    if response is not None:
        message, details = _split_drf_data(response.status_code, response.data)
        response.data = error_body(response.status_code, message, details)
        return response

    view = context.get('view')
    logger.exception(f"[UNHANDLED_ERROR] view={view.__class__.__name__ if view else 'unknown'} error={exc}")

    body = error_body(500, 'An internal server error occurred. Please contact support.')
    if settings.DEBUG:
        body['message'] = 'An internal server error occurred.'
        body['debug'] = {
            'exception_type': exc.__class__.__name__,
            'exception_message': str(exc),
            'view': str(view),
        }
    return Response(body, status=http_status.HTTP_500_INTERNAL_SERVER_ERROR)


def custom_404(request, exception=None):
    return JsonResponse(error_body(404, 'The requested resource was not found.'), status=404)


def custom_500(request):
    return JsonResponse(error_body(500, 'An unexpected error occurred on the server.'), status=500)
