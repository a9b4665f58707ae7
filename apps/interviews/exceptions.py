# apps/interviews/exceptions.py
"""
Domain errors raised by the interview workflow.

Each carries the HTTP status the API layer answers with; see
apps.common.utils.custom_exception_handler.
"""


class InterviewWorkflowError(Exception):
    status_code = 400
    default_code = 'workflow_error'

    def __init__(self, message='', details=None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class NotFound(InterviewWorkflowError):
    status_code = 404
    default_code = 'not_found'


class PermissionDenied(InterviewWorkflowError):
    status_code = 403
    default_code = 'permission_denied'


class InvalidStateTransition(InterviewWorkflowError):
    """The interview is not in a state that allows the attempted action."""

    status_code = 409
    default_code = 'invalid_state_transition'

    def __init__(self, current_state, attempted, reason=''):
        self.current_state = current_state
        self.attempted = attempted
        self.reason = reason
        message = f"Cannot {attempted} interview in status '{current_state.get('overall_status')}'"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message, {'current_state': current_state, 'attempted': attempted})


class DuplicateActiveInterview(InterviewWorkflowError):
    status_code = 409
    default_code = 'duplicate_active_interview'

    def __init__(self, application_id):
        self.application_id = application_id
        super().__init__(
            f"Application {application_id} already has an active interview",
            {'application_id': application_id},
        )
