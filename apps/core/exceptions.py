"""
Custom exception handlers for DRF.
"""
import logging
from rest_framework.views import exception_handler
from rest_framework.response import Response
from rest_framework import status
from rest_framework.exceptions import ValidationError

logger = logging.getLogger(__name__)


def custom_exception_handler(exc, context):
    """
    Custom exception handler that logs errors and returns consistent format.

    Handled API errors are returned as ``{"error": ..., "code": ...}``.
    Anything DRF does not handle (database or other server faults) becomes
    a logged 500 instead of leaking a traceback.
    """
    # Call DRF's default exception handler first
    response = exception_handler(exc, context)

    request = context.get('request')
    request_id = getattr(request, 'request_id', None) if request else None
    log_extra = {
        'exception': str(exc),
        'request_id': request_id,
        'path': request.path if request else None,
        'method': request.method if request else None,
    }

    # If DRF didn't handle it, return a generic 500 error
    if response is None:
        logger.error(
            f"API Exception: {exc.__class__.__name__}",
            extra=log_extra,
            exc_info=True
        )
        return Response(
            {
                'error': 'Internal server error',
                'code': 'INTERNAL_ERROR',
                'request_id': request_id,
            },
            status=status.HTTP_500_INTERNAL_SERVER_ERROR
        )

    logger.warning(
        f"API Exception: {exc.__class__.__name__}",
        extra=log_extra,
    )

    if isinstance(exc, ValidationError):
        response.data = {
            'error': 'Invalid request',
            'code': 'INVALID',
            'details': response.data,
        }
    elif isinstance(response.data, dict) and 'detail' in response.data:
        response.data = {
            'error': str(response.data['detail']),
            'code': str(getattr(exc, 'default_code', 'error')).upper(),
        }

    # Add request_id to all error responses
    if request_id and isinstance(response.data, dict):
        response.data['request_id'] = request_id

    return response
