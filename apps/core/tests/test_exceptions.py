"""
Tests for the DRF exception handler.
"""
from types import SimpleNamespace

from rest_framework import status
from rest_framework.exceptions import NotAuthenticated, PermissionDenied, ValidationError

from apps.core.exceptions import custom_exception_handler


def make_context(request_id=None):
    request = SimpleNamespace(path='/v1/auth/me', method='GET', request_id=request_id)
    return {'request': request, 'view': None}


class TestCustomExceptionHandler:
    """Test error body shape and status codes."""

    def test_permission_denied(self):
        response = custom_exception_handler(PermissionDenied(), make_context())

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.data['code'] == 'PERMISSION_DENIED'
        assert 'error' in response.data

    def test_not_authenticated(self):
        response = custom_exception_handler(NotAuthenticated(), make_context())

        assert response.data['code'] == 'NOT_AUTHENTICATED'

    def test_validation_error_keeps_field_details(self):
        exc = ValidationError({'user_ids': ['This list may not be empty.']})
        response = custom_exception_handler(exc, make_context())

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['code'] == 'INVALID'
        assert response.data['details']['user_ids'] == ['This list may not be empty.']

    def test_unhandled_exception_becomes_500(self):
        response = custom_exception_handler(RuntimeError('database down'), make_context('req-9'))

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.data == {
            'error': 'Internal server error',
            'code': 'INTERNAL_ERROR',
            'request_id': 'req-9',
        }

    def test_request_id_added(self):
        response = custom_exception_handler(PermissionDenied(), make_context('req-1'))

        assert response.data['request_id'] == 'req-1'
